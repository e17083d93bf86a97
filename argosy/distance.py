"""
Typo suggestions for unknown options and subcommands.

levenshtein() is the classic dynamic-programming edit distance kept to a
single rolling row (sized by the shorter string). suggest() picks the closest
registered name, but only when it is close enough to be a plausible typo.
"""


def levenshtein(source, target, /):
    """
    number of single-character insertions, deletions and substitutions
    turning `source` into `target`.
    """
    if not isinstance(source, str) or not isinstance(target, str):
        raise TypeError("levenshtein() arguments must be strings")
    # the row follows the shorter string
    if len(target) > len(source):
        source, target = target, source
    if not target:
        return len(source)

    row = list(range(len(target) + 1))
    for i, left in enumerate(source, 1):
        diagonal, row[0] = row[0], i
        for j, right in enumerate(target, 1):
            diagonal, row[j] = row[j], min(
                row[j] + 1,
                row[j - 1] + 1,
                diagonal + (left != right),
            )
    return row[-1]


def suggest(input, candidates, /):
    """
    return the candidate closest to `input`, or None.

    a suggestion is made only when the best distance is at most
    max(len(input) // 2, 2); ties keep the first candidate in iteration order.
    """
    threshold = max(len(input) // 2, 2)
    best = None
    distance = threshold + 1
    for candidate in candidates:
        if (current := levenshtein(input, candidate)) < distance:
            best, distance = candidate, current
    return best


__all__ = (
    "levenshtein",
    "suggest",
)

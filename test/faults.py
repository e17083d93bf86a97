"""
Faults module tests (codes, trigger, rendering hooks).

Scope
- FaultCode.normalize() with and without a host mapping.
- trigger(): options merged into a copy; errors raised, warnings emitted.
- getdoc(): host documentation lookup and argument checks.
- __rich__ renderables for plain and fancy presentation.

Conventions
- Test method names follow CamelCase per project convention.
- Host hooks are installed on __main__ and removed after each test.
"""

from __future__ import annotations

import io
import sys
import unittest
import warnings
from unittest import TestCase

from rich.console import Console, Group
from rich.panel import Panel

from argosy import (
    FaultCode,
    CommandException,
    UnknownOptionError,
    RegistrationConflictError,
    DeprecatedArgumentWarning,
    trigger,
    getdoc,
)


class HostHookTestCase(TestCase):

    def install(self, name, value):
        main = sys.modules["__main__"]
        previous = getattr(main, name, None)
        setattr(main, name, value)

        def restore():
            if previous is None:
                delattr(main, name)
            else:
                setattr(main, name, previous)

        self.addCleanup(restore)


class TestFaultCode(HostHookTestCase):

    def testNumericByDefault(self):
        self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "11111")

    def testHostMapping(self):
        self.install("__codes__", {FaultCode.UNKNOWN_OPTION: "E-OPT"})
        self.assertEqual(FaultCode.UNKNOWN_OPTION.normalize(), "E-OPT")
        self.assertEqual(FaultCode.OUT_OF_RANGE.normalize(), "11124")

    def testCodesAreUnique(self):
        values = [code.value for code in FaultCode]
        self.assertEqual(len(values), len(set(values)))


class TestTrigger(TestCase):

    def testErrorIsRaisedAsMergedCopy(self):
        fault = UnknownOptionError("unknown option '--x'", title="unknown option")
        with self.assertRaises(UnknownOptionError) as context:
            trigger(fault, input="--x", title="unknown switch")
        self.assertIsNot(context.exception, fault)
        self.assertEqual(context.exception.options["input"], "--x")
        self.assertEqual(context.exception.options["title"], "unknown switch")
        self.assertNotIn("input", fault.options)
        self.assertEqual(str(context.exception), "unknown option '--x'")

    def testWarningIsEmitted(self):
        fault = DeprecatedArgumentWarning("option --old is deprecated", code=FaultCode.DEPRECATED_ARGUMENT)
        with warnings.catch_warnings(record=True) as caught:
            warnings.simplefilter("always")
            trigger(fault)
        self.assertEqual(len(caught), 1)
        self.assertIsInstance(caught[0].message, DeprecatedArgumentWarning)
        self.assertEqual(caught[0].message.code, FaultCode.DEPRECATED_ARGUMENT)

    def testRejectsNonFaults(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))

    def testOptionsAreReadOnly(self):
        fault = CommandException("boom", hint="retry")
        with self.assertRaises(TypeError):
            fault.options["hint"] = "other"

    def testRegistrationConflictIsValueError(self):
        self.assertTrue(issubclass(RegistrationConflictError, ValueError))
        self.assertTrue(issubclass(RegistrationConflictError, CommandException))


class TestGetdoc(HostHookTestCase):

    def testMissingDocs(self):
        self.assertIsNone(getdoc(FaultCode.UNKNOWN_OPTION))

    def testHostDocs(self):
        self.install("__docs__", {FaultCode.UNKNOWN_OPTION: "see the manual"})
        self.assertEqual(getdoc(FaultCode.UNKNOWN_OPTION), "see the manual")

    def testRejectsNonCodes(self):
        with self.assertRaises(TypeError):
            getdoc(11111)


class TestRendering(TestCase):

    def render(self, renderable):
        console = Console(width=100, color_system=None, record=True, file=io.StringIO())
        console.print(renderable)
        return console.export_text()

    def testPlainRendering(self):
        fault = UnknownOptionError(
            "unknown option '--outptu'",
            title="unknown option",
            code=FaultCode.UNKNOWN_OPTION,
            hint="did you mean '--output'?",
            prog="tool",
        )
        self.assertIsInstance(fault.__rich__(), Group)
        text = self.render(fault)
        self.assertIn("tool", text)
        self.assertIn("11111", text)
        self.assertIn("Unknown Option", text)
        self.assertIn("unknown option '--outptu'", text)
        self.assertIn("did you mean '--output'?", text)

    def testFancyRendering(self):
        fault = DeprecatedArgumentWarning("flag -q is deprecated", title="deprecated flag", fancy=True)
        self.assertIsInstance(fault.__rich__(), Panel)
        self.assertIn("flag -q is deprecated", self.render(fault))


if __name__ == "__main__":
    unittest.main()

"""
Faults and results behavioral tests.

Scope
- Validate Error values: validation, equality, copy.replace(), rich rendering.
- Validate ErrorCode helpers, getdoc() and the __main__ hooks they read.
- Validate ParseSuccess/ParseFailure and the ParseExit raised by unwrap().

Conventions
- Test method names follow CamelCase per project convention.
- __main__ hooks are patched with unittest.mock and never left behind.
"""

from __future__ import annotations

import copy
import io
import sys
import unittest
from unittest import TestCase, mock

from rich.console import Console

from verbum import (
    Error,
    ErrorCode,
    ParseError,
    ParseExit,
    ParseFailure,
    ParseResult,
    ParseSuccess,
    Switch,
    Verb,
    getdoc,
)


def render(renderable):
    console = Console(file=io.StringIO(), width=100, color_system=None)
    console.print(renderable)
    return console.file.getvalue()


class Target:
    verbose = Switch("v", "verbose")


class TestErrorCode(TestCase):
    """Code titles, host relabeling and documentation."""

    def testTitle(self):
        self.assertEqual(ErrorCode.DUPLICATE_OPTION.title, "duplicate option")
        self.assertEqual(ErrorCode.MISSING_REQUIRED_MULTI_VALUE.title, "missing required multi value")

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(ErrorCode.INVALID_VERB.normalize(), "21102")

    def testNormalizeUsesHostCodes(self):
        with mock.patch.object(sys.modules["__main__"], "__codes__", {ErrorCode.INVALID_VERB: "E-VERB"}, create=True):
            self.assertEqual(ErrorCode.INVALID_VERB.normalize(), "E-VERB")
            self.assertEqual(ErrorCode.NO_VERB_FOUND.normalize(), "21101")

    def testGetdoc(self):
        self.assertIsNone(getdoc(ErrorCode.TOO_MANY_VALUES))
        with mock.patch.object(sys.modules["__main__"], "__docs__", {ErrorCode.TOO_MANY_VALUES: "fewer"}, create=True):
            self.assertEqual(getdoc(ErrorCode.TOO_MANY_VALUES), "fewer")
        with self.assertRaises(TypeError):
            getdoc(21113)

    def testCodesAreUnique(self):
        self.assertEqual(len({code.value for code in ErrorCode}), len(ErrorCode))


class TestError(TestCase):
    """Error values."""

    def testFields(self):
        error = Error(ErrorCode.TOO_MANY_VALUES, "too many", hint="drop one")
        self.assertEqual((error.code, error.message, error.visible, error.hint),
                         (ErrorCode.TOO_MANY_VALUES, "too many", True, "drop one"))

    def testValidation(self):
        with self.assertRaises(TypeError):
            Error(21113, "too many")
        with self.assertRaises(TypeError):
            Error(ErrorCode.TOO_MANY_VALUES, None)
        with self.assertRaises(TypeError):
            Error(ErrorCode.TOO_MANY_VALUES, "too many", 1)

    def testEqualityIgnoresPresentation(self):
        plain = Error(ErrorCode.TOO_MANY_VALUES, "too many")
        self.assertEqual(plain, Error(ErrorCode.TOO_MANY_VALUES, "too many", hint="x", colorful=False))
        self.assertNotEqual(plain, Error(ErrorCode.TOO_MANY_VALUES, "too many", False))
        self.assertEqual(len({plain, copy.replace(plain, fancy=True)}), 1)

    def testPatternMatching(self):
        match Error(ErrorCode.HELP_REQUESTED, "help", False):
            case Error(ErrorCode.HELP_REQUESTED, _, visible):
                self.assertFalse(visible)
            case other:
                self.fail("unexpected %r" % other)

    def testReplace(self):
        error = Error(ErrorCode.INVALID_VERB, "bad", hint="try again")
        changed = copy.replace(error, message="worse", prog="files")
        self.assertEqual(changed.message, "worse")
        self.assertEqual(changed.hint, "try again")
        self.assertEqual(changed.options["prog"], "files")
        self.assertEqual(error.message, "bad")

    def testRender(self):
        error = Error(ErrorCode.INVALID_VERB, "the verb 'x' is not valid", hint="did you mean 'copy'?",
                      colorful=False, prog="files")
        printed = render(error)
        self.assertIn("[ files — 21102 | invalid verb ]", printed)
        self.assertIn("the verb 'x' is not valid", printed)
        self.assertIn("→ did you mean 'copy'?", printed)

    def testRenderWithoutProg(self):
        printed = render(Error(ErrorCode.INVALID_VERB, "bad", colorful=False))
        self.assertIn("[ 21102 | invalid verb ]", printed)

    def testRenderFallsBackToHostDocs(self):
        docs = {ErrorCode.INVALID_VERB: "run with --help to list verbs"}
        with mock.patch.object(sys.modules["__main__"], "__docs__", docs, create=True):
            printed = render(Error(ErrorCode.INVALID_VERB, "bad", colorful=False))
            hinted = render(Error(ErrorCode.INVALID_VERB, "bad", hint="did you mean 'copy'?", colorful=False))
        self.assertIn("→ run with --help to list verbs", printed)
        self.assertIn("→ did you mean 'copy'?", hinted)
        self.assertNotIn("list verbs", hinted)
        self.assertNotIn("→", render(Error(ErrorCode.INVALID_VERB, "bad", colorful=False)))

    def testRenderFancy(self):
        printed = render(Error(ErrorCode.INVALID_VERB, "bad", colorful=False, fancy=True))
        self.assertIn("21102 | invalid verb", printed)
        self.assertIn("bad", printed)


class TestResults(TestCase):
    """ParseSuccess, ParseFailure and ParseExit."""

    def setUp(self):
        self.verb = Verb("run", target=Target, handler=lambda object: object.verbose)

    def testBaseNotInstantiable(self):
        with self.assertRaises(TypeError):
            ParseResult()

    def testSuccess(self):
        result = self.verb.parse(["-v"])
        self.assertTrue(result.ok)
        self.assertEqual(result.errors, ())
        self.assertIs(result.unwrap(), result.object)
        self.assertIs(result.invoke(), True)

    def testSuccessPatternMatching(self):
        match self.verb.parse([]):
            case ParseSuccess(object, verb):
                self.assertIs(verb, self.verb)
                self.assertIs(object.verbose, False)
            case other:
                self.fail("unexpected %r" % other)

    def testFailureNeedsErrors(self):
        with self.assertRaises(ValueError):
            ParseFailure(None, [])
        with self.assertRaises(TypeError):
            ParseFailure(None, ["not an error"])

    def testFailure(self):
        result = self.verb.parse(["-v", "-v"])
        self.assertFalse(result.ok)
        self.assertIsNone(result.object)
        self.assertFalse(result.help)
        self.assertEqual(len(result.visible), 1)

    def testUnwrapRaisesParseExit(self):
        result = self.verb.parse(["-v", "-v"])
        with self.assertRaises(ParseExit) as context:
            result.unwrap()
        self.assertIs(context.exception.verb, self.verb)
        self.assertEqual(context.exception.errors, result.errors)
        self.assertIsInstance(context.exception.exceptions[0], ParseError)
        self.assertEqual(context.exception.exceptions[0].code, ErrorCode.DUPLICATE_SWITCH)

    def testInvokeFailureRaises(self):
        with self.assertRaises(ParseExit):
            self.verb.parse(["--nope"]).invoke()

    def testParseExitCatchableAsGroup(self):
        try:
            self.verb.parse(["--nope"]).unwrap()
        except* ParseError as group:
            self.assertEqual(group.exceptions[0].code, ErrorCode.UNEXPECTED_ARGUMENT)

    def testParseExitRender(self):
        errors = [Error(ErrorCode.NO_VERB_FOUND, "no input"), Error(ErrorCode.INVALID_VERB, "bad")]
        printed = render(ParseExit(errors, colorful=False, prog="files"))
        self.assertIn("[ files — bad parse ]", printed)
        self.assertIn("no verb found", printed)
        self.assertIn("invalid verb", printed)


if __name__ == "__main__":
    unittest.main()

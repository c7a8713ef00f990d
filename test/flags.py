"""
Prefilter and global flags behavioral tests.

Scope
- Validate stripping of global and ignored flags (with and without values).
- Validate the version trigger and the immutable GlobalFlags snapshot.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import io
import unittest
from unittest import TestCase

from rich.console import Console

from switchyard.flags import GlobalFlags, prefilter
from switchyard.registry import GlobalFlag


class TestPrefilter(TestCase):
    """Token stripping and global flag capture."""

    def setUp(self):
        self.quiet = GlobalFlag("-q", "--quiet")
        self.config = GlobalFlag("-c", "--config", value=True)
        self.flags = [self.quiet, self.config]

    def testPassThrough(self):
        tokens, snapshot = prefilter(["build", "--out", "x"], self.flags)
        self.assertEqual(tokens, ["build", "--out", "x"])
        self.assertFalse(snapshot.has("-q"))

    def testBooleanGlobalIsStripped(self):
        tokens, snapshot = prefilter(["-q", "build"], self.flags)
        self.assertEqual(tokens, ["build"])
        self.assertTrue(snapshot.has("-q"))
        self.assertTrue(snapshot.has("--quiet"))
        self.assertIsNone(snapshot.get("-q"))

    def testValueGlobalConsumesNextToken(self):
        tokens, snapshot = prefilter(["build", "--config", "app.toml", "x"], self.flags)
        self.assertEqual(tokens, ["build", "x"])
        self.assertEqual(snapshot.get("-c"), "app.toml")
        self.assertIn("--config", snapshot)

    def testIgnoredFlags(self):
        ignores = {"--debug": False, "--log": True}
        tokens, _ = prefilter(["--debug", "build", "--log", "trace.txt", "x"], self.flags, ignores)
        self.assertEqual(tokens, ["build", "x"])

    def testEmptyRemainderIsNone(self):
        tokens, snapshot = prefilter(["-q"], self.flags)
        self.assertIsNone(tokens)
        self.assertTrue(snapshot.has("--quiet"))
        self.assertIsNone(prefilter([])[0])

    def testVersionPrintsAndExits(self):
        output = io.StringIO()
        with self.assertRaises(SystemExit) as context:
            prefilter(["build", "--version"], self.flags, version="tool 1.2.3", console=Console(file=output))
        self.assertEqual(context.exception.code, 0)
        self.assertEqual(output.getvalue().strip(), "tool 1.2.3")

    def testVersionTriggerWithoutMessageIsKept(self):
        tokens, _ = prefilter(["-v", "build"], self.flags)
        self.assertEqual(tokens, ["-v", "build"])

    def testSkippedValueIsNotAVersionTrigger(self):
        tokens, snapshot = prefilter(["--config", "-v"], self.flags, version="tool 1.2.3")
        self.assertIsNone(tokens)
        self.assertEqual(snapshot.get("--config"), "-v")

    def testUnknownGlobalLookups(self):
        _, snapshot = prefilter(["build"], self.flags)
        self.assertFalse(snapshot.has("--nope"))
        self.assertIsNone(snapshot.get("--nope"))


class TestGlobalFlags(TestCase):
    """The snapshot is comparable and read-only."""

    def testEquality(self):
        flags = [GlobalFlag("-q", "--quiet")]
        self.assertEqual(prefilter(["-q"], flags)[1], prefilter(["--quiet"], flags)[1])
        self.assertNotEqual(prefilter(["-q"], flags)[1], prefilter([], flags)[1])

    def testEmptySnapshot(self):
        self.assertFalse(GlobalFlags().has("-q"))
        self.assertEqual(GlobalFlags().flags, ())

    def testNoAttributeAssignment(self):
        with self.assertRaises(AttributeError):
            GlobalFlags().extra = 1


if __name__ == "__main__":
    unittest.main()

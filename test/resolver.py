"""
Resolver behavioral tests.

Scope
- Validate the trie walk: longest-prefix match, flag skipping, reset to root,
  case-insensitivity and in-place removal of the matched path.
- Validate the typo-correcting fallback with an injected confirmation callable:
  bin order, distance window, tie-breaks, decline and token removal.

Conventions
- Test method names follow CamelCase per project convention.
- Confirmations are stubbed; nothing reads from standard input.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from switchyard.registry import Registry
from switchyard.resolver import MAX_DISTANCE, correct, resolve


class Answer:
    """Confirmation stub that records every prompt it receives."""

    def __init__(self, reply):
        self.reply = reply
        self.prompts = []

    def __call__(self, message):
        self.prompts.append(message)
        return self.reply


def _refuse(message):
    raise AssertionError("unexpected prompt: %s" % message)


class TestResolveWalk(TestCase):
    """Exact matches through the trie."""

    def setUp(self):
        self.registry = Registry()
        self.registry.add("build", object(), ["b"], ["--out"])
        self.registry.add("db", object())
        self.registry.add("db migrate", object(), ["dbm"])

    def testSingleWord(self):
        tokens = ["build", "src"]
        self.assertEqual(resolve(self.registry, tokens, _refuse).alias, "build")
        self.assertEqual(tokens, ["src"])

    def testShortcutResolvesToCanonicalHandler(self):
        tokens = ["b", "src"]
        self.assertEqual(resolve(self.registry, tokens, _refuse).alias, "build")
        self.assertEqual(tokens, ["src"])

    def testLongestPrefixWins(self):
        tokens = ["db", "migrate", "up"]
        self.assertEqual(resolve(self.registry, tokens, _refuse).alias, "db migrate")
        self.assertEqual(tokens, ["up"])

    def testShorterHandlerWhenPathStops(self):
        tokens = ["db", "status"]
        self.assertEqual(resolve(self.registry, tokens, _refuse).alias, "db")
        self.assertEqual(tokens, ["status"])

    def testFlagsAreSkippedAndKept(self):
        tokens = ["--force", "db", "-x", "migrate", "--to", "3"]
        self.assertEqual(resolve(self.registry, tokens, _refuse).alias, "db migrate")
        self.assertEqual(tokens, ["--force", "-x", "--to", "3"])

    def testCaseInsensitive(self):
        tokens = ["DB", "Migrate"]
        self.assertEqual(resolve(self.registry, tokens, _refuse).alias, "db migrate")
        self.assertEqual(tokens, [])

    def testUnrelatedTokensBeforeCommand(self):
        tokens = ["foo", "build", "x"]
        self.assertEqual(resolve(self.registry, tokens, _refuse).alias, "build")
        self.assertEqual(tokens, ["foo", "x"])

    def testResetRetriesTokenAtRoot(self):
        registry = Registry()
        registry.add("cache clear", object())
        registry.add("build", object())
        tokens = ["cache", "build"]
        self.assertEqual(resolve(registry, tokens, _refuse).alias, "build")
        self.assertEqual(tokens, ["cache"])

    def testNoMatchWithoutSuggestion(self):
        tokens = ["zzzzzzzz", "--x"]
        self.assertIsNone(resolve(self.registry, tokens, _refuse))
        self.assertEqual(tokens, ["zzzzzzzz", "--x"])

    def testOnlyFlags(self):
        tokens = ["--x", "-y"]
        self.assertIsNone(resolve(self.registry, tokens, _refuse))
        self.assertEqual(tokens, ["--x", "-y"])


class TestCorrect(TestCase):
    """Typo-correction fallback."""

    def setUp(self):
        self.registry = Registry()
        self.registry.add("build", object(), ["b"])
        self.registry.add("db migrate", object())

    def testAcceptedSuggestion(self):
        answer = Answer(True)
        tokens = ["buidl", "src"]
        self.assertEqual(resolve(self.registry, tokens, answer).alias, "build")
        self.assertEqual(tokens, ["src"])
        self.assertEqual(len(answer.prompts), 1)
        self.assertIn("'build'", answer.prompts[0])

    def testDeclinedSuggestionStops(self):
        answer = Answer(False)
        tokens = ["buidl", "src"]
        self.assertIsNone(resolve(self.registry, tokens, answer))
        self.assertEqual(tokens, ["buidl", "src"])
        self.assertEqual(len(answer.prompts), 1)

    def testDistanceWindow(self):
        self.assertEqual(MAX_DISTANCE, 3)
        # "bld" is 2 edits away, "buildxxxx" is 4 edits away
        self.assertIsNotNone(correct(self.registry, ["bld"], Answer(True)))
        self.assertIsNone(correct(self.registry, ["buildxxxx"], _refuse))

    def testOneEditIsOffered(self):
        answer = Answer(True)
        tokens = ["buil"]
        self.assertEqual(correct(self.registry, tokens, answer).alias, "build")
        self.assertEqual(len(answer.prompts), 1)
        self.assertEqual(tokens, [])

    def testThreeEditsAreOffered(self):
        answer = Answer(True)
        tokens = ["bxxxd", "src"]
        self.assertEqual(correct(self.registry, tokens, answer).alias, "build")
        self.assertEqual(len(answer.prompts), 1)
        self.assertEqual(tokens, ["src"])

    def testMoreWordsComparedFirst(self):
        answer = Answer(True)
        tokens = ["dv", "migrat", "prod"]
        self.assertEqual(resolve(self.registry, tokens, answer).alias, "db migrate")
        self.assertEqual(tokens, ["prod"])
        self.assertIn("'db migrate'", answer.prompts[0])

    def testFlagsAreNotCompared(self):
        answer = Answer(True)
        tokens = ["--verbose", "buidl", "-x"]
        self.assertEqual(resolve(self.registry, tokens, answer).alias, "build")
        self.assertEqual(tokens, ["--verbose", "-x"])

    def testShortcutsAreNotSuggested(self):
        answer = Answer(True)
        correct(self.registry, ["bb"], answer)
        self.assertTrue(all("'b'" not in prompt for prompt in answer.prompts))

    def testTiesFallToAlphabeticalOrder(self):
        registry = Registry()
        registry.add("cat", object())
        registry.add("bat", object())
        answer = Answer(True)
        self.assertEqual(correct(registry, ["rat"], answer).alias, "bat")

    def testExactNameIsNotSuggested(self):
        self.assertIsNone(correct(self.registry, ["build"], _refuse))

    def testOnlyFlagsAreNeverCorrected(self):
        self.assertIsNone(correct(self.registry, ["--only", "-flags"], _refuse))

    def testEmptyRegistry(self):
        self.assertIsNone(resolve(Registry(), ["build"], _refuse))


if __name__ == "__main__":
    unittest.main()

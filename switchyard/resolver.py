"""
Command resolution: trie walk with a typo-correcting fallback.

resolve(registry, tokens)
- Walks the trie from the root over the (prefiltered) tokens. Tokens starting with
  '-' never take part in the walk and never reset it.
- A token naming a child of the current node descends; the deepest handler alias
  seen so far on the path wins (deeper registrations are more specific).
- A token that does not name a child either ends the walk (a handler was already
  found: longest-prefix match, no search for a longer alternative) or resets the
  walk to the root, where the same token is tried again. This lets unrelated
  tokens appear before the command name.
- On success the tokens forming the matched path are removed from the list and
  the Handler is returned. Flags interleaved within the path stay in place.
- Without a match, the typo-correction fallback runs.

correct(registry, tokens, confirm)
- Considers only non-flag tokens, in order.
- Canonical aliases are binned by word count and visited from most words to
  fewest. For a bin of n words the first n non-flag tokens (joined by single
  spaces) are compared with each alias by edit distance; the closest alias of the
  bin is kept (alphabetical order breaks ties).
- When a bin's best distance is between 1 and MAX_DISTANCE (inclusive), the user is
  asked to confirm the suggestion. A yes removes the compared tokens and returns the
  handler; a no ends the resolution, no further bins are tried.

The confirmation is an injected capability (message → bool) so the algorithm stays
deterministic under test; ask() is the interactive default.
"""
from rich.prompt import Confirm

from .utils import *

MAX_DISTANCE = 3


def ask(message, /):
    """
    Interactive confirmation on the terminal (blocks on standard input).

    Re-prompts until the user answers y or n.
    """
    return Confirm.ask(message)


def resolve(registry, tokens, /, confirm=Unset):
    """
    Resolve the command named by tokens, consuming its path segments.

    Parameters
    - registry: the Registry to walk.
    - tokens: mutable list of tokens; matched segments are removed in place.
    - confirm: callable(message) -> bool used by the typo fallback (defaults to ask).

    Returns
    - the Handler, or None when nothing matched and no suggestion was accepted.
    """
    node = registry.root
    alias = None
    path = []
    matched = []

    for index, token in enumerate(tokens):
        if token.startswith("-"):
            continue

        if (child := node.children.get(segment := token.lower())) is None:
            if alias is not None:
                break
            node, path = registry.root, []
            if (child := node.children.get(segment)) is None:
                continue

        node = child
        path.append(index)
        if node.alias is not None:
            alias, matched = node.alias, list(path)

    if alias is None:
        return correct(registry, tokens, confirm)

    for index in reversed(matched):
        del tokens[index]
    return registry.handler(alias)


def correct(registry, tokens, /, confirm=Unset):
    """
    Suggest the closest registered alias and, once confirmed, consume its tokens.

    Returns the confirmed Handler, or None (no close alias, or the user declined).
    """
    positions = [index for index, token in enumerate(tokens) if not token.startswith("-")]
    if not positions:
        return None
    words = [tokens[index].lower() for index in positions]

    for size, aliases in registry.bins():
        probe = " ".join(words[:size])

        # ties fall to the alphabetically first alias
        distance, best = min((levenshtein(alias, probe), alias) for alias in aliases)
        if not 1 <= distance <= MAX_DISTANCE:
            continue

        message = (
            "no command with that name exists, but a similar command named %r does. "
            "is this the command you wish to run?" % best
        )
        if not coalesce(confirm, ask)(message):
            return None

        for index in reversed(positions[:size]):
            del tokens[index]
        return registry.handler(best)

    return None


__all__ = (
    "MAX_DISTANCE",
    "ask",
    "resolve",
    "correct",
)

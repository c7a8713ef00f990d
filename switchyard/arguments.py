"""
Argument partitioning.

Splits the tokens left after the command path was consumed into positional
arguments, boolean flags and flag values, according to the handler's value flags.

Classification, token by token
1. the previous token was a value flag awaiting its value → this token is that
   flag's value (keyed by the exact flag spelling; a repeated flag overwrites).
2. starts with '-' and is one of the value flags → await a value.
3. starts with '--' → boolean flag, verbatim.
4. starts with a single '-' → combined short flags, one per character
   ("-xyz" → "-x", "-y", "-z").
5. anything else → positional argument, order preserved.

No legality checks happen here: unknown flags are accepted as boolean flags.
A lone "-" (commonly a stdin marker) names no short flag and is dropped; pass it
as the value of a value flag to keep it.
A value flag at the very end of the stream (nothing left to consume) is kept as a
boolean flag so that its presence is still observable.
"""


def partition(tokens, value_flags=frozenset(), /):
    """
    Partition tokens into (args, flags, values).

    Returns
    - args: list of positional arguments
    - flags: list of boolean flags, duplicates kept as emitted
    - values: dict of value flag → value
    """
    args = []
    flags = []
    values = {}

    awaiting = None
    for token in tokens:
        if awaiting is not None:
            values[awaiting] = token
            awaiting = None
        elif token.startswith("-") and token in value_flags:
            awaiting = token
        elif token.startswith("--"):
            flags.append(token)
        elif token.startswith("-"):
            flags.extend("-" + char for char in token[1:])
        else:
            args.append(token)

    if awaiting is not None:
        flags.append(awaiting)

    return args, flags, values


__all__ = (
    "partition",
)

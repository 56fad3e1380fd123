"""Internal invariant violations.

Expected business-rule failures never raise; they come back as a rejected
CommandResult. These exceptions mean the state itself is inconsistent.
"""

from __future__ import annotations


class StateInvariantError(RuntimeError):
    """The game state references something that does not exist."""


def missing(kind: str, ref: str) -> StateInvariantError:
    """Build the error for a dangling reference."""
    return StateInvariantError(f"{kind} {ref!r} referenced but not present in state")

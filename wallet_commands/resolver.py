"""
Command Resolver
================

Turns one raw line of user input into a registered Command.

Input may be a command name ("balance") or the 1-based number shown
next to a command in the current listing ("3"). The two forms are
resolved against different lists on purpose:

    "3"        → index into the AVAILABLE list (what the user was shown)
    "transfer" → lookup in the FULL registry

Resolving names against the full registry lets the dispatcher tell
"unknown command" apart from "known, but not allowed in a view only
wallet". Resolving numbers against the available list keeps the
numbering the user typed consistent with the numbering they saw.

The resolver never prints. Failures come back as a Resolution with
``failure`` set, and the dispatcher decides how to report them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from wallet_commands.registry import Command, find_command


class DispatchFailure(Enum):
    """Why a line of input did not run a command.

    Every failure is local and recoverable: the session carries on.
    """
    EMPTY_INPUT = "empty_input"                            # silent no-op
    NUMERIC_OUT_OF_RANGE = "numeric_out_of_range"
    UNKNOWN_COMMAND = "unknown_command"
    FORBIDDEN_IN_VIEW_WALLET = "forbidden_in_view_wallet"
    HANDLER_NOT_WIRED = "handler_not_wired"                # registry drift


@dataclass(frozen=True)
class Resolution:
    """Outcome of resolving a line of input.

    Attributes
    ----------
    token : str
        The input as given (before any index substitution).
    command : Command or None
        The resolved command, when resolution succeeded.
    failure : DispatchFailure or None
        Set when resolution failed.
    available_count : int
        Length of the available list at resolution time. Used to
        report the valid index range.
    """
    token: str
    command: Optional[Command] = None
    failure: Optional[DispatchFailure] = None
    available_count: int = 0

    @property
    def is_error(self) -> bool:
        return self.failure is not None


# Optional sign then ASCII digits, nothing else
_INDEX_PATTERN = re.compile(r'[+-]?[0-9]+')

# Numbers outside a 32-bit int are not treated as indices
_INT_MIN = -(2 ** 31)
_INT_MAX = 2 ** 31 - 1


def parse_index(token: str) -> Optional[int]:
    """Parse a base-10 integer token.

    Returns None for anything that is not a whole, in-range integer:
    trailing garbage ("3x"), embedded spaces, or huge values. Those
    fall through to name lookup.
    """
    if not _INDEX_PATTERN.fullmatch(token):
        return None

    value = int(token)
    if value < _INT_MIN or value > _INT_MAX:
        return None

    return value


def resolve_command(token: str,
                    commands: list[Command],
                    available: list[Command]) -> Resolution:
    """Resolve user input to a command.

    Parameters
    ----------
    token : str
        One line of input, already trimmed by the caller.
    commands : list[Command]
        The full registry.
    available : list[Command]
        The mode-filtered list the user was most recently shown.

    Returns
    -------
    Resolution
        With ``command`` set on success, otherwise ``failure`` is one
        of EMPTY_INPUT, NUMERIC_OUT_OF_RANGE or UNKNOWN_COMMAND.
    """
    name = token
    count = len(available)

    index = parse_index(token)
    if index is not None:
        # 1-based on screen, 0-based here
        index -= 1

        if index < 0 or index >= count:
            return Resolution(
                token=token,
                failure=DispatchFailure.NUMERIC_OUT_OF_RANGE,
                available_count=count,
            )

        name = available[index].name

    if name == "":
        return Resolution(
            token=token,
            failure=DispatchFailure.EMPTY_INPUT,
            available_count=count,
        )

    command = find_command(name, commands)
    if command is None:
        return Resolution(
            token=token,
            failure=DispatchFailure.UNKNOWN_COMMAND,
            available_count=count,
        )

    return Resolution(token=token, command=command, available_count=count)

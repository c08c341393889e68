"""
Listing Presenter
=================

Prints the numbered command menu for ``help`` (basic tier) and
``advanced`` (advanced tier).

Basic commands always take numbers 1..B and advanced commands take
B+1..N, whichever tier is being shown. A listing of the advanced tier
therefore starts counting after the basic commands, and skipped
commands never consume a number. This matches the positions the
resolver accepts.
"""

from __future__ import annotations

import sys
from typing import Optional, TextIO

from wallet_commands.registry import Command, num_basic_commands
from wallet_commands.rendering import PlainRenderer

COMMAND_PADDING = 25


def format_command_lines(commands: list[Command], advanced: bool,
                         renderer=None) -> list[str]:
    """Build the listing lines for one tier without printing them."""
    renderer = renderer or PlainRenderer()

    index = 1
    if advanced:
        index = num_basic_commands(commands) + 1

    lines = []
    for command in commands:
        if command.advanced != advanced:
            continue

        lines.append(
            f" {renderer.information(str(index))}\t"
            f"{renderer.success(command.name, COMMAND_PADDING)}"
            f"{command.description}"
        )
        index += 1

    return lines


def list_commands(commands: list[Command], advanced: bool,
                  out: Optional[TextIO] = None, renderer=None) -> None:
    """Print the listing for one tier to ``out`` (stdout by default)."""
    out = out or sys.stdout
    for line in format_command_lines(commands, advanced, renderer):
        print(line, file=out)

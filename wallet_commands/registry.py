"""
Command Registry
================

The canonical list of every command the wallet shell knows about,
and the view-wallet filter applied on top of it.

Ordering
--------
Commands are sorted by tier first (basic before advanced), then by
name. The numbers shown by ``help`` / ``advanced`` and the numbers a
user may type at the prompt are both positions in this ordering, so
the sort must stay identical between the lister and the resolver:

     1  address        ─┐
     2  advanced        │  basic tier
     ...                │
     7  transfer       ─┘
     8  ab_add         ─┐
     ...                │  advanced tier
    21  status         ─┘

The registry is rebuilt on every dispatch rather than cached. It is
a pure function of the ticker, so rebuilding is cheap and there is
no state to go stale between commands.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


DEFAULT_TICKER = "TRTL"


@dataclass(frozen=True)
class Command:
    """A single shell command.

    Attributes
    ----------
    name : str
        Lowercase identifier with no spaces. Matched exactly
        (case-sensitive) against user input.
    description : str
        One-line explanation shown in listings.
    view_wallet_support : bool
        True if the command can be used with a view only wallet.
    advanced : bool
        True for the advanced tier, False for the basic tier.
    """
    name: str
    description: str
    view_wallet_support: bool
    advanced: bool


def _sort_key(command: Command) -> tuple[bool, str]:
    # False sorts before True: basic tier first
    return (command.advanced, command.name)


def all_commands(ticker: str = DEFAULT_TICKER) -> list[Command]:
    """Build the full, sorted command registry.

    Parameters
    ----------
    ticker : str
        Currency ticker substituted into descriptions.

    Raises
    ------
    ValueError
        If two commands share a name. Lookup by name has to be
        unambiguous.
    """
    commands = [
        # Basic commands
        Command("address", "Display your payment address", True, False),
        Command("advanced", "List available advanced commands", True, False),
        Command("balance", f"Display how much {ticker} you have", True, False),
        Command("exit", "Exit and save your wallet", True, False),
        Command("export_keys", "Export your private keys", True, False),
        Command("help", "List this help message", True, False),
        Command("transfer", f"Send {ticker} to someone", False, False),

        # Advanced commands
        Command("ab_add", "Add a person to your address book", True, True),
        Command("ab_delete", "Delete a person from your address book", True, True),
        Command("ab_list", "List everyone in your address book", True, True),
        Command("ab_send", f"Send {ticker} to someone in your address book", False, True),
        Command("bc_height", "Show the blockchain height", True, True),
        Command("change_password", "Change your wallet password", True, True),
        Command("incoming_transfers", "Show incoming transfers", True, True),
        Command("list_transfers", "Show all transfers", False, True),
        Command("optimize", "Optimize your wallet to send large amounts", False, True),
        Command("outgoing_transfers", "Show outgoing transfers", False, True),
        Command("reset", "Recheck the chain from zero for transactions", True, True),
        Command("save", "Save your wallet state", True, True),
        Command("save_csv", "Save all wallet transactions to a CSV file", False, True),
        Command("status", "Show the daemon status", True, True),
    ]

    seen = set()
    for command in commands:
        if command.name in seen:
            raise ValueError(f"Duplicate command name in registry: '{command.name}'")
        seen.add(command.name)

    return sorted(commands, key=_sort_key)


def available_commands(commands: list[Command], view_wallet: bool) -> list[Command]:
    """The commands usable in the current session mode.

    A full wallet sees everything. A view wallet sees the ordered
    sub-sequence of commands with ``view_wallet_support`` set.
    """
    if not view_wallet:
        return list(commands)

    return [command for command in commands if command.view_wallet_support]


def num_basic_commands(commands: list[Command]) -> int:
    """Count the basic-tier commands in a list."""
    return sum(1 for command in commands if not command.advanced)


def find_command(name: str, commands: list[Command]) -> Optional[Command]:
    """Exact, case-sensitive lookup by name. None if absent."""
    for command in commands:
        if command.name == name:
            return command
    return None

"""
Wallet Command System
=====================

The command dispatcher behind the zedwallet interactive shell. It
keeps the registry of wallet commands, hides the ones a view only
wallet cannot use, turns a typed name or menu number into a command,
and routes it to the wallet operation that implements it.

Architecture Overview
---------------------

    ┌──────────────┐     ┌──────────────┐     ┌───────────────────┐
    │  Prompt      │────►│  Command     │────►│  Handler table     │
    │  (zedwallet) │     │  Dispatcher  │     │  → WalletServices  │
    └──────────────┘     └──────┬───────┘     │  → listing/address │
                                │             └───────────────────┘
                   ┌────────────┼─────────────┐
              ┌────▼────┐ ┌─────▼──────┐ ┌────▼─────┐
              │Registry │ │Availability│ │ Resolver │
              │(sorted) │ │  filter    │ │name/index│
              └─────────┘ └────────────┘ └──────────┘

dispatch(line) returns True only when the user asked to exit. Bad
input never raises: it prints a diagnostic and the prompt comes back.

Typical use:

    from wallet_commands import create_dispatcher

    dispatcher = create_dispatcher(session, services, ticker="TRTL")
    while not dispatcher.dispatch(read_line().strip()):
        pass

Adding a Command
----------------
1. Add a Command(...) entry to registry.all_commands(). Sorting is
   automatic; mind the view_wallet_support flag.
2. Add the operation to WalletServices (handlers.py) if it needs the
   wallet backend.
3. Wire the name in handlers.build_handler_table().

A dispatcher built in strict mode refuses to start if step 3 was
missed.

Module Structure
----------------
    wallet_commands/
    ├── __init__.py      ← This file. create_dispatcher().
    ├── registry.py      ← Command, all_commands(), available_commands().
    ├── resolver.py      ← resolve_command(), Resolution, DispatchFailure.
    ├── dispatcher.py    ← CommandDispatcher, WalletSession, DispatchContext.
    ├── listing.py       ← Numbered help / advanced menus.
    ├── handlers.py      ← WalletServices ABC, build_handler_table().
    ├── rendering.py     ← PlainRenderer, RichRenderer.
    └── demo.py          ← In-memory wallet backend.
"""

from typing import Optional, TextIO

from wallet_commands.dispatcher import CommandDispatcher, DispatchContext, WalletSession
from wallet_commands.handlers import WalletServices, build_handler_table
from wallet_commands.registry import (
    DEFAULT_TICKER,
    Command,
    all_commands,
    available_commands,
)
from wallet_commands.resolver import DispatchFailure, Resolution, resolve_command


def create_dispatcher(session: WalletSession,
                      services: WalletServices,
                      ticker: str = DEFAULT_TICKER,
                      out: Optional[TextIO] = None,
                      renderer=None) -> CommandDispatcher:
    """Build a strict dispatcher with the standard handler table."""
    return CommandDispatcher(
        session,
        build_handler_table(services),
        ticker=ticker,
        out=out,
        renderer=renderer,
        strict=True,
    )


__all__ = [
    'Command',
    'CommandDispatcher',
    'DispatchContext',
    'DispatchFailure',
    'Resolution',
    'WalletServices',
    'WalletSession',
    'all_commands',
    'available_commands',
    'build_handler_table',
    'create_dispatcher',
    'resolve_command',
]

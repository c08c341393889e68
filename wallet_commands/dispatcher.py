"""
Command Dispatcher
==================

The routing table for wallet shell commands.

Role in the System
------------------
Every line typed at the wallet prompt passes through dispatch().
The dispatcher rebuilds the registry, filters it for the session
mode, resolves the line, checks the mode gate and calls exactly one
handler.

    User types: "3"
                  ↓
    Registry → 21 commands, sorted (basic tier, then advanced)
                  ↓
    Availability filter (view wallet?) → what the user was shown
                  ↓
    Resolver: "3" → available[2] → "balance"
                  ↓
    Mode gate: balance works in a view wallet → pass
                  ↓
    Handler table["balance"](context) → prints the balance
                  ↓
    dispatch() returns False (keep going)

Only the ``exit`` handler makes dispatch() return True.

Design Decisions
----------------
- Names are matched exactly. "EXIT" is an unknown command.
- Numeric input and name input converge on the canonical command
  name before the mode gate, so "4" and "exit" behave identically.
- A name known to the registry but forbidden in a view wallet gets
  its own message, distinct from "unknown command".
- Handlers are a plain dict of name → callable(context). The wiring
  is checked when the dispatcher is built; the runtime "not hooked
  up" message is kept as a last line of defence.
- Nothing here raises to the caller for bad input. The caller only
  sees a bool and whatever was written to the output stream.

Classes
-------
WalletSession
    The externally owned wallet state. Read (mode) and passed through
    (wallet handle, node), never mutated here.

DispatchContext
    What a handler receives: session, registry, available list,
    output stream and renderer.

CommandDispatcher
    The router. Call dispatch(line) once per line of input.
"""

from __future__ import annotations

import logging
import sys
from dataclasses import dataclass
from typing import Any, Callable, Optional, TextIO

from wallet_commands.registry import (
    DEFAULT_TICKER,
    Command,
    all_commands,
    available_commands,
)
from wallet_commands.rendering import PlainRenderer
from wallet_commands.resolver import DispatchFailure, Resolution, resolve_command

logger = logging.getLogger(__name__)


@dataclass
class WalletSession:
    """State of the open wallet.

    Attributes
    ----------
    view_wallet : bool
        True when only the view key is available.
    wallet : Any
        Opaque wallet handle handed through to handlers.
    wallet_address : str
        The payment address shown by ``address``.
    node : Any
        Opaque node handle exposing ``get_last_known_block_height()``.
    """
    view_wallet: bool
    wallet: Any
    wallet_address: str
    node: Any = None

    def blockchain_height(self) -> int:
        return self.node.get_last_known_block_height()


@dataclass
class DispatchContext:
    """Everything a handler may need for one dispatch."""
    session: WalletSession
    commands: list[Command]
    available: list[Command]
    out: TextIO
    renderer: Any

    def write(self, text: str = "") -> None:
        print(text, file=self.out)


# Returns True only for the exit handler
Handler = Callable[[DispatchContext], Optional[bool]]


class CommandDispatcher:
    """Routes input lines to wallet command handlers.

    Usage
    -----
        dispatcher = CommandDispatcher(session, build_handler_table(services))

        while True:
            line = read_line().strip()
            if dispatcher.dispatch(line):
                break

    Parameters
    ----------
    session : WalletSession
        The active wallet session.
    handlers : dict[str, Handler]
        One handler per canonical command name.
    ticker : str
        Currency ticker used in command descriptions.
    out : TextIO
        Where diagnostics and listings are written. Defaults to stdout.
    renderer
        Text renderer (PlainRenderer, RichRenderer).
    strict : bool
        If True, raise at construction when a registry command has no
        handler.

    Raises
    ------
    ValueError
        In strict mode, if any registry command is not wired to a
        handler.
    """

    def __init__(self, session: WalletSession,
                 handlers: dict[str, Handler],
                 ticker: str = DEFAULT_TICKER,
                 out: Optional[TextIO] = None,
                 renderer=None,
                 strict: bool = True):
        self.session = session
        self.handlers = dict(handlers)
        self.ticker = ticker
        self.out = out or sys.stdout
        self.renderer = renderer or PlainRenderer()

        missing = self.unwired_commands()
        if missing:
            if strict:
                raise ValueError(
                    f"Commands registered without a handler: {', '.join(missing)}"
                )
            logger.warning("Commands registered without a handler: %s",
                           ", ".join(missing))

    def register(self, name: str, handler: Handler) -> None:
        """Wire one more handler into the table.

        Raises
        ------
        ValueError
            If a handler is already registered under ``name``.
        """
        if name in self.handlers:
            raise ValueError(f"Handler already registered for command '{name}'")
        self.handlers[name] = handler

    def unwired_commands(self) -> list[str]:
        """Registry command names that have no handler, in registry order."""
        return [command.name for command in all_commands(self.ticker)
                if command.name not in self.handlers]

    def commands(self) -> list[Command]:
        """A fresh copy of the full registry."""
        return all_commands(self.ticker)

    def available(self) -> list[Command]:
        """A fresh copy of the commands usable in the current mode."""
        return available_commands(self.commands(), self.session.view_wallet)

    def dispatch(self, line: str) -> bool:
        """Resolve and run one line of input.

        Parameters
        ----------
        line : str
            One line of input, already trimmed by the caller.

        Returns
        -------
        bool
            True if the session should end (``exit``), otherwise False.
        """
        commands = all_commands(self.ticker)
        available = available_commands(commands, self.session.view_wallet)
        resolution = resolve_command(line, commands, available)

        if resolution.is_error:
            self.report(resolution)
            return False

        command = resolution.command
        name = command.name
        logger.debug("Dispatching '%s' as '%s'", line, name)

        if self.session.view_wallet and not command.view_wallet_support:
            self.report(Resolution(
                token=line,
                command=command,
                failure=DispatchFailure.FORBIDDEN_IN_VIEW_WALLET,
                available_count=len(available),
            ))
            return False

        handler = self.handlers.get(name)
        if handler is None:
            logger.warning("Command '%s' resolved but has no handler", name)
            self.report(Resolution(
                token=line,
                command=command,
                failure=DispatchFailure.HANDLER_NOT_WIRED,
                available_count=len(available),
            ))
            return False

        context = DispatchContext(
            session=self.session,
            commands=commands,
            available=available,
            out=self.out,
            renderer=self.renderer,
        )

        return handler(context) is True

    def report(self, resolution: Resolution) -> None:
        """Write the user-facing diagnostic for a failed resolution."""
        r = self.renderer
        failure = resolution.failure

        if failure is DispatchFailure.EMPTY_INPUT:
            return

        if failure is DispatchFailure.NUMERIC_OUT_OF_RANGE:
            message = (
                r.warning("Bad input: Expected a command name, or number from ")
                + r.information("1")
                + r.warning(" to ")
                + r.information(str(resolution.available_count))
            )
        elif failure is DispatchFailure.UNKNOWN_COMMAND:
            message = (
                "Unknown command: " + r.warning(resolution.token)
                + ", use " + r.suggestion("help")
                + " command to list all possible commands."
            )
        elif failure is DispatchFailure.FORBIDDEN_IN_VIEW_WALLET:
            message = r.warning(
                "This command is not available in a view only wallet..."
            )
        elif failure is DispatchFailure.HANDLER_NOT_WIRED:
            message = (
                r.warning("Command was defined but not hooked up: ")
                + r.information(resolution.command.name)
                + "\n"
                + r.information("Please report this bug!")
            )
        else:
            return

        print(message, file=self.out)

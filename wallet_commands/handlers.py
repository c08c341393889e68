"""
Handler Table
=============

Wires canonical command names to the wallet operations they run.

The operations themselves (key export, transfers, node queries, CSV
export, the address book) live behind WalletServices. The shell only
knows their names. To hook a wallet backend into the shell, subclass
WalletServices and pass it to build_handler_table():

    handlers = build_handler_table(MyWalletBackend())
    dispatcher = CommandDispatcher(session, handlers)

Three commands are answered by the shell itself:

    help      → basic tier listing of the available commands
    advanced  → advanced tier listing of the available commands
    address   → the session's payment address

and ``exit`` only signals termination; saving on the way out is the
caller's business.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from wallet_commands.dispatcher import DispatchContext, Handler, WalletSession
from wallet_commands.listing import list_commands


class WalletServices(ABC):
    """The wallet operations the shell can invoke.

    Every method receives the active session and writes its own
    output. Return values are ignored. Errors raised here propagate
    to the caller of dispatch().
    """

    @abstractmethod
    def export_keys(self, session: WalletSession) -> None:
        ...

    @abstractmethod
    def status(self, session: WalletSession) -> None:
        ...

    @abstractmethod
    def balance(self, session: WalletSession) -> None:
        ...

    @abstractmethod
    def list_transfers(self, session: WalletSession,
                       incoming: bool, outgoing: bool) -> None:
        """Show incoming and/or outgoing transfers."""
        ...

    @abstractmethod
    def save_csv(self, session: WalletSession) -> None:
        ...

    @abstractmethod
    def save(self, session: WalletSession) -> None:
        ...

    @abstractmethod
    def blockchain_height(self, session: WalletSession) -> None:
        ...

    @abstractmethod
    def reset(self, session: WalletSession) -> None:
        """Rescan the chain from zero."""
        ...

    @abstractmethod
    def transfer(self, session: WalletSession, height: int) -> None:
        """Build and send a transfer. ``height`` is the node's last known block."""
        ...

    @abstractmethod
    def full_optimize(self, session: WalletSession) -> None:
        ...

    @abstractmethod
    def add_to_address_book(self, session: WalletSession) -> None:
        ...

    @abstractmethod
    def delete_from_address_book(self, session: WalletSession) -> None:
        ...

    @abstractmethod
    def list_address_book(self, session: WalletSession) -> None:
        ...

    @abstractmethod
    def send_from_address_book(self, session: WalletSession, height: int) -> None:
        ...

    @abstractmethod
    def change_password(self, session: WalletSession) -> None:
        ...


def _show_help(context: DispatchContext) -> None:
    list_commands(context.available, False, context.out, context.renderer)


def _show_advanced(context: DispatchContext) -> None:
    list_commands(context.available, True, context.out, context.renderer)


def _show_address(context: DispatchContext) -> None:
    context.write(context.renderer.success(context.session.wallet_address))


def _request_exit(context: DispatchContext) -> bool:
    return True


def build_handler_table(services: WalletServices) -> dict[str, Handler]:
    """Map every registry command name to its handler.

    Parameters
    ----------
    services : WalletServices
        The wallet backend the handlers delegate to.
    """
    s = services

    return {
        "address": _show_address,
        "advanced": _show_advanced,
        "balance": lambda c: s.balance(c.session),
        "exit": _request_exit,
        "export_keys": lambda c: s.export_keys(c.session),
        "help": _show_help,
        "transfer": lambda c: s.transfer(c.session, c.session.blockchain_height()),

        "ab_add": lambda c: s.add_to_address_book(c.session),
        "ab_delete": lambda c: s.delete_from_address_book(c.session),
        "ab_list": lambda c: s.list_address_book(c.session),
        "ab_send": lambda c: s.send_from_address_book(
            c.session, c.session.blockchain_height()),
        "bc_height": lambda c: s.blockchain_height(c.session),
        "change_password": lambda c: s.change_password(c.session),
        "incoming_transfers": lambda c: s.list_transfers(c.session, True, False),
        "list_transfers": lambda c: s.list_transfers(c.session, True, True),
        "optimize": lambda c: s.full_optimize(c.session),
        "outgoing_transfers": lambda c: s.list_transfers(c.session, False, True),
        "reset": lambda c: s.reset(c.session),
        "save": lambda c: s.save(c.session),
        "save_csv": lambda c: s.save_csv(c.session),
        "status": lambda c: s.status(c.session),
    }

"""
In-memory wallet backend for running the shell without a daemon.

DemoWalletServices implements every WalletServices operation against
a DemoWallet held in memory, so the whole command set can be tried
from the terminal. Amounts are in atomic units (100 per coin).
"""

from __future__ import annotations

import csv
import logging
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Callable, Optional

import yaml

from wallet_commands.dispatcher import WalletSession
from wallet_commands.handlers import WalletServices

logger = logging.getLogger(__name__)

DECIMAL_PLACES = 2
FUSION_THRESHOLD = 10


@dataclass
class DemoTransfer:
    amount: int          # positive incoming, negative outgoing
    block_height: int
    payment_id: str = ""


@dataclass
class DemoWallet:
    spend_key: str = "0" * 64
    view_key: str = "1" * 64
    password: str = ""
    unlocked: int = 0
    locked: int = 0
    transfers: list[DemoTransfer] = field(default_factory=list)
    outputs: int = 0
    saved: bool = True


class DemoNode:
    """Stands in for the daemon connection."""

    def __init__(self, height: int = 1000, peers: int = 8):
        self.height = height
        self.peers = peers

    def get_last_known_block_height(self) -> int:
        return self.height


def load_demo_wallet(path) -> DemoWallet:
    """Read a wallet written by save_demo_wallet()."""
    with open(Path(path).expanduser()) as f:
        data = yaml.safe_load(f) or {}
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not hold a wallet")
    transfers = [DemoTransfer(**t) for t in data.pop("transfers", [])]
    return DemoWallet(transfers=transfers, **data)


def save_demo_wallet(wallet: DemoWallet, path) -> None:
    target = Path(path).expanduser()
    target.parent.mkdir(parents=True, exist_ok=True)
    state = asdict(wallet)
    state.pop("saved")
    with open(target, "w") as f:
        yaml.safe_dump(state, f, sort_keys=False)


def format_amount(amount: int, ticker: str) -> str:
    sign = "-" if amount < 0 else ""
    whole, frac = divmod(abs(amount), 10 ** DECIMAL_PLACES)
    return f"{sign}{whole:,}.{frac:0{DECIMAL_PLACES}d} {ticker}"


class DemoWalletServices(WalletServices):
    """WalletServices over a DemoWallet.

    Parameters
    ----------
    ticker : str
        Currency ticker for amounts.
    ask : callable
        Reads one answer from the user, given a question. Interactive
        operations (transfer, address book edits) use it.
    out : callable
        Writes one line of output.
    csv_path : str
        Where save_csv writes.
    wallet_file : str, optional
        Where save writes the wallet state. Nothing is written when unset.
    """

    def __init__(self, ticker: str, ask: Callable[[str], str],
                 out: Callable[[str], None] = print,
                 csv_path: str = "transactions.csv",
                 wallet_file: Optional[str] = None):
        self.ticker = ticker
        self.ask = ask
        self.out = out
        self.csv_path = Path(csv_path)
        self.wallet_file = wallet_file
        self.address_book: dict[str, str] = {}

    def _amount(self, amount: int) -> str:
        return format_amount(amount, self.ticker)

    def _parse_amount(self, text: str) -> Optional[int]:
        try:
            value = round(float(text) * 10 ** DECIMAL_PLACES)
        except (ValueError, OverflowError):
            return None
        return value if value > 0 else None

    # ─── Information ────────────────────────────────────────────────

    def export_keys(self, session: WalletSession) -> None:
        wallet = session.wallet
        if session.view_wallet:
            self.out("Private view key:")
            self.out(wallet.view_key)
            return
        self.out("Private spend key:")
        self.out(wallet.spend_key)
        self.out("Private view key:")
        self.out(wallet.view_key)

    def status(self, session: WalletSession) -> None:
        node = session.node
        self.out(f"Blockchain height: {node.get_last_known_block_height()}")
        self.out(f"Peers: {node.peers}")

    def balance(self, session: WalletSession) -> None:
        wallet = session.wallet
        self.out(f"Available balance: {self._amount(wallet.unlocked)}")
        self.out(f"Locked (unconfirmed) balance: {self._amount(wallet.locked)}")
        self.out(f"Total balance: {self._amount(wallet.unlocked + wallet.locked)}")
        if session.view_wallet:
            self.out("Please note that view only wallets can only track "
                     "incoming transactions, and so your wallet balance "
                     "may appear inflated.")

    def list_transfers(self, session: WalletSession,
                       incoming: bool, outgoing: bool) -> None:
        shown = 0
        for transfer in session.wallet.transfers:
            if transfer.amount > 0 and not incoming:
                continue
            if transfer.amount < 0 and not outgoing:
                continue
            direction = "Incoming" if transfer.amount > 0 else "Outgoing"
            self.out(f"{direction} transfer: {self._amount(abs(transfer.amount))} "
                     f"(block {transfer.block_height})")
            shown += 1
        if not shown:
            self.out("No transfers to show.")

    def blockchain_height(self, session: WalletSession) -> None:
        self.out(f"Blockchain height: {session.blockchain_height()}")

    # ─── Wallet state ───────────────────────────────────────────────

    def save_csv(self, session: WalletSession) -> None:
        with open(self.csv_path, "w", newline="") as f:
            writer = csv.writer(f)
            writer.writerow(["Block height", "Amount", "Payment ID"])
            for transfer in session.wallet.transfers:
                writer.writerow([transfer.block_height,
                                 self._amount(transfer.amount),
                                 transfer.payment_id])
        logger.info("Wrote %d transfers to %s",
                    len(session.wallet.transfers), self.csv_path)
        self.out(f"CSV successfully written to {self.csv_path}!")

    def save(self, session: WalletSession) -> None:
        if self.wallet_file:
            save_demo_wallet(session.wallet, self.wallet_file)
            logger.info("Wallet saved to %s", self.wallet_file)
        session.wallet.saved = True
        self.out("Saved.")

    def reset(self, session: WalletSession) -> None:
        wallet = session.wallet
        wallet.transfers.clear()
        wallet.unlocked = 0
        wallet.locked = 0
        self.out("Resetting wallet, rescanning from block 0...")

    def change_password(self, session: WalletSession) -> None:
        current = self.ask("Confirm your current password: ")
        if current != session.wallet.password:
            self.out("Incorrect password! Try again.")
            return
        session.wallet.password = self.ask("Enter your new password: ")
        session.wallet.saved = False
        self.out("Your password has been changed!")

    # ─── Sending ────────────────────────────────────────────────────

    def _send(self, session: WalletSession, address: str, height: int) -> None:
        amount = self._parse_amount(self.ask(f"How much {self.ticker} do you want to send?: "))
        if amount is None:
            self.out("Cancelling transaction.")
            return
        if amount > session.wallet.unlocked:
            self.out(f"You don't have enough funds to cover this transaction! "
                     f"Available: {self._amount(session.wallet.unlocked)}")
            return
        session.wallet.unlocked -= amount
        session.wallet.transfers.append(DemoTransfer(-amount, height))
        session.wallet.saved = False
        self.out(f"Transaction has been sent to {address}!")

    def transfer(self, session: WalletSession, height: int) -> None:
        address = self.ask("What address do you want to transfer to?: ").strip()
        if not address:
            self.out("Cancelling transaction.")
            return
        self._send(session, address, height)

    def full_optimize(self, session: WalletSession) -> None:
        wallet = session.wallet
        if wallet.outputs <= FUSION_THRESHOLD:
            self.out("Wallet fully optimized!")
            return
        rounds = 0
        while wallet.outputs > FUSION_THRESHOLD:
            wallet.outputs = max(FUSION_THRESHOLD, wallet.outputs // 2)
            rounds += 1
        self.out(f"Sent {rounds} fusion transactions. Wallet fully optimized!")

    # ─── Address book ───────────────────────────────────────────────

    def add_to_address_book(self, session: WalletSession) -> None:
        name = self.ask("What friendly name do you want to give this address book entry?: ").strip()
        if not name:
            self.out("Cancelling.")
            return
        if name in self.address_book:
            self.out("An address book entry with this name already exists!")
            return
        address = self.ask("What address does this user have?: ").strip()
        if not address:
            self.out("Cancelling.")
            return
        self.address_book[name] = address
        self.out("A new entry has been added to your address book!")

    def delete_from_address_book(self, session: WalletSession) -> None:
        name = self.ask("What address book entry do you want to delete?: ").strip()
        if self.address_book.pop(name, None) is None:
            self.out("Could not find a user with that name!")
            return
        self.out("This entry has been deleted from your address book!")

    def list_address_book(self, session: WalletSession) -> None:
        if not self.address_book:
            self.out("Your address book is empty! Add some people to it first.")
            return
        for name, address in sorted(self.address_book.items()):
            self.out(f"{name}: {address}")

    def send_from_address_book(self, session: WalletSession, height: int) -> None:
        name = self.ask("Who do you want to send to?: ").strip()
        address = self.address_book.get(name)
        if address is None:
            self.out("Could not find a user with that name!")
            return
        self._send(session, address, height)

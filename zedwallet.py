#!/usr/bin/env python3
"""
zedwallet - interactive wallet shell

Reads one command per line and hands it to the wallet command
dispatcher until the user types ``exit`` (or presses Ctrl-D / Ctrl-C).

Commands can be typed by name or by the number shown in the
``help`` and ``advanced`` listings. Tab completes command names,
and history is kept across sessions.

Runs against the in-memory demo wallet:

	python zedwallet.py
	python zedwallet.py --view-wallet --no-colour
"""

import logging
import sys
from pathlib import Path
from typing import Callable, Optional

from prompt_toolkit import PromptSession, prompt
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.history import FileHistory, InMemoryHistory

from config_manager import WalletShellConfig, setup_configuration
from wallet_commands import create_dispatcher
import yaml

from wallet_commands.demo import DemoNode, DemoTransfer, DemoWallet, DemoWalletServices, load_demo_wallet
from wallet_commands.dispatcher import CommandDispatcher, WalletSession
from wallet_commands.listing import list_commands
from wallet_commands.rendering import create_renderer

logger = logging.getLogger(__name__)


# Global console configuration
class ConsoleLog:
	"""Centralized logging and console output configuration"""
	QUIET = False

	@classmethod
	def set_mode(cls, verbose=False, quiet=False, log_file=None):
		cls.QUIET = quiet

		if verbose:
			level, fmt = logging.DEBUG, '🐛 %(name)s: %(message)s'
		elif quiet:
			level, fmt = logging.WARNING, '⚠️  %(message)s'
		else:
			level, fmt = logging.INFO, 'ℹ️  %(message)s'

		handlers = [logging.StreamHandler(sys.stderr)]
		if log_file:
			file_handler = logging.FileHandler(log_file)
			file_handler.setFormatter(logging.Formatter(
				'%(asctime)s %(levelname)s %(name)s: %(message)s'))
			handlers.append(file_handler)

		logging.basicConfig(level=level, format=fmt, handlers=handlers, force=True)

	@classmethod
	def user_print(cls, message, file=None):
		"""Print user-facing messages (always shown unless quiet)"""
		if not cls.QUIET:
			print(message, file=file or sys.stdout)

	@classmethod
	def system_print(cls, message, file=None):
		"""Print important system messages (always shown)"""
		print(message, file=file or sys.stdout)


def make_prompt(ticker: str, address: str, view_wallet: bool) -> str:
	"""Prompt text: ticker plus the first characters of the address"""
	prefix = address[len(ticker):len(ticker) + 5] if address.startswith(ticker) else address[:5]
	mode = " (view)" if view_wallet else ""
	return f"[{ticker} {prefix}{mode}]: "


class WalletShell:
	"""Prompt loop around a CommandDispatcher

	read_line is injectable so the loop can run without a terminal;
	by default a prompt_toolkit session with history and command-name
	completion is used.
	"""

	def __init__(self, dispatcher: CommandDispatcher, ticker: str,
				 read_line: Optional[Callable[[str], str]] = None,
				 history_file: Optional[str] = None,
				 completion: bool = True):
		self.dispatcher = dispatcher
		self.ticker = ticker
		self.history_file = history_file
		self.completion = completion
		self.read_line = read_line or self._create_prompt_session()
		self.commands_run = 0

	def _create_prompt_session(self) -> Callable[[str], str]:
		if self.history_file:
			history_path = Path(self.history_file).expanduser()
			history_path.parent.mkdir(parents=True, exist_ok=True)
			history = FileHistory(str(history_path))
		else:
			history = InMemoryHistory()

		completer = None
		if self.completion:
			# Re-evaluated on every completion so view wallets only see their commands
			completer = WordCompleter(
				lambda: [command.name for command in self.dispatcher.available()])

		session = PromptSession(history=history, completer=completer)
		return session.prompt

	@property
	def prompt_text(self) -> str:
		session = self.dispatcher.session
		return make_prompt(self.ticker, session.wallet_address, session.view_wallet)

	def show_welcome(self):
		out = self.dispatcher.out
		r = self.dispatcher.renderer
		if self.dispatcher.session.view_wallet:
			print(r.warning("Opened a view only wallet. Sending is disabled."), file=out)
		print("Available commands:", file=out)
		list_commands(self.dispatcher.available(), False, out, r)
		print(f"Use {r.suggestion('advanced')} to list the advanced commands.", file=out)

	def run(self) -> int:
		"""Run until exit. Returns the number of lines dispatched."""
		self.show_welcome()

		while True:
			try:
				line = self.read_line(self.prompt_text)
			except (EOFError, KeyboardInterrupt):
				logger.debug("Input closed, leaving the shell")
				break

			line = line.strip()
			self.commands_run += 1

			# Ctrl-C / Ctrl-D while a command asks a question cancels that command only
			try:
				if self.dispatcher.dispatch(line):
					break
			except (EOFError, KeyboardInterrupt):
				logger.debug("Command '%s' interrupted", line)
				print(self.dispatcher.renderer.warning("Cancelled."), file=self.dispatcher.out)

		return self.commands_run


def create_demo_session(config: WalletShellConfig) -> WalletSession:
	"""The demo wallet from wallet_file, or one with some history to look at"""
	wallet_file = config.wallet.wallet_file
	if wallet_file and Path(wallet_file).expanduser().exists():
		logger.info(f"Loading wallet from {wallet_file}")
		wallet = load_demo_wallet(wallet_file)
	else:
		wallet = _sample_wallet()
	return WalletSession(
		view_wallet=config.wallet.view_wallet,
		wallet=wallet,
		wallet_address=config.wallet.address,
		node=DemoNode(height=1000),
	)


def _sample_wallet() -> DemoWallet:
	return DemoWallet(
		unlocked=1234567,
		locked=2500,
		outputs=40,
		transfers=[
			DemoTransfer(1000000, 812),
			DemoTransfer(250000, 901, payment_id="f" * 64),
			DemoTransfer(-15433, 950),
		],
	)


def main(argv=None) -> int:
	config, should_exit, _ = setup_configuration(argv)
	if should_exit:
		return 0 if config is None else 1

	ConsoleLog.set_mode(
		verbose=config.console.verbose,
		quiet=config.console.quiet,
		log_file=config.console.log_file,
	)

	ticker = config.wallet.ticker
	try:
		session = create_demo_session(config)
	except (OSError, ValueError, TypeError, yaml.YAMLError) as e:
		logger.error(f"Could not load wallet file {config.wallet.wallet_file}: {e}")
		return 1
	services = DemoWalletServices(ticker, ask=prompt, wallet_file=config.wallet.wallet_file)
	dispatcher = create_dispatcher(
		session,
		services,
		ticker=ticker,
		renderer=create_renderer(config.console.colour),
	)

	shell = WalletShell(
		dispatcher,
		ticker,
		history_file=config.prompt.history_file,
		completion=config.prompt.completion,
	)

	try:
		shell.run()
	finally:
		if not session.wallet.saved:
			ConsoleLog.user_print("Saving wallet...")
			services.save(session)
		ConsoleLog.system_print("Bye.")

	return 0


if __name__ == "__main__":
	sys.exit(main())

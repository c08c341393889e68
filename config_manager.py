#!/usr/bin/env python3
"""
Configuration system for the zedwallet shell
Supports YAML files, CLI overrides, and programmatic access
"""

import yaml
import argparse
import logging
import re
from pathlib import Path
from typing import Dict, Any, Optional
from dataclasses import dataclass, field
from copy import deepcopy

from wallet_commands.registry import DEFAULT_TICKER


_TICKER_PATTERN = re.compile(r'^[A-Za-z0-9]{1,10}$')


@dataclass
class WalletConfig:
	"""Wallet and currency settings"""
	ticker: str = DEFAULT_TICKER
	address: str = "TRTLv1demoaddress0000000000000000000000000000000000000000000000000000000000000000000000000000"
	view_wallet: bool = False
	wallet_file: Optional[str] = None

	def to_dict(self) -> Dict[str, Any]:
		return {
			'ticker': self.ticker,
			'address': self.address,
			'view_wallet': self.view_wallet,
			'wallet_file': self.wallet_file
		}

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> 'WalletConfig':
		defaults = cls()
		return cls(
			ticker=data.get('ticker', defaults.ticker),
			address=data.get('address', defaults.address),
			view_wallet=data.get('view_wallet', False),
			wallet_file=data.get('wallet_file')
		)


@dataclass
class ConsoleConfig:
	"""Console output and logging level configuration"""
	verbose: bool = False
	quiet: bool = False
	colour: bool = True
	log_file: Optional[str] = None

	def to_dict(self) -> Dict[str, Any]:
		return {
			'verbose': self.verbose,
			'quiet': self.quiet,
			'colour': self.colour,
			'log_file': self.log_file
		}

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> 'ConsoleConfig':
		return cls(
			verbose=data.get('verbose', False),
			quiet=data.get('quiet', False),
			colour=data.get('colour', True),
			log_file=data.get('log_file')
		)


@dataclass
class PromptConfig:
	"""Interactive prompt settings"""
	history_file: str = str(Path.home() / ".zedwallet_history")
	completion: bool = True

	def to_dict(self) -> Dict[str, Any]:
		return {
			'history_file': self.history_file,
			'completion': self.completion
		}

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> 'PromptConfig':
		defaults = cls()
		return cls(
			history_file=data.get('history_file', defaults.history_file),
			completion=data.get('completion', True)
		)


@dataclass
class WalletShellConfig:
	"""Complete configuration for the wallet shell"""
	wallet: WalletConfig = field(default_factory=WalletConfig)
	console: ConsoleConfig = field(default_factory=ConsoleConfig)
	prompt: PromptConfig = field(default_factory=PromptConfig)

	# Metadata
	config_version: str = "1.0"
	description: str = "zedwallet shell configuration"

	def to_dict(self) -> Dict[str, Any]:
		"""Convert to dictionary for YAML serialization"""
		return {
			'config_version': self.config_version,
			'description': self.description,
			'wallet': self.wallet.to_dict(),
			'console': self.console.to_dict(),
			'prompt': self.prompt.to_dict(),
		}

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> 'WalletShellConfig':
		"""Create from dictionary (YAML loading), missing sections get defaults"""
		config = cls()

		if 'config_version' in data:
			config.config_version = str(data['config_version'])
		if 'description' in data:
			config.description = data['description']

		if isinstance(data.get('wallet'), dict):
			config.wallet = WalletConfig.from_dict(data['wallet'])
		if isinstance(data.get('console'), dict):
			config.console = ConsoleConfig.from_dict(data['console'])
		if isinstance(data.get('prompt'), dict):
			config.prompt = PromptConfig.from_dict(data['prompt'])

		return config


class ConfigurationManager:
	"""
	Manages configuration loading, merging, and validation
	"""

	def __init__(self):
		self.config = WalletShellConfig()
		self.config_file_path: Optional[Path] = None
		self.logger = logging.getLogger(__name__)

		# Standard config file locations (in order of preference)
		self.config_search_paths = [
			Path.cwd() / "zedwallet.yaml",  # Current directory
			Path.cwd() / "config" / "zedwallet.yaml",  # Config subdirectory
			Path.home() / ".config" / "zedwallet" / "config.yaml",  # User config
			Path("/etc/zedwallet/config.yaml"),  # System config (Linux)
		]

	def load_config(self, config_file: Optional[str] = None) -> WalletShellConfig:
		"""
		Load configuration from file with fallback chain

		Args:
			config_file: Specific config file path, or None for auto-discovery

		Returns:
			Loaded configuration object (defaults if nothing was found)
		"""
		if config_file:
			config_path = Path(config_file)
			if config_path.exists():
				self.config = self._load_yaml_file(config_path)
				self.config_file_path = config_path
				self.logger.info(f"Loaded config from: {config_path}")
			else:
				self.logger.warning(f"Config file not found: {config_path}")
				self.logger.info("Using default configuration")
				self.config = WalletShellConfig()
		else:
			for path in self.config_search_paths:
				if path.exists():
					self.config = self._load_yaml_file(path)
					self.config_file_path = path
					self.logger.info(f"Auto-discovered config: {path}")
					break
			else:
				self.logger.info("No config file found, using defaults")
				self.config = WalletShellConfig()

		return self.config

	def _load_yaml_file(self, file_path: Path) -> WalletShellConfig:
		"""Load configuration from a YAML file, defaults on any error"""
		try:
			with open(file_path, 'r') as f:
				yaml_data = yaml.safe_load(f) or {}

			if not isinstance(yaml_data, dict):
				self.logger.error(f"Config file {file_path} is not a mapping, using defaults")
				return WalletShellConfig()

			return WalletShellConfig.from_dict(yaml_data)

		except (OSError, yaml.YAMLError) as e:
			self.logger.error(f"Error loading config file {file_path}: {e}")
			return WalletShellConfig()

	def merge_cli_args(self, args: argparse.Namespace) -> WalletShellConfig:
		"""
		Merge CLI arguments into configuration (CLI takes precedence)

		Args:
			args: Parsed command line arguments

		Returns:
			Updated configuration
		"""
		# Wallet settings
		if getattr(args, 'ticker', None):
			self.config.wallet.ticker = args.ticker
		if getattr(args, 'address', None):
			self.config.wallet.address = args.address
		if getattr(args, 'view_wallet', False):
			self.config.wallet.view_wallet = True
		if getattr(args, 'wallet_file', None):
			self.config.wallet.wallet_file = args.wallet_file

		# Console settings
		if getattr(args, 'verbose', False):
			self.config.console.verbose = True
		if getattr(args, 'quiet', False):
			self.config.console.quiet = True
		if getattr(args, 'no_colour', False):
			self.config.console.colour = False
		if getattr(args, 'log_file', None):
			self.config.console.log_file = args.log_file

		# Prompt settings
		if getattr(args, 'history_file', None):
			self.config.prompt.history_file = args.history_file
		if getattr(args, 'no_completion', False):
			self.config.prompt.completion = False

		return self.config

	def save_config(self, file_path: Optional[str] = None) -> bool:
		"""
		Save current configuration to a YAML file

		Args:
			file_path: Target file path, or None to use loaded file path

		Returns:
			True if saved successfully
		"""
		if file_path:
			target_path = Path(file_path)
		elif self.config_file_path:
			target_path = self.config_file_path
		else:
			target_path = Path("zedwallet.yaml")

		try:
			target_path.parent.mkdir(parents=True, exist_ok=True)

			with open(target_path, 'w') as f:
				f.write("# zedwallet shell configuration\n")
				f.write(f"# Version: {self.config.config_version}\n\n")

				yaml.dump(self.config.to_dict(), f,
						  default_flow_style=False,
						  sort_keys=False,
						  indent=2)

			self.logger.info(f"Configuration saved to: {target_path}")
			return True

		except OSError as e:
			self.logger.error(f"Error saving config to {target_path}: {e}")
			return False

	def create_sample_config(self, file_path: str = "zedwallet_sample.yaml") -> bool:
		"""Create a sample configuration file with comments"""
		try:
			with open(file_path, 'w') as f:
				f.write(self._generate_sample_yaml())
			self.logger.info(f"Sample configuration created: {file_path}")
			return True

		except OSError as e:
			self.logger.error(f"Error creating sample config: {e}")
			return False

	def _generate_sample_yaml(self) -> str:
		"""Generate sample YAML with comments"""
		return f"""# zedwallet shell configuration file

# =============================================================================
# WALLET SETTINGS
# =============================================================================
wallet:
  ticker: "{DEFAULT_TICKER}"                 # Currency ticker shown in descriptions and amounts
  address: "{WalletConfig().address}"
  view_wallet: false              # Open as a view only wallet (no sending)
  wallet_file: null               # Demo wallet state is loaded from and saved to this file

# =============================================================================
# CONSOLE MESSAGES LOGGING LEVEL
# =============================================================================
console:
  verbose: false                  # Verbose output (debug logging)
  quiet: false                    # Quiet mode (warnings and errors only)
  colour: true                    # Coloured output in the terminal
  log_file: null                  # Also write log messages to this file

# =============================================================================
# PROMPT SETTINGS
# =============================================================================
prompt:
  history_file: "~/.zedwallet_history"   # Command history across sessions
  completion: true                # Tab completion of command names

config_version: "1.0"
description: "zedwallet shell configuration"
"""

	def validate_config(self) -> tuple[bool, list[str]]:
		"""
		Validate configuration for common issues

		Returns:
			(is_valid, list_of_errors)
		"""
		errors = []

		if not _TICKER_PATTERN.match(str(self.config.wallet.ticker)):
			errors.append(f"Invalid ticker: {self.config.wallet.ticker!r}. "
						  f"Must be 1-10 letters or digits")

		if not self.config.wallet.address:
			errors.append("Wallet address must be set")

		if self.config.console.verbose and self.config.console.quiet:
			errors.append("Console verbose and quiet modes cannot both be enabled")

		if not isinstance(self.config.wallet.view_wallet, bool):
			errors.append(f"Invalid view_wallet: {self.config.wallet.view_wallet!r}. Must be true or false")

		return len(errors) == 0, errors

	def get_config(self) -> WalletShellConfig:
		"""Get a copy of the current configuration"""
		return deepcopy(self.config)

	def update_config(self, updates: Dict[str, Any]) -> bool:
		"""
		Update configuration programmatically

		Args:
			updates: Dictionary of updates in dot notation
					e.g., {"wallet.ticker": "XTE", "console.colour": False}

		Returns:
			True if all updates applied successfully
		"""
		try:
			for key, value in updates.items():
				self._set_nested_attr(self.config, key, value)
			return True
		except AttributeError as e:
			self.logger.error(f"Error updating config: {e}")
			return False

	def _set_nested_attr(self, obj, attr_path: str, value):
		"""Set nested attribute using dot notation"""
		parts = attr_path.split('.')
		for part in parts[:-1]:
			obj = getattr(obj, part)
		if not hasattr(obj, parts[-1]):
			raise AttributeError(f"Unknown config key: {attr_path}")
		setattr(obj, parts[-1], value)


def create_argument_parser():
	"""Argument parser for the wallet shell"""
	parser = argparse.ArgumentParser(
		description='zedwallet interactive wallet shell',
		formatter_class=argparse.RawDescriptionHelpFormatter,
		epilog="""
Examples:
  %(prog)s                                 # Default settings
  %(prog)s --view-wallet                   # Open as a view only wallet
  %(prog)s --ticker XTE --no-colour        # Different ticker, plain output
  %(prog)s -c my_config.yaml               # Use specific config file
  %(prog)s --create-config sample.yaml     # Create sample config file

Configuration:
  Configuration is loaded in this order (later overrides earlier):
  1. Built-in defaults
  2. Configuration file (YAML)
  3. Command line arguments

  Config file search order:
  - zedwallet.yaml (current directory)
  - config/zedwallet.yaml
  - ~/.config/zedwallet/config.yaml
  - /etc/zedwallet/config.yaml
		"""
	)

	# Configuration file handling
	config_group = parser.add_argument_group('Configuration')
	config_group.add_argument(
		'-c', '--config',
		type=str,
		help='Configuration file path (YAML format)'
	)
	config_group.add_argument(
		'--create-config',
		type=str,
		metavar='FILE',
		help='Create sample configuration file and exit'
	)
	config_group.add_argument(
		'--save-config',
		type=str,
		metavar='FILE',
		help='Save current configuration to file'
	)

	# Wallet settings
	wallet_group = parser.add_argument_group('Wallet Settings')
	wallet_group.add_argument(
		'--ticker',
		type=str,
		help='Currency ticker'
	)
	wallet_group.add_argument(
		'--address',
		type=str,
		help='Payment address of the demo wallet'
	)
	wallet_group.add_argument(
		'--view-wallet',
		action='store_true',
		help='Open as a view only wallet'
	)
	wallet_group.add_argument(
		'--wallet-file',
		type=str,
		metavar='FILE',
		help='Load and save the demo wallet state in this file'
	)

	# Prompt settings
	prompt_group = parser.add_argument_group('Prompt')
	prompt_group.add_argument(
		'--history-file',
		type=str,
		help='Command history file'
	)
	prompt_group.add_argument(
		'--no-completion',
		action='store_true',
		help='Disable tab completion of command names'
	)

	# Console settings
	debug_group = parser.add_argument_group('Debug Options')
	debug_group.add_argument(
		'-v', '--verbose',
		action='store_true',
		help='Enable verbose debug output'
	)
	debug_group.add_argument(
		'-q', '--quiet',
		action='store_true',
		help='Quiet mode (minimal output)'
	)
	debug_group.add_argument(
		'--no-colour',
		action='store_true',
		help='Plain output without terminal colours'
	)
	debug_group.add_argument(
		'--log-file',
		type=str,
		help='Log file path'
	)

	return parser


def setup_configuration(argv=None) -> tuple[Optional[WalletShellConfig], bool, Optional[ConfigurationManager]]:
	"""
	Setup configuration system with CLI integration

	Args:
		argv: Command line arguments (None for sys.argv)

	Returns:
		(config_object, should_exit, config_manager)
		should_exit is True with a None config after --create-config,
		and True with a config when validation failed.
	"""
	parser = create_argument_parser()
	args = parser.parse_args(argv)

	manager = ConfigurationManager()

	# Handle special commands first
	if args.create_config:
		if manager.create_sample_config(args.create_config):
			print(f"Sample configuration created: {args.create_config}")
			print(f"Edit the file and run again with: -c {args.create_config}")
		return None, True, None

	manager.load_config(args.config)

	# CLI overrides config file
	config = manager.merge_cli_args(args)

	is_valid, errors = manager.validate_config()
	if not is_valid:
		print("Configuration errors:")
		for error in errors:
			print(f"  ✗ {error}")
		return config, True, manager

	if args.save_config:
		if manager.save_config(args.save_config):
			print(f"Configuration saved to: {args.save_config}")

	return config, False, manager

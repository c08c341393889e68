"""
Tests for the zedwallet prompt loop

Run with:  python -m pytest test_zedwallet.py -v
"""

import io
import logging

import pytest

from config_manager import WalletShellConfig
from wallet_commands import create_dispatcher
from wallet_commands.demo import DemoTransfer, DemoWallet, DemoWalletServices, save_demo_wallet
from zedwallet import ConsoleLog, WalletShell, create_demo_session, main, make_prompt


def scripted(lines):
    """A read_line that replays lines, then behaves like Ctrl-D"""
    remaining = list(lines)
    prompts = []

    def read_line(prompt_text):
        prompts.append(prompt_text)
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    read_line.prompts = prompts
    return read_line


def make_shell(lines, view_wallet=False):
    config = WalletShellConfig()
    config.wallet.view_wallet = view_wallet
    session = create_demo_session(config)
    out = io.StringIO()
    services = DemoWalletServices("TRTL", ask=lambda q: "", out=lambda line: print(line, file=out))
    dispatcher = create_dispatcher(session, services, out=out)
    read_line = scripted(lines)
    return WalletShell(dispatcher, "TRTL", read_line=read_line), out, read_line


class TestPrompt:

    def test_prompt_shows_address_prefix(self):
        assert make_prompt("TRTL", "TRTLv1abcdef", False) == "[TRTL v1abc]: "

    def test_prompt_marks_view_wallet(self):
        assert make_prompt("TRTL", "TRTLv1abcdef", True) == "[TRTL v1abc (view)]: "

    def test_prompt_for_foreign_address(self):
        assert make_prompt("XTE", "abcdefgh", False) == "[XTE abcde]: "


class TestWalletShell:

    def test_exit_stops_the_loop(self):
        shell, out, read_line = make_shell(["balance", "exit", "status"])
        assert shell.run() == 2
        assert "Available balance" in out.getvalue()
        assert "Peers" not in out.getvalue()

    def test_input_is_trimmed(self):
        shell, out, _ = make_shell(["   exit   "])
        assert shell.run() == 1

    def test_end_of_input_stops_the_loop(self):
        shell, out, _ = make_shell(["address"])
        assert shell.run() == 1

    def test_keyboard_interrupt_stops_the_loop(self):
        config = WalletShellConfig()
        dispatcher = create_dispatcher(
            create_demo_session(config),
            DemoWalletServices("TRTL", ask=lambda q: ""),
            out=io.StringIO(),
        )

        def interrupted(prompt_text):
            raise KeyboardInterrupt

        assert WalletShell(dispatcher, "TRTL", read_line=interrupted).run() == 0

    @pytest.mark.parametrize("interrupt", [KeyboardInterrupt, EOFError])
    def test_interrupted_question_cancels_only_that_command(self, interrupt):
        config = WalletShellConfig()
        out = io.StringIO()

        def ask(question):
            raise interrupt

        dispatcher = create_dispatcher(
            create_demo_session(config),
            DemoWalletServices("TRTL", ask=ask, out=lambda line: print(line, file=out)),
            out=out,
        )
        shell = WalletShell(dispatcher, "TRTL", read_line=scripted(["transfer", "balance", "exit"]))
        assert shell.run() == 3
        text = out.getvalue()
        assert "Cancelled." in text
        assert "Available balance" in text

    def test_bad_input_keeps_the_session(self):
        shell, out, _ = make_shell(["", "nope", "99", "exit"])
        assert shell.run() == 4
        text = out.getvalue()
        assert "Unknown command: nope" in text
        assert "number from 1 to 21" in text

    def test_welcome_lists_basic_commands(self):
        shell, out, _ = make_shell(["exit"])
        shell.run()
        text = out.getvalue()
        assert " 1\taddress" in text
        assert " 7\ttransfer" in text
        assert "ab_add" not in text

    def test_view_wallet_welcome(self):
        shell, out, read_line = make_shell(["transfer", "exit"], view_wallet=True)
        shell.run()
        text = out.getvalue()
        assert "view only wallet" in text
        assert "This command is not available in a view only wallet..." in text
        assert read_line.prompts[0].endswith("(view)]: ")


class TestDemoSession:

    def test_sample_wallet_without_wallet_file(self):
        session = create_demo_session(WalletShellConfig())
        assert session.wallet.unlocked == 1234567
        assert session.node.get_last_known_block_height() == 1000

    def test_missing_wallet_file_uses_sample_wallet(self, tmp_path):
        config = WalletShellConfig()
        config.wallet.wallet_file = str(tmp_path / "absent.yaml")
        assert create_demo_session(config).wallet.unlocked == 1234567

    def test_wallet_file_is_loaded(self, tmp_path):
        path = tmp_path / "wallet.yaml"
        save_demo_wallet(DemoWallet(unlocked=42, transfers=[DemoTransfer(42, 3)]), path)
        config = WalletShellConfig()
        config.wallet.wallet_file = str(path)
        session = create_demo_session(config)
        assert session.wallet.unlocked == 42
        assert session.wallet.transfers == [DemoTransfer(42, 3)]


class TestMain:

    def test_create_config_returns_zero(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert main(["--create-config", "sample.yaml"]) == 0

    def test_invalid_config_returns_one(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert main(["--ticker", "not valid!"]) == 1

    def test_unreadable_wallet_file_returns_one(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        (tmp_path / "wallet.yaml").write_text("just a string\n")
        assert main(["--wallet-file", "wallet.yaml"]) == 1


class TestConsoleLog:

    @pytest.fixture(autouse=True)
    def reset_mode(self):
        yield
        ConsoleLog.set_mode()

    def test_verbose_sets_debug(self):
        ConsoleLog.set_mode(verbose=True)
        assert logging.getLogger().level == logging.DEBUG

    def test_quiet_sets_warning_and_hides_user_output(self, capsys):
        ConsoleLog.set_mode(quiet=True)
        assert logging.getLogger().level == logging.WARNING
        ConsoleLog.user_print("hidden")
        ConsoleLog.system_print("shown")
        assert capsys.readouterr().out == "shown\n"

    def test_log_file(self, tmp_path):
        log_path = tmp_path / "shell.log"
        ConsoleLog.set_mode(log_file=str(log_path))
        logging.getLogger("zedwallet.test").info("hello log")
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "hello log" in log_path.read_text()

"""
Tests for application bootstrap, the console loop and logging setup.
"""

import io
import logging

import pytest

from smartchat.config import ConfigManager
from smartchat.main import SmartChatApplication, build_parser
from smartchat.utils import configure_logging, get_logger, reset_loggers


class TestSmartChatApplication:
    """Wiring with a scripted model."""

    @pytest.fixture(autouse=True)
    def setup(self, tmp_path, llm):
        """Create an application whose config and logs live in tmp_path."""
        self.llm = llm
        self.config = ConfigManager(str(tmp_path / "config"))
        self.config.set("logging.log_dir", str(tmp_path / "logs"))
        self.config.set("memory.max_history_size", 4)
        self.app = SmartChatApplication(config=self.config, llm_service=llm)
        yield
        self.app.shutdown()
        reset_loggers()

    def test_initialize_wires_components(self):
        assert self.app.initialize(start_sweeper=False)

        assert self.app.registry.names() == ["calculator", "weather", "time", "converter"]
        assert self.app.registry.initialized
        assert self.app.memory.max_history_size == 4
        assert self.app.chat_service.max_iterations == 5
        assert self.app.sweeper is None

    def test_initialize_starts_sweeper(self):
        self.config.set("memory.sweep_interval_minutes", 15)

        assert self.app.initialize()

        assert self.app.sweeper.running
        assert self.app.sweeper.interval_minutes == 15

    def test_initialize_reports_failure(self, monkeypatch):
        monkeypatch.delenv("GOOGLE_API_KEY", raising=False)
        app = SmartChatApplication(config=self.config)

        assert not app.initialize(start_sweeper=False)

    def test_console_session(self):
        self.app.initialize(start_sweeper=False)
        self.llm.script("Hi! How can I help?", "You said hello.")
        lines = iter(["hello", "", "/history", "/stats", "/summary", "/clear", "/history", "quit"])
        output = io.StringIO()

        exit_code = self.app.run_console(
            session_id="console-test",
            input_fn=lambda prompt: next(lines),
            output=output,
        )

        text = output.getvalue()
        assert exit_code == 0
        assert "Assistant: Hi! How can I help?" in text
        assert "USER: hello\n\nASSISTANT: Hi! How can I help?" in text
        assert "Active sessions: 1, messages: 2, max history: 4" in text
        assert "You said hello." in text
        assert "Conversation cleared." in text
        assert "(empty)" in text
        assert text.rstrip().endswith("Goodbye!")

    def test_console_stops_at_end_of_input(self):
        self.app.initialize(start_sweeper=False)

        def no_input(prompt):
            raise EOFError

        assert self.app.run_console(input_fn=no_input, output=io.StringIO()) == 0


class TestCommandLine:
    """Argument parsing."""

    def test_serve_arguments(self):
        args = build_parser().parse_args(["--config-dir", "cfg", "serve", "--port", "9000"])

        assert args.command == "serve"
        assert args.config_dir == "cfg"
        assert args.port == 9000
        assert args.host is None

    def test_chat_arguments(self):
        args = build_parser().parse_args(["chat", "--session", "abc"])

        assert args.command == "chat"
        assert args.session == "abc"


class TestLogging:
    """Logger configuration."""

    @pytest.fixture(autouse=True)
    def setup(self):
        yield
        reset_loggers()

    def test_child_loggers_share_namespace(self):
        assert get_logger("chat_service").name == "smartchat.chat_service"
        assert get_logger().name == "smartchat"

    def test_configure_logging_writes_file(self, tmp_path):
        config = ConfigManager(str(tmp_path / "config"))
        config.set("logging.log_dir", str(tmp_path / "logs"))
        config.set("logging.level", "WARNING")

        configured = configure_logging(config)
        get_logger("test").info("written to file")
        for handler in configured.get_logger().handlers:
            handler.flush()

        log_text = (tmp_path / "logs" / "smartchat.log").read_text(encoding="utf-8")
        console = [
            h for h in configured.get_logger().handlers
            if not isinstance(h, logging.FileHandler)
        ]
        assert "written to file" in log_text
        assert console[0].level == logging.WARNING

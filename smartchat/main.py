#!/usr/bin/env python3
"""
Main entry point for SmartChat.

Wires configuration, logging, tools, the language model, session memory and
the chat service, then either serves the HTTP API or runs a console chat.
"""

import argparse
import sys
import uuid
from datetime import timedelta
from typing import Callable, List, Optional, TextIO

from . import __version__
from .config import ConfigManager, get_config_manager
from .services import (
    BaseLLMService,
    ChatService,
    SessionMemory,
    SessionSweeper,
    create_llm_service_from_config,
)
from .tools import CalculatorTool, ConverterTool, TimeTool, ToolRegistry, WeatherTool
from .utils import configure_logging, get_logger

CONSOLE_HELP = "Commands: /clear, /history, /summary, /stats, quit"


class SmartChatApplication:
    """Main application controller."""

    def __init__(
        self,
        config: Optional[ConfigManager] = None,
        llm_service: Optional[BaseLLMService] = None,
    ) -> None:
        """
        Initialize the application.

        Args:
            config: Configuration manager (global instance if None)
            llm_service: Completion client (built from configuration if None)
        """
        self.config = config or get_config_manager()
        self.logger = get_logger("app")
        self.llm_service = llm_service
        self.registry: Optional[ToolRegistry] = None
        self.memory: Optional[SessionMemory] = None
        self.chat_service: Optional[ChatService] = None
        self.sweeper: Optional[SessionSweeper] = None

    def initialize(self, start_sweeper: bool = True) -> bool:
        """
        Initialize application components.

        Returns:
            True if initialization successful
        """
        try:
            configure_logging(self.config)

            self.logger.info("=" * 60)
            self.logger.info("SmartChat - Conversational Assistant")
            self.logger.info(f"Version {__version__}")
            self.logger.info("=" * 60)

            self.registry = self._initialize_tools()

            if self.llm_service is None:
                self.llm_service = create_llm_service_from_config(self.config)
            self.logger.info(
                f"LLM service ready: {self.llm_service.provider_name}/{self.llm_service.model_name}"
            )

            self.memory = SessionMemory(
                max_history_size=self.config.get("memory.max_history_size", 20),
                max_message_age=timedelta(hours=self.config.get("memory.max_message_age_hours", 24)),
            )

            self.chat_service = ChatService(
                llm_service=self.llm_service,
                registry=self.registry,
                memory=self.memory,
                max_iterations=self.config.get("orchestrator.max_iterations", 5),
            )

            if start_sweeper and self.config.get("memory.sweep_enabled", True):
                self.sweeper = SessionSweeper(
                    memory=self.memory,
                    interval_minutes=self.config.get("memory.sweep_interval_minutes", 60),
                )
                self.sweeper.start()
            else:
                self.logger.info("Session sweeper disabled")

            self.logger.info("Application initialized successfully")
            return True

        except Exception as e:
            self.logger.error(f"Initialization failed: {e}", exc_info=True)
            return False

    def _initialize_tools(self) -> ToolRegistry:
        """
        Register the built-in tools.

        Returns:
            Initialized ToolRegistry
        """
        self.logger.info("Initializing tool system...")

        registry = ToolRegistry()
        registry.register(CalculatorTool())
        registry.register(WeatherTool(
            api_key=self.config.get_api_key(
                "openweather_api_key",
                self.config.get("tools.weather.api_key_env", "OPENWEATHER_API_KEY"),
            ),
            timeout_seconds=self.config.get("tools.weather.timeout_seconds", 10),
        ))
        registry.register(TimeTool(
            default_timezone=self.config.get("tools.time.default_timezone", "Asia/Kolkata"),
        ))
        registry.register(ConverterTool())
        registry.mark_initialized()

        summary = registry.get_summary()
        self.logger.info(f"Tool system ready: {summary['total_tools']} tools {summary['tools']}")

        return registry

    def serve(self, host: Optional[str] = None, port: Optional[int] = None) -> int:
        """Run the HTTP API until interrupted."""
        import uvicorn

        from .api import app, init_api

        init_api(self.chat_service, self.config.get("api.max_message_length", 2000))

        host = host or self.config.get("api.host", "0.0.0.0")
        port = port or self.config.get("api.port", 8080)
        self.logger.info(f"Starting API server on {host}:{port}")

        uvicorn.run(app, host=host, port=port, log_config=None)
        return 0

    def run_console(
        self,
        session_id: Optional[str] = None,
        input_fn: Callable[[str], str] = input,
        output: TextIO = sys.stdout,
    ) -> int:
        """
        Interactive chat on the terminal.

        Args:
            session_id: Session to continue (new one if None)
            input_fn: Line reader
            output: Stream replies are written to
        """
        session_id = session_id or f"console-{uuid.uuid4()}"
        print(f"SmartChat {__version__} (session {session_id})", file=output)
        print(CONSOLE_HELP, file=output)

        while True:
            try:
                line = input_fn("You: ").strip()
            except EOFError:
                break

            if not line:
                continue
            if line.lower() in ("quit", "exit"):
                break

            if line == "/clear":
                self.chat_service.clear(session_id)
                print("Conversation cleared.", file=output)
            elif line == "/history":
                print(self.chat_service.formatted_history(session_id) or "(empty)", file=output)
            elif line == "/summary":
                print(self.chat_service.summary(session_id), file=output)
            elif line == "/stats":
                stats = self.chat_service.statistics()
                print(
                    f"Active sessions: {stats.active_sessions}, "
                    f"messages: {stats.total_messages}, "
                    f"max history: {stats.max_history_size}",
                    file=output,
                )
            else:
                print(f"Assistant: {self.chat_service.chat(session_id, line)}", file=output)

        print("Goodbye!", file=output)
        return 0

    def shutdown(self) -> None:
        """Clean shutdown of the application."""
        self.logger.info("Shutting down application...")

        if self.sweeper:
            self.sweeper.stop()

        self.logger.info("Application shutdown complete")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="smartchat",
        description="Conversational assistant with tool calling and session memory",
    )
    parser.add_argument(
        '--config-dir',
        default='config',
        help='Directory holding app_config.json and credentials (default: config)',
    )

    subparsers = parser.add_subparsers(dest='command')

    serve = subparsers.add_parser('serve', help='Run the HTTP API')
    serve.add_argument('--host', help='Bind address (default from config)')
    serve.add_argument('--port', type=int, help='Port (default from config)')

    chat = subparsers.add_parser('chat', help='Chat on the terminal')
    chat.add_argument('--session', help='Session id to continue')

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point.

    Returns:
        Exit code
    """
    args = build_parser().parse_args(argv)
    command = args.command or 'serve'

    app = SmartChatApplication(config=get_config_manager(args.config_dir))

    if not app.initialize():
        print("\n" + "=" * 60)
        print("ERROR: Application initialization failed")
        print("=" * 60)
        print("\nCheck the log output above. A Gemini API key is required unless")
        print("llm.provider is set to 'ollama' in config/app_config.json.")
        print("=" * 60)
        return 1

    try:
        if command == 'chat':
            exit_code = app.run_console(session_id=args.session)
        else:
            exit_code = app.serve(host=args.host, port=args.port)
    except KeyboardInterrupt:
        print("\n\nReceived interrupt signal")
        exit_code = 0
    finally:
        app.shutdown()

    return exit_code


if __name__ == "__main__":
    sys.exit(main())

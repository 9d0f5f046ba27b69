"""Main CLI loop for interactive chat."""

import logging
import sys
from typing import TextIO

from .client import ChatAPIClient
from .config import CLIConfig
from .formatter import ResponseFormatter

logger = logging.getLogger(__name__)

EXIT_COMMANDS = ("exit", "quit", "q")
HISTORY_COMMAND = "/history"


class RelayCLI:
    """Interactive CLI for the chat relay."""

    def __init__(
        self,
        config: CLIConfig,
        input_stream: TextIO = sys.stdin,
        output_stream: TextIO = sys.stdout,
        client: ChatAPIClient | None = None,
    ):
        """Initialize the CLI.

        Parameters
        ----------
        config
            CLI configuration.
        input_stream
            Input stream for user input (default: stdin).
        output_stream
            Output stream for responses (default: stdout).
        client
            API client; built from *config* when omitted.
        """
        self.config = config
        self.input_stream = input_stream
        self.output_stream = output_stream
        self.client = client or ChatAPIClient(config)
        self.formatter = ResponseFormatter(output_stream)

    async def run(self) -> None:
        """Run the interactive CLI loop."""
        try:
            await self._start()
            while True:
                try:
                    line = self._get_user_input()
                    message = line.strip()
                    if not message:
                        continue

                    if message.lower() in EXIT_COMMANDS:
                        self._print("Goodbye!\n")
                        break

                    if message == HISTORY_COMMAND:
                        self.formatter.show_history(await self.client.history())
                        continue

                    self.formatter.show_reply(await self.client.chat(message))

                except KeyboardInterrupt:
                    self._print("\n\nInterrupted. Use 'exit' or 'quit' to exit.\n")
                except EOFError:
                    self._print("\nGoodbye!\n")
                    break
        finally:
            await self.client.close()

    async def _start(self) -> None:
        self._print("Chat Relay CLI\n")
        self._print(f"Connected to: {self.config.base_url}\n")
        self._print(f"Session: {self.config.session_id}\n")
        self.formatter.show_health(await self.client.health())
        self._print(
            "Type your message and press Enter. "
            f"'{HISTORY_COMMAND}' shows history, 'exit' or 'quit' exits.\n\n"
        )
        self.formatter.show_history(await self.client.history())

    def _get_user_input(self) -> str:
        self._print("> ")
        line = self.input_stream.readline()
        if not line:
            raise EOFError
        return line.rstrip("\n\r")

    def _print(self, text: str) -> None:
        """Print text to output stream."""
        self.output_stream.write(text)
        self.output_stream.flush()


async def main(
    host: str = "localhost",
    port: int = 3000,
    session_id: str | None = None,
    history_limit: int = 10,
    debug: bool = False,
) -> None:
    """Main entry point for the CLI.

    Parameters
    ----------
    host
        Server host.
    port
        Server port.
    session_id
        Resume an existing session instead of starting a fresh one.
    history_limit
        Turns shown at startup and by ``/history``.
    debug
        Enable debug logging.
    """
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.INFO,
        format="%(levelname)s: %(message)s",
        stream=sys.stderr,
    )

    config = CLIConfig(host=host, port=port, history_limit=history_limit)
    if session_id:
        config = config.model_copy(update={"session_id": session_id})

    await RelayCLI(config).run()

"""Terminal rendering for replies, history and errors."""

from typing import TextIO


class ResponseFormatter:
    """Formats relay API results for a terminal."""

    def __init__(self, output: TextIO):
        """Initialize the formatter.

        Parameters
        ----------
        output
            File-like object to write output to.
        """
        self.output = output

    def show_reply(self, result: dict) -> None:
        """Print a ``/api/chat`` result (reply or error)."""
        if result.get("success"):
            self._print(f"\nBot: {result.get('response', '')}\n\n")
        else:
            self.show_error(result)

    def show_history(self, result: dict) -> None:
        """Print a ``/api/history`` result, oldest turn first."""
        if not result.get("success"):
            self.show_error(result)
            return
        messages = result.get("messages") or []
        if not messages:
            self._print("(no previous messages)\n\n")
            return
        for turn in messages:
            stamp = turn.get("timestamp") or ""
            self._print(f"[{stamp}] You: {turn.get('userMessage', '')}\n")
            self._print(f"[{stamp}] Bot: {turn.get('botResponse', '')}\n")
        self._print("\n")

    def show_health(self, result: dict) -> None:
        if result.get("status") != "ok":
            self.show_error(result)
            return
        self._print(f"Store: {result.get('store')}  Webhook: {result.get('relay')}\n")

    def show_error(self, result: dict) -> None:
        message = result.get("error", "Unknown error")
        code = result.get("code", "UNKNOWN")
        self._print(f"\n❌ Error [{code}]: {message}\n")
        details = result.get("details")
        if details:
            self._print(f"   {details}\n")
        self._print("\n")

    def _print(self, text: str) -> None:
        """Print text to output."""
        self.output.write(text)
        self.output.flush()

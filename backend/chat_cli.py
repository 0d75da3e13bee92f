"""
Terminal chat client for the Gemini Chat Relay.

Usage:
    python chat_cli.py [--api-url http://localhost:8000] [--system-prompt "..."]

Commands:
    /clear           Start a new conversation
    /export [path]   Save the conversation as JSON
    /quit            Exit
"""
import argparse
import sys
from datetime import datetime
from typing import Callable, Iterable

from config import RELAY_URL, REQUEST_TIMEOUT, SYSTEM_PROMPT
from client import ConversationStore, RelayClient


class TurnPrinter:
    """Store listener that prints turns as they are appended."""

    def __init__(self, out: Callable[[str], None] = print):
        self.out = out
        self.printed = 0

    def __call__(self, store: ConversationStore) -> None:
        turns = store.turns
        if len(turns) < self.printed:
            # Session was cleared
            self.printed = 0
            return
        for turn in turns[self.printed:]:
            self.out(self.format_turn(turn))
        self.printed = len(turns)

    @staticmethod
    def format_turn(turn) -> str:
        when = datetime.fromisoformat(turn.timestamp).astimezone().strftime("%H:%M")
        speaker = "You" if turn.role == "user" else "Assistant"
        marker = " [error]" if turn.is_error else ""
        return f"[{when}] {speaker}{marker}: {turn.text}"


def run_chat(store: ConversationStore, lines: Iterable[str], out: Callable[[str], None] = print) -> None:
    """
    Drive a chat session from an iterable of input lines.

    Args:
        store: Conversation store to feed
        lines: User input, one submission per line
        out: Output function
    """
    printer = TurnPrinter(out)
    unsubscribe = store.subscribe(printer)

    try:
        for line in lines:
            command = line.strip()
            if command == "/quit":
                break
            if command == "/clear":
                store.clear()
                out("Conversation cleared.")
                continue
            if command.startswith("/export"):
                parts = command.split(maxsplit=1)
                try:
                    path = store.export_to_file(parts[1] if len(parts) > 1 else None)
                except OSError as e:
                    out(f"ERROR: could not export conversation: {e}")
                    continue
                out(f"Conversation exported to {path}")
                continue
            store.append_user_turn(line)
    finally:
        unsubscribe()


def _input_lines(prompt: str = "> ") -> Iterable[str]:
    while True:
        try:
            yield input(prompt)
        except (EOFError, KeyboardInterrupt):
            return


def main():
    """Main entry point for the terminal chat client."""
    parser = argparse.ArgumentParser(
        description="Terminal chat client for the Gemini Chat Relay"
    )
    parser.add_argument(
        "--api-url",
        default=RELAY_URL,
        help=f"Base URL for the relay API (default: {RELAY_URL})"
    )
    parser.add_argument(
        "--system-prompt",
        default=SYSTEM_PROMPT,
        help="System prompt sent with every request"
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=REQUEST_TIMEOUT,
        help=f"Request timeout in seconds (default: {REQUEST_TIMEOUT})"
    )

    args = parser.parse_args()

    relay_client = RelayClient(api_url=args.api_url, timeout=args.timeout)
    store = ConversationStore(relay_client, system_prompt=args.system_prompt)

    print(f"Connected to {args.api_url}. Type /quit to exit.")
    run_chat(store, _input_lines())
    sys.exit(0)


if __name__ == "__main__":
    main()

"""Output formatting for combo-skills CLI commands (JSON and text modes)."""
from __future__ import annotations

import json
import sys
from typing import Any, Iterable, Optional


class OutputFormatter:
    """Unified output formatter for CLI commands."""

    def __init__(self, json_mode: bool = False, indent: int = 2):
        self.json_mode = json_mode
        self.indent = indent

    def error(
        self,
        error: Exception,
        message: Optional[str] = None,
        *,
        error_code: str = "error",
    ) -> None:
        """Report ``error`` on stderr.

        JSON mode prints the exception's ``to_json_error()`` payload when it
        has one.
        """
        msg = message or str(error)
        if self.json_mode:
            to_json = getattr(error, "to_json_error", None)
            output = to_json() if callable(to_json) else {"message": msg}
            output = {"error": error_code, **output, "message": msg}
            print(json.dumps(output, indent=self.indent, default=str), file=sys.stderr)
        else:
            print(f"Error: {msg}", file=sys.stderr)

    def json_output(self, data: Any) -> None:
        print(json.dumps(data, indent=self.indent, default=str))

    def text(self, message: str) -> None:
        print(message)

    def text_kv(self, key: str, value: Any, prefix: str = "  ") -> None:
        if not self.json_mode:
            print(f"{prefix}{key}: {value}")

    def text_list(self, label: str, items: Iterable[str], prefix: str = "  - ") -> None:
        """Print ``label`` followed by one line per item (text mode, non-empty only)."""
        items = list(items)
        if self.json_mode or not items:
            return
        print(label)
        for item in items:
            print(f"{prefix}{item}")


__all__ = [
    "OutputFormatter",
]

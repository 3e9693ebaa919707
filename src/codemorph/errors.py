"""Error types with formatted context.

The tokenizer, diff engine, highlight mapper, and scheduler never raise on
input data; only configuration and command-line input can be rejected.
"""

from __future__ import annotations

from pathlib import Path


class ConfigError(Exception):
    """Raised on an invalid configuration file or value."""

    def __init__(self, message: str, path: Path | None = None, key: str | None = None) -> None:
        self.message = message
        self.path = path
        self.key = key
        super().__init__(self.format())

    def format(self) -> str:
        result = f"error: {self.message}"
        if self.path is not None:
            location = str(self.path)
            if self.key is not None:
                location += f" [{self.key}]"
            result += f"\n  --> {location}"
        elif self.key is not None:
            result += f"\n  --> [{self.key}]"
        return result

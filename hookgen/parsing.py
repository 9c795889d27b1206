"""
Tolerant parsing of user-supplied example and parameter text.

Examples pasted from API docs are often almost-JSON: trailing commas,
unquoted keys or a missing comma between two members. Text is parsed as
JSON5 first; on failure a small fixed set of textual repairs is applied and
the parse is retried once.
"""

import re
from typing import Any, Protocol

import json5

from .codegen.core.generator import GeneratorError
from .logging_config import get_logger

logger = get_logger(__name__)


class InvalidInputError(GeneratorError):
    """Raised when example/params text or a request field cannot be used."""

    pass


# `}`, `]` or `"` directly followed by a quoted key
_AFTER_CLOSER = re.compile(r'([}\]"])(?!\s*[,}])\s*"')
# bare number directly followed by a quoted key
_AFTER_NUMBER = re.compile(r'(\d+)(?!\s*[,}])\s*"')


class InputParser(Protocol):
    """Anything that turns raw text into a JSON value."""

    def parse(self, text: str) -> Any: ...


def repair(text: str) -> str:
    """Insert the separators most commonly lost when hand-editing JSON."""
    repaired = _AFTER_CLOSER.sub(r'\1, "', text)
    return _AFTER_NUMBER.sub(r'\1, "', repaired)


class TolerantParser:
    """JSON5 parser with a single repair-and-retry fallback."""

    def parse(self, text: str) -> Any:
        try:
            return json5.loads(text)
        except ValueError as first:
            logger.debug("Relaxed parse failed (%s); retrying with repairs", first)
            try:
                value = json5.loads(repair(text))
            except ValueError as second:
                raise InvalidInputError(
                    f"Invalid JSON: {first}. Repair attempt failed: {second}"
                ) from second
            logger.warning("Input was not valid JSON5; parsed after repair")
            return value

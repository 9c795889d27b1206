"""
Naming utilities for safe code generation.

Handles identifier sanitization, collision resolution across a set of
keys, and the feature-name case helpers shared by every emitted fragment.
"""

import json
import re
from dataclasses import dataclass, field
from typing import Iterable, Iterator, List, Optional, Set, Tuple
from enum import Enum


IDENTIFIER_PATTERN = re.compile(r"^[a-zA-Z_$][a-zA-Z0-9_$]*$")
_SEPARATOR_RUN = re.compile(r"[-_\s]+(.)?")
_DISALLOWED = re.compile(r"[^a-zA-Z0-9_$]")

DIGIT_PREFIX = "var"
RESERVED_PREFIX = "_"
DEFAULT_IDENTIFIER = "variable"


class NamingCase(Enum):
    """Case styles used for generated names."""

    CAMEL_CASE = "camel"  # getUsers
    PASCAL_CASE = "pascal"  # GetUsers


@dataclass
class VariableMapping:
    """Ordered (original key, safe identifier) pairs from one resolution pass."""

    pairs: List[Tuple[str, str]] = field(default_factory=list)

    def __iter__(self) -> Iterator[Tuple[str, str]]:
        return iter(self.pairs)

    def __len__(self) -> int:
        return len(self.pairs)

    def __bool__(self) -> bool:
        return bool(self.pairs)

    @property
    def keys(self) -> List[str]:
        return [key for key, _ in self.pairs]

    @property
    def identifiers(self) -> List[str]:
        return [safe for _, safe in self.pairs]

    def identifier_for(self, key: str) -> str:
        """Return the safe identifier assigned to ``key``."""
        for original, safe in self.pairs:
            if original == key:
                return safe
        raise KeyError(key)

    def member(self, key: str, value: Optional[str] = None) -> str:
        """
        Render one object member binding ``key``.

        Without ``value`` this is the shorthand form used both for
        destructuring patterns and object literals: ``id`` when the key is
        already the identifier, ``"post-id": postId`` otherwise.
        """
        safe = self.identifier_for(key)
        if value is None:
            if key == safe:
                return key
            return f"{quote_key(key)}: {safe}"
        label = key if IDENTIFIER_PATTERN.match(key) else quote_key(key)
        return f"{label}: {value}"

    def members(self, keys: Optional[Iterable[str]] = None) -> List[str]:
        """Render members for ``keys`` (all mapped keys by default)."""
        selected = self.keys if keys is None else list(keys)
        return [self.member(key) for key in selected]


def quote_key(key: str) -> str:
    """Quote a property name as a double-quoted string literal."""
    return json.dumps(key, ensure_ascii=False)


class NameSanitizer:
    """Turns arbitrary keys into valid identifiers for the target language."""

    def __init__(self, reserved_words: Set[str] = None):
        """
        Initialize name sanitizer.

        Args:
            reserved_words: Set of language reserved words
        """
        self.reserved_words = frozenset(reserved_words or ())

    def is_valid_identifier(self, name: str) -> bool:
        return bool(IDENTIFIER_PATTERN.match(name)) and name not in self.reserved_words

    def sanitize(self, key: str) -> str:
        """
        Sanitize a key into a valid identifier.

        Rules, in order: keep valid identifiers unchanged; collapse separator
        runs into camel-case boundaries and strip disallowed characters;
        prefix a leading digit; prefix reserved words; fall back to a default
        name when nothing is left.
        """
        if self.is_valid_identifier(key):
            safe = key
        else:
            safe = _SEPARATOR_RUN.sub(
                lambda m: m.group(1).upper() if m.group(1) else "", key
            )
            safe = _DISALLOWED.sub("", safe)

            if safe[:1].isdigit():
                safe = f"{DIGIT_PREFIX}{safe}"

            if safe in self.reserved_words:
                safe = f"{RESERVED_PREFIX}{safe}"

            if not safe:
                safe = DEFAULT_IDENTIFIER

        return safe

    def resolve_all(
        self, keys: Iterable[str], taken: Iterable[str] = ()
    ) -> VariableMapping:
        """
        Sanitize every key and make the results unique.

        Keys are processed in order against a running set of used
        identifiers (seeded with ``taken``); a colliding identifier gets
        ``_2``, ``_3``, ... appended until free. Repeated keys are mapped once.
        """
        used: Set[str] = set(taken)
        mapping = VariableMapping()
        seen_keys: Set[str] = set()

        for key in keys:
            if key in seen_keys:
                continue
            seen_keys.add(key)

            base = self.sanitize(key)
            candidate = base
            counter = 2
            while candidate in used:
                candidate = f"{base}_{counter}"
                counter += 1

            used.add(candidate)
            mapping.pairs.append((key, candidate))

        return mapping

    def convert_case(self, name: str, target_case: NamingCase) -> str:
        """
        Convert a feature name to camelCase or PascalCase.

        Only the first character changes, so ``getAudienceList`` keeps its
        inner capitalisation. Names that are not identifiers are sanitized
        first.
        """
        if not IDENTIFIER_PATTERN.match(name):
            name = self.sanitize(name)
        if target_case == NamingCase.PASCAL_CASE:
            return name[:1].upper() + name[1:]
        converted = name[:1].lower() + name[1:]
        if converted in self.reserved_words:
            converted = f"{RESERVED_PREFIX}{converted}"
        return converted

    def to_camel(self, name: str) -> str:
        return self.convert_case(name, NamingCase.CAMEL_CASE)

    def to_pascal(self, name: str) -> str:
        return self.convert_case(name, NamingCase.PASCAL_CASE)

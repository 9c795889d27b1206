"""
TypeScript type synthesis.

Generates TypeScript interfaces and type aliases from JSON examples and
JSON Schema documents.
"""

from .generator import TypeScriptGenerator
from .naming import create_typescript_sanitizer, TYPESCRIPT_RESERVED_WORDS
from .synthesizer import TypeScriptSynthesizer, load_schema
from .types import TypeScriptTypeConfig, TypeScriptTypeMapper

__all__ = [
    "TypeScriptGenerator",
    "TypeScriptSynthesizer",
    "TypeScriptTypeConfig",
    "TypeScriptTypeMapper",
    "TYPESCRIPT_RESERVED_WORDS",
    "create_typescript_sanitizer",
    "load_schema",
]

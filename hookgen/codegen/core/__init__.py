"""
Core code generation components.

Provides base classes and utilities shared by the emitter and the type
generators.
"""

from .generator import CodeGenerator, GeneratorError
from .schema import (
    Schema,
    Field,
    FieldType,
    convert_analyzer_output,
    convert_json_schema,
    extract_all_schemas,
)
from .naming import NameSanitizer, NamingCase, VariableMapping
from .config import GeneratorConfig, ConfigManager, ConfigError, load_config
from .templates import TemplateEngine, TemplateError, create_template_engine

__all__ = [
    # Base generator interface
    "CodeGenerator",
    "GeneratorError",
    # Schema system - core data structures
    "Schema",
    "Field",
    "FieldType",
    "convert_analyzer_output",
    "convert_json_schema",
    "extract_all_schemas",
    # Naming utilities
    "NameSanitizer",
    "NamingCase",
    "VariableMapping",
    # Configuration system
    "GeneratorConfig",
    "ConfigManager",
    "ConfigError",
    "load_config",
    # Template system
    "TemplateEngine",
    "TemplateError",
    "create_template_engine",
]

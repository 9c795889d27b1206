"""
TypeScript type mapping.

Turns schema fields into TypeScript type expressions. Nested schema names
are looked up through a callback so that de-duplicated schemas render
under their shared name.
"""

import json
from dataclasses import dataclass
from typing import Callable, List, Optional

from ...core.config import GeneratorConfig
from ...core.schema import Field, FieldType, Schema


@dataclass
class TypeScriptTypeConfig:
    """Configuration for TypeScript type mapping behavior."""

    unknown_type: str = "any"
    timestamp_type: str = "string"
    number_type: str = "number"
    string_type: str = "string"
    boolean_type: str = "boolean"

    @classmethod
    def from_generator_config(cls, config: GeneratorConfig) -> "TypeScriptTypeConfig":
        return cls(
            unknown_type=config.unknown_type,
            timestamp_type=config.timestamp_type,
        )


class TypeScriptTypeMapper:
    """Maps fields to TypeScript type expressions."""

    def __init__(
        self,
        config: Optional[TypeScriptTypeConfig] = None,
        name_of: Optional[Callable[[Schema], str]] = None,
    ):
        self.config = config or TypeScriptTypeConfig()
        self.name_of = name_of or (lambda schema: schema.name)

    def primitive(self, field_type: FieldType) -> str:
        """Map a non-composite field type."""
        config = self.config
        return {
            FieldType.STRING: config.string_type,
            FieldType.INTEGER: config.number_type,
            FieldType.FLOAT: config.number_type,
            FieldType.BOOLEAN: config.boolean_type,
            FieldType.TIMESTAMP: config.timestamp_type,
            FieldType.NULL: "null",
            FieldType.OBJECT: f"Record<string, {config.unknown_type}>",
            FieldType.MAP: f"Record<string, {config.unknown_type}>",
            FieldType.ARRAY: f"{config.unknown_type}[]",
        }.get(field_type, config.unknown_type)

    def map_field_type(self, field: Field) -> str:
        """Render the full type expression for ``field``, nullability included."""
        expression = self._base_type(field)
        if field.nullable and field.type != FieldType.NULL:
            expression = union([expression, "null"])
        return expression

    def _base_type(self, field: Field) -> str:
        if field.enum_values:
            return union([json.dumps(value, ensure_ascii=False) for value in field.enum_values])

        if field.type == FieldType.OBJECT and field.nested_schema is not None:
            return self.name_of(field.nested_schema)

        if field.type == FieldType.ARRAY and field.items is not None:
            element = self.map_field_type(field.items)
            if " | " in element:
                element = f"({element})"
            return f"{element}[]"

        if field.type == FieldType.MAP and field.items is not None:
            return f"Record<string, {self.map_field_type(field.items)}>"

        if field.type == FieldType.CONFLICT:
            if not field.conflicting_types:
                return self.config.unknown_type
            return union([self.primitive(t) for t in field.conflicting_types])

        if field.type == FieldType.UNION and field.variants:
            return union([self.map_field_type(v) for v in field.variants])

        return self.primitive(field.type)


def union(members: List[str]) -> str:
    """Join type expressions with ``|``, dropping repeats."""
    seen: List[str] = []
    for member in members:
        if member not in seen:
            seen.append(member)
    return " | ".join(seen)

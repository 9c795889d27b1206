"""
Core schema representation for type synthesis.

Converts analyzer.py output and JSON Schema documents into a normalized
internal format that type generators can work with consistently.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Any
from enum import Enum

from .naming import NameSanitizer


class FieldType(Enum):
    """Supported field types across all target languages."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    TIMESTAMP = "timestamp"
    OBJECT = "object"
    ARRAY = "array"
    MAP = "map"
    NULL = "null"
    UNKNOWN = "unknown"
    CONFLICT = "conflict"  # When multiple types detected
    UNION = "union"  # Declared oneOf/anyOf alternatives


@dataclass
class Field:
    """Represents a single field (or a bare type) in a data structure."""

    name: str
    original_name: str  # Keep original JSON key for property names
    type: FieldType
    optional: bool = False
    nullable: bool = False
    description: Optional[str] = None

    # For nested objects
    nested_schema: Optional["Schema"] = None

    # Element type for arrays, value type for maps
    items: Optional["Field"] = None

    # Type conflicts (when an example has inconsistent types)
    conflicting_types: List[FieldType] = field(default_factory=list)

    # Declared alternatives for unions
    variants: List["Field"] = field(default_factory=list)

    # Literal values for enums
    enum_values: List[Any] = field(default_factory=list)


@dataclass
class Schema:
    """
    Represents the structure of a data object.

    A schema with ``alias`` set describes a non-object type (an array or a
    primitive) and is rendered as a type alias instead of an interface.
    """

    name: str
    original_name: str
    fields: List[Field] = field(default_factory=list)
    description: Optional[str] = None
    alias: Optional[Field] = None

    def add_field(self, field: Field) -> None:
        """Add a field to this schema."""
        self.fields.append(field)

    def get_field(self, name: str) -> Optional[Field]:
        """Get field by name."""
        for field in self.fields:
            if field.name == name:
                return field
        return None


_segment_namer = NameSanitizer()


def nested_name(parent: str, key: str, suffix: str = "") -> str:
    """Name a nested schema after its parent and property key."""
    return f"{parent}{_segment_namer.to_pascal(key)}{suffix}"


# Analyzer output ---------------------------------------------------------

_ANALYZER_TYPES = {
    "str": FieldType.STRING,
    "int": FieldType.INTEGER,
    "float": FieldType.FLOAT,
    "bool": FieldType.BOOLEAN,
    "timestamp": FieldType.TIMESTAMP,
    "object": FieldType.OBJECT,
    "list": FieldType.ARRAY,
    "conflict": FieldType.CONFLICT,
    "unknown": FieldType.UNKNOWN,
}


def map_analyzer_type(analyzer_type: str) -> FieldType:
    """Map analyzer types to our FieldType enum."""
    return _ANALYZER_TYPES.get(analyzer_type, FieldType.UNKNOWN)


def convert_analyzer_output(analyzer_result: Dict[str, Any], root_name: str) -> Schema:
    """
    Convert analyzer.py output to internal Schema representation.

    Args:
        analyzer_result: Output from analyze_json()
        root_name: Name for the root type

    Returns:
        Schema: root schema; non-object roots become an alias schema
    """

    def convert_object(node: Dict[str, Any], name: str) -> Schema:
        schema = Schema(name=name, original_name=name)
        conflicts = node.get("conflicts", {})

        for key, child in node.get("children", {}).items():
            field_obj = convert_node(child, key, name)
            field_obj.optional = child.get("optional", False)
            if key in conflicts:
                field_obj.type = FieldType.CONFLICT
                field_obj.conflicting_types = [map_analyzer_type(t) for t in conflicts[key]]
            schema.add_field(field_obj)

        return schema

    def convert_list(node: Dict[str, Any], key: str, owner: str, item_name: str) -> Field:
        if "child" in node:
            child = node["child"]
            if child["type"] == "object":
                element = Field(
                    name=key,
                    original_name=key,
                    type=FieldType.OBJECT,
                    nested_schema=convert_object(child, item_name),
                )
            else:
                element = convert_list(child, key, owner, f"{item_name}Item")
        else:
            child_type = node.get("child_type", "unknown")
            if child_type.startswith("mixed"):
                element = Field(name=key, original_name=key, type=FieldType.CONFLICT)
                if ":" in child_type:
                    element.conflicting_types = [
                        map_analyzer_type(t.strip())
                        for t in child_type.split(":", 1)[1].split(",")
                    ]
            else:
                element = Field(
                    name=key, original_name=key, type=map_analyzer_type(child_type)
                )

        return Field(name=key, original_name=key, type=FieldType.ARRAY, items=element)

    def convert_node(node: Dict[str, Any], key: str, owner: str) -> Field:
        node_type = node["type"]
        if node_type == "object":
            return Field(
                name=key,
                original_name=key,
                type=FieldType.OBJECT,
                nested_schema=convert_object(node, nested_name(owner, key)),
            )
        if node_type == "list":
            return convert_list(node, key, owner, nested_name(owner, key, "Item"))
        if node_type == "unknown" and node.get("is_none"):
            return Field(name=key, original_name=key, type=FieldType.NULL)
        return Field(name=key, original_name=key, type=map_analyzer_type(node_type))

    if analyzer_result["type"] == "object":
        return convert_object(analyzer_result, root_name)

    schema = Schema(name=root_name, original_name=root_name)
    if analyzer_result["type"] == "list":
        schema.alias = convert_list(analyzer_result, root_name, root_name, f"{root_name}Item")
    else:
        schema.alias = convert_node(analyzer_result, root_name, root_name)
    return schema


# JSON Schema -------------------------------------------------------------

_JSON_SCHEMA_TYPES = {
    "string": FieldType.STRING,
    "integer": FieldType.INTEGER,
    "number": FieldType.FLOAT,
    "boolean": FieldType.BOOLEAN,
    "object": FieldType.OBJECT,
    "array": FieldType.ARRAY,
    "null": FieldType.NULL,
}

_TIMESTAMP_FORMATS = {"date-time", "date"}

_REF_PREFIXES = ("#/definitions/", "#/$defs/", "#/components/schemas/")


class SchemaConversionError(ValueError):
    """Raised when a JSON Schema document cannot be converted."""

    pass


class JSONSchemaConverter:
    """Converts one JSON Schema document into Schema objects."""

    def __init__(self, document: Any):
        self.document = document
        self._ref_schemas: Dict[str, Schema] = {}

    def convert(self, root_name: str) -> Schema:
        """Convert the document root into a schema named ``root_name``."""
        node = self._resolve(self.document)
        if self._is_object(node) and not self._is_map(node):
            schema = Schema(name=root_name, original_name=root_name)
            self._fill_object(schema, node)
            return schema

        schema = Schema(
            name=root_name,
            original_name=root_name,
            description=self._description(node),
        )
        schema.alias = self._convert_field(self.document, root_name, root_name, item_name=f"{root_name}Item")
        return schema

    # helpers

    def _description(self, node: Any) -> Optional[str]:
        if isinstance(node, dict) and isinstance(node.get("description"), str):
            return node["description"].strip() or None
        return None

    def _lookup_ref(self, ref: str) -> Any:
        if not ref.startswith("#"):
            raise SchemaConversionError(f"Only local $ref pointers are supported: {ref}")
        node = self.document
        for part in ref.lstrip("#/").split("/"):
            if not part:
                continue
            part = part.replace("~1", "/").replace("~0", "~")
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                raise SchemaConversionError(f"Unresolvable $ref: {ref}")
        return node

    def _resolve(self, node: Any) -> Any:
        seen = set()
        while isinstance(node, dict) and "$ref" in node:
            ref = node["$ref"]
            if ref in seen:
                return {}
            seen.add(ref)
            node = self._lookup_ref(ref)
        return node

    def _is_object(self, node: Any) -> bool:
        if not isinstance(node, dict):
            return False
        return (
            node.get("type") == "object"
            or "properties" in node
            or "allOf" in node
            and all(self._is_object(self._resolve(sub)) for sub in node["allOf"])
        )

    def _is_map(self, node: Dict[str, Any]) -> bool:
        return (
            not node.get("properties")
            and "allOf" not in node
            and node.get("additionalProperties") not in (None, False)
        )

    def _merged_object(self, node: Dict[str, Any]):
        properties: Dict[str, Any] = {}
        required: List[str] = []
        for sub in node.get("allOf", []):
            resolved = self._resolve(sub)
            if isinstance(resolved, dict):
                sub_props, sub_required = self._merged_object(resolved)
                properties.update(sub_props)
                required.extend(sub_required)
        properties.update(node.get("properties") or {})
        required.extend(node.get("required") or [])
        return properties, required

    def _fill_object(self, schema: Schema, node: Dict[str, Any]) -> None:
        schema.description = self._description(node)
        properties, required = self._merged_object(node)
        required_set = set(required)
        for key, prop in properties.items():
            field_obj = self._convert_field(prop, key, schema.name)
            field_obj.optional = key not in required_set
            schema.add_field(field_obj)

    def _object_schema(self, raw: Any, name: str) -> Schema:
        """Build (or reuse) the schema for an object node."""
        if isinstance(raw, dict) and "$ref" in raw and raw["$ref"].startswith(_REF_PREFIXES):
            ref = raw["$ref"]
            if ref in self._ref_schemas:
                return self._ref_schemas[ref]
            ref_name = _segment_namer.to_pascal(ref.rsplit("/", 1)[-1])
            schema = Schema(name=ref_name, original_name=ref.rsplit("/", 1)[-1])
            self._ref_schemas[ref] = schema
            self._fill_object(schema, self._resolve(raw))
            return schema

        schema = Schema(name=name, original_name=name)
        self._fill_object(schema, self._resolve(raw))
        return schema

    def _convert_field(
        self, raw: Any, key: str, owner: str, item_name: Optional[str] = None
    ) -> Field:
        if raw is True or raw == {}:
            return Field(name=key, original_name=key, type=FieldType.UNKNOWN)
        if not isinstance(raw, dict):
            raise SchemaConversionError(f"Invalid schema for '{key}': {raw!r}")

        node = self._resolve(raw)
        description = self._description(node)
        nullable = bool(node.get("nullable", False))

        if "enum" in node or "const" in node:
            values = list(node["enum"]) if "enum" in node else [node["const"]]
            literal_values = [v for v in values if v is not None]
            return Field(
                name=key,
                original_name=key,
                type=FieldType.STRING,
                nullable=nullable or len(literal_values) != len(values),
                description=description,
                enum_values=literal_values,
            )

        for combinator in ("oneOf", "anyOf"):
            if combinator in node:
                return self._convert_union(node[combinator], key, owner, description, nullable)

        if self._is_object(node) and not self._is_map(node):
            return Field(
                name=key,
                original_name=key,
                type=FieldType.OBJECT,
                nullable=nullable,
                description=description,
                nested_schema=self._object_schema(raw, nested_name(owner, key)),
            )

        declared = node.get("type")
        if isinstance(declared, list):
            non_null = [t for t in declared if t != "null"]
            nullable = nullable or len(non_null) != len(declared)
            if len(non_null) != 1:
                return Field(
                    name=key,
                    original_name=key,
                    type=FieldType.CONFLICT if non_null else FieldType.NULL,
                    nullable=nullable,
                    description=description,
                    conflicting_types=[_JSON_SCHEMA_TYPES.get(t, FieldType.UNKNOWN) for t in non_null],
                )
            declared = non_null[0]

        if declared == "array" or (declared is None and "items" in node):
            items = node.get("items", {})
            element_name = item_name or nested_name(owner, key, "Item")
            element = self._convert_field(items, key, owner, item_name=f"{element_name}Item")
            if element.type == FieldType.OBJECT and element.nested_schema is not None:
                if element.nested_schema.name == nested_name(owner, key):
                    element.nested_schema.name = element_name
                    element.nested_schema.original_name = element_name
            return Field(
                name=key,
                original_name=key,
                type=FieldType.ARRAY,
                nullable=nullable,
                description=description,
                items=element,
            )

        if declared == "object" or (isinstance(node, dict) and self._is_map(node)):
            additional = node.get("additionalProperties")
            value = (
                self._convert_field(additional, key, owner)
                if isinstance(additional, dict)
                else Field(name=key, original_name=key, type=FieldType.UNKNOWN)
            )
            return Field(
                name=key,
                original_name=key,
                type=FieldType.MAP,
                nullable=nullable,
                description=description,
                items=value,
            )

        field_type = _JSON_SCHEMA_TYPES.get(declared, FieldType.UNKNOWN)
        if field_type == FieldType.STRING and node.get("format") in _TIMESTAMP_FORMATS:
            field_type = FieldType.TIMESTAMP

        return Field(
            name=key,
            original_name=key,
            type=field_type,
            nullable=nullable,
            description=description,
        )

    def _convert_union(
        self,
        alternatives: List[Any],
        key: str,
        owner: str,
        description: Optional[str],
        nullable: bool,
    ) -> Field:
        variants = []
        for index, alternative in enumerate(alternatives, start=1):
            resolved = self._resolve(alternative)
            if isinstance(resolved, dict) and resolved.get("type") == "null":
                nullable = True
                continue
            variant_key = key if len(alternatives) == 1 else f"{key}Option{index}"
            variant = self._convert_field(alternative, variant_key, owner)
            variant.name = variant.original_name = key
            variants.append(variant)

        if len(variants) == 1:
            only = variants[0]
            only.nullable = only.nullable or nullable
            only.description = only.description or description
            return only

        return Field(
            name=key,
            original_name=key,
            type=FieldType.UNION if variants else FieldType.NULL,
            nullable=nullable,
            description=description,
            variants=variants,
        )


def convert_json_schema(document: Any, root_name: str) -> Schema:
    """
    Convert a parsed JSON Schema document to internal Schema representation.

    Args:
        document: Parsed JSON Schema (dict or boolean schema)
        root_name: Name for the root type

    Returns:
        Schema: root schema; non-object roots become an alias schema
    """
    return JSONSchemaConverter(document).convert(root_name)


def iter_field_schemas(field_obj: Field):
    """Yield every schema directly referenced by a field (recursively through types)."""
    if field_obj.nested_schema is not None:
        yield field_obj.nested_schema
    if field_obj.items is not None:
        yield from iter_field_schemas(field_obj.items)
    for variant in field_obj.variants:
        yield from iter_field_schemas(variant)


def extract_all_schemas(root_schema: Schema) -> Dict[str, Schema]:
    """
    Extract all nested schemas into a flat dictionary.

    Returns:
        Dict mapping schema name to Schema object, parents before children
    """
    schemas: Dict[str, Schema] = {}
    visited = set()

    def collect_schemas(schema: Schema):
        if id(schema) in visited:
            return
        visited.add(id(schema))
        schemas.setdefault(schema.name, schema)

        fields = [schema.alias] if schema.alias is not None else schema.fields
        for field_obj in fields:
            for nested in iter_field_schemas(field_obj):
                collect_schemas(nested)

    collect_schemas(root_schema)
    return schemas

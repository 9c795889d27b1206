"""
TypeScript declaration generator.

Renders schema trees as exported interfaces and type aliases. Structurally
identical schemas are emitted once under a shared name, and distinct
schemas whose names clash get numeric suffixes.
"""

from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ...core.config import GeneratorConfig
from ...core.generator import CodeGenerator
from ...core.naming import IDENTIFIER_PATTERN, quote_key
from ...core.schema import Field, Schema, iter_field_schemas
from ...core.templates import TemplateError
from .types import TypeScriptTypeConfig, TypeScriptTypeMapper
from .naming import TYPESCRIPT_BUILTIN_TYPES

TEMPLATE_DIR = Path(__file__).parent / "templates"


class TypeScriptGenerator(CodeGenerator):
    """Code generator for TypeScript interfaces and type aliases."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        super().__init__(config)
        self.add_comments = self.config.add_comments
        self.indent = " " * max(self.config.indent_size, 0)
        self.type_mapper = TypeScriptTypeMapper(
            TypeScriptTypeConfig.from_generator_config(self.config), self.name_of
        )

        # State tracking, reset by each generate() call
        self._names: Dict[int, str] = {}

    def get_template_directory(self) -> Path:
        return TEMPLATE_DIR

    def name_of(self, schema: Schema) -> str:
        """Final (de-duplicated) name of a schema."""
        return self._names.get(id(schema), schema.name)

    def generate(self, roots: List[Schema]) -> str:
        """Generate declarations for ``roots`` and every schema they reference."""
        self._names = {}
        schemas = self._collect(roots)
        emitted = self._assign_names(roots, schemas)

        declarations = [
            self.generate_single_schema(schema)
            for schema in self._get_generation_order(emitted, roots)
        ]
        return self.format_code("\n\n".join(declarations))

    def generate_single_schema(self, schema: Schema) -> str:
        """Generate the declaration for a single schema."""
        description = schema.description if self.add_comments else None

        if schema.alias is not None:
            return self._render(
                "alias.ts.j2",
                {
                    "name": self.name_of(schema),
                    "description": description,
                    "type": self.type_mapper.map_field_type(schema.alias),
                },
            )

        return self._render(
            "interface.ts.j2",
            {
                "name": self.name_of(schema),
                "description": description,
                "indent": self.indent,
                "fields": [self._field_data(field) for field in schema.fields],
            },
        )

    def _render(self, template_name: str, context: Dict) -> str:
        if not self.template_exists(template_name):
            raise TemplateError(f"{template_name} template not found")
        return self.render_template(template_name, context)

    def _field_data(self, field: Field) -> Dict[str, object]:
        label = field.original_name
        if not IDENTIFIER_PATTERN.match(label):
            label = quote_key(label)
        return {
            "label": label,
            "optional": field.optional,
            "type": self.type_mapper.map_field_type(field),
            "comment": field.description if self.add_comments else None,
        }

    # Schema discovery and naming

    def _collect(self, roots: List[Schema]) -> List[Schema]:
        """Every distinct schema object reachable from the roots, parents first."""
        ordered: List[Schema] = []
        visited = set()

        def visit(schema: Schema):
            if id(schema) in visited:
                return
            visited.add(id(schema))
            ordered.append(schema)
            for nested in self._dependencies(schema):
                visit(nested)

        for root in roots:
            visit(root)
        return ordered

    def _dependencies(self, schema: Schema) -> List[Schema]:
        fields = [schema.alias] if schema.alias is not None else schema.fields
        return [nested for field in fields for nested in iter_field_schemas(field)]

    def _assign_names(self, roots: List[Schema], schemas: List[Schema]) -> List[Schema]:
        """
        Name every schema and drop structural duplicates.

        Roots keep their names. A nested schema identical to one already
        kept reuses that schema's name; otherwise it takes its own name, with
        a numeric suffix when the name is taken.

        Returns:
            The schemas to emit, in discovery order
        """
        signatures = _SignatureBuilder()
        canonical: Dict[Tuple, Schema] = {}
        used = set(TYPESCRIPT_BUILTIN_TYPES)
        emitted: List[Schema] = []
        root_ids = {id(root) for root in roots}

        for root in roots:
            self._names[id(root)] = root.name
            used.add(root.name)

        for schema in schemas:
            signature = signatures.of(schema)
            if id(schema) in root_ids:
                canonical.setdefault(signature, schema)
                emitted.append(schema)
                continue

            existing = canonical.get(signature)
            if existing is not None:
                self._names[id(schema)] = self.name_of(existing)
                continue

            name = schema.name
            counter = 2
            while name in used:
                name = f"{schema.name}{counter}"
                counter += 1
            used.add(name)
            self._names[id(schema)] = name
            canonical[signature] = schema
            emitted.append(schema)

        return emitted

    def _get_generation_order(self, emitted: List[Schema], roots: List[Schema]) -> List[Schema]:
        """
        Order declarations so each root is followed by the types it introduces.

        Nested types come after the root that first references them.
        """
        emitted_ids = {id(schema) for schema in emitted}
        ordered: List[Schema] = []
        placed = set()

        def visit(schema: Schema):
            if id(schema) in placed:
                return
            placed.add(id(schema))
            if id(schema) in emitted_ids:
                ordered.append(schema)
            for nested in self._dependencies(schema):
                visit(nested)

        for root in roots:
            visit(root)
        return ordered


class _SignatureBuilder:
    """Structural signatures for schemas; names and descriptions are ignored."""

    def __init__(self):
        self._cache: Dict[int, Tuple] = {}
        self._in_progress: Dict[int, str] = {}

    def of(self, schema: Schema) -> Tuple:
        key = id(schema)
        if key in self._cache:
            return self._cache[key]
        if key in self._in_progress:
            # Recursive reference: identify by name
            return ("recursive", self._in_progress[key])

        self._in_progress[key] = schema.name
        if schema.alias is not None:
            signature: Tuple = ("alias", self._field(schema.alias))
        else:
            signature = (
                "object",
                tuple(
                    (field.original_name, field.optional, self._field(field))
                    for field in schema.fields
                ),
            )
        del self._in_progress[key]
        self._cache[key] = signature
        return signature

    def _field(self, field: Field) -> Tuple:
        return (
            field.type.value,
            field.nullable,
            tuple(repr(v) for v in field.enum_values),
            tuple(t.value for t in field.conflicting_types),
            self.of(field.nested_schema) if field.nested_schema is not None else None,
            self._field(field.items) if field.items is not None else None,
            tuple(self._field(v) for v in field.variants),
        )

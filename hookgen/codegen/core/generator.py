"""
Base class for type declaration generators and the root hookgen error.
"""

import re
from abc import ABC, abstractmethod
from typing import Dict, List, Optional
from pathlib import Path
from .config import GeneratorConfig
from .schema import Schema, FieldType
from .templates import TemplateEngine, create_template_engine


class GeneratorError(Exception):
    """Base exception for code generation errors."""

    pass


_TRAILING_SPACE = re.compile(r"[ \t]+$", re.MULTILINE)
_BLANK_RUNS = re.compile(r"\n{3,}")


class CodeGenerator(ABC):
    """Turns schema trees into declarations through a template directory."""

    def __init__(self, config: Optional[GeneratorConfig] = None):
        self.config = config or GeneratorConfig()
        self._template_engine: Optional[TemplateEngine] = None

    @abstractmethod
    def get_template_directory(self) -> Path:
        """Directory holding this generator's templates."""

    @property
    def template_engine(self) -> TemplateEngine:
        if self._template_engine is None:
            self._template_engine = create_template_engine(self.get_template_directory())
        return self._template_engine

    @abstractmethod
    def generate(self, roots: List[Schema]) -> str:
        """
        Generate declarations for root schemas and every schema they reference.

        Args:
            roots: The requested top-level types, in order; their names are
                kept exactly

        Returns:
            Generated code as a string
        """

    @abstractmethod
    def generate_single_schema(self, schema: Schema) -> str:
        """Generate the declaration for a single schema."""

    def schema_warnings(self, schemas: Dict[str, Schema]) -> List[str]:
        """Describe fields whose type could not be pinned down."""
        warnings = []
        for schema in schemas.values():
            if schema.alias is not None:
                continue
            if not schema.fields:
                warnings.append(f"Schema '{schema.name}' has no fields")

            for field in schema.fields:
                where = f"{schema.name}.{field.name}"
                if field.type == FieldType.CONFLICT:
                    seen = [t.value for t in field.conflicting_types] or ["unknown"]
                    warnings.append(f"Type conflict in {where}: {seen}")
                elif field.type == FieldType.UNKNOWN:
                    warnings.append(f"Unknown type in {where}")
        return warnings

    def format_code(self, code: str) -> str:
        """Strip trailing whitespace and collapse runs of blank lines to one."""
        code = _TRAILING_SPACE.sub("", code)
        return _BLANK_RUNS.sub("\n\n", code).strip()

    def render_template(self, template_name: str, context: Dict) -> str:
        return self.template_engine.render_template(template_name, context)

    def template_exists(self, template_name: str) -> bool:
        return self.template_engine.template_exists(template_name)

"""
Boundary to the type synthesizer.

The generator only decides what gets a type and how it is named; turning
an example value or a JSON Schema into declarations is delegated to a
``TypeSynthesizer`` implementation.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from .core.generator import GeneratorError
from ..logging_config import get_logger

logger = get_logger(__name__)


class SchemaGenerationError(GeneratorError):
    """Raised when the type synthesizer fails for a feature."""

    def __init__(self, feature_name: str, type_name: str, cause: Exception):
        self.feature_name = feature_name
        self.type_name = type_name
        self.cause = cause
        super().__init__(
            f"Failed to generate type {type_name} for feature '{feature_name}': {cause}"
        )


@dataclass
class TypeSource:
    """One named root type: an example value or a JSON Schema text."""

    name: str
    example: Any = None
    schema_text: Optional[str] = None

    @property
    def is_schema(self) -> bool:
        return self.schema_text is not None


class TypeSynthesizer(ABC):
    """Produces type declarations from example values or schemas."""

    @abstractmethod
    def from_example(self, value: Any, name: str) -> str:
        """Declarations for a type named ``name`` inferred from ``value``."""
        pass

    @abstractmethod
    def from_schema(self, schema_text: str, name: str) -> str:
        """Declarations for a type named ``name`` described by a JSON Schema."""
        pass

    @abstractmethod
    def from_schemas(self, sources: Sequence[Tuple[str, str]]) -> str:
        """
        Declarations for several named schemas at once.

        Shared substructures are emitted once and named consistently.
        """
        pass

    def from_sources(self, sources: Sequence[TypeSource]) -> str:
        """
        Declarations for several example- or schema-backed roots together.

        The default synthesizes each root on its own; implementations that
        can share nested declarations across roots override this.
        """
        return "\n\n".join(
            self.from_schema(source.schema_text, source.name)
            if source.is_schema
            else self.from_example(source.example, source.name)
            for source in sources
        )


class SynthesisBridge:
    """Calls the synthesizer on behalf of one feature and wraps its failures."""

    def __init__(self, synthesizer: TypeSynthesizer, feature_name: str):
        self.synthesizer = synthesizer
        self.feature_name = feature_name

    def from_example(self, value: Any, name: str) -> str:
        logger.debug("Synthesizing %s from example", name)
        try:
            return self.synthesizer.from_example(value, name)
        except Exception as e:
            raise SchemaGenerationError(self.feature_name, name, e) from e

    def from_schema(self, schema_text: str, name: str) -> str:
        logger.debug("Synthesizing %s from schema", name)
        try:
            return self.synthesizer.from_schema(schema_text, name)
        except Exception as e:
            raise SchemaGenerationError(self.feature_name, name, e) from e

    def from_schemas(self, sources: List[Tuple[str, str]]) -> str:
        names = ", ".join(name for name, _ in sources)
        logger.debug("Synthesizing %d types in one batch", len(sources))
        try:
            return self.synthesizer.from_schemas(sources)
        except Exception as e:
            raise SchemaGenerationError(self.feature_name, names, e) from e

    def from_sources(self, sources: Sequence[TypeSource]) -> str:
        names = ", ".join(source.name for source in sources)
        logger.debug("Synthesizing %s together", names)
        try:
            return self.synthesizer.from_sources(sources)
        except Exception as e:
            raise SchemaGenerationError(self.feature_name, names, e) from e

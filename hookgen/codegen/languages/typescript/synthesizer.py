"""
In-process TypeScript type synthesizer.

Examples go through the JSON analyzer, schemas through the JSON Schema
converter; both end up as schema trees rendered by TypeScriptGenerator.
"""

import json
from typing import Any, List, Optional, Sequence, Tuple

from ....analyzer import analyze_json
from ....logging_config import get_logger
from ...core.config import GeneratorConfig
from ...core.schema import (
    Schema,
    convert_analyzer_output,
    convert_json_schema,
    extract_all_schemas,
)
from ...synthesis import TypeSource, TypeSynthesizer
from .generator import TypeScriptGenerator

logger = get_logger(__name__)


class TypeScriptSynthesizer(TypeSynthesizer):
    """Default synthesizer producing TypeScript interfaces and aliases."""

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        generator: Optional[TypeScriptGenerator] = None,
    ):
        self.config = config or GeneratorConfig()
        self.generator = generator or TypeScriptGenerator(self.config)

    def from_example(self, value: Any, name: str) -> str:
        return self._generate([self._root(TypeSource(name, example=value))])

    def from_schema(self, schema_text: str, name: str) -> str:
        return self._generate([self._root(TypeSource(name, schema_text=schema_text))])

    def from_schemas(self, sources: Sequence[Tuple[str, str]]) -> str:
        roots = [convert_json_schema(load_schema(text), name) for name, text in sources]
        return self._generate(roots)

    def from_sources(self, sources: Sequence[TypeSource]) -> str:
        return self._generate([self._root(source) for source in sources])

    def _root(self, source: TypeSource) -> Schema:
        if source.is_schema:
            return convert_json_schema(load_schema(source.schema_text), source.name)
        analysis = analyze_json(source.example, detect_timestamps=self.config.detect_timestamps)
        return convert_analyzer_output(analysis, source.name)

    def _generate(self, roots: List[Schema]) -> str:
        for root in roots:
            for warning in self.generator.schema_warnings(extract_all_schemas(root)):
                logger.debug(warning)
        return self.generator.generate(roots)


def load_schema(schema_text: Any) -> Any:
    """Parse schema text; already-parsed documents pass through."""
    if isinstance(schema_text, (dict, bool)):
        return schema_text
    return json.loads(schema_text)

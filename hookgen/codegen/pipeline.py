"""
Hook generation pipeline.

Wires the parser, variable extractor, classifier, type synthesizer and
emitter together. Every collaborator can be injected; the defaults are the
tolerant JSON5 parser and the in-process TypeScript synthesizer.
"""

import json
from dataclasses import replace
from typing import Any, Iterable, List, Optional, Sequence, Tuple, Union

from .batch import BatchModelAggregator, unique_feature_names
from .classifier import ResponseShapeClassifier
from .core.config import GeneratorConfig
from .core.naming import NameSanitizer
from .emitter import (
    QUERY_KEY_SCOPE,
    TEMPLATE_LOCALS,
    CodeEmitter,
    EndpointPlan,
    feature_bindings,
)
from .languages.typescript import TypeScriptSynthesizer, create_typescript_sanitizer
from .openapi import import_endpoints
from .models import (
    BatchModelSpec,
    EndpointDescriptor,
    ExtractedVariables,
    GenerateFileResponse,
    GenerateRequest,
)
from .synthesis import SynthesisBridge, TypeSource, TypeSynthesizer
from .variables import VariableExtractor
from ..parsing import InputParser, InvalidInputError, TolerantParser
from ..logging_config import get_logger

logger = get_logger(__name__)


class HookGenerator:
    """Generates the model, api, queryKey and hook fragments for endpoints."""

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        parser: Optional[InputParser] = None,
        synthesizer: Optional[TypeSynthesizer] = None,
        sanitizer: Optional[NameSanitizer] = None,
        classifier: Optional[ResponseShapeClassifier] = None,
        emitter: Optional[CodeEmitter] = None,
    ):
        self.config = config or GeneratorConfig()
        self.parser = parser or TolerantParser()
        self.synthesizer = synthesizer or TypeScriptSynthesizer(self.config)
        self.sanitizer = sanitizer or create_typescript_sanitizer()
        self.classifier = classifier or ResponseShapeClassifier(self.config)
        self.emitter = emitter or CodeEmitter(self.config)
        self.extractor = VariableExtractor(
            self.parser, self.sanitizer, self.config, taken=TEMPLATE_LOCALS
        )

    def generate(self, request: GenerateRequest) -> GenerateFileResponse:
        """
        Generate all fragments for one endpoint.

        Raises:
            MissingInputError: when a mandatory field is absent
            InvalidInputError: for unparseable text, unknown enum values or a
                variable named like the cache-key scope field
            SchemaGenerationError: when the type synthesizer fails
        """
        method, hook_type = request.validate()
        camel_name = self.sanitizer.to_camel(request.feature_name)
        pascal_name = self.sanitizer.to_pascal(request.feature_name)
        bridge = SynthesisBridge(self.synthesizer, request.feature_name)

        logger.info(
            "Generating %s %s for %s %s",
            hook_type.value,
            camel_name,
            method.value,
            request.api_url,
        )

        params_schema = self._load_schema(request.params_schema, "params schema")
        variables = self.extractor.extract(
            request.api_url,
            request.params,
            params_schema,
            taken=feature_bindings(camel_name, pascal_name, self.config),
        )
        if hook_type.uses_query_key and QUERY_KEY_SCOPE in variables.all_vars:
            raise InvalidInputError(
                f"Variable '{QUERY_KEY_SCOPE}' clashes with the query key field of "
                f"the same name; rename it in the URL or params"
            )

        response_source, return_type, array_key = self._response_source(request, pascal_name)
        variables_source = self._variables_source(
            f"{pascal_name}Variables", variables, params_schema
        )

        plan = EndpointPlan(
            camel_name=camel_name,
            pascal_name=pascal_name,
            method=method,
            hook_type=hook_type,
            variables=variables,
            return_type=return_type,
            wrapper_args=(request.wrapper_args or "").strip() or None,
            array_key=array_key,
        )
        fragments = self.emitter.emit(plan)

        model = ""
        if not request.skip_model_generation:
            model = self._model(
                request, f"{pascal_name}Response", variables_source, response_source, bridge
            )
        return GenerateFileResponse(model=model, **fragments)

    def generate_batch_models(self, specs: Sequence[BatchModelSpec]) -> str:
        """One combined type block for every schema among ``specs``."""
        return BatchModelAggregator(self.synthesizer, self.sanitizer).generate(specs)

    def generate_batch(self, endpoints: Sequence[EndpointDescriptor]) -> GenerateFileResponse:
        """
        Generate fragments for many endpoints sharing one model block.

        Endpoints are processed one after another in input order; repeated
        feature names get numeric suffixes so type names stay unique.
        """
        names = unique_feature_names(
            [self.sanitizer.to_camel(endpoint.feature_name) for endpoint in endpoints]
        )
        endpoints = [
            replace(endpoint, feature_name=name) for endpoint, name in zip(endpoints, names)
        ]

        model = self.generate_batch_models([e.to_model_spec() for e in endpoints])
        responses = [
            self.generate(endpoint.to_request(skip_model_generation=True))
            for endpoint in endpoints
        ]

        combined = GenerateFileResponse.combine(responses)
        combined.model = model
        logger.info("Generated %d endpoints", len(endpoints))
        return combined

    # helpers

    def _load_schema(self, schema_text: Optional[str], label: str) -> Any:
        """Parse a schema once; None when absent."""
        if schema_text is None or not str(schema_text).strip():
            return None
        try:
            return self.parser.parse(schema_text)
        except InvalidInputError as e:
            raise InvalidInputError(f"Invalid {label}: {e}") from e

    def _response_source(
        self, request: GenerateRequest, pascal_name: str
    ) -> Tuple[Optional[TypeSource], str, Optional[str]]:
        """Return ``(response type source, api return type, paginated array key)``."""
        response_name = f"{pascal_name}Response"

        response_schema = self._load_schema(request.response_schema, "response schema")
        if response_schema is not None:
            source = TypeSource(response_name, schema_text=json.dumps(response_schema))
            return source, response_name, None

        if request.example_response and request.example_response.strip():
            payload = self.parser.parse(request.example_response)
            classification = self.classifier.classify(payload, pascal_name)
            source = TypeSource(classification.type_name, example=classification.payload)
            return source, classification.return_type, classification.array_key

        if request.skip_model_generation:
            return None, self.config.fallback_type, None
        return None, response_name, None

    def _variables_source(
        self, name: str, variables: ExtractedVariables, params_schema: Any
    ) -> Optional[TypeSource]:
        if params_schema is not None:
            return TypeSource(name, schema_text=json.dumps(params_schema))
        if variables.inference_params:
            return TypeSource(name, example=variables.inference_params)
        return None

    def _model(
        self,
        request: GenerateRequest,
        response_name: str,
        variables_source: Optional[TypeSource],
        response_source: Optional[TypeSource],
        bridge: SynthesisBridge,
    ) -> str:
        """Variables then response declarations, synthesized in one pass."""
        sources = [s for s in (variables_source, response_source) if s is not None]
        parts = [bridge.from_sources(sources)] if sources else []

        if response_source is None:
            logger.warning(
                "%s: no example response or schema; typing the response as %s",
                request.feature_name,
                self.config.fallback_type,
            )
            parts.append(f"export type {response_name} = {self.config.fallback_type};")
        return "\n\n".join(parts)


# Convenience functions


def generate_files(
    request: Optional[GenerateRequest] = None,
    config: Optional[GeneratorConfig] = None,
    **fields,
) -> GenerateFileResponse:
    """
    Generate fragments for one endpoint.

    Either pass a GenerateRequest or its fields as keyword arguments.
    """
    if request is None:
        request = GenerateRequest(**fields)
    return HookGenerator(config).generate(request)


def generate_batch_models(
    specs: Iterable[Union[BatchModelSpec, dict]], config: Optional[GeneratorConfig] = None
) -> str:
    """Combined type block for a list of specs (objects or dicts)."""
    specs = [spec if isinstance(spec, BatchModelSpec) else BatchModelSpec(**spec) for spec in specs]
    return HookGenerator(config).generate_batch_models(specs)


def generate_from_openapi(
    source: str,
    config: Optional[GeneratorConfig] = None,
    select: Optional[List[str]] = None,
) -> GenerateFileResponse:
    """
    Generate fragments for the operations of an OpenAPI document.

    Args:
        source: file path, URL or inline JSON text
        config: generator configuration
        select: optional ``"METHOD /path"`` filters
    """
    config = config or GeneratorConfig()
    endpoints = import_endpoints(source, config, select)
    return HookGenerator(config).generate_batch(endpoints)

"""
hookgen code generation module.

Generates React Query data-layer fragments (model, api, queryKey, hook)
from endpoint descriptions.
"""

from .core.generator import GeneratorError
from .core.config import GeneratorConfig, ConfigManager, load_config
from .models import (
    BatchModelSpec,
    EndpointDescriptor,
    GenerateFileResponse,
    GenerateRequest,
    HookType,
    HttpMethod,
    MissingInputError,
)
from .classifier import (
    ArrayKeyPolicy,
    Classification,
    PageFieldPolicy,
    ResponseShape,
    ResponseShapeClassifier,
)
from .synthesis import SchemaGenerationError, SynthesisBridge, TypeSynthesizer
from .openapi import InvalidSpecError, dereference, extract_endpoints
from .pipeline import (
    HookGenerator,
    generate_batch_models,
    generate_files,
    generate_from_openapi,
)

# Version info
__version__ = "0.1.0"

__all__ = [
    "ArrayKeyPolicy",
    "BatchModelSpec",
    "Classification",
    "ConfigManager",
    "EndpointDescriptor",
    "GenerateFileResponse",
    "GenerateRequest",
    "GeneratorConfig",
    "GeneratorError",
    "HookGenerator",
    "HookType",
    "HttpMethod",
    "InvalidSpecError",
    "MissingInputError",
    "PageFieldPolicy",
    "ResponseShape",
    "ResponseShapeClassifier",
    "SchemaGenerationError",
    "SynthesisBridge",
    "TypeSynthesizer",
    "dereference",
    "extract_endpoints",
    "generate_batch_models",
    "generate_files",
    "generate_from_openapi",
    "load_config",
]

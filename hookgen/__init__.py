"""hookgen: typed React Query hooks from endpoint examples, schemas and OpenAPI documents."""

from .codegen import (
    BatchModelSpec,
    EndpointDescriptor,
    GenerateFileResponse,
    GenerateRequest,
    GeneratorConfig,
    GeneratorError,
    HookGenerator,
    generate_batch_models,
    generate_files,
    generate_from_openapi,
)
from .parsing import InvalidInputError, TolerantParser

__version__ = "0.1.0"

__all__ = [
    "BatchModelSpec",
    "EndpointDescriptor",
    "GenerateFileResponse",
    "GenerateRequest",
    "GeneratorConfig",
    "GeneratorError",
    "HookGenerator",
    "InvalidInputError",
    "TolerantParser",
    "generate_batch_models",
    "generate_files",
    "generate_from_openapi",
]

"""
Value objects passed into and out of the hook generator.

Everything here is created per invocation and discarded once the
fragments are returned.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Iterable, Iterator, List, Optional, Tuple

from .core.generator import GeneratorError
from .core.naming import VariableMapping
from ..parsing import InvalidInputError


class MissingInputError(GeneratorError):
    """Raised when a mandatory request field is absent."""

    def __init__(self, missing: List[str]):
        self.missing = list(missing)
        super().__init__(f"Missing required fields: {', '.join(self.missing)}")


class HttpMethod(Enum):
    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"

    @classmethod
    def parse(cls, value: str) -> "HttpMethod":
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            allowed = ", ".join(m.value for m in cls)
            raise InvalidInputError(
                f"Unsupported method type {value!r} (expected one of {allowed})"
            ) from None

    @property
    def sends_query_params(self) -> bool:
        """GET and DELETE carry variables as query parameters, not a body."""
        return self in (HttpMethod.GET, HttpMethod.DELETE)


class HookType(Enum):
    QUERY = "query"
    MUTATION = "mutation"
    INFINITE_QUERY = "infiniteQuery"

    @classmethod
    def parse(cls, value: str) -> "HookType":
        text = str(value).strip()
        for member in cls:
            if text in (member.value, member.hook_function):
                return member
        allowed = ", ".join(m.value for m in cls)
        raise InvalidInputError(
            f"Unsupported hook type {value!r} (expected one of {allowed})"
        )

    @property
    def hook_function(self) -> str:
        """The React Query function the generated hook calls."""
        return "use" + self.value[0].upper() + self.value[1:]

    @property
    def uses_query_key(self) -> bool:
        return self is not HookType.MUTATION


@dataclass
class GenerateRequest:
    """Description of one endpoint to generate fragments for."""

    feature_name: str = ""
    method_type: str = ""
    api_url: str = ""
    hook_type: str = ""
    example_response: str = ""
    params: str = ""
    response_schema: Optional[str] = None
    params_schema: Optional[str] = None
    skip_model_generation: bool = False
    wrapper_args: Optional[str] = None

    _REQUIRED = (
        ("feature_name", "featureName"),
        ("method_type", "methodType"),
        ("api_url", "apiUrl"),
        ("hook_type", "hookType"),
    )

    def validate(self) -> Tuple[HttpMethod, HookType]:
        """
        Check mandatory fields and parse the enumerated ones.

        Raises:
            MissingInputError: listing every absent mandatory field
            InvalidInputError: for an unknown method or hook type
        """
        missing = [
            label
            for attr, label in self._REQUIRED
            if not str(getattr(self, attr) or "").strip()
        ]
        if missing:
            raise MissingInputError(missing)
        return HttpMethod.parse(self.method_type), HookType.parse(self.hook_type)


@dataclass
class GenerateFileResponse:
    """The four generated fragments; an empty string means absent."""

    model: str = ""
    api: str = ""
    query_key: str = ""
    hook: str = ""

    KINDS = ("model", "api", "query_key", "hook")

    def fragments(self) -> Iterator[Tuple[str, str]]:
        """Yield ``(kind, text)`` for every non-empty fragment."""
        for kind in self.KINDS:
            text = getattr(self, kind)
            if text:
                yield kind, text

    @classmethod
    def combine(cls, responses: Iterable["GenerateFileResponse"]) -> "GenerateFileResponse":
        """Concatenate responses per fragment kind, skipping empty fragments."""
        collected = {kind: [] for kind in cls.KINDS}
        for response in responses:
            for kind, text in response.fragments():
                collected[kind].append(text)
        return cls(**{kind: "\n\n".join(parts) for kind, parts in collected.items()})


@dataclass
class BatchModelSpec:
    feature_name: str
    response_schema: Optional[str] = None
    params_schema: Optional[str] = None


@dataclass
class EndpointDescriptor:
    """One operation imported from an API description."""

    feature_name: str
    method: str
    path: str
    hook_type: str
    response_schema: Optional[str] = None
    params_schema: Optional[str] = None
    summary: Optional[str] = None
    example_response: str = ""
    params: str = ""
    wrapper_args: Optional[str] = None

    def to_request(self, skip_model_generation: bool = True) -> GenerateRequest:
        return GenerateRequest(
            feature_name=self.feature_name,
            method_type=self.method,
            api_url=self.path,
            hook_type=self.hook_type,
            example_response=self.example_response,
            params=self.params,
            response_schema=self.response_schema,
            params_schema=self.params_schema,
            skip_model_generation=skip_model_generation,
            wrapper_args=self.wrapper_args,
        )

    def to_model_spec(self) -> BatchModelSpec:
        return BatchModelSpec(
            feature_name=self.feature_name,
            response_schema=self.response_schema,
            params_schema=self.params_schema,
        )


@dataclass
class ExtractedVariables:
    """Result of splitting URL placeholders and parameter keys."""

    url_vars: List[str] = field(default_factory=list)
    param_keys: List[str] = field(default_factory=list)
    body_params: List[str] = field(default_factory=list)
    all_vars: List[str] = field(default_factory=list)
    inference_params: Any = field(default_factory=dict)
    mapping: VariableMapping = field(default_factory=VariableMapping)
    url_template: str = ""
    from_schema: bool = False

    @property
    def has_variables(self) -> bool:
        """Whether a ``<Pascal>Variables`` type exists for this endpoint."""
        return self.from_schema or bool(self.inference_params)

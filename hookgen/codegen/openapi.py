"""
OpenAPI 3 import.

Dereferences a document and turns each operation into an
EndpointDescriptor ready for batch generation.
"""

import json
from typing import Any, Dict, List, Optional, Sequence

from .core.config import GeneratorConfig
from .core.generator import GeneratorError
from .core.naming import NameSanitizer
from .models import EndpointDescriptor, HookType
from ..utils import load_spec_source
from ..logging_config import get_logger

logger = get_logger(__name__)

HTTP_METHODS = ("get", "post", "put", "delete", "patch")
DRAFT_07 = "http://json-schema.org/draft-07/schema#"

_namer = NameSanitizer()


class InvalidSpecError(GeneratorError):
    """Raised when an API description is unusable (no paths, broken $ref)."""

    pass


def dereference(document: Any) -> Dict[str, Any]:
    """
    Inline every local ``$ref`` of an OpenAPI document.

    Recursive references are replaced by an empty schema.

    Raises:
        InvalidSpecError: when the document has no ``paths`` object or a
            reference cannot be resolved
    """
    if not isinstance(document, dict) or not isinstance(document.get("paths"), dict):
        raise InvalidSpecError("API description has no 'paths' object")

    def lookup(ref: str) -> Any:
        if not ref.startswith("#/"):
            raise InvalidSpecError(f"Only local references are supported: {ref}")
        node = document
        for part in ref[2:].split("/"):
            part = part.replace("~1", "/").replace("~0", "~")
            if not isinstance(node, dict) or part not in node:
                raise InvalidSpecError(f"Unresolvable reference: {ref}")
            node = node[part]
        return node

    def resolve(node: Any, active: frozenset) -> Any:
        if isinstance(node, dict):
            ref = node.get("$ref")
            if isinstance(ref, str):
                if ref in active:
                    logger.debug("Recursive reference %s replaced by {}", ref)
                    return {}
                return resolve(lookup(ref), active | {ref})
            return {key: resolve(value, active) for key, value in node.items()}
        if isinstance(node, list):
            return [resolve(item, active) for item in node]
        return node

    return resolve(document, frozenset())


def strip_prefix(path: str, prefix: str) -> str:
    if not prefix or not path.startswith(prefix):
        return path
    rest = path[len(prefix) :]
    if rest and not rest.startswith("/"):
        return path
    return rest or "/"


def feature_name_for(method: str, path: str, operation: Dict[str, Any]) -> str:
    """``operationId`` when present, else method plus the last static path segment."""
    operation_id = operation.get("operationId")
    if isinstance(operation_id, str) and operation_id.strip():
        return operation_id.strip()
    segments = [s for s in path.split("/") if s and not s.startswith("{")]
    last = segments[-1] if segments else "root"
    return method + _namer.to_pascal(last)


def _json_schema(content: Any) -> Optional[Any]:
    """Schema of the first JSON media type in a content map."""
    if not isinstance(content, dict):
        return None
    for media_type, media in content.items():
        if "json" in media_type.lower() and isinstance(media, dict) and "schema" in media:
            return media["schema"]
    return None


def response_schema_for(operation: Dict[str, Any]) -> Optional[Any]:
    """First 2xx response carrying a JSON schema."""
    for status, response in (operation.get("responses") or {}).items():
        if str(status).startswith("2") and isinstance(response, dict):
            schema = _json_schema(response.get("content"))
            if schema is not None:
                return schema
    return None


def params_schema_for(
    path_parameters: Sequence[Any], operation: Dict[str, Any]
) -> Optional[Dict[str, Any]]:
    """Draft-07 object schema over query/path parameters and the JSON body."""
    parameters: Dict[tuple, Dict[str, Any]] = {}
    for parameter in list(path_parameters) + list(operation.get("parameters") or []):
        if isinstance(parameter, dict) and parameter.get("in") in ("query", "path"):
            parameters[(parameter["in"], parameter.get("name"))] = parameter

    properties: Dict[str, Any] = {}
    required: List[str] = []

    for (location, name), parameter in parameters.items():
        if not name:
            continue
        schema = dict(parameter.get("schema") or {})
        if parameter.get("description") and "description" not in schema:
            schema["description"] = parameter["description"]
        properties[name] = schema
        if location == "path" or parameter.get("required"):
            required.append(name)

    request_body = operation.get("requestBody")
    if isinstance(request_body, dict):
        body = _json_schema(request_body.get("content"))
        if isinstance(body, dict) and isinstance(body.get("properties"), dict):
            properties.update(body["properties"])
            required.extend(body.get("required") or [])
        elif body is not None:
            properties["body"] = body
            if request_body.get("required"):
                required.append("body")

    if not properties:
        return None

    schema: Dict[str, Any] = {
        "$schema": DRAFT_07,
        "type": "object",
        "properties": properties,
    }
    required = [name for name in dict.fromkeys(required) if name in properties]
    if required:
        schema["required"] = required
    return schema


def extract_endpoints(document: Dict[str, Any], strip_path_prefix: str = "/api") -> List[EndpointDescriptor]:
    """
    One descriptor per operation of a dereferenced document, in document order.

    GET operations become queries; every other method a mutation.
    """
    endpoints = []
    for path, path_item in document.get("paths", {}).items():
        if not isinstance(path_item, dict):
            continue
        shared_parameters = path_item.get("parameters") or []

        for method, operation in path_item.items():
            if method.lower() not in HTTP_METHODS or not isinstance(operation, dict):
                continue
            method = method.lower()

            response_schema = response_schema_for(operation)
            params_schema = params_schema_for(shared_parameters, operation)

            endpoint = EndpointDescriptor(
                feature_name=feature_name_for(method, path, operation),
                method=method.upper(),
                path=strip_prefix(path, strip_path_prefix),
                hook_type=(HookType.QUERY if method == "get" else HookType.MUTATION).value,
                response_schema=json.dumps(response_schema) if response_schema is not None else None,
                params_schema=json.dumps(params_schema) if params_schema is not None else None,
                summary=operation.get("summary"),
            )
            logger.debug("Imported %s %s as %s", endpoint.method, endpoint.path, endpoint.feature_name)
            endpoints.append(endpoint)

    return endpoints


def select_endpoints(endpoints: List[EndpointDescriptor], select: Optional[Sequence[str]]) -> List[EndpointDescriptor]:
    """Keep endpoints matching any ``"METHOD /path"`` (or feature name) filter."""
    if not select:
        return endpoints
    wanted = {" ".join(item.split()).lower() for item in select}
    return [
        endpoint
        for endpoint in endpoints
        if f"{endpoint.method} {endpoint.path}".lower() in wanted
        or endpoint.feature_name.lower() in wanted
    ]


def import_endpoints(
    source: str,
    config: Optional[GeneratorConfig] = None,
    select: Optional[Sequence[str]] = None,
) -> List[EndpointDescriptor]:
    """Load, dereference and extract the endpoints of an OpenAPI document."""
    config = config or GeneratorConfig()
    description, document = load_spec_source(source)
    endpoints = extract_endpoints(dereference(document), config.strip_path_prefix)
    endpoints = select_endpoints(endpoints, select)
    logger.info("Imported %d operations from %s", len(endpoints), description)
    return endpoints

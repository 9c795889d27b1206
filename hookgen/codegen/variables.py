"""
Variable extraction for endpoint URLs and parameter sets.

Finds URL placeholders, merges them with the parameter keys and splits
off the variables that travel in the request body or query string.
"""

import re
from typing import Any, Dict, List, Optional, Sequence

from .core.config import GeneratorConfig
from .core.naming import NameSanitizer, VariableMapping
from .models import ExtractedVariables
from ..parsing import InputParser, InvalidInputError
from ..logging_config import get_logger

logger = get_logger(__name__)

# `{id}` or `${id}`; names may hold any character except braces
PLACEHOLDER_PATTERN = re.compile(r"\$?\{([^{}]+?)\}")


def unique(values: Sequence[str]) -> List[str]:
    """Drop repeated values, keeping first-seen order."""
    seen = set()
    result = []
    for value in values:
        if value not in seen:
            seen.add(value)
            result.append(value)
    return result


def find_url_vars(api_url: str) -> List[str]:
    return unique([m.group(1).strip() for m in PLACEHOLDER_PATTERN.finditer(api_url)])


def rewrite_url(api_url: str, mapping: VariableMapping) -> str:
    """
    Rewrite ``api_url`` as the body of a template literal.

    Placeholders become ``${identifier}`` using the identifiers of
    ``mapping``; literal back-ticks and backslashes are escaped.
    """
    parts = []
    last = 0
    for match in PLACEHOLDER_PATTERN.finditer(api_url):
        parts.append(_escape_literal(api_url[last : match.start()]))
        parts.append("${" + mapping.identifier_for(match.group(1).strip()) + "}")
        last = match.end()
    parts.append(_escape_literal(api_url[last:]))
    return "".join(parts)


def _escape_literal(text: str) -> str:
    return text.replace("\\", "\\\\").replace("`", "\\`").replace("${", "\\${")


class VariableExtractor:
    """Computes the variable set of one endpoint."""

    def __init__(
        self,
        parser: InputParser,
        sanitizer: NameSanitizer,
        config: Optional[GeneratorConfig] = None,
        taken: Sequence[str] = (),
    ):
        self.parser = parser
        self.sanitizer = sanitizer
        self.taken = tuple(taken)
        self.config = config or GeneratorConfig()

    def parse_params(self, params_text: str) -> Dict[str, Any]:
        """Parse example params; an array contributes its first element."""
        if not params_text or not params_text.strip():
            return {}

        parsed = self.parser.parse(params_text)
        if isinstance(parsed, list):
            parsed = parsed[0] if parsed else {}
        if not isinstance(parsed, dict):
            raise InvalidInputError(
                f"Params must be a JSON object, got {type(parsed).__name__}"
            )
        return dict(parsed)

    def schema_properties(self, params_schema: Any) -> List[str]:
        """Declared property names of an already-parsed params schema."""
        if not isinstance(params_schema, dict):
            raise InvalidInputError("Params schema must be a JSON object")
        properties = params_schema.get("properties") or {}
        if not isinstance(properties, dict):
            raise InvalidInputError("Params schema 'properties' must be an object")
        return list(properties)

    def extract(
        self,
        api_url: str,
        params_text: str = "",
        params_schema: Any = None,
        taken: Sequence[str] = (),
    ) -> ExtractedVariables:
        """
        Extract the variables of one endpoint.

        Args:
            api_url: URL template with ``{name}`` / ``${name}`` placeholders
            params_text: example parameter object as text
            params_schema: parsed params schema; takes precedence over
                ``params_text`` for the parameter key list
            taken: names this endpoint already binds, reserved on top of the
                extractor-wide ones

        Returns:
            ExtractedVariables with the ordered variable lists, the
            inference params (URL variables filled with a placeholder value),
            one identifier mapping over every variable and the URL rewritten
            with those identifiers
        """
        url_vars = find_url_vars(api_url)

        if params_schema is not None:
            param_keys = self.schema_properties(params_schema)
            inference_params: Dict[str, Any] = {}
        else:
            inference_params = self.parse_params(params_text)
            for var in url_vars:
                if var not in inference_params:
                    inference_params[var] = self.config.placeholder_value
            param_keys = list(inference_params)

        url_var_set = set(url_vars)
        body_params = [key for key in param_keys if key not in url_var_set]
        all_vars = unique(url_vars + param_keys)
        mapping = self.sanitizer.resolve_all(all_vars, taken=self.taken + tuple(taken))

        logger.debug(
            "Variables for %s: url=%s body=%s", api_url, url_vars, body_params
        )

        return ExtractedVariables(
            url_vars=url_vars,
            param_keys=param_keys,
            body_params=body_params,
            all_vars=all_vars,
            inference_params=inference_params,
            mapping=mapping,
            url_template=rewrite_url(api_url, mapping),
            from_schema=params_schema is not None,
        )

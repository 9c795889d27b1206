"""
Response envelope classification.

Decides, from an example payload, which part of the response gets a
synthesized type and which wrapper type the request function returns.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Iterable, Optional

from .core.config import GeneratorConfig
from ..logging_config import get_logger

logger = get_logger(__name__)


class ResponseShape(Enum):
    PLAIN_VALUE = "plain"
    WRAPPED_VALUE = "wrapped"
    PAGINATED_ARRAY = "paginated"


@dataclass
class Classification:
    """Where the type comes from and what the request function returns."""

    shape: ResponseShape
    payload: Any
    type_name: str
    return_type: str
    array_key: Optional[str] = None


def js_truthy(value: Any) -> bool:
    """Truthiness as JavaScript sees it: empty objects and arrays are truthy."""
    if value is None or value is False:
        return False
    if isinstance(value, (dict, list)):
        return True
    if isinstance(value, (int, float)):
        return value != 0 and value == value
    if isinstance(value, str):
        return value != ""
    return True


class ArrayKeyPolicy:
    """Picks the key holding the page of records: the first array-valued key."""

    def select(self, data: dict) -> Optional[str]:
        for key, value in data.items():
            if isinstance(value, list):
                return key
        return None


class PageFieldPolicy:
    """Decides which request variable carries the page number."""

    def __init__(self, field_names: Iterable[str] = ("pageNo",)):
        self.field_names = list(field_names)

    def select(self, keys: Iterable[str]) -> Optional[str]:
        keys = list(keys)
        for name in self.field_names:
            if name in keys:
                return name
        return None


class ResponseShapeClassifier:
    """Classifies example payloads against the success/data envelope."""

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        array_key_policy: Optional[ArrayKeyPolicy] = None,
    ):
        self.config = config or GeneratorConfig()
        self.array_key_policy = array_key_policy or ArrayKeyPolicy()

    def classify(self, payload: Any, pascal_name: str) -> Classification:
        """
        Classify an example payload.

        Args:
            payload: parsed example response
            pascal_name: PascalCase feature name used for type names

        Returns:
            Classification naming the payload to synthesize and the return type
        """
        response_name = f"{pascal_name}Response"

        if not (
            isinstance(payload, dict)
            and payload.get("success") is True
            and js_truthy(payload.get("data"))
        ):
            logger.debug("%s: plain value", pascal_name)
            return Classification(
                shape=ResponseShape.PLAIN_VALUE,
                payload=payload,
                type_name=response_name,
                return_type=response_name,
            )

        data = payload["data"]
        count_fields = (self.config.total_count_field, self.config.filtered_count_field)
        paginated = isinstance(data, dict) and all(k in data for k in count_fields)

        if not paginated:
            logger.debug("%s: wrapped value", pascal_name)
            return self._wrapped(data, response_name)

        array_key = self.array_key_policy.select(data)
        if array_key is not None and data[array_key]:
            item_name = f"{pascal_name}Item"
            if array_key == "data":
                return_type = f"{self.config.list_wrapper}<{item_name}[]>"
            else:
                return_type = (
                    f"{self.config.named_list_wrapper}<'{array_key}', {item_name}>"
                )
            logger.debug("%s: paginated array under %r", pascal_name, array_key)
            return Classification(
                shape=ResponseShape.PAGINATED_ARRAY,
                payload=data[array_key][0],
                type_name=item_name,
                return_type=return_type,
                array_key=array_key,
            )

        logger.warning(
            "%s: paginated envelope without a non-empty array; typing the whole data block",
            pascal_name,
        )
        return self._wrapped(data, f"{pascal_name}Data")

    def _wrapped(self, data: Any, type_name: str) -> Classification:
        return Classification(
            shape=ResponseShape.WRAPPED_VALUE,
            payload=data,
            type_name=type_name,
            return_type=f"{self.config.value_wrapper}<{type_name}>",
        )

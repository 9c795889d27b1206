"""
Structural analysis of example JSON values.

The analyzer turns a parsed example (the body an endpoint returns, or the
params a caller sends) into a nested summary that
``convert_analyzer_output`` lifts into a :class:`Schema`.

Summary nodes are plain dicts:

- ``{"type": "object", "children": {key: node}, "conflicts": {key: [types]}}``
- ``{"type": "list", "child": node}`` for arrays of objects or arrays
- ``{"type": "list", "child_type": "int" | "mixed:int,str" | "unknown"}``
- ``{"type": "str" | "int" | "float" | "bool" | "timestamp"}``
- ``{"type": "unknown", "is_none": True}`` for ``null``

Fields merged from several array elements also carry ``"optional"``.
"""

import re
from collections import Counter
from typing import Any, Dict, List, Tuple

import dateparser

from .logging_config import get_logger

logger = get_logger(__name__)

_HAS_DIGIT = re.compile(r"\d")

# Elements inspected per array; examples are usually homogeneous
SAMPLE_SIZE = 20

_EMPTY_VALUES = (None, {}, [], "")


def detect_timestamp(value: Any) -> bool:
    # "today" and "now" parse as dates but are never sent as timestamps
    if not isinstance(value, str) or len(value) < 4 or not _HAS_DIGIT.search(value):
        return False
    return dateparser.parse(value) is not None


def _mixed(types) -> str:
    return f"mixed:{','.join(sorted(types))}"


class ExampleAnalyzer:
    """Summarizes the shape of example JSON values."""

    def __init__(self, detect_timestamps: bool = True):
        self.detect_timestamps = detect_timestamps

    def analyze(self, value: Any) -> Dict[str, Any]:
        summary = self._summarize(value)
        logger.debug("Analyzed example of type %s", summary["type"])
        return summary

    def _summarize(self, value: Any) -> Dict[str, Any]:
        if isinstance(value, dict):
            return {
                "type": "object",
                "children": {key: self._summarize(item) for key, item in value.items()},
            }
        if isinstance(value, list):
            return self._summarize_list(value)
        if value is None:
            return {"type": "unknown", "is_none": True}
        if isinstance(value, str):
            if self.detect_timestamps and detect_timestamp(value):
                return {"type": "timestamp"}
            return {"type": "str"}
        return {"type": type(value).__name__}

    def _summarize_list(self, items: List[Any]) -> Dict[str, Any]:
        present = [item for item in items if item not in _EMPTY_VALUES]
        if not present:
            return {"type": "list", "child_type": "unknown"}

        elements = [self._summarize(item) for item in present[:SAMPLE_SIZE]]
        kinds = {element["type"] for element in elements}

        if kinds == {"object"}:
            children, conflicts = self._merge_objects(elements)
            return {
                "type": "list",
                "child": {"type": "object", "children": children, "conflicts": conflicts},
            }
        if kinds == {"list"}:
            return {"type": "list", "child": self._merge_lists(elements)}
        if len(kinds) == 1:
            return {"type": "list", "child_type": kinds.pop()}
        return {"type": "list", "child_type": _mixed(kinds)}

    def _merge_objects(
        self, objects: List[Dict[str, Any]]
    ) -> Tuple[Dict[str, Any], Dict[str, List[str]]]:
        """
        Merge the children of several object summaries into one.

        A key is optional when some object lacks it or holds ``null`` for it.
        Keys whose concrete types disagree become ``conflict`` nodes and are
        listed in the returned conflicts mapping.
        """
        seen: Dict[str, List[Dict[str, Any]]] = {}
        nulls = Counter()
        for obj in objects:
            for key, child in obj.get("children", {}).items():
                seen.setdefault(key, []).append(child)
                if child["type"] == "unknown":
                    nulls[key] += 1

        merged = {}
        conflicts = {}
        for key, variants in seen.items():
            optional = len(variants) < len(objects) or nulls[key] > 0
            concrete = [v for v in variants if v["type"] != "unknown"] or variants
            kinds = sorted({v["type"] for v in concrete})

            if len(kinds) > 1:
                merged[key] = {"type": "conflict", "optional": optional}
                conflicts[key] = kinds
                continue

            node = self._combine(kinds[0], concrete)
            node["optional"] = optional
            merged[key] = node

        return merged, conflicts

    def _combine(self, kind: str, variants: List[Dict[str, Any]]) -> Dict[str, Any]:
        if kind == "object":
            children, conflicts = self._merge_objects(variants)
            node = {"type": "object", "children": children}
            if conflicts:
                node["conflicts"] = conflicts
            return node
        if kind == "list":
            return self._merge_lists(variants)

        node = {"type": kind}
        if variants[0].get("is_none"):
            node["is_none"] = True
        return node

    def _merge_lists(self, lists: List[Dict[str, Any]]) -> Dict[str, Any]:
        nested = [summary["child"] for summary in lists if "child" in summary]
        if nested:
            kinds = {child["type"] for child in nested}
            if kinds == {"object"} or kinds == {"list"}:
                return {"type": "list", "child": self._combine_elements(kinds.pop(), nested)}
            return {"type": "list", "child_type": "mixed"}

        primitives = {summary["child_type"] for summary in lists} - {"unknown"}
        if len(primitives) == 1:
            return {"type": "list", "child_type": primitives.pop()}
        if primitives:
            return {"type": "list", "child_type": _mixed(primitives)}
        return {"type": "list", "child_type": "unknown"}

    def _combine_elements(self, kind: str, elements: List[Dict[str, Any]]) -> Dict[str, Any]:
        if kind == "list":
            return self._merge_lists(elements)
        children, conflicts = self._merge_objects(elements)
        return {"type": "object", "children": children, "conflicts": conflicts}


def analyze_json(data: Any, detect_timestamps: bool = True) -> Dict[str, Any]:
    """Summarize the structure of a parsed JSON value."""
    return ExampleAnalyzer(detect_timestamps).analyze(data)

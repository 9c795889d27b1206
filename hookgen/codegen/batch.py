"""
Batch model aggregation.

Collects the response and variables schemas of many endpoints and turns
them into one combined type block with a single synthesizer call.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .core.naming import NameSanitizer
from .models import BatchModelSpec
from .synthesis import SynthesisBridge, TypeSynthesizer
from ..logging_config import get_logger

logger = get_logger(__name__)

BATCH_FEATURE = "batch"


@dataclass
class BatchModelPlan:
    """Type names for every spec plus the schemas that were actually given."""

    names: List[Tuple[str, str]] = field(default_factory=list)
    sources: List[Tuple[str, str]] = field(default_factory=list)


def unique_feature_names(names: Sequence[str]) -> List[str]:
    """Suffix repeated feature names (``getUser``, ``getUser2``) in order."""
    used = set()
    result = []
    for name in names:
        candidate = name
        counter = 2
        while candidate in used:
            candidate = f"{name}{counter}"
            counter += 1
        used.add(candidate)
        result.append(candidate)
    return result


class BatchModelAggregator:
    """Derives batch type names and issues the single batch synthesis call."""

    def __init__(self, synthesizer: TypeSynthesizer, sanitizer: Optional[NameSanitizer] = None):
        self.synthesizer = synthesizer
        self.sanitizer = sanitizer or NameSanitizer()

    def collect(self, specs: Sequence[BatchModelSpec]) -> BatchModelPlan:
        """
        Derive ``(Response, Variables)`` names for each spec in order.

        Every spec contributes a name pair; only specs with a schema
        contribute a ``(name, schema)`` source.
        """
        plan = BatchModelPlan()
        for spec in specs:
            pascal = self.sanitizer.to_pascal(spec.feature_name)
            response_name = f"{pascal}Response"
            variables_name = f"{pascal}Variables"
            plan.names.append((response_name, variables_name))

            if spec.response_schema:
                plan.sources.append((response_name, spec.response_schema))
            if spec.params_schema:
                plan.sources.append((variables_name, spec.params_schema))
        return plan

    def generate(self, specs: Sequence[BatchModelSpec]) -> str:
        """Combined type block for ``specs``; empty when no schema is defined."""
        plan = self.collect(specs)
        if not plan.sources:
            logger.debug("No schemas among %d batch specs", len(specs))
            return ""

        logger.info(
            "Synthesizing %d types for %d endpoints", len(plan.sources), len(specs)
        )
        bridge = SynthesisBridge(self.synthesizer, BATCH_FEATURE)
        return bridge.from_schemas(plan.sources)

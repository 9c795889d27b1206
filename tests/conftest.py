"""Shared fixtures for the hookgen test suite."""

import pytest

from hookgen.codegen.core.config import GeneratorConfig
from hookgen.codegen.pipeline import HookGenerator
from hookgen.codegen.synthesis import TypeSynthesizer


class FakeSynthesizer(TypeSynthesizer):
    """Records every call and returns one marker line per requested type."""

    def __init__(self):
        self.calls = []

    def from_example(self, value, name):
        self.calls.append(("example", name, value))
        return f"// example {name}"

    def from_schema(self, schema_text, name):
        self.calls.append(("schema", name, schema_text))
        return f"// schema {name}"

    def from_schemas(self, sources):
        self.calls.append(("batch", [name for name, _ in sources]))
        return "\n".join(f"// batch {name}" for name, _ in sources)


class FailingSynthesizer(TypeSynthesizer):
    """Fails on every call."""

    def from_example(self, value, name):
        raise RuntimeError("synthesizer unavailable")

    def from_schema(self, schema_text, name):
        raise RuntimeError("synthesizer unavailable")

    def from_schemas(self, sources):
        raise RuntimeError("synthesizer unavailable")


@pytest.fixture
def config():
    return GeneratorConfig(detect_timestamps=False)


@pytest.fixture
def fake_synthesizer():
    return FakeSynthesizer()


@pytest.fixture
def generator(config, fake_synthesizer):
    """Hook generator with the recording synthesizer."""
    return HookGenerator(config, synthesizer=fake_synthesizer)


@pytest.fixture
def real_generator(config):
    """Hook generator with the in-process TypeScript synthesizer."""
    return HookGenerator(config)


PAGINATED_USERS = """
{
  "success": true,
  "data": {
    "totalRecords": 2,
    "filteredRecords": 2,
    "data": [{"id": 1, "name": "Alice"}, {"id": 2, "name": "Bob"}]
  }
}
"""

"""Tests for batch model aggregation and multi-endpoint generation."""

import json

from hookgen import generate_batch_models
from hookgen.codegen.batch import BatchModelAggregator, unique_feature_names
from hookgen.codegen.languages.typescript import create_typescript_sanitizer
from hookgen.codegen.models import BatchModelSpec, EndpointDescriptor

USER_SCHEMA = json.dumps({"type": "object", "properties": {"id": {"type": "integer"}}})
QUERY_SCHEMA = json.dumps({"type": "object", "properties": {"q": {"type": "string"}}})


class TestUniqueFeatureNames:
    def test_repeats_suffixed_in_order(self):
        assert unique_feature_names(["getUser", "getUser", "list", "getUser"]) == [
            "getUser",
            "getUser2",
            "list",
            "getUser3",
        ]

    def test_distinct_names_untouched(self):
        assert unique_feature_names(["a", "b"]) == ["a", "b"]


class TestBatchModelAggregator:
    def setup_method(self):
        self.specs = [
            BatchModelSpec("getUser", response_schema=USER_SCHEMA),
            BatchModelSpec("searchUsers", response_schema=USER_SCHEMA, params_schema=QUERY_SCHEMA),
            BatchModelSpec("ping"),
        ]

    def test_name_pairs_for_every_spec(self, fake_synthesizer):
        plan = BatchModelAggregator(fake_synthesizer, create_typescript_sanitizer()).collect(self.specs)
        assert plan.names == [
            ("GetUserResponse", "GetUserVariables"),
            ("SearchUsersResponse", "SearchUsersVariables"),
            ("PingResponse", "PingVariables"),
        ]
        assert [name for name, _ in plan.sources] == [
            "GetUserResponse",
            "SearchUsersResponse",
            "SearchUsersVariables",
        ]

    def test_single_batch_call(self, fake_synthesizer):
        block = BatchModelAggregator(fake_synthesizer).generate(self.specs)
        assert fake_synthesizer.calls == [
            ("batch", ["GetUserResponse", "SearchUsersResponse", "SearchUsersVariables"])
        ]
        assert block.splitlines() == [
            "// batch GetUserResponse",
            "// batch SearchUsersResponse",
            "// batch SearchUsersVariables",
        ]

    def test_no_schemas_no_call(self, fake_synthesizer):
        assert BatchModelAggregator(fake_synthesizer).generate([BatchModelSpec("ping")]) == ""
        assert fake_synthesizer.calls == []

    def test_convenience_accepts_dicts(self, config):
        block = generate_batch_models(
            [{"feature_name": "getUser", "response_schema": USER_SCHEMA}], config
        )
        assert block == "export interface GetUserResponse {\n  id?: number;\n}"


class TestGenerateBatch:
    def endpoints(self):
        return [
            EndpointDescriptor("getUser", "GET", "/users/{id}", "query", response_schema=USER_SCHEMA),
            EndpointDescriptor(
                "searchUsers", "GET", "/users", "query",
                response_schema=USER_SCHEMA, params_schema=QUERY_SCHEMA,
            ),
            EndpointDescriptor("ping", "POST", "/ping", "mutation"),
        ]

    def test_one_synthesis_call_then_emission(self, generator, fake_synthesizer):
        response = generator.generate_batch(self.endpoints())
        assert fake_synthesizer.calls == [
            ("batch", ["GetUserResponse", "SearchUsersResponse", "SearchUsersVariables"])
        ]
        assert response.model.count("// batch") == 3

    def test_fragments_concatenated_in_order(self, generator):
        response = generator.generate_batch(self.endpoints())
        api = response.api
        assert api.index("export const getUser =") < api.index("export const searchUsers =")
        assert api.index("export const searchUsers =") < api.index("export const ping =")
        assert "\n\nexport const searchUsers =" in api
        assert response.query_key.count("export const") == 2
        assert response.hook.count("export const use") == 3

    def test_schema_less_endpoint_gets_fallback_type(self, generator):
        response = generator.generate_batch(self.endpoints())
        assert "export const ping = async (): Promise<any> => {" in response.api

    def test_duplicate_feature_names_suffixed(self, generator, fake_synthesizer):
        endpoints = [
            EndpointDescriptor("getUser", "GET", "/users/{id}", "query", response_schema=USER_SCHEMA),
            EndpointDescriptor("getUser", "GET", "/v2/users/{id}", "query", response_schema=USER_SCHEMA),
        ]
        response = generator.generate_batch(endpoints)
        assert fake_synthesizer.calls == [("batch", ["GetUserResponse", "GetUser2Response"])]
        assert "export const getUser2 = async (" in response.api
        assert "Promise<GetUser2Response>" in response.api
        assert "export const useGetUser2 = " in response.hook

    def test_real_synthesizer_block(self, real_generator):
        response = real_generator.generate_batch(self.endpoints())
        assert response.model == (
            "export interface GetUserResponse {\n"
            "  id?: number;\n"
            "}\n"
            "\n"
            "export interface SearchUsersResponse {\n"
            "  id?: number;\n"
            "}\n"
            "\n"
            "export interface SearchUsersVariables {\n"
            "  q?: string;\n"
            "}"
        )

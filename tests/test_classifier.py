"""Tests for response envelope classification."""

from hookgen.codegen.classifier import (
    ArrayKeyPolicy,
    PageFieldPolicy,
    ResponseShape,
    ResponseShapeClassifier,
    js_truthy,
)
from hookgen.codegen.core.config import GeneratorConfig


class TestResponseShapeClassifier:
    def setup_method(self):
        self.classifier = ResponseShapeClassifier()

    def test_paginated_under_data(self):
        payload = {
            "success": True,
            "data": {"totalRecords": 2, "filteredRecords": 2, "data": [{"id": 1}]},
        }
        result = self.classifier.classify(payload, "GetUsers")
        assert result.shape is ResponseShape.PAGINATED_ARRAY
        assert result.array_key == "data"
        assert result.payload == {"id": 1}
        assert result.type_name == "GetUsersItem"
        assert result.return_type == "WithRecordResponse<GetUsersItem[]>"

    def test_paginated_under_named_key(self):
        payload = {
            "success": True,
            "data": {"totalRecords": 1, "filteredRecords": 1, "items": [{"name": "a"}]},
        }
        result = self.classifier.classify(payload, "GetItems")
        assert result.shape is ResponseShape.PAGINATED_ARRAY
        assert result.array_key == "items"
        assert result.return_type == "WithCustomRecordResponse<'items', GetItemsItem>"

    def test_wrapped_value(self):
        result = self.classifier.classify({"success": True, "data": {"id": 1}}, "GetUser")
        assert result.shape is ResponseShape.WRAPPED_VALUE
        assert result.payload == {"id": 1}
        assert result.type_name == "GetUserResponse"
        assert result.return_type == "WithResponse<GetUserResponse>"

    def test_plain_value(self):
        result = self.classifier.classify({"id": 1}, "GetUser")
        assert result.shape is ResponseShape.PLAIN_VALUE
        assert result.payload == {"id": 1}
        assert result.return_type == "GetUserResponse"

    def test_success_must_be_true(self):
        result = self.classifier.classify({"success": "true", "data": {"id": 1}}, "X")
        assert result.shape is ResponseShape.PLAIN_VALUE

    def test_falsy_data_is_plain(self):
        for data in (None, 0, "", False):
            result = self.classifier.classify({"success": True, "data": data}, "X")
            assert result.shape is ResponseShape.PLAIN_VALUE

    def test_empty_object_data_is_wrapped(self):
        result = self.classifier.classify({"success": True, "data": {}}, "X")
        assert result.shape is ResponseShape.WRAPPED_VALUE

    def test_empty_page_falls_back_to_whole_data(self):
        data = {"totalRecords": 0, "filteredRecords": 0, "data": []}
        result = self.classifier.classify({"success": True, "data": data}, "GetUsers")
        assert result.shape is ResponseShape.WRAPPED_VALUE
        assert result.payload == data
        assert result.type_name == "GetUsersData"
        assert result.return_type == "WithResponse<GetUsersData>"

    def test_configured_wrappers_and_count_fields(self):
        config = GeneratorConfig(
            list_wrapper="Paged",
            total_count_field="total",
            filtered_count_field="filtered",
        )
        payload = {"success": True, "data": {"total": 1, "filtered": 1, "data": [{"id": 1}]}}
        result = ResponseShapeClassifier(config).classify(payload, "GetUsers")
        assert result.return_type == "Paged<GetUsersItem[]>"

    def test_custom_array_key_policy(self):
        class LastArrayKey(ArrayKeyPolicy):
            def select(self, data):
                keys = [k for k, v in data.items() if isinstance(v, list)]
                return keys[-1] if keys else None

        data = {"totalRecords": 1, "filteredRecords": 1, "tags": ["a"], "rows": [{"id": 1}]}
        classifier = ResponseShapeClassifier(array_key_policy=LastArrayKey())
        result = classifier.classify({"success": True, "data": data}, "X")
        assert result.array_key == "rows"


class TestPolicies:
    def test_first_array_key(self):
        assert ArrayKeyPolicy().select({"count": 1, "rows": [], "more": [1]}) == "rows"
        assert ArrayKeyPolicy().select({"count": 1}) is None

    def test_page_field_preference_order(self):
        policy = PageFieldPolicy(["page", "pageNo"])
        assert policy.select(["size", "pageNo"]) == "pageNo"
        assert policy.select(["page", "pageNo"]) == "page"
        assert policy.select(["size"]) is None

    def test_js_truthy(self):
        assert js_truthy({}) and js_truthy([]) and js_truthy("a") and js_truthy(1)
        assert not any(js_truthy(v) for v in (None, False, 0, 0.0, "", float("nan")))

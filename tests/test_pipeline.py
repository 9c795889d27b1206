"""Tests for single-endpoint generation through HookGenerator."""

import json

import pytest

from hookgen import generate_files
from hookgen.codegen.core.config import GeneratorConfig
from hookgen.codegen.models import GenerateFileResponse, GenerateRequest, HookType, MissingInputError
from hookgen.codegen.pipeline import HookGenerator
from hookgen.codegen.synthesis import SchemaGenerationError
from hookgen.parsing import InvalidInputError

from conftest import PAGINATED_USERS, FailingSynthesizer


def request(**overrides):
    fields = {
        "feature_name": "getUser",
        "method_type": "GET",
        "api_url": "/users/{id}",
        "hook_type": "query",
        "example_response": '{"id": 1, "name": "Alice"}',
    }
    fields.update(overrides)
    return GenerateRequest(**fields)


class TestQuery:
    def test_query_key(self, generator):
        response = generator.generate(request())
        assert response.query_key == (
            "export const getUserKey = {\n"
            "  keys: (args: { scope: 'getUser' } & GetUserVariables) => [args] as const,\n"
            "};"
        )

    def test_api_destructures_key_and_wires_cancellation(self, generator):
        api = generator.generate(request()).api
        assert api.startswith("export const getUser = async (\n")
        assert "context: QueryFunctionContext<ReturnType<typeof getUserKey.keys>>" in api
        assert "): Promise<GetUserResponse> => {" in api
        assert "  const { id } = queryKey[0];" in api
        assert "const { pageParam }" not in api
        assert "source.cancel(`/users/${id} - Request cancelled`);" in api
        assert "await getInstance().get(`/users/${id}`, { cancelToken: source.token });" in api
        assert "    return response.data;" in api
        assert "return Promise.reject(((e as any).response as AxiosResponse) ?? e);" in api

    def test_hook(self, generator):
        hook = generator.generate(request()).hook
        assert hook.startswith(
            "export const useGetUser = ({ id, options }: "
            "GetUserVariables & { options?: { enabled?: boolean } }) => {"
        )
        assert "useQuery(" in hook
        assert "scope: 'getUser', id" in hook
        assert "...options" in hook

    def test_model_order_and_synthesizer_calls(self, generator, fake_synthesizer):
        response = generator.generate(request())
        assert response.model == "// example GetUserVariables\n\n// example GetUserResponse"
        assert fake_synthesizer.calls == [
            ("example", "GetUserVariables", {"id": 123}),
            ("example", "GetUserResponse", {"id": 1, "name": "Alice"}),
        ]

    def test_get_params_sent_as_query_params(self, generator):
        response = generator.generate(
            request(feature_name="searchUsers", api_url="/users", params='{"q": "a", "page-size": 5}')
        )
        assert (
            'await getInstance().get(`/users`, { params: { q, "page-size": pageSize }, '
            "cancelToken: source.token });"
        ) in response.api
        assert "scope: 'searchUsers', q, \"page-size\": pageSize" in response.hook

    def test_post_query_without_variables_sends_empty_body(self, generator):
        response = generator.generate(request(feature_name="listAll", method_type="POST", api_url="/all"))
        assert "await getInstance().post(`/all`, {}, { cancelToken: source.token });" in response.api
        assert "const { id }" not in response.api
        assert response.query_key == (
            "export const listAllKey = {\n"
            "  keys: (args: { scope: 'listAll' }) => [args] as const,\n"
            "};"
        )
        assert "({ options }: { options?: { enabled?: boolean } })" in response.hook

    def test_wrapper_envelope(self, generator):
        api = generator.generate(request(wrapper_args="ApiEnvelope")).api
        assert "const response: AxiosResponse<ApiEnvelope<GetUserResponse>> =" in api
        assert "if (response.data.success !== true) {" in api
        assert "return Promise.reject('Something went wrong!');" in api
        assert "return response.data?.data;" in api
        assert "): Promise<GetUserResponse> => {" in api

    def test_wrapped_example_return_type(self, generator):
        api = generator.generate(
            request(example_response='{"success": true, "data": {"id": 1}}')
        ).api
        assert "): Promise<WithResponse<GetUserResponse>> => {" in api

    def test_url_variable_clashing_with_template_local(self, generator):
        response = generator.generate(request(api_url="/feeds/{source}"))
        assert "`/feeds/${source_2}`" in response.api
        assert 'const { "source": source_2 } = queryKey[0];' in response.api

    def test_hook_type_aliases(self, generator):
        assert HookType.parse("useQuery") is HookType.QUERY
        assert HookType.parse("useInfiniteQuery") is HookType.INFINITE_QUERY
        response = generator.generate(request(hook_type="useQuery"))
        assert "useQuery(" in response.hook


class TestNameCollisions:
    def test_axios_bindings_renamed(self, generator):
        api = generator.generate(
            request(feature_name="getUsers", api_url="/users", params='{"CancelToken": 1, "axios": 2}')
        ).api
        assert 'const { "CancelToken": CancelToken_2, "axios": axios_2 } = queryKey[0];' in api
        assert api.count("const { CancelToken } = axios;") == 1

    def test_variable_named_after_feature(self, generator):
        response = generator.generate(
            request(feature_name="getUsers", api_url="/users", params='{"getUsers": 1, "useGetUsers": 2}')
        )
        assert response.hook.startswith(
            'export const useGetUsers = ({ "getUsers": getUsers_2, "useGetUsers": useGetUsers_2, options }'
        )
        assert "    getUsers,\n" in response.hook

    def test_variable_named_after_key_factory_and_client(self, generator):
        api = generator.generate(
            request(feature_name="getUsers", api_url="/users", params='{"getUsersKey": 1, "getInstance": 2}')
        ).api
        assert 'const { "getUsersKey": getUsersKey_2, "getInstance": getInstance_2 } = queryKey[0];' in api
        assert "await getInstance().get(" in api

    def test_custom_client_root_reserved(self, fake_synthesizer):
        config = GeneratorConfig(http_client="apiClient.instance")
        generator = HookGenerator(config, synthesizer=fake_synthesizer)
        api = generator.generate(request(api_url="/users/{apiClient}")).api
        assert "await apiClient.instance.get(`/users/${apiClient_2}`" in api

    def test_infinite_hook_local(self, generator):
        hook = generator.generate(
            request(
                feature_name="getUsers",
                method_type="POST",
                api_url="/users/search",
                hook_type="infiniteQuery",
                params='{"pageNo": 1, "queryData": "x"}',
                example_response=PAGINATED_USERS,
            )
        ).hook
        assert '"queryData": queryData_2' in hook
        assert hook.count("const queryData = ") == 1

    def test_scope_variable_rejected_for_queries(self, generator, fake_synthesizer):
        with pytest.raises(InvalidInputError) as excinfo:
            generator.generate(request(api_url="/users", params='{"scope": "all"}'))
        assert "'scope'" in str(excinfo.value)
        assert fake_synthesizer.calls == []

    def test_scope_url_variable_rejected(self, generator):
        with pytest.raises(InvalidInputError):
            generator.generate(request(api_url="/tokens/{scope}", hook_type="infiniteQuery"))

    def test_scope_allowed_in_mutations(self, generator):
        response = generator.generate(
            request(
                feature_name="grant",
                method_type="POST",
                api_url="/grants",
                hook_type="mutation",
                params='{"scope": "all"}',
            )
        )
        assert "await getInstance().post(`/grants`, { scope });" in response.api


class TestInfiniteQuery:
    def make(self, **overrides):
        fields = dict(
            feature_name="getUsers",
            method_type="POST",
            api_url="/users/search",
            hook_type="infiniteQuery",
            params='{"pageNo": 1, "pageSize": 20}',
            example_response=PAGINATED_USERS,
        )
        fields.update(overrides)
        return request(**fields)

    def test_page_field_overridden(self, generator):
        api = generator.generate(self.make()).api
        assert "  const { pageParam } = context;" in api
        assert (
            "await getInstance().post(`/users/search`, "
            "{ pageNo: pageNo ?? pageParam ?? 1, pageSize }, { cancelToken: source.token });"
        ) in api
        assert "): Promise<WithRecordResponse<GetUsersItem[]>> => {" in api

    def test_item_type_synthesized_from_first_record(self, generator, fake_synthesizer):
        response = generator.generate(self.make())
        assert fake_synthesizer.calls[1] == ("example", "GetUsersItem", {"id": 1, "name": "Alice"})
        assert response.model == "// example GetUsersVariables\n\n// example GetUsersItem"

    def test_next_page_predicate(self, generator):
        hook = generator.generate(self.make()).hook
        assert "useInfiniteQuery(" in hook
        assert "return prev + (one?.data?.length || 0);" in hook
        assert (
            "if (lastPage?.totalRecords !== undefined && "
            "totalRecordsFetched < lastPage.totalRecords) {"
        ) in hook
        assert "lastPage.filteredRecords" in hook
        assert "return null;" in hook
        assert "showSnackbarOnApiError(e);" in hook
        assert "enabled: options?.enabled," in hook

    def test_named_array_key(self, generator):
        example = json.dumps(
            {"success": True, "data": {"totalRecords": 1, "filteredRecords": 1, "rows": [{"id": 1}]}}
        )
        response = generator.generate(self.make(example_response=example))
        assert "one?.rows?.length" in response.hook
        assert "Promise<WithCustomRecordResponse<'rows', GetUsersItem>>" in response.api

    def test_no_page_field_no_cursor_injection(self, generator):
        api = generator.generate(self.make(params='{"size": 10}')).api
        assert "?? pageParam" not in api
        assert "{ size }, { cancelToken: source.token }" in api

    def test_configured_page_field(self, fake_synthesizer):
        config = GeneratorConfig(page_fields=["page"], default_page=0)
        generator = HookGenerator(config, synthesizer=fake_synthesizer)
        api = generator.generate(self.make(params='{"page": 1}')).api
        assert "{ page: page ?? pageParam ?? 0 }" in api


class TestMutation:
    def test_mutation_fragments(self, generator):
        response = generator.generate(
            request(
                feature_name="createUser",
                method_type="POST",
                api_url="/users",
                hook_type="mutation",
                params='{"name": "a", "post-id": 1}',
                example_response="",
            )
        )
        assert response.query_key == ""
        assert response.api.startswith(
            'export const createUser = async ({ name, "post-id": postId }: CreateUserVariables): '
            "Promise<CreateUserResponse> => {"
        )
        assert 'await getInstance().post(`/users`, { name, "post-id": postId });' in response.api
        assert "cancelToken" not in response.api
        assert "return Promise.reject((e as AxiosError).response ?? e);" in response.api
        assert "const invalidateQueries = useInvalidateCommonQueries();" in response.hook
        assert "mutationFn: createUser," in response.hook
        assert "variables: CreateUserVariables," in response.hook
        assert "options?.onSuccess?.(...args);" in response.hook

    def test_missing_example_gets_fallback_type(self, generator):
        response = generator.generate(
            request(feature_name="createUser", method_type="POST", api_url="/users", hook_type="mutation", example_response="")
        )
        assert response.model.endswith("export type CreateUserResponse = any;")

    def test_mutation_without_variables(self, generator):
        response = generator.generate(
            request(feature_name="clearCache", method_type="DELETE", api_url="/cache", hook_type="mutation")
        )
        assert response.api.startswith(
            "export const clearCache = async (): Promise<ClearCacheResponse> => {"
        )
        assert "await getInstance().delete(`/cache`);" in response.api
        assert "variables: void," in response.hook

    def test_delete_mutation_uses_query_params(self, generator):
        response = generator.generate(
            request(
                feature_name="removeItems",
                method_type="DELETE",
                api_url="/items",
                hook_type="mutation",
                params='{"ids": [1, 2]}',
            )
        )
        assert "await getInstance().delete(`/items`, { params: { ids } });" in response.api


class TestSchemas:
    def test_response_and_params_schemas(self, generator, fake_synthesizer):
        response_schema = {"type": "object", "properties": {"id": {"type": "integer"}}}
        params_schema = {"type": "object", "properties": {"id": {}, "verbose": {}}}
        response = generator.generate(
            request(
                example_response="ignored",
                params='{"unused": 1}',
                response_schema=json.dumps(response_schema),
                params_schema=json.dumps(params_schema),
            )
        )
        assert fake_synthesizer.calls == [
            ("schema", "GetUserVariables", json.dumps(params_schema)),
            ("schema", "GetUserResponse", json.dumps(response_schema)),
        ]
        assert "const { id, verbose } = queryKey[0];" in response.api
        assert "{ params: { verbose }, cancelToken: source.token }" in response.api

    def test_relaxed_schema_text(self, generator, fake_synthesizer):
        generator.generate(request(params_schema="{type: 'object', properties: {id: {},},}"))
        assert fake_synthesizer.calls[0] == (
            "schema",
            "GetUserVariables",
            '{"type": "object", "properties": {"id": {}}}',
        )

    def test_invalid_params_schema(self, generator):
        with pytest.raises(InvalidInputError) as excinfo:
            generator.generate(request(params_schema="{"))
        assert str(excinfo.value).startswith("Invalid params schema: ")


class TestSkipModelGeneration:
    def test_no_model_and_no_synthesis(self, generator, fake_synthesizer):
        response = generator.generate(request(skip_model_generation=True))
        assert response.model == ""
        assert fake_synthesizer.calls == []
        assert "Promise<GetUserResponse>" in response.api

    def test_missing_example_uses_fallback_type(self, generator):
        response = generator.generate(request(example_response="", skip_model_generation=True))
        assert "): Promise<any> => {" in response.api


class TestErrors:
    def test_all_missing_fields_reported(self, generator):
        with pytest.raises(MissingInputError) as excinfo:
            generator.generate(GenerateRequest())
        assert excinfo.value.missing == ["featureName", "methodType", "apiUrl", "hookType"]
        assert str(excinfo.value) == (
            "Missing required fields: featureName, methodType, apiUrl, hookType"
        )

    def test_blank_field_is_missing(self, generator):
        with pytest.raises(MissingInputError) as excinfo:
            generator.generate(request(hook_type="  "))
        assert excinfo.value.missing == ["hookType"]

    def test_missing_input_before_any_synthesis(self, generator, fake_synthesizer):
        with pytest.raises(MissingInputError):
            generator.generate(request(api_url=""))
        assert fake_synthesizer.calls == []

    def test_unknown_method_and_hook(self, generator):
        with pytest.raises(InvalidInputError):
            generator.generate(request(method_type="FETCH"))
        with pytest.raises(InvalidInputError):
            generator.generate(request(hook_type="lazyQuery"))

    def test_method_is_case_insensitive(self, generator):
        assert "getInstance().get(" in generator.generate(request(method_type="get")).api

    def test_unparseable_example(self, generator):
        with pytest.raises(InvalidInputError) as excinfo:
            generator.generate(request(example_response='{"id": [1'))
        assert "Repair attempt failed" in str(excinfo.value)

    def test_synthesizer_failure_wrapped(self, config):
        generator = HookGenerator(config, synthesizer=FailingSynthesizer())
        with pytest.raises(SchemaGenerationError) as excinfo:
            generator.generate(request())
        assert excinfo.value.feature_name == "getUser"
        assert isinstance(excinfo.value.cause, RuntimeError)
        assert "getUser" in str(excinfo.value)
        assert "synthesizer unavailable" in str(excinfo.value)


class TestEndToEnd:
    def test_real_synthesizer_models(self, real_generator):
        response = real_generator.generate(request())
        assert response.model == (
            "export interface GetUserVariables {\n"
            "  id: number;\n"
            "}\n"
            "\n"
            "export interface GetUserResponse {\n"
            "  id: number;\n"
            "  name: string;\n"
            "}"
        )

    def test_deterministic(self, real_generator):
        req = request(
            feature_name="getUsers",
            method_type="POST",
            api_url="/orgs/{org-id}/users",
            hook_type="infiniteQuery",
            params='{"pageNo": 1, "filter": {"role": "admin"}}',
            example_response=PAGINATED_USERS,
        )
        first = real_generator.generate(req)
        second = HookGenerator(GeneratorConfig(detect_timestamps=False)).generate(req)
        assert first == second

    def test_shared_definition_declared_once(self, real_generator):
        definitions = {
            "User": {"type": "object", "properties": {"id": {"type": "integer"}}, "required": ["id"]}
        }
        params_schema = {
            "type": "object",
            "properties": {"owner": {"$ref": "#/$defs/User"}},
            "required": ["owner"],
            "$defs": definitions,
        }
        response_schema = {
            "type": "object",
            "properties": {"user": {"$ref": "#/$defs/User"}},
            "required": ["user"],
            "$defs": definitions,
        }
        response = real_generator.generate(
            request(
                api_url="/users",
                params_schema=json.dumps(params_schema),
                response_schema=json.dumps(response_schema),
            )
        )
        assert response.model == (
            "export interface GetUserVariables {\n"
            "  owner: User;\n"
            "}\n"
            "\n"
            "export interface User {\n"
            "  id: number;\n"
            "}\n"
            "\n"
            "export interface GetUserResponse {\n"
            "  user: User;\n"
            "}"
        )

    def test_generate_files_keywords(self, config):
        response = generate_files(
            config=config,
            feature_name="getUser",
            method_type="GET",
            api_url="/users/{id}",
            hook_type="query",
        )
        assert response.model == (
            "export interface GetUserVariables {\n"
            "  id: number;\n"
            "}\n"
            "\n"
            "export type GetUserResponse = any;"
        )


class TestGenerateFileResponse:
    def test_fragments_skip_empty(self):
        response = GenerateFileResponse(model="m", api="a", query_key="", hook="h")
        assert list(response.fragments()) == [("model", "m"), ("api", "a"), ("hook", "h")]

    def test_combine_joins_with_blank_line(self):
        combined = GenerateFileResponse.combine(
            [
                GenerateFileResponse(api="a1", query_key="k1", hook="h1"),
                GenerateFileResponse(api="a2", hook="h2"),
            ]
        )
        assert combined == GenerateFileResponse(model="", api="a1\n\na2", query_key="k1", hook="h1\n\nh2")

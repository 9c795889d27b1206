"""
Code emitter for the api, queryKey and hook fragments.

Each fragment is first assembled as a small structured builder (signature
pieces, transport call, wrapper types) and only turned into text by a
Jinja2 template at the very end.
"""

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .classifier import PageFieldPolicy
from .core.config import GeneratorConfig
from .core.naming import IDENTIFIER_PATTERN, quote_key
from .core.templates import TemplateEngine, create_template_engine
from .models import ExtractedVariables, HookType, HttpMethod
from ..logging_config import get_logger

logger = get_logger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"

# Names bound or imported by the generated code around the endpoint variables
TEMPLATE_LOCALS = (
    "options",
    "context",
    "signal",
    "queryKey",
    "pageParam",
    "source",
    "response",
    "e",
    "axios",
    "CancelToken",
    "queryData",
    "invalidateQueries",
    "totalRecordsFetched",
    "useQuery",
    "useInfiniteQuery",
    "useMutation",
)

# Property tagging every cache key with its feature
QUERY_KEY_SCOPE = "scope"

_CLIENT_ROOT = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*")


def feature_bindings(camel_name: str, pascal_name: str, config: GeneratorConfig) -> List[str]:
    """Module-level names one feature's fragments declare or call."""
    names = [
        camel_name,
        f"{camel_name}Key",
        f"use{pascal_name}",
        config.error_notifier,
        config.invalidate_hook,
    ]
    client = _CLIENT_ROOT.match(config.http_client.strip())
    if client:
        names.append(client.group(0))
    return names


@dataclass
class EndpointPlan:
    """Everything the emitter needs to know about one endpoint."""

    camel_name: str
    pascal_name: str
    method: HttpMethod
    hook_type: HookType
    variables: ExtractedVariables
    return_type: str
    wrapper_args: Optional[str] = None
    array_key: Optional[str] = None

    @property
    def api_name(self) -> str:
        return self.camel_name

    @property
    def key_name(self) -> str:
        return f"{self.camel_name}Key"

    @property
    def hook_name(self) -> str:
        return f"use{self.pascal_name}"

    @property
    def variables_type_name(self) -> str:
        return f"{self.pascal_name}Variables"

    @property
    def variables_type(self) -> str:
        if self.variables.has_variables:
            return self.variables_type_name
        return "void"

    @property
    def response_type(self) -> str:
        if self.wrapper_args:
            return f"{self.wrapper_args}<{self.return_type}>"
        return self.return_type


@dataclass
class TransportCall:
    """One awaited call on the HTTP client."""

    client: str
    method: str
    url: str
    params: Optional[str] = None
    body: Optional[str] = None
    cancellable: bool = False

    def render(self) -> str:
        args = [f"`{self.url}`"]
        if self.body is not None:
            args.append(self.body)

        config = []
        if self.params is not None:
            config.append(f"params: {self.params}")
        if self.cancellable:
            config.append("cancelToken: source.token")
        if config:
            args.append("{ " + ", ".join(config) + " }")

        return f"await {self.client}.{self.method}({', '.join(args)})"


@dataclass
class QueryKeyFragment:
    key_name: str
    args_type: str

    template = "query_key.ts.j2"

    def context(self) -> Dict[str, Any]:
        return {"key_name": self.key_name, "args_type": self.args_type}


@dataclass
class ApiFragment:
    """The request function."""

    api_name: str
    key_name: str
    return_type: str
    response_type: str
    call: TransportCall
    wrapped: bool = False
    cancellable: bool = False
    infinite: bool = False
    destructure: List[str] = field(default_factory=list)
    signature: str = ""

    @property
    def template(self) -> str:
        return "api_query.ts.j2" if self.cancellable else "api_mutation.ts.j2"

    def context(self) -> Dict[str, Any]:
        return {
            "api_name": self.api_name,
            "key_name": self.key_name,
            "return_type": self.return_type,
            "response_type": self.response_type,
            "call": self.call.render(),
            "url": self.call.url,
            "wrapped": self.wrapped,
            "infinite": self.infinite,
            "destructure": ", ".join(self.destructure),
            "signature": self.signature,
        }


@dataclass
class HookFragment:
    """The consumer-facing hook."""

    template: str
    values: Dict[str, Any] = field(default_factory=dict)

    def context(self) -> Dict[str, Any]:
        return dict(self.values)


def object_literal(members: List[str]) -> str:
    if not members:
        return "{}"
    return "{ " + ", ".join(members) + " }"


def property_access(key: str) -> str:
    """Optional-chaining access for ``key``."""
    if IDENTIFIER_PATTERN.match(key):
        return f"?.{key}"
    return f"?.[{quote_key(key)}]"


class CodeEmitter:
    """Builds and renders the api, queryKey and hook fragments."""

    def __init__(
        self,
        config: Optional[GeneratorConfig] = None,
        page_field_policy: Optional[PageFieldPolicy] = None,
        template_engine: Optional[TemplateEngine] = None,
    ):
        self.config = config or GeneratorConfig()
        self.page_field_policy = page_field_policy or PageFieldPolicy(
            self.config.page_fields
        )
        self.template_engine = template_engine or create_template_engine(TEMPLATE_DIR)

    def emit(self, plan: EndpointPlan) -> Dict[str, str]:
        """Render ``api``, ``query_key`` and ``hook`` text for one endpoint."""
        query_key = self.build_query_key(plan)
        return {
            "api": self.render(self.build_api(plan)),
            "query_key": self.render(query_key) if query_key else "",
            "hook": self.render(self.build_hook(plan)),
        }

    def render(self, fragment) -> str:
        return self.template_engine.render_template(fragment.template, fragment.context())

    # queryKey

    def build_query_key(self, plan: EndpointPlan) -> Optional[QueryKeyFragment]:
        if not plan.hook_type.uses_query_key:
            return None
        args_type = f"{{ {QUERY_KEY_SCOPE}: '{plan.camel_name}' }}"
        if plan.variables.has_variables:
            args_type += f" & {plan.variables_type_name}"
        return QueryKeyFragment(key_name=plan.key_name, args_type=args_type)

    # api

    def build_api(self, plan: EndpointPlan) -> ApiFragment:
        if plan.hook_type.uses_query_key:
            return self._build_query_api(plan)
        return self._build_mutation_api(plan)

    def _transport_members(self, plan: EndpointPlan, page_override: bool) -> List[str]:
        variables = plan.variables
        mapping = variables.mapping
        page_field = None

        if page_override:
            page_field = self.page_field_policy.select(variables.body_params)
            if page_field is None:
                logger.debug(
                    "%s: no page field among %s; page cursor not injected",
                    plan.api_name,
                    variables.body_params,
                )

        members = []
        for key in variables.body_params:
            if key == page_field:
                safe = mapping.identifier_for(key)
                members.append(
                    mapping.member(key, f"{safe} ?? pageParam ?? {self.config.default_page}")
                )
            else:
                members.append(mapping.member(key))
        return members

    def _transport(
        self, plan: EndpointPlan, members: List[str], cancellable: bool
    ) -> TransportCall:
        call = TransportCall(
            client=self.config.http_client,
            method=plan.method.value.lower(),
            url=plan.variables.url_template,
            cancellable=cancellable,
        )
        if plan.method.sends_query_params:
            if members:
                call.params = object_literal(members)
        elif members or cancellable:
            call.body = object_literal(members)
        return call

    def _build_query_api(self, plan: EndpointPlan) -> ApiFragment:
        infinite = plan.hook_type is HookType.INFINITE_QUERY
        members = self._transport_members(plan, page_override=infinite)

        return ApiFragment(
            api_name=plan.api_name,
            key_name=plan.key_name,
            return_type=plan.return_type,
            response_type=plan.response_type,
            call=self._transport(plan, members, cancellable=True),
            wrapped=bool(plan.wrapper_args),
            cancellable=True,
            infinite=infinite,
            destructure=plan.variables.mapping.members(),
        )

    def _build_mutation_api(self, plan: EndpointPlan) -> ApiFragment:
        members = self._transport_members(plan, page_override=False)
        mapping = plan.variables.mapping

        signature = ""
        if plan.variables.has_variables and mapping:
            signature = f"{object_literal(mapping.members())}: {plan.variables_type}"

        return ApiFragment(
            api_name=plan.api_name,
            key_name=plan.key_name,
            return_type=plan.return_type,
            response_type=plan.response_type,
            call=self._transport(plan, members, cancellable=False),
            wrapped=bool(plan.wrapper_args),
            signature=signature,
        )

    # hook

    def build_hook(self, plan: EndpointPlan) -> HookFragment:
        if plan.hook_type is HookType.MUTATION:
            return HookFragment(
                "hook_mutation.ts.j2",
                {
                    "hook_name": plan.hook_name,
                    "api_name": plan.api_name,
                    "return_type": plan.return_type,
                    "variables_type": plan.variables_type,
                    "invalidate_hook": self.config.invalidate_hook,
                    "error_notifier": self.config.error_notifier,
                },
            )

        mapping = plan.variables.mapping
        options_type = "options?: { enabled?: boolean }"
        if plan.variables.has_variables:
            props_type = f"{plan.variables_type_name} & {{ {options_type} }}"
        else:
            props_type = f"{{ {options_type} }}"

        values = {
            "hook_name": plan.hook_name,
            "api_name": plan.api_name,
            "key_name": plan.key_name,
            "destructure": object_literal(mapping.members() + ["options"]),
            "props_type": props_type,
            "key_members": ", ".join(
                [f"{QUERY_KEY_SCOPE}: '{plan.camel_name}'"] + mapping.members()
            ),
        }

        if plan.hook_type is HookType.INFINITE_QUERY:
            values.update(
                {
                    "array_access": property_access(plan.array_key or "data"),
                    "count_fields": [
                        self.config.total_count_field,
                        self.config.filtered_count_field,
                    ],
                    "error_notifier": self.config.error_notifier,
                }
            )
            return HookFragment("hook_infinite_query.ts.j2", values)

        return HookFragment("hook_query.ts.j2", values)

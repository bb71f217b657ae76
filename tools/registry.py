"""
Tool registry: static name -> ToolSpec mapping built once at startup.
invoke() is total: every outcome, including unexpected faults, comes back as a ToolResult.
"""
import logging
from typing import Mapping, Optional

from langchain_core.tools import BaseTool, StructuredTool
from pydantic import ValidationError

from app.config import Settings, get_settings
from tools.base import ErrorKind, ToolError, ToolRequest, ToolResult, ToolSpec
from tools.exchange_rates import get_exchange_rates_spec
from tools.notification import NotificationProvider, get_send_mail_spec
from tools.web_scrape import get_scrape_webpage_spec
from tools.web_search import get_web_search_spec

logger = logging.getLogger(__name__)


def _format_validation_error(e: ValidationError) -> str:
    parts = []
    for err in e.errors():
        loc = ".".join(str(p) for p in err.get("loc", ())) or "parameters"
        parts.append(f"{loc}: {err.get('msg', 'invalid')}")
    return "Invalid parameters: " + "; ".join(parts)


class ToolRegistry:
    """Holds the tool catalogue and wraps every handler call in the result envelope."""

    def __init__(self, specs: Optional[list[ToolSpec]] = None) -> None:
        self._tools: dict[str, ToolSpec] = {}
        for spec in specs or []:
            self._register(spec)

    def _register(self, spec: ToolSpec) -> None:
        if spec.name in self._tools:
            raise ValueError(f"Duplicate tool name: {spec.name}")
        self._tools[spec.name] = spec

    def get(self, name: str) -> Optional[ToolSpec]:
        return self._tools.get(name)

    def names(self) -> list[str]:
        return list(self._tools)

    def describe(self) -> list[dict]:
        """Catalogue for orchestrators: name, description, JSON schema of parameters."""
        return [
            {
                "name": spec.name,
                "description": spec.description,
                "parameters": spec.args_schema.model_json_schema(),
            }
            for spec in self._tools.values()
        ]

    def invoke(self, request: ToolRequest) -> ToolResult:
        spec = self._tools.get(request.tool_name) if isinstance(request.tool_name, str) else None
        if spec is None:
            return ToolResult.error(ErrorKind.INVALID_INPUT, f"Unknown tool: {request.tool_name}")

        raw = request.parameters if request.parameters is not None else {}
        if not isinstance(raw, Mapping):
            return ToolResult.error(ErrorKind.INVALID_INPUT, "Parameters must be a mapping")
        params = dict(raw)
        unknown = sorted(set(params) - set(spec.args_schema.model_fields))
        if unknown:
            return ToolResult.error(
                ErrorKind.INVALID_INPUT, f"Unexpected parameters for {spec.name}: {', '.join(unknown)}"
            )
        try:
            args = spec.args_schema.model_validate(params)
        except ValidationError as e:
            return ToolResult.error(ErrorKind.INVALID_INPUT, _format_validation_error(e))

        try:
            result = spec.handler(**args.model_dump())
        except ToolError as e:
            return ToolResult.from_exception(e)
        except Exception as e:
            logger.exception("tool_unhandled_error", extra={"tool": spec.name})
            return ToolResult.error(ErrorKind.UNKNOWN, str(e) or e.__class__.__name__)

        if not isinstance(result, ToolResult):
            logger.error("tool_bad_result", extra={"tool": spec.name})
            return ToolResult.error(ErrorKind.UNKNOWN, f"Tool {spec.name} returned no result envelope")
        return result

    def as_langchain_tools(self) -> list[BaseTool]:
        """LangChain tools whose output is the rendered envelope, for binding to an agent."""
        return [self._to_langchain(spec) for spec in self._tools.values()]

    def _to_langchain(self, spec: ToolSpec) -> BaseTool:
        def run(**kwargs) -> str:
            return self.invoke(ToolRequest(tool_name=spec.name, parameters=kwargs)).render()

        return StructuredTool.from_function(
            func=run,
            name=spec.name,
            description=spec.description,
            args_schema=spec.args_schema,
        )


def build_registry(
    settings: Optional[Settings] = None,
    mail_provider: Optional[NotificationProvider] = None,
) -> ToolRegistry:
    """Build the four-tool registry from settings. mail_provider overrides SMTP (tests, other platforms)."""
    settings = settings or get_settings()
    return ToolRegistry(
        [
            get_scrape_webpage_spec(settings),
            get_web_search_spec(settings),
            get_exchange_rates_spec(settings),
            get_send_mail_spec(settings, provider=mail_provider),
        ]
    )

from dataclasses import dataclass
from typing import Callable, Dict, List, Type
import json

from pydantic import BaseModel, ValidationError as PydanticValidationError

from buddy_ai.domain.exceptions import MalformedToolArguments, ToolExecutionFailed, UnknownTool
from buddy_ai.infrastructure.logging.logger import logger
from buddy_ai.providers.base import SearchClient
from .definitions import ToolCall, ToolResult, ToolDef, ToolParam, WebSearchArgs


WEB_SEARCH = "webSearch"

ToolFunc = Callable[[BaseModel], str]


@dataclass
class ToolSpec:
    """A registered tool: its argument model and implementation."""

    args_model: Type[BaseModel]
    func: ToolFunc


def parse_arguments(tool_name: str, raw_arguments: str, args_model: Type[BaseModel]) -> BaseModel:
    """Parse raw tool arguments into ``args_model`` or raise MalformedToolArguments."""
    text = (raw_arguments or "").strip()
    try:
        decoded = json.loads(text)
    except json.JSONDecodeError as exc:
        logger.error(
            "Model returned invalid JSON tool arguments",
            extra={"extra": {"tool_name": tool_name, "raw_arguments": raw_arguments}},
        )
        raise MalformedToolArguments(tool_name, raw_arguments, reason=str(exc)) from exc
    if not isinstance(decoded, dict):
        raise MalformedToolArguments(tool_name, raw_arguments, reason="arguments must be a JSON object")
    try:
        return args_model.model_validate(decoded)
    except PydanticValidationError as exc:
        raise MalformedToolArguments(tool_name, raw_arguments, reason=str(exc)) from exc


class ToolExecutor:
    def __init__(self, tools: Dict[str, ToolSpec]):
        self._tools = tools

    @property
    def tool_names(self) -> List[str]:
        return list(self._tools)

    def execute(self, tool_name: str, raw_arguments: str) -> str:
        spec = self._tools.get(tool_name)
        if spec is None:
            raise UnknownTool(tool_name)
        args = parse_arguments(tool_name, raw_arguments, spec.args_model)
        try:
            return spec.func(args)
        except Exception as exc:
            raise ToolExecutionFailed(tool_name, exc) from exc

    def run_call(self, call: ToolCall) -> ToolResult:
        return ToolResult(call_id=call.id, name=call.name, content=self.execute(call.name, call.arguments))


def _make_web_search_tool(search_client: SearchClient) -> ToolFunc:
    def _run(args: WebSearchArgs) -> str:
        logger.info("Calling web search", extra={"extra": {"query": args.query}})
        results = search_client.search(args.query)
        logger.info(
            "Web search finished",
            extra={"extra": {
                "query": args.query,
                "results": [{"title": r.title, "url": r.url, "score": r.score} for r in results],
            }},
        )
        return "\n\n".join(r.content for r in results)

    return _run


def default_tools(search_client: SearchClient) -> Dict[str, ToolSpec]:
    return {
        WEB_SEARCH: ToolSpec(args_model=WebSearchArgs, func=_make_web_search_tool(search_client)),
    }


def default_tool_defs() -> List[ToolDef]:
    return [
        ToolDef(
            name=WEB_SEARCH,
            description="Search latest realtime internet data",
            params={
                "query": ToolParam(
                    name="query",
                    description="The search query string",
                    required=True,
                    schema={"type": "string"},
                )
            },
        ),
    ]

"""Business error model.

Every error that crosses module boundaries derives from BusinessError so the
HTTP layer and the CLI can catch and report them in one place.
"""

from typing import Optional


class BusinessError(Exception):
    """Base class of all business errors.

    Attributes:
        code: machine readable error code (e.g. "UNKNOWN_TOOL").
        message: human readable message.
        http_status: status code to use when mapped to HTTP, 400 by default.
        extra: any additional fields (trace_id, model, raw text...).
    """

    def __init__(self, code: str, message: str, http_status: int = 400, **extra):
        self.code = code
        self.message = message
        self.http_status = http_status
        self.extra = extra
        super().__init__(message)


class NetworkError(BusinessError):
    """Transport level failure such as a refused connection or a timeout."""


class ApiError(BusinessError):
    """Third-party API answered with a non-2xx status other than 429."""


class RateLimitError(BusinessError):
    """Provider rate limit (HTTP 429)."""


class ValidationError(BusinessError):
    """Parameter or configuration validation failure."""


class MalformedToolArguments(BusinessError):
    """The model emitted tool arguments that are not a valid JSON object."""

    def __init__(self, tool_name: str, raw_arguments: str, reason: str = ""):
        message = f"Malformed arguments for tool {tool_name!r}: {raw_arguments!r}"
        if reason:
            message = f"{message} ({reason})"
        super().__init__(
            code="MALFORMED_TOOL_ARGUMENTS",
            message=message,
            http_status=500,
            tool_name=tool_name,
        )
        self.tool_name = tool_name
        self.raw_arguments = raw_arguments


class UnknownTool(BusinessError):
    """The model requested a tool that is not registered."""

    def __init__(self, tool_name: str):
        super().__init__(
            code="UNKNOWN_TOOL",
            message=f"Unknown tool: {tool_name!r}",
            http_status=500,
            tool_name=tool_name,
        )
        self.tool_name = tool_name


class ToolExecutionFailed(BusinessError):
    """A registered tool raised while talking to its collaborator."""

    def __init__(self, tool_name: str, cause: Exception):
        super().__init__(
            code="TOOL_EXECUTION_FAILED",
            message=f"Tool {tool_name!r} failed: {cause}",
            http_status=502,
            tool_name=tool_name,
        )
        self.tool_name = tool_name
        self.cause = cause


class AllModelsFailedError(BusinessError):
    """Every model candidate failed; wraps the last error seen."""

    def __init__(self, tried: list, last_error: Optional[Exception]):
        super().__init__(
            code="ALL_MODELS_FAILED",
            message=f"All models failed. Tried: {tried}. Last error: {last_error}",
            http_status=502,
            tried=list(tried),
        )
        self.tried = list(tried)
        self.last_error = last_error

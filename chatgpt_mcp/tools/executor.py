from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from chatgpt_mcp.dispatch.dispatcher import RequestDispatcher
from chatgpt_mcp.domain.exceptions import InvalidRequest
from chatgpt_mcp.domain.models import DispatchResult, Operation, ToolRequest
from chatgpt_mcp.infrastructure.logging.logger import logger
from .definitions import TOOL_NAME, ChatGPTArguments, ToolCall, ToolDef, ToolResult, chatgpt_tool_def


LIST_ERROR_SENTINEL = "Error retrieving conversations"
EMPTY_REPLY_TEXT = "No response received from ChatGPT."
NO_CONVERSATIONS_TEXT = "No conversations found in ChatGPT."


def parse_arguments(arguments: Optional[Dict[str, Any]]) -> ToolRequest:
    """把未类型化的 MCP 参数校验为 ToolRequest，失败抛出 InvalidRequest。"""

    if arguments is None:
        raise InvalidRequest(code="MISSING_ARGUMENTS", message="No arguments provided")
    try:
        return ChatGPTArguments.model_validate(arguments).to_request()
    except PydanticValidationError as exc:
        reasons = "; ".join(_format_error(err) for err in exc.errors())
        raise InvalidRequest(
            code="INVALID_ARGUMENTS",
            message=f"Invalid arguments for ChatGPT tool: {reasons}",
        ) from exc


def _format_error(err: Dict[str, Any]) -> str:
    msg = str(err.get("msg") or "")
    # pydantic 会给自定义 ValueError 加上 "Value error, " 前缀
    if msg.startswith("Value error, "):
        msg = msg[len("Value error, "):]
    loc = ".".join(str(part) for part in err.get("loc") or ())
    return f"{loc}: {msg}" if loc else msg


def format_conversations(names: List[str]) -> str:
    if not names:
        return NO_CONVERSATIONS_TEXT
    return f"Found {len(names)} conversation(s):\n\n" + "\n".join(names)


class ToolExecutor:
    """MCP 工具前端：校验参数、调用 Dispatcher、把结果映射为响应信封。"""

    def __init__(self, dispatcher: RequestDispatcher):
        self._dispatcher = dispatcher

    def tool_defs(self) -> List[ToolDef]:
        return [chatgpt_tool_def()]

    async def execute(self, call: ToolCall) -> ToolResult:
        if call.name != TOOL_NAME:
            return ToolResult(call_id=call.id, content=f"Unknown tool: {call.name}", is_error=True)
        try:
            request = parse_arguments(call.arguments)
        except InvalidRequest as exc:
            logger.warning(f"Rejected tool call: {exc.message}", extra={"extra": {"call_id": call.id}})
            return _error(call.id, exc.message)

        logger.info(
            f"Dispatching {request.operation.value}",
            extra={"extra": {"call_id": call.id, "conversation_id": request.conversation_id}},
        )
        result = await self._dispatcher.dispatch(request)
        return self._to_tool_result(call.id, request, result)

    @staticmethod
    def _to_tool_result(call_id: str, request: ToolRequest, result: DispatchResult) -> ToolResult:
        if request.operation == Operation.LIST_CONVERSATIONS:
            # 列表失败不算错误，降级为哨兵结果
            names = result.lines if result.succeeded else [LIST_ERROR_SENTINEL]
            return ToolResult(call_id=call_id, content=format_conversations(names))
        if not result.succeeded:
            return _error(call_id, result.message or "Unknown error")
        return ToolResult(call_id=call_id, content=result.text or EMPTY_REPLY_TEXT)


def _error(call_id: str, message: str) -> ToolResult:
    return ToolResult(call_id=call_id, content=f"Error: {message}", is_error=True)

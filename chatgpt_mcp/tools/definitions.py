"""工具数据结构定义。

这些结构描述了 chatgpt 工具的 schema 与调用过程，既用于：
- 通过 MCP list_tools 把工具暴露给客户端（ToolDef / ToolParam）。
- 在 ToolExecutor 中校验和执行客户端发起的工具调用（ToolCall / ToolResult）。
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, StrictFloat, StrictInt, StrictStr, field_validator, model_validator

from chatgpt_mcp.dispatch.rate_limiter import DEFAULT_INTERVAL_MS
from chatgpt_mcp.domain.models import Operation, ToolRequest

TOOL_NAME = "chatgpt"


@dataclass
class ToolParam:
    """单个工具参数的定义。"""

    name: str
    description: str
    required: bool
    schema: Dict[str, Any]


@dataclass
class ToolDef:
    """一个可供 MCP 客户端调用的工具定义。"""

    name: str
    description: str
    params: Dict[str, ToolParam]

    def input_schema(self) -> Dict[str, Any]:
        """转换为 JSON Schema（MCP Tool.inputSchema）。"""

        properties: Dict[str, Any] = {}
        required: List[str] = []
        for name, param in self.params.items():
            schema = param.schema or {"type": "string"}
            if param.description:
                schema = {**schema, "description": param.description}
            properties[name] = schema
            if param.required:
                required.append(name)
        return {"type": "object", "properties": properties, "required": required}


@dataclass
class ToolCall:
    """客户端发起的一次工具调用请求。"""

    id: str
    name: str
    arguments: Optional[Dict[str, Any]]


@dataclass
class ToolResult:
    """工具执行结果的封装（文本形式）。"""

    call_id: str
    content: str
    is_error: bool = False

    def to_envelope(self) -> Dict[str, Any]:
        return {
            "content": [{"type": "text", "text": self.content}],
            "isError": self.is_error,
        }


class ChatGPTArguments(BaseModel):
    """chatgpt 工具参数校验模型。"""

    model_config = ConfigDict(extra="ignore")

    operation: Literal["ask", "get_conversations"]
    prompt: Optional[StrictStr] = None
    conversation_id: Optional[StrictStr] = None
    delay_ms: Optional[Union[StrictInt, StrictFloat]] = None

    @field_validator("delay_ms", mode="before")
    @classmethod
    def reject_bool_delay(cls, v: Any) -> Any:
        if isinstance(v, bool):
            raise ValueError("delay_ms must be a number")
        return v

    @field_validator("delay_ms")
    @classmethod
    def validate_delay(cls, v: Optional[float]) -> Optional[float]:
        if v is not None and v < 0:
            raise ValueError("delay_ms must be non-negative")
        return v

    @model_validator(mode="after")
    def validate_prompt(self) -> "ChatGPTArguments":
        if self.operation == "ask" and not (self.prompt or "").strip():
            raise ValueError("Prompt is required for ask operation")
        return self

    def to_request(self) -> ToolRequest:
        return ToolRequest(
            operation=Operation(self.operation),
            prompt=self.prompt,
            conversation_id=self.conversation_id or None,
            delay_ms=None if self.delay_ms is None else int(round(self.delay_ms)),
        )


def chatgpt_tool_def() -> ToolDef:
    return ToolDef(
        name=TOOL_NAME,
        description="Interact with the ChatGPT desktop app on macOS",
        params={
            "operation": ToolParam(
                name="operation",
                description="Operation to perform: 'ask' or 'get_conversations'",
                required=True,
                schema={"type": "string", "enum": [op.value for op in Operation]},
            ),
            "prompt": ToolParam(
                name="prompt",
                description="The prompt to send to ChatGPT (required for ask operation)",
                required=False,
                schema={"type": "string"},
            ),
            "conversation_id": ToolParam(
                name="conversation_id",
                description="Optional conversation ID to continue a specific conversation",
                required=False,
                schema={"type": "string"},
            ),
            "delay_ms": ToolParam(
                name="delay_ms",
                description=(
                    "Optional delay in milliseconds before sending the request "
                    f"(defaults to {DEFAULT_INTERVAL_MS} - 2 minutes)"
                ),
                required=False,
                schema={"type": "number", "minimum": 0},
            ),
        },
    )

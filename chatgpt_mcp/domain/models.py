"""请求、分发结果与 UI 元素的统一数据模型。

本模块定义了工具前端、Dispatcher 与 GUI 自动化适配器之间共享的标准数据结构：

- ToolRequest: 前端校验后得到的强类型请求。
- DispatchResult: 单次请求的处理结果（按行的文本 + 可选错误类别），不持久化。
- UiElement: 适配器枚举界面元素时返回的 (名称, 类型) 对。

这里的结构只描述"发给 ChatGPT 什么、读回了什么"，
不尝试解析 ChatGPT 自身的会话数据结构，回复一律视为不透明文本。
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class Operation(str, Enum):
    """工具支持的操作，取值与 MCP 参数 operation 字段一致。"""

    ASK = "ask"
    LIST_CONVERSATIONS = "get_conversations"


class ErrorKind(str, Enum):
    """错误类别，与 domain.exceptions 中的异常一一对应。"""

    ADAPTER_UNREACHABLE = "adapter_unreachable"
    ADAPTER_INTERACTION_FAILED = "adapter_interaction_failed"
    INVALID_REQUEST = "invalid_request"
    REPLY_UNAVAILABLE = "reply_unavailable"


@dataclass
class ToolRequest:
    """一次工具调用的强类型请求。

    - operation: ask 或 get_conversations。
    - prompt: 发送给 ChatGPT 的文本，仅 ask 需要且必须非空。
    - conversation_id: 可选，尝试切换到的会话名称（界面上的按钮名）。
    - delay_ms: 可选，本次请求使用的最小间隔（毫秒），0 表示本次不限流。
    """

    operation: Operation
    prompt: Optional[str] = None
    conversation_id: Optional[str] = None
    delay_ms: Optional[int] = None


@dataclass
class DispatchResult:
    """单次分发的结果。

    succeeded 为 False 时 error_kind / message 描述失败原因，lines 为空。
    """

    succeeded: bool
    lines: List[str] = field(default_factory=list)
    error_kind: Optional[ErrorKind] = None
    message: Optional[str] = None

    @property
    def text(self) -> str:
        return "\n".join(self.lines)


@dataclass(frozen=True)
class UiElement:
    """界面元素（名称 + 辅助功能类型，如 "button"）。"""

    name: str
    kind: str

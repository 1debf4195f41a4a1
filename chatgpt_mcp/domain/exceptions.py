"""统一业务异常模型。

所有跨模块抛出的业务级错误都应该继承自 BusinessError，
便于在工具前端统一捕获并转换为 MCP 响应信封（isError=True）。

分类：
- AdapterUnreachable: 无法确认或启动 ChatGPT 桌面应用进程。
- AdapterInteractionFailed: 脚本调用在交互过程中失败。
- InvalidRequest: 工具参数校验失败（前端边界）。
- ReplyUnavailable: 读取回复失败，非致命，会被降级为兜底文本。
- ValidationError: 配置校验失败。
"""

from typing import ClassVar, Optional

from chatgpt_mcp.domain.models import ErrorKind


class BusinessError(Exception):
    """业务异常基类。

    Attributes:
        code: 机器可读错误码（如 "ADAPTER_UNREACHABLE"）。
        message: 用户可读错误信息。
        extra: 其他补充字段（例如 cause、script 等）。
    """

    kind: ClassVar[Optional[ErrorKind]] = None

    def __init__(self, code: str, message: str, **extra):
        self.code = code
        self.message = message
        self.extra = extra
        super().__init__(message)


class AdapterUnreachable(BusinessError):
    """ChatGPT 进程无法确认存在，或无法被启动。"""

    kind = ErrorKind.ADAPTER_UNREACHABLE


class AdapterInteractionFailed(BusinessError):
    """与 ChatGPT 界面交互时脚本执行失败。"""

    kind = ErrorKind.ADAPTER_INTERACTION_FAILED


class InvalidRequest(BusinessError):
    """工具调用参数不合法，在任何分发动作之前抛出。"""

    kind = ErrorKind.INVALID_REQUEST


class ReplyUnavailable(BusinessError):
    """回复区域无法读取。由 Dispatcher 吸收，不会暴露给调用方。"""

    kind = ErrorKind.REPLY_UNAVAILABLE


class ValidationError(BusinessError):
    """参数或配置校验失败。"""

"""ChatGPT MCP 顶层包。

该包通过 MCP 协议暴露一个工具：向 macOS 上的 ChatGPT 桌面应用提问并读回回复，
包括配置加载、领域模型、AppleScript 自动化适配、限流分发、工具前端与 stdio 服务入口。
"""

from chatgpt_mcp.dispatch import RateLimiter, RequestDispatcher

__all__ = ["RateLimiter", "RequestDispatcher"]

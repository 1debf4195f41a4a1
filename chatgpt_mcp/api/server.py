"""MCP stdio 服务入口。

把 ToolExecutor 挂到 mcp SDK 的低层 Server 上：
- list_tools: 返回 chatgpt 工具定义。
- call_tool: 串行执行工具调用，结果映射为 TextContent；
  isError 信封以异常形式交给 SDK，由 SDK 生成 isError=True 的响应。
"""

import asyncio
from typing import Any, Dict, List, Optional
from uuid import uuid4

import mcp.types as types
from mcp.server import Server
from mcp.server.stdio import stdio_server

from chatgpt_mcp.automation import create_adapter
from chatgpt_mcp.config.settings import settings
from chatgpt_mcp.dispatch import RateLimiter, RequestDispatcher
from chatgpt_mcp.infrastructure.logging.logger import logger
from chatgpt_mcp.tools.definitions import ToolCall
from chatgpt_mcp.tools.executor import ToolExecutor

SERVER_NAME = "ChatGPT MCP Tool"


class ToolCallFailed(Exception):
    """携带 "Error: ..." 文本的工具失败，由 SDK 转换为 isError=True。"""


def build_executor() -> ToolExecutor:
    """按配置组装 适配器 → Dispatcher → ToolExecutor。"""

    adapter = create_adapter()
    limiter = RateLimiter(settings.rate_limit_interval_ms)
    dispatcher = RequestDispatcher(adapter, limiter, cfg=settings)
    return ToolExecutor(dispatcher)


def build_server(executor: ToolExecutor) -> Server:
    server = Server(SERVER_NAME)
    # 同一时刻只处理一个工具调用，限流器依赖这一点
    single_flight = asyncio.Lock()

    @server.list_tools()
    async def handle_list_tools() -> List[types.Tool]:
        return [
            types.Tool(name=d.name, description=d.description, inputSchema=d.input_schema())
            for d in executor.tool_defs()
        ]

    # 参数由 ChatGPTArguments 校验，错误文本保持 "Error: ..." 格式
    @server.call_tool(validate_input=False)
    async def handle_call_tool(
        name: str, arguments: Optional[Dict[str, Any]]
    ) -> List[types.TextContent]:
        call = ToolCall(id=f"call-{uuid4().hex}", name=name, arguments=arguments)
        async with single_flight:
            result = await executor.execute(call)
        if result.is_error:
            raise ToolCallFailed(result.content)
        return [types.TextContent(type="text", text=result.content)]

    return server


async def serve() -> None:
    server = build_server(build_executor())
    async with stdio_server() as (read_stream, write_stream):
        logger.info("ChatGPT MCP Server running on stdio")
        await server.run(read_stream, write_stream, server.create_initialization_options())


def main() -> None:
    asyncio.run(serve())


if __name__ == "__main__":
    main()

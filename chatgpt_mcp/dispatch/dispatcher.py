"""请求分发入口：可用性检测 → 限流 → 界面交互 → 结果规整。"""

from __future__ import annotations

import asyncio
from typing import List, Optional

from chatgpt_mcp.automation.base import GuiAutomationAdapter
from chatgpt_mcp.automation.locators import CHATGPT_LOCATORS, AppLocators
from chatgpt_mcp.config.settings import settings
from chatgpt_mcp.domain.exceptions import (
    AdapterInteractionFailed,
    BusinessError,
    InvalidRequest,
    ReplyUnavailable,
)
from chatgpt_mcp.domain.models import DispatchResult, Operation, ToolRequest
from chatgpt_mcp.infrastructure.logging.logger import logger

from .availability import AvailabilityProber
from .rate_limiter import RateLimiter

REPLY_FALLBACK = "Could not retrieve the response from ChatGPT."


class RequestDispatcher:
    """把单个 ToolRequest 转换为一串 GUI 自动化动作。

    Dispatcher 独占 RateLimiter；调用方保证同一时刻只有一个请求在处理。
    """

    def __init__(
        self,
        adapter: GuiAutomationAdapter,
        rate_limiter: Optional[RateLimiter] = None,
        *,
        prober: Optional[AvailabilityProber] = None,
        locators: AppLocators = CHATGPT_LOCATORS,
        cfg=settings,
        sleep=asyncio.sleep,
    ):
        self._adapter = adapter
        self._settings = cfg
        self._sleep = sleep
        self._locators = locators
        self.rate_limiter = rate_limiter or RateLimiter(cfg.rate_limit_interval_ms)
        self._prober = prober or AvailabilityProber(adapter, cfg, sleep=sleep)

    async def dispatch(self, request: ToolRequest) -> DispatchResult:
        """执行一个请求，把业务异常折叠进 DispatchResult。"""

        try:
            if request.operation == Operation.ASK:
                reply = await self.ask(request.prompt, request.conversation_id, request.delay_ms)
                return DispatchResult(succeeded=True, lines=[reply])
            names = await self.list_conversations()
            return DispatchResult(succeeded=True, lines=names)
        except BusinessError as exc:
            return DispatchResult(succeeded=False, error_kind=exc.kind, message=exc.message)

    async def ask(
        self,
        prompt: str,
        conversation_id: Optional[str] = None,
        delay_ms: Optional[int] = None,
    ) -> str:
        """向 ChatGPT 发送 prompt 并读取回复文本。

        回复区域读不到时返回 REPLY_FALLBACK；其余任何失败都以
        AdapterInteractionFailed 抛出。
        """

        if not prompt:
            raise InvalidRequest(code="MISSING_PROMPT", message="Prompt is required for ask operation")
        try:
            await self._prober.ensure_available()
            await self.rate_limiter.wait(delay_ms)
            self.rate_limiter.mark_dispatched()
            return await self._interact(prompt, conversation_id)
        except BusinessError as exc:
            logger.error(
                f"Error interacting with ChatGPT: {exc.message}",
                extra={"extra": {"conversation_id": conversation_id, "code": exc.code}},
            )
            raise AdapterInteractionFailed(
                code="ADAPTER_INTERACTION_FAILED",
                message=f"Failed to get response from ChatGPT: {exc.message}",
                cause=exc.code,
            ) from exc

    async def list_conversations(self) -> List[str]:
        """列出侧边栏中的会话名称（不含“新建会话”按钮）。

        不经过限流；失败时直接抛出，由前端决定是否降级。
        """

        await self._prober.ensure_available()
        locator = self._locators.conversation_list
        try:
            await self._focus()
            elements = await self._adapter.list_elements(locator)
        except BusinessError as exc:
            logger.error(f"Error getting ChatGPT conversations: {exc.message}")
            raise
        return [
            el.name
            for el in elements
            if el.kind == locator.element_kind and el.name != self._settings.new_chat_label
        ]

    # ---- 界面交互 ----

    async def _focus(self) -> None:
        await self._adapter.activate(self._settings.app_name)
        await self._sleep(self._settings.focus_settle_seconds)

    async def _interact(self, prompt: str, conversation_id: Optional[str]) -> str:
        await self._focus()
        if conversation_id:
            await self._select_conversation(conversation_id)
        await self._adapter.send_keystrokes(prompt)
        await self._sleep(self._settings.keystroke_settle_seconds)
        await self._adapter.press_return()
        # 没有“生成完成”信号，只能固定等待
        await self._sleep(self._settings.reply_settle_seconds)
        try:
            return await self._adapter.read_element_text(self._locators.reply)
        except ReplyUnavailable as exc:
            logger.warning(f"Reply unavailable: {exc.message}")
            return REPLY_FALLBACK

    async def _select_conversation(self, conversation_id: str) -> None:
        found = await self._adapter.find_and_click_element(
            self._locators.conversation_list, conversation_id
        )
        if not found:
            logger.warning(
                "Conversation not found, continuing in the active conversation",
                extra={"extra": {"conversation_id": conversation_id}},
            )
            return
        await self._sleep(self._settings.conversation_settle_seconds)

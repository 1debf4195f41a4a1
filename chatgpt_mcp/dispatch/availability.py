"""ChatGPT 应用可用性检测。"""

from __future__ import annotations

import asyncio

from chatgpt_mcp.automation.base import GuiAutomationAdapter
from chatgpt_mcp.config.settings import settings
from chatgpt_mcp.domain.exceptions import AdapterUnreachable, BusinessError
from chatgpt_mcp.infrastructure.logging.logger import logger


class AvailabilityProber:
    """每次交互前确认 ChatGPT 进程存在，不存在时尝试启动。

    不缓存上一次的检测结果：两次调用之间用户随时可能关闭应用。
    启动后只等待固定时间就继续，不再二次确认。
    """

    def __init__(self, adapter: GuiAutomationAdapter, cfg=settings, sleep=asyncio.sleep):
        self._adapter = adapter
        self._settings = cfg
        self._sleep = sleep

    async def ensure_available(self) -> None:
        app = self._settings.app_name
        try:
            running = await self._adapter.process_exists(app)
            if not running:
                logger.warning(f"{app} app is not running, attempting to launch...")
                await self._launch(app)
        except BusinessError as exc:
            logger.error(f"{app} access check failed: {exc.message}")
            raise AdapterUnreachable(
                code="ADAPTER_UNREACHABLE",
                message=(
                    f"Cannot access {app} app. Please make sure {app} is installed "
                    f"and properly configured. Error: {exc.message}"
                ),
                cause=exc.code,
            ) from exc

    async def _launch(self, app: str) -> None:
        try:
            await self._adapter.activate(app)
        except BusinessError as exc:
            logger.error(f"Error activating {app} app: {exc.message}")
            raise AdapterUnreachable(
                code="ACTIVATION_FAILED",
                message=f"Could not activate {app} app. Please start it manually.",
            ) from exc
        await self._sleep(self._settings.launch_settle_seconds)

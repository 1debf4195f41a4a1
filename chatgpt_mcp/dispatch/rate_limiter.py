"""请求间隔限流器。

ChatGPT 会对短时间内的大量自动化输入限流甚至锁定，因此两次 ask 之间
至少间隔一个可配置的时间（默认 120000ms）。

只保存最近一次分发时间即可：同一时刻只有一个请求在处理（single-flight），
"读取 elapsed"与"写入 last_dispatch"之间不存在竞争，所以这里不加锁。
"""

from __future__ import annotations

import asyncio
import math
import time
from typing import Awaitable, Callable, Optional

from chatgpt_mcp.infrastructure.logging.logger import logger

DEFAULT_INTERVAL_MS = 120000

Clock = Callable[[], float]
Sleeper = Callable[[float], Awaitable[None]]


class RateLimiter:
    """单槽限流器，由 RequestDispatcher 独占持有。

    Attributes:
        default_interval_ms: 未指定 custom_interval_ms 时使用的最小间隔。
        last_dispatch: 最近一次分发的时钟读数（秒），None 表示尚未分发过。
    """

    def __init__(
        self,
        default_interval_ms: int = DEFAULT_INTERVAL_MS,
        *,
        clock: Clock = time.monotonic,
        sleep: Sleeper = asyncio.sleep,
    ):
        if default_interval_ms < 0:
            raise ValueError("default_interval_ms must be non-negative")
        self.default_interval_ms = default_interval_ms
        self.last_dispatch: Optional[float] = None
        self._clock = clock
        self._sleep = sleep

    def wait_time_ms(self, custom_interval_ms: Optional[int] = None) -> float:
        """返回下一次分发前还需等待的毫秒数（不小于 0）。"""

        if self.last_dispatch is None:
            return 0.0
        interval = self.default_interval_ms if custom_interval_ms is None else custom_interval_ms
        elapsed = (self._clock() - self.last_dispatch) * 1000
        if elapsed < interval:
            return interval - elapsed
        return 0.0

    async def wait(self, custom_interval_ms: Optional[int] = None) -> None:
        """必要时挂起调用方，直到距离上次分发已满足最小间隔。

        custom_interval_ms 只影响本次调用，0 表示本次不限流。
        """

        wait_ms = self.wait_time_ms(custom_interval_ms)
        if wait_ms <= 0:
            return
        logger.info(
            f"Waiting {math.ceil(wait_ms / 1000)} seconds before sending request to ChatGPT...",
            extra={"extra": {"wait_ms": round(wait_ms)}},
        )
        await self._sleep(wait_ms / 1000)

    def mark_dispatched(self) -> None:
        """记录分发时间，必须在 wait() 之后、调用适配器之前执行。"""

        self.last_dispatch = self._clock()

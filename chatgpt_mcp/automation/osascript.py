"""osascript 子进程封装。"""

import asyncio
from typing import Optional

from chatgpt_mcp.domain.exceptions import AdapterInteractionFailed


async def run_applescript(script: str, executable: str = "osascript") -> str:
    """执行一段 AppleScript 并返回去除首尾空白后的标准输出。

    非零退出码或无法启动 osascript 时抛出 AdapterInteractionFailed，
    message 为 osascript 的错误输出。
    """

    try:
        proc = await asyncio.create_subprocess_exec(
            executable,
            "-e",
            script,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
        )
    except (OSError, ValueError) as exc:
        raise AdapterInteractionFailed(
            code="SCRIPT_BRIDGE_UNAVAILABLE",
            message=f"Cannot run {executable}: {exc}",
        ) from exc
    stdout, stderr = await proc.communicate()
    if proc.returncode != 0:
        raise AdapterInteractionFailed(
            code="SCRIPT_ERROR",
            message=_decode(stderr) or f"{executable} exited with status {proc.returncode}",
            returncode=proc.returncode,
        )
    return _decode(stdout)


def _decode(raw: Optional[bytes]) -> str:
    return (raw or b"").decode("utf-8", errors="replace").strip()

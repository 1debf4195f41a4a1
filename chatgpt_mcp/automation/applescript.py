"""AppleScript GUI 自动化适配器。

通过 System Events 驱动 ChatGPT 桌面应用：
- 进程检测 / 激活: tell application "System Events" / tell application "<app>" to activate
- 界面操作: tell process "<app>" 下的 click / keystroke / value of ...

脚本统一经 osascript 执行（见 automation.osascript）。所有嵌入脚本的文本
（提示词、会话名、应用名）都经过 escape_applescript_string 转义，
保证它们在 AppleScript 中只会被当作字符串字面量。
"""

from typing import List

from chatgpt_mcp.automation.locators import UiLocator
from chatgpt_mcp.automation.osascript import run_applescript
from chatgpt_mcp.config.settings import settings
from chatgpt_mcp.domain.exceptions import AdapterInteractionFailed, ReplyUnavailable
from chatgpt_mcp.domain.models import UiElement


def escape_applescript_string(text: str) -> str:
    """转义反斜杠和双引号，返回可以放进 "..." 字面量的文本。"""

    return text.replace("\\", "\\\\").replace('"', '\\"')


def quote(text: str) -> str:
    return f'"{escape_applescript_string(text)}"'


class AppleScriptAdapter:
    """基于 osascript 的 GuiAutomationAdapter 实现。"""

    name = "applescript"

    def __init__(self, cfg=settings, runner=run_applescript):
        self._settings = cfg
        self._runner = runner

    @property
    def _app(self) -> str:
        return self._settings.app_name

    async def _run(self, script: str) -> str:
        return await self._runner(script, getattr(self._settings, "osascript_path", "osascript"))

    # ---- 进程 ----

    async def process_exists(self, app_name: str) -> bool:
        result = await self._run(self._build_process_exists_script(app_name))
        return result.lower() == "true"

    async def activate(self, app_name: str) -> None:
        await self._run(f"tell application {quote(app_name)} to activate")

    # ---- 界面操作 ----

    async def find_and_click_element(self, locator: UiLocator, element_id: str) -> bool:
        result = await self._run(self._build_click_script(locator, element_id))
        return result.lower() == "true"

    async def send_keystrokes(self, text: str) -> None:
        await self._run(self._in_process(f"keystroke {quote(text)}"))

    async def press_return(self) -> None:
        await self._run(self._in_process("keystroke return"))

    async def read_element_text(self, locator: UiLocator) -> str:
        try:
            result = await self._run(self._in_process(f"return value of {locator.specifier}"))
        except AdapterInteractionFailed as exc:
            raise ReplyUnavailable(
                code="REPLY_UNAVAILABLE",
                message=exc.message,
                locator=locator.logical_name,
            ) from exc
        if result == "missing value":
            raise ReplyUnavailable(
                code="REPLY_UNAVAILABLE",
                message=f"{locator.logical_name} has no value",
                locator=locator.logical_name,
            )
        return result

    async def list_elements(self, locator: UiLocator) -> List[UiElement]:
        result = await self._run(self._build_list_script(locator))
        return self._parse_elements(result)

    # ---- 脚本构造 ----

    @staticmethod
    def _build_process_exists_script(app_name: str) -> str:
        return (
            'tell application "System Events"\n'
            f"  return application process {quote(app_name)} exists\n"
            "end tell"
        )

    def _in_process(self, body: str) -> str:
        # body 原样嵌入，多行提示词的字面量里不能被插入缩进
        return (
            'tell application "System Events"\n'
            f"  tell process {quote(self._app)}\n"
            f"{body}\n"
            "  end tell\n"
            "end tell"
        )

    def _build_click_script(self, locator: UiLocator, element_id: str) -> str:
        return self._in_process(
            "try\n"
            f"  click {locator.element_kind} {quote(element_id)} of {locator.specifier}\n"
            '  return "true"\n'
            "on error\n"
            '  return "false"\n'
            "end try"
        )

    def _build_list_script(self, locator: UiLocator) -> str:
        # 每行一个元素: <name>\t<class>
        return self._in_process(
            'set output to ""\n'
            f"repeat with el in (UI elements of {locator.specifier})\n"
            "  set elName to name of el\n"
            '  if elName is missing value then set elName to ""\n'
            "  set output to output & (elName as text) & tab & ((class of el) as text) & linefeed\n"
            "end repeat\n"
            "return output"
        )

    @staticmethod
    def _parse_elements(raw: str) -> List[UiElement]:
        elements: List[UiElement] = []
        for line in raw.splitlines():
            if not line.strip():
                continue
            name, _, kind = line.rpartition("\t")
            elements.append(UiElement(name=name, kind=kind.strip()))
        return elements

"""GUI 自动化适配器抽象接口。

上层 Dispatcher 不直接拼接任何脚本，而是依赖此协议：

- 每种脚本桥实现一个 GuiAutomationAdapter（如 AppleScriptAdapter）。
- 负责：把"激活应用 / 点击元素 / 输入文本 / 读取文本"等语义翻译成具体脚本并执行。
- 任何用户提供的文本都必须由实现者转义后再嵌入脚本，不能直接字符串拼接。

这样可以在不改 Dispatcher 的前提下替换脚本桥（例如 JXA 或 Accessibility API）。
"""

from typing import List, Protocol

from chatgpt_mcp.automation.locators import UiLocator
from chatgpt_mcp.domain.models import UiElement


class GuiAutomationAdapter(Protocol):
    """GUI 自动化适配器协议。

    约定：
    - 脚本执行失败统一抛出 AdapterInteractionFailed。
    - find_and_click_element 找不到元素时返回 False，而不是抛异常。
    - read_element_text 读不到内容时抛出 ReplyUnavailable。
    """

    name: str

    async def process_exists(self, app_name: str) -> bool:
        ...

    async def activate(self, app_name: str) -> None:
        ...

    async def find_and_click_element(self, locator: UiLocator, element_id: str) -> bool:
        ...

    async def send_keystrokes(self, text: str) -> None:
        ...

    async def press_return(self) -> None:
        ...

    async def read_element_text(self, locator: UiLocator) -> str:
        ...

    async def list_elements(self, locator: UiLocator) -> List[UiElement]:
        ...

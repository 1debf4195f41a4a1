"""ChatGPT 桌面应用的界面定位配置。

本模块将"逻辑元素"与"具体的辅助功能层级路径"解耦：

- 逻辑名：代码里使用的统一名称，例如 conversation_list、reply。
- specifier：AppleScript 中的 UI 元素路径，例如 "group 1 of group 1 of window 1"。

ChatGPT 更新界面后只需修改这里，适配器和 Dispatcher 无需改动。
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class UiLocator:
    """单个界面元素（或容器）的定位信息。"""

    logical_name: str
    specifier: str
    element_kind: str = "UI element"


@dataclass(frozen=True)
class AppLocators:
    """某个桌面应用的整体界面定位配置。"""

    conversation_list: UiLocator
    reply: UiLocator


CHATGPT_LOCATORS = AppLocators(
    # 侧边栏中每个会话都是一个 button
    conversation_list=UiLocator(
        logical_name="conversation_list",
        specifier="group 1 of group 1 of window 1",
        element_kind="button",
    ),
    reply=UiLocator(
        logical_name="reply",
        specifier="text area 2 of group 1 of group 1 of window 1",
        element_kind="text area",
    ),
)

"""GUI 自动化集成层。

该包下的模块负责：
- 定义适配器抽象接口 (base)。
- 维护 ChatGPT 界面元素定位 (locators)。
- 提供具体的脚本桥实现 (如 applescript，经 osascript 执行)。
"""

from typing import Optional

from chatgpt_mcp.config.settings import settings
from chatgpt_mcp.automation.base import GuiAutomationAdapter
from chatgpt_mcp.automation.applescript import AppleScriptAdapter
from chatgpt_mcp.domain.exceptions import ValidationError


def create_adapter(name: Optional[str] = None) -> GuiAutomationAdapter:
    """根据名称创建适配器实例，默认取配置中的 adapter。"""

    adapter_name = (name or getattr(settings, "adapter", "applescript")).lower()
    if adapter_name == "applescript":
        return AppleScriptAdapter(settings)
    raise ValidationError(code="UNKNOWN_ADAPTER", message=f"Unknown adapter: {adapter_name}")

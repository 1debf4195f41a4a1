"""配置管理模块。

支持从环境变量、.env 以及 config.yaml 加载配置。
环境变量统一使用 CHATGPT_MCP_ 前缀，例如 CHATGPT_MCP_RATE_LIMIT_INTERVAL_MS。
"""

import os
import warnings
from pathlib import Path
from typing import Any, Dict, Tuple, Type

import yaml
from pydantic import Field, field_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)


def _load_config_from_yaml() -> Dict[str, Any]:
    """从 config.yaml 加载配置（若存在）。"""
    candidates = []
    explicit = os.getenv("CHATGPT_MCP_CONFIG_FILE")
    if explicit:
        candidates.append(Path(explicit).expanduser())
    candidates.extend([
        Path.cwd() / "config.yaml",
        Path(__file__).resolve().parents[2] / "config.yaml",
        Path(__file__).resolve().parents[1] / "config.yaml",
    ])

    seen: set[Path] = set()
    for path in candidates:
        if not path or path in seen:
            continue
        seen.add(path)
        try:
            if path.exists():
                data = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
                if isinstance(data, dict):
                    return data
                warnings.warn(f"Config file {path} is not a mapping, ignored")
        except (OSError, yaml.YAMLError) as exc:
            warnings.warn(f"Failed to read config file {path}: {exc}")
    return {}


class YamlConfigSource(PydanticBaseSettingsSource):
    """把 config.yaml 作为一个配置来源，优先级低于环境变量。"""

    def get_field_value(self, field, field_name):
        return None, field_name, False

    def __call__(self) -> Dict[str, Any]:
        data = _load_config_from_yaml()
        known = self.settings_cls.model_fields
        return {k: v for k, v in data.items() if k in known}


class Settings(BaseSettings):
    """配置设置（使用 Pydantic）。"""

    # ---- 目标应用 ----
    app_name: str = Field(default="ChatGPT", description="被驱动的桌面应用进程名")
    adapter: str = Field(default="applescript", description="GUI 自动化适配器名称")
    osascript_path: str = Field(default="osascript", description="osascript 可执行文件路径")
    new_chat_label: str = Field(
        default="New chat",
        description="会话列表中“新建会话”按钮的名称，列出会话时会被排除",
    )

    # ---- 限流 ----
    rate_limit_interval_ms: int = Field(
        default=120000,
        ge=0,
        description="两次 ask 之间的默认最小间隔（毫秒），默认 2 分钟",
    )

    # ---- 界面等待（秒） ----
    launch_settle_seconds: float = Field(default=2.0, ge=0, description="启动应用后的等待时间")
    focus_settle_seconds: float = Field(default=1.0, ge=0, description="激活窗口后的等待时间")
    conversation_settle_seconds: float = Field(default=1.0, ge=0, description="切换会话后的等待时间")
    keystroke_settle_seconds: float = Field(default=0.5, ge=0, description="输入提示词后、提交前的等待时间")
    reply_settle_seconds: float = Field(
        default=5.0,
        ge=0,
        description="提交后等待 ChatGPT 生成回复的固定时间",
    )

    # ---- 日志 ----
    log_dir: str = Field(default="logs", description="日志目录")
    log_level: str = Field(default="INFO", description="日志级别")
    log_redact_content: bool = Field(default=False, description="是否脱敏日志内容")

    model_config = SettingsConfigDict(
        env_prefix="CHATGPT_MCP_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        level = v.upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown log level: {v}")
        return level

    @field_validator("app_name", "new_chat_label")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("must not be blank")
        return v

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: Type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> Tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            YamlConfigSource(settings_cls),
            file_secret_settings,
        )


settings = Settings()

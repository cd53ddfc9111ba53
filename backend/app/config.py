# -*- coding: utf-8 -*-
"""
Life RPG - 游戏化习惯追踪后端
Life RPG - Gamified Habit Tracking Backend

Copyright © 2025-2026 Life RPG Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  应用配置 - 基于环境变量的集中式配置
  Application Settings - Centralized configuration loaded from environment variables.

使用示例 / Usage:
    from app.config import settings

    if settings.debug:
        ...
"""

from pathlib import Path
from typing import List

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    应用设置

    Application settings. Every field can be overridden with an environment
    variable prefixed by ``LIFERPG_`` (e.g. ``LIFERPG_DEBUG=true``).
    """

    model_config = SettingsConfigDict(
        env_prefix="LIFERPG_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Server / 服务器
    debug: bool = Field(default=False, description="Enable debug logging and reload")
    host: str = Field(default="0.0.0.0", description="Bind host")
    port: int = Field(default=8000, description="Bind port")
    cors_origins: List[str] = Field(
        default_factory=lambda: [
            "http://localhost:3000",
            "http://localhost:8000",
            "http://127.0.0.1:3000",
            "http://127.0.0.1:8000",
        ],
        description="Allowed CORS origins",
    )
    rate_limit_default: str = Field(default="200/minute", description="Default rate limit")

    # Storage / 存储
    data_dir: str = Field(
        default=str(Path(__file__).resolve().parent.parent / "data"),
        description="Root directory for persisted profiles and users",
    )
    log_dir: str = Field(
        default=str(Path(__file__).resolve().parent.parent.parent / "logs"),
        description="Directory for rotating log files",
    )

    # Name availability checks / 名称可用性检查
    name_check_debounce_seconds: float = Field(
        default=0.5, ge=0, description="Quiet period before a name check is issued"
    )
    name_check_cache_size: int = Field(
        default=512, ge=1, description="Maximum cached name check results"
    )

    # Setup sessions / 设置会话
    session_cache_size: int = Field(
        default=100, ge=1, description="Maximum in-memory account setup sessions"
    )


settings = Settings()

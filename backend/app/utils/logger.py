# -*- coding: utf-8 -*-
"""
Life RPG - 游戏化习惯追踪后端
Life RPG - Gamified Habit Tracking Backend

Copyright © 2025-2026 Life RPG Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  集中式日志系统 - 提供统一的日志配置和管理
  Centralized Logging Module - Unified logging configuration and management

使用示例 / Usage:
    from app.utils.logger import get_logger

    logger = get_logger(__name__)
    logger.info("应用启动 / Application started")
    logger.warning("Quest with this name already exists")
"""

import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler
from app.config import settings

log_dir = Path(settings.log_dir)
log_dir.mkdir(parents=True, exist_ok=True)

# Define log format
# 定义日志格式
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def get_logger(name: str) -> logging.Logger:
    """
    获取或创建指定名称的logger

    Get or create a logger with the specified name.

    Creates a logger with console and file handlers. File handler uses rotating
    file handler with 10MB max size and 5 backup files.

    Args:
        name: Logger名称，通常为 __name__ / Logger name (typically __name__)

    Returns:
        配置好的logger实例 / Configured logger instance
    """
    logger = logging.getLogger(name)

    # Avoid adding handlers multiple times
    # 避免多次添加处理器
    if logger.handlers:
        return logger

    logger.setLevel(logging.DEBUG if settings.debug else logging.INFO)

    # Console Handler (always enabled)
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if settings.debug else logging.INFO)
    console_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(console_handler)

    # File Handler (rotating, max 10MB, keep 5 backups)
    file_handler = RotatingFileHandler(
        log_dir / "liferpg.log",
        maxBytes=10 * 1024 * 1024,  # 10 MB
        backupCount=5,
        encoding='utf-8'
    )
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    logger.addHandler(file_handler)

    return logger

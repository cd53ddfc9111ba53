# -*- coding: utf-8 -*-
"""
Life RPG - 游戏化习惯追踪后端
Life RPG - Gamified Habit Tracking Backend

Copyright © 2025-2026 Life RPG Team
License: PolyForm Noncommercial License 1.0.0

模块说明 / Module Description:
  应用级异常层次 - 定义业务逻辑层异常的完整继承树
  Application-level Exception Hierarchy - Business logic exception definitions.
"""

from typing import Dict, List, Optional


FieldErrors = Dict[str, List[str]]


class LifeRPGError(Exception):
    """
    Life RPG 业务错误的基类

    Base exception for all Life RPG business errors.

    All application-level exceptions should inherit from this class for
    consistent error handling and propagation.
    """


class ValidationError(LifeRPGError):
    """
    数据验证失败异常

    Raised when user-correctable input fails validation beyond Pydantic checks.

    抛出时机：
    - 名称为空或过长 / Empty or too long name
    - 名称包含非法字符 / Name contains disallowed characters
    - 名称重复 / Duplicate name
    - 经验点不足 / Experience pool exhausted
    - 数量超出上限 / Collection limit exceeded

    Attributes:
        field_errors: 字段到错误消息列表的映射 / Mapping of field name to messages
    """

    def __init__(self, message: str, field_errors: Optional[FieldErrors] = None):
        super().__init__(message)
        self.message = message
        self.field_errors: FieldErrors = field_errors or {}


class InvariantError(LifeRPGError):
    """
    不变量被破坏异常（编程错误）

    Raised when an internal invariant is violated. These indicate defects,
    never user input problems.

    抛出时机：
    - 未处理的 reducer 动作类型 / Unhandled reducer action type
    - 存在性检查后任务消失 / Quest vanished after an existence check
    """


class StorageError(LifeRPGError):
    """
    存储操作失败异常

    Raised when a storage operation fails (read/write/delete).
    """


class NameCheckError(LifeRPGError):
    """
    名称可用性检查失败异常

    Raised when a name availability lookup fails for a reason other than
    cancellation.
    """


class ProfileSubmissionError(LifeRPGError):
    """
    档案提交失败异常

    Raised by the persistence sink when the atomic profile write fails.

    Attributes:
        code: 不透明错误代码 / Opaque error code reported by the sink
        kind: 错误分类 / duplicate | unauthorized | failure (filled by classification)
        message: 人类可读消息 / Human readable message
        field_errors: 字段错误 / Optional field scoped messages
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        kind: Optional[str] = None,
        field_errors: Optional[FieldErrors] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.kind = kind
        self.field_errors: FieldErrors = field_errors or {}


class OperationCancelled(LifeRPGError):
    """
    操作已取消异常

    Raised inside cancellable work once its token has been cancelled. Callers
    treat it as a silent no-op, never as a failure.
    """

"""
Application Layer Types - 应用层类型定义

定义应用服务层使用的基础类型，包括命令结果、查询结果等。
"""

from dataclasses import dataclass
from typing import Any, Generic, Optional, TypeVar
from enum import Enum, auto

from ..core.exceptions import CasinoError
from ..core.state import GameState

T = TypeVar('T')


class ResultStatus(Enum):
    """操作结果状态"""
    SUCCESS = auto()
    FAILURE = auto()
    VALIDATION_ERROR = auto()
    BUSINESS_RULE_VIOLATION = auto()


@dataclass(frozen=True)
class CommandResult:
    """
    命令执行结果

    Attributes:
        success: 是否成功
        status: 结果状态
        state: 执行后的游戏状态；失败时为输入状态本身
        message: 可读信息
        error_code: 机器可读的错误代码
        data: 成功时携带的实体或查询结果
        error: 失败时携带的原始异常
    """
    success: bool
    status: ResultStatus
    state: GameState
    message: str = ""
    error_code: Optional[str] = None
    data: Any = None
    error: Optional[CasinoError] = None

    @classmethod
    def success_result(cls, state: GameState, message: str = "操作成功", data: Any = None) -> 'CommandResult':
        """创建成功结果"""
        return cls(
            success=True,
            status=ResultStatus.SUCCESS,
            state=state,
            message=message,
            data=data
        )

    @classmethod
    def failure_result(cls, state: GameState, error: CasinoError,
                       status: ResultStatus = ResultStatus.FAILURE) -> 'CommandResult':
        """创建失败结果"""
        return cls(
            success=False,
            status=status,
            state=state,
            message=str(error),
            error_code=error.error_code,
            error=error
        )

    @classmethod
    def validation_error(cls, state: GameState, error: CasinoError) -> 'CommandResult':
        """创建验证错误结果"""
        return cls.failure_result(state, error, ResultStatus.VALIDATION_ERROR)

    @classmethod
    def business_rule_violation(cls, state: GameState, error: CasinoError) -> 'CommandResult':
        """创建业务规则违反结果"""
        return cls.failure_result(state, error, ResultStatus.BUSINESS_RULE_VIOLATION)


@dataclass(frozen=True)
class QueryResult(Generic[T]):
    """查询结果"""
    success: bool
    status: ResultStatus
    data: Optional[T] = None
    message: str = ""
    error_code: Optional[str] = None

    @classmethod
    def success_result(cls, data: T, message: str = "查询成功") -> 'QueryResult[T]':
        """创建成功结果"""
        return cls(
            success=True,
            status=ResultStatus.SUCCESS,
            data=data,
            message=message
        )

    @classmethod
    def failure_result(cls, message: str, error_code: Optional[str] = None,
                       status: ResultStatus = ResultStatus.FAILURE) -> 'QueryResult[T]':
        """创建失败结果"""
        return cls(
            success=False,
            status=status,
            message=message,
            error_code=error_code
        )

"""
Application Layer - 应用服务层

应用层可以访问核心层，但不能被核心层访问。

Services:
    CommandExecutor: 命令执行会话
    ConfigService: 配置管理服务

Types:
    CommandResult: 命令执行结果
    QueryResult: 查询结果
"""

from .types import ResultStatus, CommandResult, QueryResult
from .config_service import (
    ConfigType,
    ExecutorConfig,
    LoggingConfig,
    ConfigService,
    configure_logging,
    get_config_service,
)
from .command_executor import apply, CommandExecutor
from .examples import EXAMPLE_COMMANDS, example_script

__all__ = [
    # 类型
    "ResultStatus",
    "CommandResult",
    "QueryResult",

    # 配置
    "ConfigType",
    "ExecutorConfig",
    "LoggingConfig",
    "ConfigService",
    "configure_logging",
    "get_config_service",

    # 执行
    "apply",
    "CommandExecutor",

    # 示例
    "EXAMPLE_COMMANDS",
    "example_script",
]

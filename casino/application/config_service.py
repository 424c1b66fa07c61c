#!/usr/bin/env python3
"""
ConfigService - 配置管理服务

负责集中化管理解释器配置，包括：
- 命令执行配置
- 日志配置

配置按命名的profile组织，查询接口统一返回QueryResult。
"""

import logging
from dataclasses import dataclass, asdict, fields
from enum import Enum
from typing import Any, Dict, List, Optional

from ..core.enums import RoundStatus
from .types import QueryResult


class ConfigType(Enum):
    """配置类型枚举"""
    EXECUTOR = "executor"
    LOGGING = "logging"


@dataclass
class ExecutorConfig:
    """命令执行配置"""
    enforce_table_limits: bool = True  # 下注金额必须在牌桌最小/最大下注之间
    default_round_status: RoundStatus = RoundStatus.ACTIVE


@dataclass
class LoggingConfig:
    """日志配置"""
    log_level: str = 'INFO'
    log_format: str = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    def __post_init__(self):
        """验证日志级别"""
        if not isinstance(logging.getLevelName(self.log_level), int):
            raise ValueError(f"无效的日志级别: {self.log_level}")


_DEFAULT_PROFILE = "default"


class ConfigService:
    """配置管理服务"""

    def __init__(self):
        """初始化配置服务"""
        self.logger = logging.getLogger(__name__)
        self._configs: Dict[ConfigType, Dict[str, Any]] = {}
        self._load_default_configs()

    def _load_default_configs(self):
        """加载默认配置"""
        self._configs[ConfigType.EXECUTOR] = {
            'default': ExecutorConfig(),
            'lenient': ExecutorConfig(enforce_table_limits=False)
        }

        self._configs[ConfigType.LOGGING] = {
            'default': LoggingConfig(),
            'debug': LoggingConfig(log_level='DEBUG'),
            'quiet': LoggingConfig(log_level='WARNING', log_format='%(levelname)s: %(message)s')
        }

        self.logger.debug("默认配置加载完成")

    def _get(self, config_type: ConfigType, profile: str):
        config_profiles = self._configs.get(config_type, {})
        if profile not in config_profiles:
            self.logger.warning(f"未找到{config_type.value}配置 '{profile}'，使用默认配置")
            profile = _DEFAULT_PROFILE
        return config_profiles[profile]

    def get_executor_config(self, profile: str = _DEFAULT_PROFILE) -> QueryResult[ExecutorConfig]:
        """
        获取命令执行配置

        Args:
            profile: 配置名 (default, lenient)

        Returns:
            查询结果，包含命令执行配置
        """
        return QueryResult.success_result(self._get(ConfigType.EXECUTOR, profile))

    def get_logging_config(self, profile: str = _DEFAULT_PROFILE) -> QueryResult[LoggingConfig]:
        """
        获取日志配置

        Args:
            profile: 配置名 (default, debug, quiet)

        Returns:
            查询结果，包含日志配置
        """
        return QueryResult.success_result(self._get(ConfigType.LOGGING, profile))

    def get_merged_config(self, config_type: ConfigType, profile: str = _DEFAULT_PROFILE) -> QueryResult[Dict[str, Any]]:
        """获取配置的字典形式"""
        return QueryResult.success_result(asdict(self._get(config_type, profile)))

    def update_config(self, config_type: ConfigType, profile: str, updates: Dict[str, Any]) -> QueryResult[bool]:
        """
        更新指定配置的字段

        Args:
            config_type: 配置类型
            profile: 配置名，不存在时基于默认配置创建
            updates: 字段名到新值的映射

        Returns:
            查询结果，未知字段时失败且不修改任何字段
        """
        config_profiles = self._configs[config_type]
        base = config_profiles.get(profile) or config_profiles[_DEFAULT_PROFILE]
        known = {f.name for f in fields(base)}
        unknown = [key for key in updates if key not in known]
        if unknown:
            return QueryResult.failure_result(
                f"配置项 {', '.join(unknown)} 不存在于 {config_type.value}.{profile} 中",
                error_code="UNKNOWN_CONFIG_KEY"
            )

        values = asdict(base)
        values.update(updates)
        try:
            config_profiles[profile] = type(base)(**values)
        except ValueError as e:
            return QueryResult.failure_result(
                f"配置 {config_type.value}.{profile} 更新失败: {e}",
                error_code="INVALID_CONFIG_VALUE"
            )

        self.logger.info(f"配置 {config_type.value}.{profile} 更新成功")
        return QueryResult.success_result(True)

    def list_available_profiles(self, config_type: ConfigType) -> QueryResult[List[str]]:
        """列出某类配置的全部profile"""
        return QueryResult.success_result(sorted(self._configs.get(config_type, {}).keys()))


def configure_logging(config: LoggingConfig) -> None:
    """按日志配置初始化根日志器"""
    logging.basicConfig(level=config.log_level, format=config.log_format, force=True)


_config_service_instance: Optional[ConfigService] = None


def get_config_service() -> ConfigService:
    """获取全局配置服务实例"""
    global _config_service_instance
    if _config_service_instance is None:
        _config_service_instance = ConfigService()
    return _config_service_instance

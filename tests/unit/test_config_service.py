"""
配置服务单元测试
"""

import pytest

from casino.application import (
    ConfigService, ConfigType, ExecutorConfig, LoggingConfig, ResultStatus, get_config_service
)
from casino.core import RoundStatus


@pytest.fixture
def config_service() -> ConfigService:
    return ConfigService()


@pytest.mark.unit
class TestConfigService:
    """配置服务测试"""

    def test_default_executor_config(self, config_service):
        result = config_service.get_executor_config()
        assert result.success
        assert result.data == ExecutorConfig()
        assert result.data.enforce_table_limits is True
        assert result.data.default_round_status is RoundStatus.ACTIVE

    def test_lenient_profile(self, config_service):
        config = config_service.get_executor_config('lenient').data
        assert config.enforce_table_limits is False
        assert config == ExecutorConfig(enforce_table_limits=False)

    def test_unknown_profile_falls_back_to_default(self, config_service):
        assert config_service.get_logging_config('nope').data == LoggingConfig()

    def test_list_profiles(self, config_service):
        result = config_service.list_available_profiles(ConfigType.LOGGING)
        assert result.data == ['debug', 'default', 'quiet']

    def test_merged_config_is_dict(self, config_service):
        data = config_service.get_merged_config(ConfigType.LOGGING, 'debug').data
        assert data['log_level'] == 'DEBUG'

    def test_update_creates_profile(self, config_service):
        result = config_service.update_config(ConfigType.EXECUTOR, 'custom', {'enforce_table_limits': False})
        assert result.success
        assert config_service.get_executor_config('custom').data.enforce_table_limits is False
        assert config_service.get_executor_config().data.enforce_table_limits is True

    def test_update_unknown_key(self, config_service):
        result = config_service.update_config(ConfigType.EXECUTOR, 'default', {'house_edge': 0.1})
        assert not result.success
        assert result.status is ResultStatus.FAILURE
        assert result.error_code == 'UNKNOWN_CONFIG_KEY'

    def test_update_invalid_log_level(self, config_service):
        result = config_service.update_config(ConfigType.LOGGING, 'default', {'log_level': 'LOUD'})
        assert result.error_code == 'INVALID_CONFIG_VALUE'
        assert config_service.get_logging_config().data.log_level == 'INFO'

    def test_invalid_logging_config(self):
        with pytest.raises(ValueError):
            LoggingConfig(log_level='LOUD')

    def test_global_instance_is_shared(self):
        assert get_config_service() is get_config_service()

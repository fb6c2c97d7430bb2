"""
Unit tests for configuration module.
"""
import pytest
import os
from unittest.mock import patch
from config import Config, get_config


class TestConfig:
    """Tests for Config class."""

    @patch.dict(os.environ, {
        'DYNAMODB_TABLE': 'user-records',
    }, clear=True)
    def test_from_env_minimal(self):
        """Test Config.from_env with only the table name set."""
        config = Config.from_env()
        assert config.dynamodb_table == 'user-records'
        assert config.main_key_attribute == 'userId'  # default
        assert config.aws_region == 'us-east-1'  # default
        assert config.endpoint_url is None
        assert config.read_capacity_units == 5
        assert config.write_capacity_units == 5
        assert config.missing_table_policy == 'create'
        assert config.optimistic_locking is False
        assert config.has_static_credentials is False
        assert config.log_level == 'INFO'  # default

    @patch.dict(os.environ, {
        'DYNAMODB_TABLE': 'user-records',
        'MAIN_KEY_ATTRIBUTE': 'accountId',
        'AWS_REGION': 'eu-central-1',
        'AWS_ACCESS_KEY_ID': 'AKIDEXAMPLE',
        'AWS_SECRET_ACCESS_KEY': 'secret',
        'DYNAMODB_ENDPOINT_URL': 'http://localhost:8000',
        'READ_CAPACITY_UNITS': '10',
        'WRITE_CAPACITY_UNITS': '2',
        'MISSING_TABLE_POLICY': 'WAIT',
        'OPTIMISTIC_LOCKING': 'true',
        'RECORD_STORE_SECRET_NAME': 'record-store-keys',
        'LOG_LEVEL': 'debug',
    }, clear=True)
    def test_from_env_all_variables(self):
        """Test Config.from_env with all variables set."""
        config = Config.from_env()
        assert config.main_key_attribute == 'accountId'
        assert config.aws_region == 'eu-central-1'
        # Environment credentials stay with boto3's default chain
        assert config.aws_access_key_id is None
        assert config.has_static_credentials is False
        assert config.endpoint_url == 'http://localhost:8000'
        assert config.read_capacity_units == 10
        assert config.write_capacity_units == 2
        assert config.missing_table_policy == 'wait'
        assert config.optimistic_locking is True
        assert config.secret_name == 'record-store-keys'
        assert config.log_level == 'DEBUG'

    @patch.dict(os.environ, {}, clear=True)
    def test_from_env_missing_table(self):
        """Test Config.from_env raises error when the table is not set."""
        with pytest.raises(ValueError, match="DYNAMODB_TABLE"):
            Config.from_env()

    @patch.dict(os.environ, {
        'DYNAMODB_TABLE': 'user-records',
        'LOG_LEVEL': 'INVALID',
    }, clear=True)
    def test_from_env_invalid_log_level(self):
        """Test Config.from_env raises error for invalid log level."""
        with pytest.raises(ValueError, match="LOG_LEVEL"):
            Config.from_env()

    @patch.dict(os.environ, {
        'DYNAMODB_TABLE': 'user-records',
        'MISSING_TABLE_POLICY': 'retry',
    }, clear=True)
    def test_from_env_invalid_missing_table_policy(self):
        with pytest.raises(ValueError, match="MISSING_TABLE_POLICY"):
            Config.from_env()

    @pytest.mark.parametrize('raw', ['0', '-3', 'five'])
    def test_from_env_invalid_capacity(self, raw):
        env = {'DYNAMODB_TABLE': 'user-records', 'READ_CAPACITY_UNITS': raw}
        with patch.dict(os.environ, env, clear=True):
            with pytest.raises(ValueError, match="READ_CAPACITY_UNITS"):
                Config.from_env()

    @patch.dict(os.environ, {
        'DYNAMODB_TABLE': 'user-records',
        'OPTIMISTIC_LOCKING': 'maybe',
    }, clear=True)
    def test_from_env_invalid_flag(self):
        with pytest.raises(ValueError, match="OPTIMISTIC_LOCKING"):
            Config.from_env()

    def test_partial_credentials_are_not_static(self):
        config = Config(dynamodb_table='t', aws_access_key_id='AKIDEXAMPLE')
        assert config.has_static_credentials is False

    @patch.dict(os.environ, {
        'DYNAMODB_TABLE': 'user-records',
    }, clear=True)
    def test_get_config_singleton(self):
        """Test get_config returns singleton instance."""
        import config
        config._config = None

        config1 = get_config()
        config2 = get_config()

        assert config1 is config2
        config._config = None

"""Tests for configuration management."""

import logging
import os
from pathlib import Path
from unittest.mock import patch

import pytest

from tfmodule_validation.config_manager import (
    DEFAULT_OUTPUT_NAME,
    DEFAULT_RESOURCE_GROUP,
    AzureConfig,
    LoggingConfig,
    TerraformConfig,
    ValidationConfig,
    create_config_from_env,
)
from tfmodule_validation.exceptions import ConfigurationError

SP_ENV = {
    "ARM_SUBSCRIPTION_ID": "sub-123456789",
    "ARM_TENANT_ID": "tenant-id",
    "ARM_CLIENT_ID": "client-id",
    "ARM_CLIENT_SECRET": "very-secret",
}


class TestAzureConfig:
    """Test Azure configuration from the environment."""

    def test_defaults_from_empty_environment(self):
        """Test defaults when no Azure variables are set."""
        with patch.dict(os.environ, {}, clear=True):
            config = AzureConfig()

        assert config.subscription_id == ""
        assert config.resource_group == DEFAULT_RESOURCE_GROUP
        assert not config.has_service_principal()

    def test_azure_subscription_fallback(self):
        """Test that AZURE_SUBSCRIPTION_ID is used when ARM_SUBSCRIPTION_ID is unset."""
        with patch.dict(os.environ, {"AZURE_SUBSCRIPTION_ID": "fallback-sub"}, clear=True):
            config = AzureConfig()

        assert config.subscription_id == "fallback-sub"

    def test_arm_subscription_takes_precedence(self):
        """Test that ARM_SUBSCRIPTION_ID wins over AZURE_SUBSCRIPTION_ID."""
        env = {"ARM_SUBSCRIPTION_ID": "arm-sub", "AZURE_SUBSCRIPTION_ID": "azure-sub"}
        with patch.dict(os.environ, env, clear=True):
            config = AzureConfig()

        assert config.subscription_id == "arm-sub"

    def test_empty_resource_group_rejected(self):
        """Test that an empty resource group is a configuration error."""
        with pytest.raises(ConfigurationError) as exc_info:
            AzureConfig(resource_group="")

        assert exc_info.value.context["setting"] == "TFMV_RESOURCE_GROUP"

    def test_require_subscription_id(self):
        """Test that a missing subscription ID raises when required."""
        config = AzureConfig(subscription_id="")

        with pytest.raises(ConfigurationError, match="subscription ID is not configured"):
            config.require_subscription_id()

        config.subscription_id = "sub"
        assert config.require_subscription_id() == "sub"

    def test_service_principal_needs_all_three(self):
        """Test that a service principal needs tenant, client ID and secret."""
        with patch.dict(os.environ, SP_ENV, clear=True):
            config = AzureConfig()
        assert config.has_service_principal()

        config.client_secret = None
        assert not config.has_service_principal()

    def test_terraform_environment_forwards_set_values(self):
        """Test that every set ARM_* value is forwarded to terraform."""
        with patch.dict(os.environ, SP_ENV, clear=True):
            config = AzureConfig()

        assert config.terraform_environment() == SP_ENV

    def test_terraform_environment_omits_unset_values(self):
        """Test that unset ARM_* values are left out."""
        config = AzureConfig(
            subscription_id="sub", tenant_id=None, client_id=None, client_secret=None
        )

        assert config.terraform_environment() == {"ARM_SUBSCRIPTION_ID": "sub"}

    def test_safe_subscription_id_is_masked(self):
        """Test masking of the subscription ID."""
        assert AzureConfig(subscription_id="").get_safe_subscription_id() == "Not configured"
        assert (
            AzureConfig(subscription_id="0123456789abcdef").get_safe_subscription_id()
            == "01234567..."
        )


class TestTerraformConfig:
    """Test terraform configuration from the environment."""

    def test_defaults(self):
        """Test default binary, output name and examples directory."""
        with patch.dict(os.environ, {}, clear=True):
            config = TerraformConfig()

        assert config.binary == "terraform"
        assert config.output_name == DEFAULT_OUTPUT_NAME
        assert config.examples_dir.name == "example"

    def test_environment_overrides(self, tmp_path):
        """Test TFMV_* environment overrides."""
        env = {
            "TFMV_TERRAFORM_BINARY": "/opt/terraform",
            "TFMV_EXAMPLES_DIR": str(tmp_path),
            "TFMV_OUTPUT_NAME": "planids",
        }
        with patch.dict(os.environ, env, clear=True):
            config = TerraformConfig()

        assert config.binary == "/opt/terraform"
        assert config.examples_dir == tmp_path
        assert config.output_name == "planids"

    def test_string_examples_dir_is_converted(self, tmp_path):
        """Test that a string examples directory becomes a Path."""
        config = TerraformConfig(examples_dir=str(tmp_path))  # type: ignore[arg-type]

        assert isinstance(config.examples_dir, Path)

    @pytest.mark.parametrize("field_name", ["binary", "output_name"])
    def test_empty_values_rejected(self, field_name):
        """Test that empty binary and output names are rejected."""
        with pytest.raises(ConfigurationError):
            TerraformConfig(**{field_name: ""})


class TestLoggingConfig:
    """Test logging configuration."""

    def test_level_is_normalized(self):
        """Test that the level is upper-cased and mapped to a logging constant."""
        config = LoggingConfig(level="debug")

        assert config.level == "DEBUG"
        assert config.get_log_level() == logging.DEBUG

    def test_invalid_level_rejected(self):
        """Test that an unknown level is rejected."""
        with pytest.raises(ConfigurationError, match="Log level must be one of"):
            LoggingConfig(level="LOUD")


class TestValidationConfig:
    """Test the aggregated configuration."""

    def test_from_environment_overrides(self, tmp_path):
        """Test that explicit arguments override the environment."""
        with patch.dict(os.environ, {}, clear=True):
            config = ValidationConfig.from_environment(
                resource_group="other-rg", examples_dir=tmp_path, log_level="warning"
            )

        assert config.azure.resource_group == "other-rg"
        assert config.terraform.examples_dir == tmp_path
        assert config.logging.level == "WARNING"

    def test_log_level_falls_back_to_environment(self):
        """Test that LOG_LEVEL is kept when no level is passed."""
        with patch.dict(os.environ, {"LOG_LEVEL": "DEBUG"}, clear=True):
            config = ValidationConfig.from_environment(log_level=None)

        assert config.logging.level == "DEBUG"

    def test_create_config_from_env_validates(self):
        """Test that the factory validates the result."""
        with patch.dict(os.environ, {"LOG_LEVEL": "INFO"}, clear=True):
            with pytest.raises(ConfigurationError):
                create_config_from_env(log_level="chatty")

    def test_to_dict_has_no_secret(self):
        """Test that serialization masks the subscription and drops the secret."""
        with patch.dict(os.environ, SP_ENV, clear=True):
            config = ValidationConfig()

        data = config.to_dict()

        assert data["azure"]["service_principal"] is True
        assert data["azure"]["subscription_id"] == "sub-1234..."
        assert "very-secret" not in str(data)

    def test_summary_does_not_log_secret(self, caplog):
        """Test that the configuration summary never logs the client secret."""
        with patch.dict(os.environ, SP_ENV, clear=True):
            config = ValidationConfig()

        with caplog.at_level(logging.INFO):
            config.log_configuration_summary()

        assert "Resource Group: tfmodulevalidation-test-group" in caplog.text
        assert "service principal" in caplog.text
        assert "very-secret" not in caplog.text

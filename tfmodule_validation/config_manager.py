"""
Configuration management for Terraform module validation.

Every section is a dataclass populated from environment variables. A local
.env file is loaded first so developers can keep ARM_* settings out of their
shell profile.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from .exceptions import ConfigurationError

load_dotenv(override=False)

DEFAULT_RESOURCE_GROUP = "tfmodulevalidation-test-group"
DEFAULT_OUTPUT_NAME = "sharedplanids"

logger = logging.getLogger(__name__)


def _default_examples_dir() -> Path:
    # example/ sits next to the package in a source checkout
    return Path(__file__).resolve().parent.parent / "example"


@dataclass
class AzureConfig:
    """Azure subscription, resource group and optional service principal."""

    subscription_id: str = field(
        default_factory=lambda: os.getenv(
            "ARM_SUBSCRIPTION_ID", os.getenv("AZURE_SUBSCRIPTION_ID", "")
        )
    )
    resource_group: str = field(
        default_factory=lambda: os.getenv("TFMV_RESOURCE_GROUP", DEFAULT_RESOURCE_GROUP)
    )
    tenant_id: Optional[str] = field(default_factory=lambda: os.getenv("ARM_TENANT_ID"))
    client_id: Optional[str] = field(default_factory=lambda: os.getenv("ARM_CLIENT_ID"))
    client_secret: Optional[str] = field(
        default_factory=lambda: os.getenv("ARM_CLIENT_SECRET")
    )

    def __post_init__(self) -> None:
        """Validate the resource group name."""
        if not self.resource_group:
            raise ConfigurationError(
                "Resource group name is required", setting="TFMV_RESOURCE_GROUP"
            )

    def has_service_principal(self) -> bool:
        """Check whether explicit service principal credentials are configured."""
        return bool(self.tenant_id and self.client_id and self.client_secret)

    def require_subscription_id(self) -> str:
        """Return the subscription ID or raise if it is not configured."""
        if not self.subscription_id:
            raise ConfigurationError(
                "Azure subscription ID is not configured",
                setting="ARM_SUBSCRIPTION_ID",
                recovery_suggestion="Export ARM_SUBSCRIPTION_ID or run 'az account set'",
            )
        return self.subscription_id

    def terraform_environment(self) -> Dict[str, str]:
        """ARM_* variables to forward to terraform subprocesses."""
        env: Dict[str, str] = {}
        if self.subscription_id:
            env["ARM_SUBSCRIPTION_ID"] = self.subscription_id
        if self.tenant_id:
            env["ARM_TENANT_ID"] = self.tenant_id
        if self.client_id:
            env["ARM_CLIENT_ID"] = self.client_id
        if self.client_secret:
            env["ARM_CLIENT_SECRET"] = self.client_secret
        return env

    def get_safe_subscription_id(self) -> str:
        """Get subscription ID for logging (masked)."""
        if not self.subscription_id:
            return "Not configured"
        if len(self.subscription_id) > 8:
            return self.subscription_id[:8] + "..."
        return self.subscription_id


@dataclass
class TerraformConfig:
    """Configuration for the terraform CLI."""

    binary: str = field(
        default_factory=lambda: os.getenv("TFMV_TERRAFORM_BINARY", "terraform")
    )
    examples_dir: Path = field(
        default_factory=lambda: Path(
            os.getenv("TFMV_EXAMPLES_DIR", str(_default_examples_dir()))
        )
    )
    output_name: str = field(
        default_factory=lambda: os.getenv("TFMV_OUTPUT_NAME", DEFAULT_OUTPUT_NAME)
    )

    def __post_init__(self) -> None:
        """Normalize paths and validate."""
        self.examples_dir = Path(self.examples_dir)
        if not self.binary:
            raise ConfigurationError(
                "Terraform binary is required", setting="TFMV_TERRAFORM_BINARY"
            )
        if not self.output_name:
            raise ConfigurationError(
                "Terraform output name is required", setting="TFMV_OUTPUT_NAME"
            )


@dataclass
class LoggingConfig:
    """Configuration for logging behavior."""

    level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
    format: str = field(
        default_factory=lambda: os.getenv(
            "LOG_FORMAT", "%(log_color)s%(levelname)s:%(name)s:%(message)s"
        )
    )
    file_output: Optional[str] = field(default_factory=lambda: os.getenv("LOG_FILE"))

    def __post_init__(self) -> None:
        """Validate logging configuration."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if self.level.upper() not in valid_levels:
            raise ConfigurationError(
                f"Log level must be one of: {valid_levels}", setting="LOG_LEVEL"
            )
        self.level = self.level.upper()

    def get_log_level(self) -> int:
        """Convert string log level to logging constant."""
        return int(getattr(logging, self.level))


@dataclass
class ValidationConfig:
    """Main configuration class that aggregates all configuration sections."""

    azure: AzureConfig = field(default_factory=AzureConfig)
    terraform: TerraformConfig = field(default_factory=TerraformConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_environment(
        cls,
        resource_group: Optional[str] = None,
        examples_dir: Optional[Path] = None,
        log_level: Optional[str] = None,
    ) -> "ValidationConfig":
        """
        Create configuration from environment variables.

        Args:
            resource_group: Optional resource group override
            examples_dir: Optional examples root override
            log_level: Optional log level override

        Returns:
            ValidationConfig: Configured instance
        """
        config = cls()
        if resource_group:
            config.azure.resource_group = resource_group
        if examples_dir is not None:
            config.terraform.examples_dir = Path(examples_dir)
        if log_level:
            config.logging.level = log_level.upper()
        return config

    def validate_all(self) -> None:
        """Validate all configuration sections."""
        try:
            self.azure.__post_init__()
            self.terraform.__post_init__()
            self.logging.__post_init__()
        except ConfigurationError as e:
            logger.error(f"Configuration validation failed: {e}")
            raise
        logger.debug("Configuration validation successful")

    def log_configuration_summary(self) -> None:
        """Log a summary of the current configuration (without secrets)."""
        logger.info("=" * 60)
        logger.info("TERRAFORM MODULE VALIDATION CONFIGURATION")
        logger.info("=" * 60)
        logger.info(f"Subscription: {self.azure.get_safe_subscription_id()}")
        logger.info(f"Resource Group: {self.azure.resource_group}")
        logger.info(
            f"Credentials: {'service principal' if self.azure.has_service_principal() else 'ambient (DefaultAzureCredential)'}"
        )
        logger.info(f"Terraform Binary: {self.terraform.binary}")
        logger.info(f"Examples Directory: {self.terraform.examples_dir}")
        logger.info(f"Output Name: {self.terraform.output_name}")
        logger.info(f"Logging Level: {self.logging.level}")
        if self.logging.file_output:
            logger.info(f"Log File: {self.logging.file_output}")
        logger.info("=" * 60)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary for serialization."""
        return {
            "azure": {
                "subscription_id": self.azure.get_safe_subscription_id(),
                "resource_group": self.azure.resource_group,
                "service_principal": self.azure.has_service_principal(),
                # Don't include the client secret in serialization
            },
            "terraform": {
                "binary": self.terraform.binary,
                "examples_dir": str(self.terraform.examples_dir),
                "output_name": self.terraform.output_name,
            },
            "logging": {
                "level": self.logging.level,
                "file_output": self.logging.file_output,
            },
        }


def create_config_from_env(
    resource_group: Optional[str] = None,
    examples_dir: Optional[Path] = None,
    log_level: Optional[str] = None,
) -> ValidationConfig:
    """
    Factory function to create and validate configuration from environment.

    Raises:
        ConfigurationError: If configuration is invalid
    """
    config = ValidationConfig.from_environment(resource_group, examples_dir, log_level)
    config.validate_all()
    return config

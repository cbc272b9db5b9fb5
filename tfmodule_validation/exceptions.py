"""
Exception hierarchy for Terraform module validation.

Infrastructure failures (Terraform commands, Azure reads, missing
configuration) raise one of these exceptions and abort the scenario. Field
mismatches never raise; they are recorded in a ValidationReport instead.
"""

from typing import Any, Dict, List, Optional, Union


class TfModuleValidationError(Exception):
    """
    Base exception class for all validation tooling errors.

    Carries an optional error code, structured context, the underlying cause
    and a recovery suggestion for the operator.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[Exception] = None,
        recovery_suggestion: Optional[str] = None,
    ) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            context: Optional dictionary with error context
            cause: Optional underlying exception that caused this error
            recovery_suggestion: Optional suggestion for error recovery
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause
        self.recovery_suggestion = recovery_suggestion

    def __str__(self) -> str:
        """Return a formatted error message with context."""
        result = self.message
        if self.error_code:
            result = f"[{self.error_code}] {result}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            result += f" (context: {context_str})"
        if self.cause:
            result += f" (caused by: {self.cause})"
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
            "recovery_suggestion": self.recovery_suggestion,
        }


# Configuration
class ConfigurationError(TfModuleValidationError):
    """Raised when required configuration is missing or invalid."""

    def __init__(
        self, message: str, setting: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if setting:
            context["setting"] = setting
        kwargs["context"] = context
        kwargs.setdefault("error_code", "CONFIGURATION_ERROR")
        super().__init__(message, **kwargs)


# Terraform
class TerraformError(TfModuleValidationError):
    """Base class for Terraform-related errors."""

    pass


class TerraformCommandError(TerraformError):
    """Raised when a terraform subprocess fails or times out."""

    def __init__(
        self,
        message: str,
        command: Optional[Union[str, List[str]]] = None,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if command:
            context["command"] = (
                " ".join(command) if isinstance(command, list) else command
            )
        if returncode is not None:
            context["returncode"] = returncode
        kwargs["context"] = context
        kwargs.setdefault("error_code", "TERRAFORM_COMMAND_FAILED")
        super().__init__(message, **kwargs)
        self.returncode = returncode
        self.stderr = stderr or ""


class TerraformOutputError(TerraformError):
    """Raised when a declared output is missing or cannot be parsed."""

    def __init__(
        self, message: str, output_name: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if output_name:
            context["output"] = output_name
        kwargs["context"] = context
        kwargs.setdefault("error_code", "TERRAFORM_OUTPUT_ERROR")
        kwargs.setdefault(
            "recovery_suggestion",
            "Check that the module declares the output and that apply succeeded",
        )
        super().__init__(message, **kwargs)


# Azure
class AzureError(TfModuleValidationError):
    """Base class for Azure-related errors."""

    pass


class AzureAuthenticationError(AzureError):
    """Raised when Azure authentication fails."""

    def __init__(
        self, message: str, tenant_id: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if tenant_id:
            context["tenant_id"] = tenant_id
        kwargs["context"] = context
        kwargs.setdefault("error_code", "AZURE_AUTH_FAILED")
        kwargs.setdefault(
            "recovery_suggestion",
            "Try running 'az login' or set ARM_TENANT_ID, ARM_CLIENT_ID and ARM_CLIENT_SECRET",
        )
        super().__init__(message, **kwargs)


class AzureResourceFetchError(AzureError):
    """Raised when a resource cannot be read from Azure Resource Manager."""

    def __init__(
        self,
        message: str,
        resource_type: Optional[str] = None,
        resource_name: Optional[str] = None,
        resource_group: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if resource_type:
            context["resource_type"] = resource_type
        if resource_name:
            context["resource_name"] = resource_name
        if resource_group:
            context["resource_group"] = resource_group
        kwargs["context"] = context
        kwargs.setdefault("error_code", "AZURE_RESOURCE_FETCH_FAILED")
        super().__init__(message, **kwargs)


# Scenarios
class ScenarioError(TfModuleValidationError):
    """Raised for unknown scenarios or unusable module directories."""

    def __init__(
        self, message: str, scenario: Optional[str] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if scenario:
            context["scenario"] = scenario
        kwargs["context"] = context
        kwargs.setdefault("error_code", "SCENARIO_ERROR")
        super().__init__(message, **kwargs)

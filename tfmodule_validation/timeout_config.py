"""
Timeout configuration for Terraform subprocess calls.

Every terraform invocation made by the runner is bounded by one of these
values. They are read once at import time and can be overridden through
environment variables:

    - TFMV_TIMEOUT_QUICK: version checks (default: 30s)
    - TFMV_TIMEOUT_INIT: terraform init, provider downloads (default: 300s)
    - TFMV_TIMEOUT_OUTPUT: terraform output (default: 60s)
    - TFMV_TIMEOUT_APPLY: terraform apply (default: 1800s)
    - TFMV_TIMEOUT_DESTROY: terraform destroy (default: 1800s)

Azure SDK reads are not covered here; they use the SDK transport defaults.
"""

import logging
import os
from typing import Final, List, Optional, Union

logger = logging.getLogger(__name__)


def _get_timeout(env_var: str, default: int) -> int:
    """Get timeout value from environment variable or use default.

    Args:
        env_var: Environment variable name
        default: Default timeout in seconds

    Returns:
        Timeout value in seconds
    """
    value = os.environ.get(env_var)
    if value is not None:
        try:
            timeout = int(value)
            if timeout <= 0:
                logger.warning(
                    f"Invalid timeout value for {env_var}: {value}. "
                    f"Must be positive. Using default: {default}s"
                )
                return default
            return timeout
        except ValueError:
            logger.warning(
                f"Invalid timeout value for {env_var}: {value}. "
                f"Must be integer. Using default: {default}s"
            )
            return default
    return default


class Timeouts:
    """Timeout constants (seconds) for terraform commands."""

    QUICK: Final[int] = _get_timeout("TFMV_TIMEOUT_QUICK", 30)
    VERSION_CHECK: Final[int] = QUICK

    TERRAFORM_INIT: Final[int] = _get_timeout("TFMV_TIMEOUT_INIT", 300)
    TERRAFORM_OUTPUT: Final[int] = _get_timeout("TFMV_TIMEOUT_OUTPUT", 60)

    # Creating an App Service Plan with autoscale and alerts routinely takes minutes
    TERRAFORM_APPLY: Final[int] = _get_timeout("TFMV_TIMEOUT_APPLY", 1800)
    TERRAFORM_DESTROY: Final[int] = _get_timeout("TFMV_TIMEOUT_DESTROY", 1800)


def log_timeout_event(
    operation: str,
    timeout_value: int,
    command: Optional[Union[str, List[str]]] = None,
    level: str = "warning",
) -> None:
    """Log a timeout event with consistent formatting.

    Args:
        operation: Name of the operation that timed out
        timeout_value: Timeout value that was exceeded
        command: Optional command that timed out
        level: Log level (debug, info, warning, error)
    """
    log_func = getattr(logger, level, logger.warning)
    cmd_str = ""
    if command:
        cmd_str = " ".join(command) if isinstance(command, list) else command
        if len(cmd_str) > 100:
            cmd_str = cmd_str[:97] + "..."
        cmd_str = f" - command: '{cmd_str}'"

    log_func(
        f"Operation '{operation}' timed out after {timeout_value} seconds{cmd_str}"
    )

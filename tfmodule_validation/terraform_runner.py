"""Terraform CLI driver.

This module wraps the terraform binary for the validation workflow:
init -> apply -> output -> destroy against a single module directory.

Terraform itself is an external collaborator. Every command is a blocking
subprocess bounded by a value from Timeouts; failures raise
TerraformCommandError with the command, exit code and stderr attached.
"""

import json
import logging
import os
import subprocess
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .exceptions import TerraformCommandError, TerraformError, TerraformOutputError
from .timeout_config import Timeouts, log_timeout_event

logger = logging.getLogger(__name__)


@dataclass
class TerraformOptions:
    """Options for running terraform against one module directory.

    Attributes:
        terraform_dir: Directory containing the root module
        terraform_binary: Name or path of the terraform executable
        env_vars: Extra environment variables for every command
        vars: Values passed as -var key=value to apply and destroy
        no_color: Pass -no-color to every command
    """

    terraform_dir: Path
    terraform_binary: str = "terraform"
    env_vars: Dict[str, str] = field(default_factory=dict)
    vars: Dict[str, Any] = field(default_factory=dict)
    no_color: bool = True

    def __post_init__(self) -> None:
        self.terraform_dir = Path(self.terraform_dir)


def _format_var(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    return json.dumps(value)


class TerraformRunner:
    """Runs terraform commands for a module directory."""

    def __init__(self, options: TerraformOptions):
        """Initialize the runner.

        Args:
            options: Terraform options for the target module

        Raises:
            TerraformError: If the module directory does not exist
        """
        self.options = options
        self.working_dir = options.terraform_dir

        if not self.working_dir.is_dir():
            raise TerraformError(
                f"Terraform directory {self.working_dir} does not exist",
                error_code="TERRAFORM_DIR_NOT_FOUND",
                context={"terraform_dir": str(self.working_dir)},
            )

    def _get_environment(self) -> Dict[str, str]:
        """Get environment variables for terraform subprocesses.

        Returns:
            Copy of the current environment with option overrides applied
        """
        env = os.environ.copy()
        env.update(self.options.env_vars)
        # Keep terraform from prompting or printing upgrade banners
        env.setdefault("TF_IN_AUTOMATION", "1")
        return env

    def _var_args(self) -> List[str]:
        args: List[str] = []
        for key, value in self.options.vars.items():
            args.extend(["-var", f"{key}={_format_var(value)}"])
        return args

    def _run(
        self,
        args: List[str],
        timeout: int,
        operation: str,
        check: bool = True,
    ) -> subprocess.CompletedProcess:
        """Run a terraform command.

        Args:
            args: Terraform command arguments
            timeout: Command timeout in seconds
            operation: Operation name for logs and errors
            check: Raise TerraformCommandError on a non-zero exit code

        Returns:
            The completed process with text stdout/stderr

        Raises:
            TerraformCommandError: If the command times out, cannot be started,
                or (with check) exits non-zero
        """
        cmd = [self.options.terraform_binary, *args]
        if self.options.no_color:
            cmd.append("-no-color")

        logger.debug(f"Running command: {' '.join(cmd)} (cwd={self.working_dir})")

        try:
            result = subprocess.run(
                cmd,
                cwd=self.working_dir,
                env=self._get_environment(),
                capture_output=True,
                text=True,
                check=False,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            log_timeout_event(f"terraform_{operation}", timeout, cmd)
            raise TerraformCommandError(
                f"Terraform {operation} timed out after {timeout} seconds",
                command=cmd,
                cause=e,
            ) from e
        except FileNotFoundError as e:
            raise TerraformCommandError(
                f"Terraform binary '{self.options.terraform_binary}' not found",
                command=cmd,
                cause=e,
                recovery_suggestion="Install terraform or set TFMV_TERRAFORM_BINARY",
            ) from e

        if check and result.returncode != 0:
            raise TerraformCommandError(
                f"Terraform {operation} failed: {result.stderr.strip()}",
                command=cmd,
                returncode=result.returncode,
                stderr=result.stderr,
            )

        return result

    def init(self) -> str:
        """Run terraform init."""
        logger.info(f"Running terraform init in {self.working_dir}")
        result = self._run(
            ["init", "-input=false", "-upgrade=false"],
            timeout=Timeouts.TERRAFORM_INIT,
            operation="init",
        )
        return result.stdout

    def apply(self) -> str:
        """Run terraform apply without prompting."""
        logger.info(f"Running terraform apply in {self.working_dir}")
        result = self._run(
            ["apply", "-auto-approve", "-input=false", *self._var_args()],
            timeout=Timeouts.TERRAFORM_APPLY,
            operation="apply",
        )
        return result.stdout

    def init_and_apply(self) -> str:
        """Run terraform init followed by apply.

        Returns:
            Apply stdout
        """
        self.init()
        return self.apply()

    def destroy(self) -> str:
        """Run terraform destroy without prompting."""
        logger.info(f"Running terraform destroy in {self.working_dir}")
        result = self._run(
            ["destroy", "-auto-approve", "-input=false", *self._var_args()],
            timeout=Timeouts.TERRAFORM_DESTROY,
            operation="destroy",
        )
        return result.stdout

    def output(self, name: str) -> Optional[str]:
        """Read a single declared output value.

        String outputs are returned verbatim. Lists, maps and numbers are
        re-serialized as compact JSON so callers can do substring checks.

        Args:
            name: Output name

        Returns:
            The output as a string, or None when its value is null

        Raises:
            TerraformOutputError: If the output is not declared or not JSON
        """
        result = self._run(
            ["output", "-json", name],
            timeout=Timeouts.TERRAFORM_OUTPUT,
            operation="output",
            check=False,
        )
        if result.returncode != 0:
            raise TerraformOutputError(
                f"Terraform output '{name}' could not be read: {result.stderr.strip()}",
                output_name=name,
            )

        try:
            value = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise TerraformOutputError(
                f"Terraform output '{name}' is not valid JSON",
                output_name=name,
                cause=e,
            ) from e

        if value is None:
            return None
        if isinstance(value, str):
            return value
        return json.dumps(value, separators=(",", ":"))

    def output_all(self) -> Dict[str, Any]:
        """Read every declared output.

        Returns:
            Mapping of output name to its decoded value
        """
        result = self._run(
            ["output", "-json"],
            timeout=Timeouts.TERRAFORM_OUTPUT,
            operation="output",
        )
        try:
            raw = json.loads(result.stdout or "{}")
        except json.JSONDecodeError as e:
            raise TerraformOutputError(
                "Terraform outputs are not valid JSON", cause=e
            ) from e

        return {name: entry.get("value") for name, entry in raw.items()}

    def check_terraform_installed(self) -> bool:
        """Check if terraform is installed and accessible.

        Returns:
            True if terraform is installed, False otherwise
        """
        try:
            result = subprocess.run(
                [self.options.terraform_binary, "version"],
                capture_output=True,
                text=True,
                timeout=Timeouts.VERSION_CHECK,
            )
            return result.returncode == 0
        except (subprocess.TimeoutExpired, FileNotFoundError):
            return False

    def get_terraform_version(self) -> Optional[str]:
        """Get the installed terraform version.

        Returns:
            Version string or None if not found
        """
        try:
            result = subprocess.run(
                [self.options.terraform_binary, "version", "-json"],
                capture_output=True,
                text=True,
                timeout=Timeouts.VERSION_CHECK,
            )
        except (subprocess.TimeoutExpired, FileNotFoundError):
            return None

        if result.returncode != 0:
            return None
        try:
            version_data = json.loads(result.stdout)
        except json.JSONDecodeError:
            logger.debug(f"Unexpected terraform version output: {result.stdout!r}")
            return None
        return version_data.get("terraform_version", "unknown")

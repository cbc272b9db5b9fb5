"""Scenario runner: apply an example module, validate it, tear it down.

Flow per scenario:
    init/apply -> read output -> plan -> metric alert -> autoscale -> destroy

Destroy is guaranteed through ``deployed``: it runs when validation raises,
when a check fails, and when apply itself fails part-way (partially created
resources still need to be removed).
"""

import logging
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, Optional

import structlog

from .arm.clients import AzureClientFactory
from .config_manager import ValidationConfig
from .exceptions import ScenarioError, TfModuleValidationError
from .scenarios import Scenario
from .terraform_runner import TerraformOptions, TerraformRunner
from .validation import (
    ValidationReport,
    validate_autoscale_setting,
    validate_metric_alert,
    validate_output_contains,
    validate_plan,
)

logger = logging.getLogger(__name__)
events = structlog.get_logger(__name__)


@dataclass
class ScenarioResult:
    scenario: str
    output_value: Optional[str]
    report: ValidationReport

    @property
    def passed(self) -> bool:
        return self.report.passed


@contextmanager
def deployed(runner: TerraformRunner, destroy: bool = True) -> Iterator[TerraformRunner]:
    """Apply a module for the duration of a with-block.

    The module is destroyed on exit whether the block succeeds or raises.
    If the block raised, a destroy failure is logged and the original error
    propagates; otherwise the destroy failure is raised.

    Args:
        runner: Terraform runner for the module
        destroy: Set False to keep the infrastructure (debugging only)
    """
    try:
        runner.init_and_apply()
        events.info(
            "module_applied",
            terraform_dir=str(runner.working_dir),
            outputs=sorted(runner.output_all()),
        )
        yield runner
    except BaseException:
        if destroy:
            _destroy_after_failure(runner)
        else:
            _warn_kept(runner)
        raise

    if destroy:
        runner.destroy()
        events.info("module_destroyed", terraform_dir=str(runner.working_dir))
    else:
        _warn_kept(runner)


def _destroy_after_failure(runner: TerraformRunner) -> None:
    try:
        runner.destroy()
        events.info("module_destroyed", terraform_dir=str(runner.working_dir))
    except TfModuleValidationError as e:
        logger.error(
            f"Destroy failed in {runner.working_dir} while handling an earlier error: {e}"
        )


def _warn_kept(runner: TerraformRunner) -> None:
    logger.warning(
        f"Skipping terraform destroy; resources from {runner.working_dir} are still deployed"
    )


class ScenarioRunner:
    """
    Runs example scenarios against one subscription and resource group.

    Example:
        config = create_config_from_env()
        result = ScenarioRunner(config).run(get_scenario("basic"))
        assert result.passed, result.report.summary()
    """

    def __init__(
        self, config: ValidationConfig, factory: Optional[AzureClientFactory] = None
    ) -> None:
        self.config = config
        self.factory = factory or AzureClientFactory(config.azure)

    def terraform_runner(self, scenario: Scenario) -> TerraformRunner:
        """Build a TerraformRunner for the scenario's module directory.

        Raises:
            ScenarioError: If the module directory does not exist
        """
        module_dir = scenario.module_dir(self.config.terraform.examples_dir)
        if not module_dir.is_dir():
            raise ScenarioError(
                f"Module directory {module_dir} does not exist",
                scenario=scenario.name,
                recovery_suggestion="Set TFMV_EXAMPLES_DIR or pass --examples-dir",
            )

        options = TerraformOptions(
            terraform_dir=module_dir,
            terraform_binary=self.config.terraform.binary,
            env_vars=self.config.azure.terraform_environment(),
        )
        return TerraformRunner(options)

    def validate(
        self,
        scenario: Scenario,
        runner: Optional[TerraformRunner] = None,
        check_output: bool = True,
    ) -> ScenarioResult:
        """Validate resources that are already deployed.

        Args:
            scenario: Scenario to validate
            runner: Runner used to read the declared output
            check_output: Read and check the Terraform output first

        Returns:
            ScenarioResult with every recorded mismatch

        Raises:
            TfModuleValidationError: If an output or resource cannot be read
        """
        report = ValidationReport(name=scenario.name)
        output_value: Optional[str] = None

        if check_output:
            runner = runner or self.terraform_runner(scenario)
            output_name = self.config.terraform.output_name
            output_value = runner.output(output_name)
            validate_output_contains(output_value, scenario.plan, output_name, report)

        validate_plan(self.factory, scenario.plan, report)
        validate_metric_alert(self.factory, scenario.metric_alert, report)
        if scenario.autoscale is not None:
            validate_autoscale_setting(
                self.factory, scenario.autoscale_setting_name, scenario.autoscale, report
            )

        events.info(
            "scenario_validated",
            scenario=scenario.name,
            passed=report.passed,
            checks=report.checks,
            mismatches=len(report.mismatches),
        )
        return ScenarioResult(scenario.name, output_value, report)

    def run(
        self, scenario: Scenario, apply: bool = True, destroy: bool = True
    ) -> ScenarioResult:
        """Apply, validate and destroy one scenario.

        Args:
            scenario: Scenario to run
            apply: Set False to validate already-deployed resources only
            destroy: Set False to keep the infrastructure after validation

        Returns:
            ScenarioResult; check ``passed`` for the outcome
        """
        runner = self.terraform_runner(scenario)
        events.info(
            "scenario_started",
            scenario=scenario.name,
            terraform_dir=str(runner.working_dir),
            resource_group=self.config.azure.resource_group,
            apply=apply,
        )

        if not apply:
            return self.validate(scenario, runner)

        logger.info(f"Using terraform {runner.get_terraform_version() or '(version unknown)'}")

        with deployed(runner, destroy=destroy):
            result = self.validate(scenario, runner)
        return result


def run_scenario(
    scenario: Scenario,
    config: ValidationConfig,
    factory: Optional[AzureClientFactory] = None,
    apply: bool = True,
    destroy: bool = True,
) -> ScenarioResult:
    """Convenience wrapper around ScenarioRunner.run."""
    return ScenarioRunner(config, factory).run(scenario, apply=apply, destroy=destroy)

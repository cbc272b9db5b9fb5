"""Command-line entry point for running the example module scenarios.

Exit codes:
    0  every check passed
    1  the report recorded mismatches
    2  an infrastructure error aborted the scenario
"""

import json
import logging
import sys
from pathlib import Path
from typing import Optional

import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from .config_manager import ValidationConfig, create_config_from_env
from .exceptions import TfModuleValidationError
from .logging_config import setup_logging
from .scenario_runner import ScenarioResult, run_scenario
from .scenarios import SCENARIOS, get_scenario, list_scenarios
from .validation import generate_json_report, generate_markdown_report

logger = logging.getLogger(__name__)
console = Console()

EXIT_PASSED = 0
EXIT_MISMATCHES = 1
EXIT_ERROR = 2


def _load_config(ctx: click.Context, examples_dir: Optional[str]) -> ValidationConfig:
    config = create_config_from_env(
        examples_dir=Path(examples_dir) if examples_dir else None,
        log_level=ctx.obj["log_level"],
    )
    setup_logging(config.logging, json_output=ctx.obj["log_format"] == "json")
    config.log_configuration_summary()
    return config


def _report_error(error: TfModuleValidationError) -> None:
    console.print(f"[red]❌ {escape(str(error))}[/red]")
    if error.recovery_suggestion:
        console.print(f"[yellow]Suggestion: {escape(error.recovery_suggestion)}[/yellow]")


def _emit_report(result: ScenarioResult, format: str, output: Optional[str]) -> None:
    if format == "json":
        report_data = generate_json_report(result.report)
        report_data["output_value"] = result.output_value
        report_text = json.dumps(report_data, indent=2)
    else:
        report_text = generate_markdown_report(result.report)

    if output:
        Path(output).write_text(report_text)
        console.print(f"[green]✅ Report saved to {output}[/green]")
    else:
        click.echo(report_text)

    if result.passed:
        console.print(f"[green]Status: PASSED ({result.report.checks} checks)[/green]")
    else:
        console.print(
            f"[red]Status: FAILED ({len(result.report.mismatches)} of "
            f"{result.report.checks} checks)[/red]"
        )


def _execute(
    ctx: click.Context,
    scenario_name: str,
    examples_dir: Optional[str],
    format: str,
    output: Optional[str],
    apply: bool,
    destroy: bool,
) -> None:
    try:
        scenario = get_scenario(scenario_name)
        config = _load_config(ctx, examples_dir)
        result = run_scenario(scenario, config, apply=apply, destroy=destroy)
    except TfModuleValidationError as e:
        logger.debug(f"Scenario aborted: {e.to_dict()}")
        _report_error(e)
        sys.exit(EXIT_ERROR)

    _emit_report(result, format, output)
    sys.exit(EXIT_PASSED if result.passed else EXIT_MISMATCHES)


report_format_option = click.option(
    "--format",
    type=click.Choice(["markdown", "json"], case_sensitive=False),
    default="markdown",
    help="Report output format",
)
output_option = click.option(
    "--output",
    type=click.Path(),
    help="Output file path for the validation report (default: stdout)",
)
examples_dir_option = click.option(
    "--examples-dir",
    type=click.Path(file_okay=False),
    help="Directory containing the example modules (default: TFMV_EXAMPLES_DIR)",
)


@click.group()
@click.option(
    "--log-level",
    default=None,
    help="Logging level (DEBUG, INFO, WARNING, ERROR; default: LOG_LEVEL or INFO)",
)
@click.option(
    "--log-format",
    type=click.Choice(["json", "console"], case_sensitive=False),
    default="console",
    help="Rendering for structured lifecycle events",
)
@click.pass_context
def cli(ctx: click.Context, log_level: Optional[str], log_format: str) -> None:
    """Validate the App Service Plan Terraform example modules against Azure."""
    ctx.ensure_object(dict)
    ctx.obj["log_level"] = log_level.upper() if log_level else None
    ctx.obj["log_format"] = log_format.lower()


@cli.command(name="list")
def list_command() -> None:
    """List the known scenarios."""
    table = Table(title="Scenarios")
    table.add_column("Scenario", style="cyan")
    table.add_column("Module Dir")
    table.add_column("App Service Plan")
    table.add_column("Autoscale", justify="center")

    for scenario in list_scenarios():
        table.add_row(
            scenario.name,
            f"example/{scenario.name}",
            scenario.plan.plan_name,
            "yes" if scenario.autoscale is not None else "no",
        )

    console.print(table)


@cli.command(name="run")
@click.argument("scenario", type=click.Choice(sorted(SCENARIOS)))
@click.option("--keep", is_flag=True, help="Skip terraform destroy after validation")
@examples_dir_option
@report_format_option
@output_option
@click.pass_context
def run_command(
    ctx: click.Context,
    scenario: str,
    keep: bool,
    examples_dir: Optional[str],
    format: str,
    output: Optional[str],
) -> None:
    """Apply an example module, validate what it deployed, then destroy it.

    Examples:

        # Full run for the basic example
        tfmv run basic

        # Keep the linux resources around for debugging
        tfmv run linux --keep

        # JSON report to a file
        tfmv run consumption --format json --output consumption.json
    """
    if keep:
        console.print("[yellow]⚠ --keep set: resources will not be destroyed[/yellow]")
    console.print(f"[cyan]Running scenario {scenario}...[/cyan]")
    _execute(ctx, scenario, examples_dir, format.lower(), output, apply=True, destroy=not keep)


@cli.command(name="validate")
@click.argument("scenario", type=click.Choice(sorted(SCENARIOS)))
@examples_dir_option
@report_format_option
@output_option
@click.pass_context
def validate_command(
    ctx: click.Context,
    scenario: str,
    examples_dir: Optional[str],
    format: str,
    output: Optional[str],
) -> None:
    """Validate resources an earlier apply left deployed.

    Terraform is only used to read the declared output; nothing is applied
    or destroyed.
    """
    console.print(f"[cyan]Validating deployed resources for {scenario}...[/cyan]")
    _execute(ctx, scenario, examples_dir, format.lower(), output, apply=False, destroy=False)


if __name__ == "__main__":
    cli()

"""App Service Plan validation."""

import logging
from typing import Optional

from ..arm.clients import AzureClientFactory
from ..arm.models import AppServicePlanSnapshot
from .expectations import PlanExpectation
from .report import ValidationReport

logger = logging.getLogger(__name__)


def validate_output_contains(
    output_value: Optional[str],
    expected: PlanExpectation,
    output_name: str,
    report: Optional[ValidationReport] = None,
) -> ValidationReport:
    """Check that a Terraform output is set and mentions the plan name."""
    report = report or ValidationReport(name=f"output:{output_name}")
    report.check_contains(
        f"output:{output_name}", "value", output_value, expected.plan_name
    )
    return report


def check_plan(
    expected: PlanExpectation,
    plan: AppServicePlanSnapshot,
    report: Optional[ValidationReport] = None,
) -> ValidationReport:
    """Compare a plan snapshot against an expectation.

    Empty or zero expectation fields are skipped; ``reserved`` is always
    compared.
    """
    report = report or ValidationReport(name=f"plan:{expected.plan_name}")
    subject = f"plan:{expected.plan_name}"

    if expected.sku_size:
        report.check_equal(subject, "sku.size", expected.sku_size, plan.sku_size)
    if expected.sku_tier:
        report.check_equal(subject, "sku.tier", expected.sku_tier, plan.sku_tier)
    if expected.sku_capacity:
        report.check_equal(
            subject, "sku.capacity", expected.sku_capacity, plan.sku_capacity
        )
    if expected.kind:
        report.check_equal(subject, "kind", expected.kind, plan.kind)

    report.check_equal(subject, "reserved", expected.reserved, plan.reserved)
    return report


def validate_plan(
    factory: AzureClientFactory,
    expected: PlanExpectation,
    report: Optional[ValidationReport] = None,
) -> ValidationReport:
    """Fetch the plan named by the expectation and compare it.

    Raises:
        AzureResourceFetchError: If the plan cannot be read
    """
    plan = factory.get_app_service_plan(expected.plan_name)
    logger.debug(
        f"Plan {plan.name}: sku={plan.sku_size}/{plan.sku_tier}/{plan.sku_capacity} "
        f"kind={plan.kind} reserved={plan.reserved}"
    )
    return check_plan(expected, plan, report)

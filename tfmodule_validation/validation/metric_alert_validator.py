"""Metric alert rule validation."""

import logging
from typing import Optional

from ..arm.clients import AzureClientFactory
from ..arm.models import MetricAlertSnapshot
from .expectations import MetricAlertExpectation
from .report import ValidationReport

logger = logging.getLogger(__name__)


def check_metric_alert(
    expected: MetricAlertExpectation,
    alert: MetricAlertSnapshot,
    report: Optional[ValidationReport] = None,
) -> ValidationReport:
    """Compare every criterion of an alert rule against the expectation.

    Each criterion must carry the expected metric namespace. Criteria whose
    metric has an expected threshold are checked for operator, threshold and
    aggregation; criteria for other metrics are skipped.
    """
    report = report or ValidationReport(name=f"metricAlert:{expected.rule_name}")
    subject = f"metricAlert:{expected.rule_name}"

    if not alert.criteria:
        logger.warning(f"Metric alert {alert.name} has no metric criteria")

    for criterion in alert.criteria:
        metric = criterion.metric_name
        logger.debug(f"Checking criterion for metric {metric}")

        report.check_equal(
            subject,
            f"criteria[{metric}].metricNamespace",
            expected.metric_namespace,
            criterion.metric_namespace,
        )

        threshold = expected.metrics.get(metric)
        if threshold is None:
            logger.debug(f"No expectation for metric {metric}; skipping")
            continue

        report.check_equal(
            subject, f"criteria[{metric}].operator", threshold.operator, criterion.operator
        )
        report.check_equal(
            subject,
            f"criteria[{metric}].threshold",
            threshold.threshold,
            criterion.threshold,
        )
        report.check_equal(
            subject,
            f"criteria[{metric}].timeAggregation",
            threshold.aggregation,
            criterion.time_aggregation,
        )

    return report


def validate_metric_alert(
    factory: AzureClientFactory,
    expected: MetricAlertExpectation,
    report: Optional[ValidationReport] = None,
) -> ValidationReport:
    """Fetch the alert rule named by the expectation and compare it."""
    alert = factory.get_metric_alert(expected.rule_name)
    return check_metric_alert(expected, alert, report)

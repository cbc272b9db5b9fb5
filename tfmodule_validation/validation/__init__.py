"""Expectations, validators and reports for deployed App Service resources."""

from .autoscale_validator import (
    check_autoscale_setting,
    is_rule_present,
    validate_autoscale_setting,
)
from .expectations import (
    MetricAlertExpectation,
    MetricThreshold,
    MetricTriggerExpectation,
    PlanExpectation,
    ProfileExpectation,
    ScaleActionExpectation,
    ScaleRuleExpectation,
    scale_rule,
)
from .metric_alert_validator import check_metric_alert, validate_metric_alert
from .plan_validator import check_plan, validate_output_contains, validate_plan
from .report import (
    FieldMismatch,
    ValidationReport,
    generate_json_report,
    generate_markdown_report,
)

__all__ = [
    "FieldMismatch",
    "MetricAlertExpectation",
    "MetricThreshold",
    "MetricTriggerExpectation",
    "PlanExpectation",
    "ProfileExpectation",
    "ScaleActionExpectation",
    "ScaleRuleExpectation",
    "ValidationReport",
    "check_autoscale_setting",
    "check_metric_alert",
    "check_plan",
    "generate_json_report",
    "generate_markdown_report",
    "is_rule_present",
    "scale_rule",
    "validate_autoscale_setting",
    "validate_metric_alert",
    "validate_output_contains",
    "validate_plan",
]

"""Autoscale setting validation.

Rules are matched by set membership on their full field tuple, so the order
in which ARM returns a profile's rules does not matter.
"""

import logging
from typing import Iterable, Optional

from ..arm.clients import AzureClientFactory
from ..arm.models import AutoscaleSettingSnapshot, ScaleRuleSnapshot
from .expectations import ProfileExpectation, ScaleRuleExpectation
from .report import ValidationReport

logger = logging.getLogger(__name__)


def is_rule_present(
    rule: ScaleRuleSnapshot, expected_rules: Iterable[ScaleRuleExpectation]
) -> bool:
    """True when rule equals one of the expected rules on every field."""
    return rule.key() in {expected.key() for expected in expected_rules}


def check_autoscale_setting(
    expected: ProfileExpectation,
    setting: AutoscaleSettingSnapshot,
    report: Optional[ValidationReport] = None,
) -> ValidationReport:
    """Compare every profile of an autoscale setting against one expected profile."""
    report = report or ValidationReport(name=f"autoscale:{setting.name}")
    subject = f"autoscale:{setting.name}"

    for profile in setting.profiles:
        path = f"profiles[{profile.name}]"
        report.check_equal(subject, f"{path}.name", expected.name, profile.name)
        report.check_equal(
            subject,
            f"{path}.capacity.default",
            expected.default_capacity,
            profile.default_capacity,
        )
        report.check_equal(
            subject,
            f"{path}.capacity.minimum",
            expected.minimum_capacity,
            profile.minimum_capacity,
        )
        report.check_equal(
            subject,
            f"{path}.capacity.maximum",
            expected.maximum_capacity,
            profile.maximum_capacity,
        )

        report.check_equal(
            subject, f"{path}.rules.count", len(expected.rules), len(profile.rules)
        )
        for index, rule in enumerate(profile.rules):
            report.check_true(
                subject,
                f"{path}.rules[{index}]",
                is_rule_present(rule, expected.rules),
                "one of the expected rules",
                rule.key(),
            )

    return report


def validate_autoscale_setting(
    factory: AzureClientFactory,
    setting_name: str,
    expected: ProfileExpectation,
    report: Optional[ValidationReport] = None,
) -> ValidationReport:
    """Fetch an autoscale setting by name and compare it."""
    setting = factory.get_autoscale_setting(setting_name)
    logger.debug(
        f"Autoscale setting {setting.name}: {len(setting.profiles)} profiles, "
        f"{setting.rule_count} rules"
    )
    return check_autoscale_setting(expected, setting, report)

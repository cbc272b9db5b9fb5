"""Tests for SDK response snapshots."""

from datetime import timedelta
from enum import Enum
from types import SimpleNamespace

import isodate
import pytest

from conftest import (
    make_sdk_autoscale_setting,
    make_sdk_criterion,
    make_sdk_metric_alert,
    make_sdk_plan,
    make_sdk_rule,
)
from tfmodule_validation.arm.models import (
    AppServicePlanSnapshot,
    AutoscaleSettingSnapshot,
    MetricAlertSnapshot,
    ScaleRuleSnapshot,
    duration_value,
    enum_value,
)


class ComparisonOperator(str, Enum):
    GREATER_THAN = "GreaterThan"


class TestHelpers:
    """Test enum and duration normalization."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, None),
            ("Average", "Average"),
            (ComparisonOperator.GREATER_THAN, "GreaterThan"),
        ],
    )
    def test_enum_value(self, value, expected):
        """Test that SDK enums and plain strings normalize to strings."""
        assert enum_value(value) == expected

    @pytest.mark.parametrize(
        "value, expected",
        [
            (None, None),
            (timedelta(minutes=5), "PT5M"),
            (timedelta(minutes=1), "PT1M"),
            (timedelta(minutes=15), "PT15M"),
            (isodate.parse_duration("PT5M"), "PT5M"),
            ("PT5M", "PT5M"),
        ],
    )
    def test_duration_value(self, value, expected):
        """Test that timedeltas and durations render as ISO 8601 strings."""
        assert duration_value(value) == expected


class TestAppServicePlanSnapshot:
    """Test App Service plan snapshots."""

    def test_from_sdk(self):
        """Test mapping of name, SKU, kind and reserved flag."""
        plan = make_sdk_plan("linuxPlan", kind="linux", reserved=True)

        snapshot = AppServicePlanSnapshot.from_sdk(plan)

        assert snapshot == AppServicePlanSnapshot(
            name="linuxPlan",
            sku_size="S1",
            sku_tier="Standard",
            sku_capacity=1,
            kind="linux",
            reserved=True,
        )

    def test_missing_reserved_is_false(self):
        """Test that an unset reserved flag reads as False."""
        snapshot = AppServicePlanSnapshot.from_sdk(make_sdk_plan("p", reserved=None))

        assert snapshot.reserved is False

    def test_missing_sku(self):
        """Test that a plan without a SKU maps SKU fields to None."""
        plan = SimpleNamespace(name="p", kind="Windows", reserved=False, sku=None)

        snapshot = AppServicePlanSnapshot.from_sdk(plan)

        assert snapshot.sku_size is None
        assert snapshot.sku_capacity is None


class TestMetricAlertSnapshot:
    """Test metric alert snapshots."""

    def test_from_sdk_normalizes_enums(self):
        """Test that criterion operators and aggregations become strings."""
        alert = make_sdk_metric_alert(
            "alerts",
            criteria=[
                make_sdk_criterion(
                    "CpuPercentage", 70, operator=ComparisonOperator.GREATER_THAN
                )
            ],
        )

        snapshot = MetricAlertSnapshot.from_sdk(alert)

        assert snapshot.name == "alerts"
        assert len(snapshot.criteria) == 1
        criterion = snapshot.criteria[0]
        assert criterion.metric_name == "CpuPercentage"
        assert criterion.operator == "GreaterThan"
        assert criterion.time_aggregation == "Average"
        assert criterion.metric_namespace == "Microsoft.Web/serverfarms"

    def test_dynamic_threshold_criterion(self):
        """Test that a dynamic-threshold criterion maps with no static threshold."""
        dynamic = SimpleNamespace(
            metric_name="CpuPercentage",
            metric_namespace="Microsoft.Web/serverfarms",
            operator="GreaterOrLessThan",
            time_aggregation="Average",
            alert_sensitivity="Medium",
        )
        alert = make_sdk_metric_alert(
            "alerts", criteria=[make_sdk_criterion("MemoryPercentage", 90), dynamic]
        )

        snapshot = MetricAlertSnapshot.from_sdk(alert)

        assert [c.metric_name for c in snapshot.criteria] == [
            "MemoryPercentage",
            "CpuPercentage",
        ]
        assert snapshot.criteria[0].threshold == 90
        assert snapshot.criteria[1].threshold is None
        assert snapshot.criteria[1].operator == "GreaterOrLessThan"

    def test_criteria_without_all_of(self):
        """Test that criteria without metric conditions yield no criteria."""
        alert = SimpleNamespace(name="webtest", criteria=SimpleNamespace(odata_type="x"))

        assert MetricAlertSnapshot.from_sdk(alert).criteria == ()


class TestAutoscaleSnapshots:
    """Test autoscale setting snapshots."""

    def test_rule_durations_normalized(self):
        """Test that a scale rule key uses ISO 8601 durations."""
        rule = ScaleRuleSnapshot.from_sdk(
            make_sdk_rule(
                "CpuPercentage",
                "LessThanOrEqual",
                50,
                "Decrease",
                "1",
                time_window=timedelta(minutes=15),
                cooldown=timedelta(minutes=15),
            )
        )

        assert rule.key() == (
            "CpuPercentage",
            "PT1M",
            "Average",
            "PT15M",
            "Average",
            "LessThanOrEqual",
            50,
            "Decrease",
            "ChangeCount",
            "1",
            "PT15M",
        )

    def test_setting_from_sdk(self):
        """Test mapping of profiles, capacity and rule count."""
        setting = AutoscaleSettingSnapshot.from_sdk(make_sdk_autoscale_setting("plan"))

        assert setting.name == "plan"
        assert len(setting.profiles) == 1
        profile = setting.profiles[0]
        assert profile.name == "defaultProfile"
        assert (profile.default_capacity, profile.minimum_capacity, profile.maximum_capacity) == (
            "1",
            "1",
            "10",
        )
        assert setting.rule_count == 10

    def test_profile_without_rules(self):
        """Test that a profile with no rules maps to an empty tuple."""
        setting = AutoscaleSettingSnapshot.from_sdk(
            make_sdk_autoscale_setting("plan", rules=[])
        )

        assert setting.profiles[0].rules == ()
        assert setting.rule_count == 0

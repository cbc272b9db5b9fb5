"""Typed snapshots of the Azure resources read during validation.

The management SDKs return msrest models whose enum fields may be plain
strings or str-enums and whose ISO-8601 durations are deserialized into
``timedelta``. Snapshots normalize both to the string forms ARM documents
("GreaterThan", "PT5M") so they compare directly against literal
expectations.
"""

from dataclasses import dataclass, field
from datetime import timedelta
from enum import Enum
from typing import Any, List, Optional, Tuple

import isodate


def enum_value(value: Any) -> Optional[str]:
    """Return the string value of an SDK enum (or the string itself)."""
    if value is None:
        return None
    if isinstance(value, Enum):
        return str(value.value)
    return str(value)


def duration_value(value: Any) -> Optional[str]:
    """Return an ISO-8601 duration string for a timedelta (or pass a string through)."""
    if value is None:
        return None
    if isinstance(value, (timedelta, isodate.Duration)):
        return isodate.duration_isoformat(value)
    return str(value)


@dataclass(frozen=True)
class AppServicePlanSnapshot:
    name: str
    sku_size: Optional[str]
    sku_tier: Optional[str]
    sku_capacity: Optional[int]
    kind: Optional[str]
    reserved: bool

    @classmethod
    def from_sdk(cls, plan: Any) -> "AppServicePlanSnapshot":
        sku = getattr(plan, "sku", None)
        return cls(
            name=plan.name,
            sku_size=getattr(sku, "size", None),
            sku_tier=getattr(sku, "tier", None),
            sku_capacity=getattr(sku, "capacity", None),
            kind=plan.kind,
            # ARM omits reserved for Windows plans on some API versions
            reserved=bool(plan.reserved),
        )


@dataclass(frozen=True)
class MetricCriterionSnapshot:
    metric_name: str
    metric_namespace: Optional[str]
    operator: Optional[str]
    time_aggregation: Optional[str]
    threshold: Optional[float]

    @classmethod
    def from_sdk(cls, criterion: Any) -> "MetricCriterionSnapshot":
        return cls(
            metric_name=criterion.metric_name,
            metric_namespace=getattr(criterion, "metric_namespace", None),
            operator=enum_value(criterion.operator),
            time_aggregation=enum_value(criterion.time_aggregation),
            threshold=getattr(criterion, "threshold", None),
        )


@dataclass(frozen=True)
class MetricAlertSnapshot:
    name: str
    criteria: Tuple[MetricCriterionSnapshot, ...] = ()

    @classmethod
    def from_sdk(cls, resource: Any) -> "MetricAlertSnapshot":
        """Build a snapshot from a MetricAlertResource.

        Both single-resource and multiple-resource criteria expose their
        metric criteria under ``all_of``; other criteria kinds (web tests)
        yield an empty tuple.
        """
        all_of = getattr(resource.criteria, "all_of", None) or []
        return cls(
            name=resource.name,
            criteria=tuple(MetricCriterionSnapshot.from_sdk(c) for c in all_of),
        )


@dataclass(frozen=True)
class ScaleRuleSnapshot:
    metric_name: str
    time_grain: Optional[str]
    statistic: Optional[str]
    time_window: Optional[str]
    time_aggregation: Optional[str]
    operator: Optional[str]
    threshold: Optional[float]
    direction: Optional[str]
    action_type: Optional[str]
    value: Optional[str]
    cooldown: Optional[str]

    @classmethod
    def from_sdk(cls, rule: Any) -> "ScaleRuleSnapshot":
        trigger = rule.metric_trigger
        action = rule.scale_action
        return cls(
            metric_name=trigger.metric_name,
            time_grain=duration_value(trigger.time_grain),
            statistic=enum_value(trigger.statistic),
            time_window=duration_value(trigger.time_window),
            time_aggregation=enum_value(trigger.time_aggregation),
            operator=enum_value(trigger.operator),
            threshold=trigger.threshold,
            direction=enum_value(action.direction),
            action_type=enum_value(action.type),
            value=action.value,
            cooldown=duration_value(action.cooldown),
        )

    def key(self) -> Tuple[Any, ...]:
        return (
            self.metric_name,
            self.time_grain,
            self.statistic,
            self.time_window,
            self.time_aggregation,
            self.operator,
            self.threshold,
            self.direction,
            self.action_type,
            self.value,
            self.cooldown,
        )


@dataclass(frozen=True)
class AutoscaleProfileSnapshot:
    name: str
    default_capacity: Optional[str]
    minimum_capacity: Optional[str]
    maximum_capacity: Optional[str]
    rules: Tuple[ScaleRuleSnapshot, ...] = ()

    @classmethod
    def from_sdk(cls, profile: Any) -> "AutoscaleProfileSnapshot":
        capacity = profile.capacity
        return cls(
            name=profile.name,
            default_capacity=capacity.default,
            minimum_capacity=capacity.minimum,
            maximum_capacity=capacity.maximum,
            rules=tuple(ScaleRuleSnapshot.from_sdk(r) for r in profile.rules or []),
        )


@dataclass(frozen=True)
class AutoscaleSettingSnapshot:
    name: str
    profiles: Tuple[AutoscaleProfileSnapshot, ...] = field(default_factory=tuple)

    @classmethod
    def from_sdk(cls, resource: Any) -> "AutoscaleSettingSnapshot":
        return cls(
            name=resource.name,
            profiles=tuple(
                AutoscaleProfileSnapshot.from_sdk(p) for p in resource.profiles or []
            ),
        )

    @property
    def rule_count(self) -> int:
        return sum(len(p.rules) for p in self.profiles)


__all__: List[str] = [
    "AppServicePlanSnapshot",
    "AutoscaleProfileSnapshot",
    "AutoscaleSettingSnapshot",
    "MetricAlertSnapshot",
    "MetricCriterionSnapshot",
    "ScaleRuleSnapshot",
    "duration_value",
    "enum_value",
]

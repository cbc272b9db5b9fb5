"""Expectation records compared against deployed resources.

Plan fields other than ``plan_name`` and ``reserved`` are optional: an empty
string or zero means "not specified" and the field is not checked.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Tuple

CPU_METRIC = "CpuPercentage"
DISK_METRIC = "DiskQueueLength"
MEMORY_METRIC = "MemoryPercentage"
HTTP_METRIC = "HttpQueueLength"

SERVER_FARM_NAMESPACE = "Microsoft.Web/serverfarms"


@dataclass(frozen=True)
class PlanExpectation:
    plan_name: str
    sku_size: str = ""
    sku_tier: str = ""
    sku_capacity: int = 0
    kind: str = ""
    reserved: bool = False


@dataclass(frozen=True)
class MetricThreshold:
    operator: str
    aggregation: str
    threshold: float


@dataclass(frozen=True)
class MetricAlertExpectation:
    """Expected criteria of a metric alert rule.

    ``metrics`` maps a metric name to the operator, aggregation and threshold
    its criterion must carry. Criteria for metrics not in the mapping are
    not checked beyond the shared namespace.
    """

    rule_name: str
    metric_namespace: str = SERVER_FARM_NAMESPACE
    metrics: Dict[str, MetricThreshold] = field(default_factory=dict)

    @classmethod
    def standard(cls, rule_name: str) -> "MetricAlertExpectation":
        """The CPU/disk/memory/HTTP alert set every example module deploys."""
        return cls(
            rule_name=rule_name,
            metric_namespace=SERVER_FARM_NAMESPACE,
            metrics={
                CPU_METRIC: MetricThreshold("GreaterThan", "Average", 70),
                DISK_METRIC: MetricThreshold("GreaterThan", "Average", 100),
                MEMORY_METRIC: MetricThreshold("GreaterThan", "Average", 90),
                HTTP_METRIC: MetricThreshold("GreaterThan", "Average", 100),
            },
        )


@dataclass(frozen=True)
class MetricTriggerExpectation:
    metric_name: str
    time_grain: str
    statistic: str
    time_window: str
    time_aggregation: str
    operator: str
    threshold: float


@dataclass(frozen=True)
class ScaleActionExpectation:
    direction: str
    action_type: str
    value: str
    cooldown: str


@dataclass(frozen=True)
class ScaleRuleExpectation:
    metric_trigger: MetricTriggerExpectation
    scale_action: ScaleActionExpectation

    def key(self) -> Tuple[Any, ...]:
        """Field tuple in the same order as ScaleRuleSnapshot.key()."""
        trigger = self.metric_trigger
        action = self.scale_action
        return (
            trigger.metric_name,
            trigger.time_grain,
            trigger.statistic,
            trigger.time_window,
            trigger.time_aggregation,
            trigger.operator,
            trigger.threshold,
            action.direction,
            action.action_type,
            action.value,
            action.cooldown,
        )


@dataclass(frozen=True)
class ProfileExpectation:
    name: str
    default_capacity: str
    minimum_capacity: str
    maximum_capacity: str
    rules: FrozenSet[ScaleRuleExpectation] = frozenset()


def scale_rule(
    metric_name: str,
    operator: str,
    threshold: float,
    direction: str,
    value: str,
    time_window: str = "PT5M",
    cooldown: str = "PT5M",
) -> ScaleRuleExpectation:
    """Build a ChangeCount rule on a one-minute Average grain."""
    return ScaleRuleExpectation(
        metric_trigger=MetricTriggerExpectation(
            metric_name=metric_name,
            time_grain="PT1M",
            statistic="Average",
            time_window=time_window,
            time_aggregation="Average",
            operator=operator,
            threshold=threshold,
        ),
        scale_action=ScaleActionExpectation(
            direction=direction,
            action_type="ChangeCount",
            value=value,
            cooldown=cooldown,
        ),
    )

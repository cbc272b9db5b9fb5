"""The example modules and what each one must deploy.

Every example creates one shared App Service Plan named
``<prefix>-test-sharedplan-0-westus2`` plus a metric alert rule named
``<prefix>-test-sharedplan-alerts``. The basic and linux examples also
attach an autoscale setting named after the plan; the consumption (Y1)
plan cannot autoscale.
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional

from .exceptions import ScenarioError
from .validation.expectations import (
    CPU_METRIC,
    DISK_METRIC,
    HTTP_METRIC,
    MEMORY_METRIC,
    MetricAlertExpectation,
    PlanExpectation,
    ProfileExpectation,
    scale_rule,
)

DEFAULT_AUTOSCALE_PROFILE = ProfileExpectation(
    name="defaultProfile",
    default_capacity="1",
    minimum_capacity="1",
    maximum_capacity="10",
    rules=frozenset(
        [
            scale_rule(CPU_METRIC, "GreaterThan", 90, "Increase", "2"),
            scale_rule(CPU_METRIC, "GreaterThan", 75, "Increase", "1"),
            scale_rule(
                CPU_METRIC, "LessThanOrEqual", 50, "Decrease", "1",
                time_window="PT15M", cooldown="PT15M",
            ),
            scale_rule(HTTP_METRIC, "GreaterThan", 100, "Increase", "1"),
            scale_rule(
                HTTP_METRIC, "LessThanOrEqual", 50, "Decrease", "1",
                time_window="PT15M", cooldown="PT15M",
            ),
            scale_rule(HTTP_METRIC, "GreaterThan", 200, "Increase", "2"),
            scale_rule(MEMORY_METRIC, "GreaterThan", 85, "Increase", "1"),
            scale_rule(
                MEMORY_METRIC, "LessThanOrEqual", 65, "Decrease", "1",
                time_window="PT15M", cooldown="PT15M",
            ),
            scale_rule(DISK_METRIC, "GreaterThan", 100, "Increase", "1"),
            scale_rule(
                DISK_METRIC, "LessThanOrEqual", 50, "Decrease", "1",
                time_window="PT15M", cooldown="PT15M",
            ),
        ]
    ),
)


@dataclass(frozen=True)
class Scenario:
    """One example module and its expectations.

    Attributes:
        name: Scenario name, also the module directory under the examples root
        plan: Expected App Service Plan
        metric_alert: Expected metric alert rule
        autoscale: Expected autoscale profile, or None when the plan has none
    """

    name: str
    plan: PlanExpectation
    metric_alert: MetricAlertExpectation
    autoscale: Optional[ProfileExpectation] = None

    @property
    def autoscale_setting_name(self) -> str:
        # The modules name the autoscale setting after the plan
        return self.plan.plan_name

    def module_dir(self, examples_dir: Path) -> Path:
        return Path(examples_dir) / self.name


BASIC = Scenario(
    name="basic",
    plan=PlanExpectation(
        plan_name="basicPlanSample-test-sharedplan-0-westus2",
        sku_size="S1",
        sku_tier="Standard",
        sku_capacity=1,
        kind="Windows",
        reserved=False,
    ),
    metric_alert=MetricAlertExpectation.standard("basicPlanSample-test-sharedplan-alerts"),
    autoscale=DEFAULT_AUTOSCALE_PROFILE,
)

CONSUMPTION = Scenario(
    name="consumption",
    plan=PlanExpectation(
        plan_name="consumptionPlanSample-test-sharedplan-0-westus2",
        sku_size="Y1",
        sku_tier="Dynamic",
        sku_capacity=0,
        kind="functionapp",
        reserved=False,
    ),
    metric_alert=MetricAlertExpectation.standard(
        "consumptionPlanSample-test-sharedplan-alerts"
    ),
)

LINUX = Scenario(
    name="linux",
    plan=PlanExpectation(
        plan_name="linuxPlanSample-test-sharedplan-0-westus2",
        sku_size="S1",
        sku_tier="Standard",
        sku_capacity=1,
        kind="linux",
        reserved=True,
    ),
    metric_alert=MetricAlertExpectation.standard("linuxPlanSample-test-sharedplan-alerts"),
    autoscale=DEFAULT_AUTOSCALE_PROFILE,
)

SCENARIOS: Dict[str, Scenario] = {s.name: s for s in (BASIC, CONSUMPTION, LINUX)}


def get_scenario(name: str) -> Scenario:
    """Look up a scenario by name.

    Raises:
        ScenarioError: If no scenario has that name
    """
    try:
        return SCENARIOS[name]
    except KeyError:
        raise ScenarioError(
            f"Unknown scenario '{name}'",
            scenario=name,
            recovery_suggestion=f"Choose one of: {', '.join(SCENARIOS)}",
        ) from None


def list_scenarios() -> List[Scenario]:
    return list(SCENARIOS.values())

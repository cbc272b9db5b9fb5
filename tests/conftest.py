import os
from datetime import timedelta
from types import SimpleNamespace
from typing import Any, Dict, List, Optional

import pytest

from tfmodule_validation.config_manager import (
    AzureConfig,
    LoggingConfig,
    TerraformConfig,
    ValidationConfig,
)

# ============================================================================
# Pytest options
# ============================================================================


def pytest_addoption(parser):
    """Add custom pytest options."""
    parser.addoption(
        "--run-e2e",
        action="store_true",
        default=False,
        help="Apply the example modules with terraform against a real subscription "
        "(requires ARM_SUBSCRIPTION_ID and an Azure login)",
    )


def pytest_collection_modifyitems(config, items):
    """Skip e2e tests unless --run-e2e is given and a subscription is configured."""
    if config.getoption("--run-e2e") and (
        os.getenv("ARM_SUBSCRIPTION_ID") or os.getenv("AZURE_SUBSCRIPTION_ID")
    ):
        return

    skip_e2e = pytest.mark.skip(
        reason="needs --run-e2e and ARM_SUBSCRIPTION_ID to deploy real resources"
    )
    for item in items:
        if "e2e" in item.keywords:
            item.add_marker(skip_e2e)


# ============================================================================
# Configuration fixtures
# ============================================================================


@pytest.fixture
def azure_config() -> AzureConfig:
    """Azure configuration without a service principal."""
    return AzureConfig(
        subscription_id="00000000-1111-2222-3333-444444444444",
        resource_group="tfmodulevalidation-test-group",
        tenant_id=None,
        client_id=None,
        client_secret=None,
    )


@pytest.fixture
def examples_dir(tmp_path):
    """An examples root with empty basic/consumption/linux module directories."""
    root = tmp_path / "example"
    for name in ("basic", "consumption", "linux"):
        (root / name).mkdir(parents=True)
        (root / name / "main.tf").write_text("# Terraform config")
    return root


@pytest.fixture
def validation_config(azure_config, examples_dir) -> ValidationConfig:
    return ValidationConfig(
        azure=azure_config,
        terraform=TerraformConfig(
            binary="terraform", examples_dir=examples_dir, output_name="sharedplanids"
        ),
        logging=LoggingConfig(level="INFO", file_output=None),
    )


# ============================================================================
# SDK-shaped objects
# ============================================================================


def make_sdk_plan(
    name: str,
    size: str = "S1",
    tier: str = "Standard",
    capacity: int = 1,
    kind: str = "Windows",
    reserved: Optional[bool] = False,
) -> SimpleNamespace:
    """Build an object shaped like azure.mgmt.web.models.AppServicePlan."""
    return SimpleNamespace(
        name=name,
        kind=kind,
        reserved=reserved,
        sku=SimpleNamespace(size=size, tier=tier, capacity=capacity, name=size),
    )


def make_sdk_criterion(
    metric_name: str,
    threshold: float,
    operator: Any = "GreaterThan",
    time_aggregation: Any = "Average",
    namespace: str = "Microsoft.Web/serverfarms",
) -> SimpleNamespace:
    return SimpleNamespace(
        metric_name=metric_name,
        metric_namespace=namespace,
        operator=operator,
        time_aggregation=time_aggregation,
        threshold=threshold,
    )


def make_standard_criteria() -> List[SimpleNamespace]:
    return [
        make_sdk_criterion("CpuPercentage", 70),
        make_sdk_criterion("DiskQueueLength", 100),
        make_sdk_criterion("MemoryPercentage", 90),
        make_sdk_criterion("HttpQueueLength", 100),
    ]


def make_sdk_metric_alert(
    name: str, criteria: Optional[List[SimpleNamespace]] = None
) -> SimpleNamespace:
    """Build an object shaped like azure.mgmt.monitor.models.MetricAlertResource."""
    return SimpleNamespace(
        name=name,
        criteria=SimpleNamespace(
            all_of=make_standard_criteria() if criteria is None else criteria
        ),
    )


def make_sdk_rule(
    metric_name: str,
    operator: str,
    threshold: float,
    direction: str,
    value: str,
    time_window: timedelta = timedelta(minutes=5),
    cooldown: timedelta = timedelta(minutes=5),
) -> SimpleNamespace:
    """Build an object shaped like azure.mgmt.monitor.models.ScaleRule."""
    return SimpleNamespace(
        metric_trigger=SimpleNamespace(
            metric_name=metric_name,
            time_grain=timedelta(minutes=1),
            statistic="Average",
            time_window=time_window,
            time_aggregation="Average",
            operator=operator,
            threshold=threshold,
        ),
        scale_action=SimpleNamespace(
            direction=direction, type="ChangeCount", value=value, cooldown=cooldown
        ),
    )


def make_default_rules() -> List[SimpleNamespace]:
    """The ten rules the basic and linux modules deploy, in ARM's usual order."""
    slow = timedelta(minutes=15)
    return [
        make_sdk_rule("CpuPercentage", "GreaterThan", 90, "Increase", "2"),
        make_sdk_rule("CpuPercentage", "GreaterThan", 75, "Increase", "1"),
        make_sdk_rule(
            "CpuPercentage", "LessThanOrEqual", 50, "Decrease", "1", slow, slow
        ),
        make_sdk_rule("HttpQueueLength", "GreaterThan", 100, "Increase", "1"),
        make_sdk_rule(
            "HttpQueueLength", "LessThanOrEqual", 50, "Decrease", "1", slow, slow
        ),
        make_sdk_rule("HttpQueueLength", "GreaterThan", 200, "Increase", "2"),
        make_sdk_rule("MemoryPercentage", "GreaterThan", 85, "Increase", "1"),
        make_sdk_rule(
            "MemoryPercentage", "LessThanOrEqual", 65, "Decrease", "1", slow, slow
        ),
        make_sdk_rule("DiskQueueLength", "GreaterThan", 100, "Increase", "1"),
        make_sdk_rule(
            "DiskQueueLength", "LessThanOrEqual", 50, "Decrease", "1", slow, slow
        ),
    ]


def make_sdk_autoscale_setting(
    name: str,
    rules: Optional[List[SimpleNamespace]] = None,
    capacity: Optional[Dict[str, str]] = None,
    profile_name: str = "defaultProfile",
) -> SimpleNamespace:
    """Build an object shaped like azure.mgmt.monitor.models.AutoscaleSettingResource."""
    capacity = capacity or {"default": "1", "minimum": "1", "maximum": "10"}
    return SimpleNamespace(
        name=name,
        profiles=[
            SimpleNamespace(
                name=profile_name,
                capacity=SimpleNamespace(**capacity),
                rules=make_default_rules() if rules is None else rules,
            )
        ],
    )

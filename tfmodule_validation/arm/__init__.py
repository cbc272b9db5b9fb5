"""Azure Resource Manager access: credentials, clients and typed snapshots."""

from .clients import AzureClientFactory
from .credentials import CredentialProvider
from .models import (
    AppServicePlanSnapshot,
    AutoscaleProfileSnapshot,
    AutoscaleSettingSnapshot,
    MetricAlertSnapshot,
    MetricCriterionSnapshot,
    ScaleRuleSnapshot,
)

__all__ = [
    "AppServicePlanSnapshot",
    "AutoscaleProfileSnapshot",
    "AutoscaleSettingSnapshot",
    "AzureClientFactory",
    "CredentialProvider",
    "MetricAlertSnapshot",
    "MetricCriterionSnapshot",
    "ScaleRuleSnapshot",
]

"""Azure Resource Manager reads for validation.

Reads an App Service Plan, a Metric Alert and an Autoscale Setting by name
within the configured resource group and returns typed snapshots. SDK
errors are translated into the project exception hierarchy; a failed read
is always fatal to the scenario.
"""

import logging
from typing import Any, Callable, Optional

from azure.core.credentials import TokenCredential
from azure.core.exceptions import AzureError as AzureSdkError
from azure.core.exceptions import (
    ClientAuthenticationError,
    HttpResponseError,
    ResourceNotFoundError,
)
from azure.mgmt.monitor import MonitorManagementClient
from azure.mgmt.web import WebSiteManagementClient

from ..config_manager import AzureConfig
from ..exceptions import AzureAuthenticationError, AzureResourceFetchError
from .credentials import CredentialProvider
from .models import AppServicePlanSnapshot, AutoscaleSettingSnapshot, MetricAlertSnapshot

logger = logging.getLogger(__name__)

APP_SERVICE_PLAN = "Microsoft.Web/serverfarms"
METRIC_ALERT = "Microsoft.Insights/metricAlerts"
AUTOSCALE_SETTING = "Microsoft.Insights/autoscaleSettings"


class AzureClientFactory:
    """
    Builds management clients for one subscription and reads resources.

    Clients are created lazily and cached for the lifetime of the factory.

    Example:
        factory = AzureClientFactory(config.azure)
        plan = factory.get_app_service_plan("basicPlanSample-test-sharedplan-0-westus2")
    """

    def __init__(
        self, config: AzureConfig, credential: Optional[TokenCredential] = None
    ) -> None:
        """
        Initialize the factory.

        Args:
            config: Azure configuration (subscription, resource group, principal)
            credential: Optional credential; resolved from config when omitted
        """
        self.config = config
        self._credential = credential
        self._credential_provider = CredentialProvider(config)
        self._web_client: Optional[WebSiteManagementClient] = None
        self._monitor_client: Optional[MonitorManagementClient] = None

    @property
    def resource_group(self) -> str:
        return self.config.resource_group

    def _get_credential(self) -> TokenCredential:
        if self._credential is None:
            self._credential = self._credential_provider.get_credential()
        return self._credential

    def web_client(self) -> WebSiteManagementClient:
        """Get (or create) the App Service management client."""
        if self._web_client is None:
            self._web_client = WebSiteManagementClient(
                self._get_credential(), self.config.require_subscription_id()
            )
        return self._web_client

    def monitor_client(self) -> MonitorManagementClient:
        """Get (or create) the Azure Monitor management client."""
        if self._monitor_client is None:
            self._monitor_client = MonitorManagementClient(
                self._get_credential(), self.config.require_subscription_id()
            )
        return self._monitor_client

    def get_app_service_plan(self, plan_name: str) -> AppServicePlanSnapshot:
        """Read an App Service Plan by name.

        Raises:
            AzureResourceFetchError: If the plan cannot be read
            AzureAuthenticationError: If credentials are rejected
        """
        plan = self._fetch(
            APP_SERVICE_PLAN,
            plan_name,
            lambda: self.web_client().app_service_plans.get(
                resource_group_name=self.resource_group, name=plan_name
            ),
        )
        return AppServicePlanSnapshot.from_sdk(plan)

    def get_metric_alert(self, rule_name: str) -> MetricAlertSnapshot:
        """Read a Metric Alert rule by name."""
        rule = self._fetch(
            METRIC_ALERT,
            rule_name,
            lambda: self.monitor_client().metric_alerts.get(
                resource_group_name=self.resource_group, rule_name=rule_name
            ),
        )
        return MetricAlertSnapshot.from_sdk(rule)

    def get_autoscale_setting(self, setting_name: str) -> AutoscaleSettingSnapshot:
        """Read an Autoscale Setting by name."""
        setting = self._fetch(
            AUTOSCALE_SETTING,
            setting_name,
            lambda: self.monitor_client().autoscale_settings.get(
                resource_group_name=self.resource_group,
                autoscale_setting_name=setting_name,
            ),
        )
        return AutoscaleSettingSnapshot.from_sdk(setting)

    def _fetch(self, resource_type: str, name: str, call: Callable[[], Any]) -> Any:
        logger.info(
            f"Reading {resource_type} '{name}' from resource group {self.resource_group}"
        )
        try:
            resource = call()
        except ClientAuthenticationError as e:
            raise AzureAuthenticationError(
                f"Azure authentication failed while reading {resource_type} '{name}'",
                tenant_id=self._credential_provider.get_tenant_id(),
                cause=e,
            ) from e
        except ResourceNotFoundError as e:
            raise self._not_found(resource_type, name, cause=e) from e
        except HttpResponseError as e:
            raise AzureResourceFetchError(
                f"Azure returned HTTP {e.status_code} for {resource_type} '{name}'",
                resource_type=resource_type,
                resource_name=name,
                resource_group=self.resource_group,
                cause=e,
            ) from e
        except AzureSdkError as e:
            raise AzureResourceFetchError(
                f"Failed to read {resource_type} '{name}'",
                resource_type=resource_type,
                resource_name=name,
                resource_group=self.resource_group,
                cause=e,
            ) from e

        # azure-mgmt-web returns None instead of raising on 404
        if resource is None:
            raise self._not_found(resource_type, name)
        return resource

    def _not_found(
        self, resource_type: str, name: str, cause: Optional[Exception] = None
    ) -> AzureResourceFetchError:
        return AzureResourceFetchError(
            f"{resource_type} '{name}' not found",
            resource_type=resource_type,
            resource_name=name,
            resource_group=self.resource_group,
            error_code="AZURE_RESOURCE_NOT_FOUND",
            cause=cause,
            recovery_suggestion="Check that terraform apply succeeded in the same subscription",
        )

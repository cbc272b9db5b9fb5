"""
Credential resolution for Azure Resource Manager reads.

When ARM_TENANT_ID, ARM_CLIENT_ID and ARM_CLIENT_SECRET are all set (the
same variables the azurerm Terraform provider reads) a ClientSecretCredential
is used, so Terraform and the validators act as the same principal.
Otherwise DefaultAzureCredential resolves ambient credentials (environment,
managed identity, Azure CLI login, ...).
"""

import logging
from typing import Dict, Optional

from azure.core.credentials import TokenCredential
from azure.identity import ClientSecretCredential, DefaultAzureCredential

from ..config_manager import AzureConfig

logger = logging.getLogger(__name__)

_AMBIENT_KEY = "__ambient__"


class CredentialProvider:
    """
    Resolves and caches the credential used by the management clients.

    Attributes:
        config: AzureConfig with optional service principal settings
        _credential_cache: Credentials keyed by tenant ID (or the ambient key)
    """

    def __init__(self, config: AzureConfig) -> None:
        self.config = config
        self._credential_cache: Dict[str, TokenCredential] = {}

    def get_credential(self) -> TokenCredential:
        """
        Get the credential for ARM reads.

        Returns:
            A ClientSecretCredential for an explicit service principal,
            otherwise a DefaultAzureCredential
        """
        cache_key = self.get_tenant_id() or _AMBIENT_KEY

        if cache_key not in self._credential_cache:
            self._credential_cache[cache_key] = self._create_credential()

        return self._credential_cache[cache_key]

    def _create_credential(self) -> TokenCredential:
        if self.config.has_service_principal():
            tenant_id: str = self.config.tenant_id  # type: ignore[assignment]
            masked_tenant_id = tenant_id[:8] + "..." if len(tenant_id) > 8 else tenant_id
            logger.debug(
                f"Creating service principal credential for tenant {masked_tenant_id}"
            )
            return ClientSecretCredential(
                tenant_id=tenant_id,
                client_id=self.config.client_id,  # type: ignore[arg-type]
                client_secret=self.config.client_secret,  # type: ignore[arg-type]
            )

        logger.debug("Creating DefaultAzureCredential from ambient configuration")
        return DefaultAzureCredential()

    def clear_cache(self) -> None:
        """Clear credential cache. Useful for testing or credential refresh."""
        logger.debug("Clearing credential cache")
        self._credential_cache.clear()

    def get_tenant_id(self) -> Optional[str]:
        """Tenant ID of the explicit service principal, if one is configured."""
        return self.config.tenant_id if self.config.has_service_principal() else None

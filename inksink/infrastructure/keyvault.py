"""Azure Key Vault access for the secrets the chat service needs at startup."""

import logging
import os
from typing import Iterable, Optional

from azure.identity import DefaultAzureCredential
from azure.keyvault.secrets import SecretClient

logger = logging.getLogger(__name__)


class AKV:
    """Key Vault client holding secrets pre-loaded at startup.

    Secrets are read once in the app lifespan and kept in memory; a rotated
    secret is picked up on restart. Authentication goes through
    DefaultAzureCredential (Azure CLI locally, Managed Identity in Azure).
    """

    def __init__(self, vault_name: Optional[str] = None):
        """Initialize Key Vault client.

        Args:
            vault_name: Key Vault name. Defaults to AZURE_KEYVAULT_NAME env var.
        """
        self.vault_name = vault_name or os.getenv("AZURE_KEYVAULT_NAME")
        if not self.vault_name:
            raise ValueError("vault_name required or set AZURE_KEYVAULT_NAME")

        self.vault_url = f"https://{self.vault_name}.vault.azure.net/"
        self._client = SecretClient(vault_url=self.vault_url, credential=DefaultAzureCredential())
        self._secrets: dict[str, str] = {}

    def _fetch(self, name: str) -> str:
        secret = self._client.get_secret(name)
        if secret.value is None:
            raise ValueError(f"Secret '{name}' has no value")
        return secret.value

    def load_secrets(self, required: Iterable[str], optional: Iterable[str] = ()) -> None:
        """Pre-load secrets. Missing required secrets fail startup.

        Args:
            required: Secrets the app cannot run without
            optional: Secrets that only enable extras (e.g. the Redis cache)

        Raises:
            ValueError: If a required secret is missing or empty
        """
        for name in required:
            try:
                self._secrets[name] = self._fetch(name)
            except Exception as e:
                raise ValueError(f"Failed to load secret '{name}': {e}") from e
            logger.info(f"Loaded secret: {name}")

        for name in optional:
            try:
                self._secrets[name] = self._fetch(name)
                logger.info(f"Loaded optional secret: {name}")
            except Exception as e:
                logger.warning(f"Optional secret '{name}' unavailable: {e}")

    def has_secret(self, name: str) -> bool:
        return name in self._secrets

    def get_secret(self, name: str) -> str:
        """Get a pre-loaded secret by name.

        Raises:
            KeyError: If secret was not pre-loaded
        """
        if name not in self._secrets:
            raise KeyError(f"Secret '{name}' not pre-loaded. Add it to the lifespan secret lists.")
        return self._secrets[name]

"""Secret store capability and a Vault backed implementation."""
import logging
import os
from pathlib import Path
from typing import Optional, Protocol

import requests

from ..errors import MissingSource, SecretNotFound

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10.0


class SecretStore(Protocol):
    """Key value lookup for secrets keyed as `{region}/{service}/{key}`."""

    def read(self, key: str) -> str:
        """Return the secret stored under key.

        Raises:
            SecretNotFound: If the key cannot be resolved.
        """
        ...


class VaultClient:
    """Reads secrets from a Vault generic secret backend over HTTP."""

    def __init__(self, addr: str, token: str, timeout: float = DEFAULT_TIMEOUT):
        """Initialize the client.

        Args:
            addr: Vault address, e.g. https://vault.example.com.
            token: Vault token sent with every request.
            timeout: Seconds to wait for each read.
        """
        self.addr = addr.rstrip('/')
        self.token = token
        self.timeout = timeout

    @classmethod
    def from_env(cls) -> "VaultClient":
        """Create a client from VAULT_ADDR, VAULT_TOKEN and VAULT_TIMEOUT.

        The token falls back to ~/.vault-token as written by `vault login`.

        Raises:
            MissingSource: If no address or token can be found.
        """
        addr = os.environ.get("VAULT_ADDR")
        if not addr:
            raise MissingSource("VAULT_ADDR must be set to read secrets")
        token = os.environ.get("VAULT_TOKEN")
        if not token:
            token_file = Path.home() / ".vault-token"
            if token_file.is_file():
                token = token_file.read_text().strip()
        if not token:
            raise MissingSource("VAULT_TOKEN or ~/.vault-token must be set to read secrets")
        timeout = float(os.environ.get("VAULT_TIMEOUT", DEFAULT_TIMEOUT))
        return cls(addr, token, timeout=timeout)

    def read(self, key: str) -> str:
        url = f"{self.addr}/v1/secret/{key}"
        logger.debug("Reading secret %s", key)
        try:
            response = requests.get(url, headers={"X-Vault-Token": self.token}, timeout=self.timeout)
            response.raise_for_status()
            payload = response.json()
        except requests.exceptions.RequestException as e:
            raise SecretNotFound(f"Failed to read secret {key} from vault: {e}") from e
        except ValueError as e:
            raise SecretNotFound(f"Vault returned invalid json for secret {key}") from e

        value = (payload.get("data") or {}).get("value")
        if value is None:
            raise SecretNotFound(f"Secret {key} has no value in vault")
        return str(value)

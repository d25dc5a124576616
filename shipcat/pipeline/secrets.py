"""Substitution of IN_VAULT placeholders from the secret store."""
import logging

from ..manifest.schema import IN_VAULT, Manifest
from ..vault.client import SecretStore

logger = logging.getLogger(__name__)


def inject_secrets(manifest: Manifest, secret_store: SecretStore, region: str) -> Manifest:
    """Replace every IN_VAULT env value with its secret.

    Secrets are read from `{region}/{service}/{key}`. Services may borrow
    another service's secrets through their `vault` options.

    Args:
        manifest: Manifest holding placeholders. Left untouched.
        secret_store: Store to read secrets from.
        region: Region the manifest is resolved for.

    Returns:
        Manifest: A new manifest with secrets filled in.

    Raises:
        SecretNotFound: If any lookup fails. Nothing is returned in that case.
    """
    if manifest.vault is not None:
        svc = manifest.vault.name
        reg = manifest.vault.region or region
    else:
        svc, reg = manifest.name, region
    logger.debug("Injecting secrets from vault %s/%s", reg, svc)

    mf = manifest.model_copy(deep=True)
    for k, v in mf.env.items():
        if v == IN_VAULT:
            vkey = f"{reg}/{svc}/{k}"
            secret = secret_store.read(vkey)
            mf.env[k] = secret
            mf._decoded_secrets[vkey] = secret
    return mf

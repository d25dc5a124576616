"""Orchestration of the resolution pipeline for services on disk."""
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Union

import yaml

from .implicits import apply_implicits
from .merge import merge_override
from .secrets import inject_secrets
from ..config.schema import GlobalConfig
from ..errors import IdentityMismatch, ShipcatError, UnsupportedRegion
from ..manifest.parser import ManifestParser
from ..manifest.schema import Manifest
from ..validation.validator import verify
from ..vault.client import SecretStore

logger = logging.getLogger(__name__)


@contextmanager
def stage(service: str, name: str) -> Iterator[None]:
    """Tag any pipeline error raised inside the block with service and stage."""
    try:
        yield
    except ShipcatError as e:
        e.annotate(service, name)
        raise


class ManifestResolver:
    """Loads service manifests and runs them through the pipeline.

    Stages run in order: implicits, region override merge, secret injection.
    Without a secret store the secrets stage is skipped and IN_VAULT
    placeholders are left in place.
    """

    def __init__(
        self,
        conf: GlobalConfig,
        services_dir: Union[str, Path] = "services",
        secret_store: Optional[SecretStore] = None,
    ):
        self.conf = conf
        self.services_dir = Path(services_dir)
        self.secret_store = secret_store

    def override_path(self, service: str, region: str) -> Path:
        return self.services_dir / service / f"{region}.yml"

    def load(self, service: str) -> Manifest:
        """Parse the base manifest of a service.

        Raises:
            MissingSource: If the service folder or manifest is absent.
            MalformedSource: If the manifest is invalid.
            IdentityMismatch: If the manifest name differs from the folder name.
        """
        with stage(service, "load"):
            mf = ManifestParser.load_service(self.services_dir, service)
            if mf.name != service:
                raise IdentityMismatch(
                    f"Service name '{mf.name}' must equal the folder name '{service}'")
        return mf

    def basic(self, service: str, region: Optional[str] = None) -> Manifest:
        """A base manifest with implicits only, no overrides or secrets."""
        mf = self.load(service)
        with stage(service, "implicits"):
            return apply_implicits(mf, self.conf, region)

    def fill(self, manifest: Manifest, region: str) -> Manifest:
        """Apply implicits, region overrides and secrets to a parsed manifest."""
        service = manifest.name
        with stage(service, "implicits"):
            mf = apply_implicits(manifest, self.conf, region)

        override = self.override_path(service, region)
        if override.is_file():
            logger.debug("Merging environment overrides from %s", override)
            with stage(service, "merge"):
                mf = merge_override(mf, override)

        if self.secret_store is not None:
            with stage(service, "secrets"):
                mf = inject_secrets(mf, self.secret_store, region)
        return mf

    def completed(self, service: str, region: str) -> Manifest:
        """Fully resolve a service for a region."""
        return self.fill(self.load(service), region)

    def validate(self, services: List[str], region: str) -> None:
        """Resolve and verify services in order, stopping at the first failure.

        Raises:
            ShipcatError: The first failure, tagged with its service and stage.
        """
        for svc in services:
            base = self.load(svc)
            with stage(svc, "implicits"):
                mf = apply_implicits(base, self.conf, region)
            if region in mf.regions:
                logger.info("validating %s for %s", svc, region)
                mf = self.fill(base, region)
                with stage(svc, "verify"):
                    verify(mf, self.conf)
                logger.info("validated %s for %s", svc, region)
                logger.debug("%s", yaml.safe_dump(mf.to_values(), sort_keys=False))
            elif mf.external:
                # exits early, but still checks identity and policy blocks
                with stage(svc, "verify"):
                    verify(mf, self.conf)
            else:
                raise UnsupportedRegion(
                    f"{svc} is not configured to be deployed in {region}", service=svc, stage="verify")

    def gdpr(self, service: str, region: str) -> str:
        """Show the cascaded data handling block of a service as YAML."""
        mf = self.completed(service, region)
        data = mf.data_handling.model_dump(by_alias=True, exclude_none=True)
        return yaml.safe_dump(data, sort_keys=False)

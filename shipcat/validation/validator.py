"""Structural and semantic checks on a resolved manifest."""
import logging
from typing import List

from ..config.schema import GlobalConfig
from ..errors import ValidationFailure
from ..manifest.schema import Manifest
from ..manifest.structs.base import is_valid_service_name

logger = logging.getLogger(__name__)


def verify(manifest: Manifest, conf: GlobalConfig) -> List[str]:
    """Verify assumptions about a manifest.

    Assumes the manifest has been through implicits with a region. Stops at
    the first hard failure. Soft problems are logged and returned.

    Args:
        manifest: Resolved manifest.
        conf: Global config.

    Returns:
        List[str]: Warnings raised along the way.

    Raises:
        ValidationFailure: On the first hard failure.
        RuntimeError: If called before a region was bound by implicits.
    """
    if not manifest._region:
        raise RuntimeError(f"verify called on {manifest.name or 'manifest'} before implicits bound a region")
    warnings: List[str] = []

    def warn(msg: str) -> None:
        logger.warning(msg)
        warnings.append(msg)

    if not is_valid_service_name(manifest.name):
        raise ValidationFailure(
            f"Service name '{manifest.name}' must be short (max 40), lower case, with dashes between words")

    manifest.data_handling.verify(conf)
    manifest.metadata.verify(conf)

    if manifest.external:
        warn(f"Ignoring most validation for kube-external service {manifest.name}")
        return warnings

    if manifest.resources is None:
        raise ValidationFailure(f"Resources is mandatory for {manifest.name}")
    manifest.resources.verify(conf)

    for d in manifest.dependencies:
        d.verify(conf)
    for ha in manifest.host_aliases:
        ha.verify(conf)
    for ic in manifest.init_containers:
        ic.verify(conf)
    if manifest.configs is not None:
        manifest.configs.verify(conf)

    if manifest.replica_count is None or manifest.replica_count < 1:
        raise ValidationFailure(f"{manifest.name} needs replicaCount to be at least 1")

    for r in manifest.regions:
        if not conf.has_region(r):
            raise ValidationFailure(f"Unsupported region {r} without entry in config")
    if not manifest.regions:
        raise ValidationFailure(f"No regions specified for {manifest.name}")

    # every service that exposes http must have a health check
    if manifest.http_port is not None and manifest.health is None:
        raise ValidationFailure(f"{manifest.name} has an httpPort but no health check")
    if manifest.http_port is None:
        warn(f"{manifest.name} exposes no http port")
    if manifest.health is None:
        warn(f"{manifest.name} does not set a health check")

    if manifest.service_annotations:
        warn("serviceAnnotations is an experimental/temporary feature")

    return warnings

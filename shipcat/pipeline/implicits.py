"""Implicit defaults filled in from the global config and a region."""
import logging
from typing import Optional

from ..config.schema import GlobalConfig
from ..manifest.schema import Manifest

logger = logging.getLogger(__name__)


def apply_implicits(manifest: Manifest, conf: GlobalConfig, region: Optional[str] = None) -> Manifest:
    """Fill unset fields of a manifest with global and regional defaults.

    Never overwrites a value that is already set, so applying it twice gives
    the same result as applying it once.

    Args:
        manifest: Parsed manifest. Left untouched.
        conf: Global config holding defaults and regions.
        region: Optional region to bind the manifest to.

    Returns:
        Manifest: A new manifest with implicits applied.

    Raises:
        UnknownRegion: If the region has no entry in the config.
    """
    mf = manifest.model_copy(deep=True)

    if mf.image is None:
        # image name defaults to a prefixed version of the service name
        mf.image = f"{conf.defaults.image_prefix}/{mf.name}"

    if region is not None:
        reg = conf.region(region)
        mf._region = region
        if not mf.namespace:
            mf.namespace = reg.namespace
        # manifest env wins over region defaults
        for k, v in reg.env.items():
            mf.env.setdefault(k, v)
        if mf.kong is not None:
            mf.kong.implicits(mf.name, reg)

    if not mf.chart:
        mf.chart = conf.defaults.chart
    if mf.replica_count is None:
        mf.replica_count = conf.defaults.replica_count

    mf.data_handling.implicits()

    if mf.configs is not None and mf.configs.name is None:
        mf.configs.name = f"{mf.name}-config"

    for d in mf.dependencies:
        if d.api is None:
            d.api = "v1"

    logger.debug("Applied implicits to %s (region=%s)", mf.name, region)
    return mf

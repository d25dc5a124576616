"""Merging of partial, region specific override files."""
import logging
from pathlib import Path
from typing import Union

from ..errors import InvalidHostAlias, MissingOverrideFile
from ..manifest.parser import ManifestParser
from ..manifest.schema import Manifest

logger = logging.getLogger(__name__)

# Fields an override file may change. Anything else is ignored.
MERGEABLE_FIELDS = ('env', 'kong', 'version', 'resources', 'init_containers', 'host_aliases')


def merge_override(manifest: Manifest, override_path: Union[str, Path]) -> Manifest:
    """Merge an override file on top of a manifest.

    Only fields that make sense to vary per environment are merged; the
    rest of the override (name, chart, regions, ...) is ignored.

    - env: union, override wins on conflicting keys
    - kong, version, resources: replaced wholesale when set
    - initContainers, hostAliases: replaced wholesale when non-empty

    Args:
        manifest: Manifest to merge onto. Left untouched.
        override_path: Path to the partial override file.

    Returns:
        Manifest: A new manifest with the override applied.

    Raises:
        MissingOverrideFile: If the override file doesn't exist.
        MalformedSource: If the override file is invalid.
        InvalidHostAlias: If an override host alias lacks an ip or hostnames.
    """
    path = Path(override_path)
    logger.debug("Merging %s", path)
    override = ManifestParser.load(path, missing=MissingOverrideFile)
    mf = manifest.model_copy(deep=True)

    for k, v in override.env.items():
        mf.env[k] = v
    if override.kong is not None:
        mf.kong = override.kong.model_copy(deep=True)
    if override.version is not None:
        mf.version = override.version
    if override.resources is not None:
        mf.resources = override.resources.model_copy(deep=True)
    if override.init_containers:
        mf.init_containers = [ic.model_copy(deep=True) for ic in override.init_containers]
    if override.host_aliases:
        for alias in override.host_aliases:
            if not alias.is_complete():
                raise InvalidHostAlias("Host alias should have an ip and at least one hostname")
        logger.debug("Overriding hostAliases with %s", override.host_aliases)
        mf.host_aliases = [ha.model_copy(deep=True) for ha in override.host_aliases]

    ignored = sorted(f for f in override.model_fields_set if f not in MERGEABLE_FIELDS)
    if ignored:
        logger.debug("Ignoring non-overridable fields in %s: %s", path, ", ".join(ignored))
    return mf

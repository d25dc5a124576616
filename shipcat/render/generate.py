"""Helm values and deployment template generation."""
import logging
import shutil
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

import yaml

from .context import make_full_context, template_config
from .renderer import Renderer
from ..errors import IdentityMismatch, UnsupportedRegion
from ..manifest.schema import Manifest

logger = logging.getLogger(__name__)

DEPLOYMENT_TEMPLATE = "deployment.yaml.j2"
DISABLED_PLACEHOLDER = "---"


@dataclass
class Deployment:
    """A resolved manifest bound to a region and a renderer."""
    service: str
    region: str
    manifest: Manifest
    renderer: Renderer
    # overrides the manifest version when set
    version: Optional[str] = None

    def check(self) -> None:
        """Sanity check the deployment parameters.

        Raises:
            IdentityMismatch: If the manifest name differs from the service.
            UnsupportedRegion: If the manifest does not list the region.
        """
        if self.service != self.manifest.name:
            raise IdentityMismatch(
                f"Manifest name {self.manifest.name} does not match service name {self.service}")
        if self.region not in self.manifest.regions:
            logger.warning("Using region '%s', but supported regions: %s", self.region, self.manifest.regions)
            raise UnsupportedRegion(f"{self.service} does not contain region {self.region}")


def helm_values(dep: Deployment, output: Optional[Union[str, Path]] = None) -> str:
    """Serialize a resolved manifest as helm values.

    Config files get pre-rendered into their `value` so helm does not need
    to template them.

    Args:
        dep: Deployment to emit values for.
        output: File to write to. Writes to stdout when omitted.

    Returns:
        str: The encoded values.
    """
    dep.check()
    mf = dep.manifest.model_copy(deep=True)

    if mf.configs is not None:
        for f in mf.configs.files:
            f.value = template_config(dep, f)
    if dep.version is not None:
        mf.version = dep.version

    encoded = yaml.safe_dump(mf.to_values(), sort_keys=False)
    if output is not None:
        pth = Path(output)
        logger.info("Writing helm values for %s to %s", dep.service, pth)
        pth.write_text(f"{encoded}\n")
        logger.debug("Wrote helm values for %s to %s:\n%s", dep.service, pth, encoded)
    else:
        sys.stdout.write(encoded)
        sys.stdout.flush()
    return encoded


def create_output(output_dir: Union[str, Path]) -> Path:
    """Recreate an empty output directory."""
    loc = Path(output_dir)
    if loc.is_dir():
        shutil.rmtree(loc)
    loc.mkdir(parents=True)
    return loc


def deployment(
    dep: Deployment,
    to_stdout: bool = False,
    to_file: bool = False,
    output_dir: Union[str, Path] = "OUTPUT",
) -> str:
    """Render the deployment template for a deployment.

    Disabled services render to an empty document.

    Returns:
        str: The rendered deployment.
    """
    if dep.manifest.disabled:
        logger.warning("Not generating yaml for disabled service %s", dep.service)
        res = DISABLED_PLACEHOLDER
    else:
        ctx = make_full_context(dep)
        res = dep.renderer.render(DEPLOYMENT_TEMPLATE, ctx)

    if to_stdout:
        sys.stdout.write(res)
        sys.stdout.flush()
    if to_file:
        full_pth = create_output(output_dir) / "values.yaml"
        full_pth.write_text(f"{res}\n")
        logger.info("Wrote kubefiles for %s in %s", dep.service, full_pth)
    return res

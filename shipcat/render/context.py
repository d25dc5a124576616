"""Template contexts built from a resolved manifest.

Config files embedded in a config map only ever see the base context, so a
config template cannot reach into the deployment it is mounted in. The full
context is reserved for deployment templates.
"""
from typing import TYPE_CHECKING, Any, Dict, List

from .renderer import Context
from ..errors import ValidationFailure
from ..manifest.structs.kube import ConfigMappedFile

if TYPE_CHECKING:
    from .generate import Deployment


def _dump(items: List[Any]) -> List[Dict[str, Any]]:
    return [i.model_dump(by_alias=True, exclude_none=True) for i in items]


def make_base_context(dep: "Deployment") -> Context:
    """Minimal context with the variables config file templates may use."""
    return {
        "namespace": dep.manifest.namespace,
        "env": dict(dep.manifest.env),
        "service": dep.service,
        "region": dep.region,
    }


def template_config(dep: "Deployment", mount: ConfigMappedFile) -> str:
    """Render a single config file with the base context."""
    return dep.renderer.render(mount.name, make_base_context(dep))


def make_full_context(dep: "Deployment") -> Context:
    """Context for deployment templates.

    Raises:
        ValidationFailure: If image or version is unset.
        TemplateFailure: If a config file fails to render.
    """
    mf = dep.manifest
    ctx = make_base_context(dep)

    if mf.configs is not None:
        files = [
            {"name": f.dest, "rendered": template_config(dep, f)}
            for f in mf.configs.files
        ]
        ctx["configMap"] = {
            # filled in by implicits
            "name": mf.configs.name,
            "path": mf.configs.mount,
            "files": files,
        }

    version = dep.version or mf.version
    if mf.image is None or version is None:
        raise ValidationFailure(f"{mf.name} needs both image and version set to render a deployment")
    ctx["image"] = f"{mf.image}:{version}"

    ctx["hostAliases"] = _dump(mf.host_aliases)
    ctx["httpPort"] = mf.http_port
    ctx["replicaCount"] = mf.replica_count
    if mf.health is not None:
        ctx["health"] = mf.health.model_dump(by_alias=True)
    ctx["volumeMounts"] = _dump(mf.volume_mounts)
    ctx["initContainers"] = _dump(mf.init_containers)
    ctx["volumes"] = _dump(mf.volumes)

    # Legacy full manifest access. Add new fields explicitly above instead.
    ctx["mf"] = mf.to_values()
    return ctx

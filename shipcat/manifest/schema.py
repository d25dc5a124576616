"""Pydantic model for a service manifest (shipcat.yml)."""
from typing import Any, Dict, List, Optional

from pydantic import Field, PrivateAttr, field_validator

from .structs.base import ManifestModel
from .structs.integrations import Dashboard, Jaeger, Kong, Prometheus, VaultOpts
from .structs.kube import (
    ConfigMap,
    CronJob,
    HealthCheck,
    HostAlias,
    InitContainer,
    Resources,
    Sidecar,
    Volume,
    VolumeMount,
)
from .structs.policy import DataHandling, Dependency, Metadata
from ..config.schema import env_as_strings

# Placeholder for env values that live in the secret store
IN_VAULT = "IN_VAULT"


class Manifest(ManifestModel):
    """Desired deployment state of a single service.

    Every field is optional or defaulted so the same schema parses both the
    base manifest and the partial per-region override files.
    """
    name: str = ""
    # never serialized
    disabled: bool = False
    external: bool = False

    image: Optional[str] = None
    version: Optional[str] = None
    command: List[str] = Field(default_factory=list)

    metadata: Metadata = Field(default_factory=Metadata)
    data_handling: DataHandling = Field(default_factory=DataHandling, alias='dataHandling')
    jaeger: Jaeger = Field(default_factory=Jaeger)
    language: Optional[str] = None

    # kubernetes specifics
    namespace: str = ""
    chart: str = ""
    resources: Optional[Resources] = None
    replica_count: Optional[int] = Field(default=None, alias='replicaCount')
    host_aliases: List[HostAlias] = Field(default_factory=list, alias='hostAliases')
    env: Dict[str, str] = Field(default_factory=dict)
    configs: Optional[ConfigMap] = None
    volume_mounts: List[VolumeMount] = Field(default_factory=list, alias='volumeMounts')
    init_containers: List[InitContainer] = Field(default_factory=list, alias='initContainers')
    http_port: Optional[int] = Field(default=None, alias='httpPort')
    vault: Optional[VaultOpts] = None
    health: Optional[HealthCheck] = None
    dependencies: List[Dependency] = Field(default_factory=list)
    regions: List[str] = Field(default_factory=list)
    volumes: List[Volume] = Field(default_factory=list)
    cron_jobs: List[CronJob] = Field(default_factory=list, alias='cronJobs')
    sidecars: List[Sidecar] = Field(default_factory=list)
    service_annotations: Dict[str, str] = Field(default_factory=dict, alias='serviceAnnotations')

    prometheus: Optional[Prometheus] = None
    dashboards: Dict[str, Dashboard] = Field(default_factory=dict)
    kong: Optional[Kong] = None

    # region bound by implicits
    _region: str = PrivateAttr(default="")
    # vault key path -> secret, kept for debugging only
    _decoded_secrets: Dict[str, str] = PrivateAttr(default_factory=dict)

    @field_validator('version', mode='before')
    @classmethod
    def _version_as_string(cls, v: Any) -> Any:
        # yaml reads `version: 1.2` as a float
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v

    @field_validator('env', mode='before')
    @classmethod
    def _env_as_strings(cls, v: Any) -> Any:
        return env_as_strings(v)

    def to_values(self) -> Dict[str, Any]:
        """Dump the manifest in its camelCase file form.

        Unset optionals, empty collections and the disabled flag are left out.
        """
        data = self.model_dump(by_alias=True, exclude_none=True, exclude={'disabled'})
        if self.env:
            data['env'] = dict(sorted(self.env.items()))
        return {k: v for k, v in data.items() if v != [] and v != {}}

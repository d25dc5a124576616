"""Kubernetes flavoured manifest structures."""
import ipaddress
import re
from typing import Any, List, Optional

from pydantic import Field, field_validator

from .base import ManifestModel
from ...config.schema import GlobalConfig
from ...errors import ValidationFailure

CPU_RE = re.compile(r"^([0-9]+(?:\.[0-9]+)?)(m?)$")
MEMORY_RE = re.compile(r"^([0-9]+(?:\.[0-9]+)?)(Ki|Mi|Gi|Ti|Pi|Ei|k|K|M|G|T|P|E)?$")
MEMORY_UNITS = {
    None: 1,
    "k": 10**3, "K": 10**3, "M": 10**6, "G": 10**9,
    "T": 10**12, "P": 10**15, "E": 10**18,
    "Ki": 2**10, "Mi": 2**20, "Gi": 2**30,
    "Ti": 2**40, "Pi": 2**50, "Ei": 2**60,
}
HOSTNAME_RE = re.compile(r"^(?=.{1,253}$)[A-Za-z0-9]([A-Za-z0-9\-]{0,61}[A-Za-z0-9])?(\.[A-Za-z0-9]([A-Za-z0-9\-]{0,61}[A-Za-z0-9])?)*$")
INIT_CONTAINER_NAME_RE = re.compile(r"^[0-9a-z\-]{1,50}$")
IMAGE_RE = re.compile(r"^[a-z0-9]+([._\-/:][a-z0-9]+)*(:[A-Za-z0-9_.\-]+)?$")


def parse_cpu(value: str) -> float:
    """Parse a kubernetes cpu quantity into cores.

    Raises:
        ValidationFailure: If the value is not a valid cpu quantity.
    """
    m = CPU_RE.match(value.strip())
    if not m:
        raise ValidationFailure(f"Invalid cpu quantity '{value}'")
    amount = float(m.group(1))
    return amount / 1000 if m.group(2) else amount


def parse_memory(value: str) -> float:
    """Parse a kubernetes memory quantity into bytes.

    Raises:
        ValidationFailure: If the value is not a valid memory quantity.
    """
    m = MEMORY_RE.match(value.strip())
    if not m:
        raise ValidationFailure(f"Invalid memory quantity '{value}'")
    return float(m.group(1)) * MEMORY_UNITS[m.group(2)]


class ResourceQuantity(ManifestModel):
    """CPU and memory strings for either requests or limits."""
    cpu: str
    memory: str

    @field_validator('cpu', 'memory', mode='before')
    @classmethod
    def _numbers_as_strings(cls, v: Any) -> Any:
        # yaml reads `cpu: 1` as an int
        if isinstance(v, (int, float)) and not isinstance(v, bool):
            return str(v)
        return v


class Resources(ManifestModel):
    """Resource requests and limits for the main container."""
    requests: Optional[ResourceQuantity] = None
    limits: Optional[ResourceQuantity] = None

    def verify(self, conf: GlobalConfig) -> None:
        if self.requests is None:
            raise ValidationFailure("Resource requests must be specified")
        if self.limits is None:
            raise ValidationFailure("Resource limits must be specified")
        req_cpu = parse_cpu(self.requests.cpu)
        lim_cpu = parse_cpu(self.limits.cpu)
        req_mem = parse_memory(self.requests.memory)
        lim_mem = parse_memory(self.limits.memory)
        if req_cpu > lim_cpu:
            raise ValidationFailure(
                f"Requested more CPU than what was limited ({self.requests.cpu} > {self.limits.cpu})")
        if req_mem > lim_mem:
            raise ValidationFailure(
                f"Requested more memory than what was limited ({self.requests.memory} > {self.limits.memory})")


class HostAlias(ManifestModel):
    """Extra /etc/hosts entries for the pod."""
    ip: str = ""
    hostnames: List[str] = Field(default_factory=list)

    def is_complete(self) -> bool:
        return bool(self.ip) and bool(self.hostnames)

    def verify(self, conf: GlobalConfig) -> None:
        if not self.is_complete():
            raise ValidationFailure("Host alias should have an ip and at least one hostname")
        try:
            ipaddress.ip_address(self.ip)
        except ValueError:
            raise ValidationFailure(f"Host alias ip '{self.ip}' is not a valid ip address")
        for hostname in self.hostnames:
            if not HOSTNAME_RE.match(hostname):
                raise ValidationFailure(f"Host alias hostname '{hostname}' is not a valid hostname")


class HealthCheck(ManifestModel):
    """HTTP health check for the main container."""
    uri: str = "/health"
    wait: int = Field(default=30, ge=0)


class ConfigMappedFile(ManifestModel):
    """A templated config file mounted into the container."""
    name: str
    dest: str
    # filled in when emitting helm values
    value: Optional[str] = None


class ConfigMap(ManifestModel):
    """Config files inlined into a single config map."""
    name: Optional[str] = None
    mount: str
    files: List[ConfigMappedFile] = Field(default_factory=list)

    def verify(self, conf: GlobalConfig) -> None:
        if not self.mount.endswith('/'):
            raise ValidationFailure(f"Config map mount path '{self.mount}' must end in a slash")
        if not self.files:
            raise ValidationFailure("Config map must contain at least one file")
        seen = set()
        for f in self.files:
            if not f.name.endswith('.j2'):
                raise ValidationFailure(f"Config file {f.name} must be a .j2 template")
            if f.dest in seen:
                raise ValidationFailure(f"Config file destination {f.dest} is used more than once")
            seen.add(f.dest)


class InitContainer(ManifestModel):
    """Container run to completion before the main container starts."""
    name: str
    image: str
    command: List[str] = Field(default_factory=list)

    def verify(self, conf: GlobalConfig) -> None:
        if not INIT_CONTAINER_NAME_RE.match(self.name):
            raise ValidationFailure(f"Init container name {self.name} must be short, lower case with dashes")
        if not IMAGE_RE.match(self.image):
            raise ValidationFailure(
                f"The init container {self.name} does not seem to match a valid image registry")
        if not self.command:
            raise ValidationFailure(f"A command must be specified for the init container {self.name}")


class VolumeMount(ManifestModel):
    name: str
    mount_path: str = Field(alias='mountPath')
    sub_path: Optional[str] = Field(default=None, alias='subPath')
    read_only: bool = Field(default=False, alias='readOnly')


class VolumeSecretItem(ManifestModel):
    key: str = "value"
    path: str
    # 0644
    mode: int = 420


class VolumeSecretDetail(ManifestModel):
    name: str
    items: List[VolumeSecretItem] = Field(default_factory=list)


class VolumeSecret(ManifestModel):
    secret: Optional[VolumeSecretDetail] = None


class ProjectedVolumeSecret(ManifestModel):
    """A projection combining multiple secret volume items."""
    sources: List[VolumeSecret] = Field(default_factory=list)


class Volume(ManifestModel):
    """Pod volume, either projected or fetched from a kube secret."""
    name: str
    projected: Optional[ProjectedVolumeSecret] = None
    secret: Optional[VolumeSecretDetail] = None


class CronJob(ManifestModel):
    name: str
    schedule: str
    command: List[str] = Field(default_factory=list)
    image: Optional[str] = None
    version: Optional[str] = None


class Sidecar(ManifestModel):
    name: str
    image: Optional[str] = None
    version: Optional[str] = None

"""Integration policy blocks: kong, prometheus, dashboards, jaeger and vault options."""
from typing import List, Optional

from pydantic import Field

from .base import ManifestModel
from ...config.schema import Region


class Kong(ManifestModel):
    """API gateway exposure of a service."""
    name: Optional[str] = None
    upstream_url: Optional[str] = Field(default=None, alias='upstreamUrl')
    internal: bool = False
    publicly_accessible: bool = Field(default=False, alias='publiclyAccessible')
    uris: Optional[str] = None
    hosts: List[str] = Field(default_factory=list)
    strip_uri: bool = Field(default=False, alias='stripUri')
    preserve_host: bool = Field(default=True, alias='preserveHost')

    def implicits(self, service: str, region: Region) -> None:
        """Fill region scoped values.

        Args:
            service: Name of the service exposed through kong.
            region: Region the manifest is being resolved for.
        """
        self.name = service
        if self.upstream_url is None:
            self.upstream_url = f"http://{service}.{region.namespace}.svc.cluster.local"
        if not self.hosts and region.kong is not None:
            self.hosts = [region.kong.base_url]


class Prometheus(ManifestModel):
    enabled: bool = True
    path: str = "/metrics"


class Dashboard(ManifestModel):
    rows: List[str] = Field(default_factory=list)


class Jaeger(ManifestModel):
    enabled: bool = True


class VaultOpts(ManifestModel):
    """Read secrets from another service's vault folder."""
    name: str
    region: Optional[str] = None

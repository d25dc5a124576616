"""Ownership, data handling and dependency policy blocks."""
import re
from typing import List, Optional

from pydantic import Field

from .base import DURATION_RE, ManifestModel, is_valid_service_name
from ...config.schema import GlobalConfig
from ...errors import ValidationFailure

KNOWN_BACKENDS = {
    "Postgres", "Mysql", "Redis", "S3", "DynamoDB",
    "ElasticSearch", "Cassandra", "Kafka", "RabbitMQ", "Mongo",
}
KNOWN_PROTOCOLS = {"http", "grpc", "amqp", "kafka", "tcp"}
API_VERSION_RE = re.compile(r"^v[0-9]+((alpha|beta)[0-9]+)?$")


class Metadata(ManifestModel):
    """Canonical ownership and documentation sources."""
    repo: str = ""
    team: str = ""
    docs: Optional[str] = None

    def verify(self, conf: GlobalConfig) -> None:
        if not self.repo:
            raise ValidationFailure("metadata.repo must be set")
        if not self.team:
            raise ValidationFailure("metadata.team must be set")
        if conf.teams and self.team not in conf.teams:
            raise ValidationFailure(f"metadata.team {self.team} is not a known team")


def _verify_duration(value: Optional[str], what: str) -> None:
    if value is not None and not DURATION_RE.match(value):
        raise ValidationFailure(f"{what} '{value}' is not a valid duration (e.g. 2w, 30d)")


class DataField(ManifestModel):
    """A single field stored by a data store."""
    name: str
    pii: bool = False
    spii: bool = False
    encrypted: Optional[bool] = None
    key_rotator: Optional[str] = Field(default=None, alias='keyRotator')
    retention_period: Optional[str] = Field(default=None, alias='retentionPeriod')


class DataStore(ManifestModel):
    """A backend holding data, with policy defaults for its fields."""
    backend: str
    encrypted: Optional[bool] = None
    key_rotator: Optional[str] = Field(default=None, alias='keyRotator')
    retention_period: Optional[str] = Field(default=None, alias='retentionPeriod')
    cached: bool = False
    fields: List[DataField] = Field(default_factory=list)

    def implicits(self) -> None:
        # store level values cascade down to fields that leave them unset
        for field in self.fields:
            if field.encrypted is None:
                field.encrypted = self.encrypted
            if field.key_rotator is None:
                field.key_rotator = self.key_rotator

    def verify(self, conf: GlobalConfig) -> None:
        if self.backend not in KNOWN_BACKENDS:
            raise ValidationFailure(f"Unknown data store backend {self.backend}")
        _verify_duration(self.key_rotator, f"{self.backend} keyRotator")
        _verify_duration(self.retention_period, f"{self.backend} retentionPeriod")
        names = set()
        for field in self.fields:
            if field.name in names:
                raise ValidationFailure(f"Field {field.name} is declared twice in {self.backend}")
            names.add(field.name)
            _verify_duration(field.key_rotator, f"{self.backend}.{field.name} keyRotator")
            _verify_duration(field.retention_period, f"{self.backend}.{field.name} retentionPeriod")


class DataHandling(ManifestModel):
    """Data sources and handling strategies of a service."""
    stores: List[DataStore] = Field(default_factory=list)

    def implicits(self) -> None:
        for store in self.stores:
            store.implicits()

    def verify(self, conf: GlobalConfig) -> None:
        for store in self.stores:
            store.verify(conf)


class Dependency(ManifestModel):
    """Another service this one talks to."""
    name: str
    api: Optional[str] = None
    contract: Optional[str] = None
    protocol: str = "http"
    intent: Optional[str] = None

    def verify(self, conf: GlobalConfig) -> None:
        if not is_valid_service_name(self.name):
            raise ValidationFailure(f"Dependency {self.name} is not a valid service name")
        # api is filled in by implicits
        if self.api is None or not API_VERSION_RE.match(self.api):
            raise ValidationFailure(f"Dependency {self.name} has an invalid api version {self.api}")
        if self.protocol not in KNOWN_PROTOCOLS:
            raise ValidationFailure(f"Dependency {self.name} uses unknown protocol {self.protocol}")

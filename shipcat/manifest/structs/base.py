"""Shared base model and the verify capability for manifest sub-structures."""
import re
from typing import Protocol, runtime_checkable

from pydantic import BaseModel, ConfigDict

from ...config.schema import GlobalConfig

# Service names: short, lower case, dashes between words
SERVICE_NAME_RE = re.compile(r"^[0-9a-z\-]{1,40}$")

# Durations like 2w, 30d, 12h
DURATION_RE = re.compile(r"^[0-9]+[hdwmy]$")


def is_valid_service_name(name: str) -> bool:
    """Check a name against the service naming rules."""
    if not SERVICE_NAME_RE.match(name):
        return False
    return not (name.startswith('-') or name.endswith('-'))


class ManifestModel(BaseModel):
    """Base for every structure read from a manifest file."""
    model_config = ConfigDict(populate_by_name=True)


@runtime_checkable
class Verify(Protocol):
    """Anything that can check its own sanity against the global config.

    Called after implicits have been applied. Implementations raise
    ValidationFailure with a diagnostic naming the offending field.
    """

    def verify(self, conf: GlobalConfig) -> None:
        ...

"""Error kinds raised while resolving, validating and rendering manifests."""
from typing import Optional


class ShipcatError(Exception):
    """Base class for all manifest pipeline failures.

    Batch operations annotate the error with the service and the stage that
    failed so callers can report exactly where processing stopped.
    """

    def __init__(self, message: str, service: Optional[str] = None, stage: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.service = service
        self.stage = stage

    def annotate(self, service: str, stage: str) -> "ShipcatError":
        """Attach the failing service and stage, keeping any earlier annotation."""
        if self.service is None:
            self.service = service
        if self.stage is None:
            self.stage = stage
        return self

    def __str__(self) -> str:
        if self.service and self.stage:
            return f"{self.service} ({self.stage}): {self.message}"
        if self.service:
            return f"{self.service}: {self.message}"
        return self.message


class MalformedSource(ShipcatError):
    """Raised when a source file exists but does not parse against the schema."""
    pass


class MissingSource(ShipcatError):
    """Raised when an expected manifest, config or service folder is absent."""
    pass


class MissingOverrideFile(MissingSource):
    """Raised when an override merge is requested for a file that does not exist."""
    pass


class IdentityMismatch(ShipcatError):
    """Raised when a manifest name disagrees with the service identity."""
    pass


class UnknownRegion(ShipcatError):
    """Raised when a region is absent from the global config."""
    pass


class UnsupportedRegion(ShipcatError):
    """Raised when a service is not configured to deploy to a region."""
    pass


class ValidationFailure(ShipcatError):
    """Raised on any hard validation failure."""
    pass


class InvalidHostAlias(ShipcatError):
    """Raised when an override declares a host alias without ip or hostnames."""
    pass


class SecretNotFound(ShipcatError):
    """Raised when the secret store cannot resolve a placeholder key."""
    pass


class TemplateFailure(ShipcatError):
    """Raised when the template renderer fails."""
    pass

"""YAML manifest parser."""
import logging
from pathlib import Path
from typing import Type, Union

import yaml
from pydantic import ValidationError

from .schema import Manifest
from ..errors import MalformedSource, MissingSource

logger = logging.getLogger(__name__)

MANIFEST_FILENAME = "shipcat.yml"


class ManifestParser:
    """Parser for YAML service manifests."""

    @staticmethod
    def load(file_path: Union[str, Path], missing: Type[MissingSource] = MissingSource) -> Manifest:
        """Load and validate a YAML manifest file.

        Both base manifests and region overrides go through here since they
        share a schema.

        Args:
            file_path: Path to the YAML manifest file.
            missing: Error type raised when the file is absent.

        Returns:
            Manifest: Parsed manifest object, not yet resolved.

        Raises:
            MissingSource: If the manifest file doesn't exist.
            MalformedSource: If the YAML is malformed or fails validation.
        """
        path = Path(file_path)
        if not path.is_file():
            raise missing(f"Manifest file {path} does not exist")
        logger.debug("Using manifest in %s", path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise MalformedSource(f"Manifest file {path} is not valid YAML: {e}") from e
        except UnicodeDecodeError as e:
            raise MalformedSource(f"Manifest file {path} is not valid UTF-8: {e}") from e
        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise MalformedSource(f"Manifest file {path} must contain a mapping")
        try:
            return Manifest.model_validate(data)
        except ValidationError as e:
            raise MalformedSource(f"Manifest file {path} does not match the schema: {e}") from e

    @staticmethod
    def load_service(services_dir: Union[str, Path], service: str) -> Manifest:
        """Load the base manifest of a service from its folder.

        Raises:
            MissingSource: If the service folder or its manifest doesn't exist.
            MalformedSource: If the manifest is invalid.
        """
        folder = Path(services_dir) / service
        if not folder.is_dir():
            raise MissingSource(f"Service folder {folder} does not exist")
        return ManifestParser.load(folder / MANIFEST_FILENAME)

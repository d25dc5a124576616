"""YAML loader for the global shipcat config."""
import logging
from pathlib import Path
from typing import Union

import yaml
from pydantic import ValidationError

from .schema import GlobalConfig
from ..errors import MalformedSource, MissingSource

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("shipcat.conf")


class ConfigLoader:
    """Loader for the process wide region and defaults catalog."""

    @staticmethod
    def load(file_path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> GlobalConfig:
        """Load and validate the global config file.

        Args:
            file_path: Path to the YAML config file.

        Returns:
            GlobalConfig: Validated, immutable config.

        Raises:
            MissingSource: If the config file doesn't exist.
            MalformedSource: If the YAML is malformed or fails validation.
        """
        path = Path(file_path)
        if not path.is_file():
            raise MissingSource(f"Config file {path} does not exist")
        logger.debug("Reading config from %s", path)
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = yaml.safe_load(f)
            return GlobalConfig.model_validate(data or {})
        except yaml.YAMLError as e:
            raise MalformedSource(f"Config file {path} is not valid YAML: {e}") from e
        except UnicodeDecodeError as e:
            raise MalformedSource(f"Config file {path} is not valid UTF-8: {e}") from e
        except ValidationError as e:
            raise MalformedSource(f"Config file {path} does not match the schema: {e}") from e

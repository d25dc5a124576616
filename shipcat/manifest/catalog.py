"""Discovery of the services available in a services folder."""
from pathlib import Path
from typing import List, Union


class ServiceCatalog:
    """Lists services as the sub folders of a services directory."""

    def __init__(self, services_dir: Union[str, Path] = "services"):
        self.services_dir = Path(services_dir)

    def list_services(self) -> List[str]:
        """Return the sorted names of all service folders.

        Returns an empty list when the services directory is missing.
        """
        if not self.services_dir.is_dir():
            return []
        return sorted(p.name for p in self.services_dir.iterdir() if p.is_dir())

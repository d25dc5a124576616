"""Pydantic models for the global shipcat config."""
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from ..errors import UnknownRegion


def env_as_strings(env: Any) -> Any:
    """Render yaml scalars in an env mapping the way they were written.

    `PORT: 8080` and `DEBUG: true` load as int and bool, env values are
    always strings.
    """
    if not isinstance(env, dict):
        return env
    res = {}
    for k, v in env.items():
        if isinstance(v, bool):
            v = "true" if v else "false"
        elif isinstance(v, (int, float)):
            v = str(v)
        res[k] = v
    return res


class KongRegion(BaseModel):
    """Region wide Kong settings."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    base_url: str = Field(alias='baseUrl')


class Region(BaseModel):
    """A named deployment environment with its own default env vars."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    namespace: str = "default"
    env: Dict[str, str] = Field(default_factory=dict)
    kong: Optional[KongRegion] = None

    @field_validator('env', mode='before')
    @classmethod
    def _env_as_strings(cls, v: Any) -> Any:
        return env_as_strings(v)


class Defaults(BaseModel):
    """Fallback values used by implicits."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    image_prefix: str = Field(alias='imagePrefix')
    chart: str
    replica_count: int = Field(alias='replicaCount', ge=1)


class GlobalConfig(BaseModel):
    """Root config schema, read once and never mutated."""
    model_config = ConfigDict(frozen=True, populate_by_name=True)

    defaults: Defaults
    regions: Dict[str, Region] = Field(default_factory=dict)
    teams: List[str] = Field(default_factory=list)

    @model_validator(mode='before')
    @classmethod
    def _name_regions(cls, data: Any) -> Any:
        # region names live in the mapping keys
        if isinstance(data, dict) and isinstance(data.get('regions'), dict):
            regions = {}
            for name, region in data['regions'].items():
                if isinstance(region, dict):
                    region = {'name': name, **region}
                elif region is None:
                    region = {'name': name}
                regions[name] = region
            data = {**data, 'regions': regions}
        return data

    def has_region(self, name: str) -> bool:
        return name in self.regions

    def region(self, name: str) -> Region:
        """Look up a region by name.

        Raises:
            UnknownRegion: If the region has no entry in the config.
        """
        if name not in self.regions:
            raise UnknownRegion(f"Unknown region {name} in regions in config")
        return self.regions[name]

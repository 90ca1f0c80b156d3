"""Configuration schema: validates iconcache.yml."""

from pathlib import Path

from pydantic import BaseModel, Field, field_validator, model_validator

from iconcache.shared.identifiers import parse_identifier

# Collections warmed at startup, and scanned by unscoped searches
DEFAULT_PRECACHE = [
    "lucide",
    "simple-icons",
    "material-symbols",
    "heroicons",
    "feather",
]

# Substituted for any icon that can't be resolved
DEFAULT_FALLBACK_ICON = "lucide:help-circle"


class IconConfig(BaseModel):
    """Top-level configuration loaded from iconcache.yml.

    ``data_dir`` holds one Iconify JSON file per collection, named
    ``<collection>.json``.
    """

    data_dir: str = "./icons"
    fallback_icon: str = DEFAULT_FALLBACK_ICON
    precache: list[str] = Field(default_factory=lambda: list(DEFAULT_PRECACHE))
    search_limit: int = Field(50, ge=1, le=1000)

    @field_validator("precache", mode="before")
    @classmethod
    def normalize_precache(cls, value: object) -> object:
        # A YAML key with only commented-out items loads as None
        if value is None:
            return []
        if isinstance(value, list):
            return [item.strip() for item in value if isinstance(item, str) and item.strip()]
        return value

    @field_validator("fallback_icon")
    @classmethod
    def check_fallback_icon(cls, value: str) -> str:
        if parse_identifier(value) is None:
            raise ValueError(f"fallback_icon must look like 'collection:name', got {value!r}")
        return value

    @model_validator(mode="after")
    def check_data_dir_exists(self) -> "IconConfig":
        if not Path(self.data_dir).is_dir():
            raise ValueError(f"data_dir does not exist: {self.data_dir}")
        return self

"""YAML config loader: reads iconcache.yml into IconConfig."""

from pathlib import Path

import yaml

from iconcache.schemas.config import IconConfig


def load_config(path: str | Path) -> IconConfig:
    """Load and validate an icon service config file.

    Raises ``FileNotFoundError`` if the path doesn't exist and
    ``pydantic.ValidationError`` if the YAML content is invalid.
    A relative ``data_dir`` is resolved against the config file's directory.
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    raw = yaml.safe_load(path.read_text())
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(f"Config file must be a YAML mapping, got {type(raw).__name__}")

    data_dir = raw.get("data_dir")
    if isinstance(data_dir, str) and data_dir and not Path(data_dir).is_absolute():
        raw["data_dir"] = str(path.parent / data_dir)

    return IconConfig(**raw)

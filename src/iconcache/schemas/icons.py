"""Iconify JSON models: icon sets, resolved icons, and render/lookup results."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

# Iconify defaults for a set that omits its dimensions
DEFAULT_SIZE = 16


class _Transforms(BaseModel):
    """Optional overrides shared by icons and aliases."""

    model_config = ConfigDict(populate_by_name=True)

    width: float | None = Field(None, gt=0)
    height: float | None = Field(None, gt=0)
    left: float | None = None
    top: float | None = None
    rotate: int = 0  # quarter turns
    h_flip: bool = Field(False, alias="hFlip")
    v_flip: bool = Field(False, alias="vFlip")
    hidden: bool = False


class IconEntry(_Transforms):
    """One icon in a set: SVG body plus optional layout overrides."""

    body: str


class IconAlias(_Transforms):
    """Alternative name for an icon (or another alias), with extra transforms."""

    parent: str


class CollectionInfo(BaseModel):
    """Set metadata from the ``info`` block. Everything is optional."""

    name: str = ""
    total: int | None = None
    category: str | None = None
    author: dict[str, str] | None = None
    license: dict[str, str] | None = None
    palette: bool | None = None


class IconCollection(BaseModel):
    """A full Iconify icon set, as stored in ``<prefix>.json``."""

    prefix: str
    info: CollectionInfo | None = None
    icons: dict[str, IconEntry]
    aliases: dict[str, IconAlias] = {}

    # Set-wide defaults applied to icons that don't override them
    width: float = Field(DEFAULT_SIZE, gt=0)
    height: float = Field(DEFAULT_SIZE, gt=0)
    left: float = 0
    top: float = 0

    @property
    def total(self) -> int:
        if self.info and self.info.total:
            return self.info.total
        return len(self.icons)


class ResolvedIcon(BaseModel):
    """Icon data after alias resolution and default filling."""

    body: str
    width: float = Field(gt=0)
    height: float = Field(gt=0)
    left: float = 0
    top: float = 0
    rotate: int = 0
    h_flip: bool = False
    v_flip: bool = False


class RenderOptions(BaseModel):
    """Per-request render customisations; unset fields keep set defaults."""

    model_config = ConfigDict(populate_by_name=True)

    size: int | None = Field(None, gt=0)
    class_name: str | None = Field(None, alias="class")
    color: str | None = None


class IconData(BaseModel):
    """Single-icon lookup result."""

    identifier: str
    collection: str
    name: str
    svg: str


class CollectionSummary(BaseModel):
    """Collection listing entry for icon pickers."""

    id: str
    name: str
    total: int
    category: str | None = None
    prefix: str


class SearchHit(BaseModel):
    identifier: str
    collection: str
    name: str

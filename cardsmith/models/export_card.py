"""
Export-time card record.

ExportCard is the canonical shape written to a game bundle's cards.json. It is
produced only by the export normalizer from card records of any historical
shape. Unset fields are omitted from the manifest.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class ExportModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class LocalizedText(ExportModel):
    """Text in both studio languages."""

    en: str = ""
    ar: str = ""


class ExportArt(ExportModel):
    """
    Card art reference.

    For video art `src` is the poster frame so static consumers can always
    render something; the video itself travels in `video_src`.
    """

    kind: Any = None
    src: Any = None
    video_src: Any = None
    poster: Any = None
    transform: Any = None


class ExportCard(ExportModel):
    id: str | int | None = None
    rarity: Any = None
    template: Any = None
    bg_color: Any = None
    attack: int | float = 0
    defense: int | float = 0
    cost: Any = None
    name: LocalizedText = Field(default_factory=LocalizedText)
    ability: LocalizedText = Field(default_factory=LocalizedText)
    art: ExportArt | None = None
    tags: Any = None

    def to_manifest(self) -> dict[str, Any]:
        """JSON-ready manifest entry with unset fields dropped."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)

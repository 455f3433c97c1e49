"""
Export normalizer.

Reconciles card records of any historical shape into one ExportCard.

A card record may carry its fields directly, nested under a `data` mapping,
or under names used by older save formats. Every alias and its precedence is
listed here and nowhere else. For each field the first non-null source wins;
conflicting values in later sources are ignored, never merged.

    field       sources, in order
    ---------   ----------------------------------------------------------
    id          card.id, data.id
    rarity      data.rarity, card.rarity
    template    data.template, data.templateKey, data.template_key
    bgColor     data.bgColor, card.bgColor
    attack      data.attack, data.stats.attack, card.attack
    defense     data.defense, data.stats.defense, card.defense
    cost        data.cost, card.cost
    name        data.name
                  fallback en: data.character_name_en, card.character_name_en
                  fallback ar: data.character_name_ar, card.character_name_ar
    ability     data.desc, data.ability
                  fallback en: data.ability_en, card.ability_en
                  fallback ar: data.ability_ar, card.ability_ar
    art         card.art, data.art
    tags        data.tags, card.tags

`data` is the card's `data` mapping when it has one, otherwise the card.
Normalization never fails: every field has a default.
"""

import math
import re
from collections.abc import Iterable, Mapping
from typing import Any

from cardsmith.models.export_card import ExportArt, ExportCard, LocalizedText
from cardsmith.models.failure import FailureKind, KnownError
from cardsmith.models.project import Project

# Older save formats stored the template under different keys
TEMPLATE_KEYS = ("template", "templateKey", "template_key")

# Plain ASCII decimal notation; digit separators and non-ASCII digits are rejected
NUMERIC_TEXT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")
INTEGER_TEXT = re.compile(r"[+-]?[0-9]+")


def first_present(*values: Any) -> Any:
    """Return the first value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def normalize_localized(
    value: Any,
    fallback_en: Any = None,
    fallback_ar: Any = None,
) -> LocalizedText:
    """
    Normalize a localized text field.

    A mapping contributes its `en`/`ar` members, each falling back to the
    matching default. Any other value is used as text for both languages,
    with the defaults applying only when that text is empty.

    Examples:
        normalize_localized("Dragon") -> {en: "Dragon", ar: "Dragon"}
        normalize_localized(None, "A", "ب") -> {en: "A", ar: "ب"}
    """
    if isinstance(value, Mapping):
        return LocalizedText(
            en=_as_text(first_present(value.get("en"), fallback_en)),
            ar=_as_text(first_present(value.get("ar"), fallback_ar)),
        )

    text = _as_text(value)
    return LocalizedText(
        en=text or _as_text(fallback_en),
        ar=text or _as_text(fallback_ar),
    )


def normalize_number(value: Any) -> int | float:
    """
    Coerce a stat to a finite number.

    Strings are parsed after trimming and must be plain ASCII decimal
    notation. Anything missing, unparseable or non-finite becomes 0.
    Integral results are returned as int.
    """
    if isinstance(value, bool):
        return int(value)
    if isinstance(value, int):
        return value

    if isinstance(value, float):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        if INTEGER_TEXT.fullmatch(text):
            return int(text)
        if not NUMERIC_TEXT.fullmatch(text):
            return 0
        number = float(text)
    else:
        return 0

    if not math.isfinite(number):
        return 0
    return int(number) if number.is_integer() else number


def resolve_template(data: Mapping[str, Any]) -> Any:
    """First defined of template, templateKey, template_key."""
    return first_present(*(data.get(key) for key in TEMPLATE_KEYS))


def _stat(data: Mapping[str, Any], card: Mapping[str, Any], name: str) -> int | float:
    stats = data.get("stats")
    nested = stats.get(name) if isinstance(stats, Mapping) else None
    return normalize_number(first_present(data.get(name), nested, card.get(name)))


def card_data(card: Mapping[str, Any]) -> Mapping[str, Any]:
    """The mapping holding a card's fields: its `data` mapping, else the card."""
    data = card.get("data")
    return data if isinstance(data, Mapping) else card


def card_art(card: Mapping[str, Any]) -> Mapping[str, Any] | None:
    """Art reference of a card, from the card itself or its data."""
    art = first_present(card.get("art"), card_data(card).get("art"))
    return art if isinstance(art, Mapping) and art else None


def normalize_art(art: Mapping[str, Any] | None) -> ExportArt | None:
    """
    Canonical art reference.

    Video art exposes its poster as `src` (falling back to the video source)
    and carries the video in `videoSrc`. Image art passes through.
    """
    if art is None:
        return None

    if art.get("kind") == "video":
        return ExportArt(
            kind="video",
            src=art.get("poster") or art.get("src"),
            video_src=art.get("src"),
            poster=art.get("poster"),
            transform=art.get("transform"),
        )

    return ExportArt(
        kind=art.get("kind"),
        src=art.get("src"),
        transform=art.get("transform"),
    )


def normalize_card(card: Mapping[str, Any] | None) -> ExportCard:
    """Normalize one card record of any shape into an ExportCard."""
    card = card if isinstance(card, Mapping) else {}
    data = card_data(card)

    card_id = first_present(card.get("id"), data.get("id"))
    if isinstance(card_id, bool) or not isinstance(card_id, (str, int, type(None))):
        card_id = _as_text(card_id)

    return ExportCard(
        id=card_id,
        rarity=first_present(data.get("rarity"), card.get("rarity")),
        template=resolve_template(data),
        bg_color=first_present(data.get("bgColor"), card.get("bgColor")),
        attack=_stat(data, card, "attack"),
        defense=_stat(data, card, "defense"),
        cost=first_present(data.get("cost"), card.get("cost")),
        name=normalize_localized(
            data.get("name"),
            first_present(data.get("character_name_en"), card.get("character_name_en")),
            first_present(data.get("character_name_ar"), card.get("character_name_ar")),
        ),
        ability=normalize_localized(
            first_present(data.get("desc"), data.get("ability")),
            first_present(data.get("ability_en"), card.get("ability_en")),
            first_present(data.get("ability_ar"), card.get("ability_ar")),
        ),
        art=normalize_art(card_art(card)),
        tags=first_present(data.get("tags"), card.get("tags")),
    )


def normalize_cards(cards: Iterable[Mapping[str, Any] | None]) -> list[ExportCard]:
    """Normalize a card sequence, preserving order."""
    return [normalize_card(card) for card in cards]


def collect_export_cards(project: Project, table_id: str | None = None) -> list[dict[str, Any]]:
    """
    Card records to export from a project.

    Args:
        project: Loaded project
        table_id: Data table to export. None exports every table's rows,
            tables in project order.

    Returns:
        Rows as plain mappings in their saved (camelCase) shape.

    Raises:
        KnownError: If `table_id` names no table in the project
    """
    if table_id is None:
        tables = project.data_tables
    else:
        table = project.get_table(table_id)
        if table is None:
            raise KnownError(
                kind=FailureKind.NOT_FOUND,
                message=f"Data table '{table_id}' not found",
                suggestion="Pick one of the project's data tables.",
                status_code=404,
            )
        tables = [table]

    return [
        row.model_dump(mode="json", by_alias=True, exclude_unset=True)
        for table in tables
        for row in table.rows
    ]

"""Weapon records and the JSON decoder for weapons files.

A weapons file is a JSON array of objects:

    [
        {"Name": "Fenrir", "Tech": "Power", "AttacksPerSecond": 6.9},
        {"Name": "Genjiroh", "Tech": "Smart", "AttacksPerSecond": 4.8}
    ]

Field names are matched exactly; Tech values are matched case-insensitively.
"""

from __future__ import annotations

import codecs
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError


class TechType(str, Enum):
    """Weapon technology category."""

    TECH = "Tech"
    SMART = "Smart"
    POWER = "Power"

    @classmethod
    def _missing_(cls, value: object) -> TechType | None:
        if isinstance(value, str):
            folded = value.casefold()
            for member in cls:
                if member.value.casefold() == folded:
                    return member
        return None


class Weapon(BaseModel):
    """A single weapon record. Immutable; compares by value."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str = Field(alias="Name")
    tech: TechType = Field(alias="Tech")
    # JSON numbers only; "6.9" is rejected
    attacks_per_second: float = Field(alias="AttacksPerSecond", strict=True)


class WeaponsDecodeError(ValueError):
    """Content could not be decoded into a list of weapons."""

    pass


# `null` is a valid payload and decodes to an empty list
_WEAPONS_ADAPTER: TypeAdapter[list[Weapon] | None] = TypeAdapter(list[Weapon] | None)


def decode_weapons(data: bytes | str) -> list[Weapon]:
    """Decode a weapons file.

    Args:
        data: Raw file contents (UTF-8 JSON, optionally with a BOM).

    Returns:
        Weapons in file order. A JSON ``null`` yields an empty list.

    Raises:
        WeaponsDecodeError: If the content is not valid JSON or does not
            match the weapon schema.
    """
    if isinstance(data, bytes):
        data = data.removeprefix(codecs.BOM_UTF8)
    else:
        data = data.removeprefix("\ufeff")

    try:
        weapons = _WEAPONS_ADAPTER.validate_json(data)
    except ValidationError as e:
        raise WeaponsDecodeError(f"Invalid weapons data: {e.error_count()} error(s)") from e
    return weapons if weapons is not None else []

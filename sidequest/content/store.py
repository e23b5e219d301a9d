"""Content store implementations.

The engine only needs get_content_blocks(); filtering happens in the composer.
"""

import json
from pathlib import Path
from typing import Protocol

from pydantic import ValidationError

from sidequest.models.blocks import ContentBlock


class ContentStoreError(Exception):
    """Content store could not supply blocks."""

    pass


class ContentStore(Protocol):
    """Source of atomic activity descriptions."""

    async def get_content_blocks(self) -> list[ContentBlock]:
        """Return the full current set of content blocks."""
        ...


class InMemoryContentStore:
    """In-memory implementation of ContentStore."""

    def __init__(self, blocks: list[ContentBlock] | None = None) -> None:
        self._blocks: list[ContentBlock] = list(blocks or [])

    def add(self, block: ContentBlock) -> None:
        self._blocks.append(block)

    async def get_content_blocks(self) -> list[ContentBlock]:
        return list(self._blocks)


class JsonContentStore:
    """Content store reading a JSON array of block rows from disk.

    Rows use the spreadsheet column names (Block_ID, Idea, Time_Required, ...)
    or the model field names.
    """

    COLUMN_MAP = {
        "Block_ID": "block_id",
        "Block_Type": "block_type",
        "Idea": "idea",
        "Time_Required": "minutes_required",
        "Difficulty_Tag": "difficulty",
        "Location_Dependent": "location_dependent",
        "Transportation_Required": "transportation",
        "Weather_Modifier": "weather_modifier",
        "Theme_Tags": "theme_tags",
        "Cost_Estimate": "cost_estimate",
        "Indoor_Outdoor": "indoor_outdoor",
        "Social_Level": "social_level",
        "Equipment_Needed": "equipment_needed",
        "Time_of_Day": "time_of_day",
        "Physical_Intensity": "physical_intensity",
        "Special_Notes": "special_notes",
    }

    def __init__(self, path: Path) -> None:
        self._path = path

    async def get_content_blocks(self) -> list[ContentBlock]:
        """Load and validate all rows.

        Raises:
            ContentStoreError: File missing or unreadable, not an array of objects,
                or a row fails validation
        """
        try:
            with open(self._path) as f:
                rows = json.load(f)
        except (OSError, ValueError) as e:
            raise ContentStoreError(f"Cannot read content blocks from {self._path}: {e}") from e

        if not isinstance(rows, list):
            raise ContentStoreError(
                f"Expected a JSON array of blocks in {self._path}, got {type(rows).__name__}"
            )

        blocks: list[ContentBlock] = []
        for index, row in enumerate(rows):
            if not isinstance(row, dict):
                raise ContentStoreError(
                    f"Content block row {index} in {self._path} is {type(row).__name__}, "
                    "expected an object"
                )
            data = {self.COLUMN_MAP.get(key, key): value for key, value in row.items()}
            try:
                blocks.append(ContentBlock(**data))
            except ValidationError as e:
                raise ContentStoreError(
                    f"Invalid content block {data.get('block_id', '?')}: {e}"
                ) from e
        return blocks

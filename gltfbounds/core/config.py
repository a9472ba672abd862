"""Configuration for bounding box computation.

Settings are pydantic models so they can be validated on construction and
round-tripped through JSON files.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, Field


class BoundingConfig(BaseModel):
    """Options for :func:`gltfbounds.compute_bounding_box`."""

    precision: int | None = Field(
        default=None,
        ge=0,
        le=15,
        description="Decimal digits kept in the outputs (None = no rounding)"
    )
    index_parents: bool = Field(
        default=True,
        description="Build a child->parent index once instead of scanning per lookup"
    )

    @classmethod
    def from_file(cls, path: Path | str) -> BoundingConfig:
        """Load configuration from a JSON file."""
        path = Path(path)
        with open(path) as f:
            data = json.load(f)
        return cls.model_validate(data)

    def to_file(self, path: Path | str) -> None:
        """Save configuration to a JSON file."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "w") as f:
            json.dump(self.model_dump(mode="json"), f, indent=2)

    @classmethod
    def default(cls) -> BoundingConfig:
        """Create a default configuration."""
        return cls()

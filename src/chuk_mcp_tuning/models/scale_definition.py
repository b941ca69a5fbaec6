"""
Scale definition models - YAML scale files.

A scale file lists one interval per line in the notation; the lines are
evaluated in order, so later lines may refer to earlier degrees.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

from chuk_mcp_tuning.constants import A4_MIDI_INDEX, DEFAULT_BASE_FREQUENCY


class ScaleDefinition(BaseModel):
    """A named scale written in the notation."""

    schema_version: str = Field("scale/v1", alias="schema")
    name: str = Field(..., description="Scale name")
    description: str = Field("", description="Scale description")
    lines: list[str] = Field(..., min_length=1, description="One interval per line")
    base_frequency: float = Field(
        default=DEFAULT_BASE_FREQUENCY,
        gt=0,
        description="Frequency of the unison in Hz",
    )
    base_index: int = Field(
        default=A4_MIDI_INDEX,
        ge=0,
        le=127,
        description="MIDI note number of the unison",
    )
    degree_names: list[str] = Field(default_factory=list, description="Optional degree names")
    tags: list[str] = Field(default_factory=list)

    model_config = {"frozen": True, "populate_by_name": True}

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Ensure scale name is usable as a file name."""
        if not v or not v.replace("_", "").replace("-", "").isalnum():
            raise ValueError(f"Invalid scale name: {v}")
        return v.lower()

    @field_validator("lines", mode="before")
    @classmethod
    def validate_lines(cls, v: Any) -> Any:
        """Lines are kept as text; bare numbers from YAML are accepted."""
        if isinstance(v, list):
            return [str(line) if isinstance(line, int | float) else line for line in v]
        return v

    def to_yaml_dict(self) -> dict[str, Any]:
        """Convert to YAML-serializable dictionary."""
        return {
            "schema": self.schema_version,
            "name": self.name,
            "description": self.description,
            "base_frequency": self.base_frequency,
            "base_index": self.base_index,
            "lines": list(self.lines),
            "degree_names": list(self.degree_names),
            "tags": list(self.tags),
        }


class ScaleMetadata(BaseModel):
    """Lightweight metadata for listing scales."""

    name: str
    description: str
    size: int
    tags: list[str]

    model_config = {"frozen": True}

    @classmethod
    def from_definition(cls, definition: ScaleDefinition, size: int) -> ScaleMetadata:
        """Create metadata from a definition and its evaluated size."""
        return cls(
            name=definition.name,
            description=definition.description,
            size=size,
            tags=list(definition.tags),
        )

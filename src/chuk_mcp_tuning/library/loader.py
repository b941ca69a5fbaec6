"""
Scale library - discovers and loads scale definitions.

Scales can come from:
1. Built-in library (shipped with package)
2. Project scales (user's project/scales directory)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from chuk_mcp_tuning.core.scale import Scale
from chuk_mcp_tuning.errors import TuningError
from chuk_mcp_tuning.models.scale_definition import ScaleDefinition, ScaleMetadata
from chuk_mcp_tuning.models.settings import NotationSettings
from chuk_mcp_tuning.notation.sequence import derive_scale

logger = logging.getLogger(__name__)


class ScaleLibrary:
    """
    Discovers and loads scale definitions.

    Scales are loaded from YAML files in the library and project directories.
    Project scales override library scales with the same name.
    """

    def __init__(
        self,
        library_path: Path | None = None,
        project_path: Path | None = None,
        settings: NotationSettings | None = None,
    ):
        """
        Initialize the scale library.

        Args:
            library_path: Path to built-in scale library
            project_path: Path to project scales directory
            settings: Evaluation settings used when building scales
        """
        self.library_path = library_path or (Path(__file__).parent / "scales")
        self.project_path = project_path
        self.settings = settings or NotationSettings()
        self._cache: dict[str, ScaleDefinition] = {}

    def list_scales(self) -> list[ScaleMetadata]:
        """
        List all available scales.

        Returns scales from both library and project, with project
        scales taking precedence. Scales that fail to evaluate are
        left out.
        """
        scales: dict[str, ScaleMetadata] = {}

        for directory in (self.library_path, self.project_path):
            if directory is None or not directory.exists():
                continue
            for path in sorted(directory.glob("*.yaml")):
                definition = self._load_definition_file(path)
                if not definition:
                    continue
                try:
                    scale = self.build_scale(definition)
                except TuningError as e:
                    logger.warning(f"Skipping scale {definition.name}: {e}")
                    continue
                scales[definition.name] = ScaleMetadata.from_definition(definition, scale.size)

        return sorted(scales.values(), key=lambda metadata: metadata.name)

    def get_definition(self, name: str) -> ScaleDefinition | None:
        """
        Get a scale definition by name.

        Project scales take precedence over library scales.

        Args:
            name: Scale name

        Returns:
            ScaleDefinition if found, None otherwise
        """
        if name in self._cache:
            return self._cache[name]

        for directory in (self.project_path, self.library_path):
            if directory is None:
                continue
            path = directory / f"{name}.yaml"
            if path.exists():
                definition = self._load_definition_file(path)
                if definition:
                    self._cache[name] = definition
                    return definition

        return None

    def load_scale(self, name: str) -> Scale | None:
        """
        Evaluate a scale definition into a Scale.

        Args:
            name: Scale name

        Returns:
            Scale if the definition exists, None otherwise

        Raises:
            TuningError: If a line of the definition does not evaluate
        """
        definition = self.get_definition(name)
        if definition is None:
            return None
        return self.build_scale(definition)

    def build_scale(self, definition: ScaleDefinition) -> Scale:
        """Evaluate any definition, stored or not."""
        logger.debug(f"Building scale {definition.name} ({len(definition.lines)} lines)")
        return derive_scale(
            definition.lines,
            base_frequency=definition.base_frequency,
            base_index=definition.base_index,
            number_of_components=self.settings.number_of_components,
            names=definition.degree_names or None,
        )

    def copy_to_project(self, name: str) -> Path | None:
        """
        Copy a library scale to the project for customization.

        Args:
            name: Scale name

        Returns:
            Path to copied file, or None if not found
        """
        if not self.project_path:
            raise ValueError("No project path configured")

        library_file = self.library_path / f"{name}.yaml"
        if not library_file.exists():
            return None

        self.project_path.mkdir(parents=True, exist_ok=True)

        dest_file = self.project_path / f"{name}.yaml"
        if dest_file.exists():
            raise ValueError(f"Scale already exists in project: {name}")

        dest_file.write_text(library_file.read_text(encoding="utf-8"), encoding="utf-8")

        # Invalidate cache
        self._cache.pop(name, None)

        return dest_file

    def save_definition(self, definition: ScaleDefinition) -> Path:
        """Write a definition to the project directory, replacing any file."""
        if not self.project_path:
            raise ValueError("No project path configured")
        self.project_path.mkdir(parents=True, exist_ok=True)
        path = self.project_path / f"{definition.name}.yaml"
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(definition.to_yaml_dict(), f, sort_keys=False, allow_unicode=True)
        self._cache.pop(definition.name, None)
        return path

    def _load_definition_file(self, path: Path) -> ScaleDefinition | None:
        """Load a definition from a YAML file. Unreadable files are skipped."""
        try:
            with open(path, encoding="utf-8") as f:
                data = yaml.safe_load(f)
            return self._parse_definition(data, path.stem)
        except (OSError, yaml.YAMLError, ValidationError, TypeError) as e:
            logger.warning(f"Skipping scale file {path}: {e}")
            return None

    def _parse_definition(self, data: dict[str, Any], default_name: str) -> ScaleDefinition:
        """Parse a definition from YAML data."""
        if not isinstance(data, dict):
            raise TypeError("Scale file must contain a mapping")
        return ScaleDefinition.model_validate({"name": default_name, **data})

    def clear_cache(self) -> None:
        """Clear the definition cache."""
        self._cache.clear()

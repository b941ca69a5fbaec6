"""
Tests for scale definitions and the scale library.

Tests cover:
- ScaleDefinition and NotationSettings models
- Built-in library scales
- Project overrides, copying and saving
"""

from pathlib import Path

import pytest
from pydantic import ValidationError

from chuk_mcp_tuning.errors import NotationSyntaxError
from chuk_mcp_tuning.library import ScaleLibrary
from chuk_mcp_tuning.models import NotationSettings, ScaleDefinition

BUILT_IN_SIZES = {
    "12-edo": 12,
    "bohlen-pierce": 13,
    "harmonic-segment": 8,
    "just-major": 7,
    "just-major-12-tempered": 7,
    "just-pentatonic-a": 5,
    "pythagorean": 7,
}


def write_scale(directory: Path, name: str, body: str) -> Path:
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / f"{name}.yaml"
    path.write_text(body, encoding="utf-8")
    return path


class TestModels:
    """Tests for the definition and settings models."""

    def test_minimal_definition(self) -> None:
        definition = ScaleDefinition(name="fifths", lines=["3/2", "2"])
        assert definition.schema_version == "scale/v1"
        assert definition.base_frequency == 440.0
        assert definition.base_index == 69

    def test_schema_alias(self) -> None:
        definition = ScaleDefinition.model_validate(
            {"schema": "scale/v1", "name": "fifths", "lines": ["3/2"]}
        )
        assert definition.schema_version == "scale/v1"

    def test_name_lowercased(self) -> None:
        assert ScaleDefinition(name="My-Scale", lines=["2"]).name == "my-scale"

    def test_invalid_name(self) -> None:
        with pytest.raises(ValidationError):
            ScaleDefinition(name="bad name!", lines=["2"])

    def test_numeric_lines_become_text(self) -> None:
        """YAML reads a bare 2 as a number."""
        definition = ScaleDefinition.model_validate({"name": "octave", "lines": [2]})
        assert definition.lines == ["2"]

    def test_empty_lines_rejected(self) -> None:
        with pytest.raises(ValidationError):
            ScaleDefinition(name="empty", lines=[])

    def test_base_index_range(self) -> None:
        with pytest.raises(ValidationError):
            ScaleDefinition(name="high", lines=["2"], base_index=128)

    def test_yaml_dict(self) -> None:
        data = ScaleDefinition(name="fifths", lines=["3/2", "2"], tags=["test"]).to_yaml_dict()
        assert data["schema"] == "scale/v1"
        assert data["lines"] == ["3/2", "2"]
        assert data["tags"] == ["test"]

    def test_settings_context(self) -> None:
        context = NotationSettings(base_frequency=432.0).create_context()
        assert context.base_frequency.value.to_fraction() == 432
        assert context.number_of_components == 25

    def test_settings_validation(self) -> None:
        with pytest.raises(ValidationError):
            NotationSettings(number_of_components=0)


class TestBuiltInLibrary:
    """Tests for the shipped scales."""

    def test_list_scales(self, library_path: Path) -> None:
        library = ScaleLibrary(library_path=library_path)
        scales = library.list_scales()
        assert [s.name for s in scales] == sorted(BUILT_IN_SIZES)
        assert {s.name: s.size for s in scales} == BUILT_IN_SIZES

    @pytest.mark.parametrize("name", sorted(BUILT_IN_SIZES))
    def test_every_scale_loads(self, library_path: Path, name: str) -> None:
        scale = ScaleLibrary(library_path=library_path).load_scale(name)
        assert scale is not None
        assert scale.size == BUILT_IN_SIZES[name]
        assert scale.ratios[0] == 1.0

    def test_12_edo_reaches_a440(self, library_path: Path) -> None:
        scale = ScaleLibrary(library_path=library_path).load_scale("12-edo")
        assert scale.get_frequency(60) == pytest.approx(261.6255653005986)
        assert scale.get_frequency(69) == pytest.approx(440.0)
        assert scale.names[-1] == "B"

    def test_just_major(self, library_path: Path) -> None:
        scale = ScaleLibrary(library_path=library_path).load_scale("just-major")
        assert scale.ratios[2] == pytest.approx(1.25)
        assert scale.names[0] == "do"

    def test_tempered_major(self, library_path: Path) -> None:
        scale = ScaleLibrary(library_path=library_path).load_scale("just-major-12-tempered")
        assert scale.ratios[4] == pytest.approx(2 ** (7 / 12))
        assert scale.equave_ratio == pytest.approx(2.0)

    def test_pentatonic_uses_assignment(self, library_path: Path) -> None:
        scale = ScaleLibrary(library_path=library_path).load_scale("just-pentatonic-a")
        assert scale.base_frequency == pytest.approx(440.0)
        assert scale.ratios == pytest.approx((1.0, 1.2, 4 / 3, 1.5, 1.75))

    def test_bohlen_pierce_tritave(self, library_path: Path) -> None:
        scale = ScaleLibrary(library_path=library_path).load_scale("bohlen-pierce")
        assert scale.equave_ratio == pytest.approx(3.0)
        assert scale.get_frequency(57 + 13) == pytest.approx(660.0)

    def test_harmonic_segment(self, library_path: Path) -> None:
        scale = ScaleLibrary(library_path=library_path).load_scale("harmonic-segment")
        assert scale.ratios == pytest.approx(tuple(n / 8 for n in range(8, 16)))

    def test_missing_scale(self, library_path: Path) -> None:
        library = ScaleLibrary(library_path=library_path)
        assert library.get_definition("nonexistent") is None
        assert library.load_scale("nonexistent") is None


class TestProjectScales:
    """Tests for project directories."""

    def test_project_overrides_library(self, library_path: Path, temp_dir: Path) -> None:
        write_scale(
            temp_dir,
            "just-major",
            "name: just-major\ndescription: Custom\nlines: ['9/8', '2']\n",
        )
        library = ScaleLibrary(library_path=library_path, project_path=temp_dir)
        assert library.get_definition("just-major").description == "Custom"
        listed = {s.name: s for s in library.list_scales()}
        assert listed["just-major"].description == "Custom"
        assert listed["just-major"].size == 2

    def test_name_defaults_to_file_stem(self, temp_dir: Path) -> None:
        write_scale(temp_dir, "octave", "lines: [2]\n")
        library = ScaleLibrary(library_path=temp_dir / "none", project_path=temp_dir)
        assert library.get_definition("octave").name == "octave"

    def test_bad_files_skipped(self, temp_dir: Path) -> None:
        write_scale(temp_dir, "broken", "lines: [\n")
        write_scale(temp_dir, "listed", "- 3/2\n")
        write_scale(temp_dir, "empty", "lines: []\n")
        write_scale(temp_dir, "good", "lines: ['3/2', '2']\n")
        library = ScaleLibrary(library_path=temp_dir)
        assert [s.name for s in library.list_scales()] == ["good"]
        assert library.get_definition("broken") is None

    def test_unevaluable_scale(self, temp_dir: Path) -> None:
        """Listing skips it; loading reports the error."""
        write_scale(temp_dir, "typo", "lines: ['3/2 +']\n")
        library = ScaleLibrary(library_path=temp_dir)
        assert library.list_scales() == []
        with pytest.raises(NotationSyntaxError):
            library.load_scale("typo")

    def test_copy_to_project(self, library_path: Path, temp_dir: Path) -> None:
        project = temp_dir / "scales"
        library = ScaleLibrary(library_path=library_path, project_path=project)
        path = library.copy_to_project("pythagorean")
        assert path == project / "pythagorean.yaml"
        assert path.exists()
        assert library.get_definition("pythagorean").lines[0] == "M2"

    def test_copy_twice_fails(self, library_path: Path, temp_dir: Path) -> None:
        library = ScaleLibrary(library_path=library_path, project_path=temp_dir)
        library.copy_to_project("12-edo")
        with pytest.raises(ValueError):
            library.copy_to_project("12-edo")

    def test_copy_missing(self, library_path: Path, temp_dir: Path) -> None:
        library = ScaleLibrary(library_path=library_path, project_path=temp_dir)
        assert library.copy_to_project("nonexistent") is None

    def test_copy_without_project(self, library_path: Path) -> None:
        with pytest.raises(ValueError):
            ScaleLibrary(library_path=library_path).copy_to_project("12-edo")

    def test_save_definition(self, temp_dir: Path) -> None:
        library = ScaleLibrary(library_path=temp_dir / "none", project_path=temp_dir)
        definition = ScaleDefinition(name="fifths", lines=["3/2", "2"], tags=["test"])
        path = library.save_definition(definition)
        assert path.exists()
        loaded = library.get_definition("fifths")
        assert loaded == definition
        assert library.load_scale("fifths").ratios == pytest.approx((1.0, 1.5))

    def test_cache(self, temp_dir: Path) -> None:
        write_scale(temp_dir, "octave", "lines: [2]\n")
        library = ScaleLibrary(library_path=temp_dir)
        first = library.get_definition("octave")
        assert library.get_definition("octave") is first
        library.clear_cache()
        assert library.get_definition("octave") is not first

"""
Tests for file loading and format detection.
"""

import pytest

from logixparse.errors import MissingRootBlockError
from logixparse.loader import detect_format, load_text, parse_file
from logixparse.models import SourceFormat


class TestDetectFormat:
    """Test extension and content based detection."""

    @pytest.mark.parametrize("name,expected", [
        ("Project.L5K", SourceFormat.L5K),
        ("project.l5k", SourceFormat.L5K),
        ("Project.L5X", SourceFormat.L5X),
        ("nested/dir/Project.l5x", SourceFormat.L5X),
    ])
    def test_by_extension(self, name, expected):
        assert detect_format(name, "") == expected

    def test_extension_wins_over_content(self):
        assert detect_format("Project.L5K", "<?xml version='1.0'?>") == SourceFormat.L5K

    def test_by_content(self):
        assert detect_format("export.txt", '<?xml version="1.0"?>\n<RSLogix5000Content/>') == SourceFormat.L5X
        assert detect_format("export.txt", "  <RSLogix5000Content/>") == SourceFormat.L5X
        assert detect_format("export.txt", "CONTROLLER C\nEND_CONTROLLER") == SourceFormat.L5K


class TestLoadAndParse:
    """Test reading files from disk."""

    def test_load_utf8_with_bom(self, tmp_path):
        path = tmp_path / "bom.L5K"
        path.write_bytes(b"\xef\xbb\xbfCONTROLLER C\nEND_CONTROLLER")

        assert load_text(path).startswith("CONTROLLER")

    def test_load_latin1_fallback(self, tmp_path):
        path = tmp_path / "legacy.L5K"
        path.write_bytes(b'Description := "Temp \xb0C"')

        assert load_text(path) == 'Description := "Temp °C"'

    def test_parse_l5k_file(self, tmp_path, l5k_text):
        path = tmp_path / "Plant.L5K"
        path.write_text(l5k_text, encoding="utf-8")

        result = parse_file(path)
        assert result.source_format == SourceFormat.L5K
        assert result.metadata.project_name == "PlantCtrl"

    def test_parse_l5x_file(self, tmp_path, l5x_text):
        path = tmp_path / "Plant.L5X"
        path.write_text(l5x_text, encoding="utf-8")

        result = parse_file(str(path))
        assert result.source_format == SourceFormat.L5X
        assert [r.number for r in result.rungs] == [5, 2]

    def test_parse_file_propagates_fatal_error(self, tmp_path):
        path = tmp_path / "Bad.L5K"
        path.write_text("TAG\nEND_TAG\n", encoding="utf-8")

        with pytest.raises(MissingRootBlockError):
            parse_file(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            parse_file(tmp_path / "missing.L5K")

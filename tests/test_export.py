"""
Tests for JSON export and YAML configuration.
"""

import json

from logixparse.config import ExportConfig, load_config
from logixparse.export import (
    DEFAULT_COMPONENTS, ExportComponent, build_export_data, export_result_to_json
)
from logixparse.l5k_parser import parse_l5k


class TestExportResult:
    """Test exporting a ParseResult."""

    def setup_method(self):
        """Set up test fixtures."""
        self.result = parse_l5k("""CONTROLLER Ctrl (ProcessorType := "1756-L75", Major := 30)
    TAG
        A : BOOL := 0;
    END_TAG
    PROGRAM MainProgram
        ROUTINE MainRoutine
            N: XIC(A)OTE(B);
        END_ROUTINE
    END_PROGRAM
END_CONTROLLER
""")

    def test_export_all_components(self, tmp_path):
        output_path = tmp_path / "out" / "project.json"
        export_data = export_result_to_json(self.result, output_path)

        assert output_path.exists()
        with open(output_path, 'r') as f:
            written = json.load(f)

        for component in ExportComponent:
            assert component.value in written
        assert written["metadata"]["source_format"] == "L5K"
        assert written["metadata"]["project"]["project_name"] == "Ctrl"
        assert written["metadata"]["summary"]["rungs_count"] == 1
        assert export_data["tags"][0]["name"] == "A"

    def test_usage_type_exported_as_value(self, tmp_path):
        output_path = tmp_path / "refs.json"
        export_result_to_json(self.result, output_path, include=["tag_references"])

        with open(output_path, 'r') as f:
            written = json.load(f)

        assert [r["usage_type"] for r in written["tag_references"]] == ["read", "write"]
        assert "tags" not in written

    def test_unknown_component_ignored(self, caplog):
        export_data = build_export_data(self.result, ["tags", "bogus"])

        assert "tags" in export_data
        assert "bogus" not in export_data
        assert export_data["metadata"]["exported_components"] == ["tags"]
        assert "Unknown export component: bogus" in caplog.text

    def test_compact_output(self, tmp_path):
        output_path = tmp_path / "compact.json"
        export_result_to_json(self.result, output_path, include=["tags"], pretty_print=False)

        content = output_path.read_text()
        assert "\n" not in content.strip()
        assert json.loads(content)["tags"][0]["scope"] == "Controller"

    def test_to_dict_flattens_enums(self):
        data = self.result.to_dict()

        assert data["source_format"] == "L5K"
        assert data["tag_references"][1]["usage_type"] == "write"


class TestExportConfig:
    """Test YAML configuration loading."""

    def test_defaults(self):
        config = load_config(None)

        assert config.include == DEFAULT_COMPONENTS
        assert config.pretty_print is True
        assert config.log_level == "WARNING"

    def test_load_yaml(self, tmp_path):
        config_path = tmp_path / "export.yaml"
        config_path.write_text(
            "export:\n"
            "  include: [tags, rungs]\n"
            "  pretty_print: false\n"
            "logging:\n"
            "  level: info\n"
        )
        config = load_config(config_path)

        assert config.include == ["tags", "rungs"]
        assert config.pretty_print is False
        assert config.log_level == "INFO"

    def test_single_component_string(self, tmp_path):
        config_path = tmp_path / "export.yaml"
        config_path.write_text("export:\n  include: udts\n")

        assert load_config(config_path).include == ["udts"]

    def test_missing_file_falls_back(self, tmp_path, caplog):
        config = load_config(tmp_path / "missing.yaml")

        assert config == ExportConfig()
        assert "Could not load config" in caplog.text

    def test_invalid_yaml_falls_back(self, tmp_path):
        config_path = tmp_path / "bad.yaml"
        config_path.write_text("export: [unclosed\n")

        assert load_config(config_path) == ExportConfig()

    def test_non_mapping_falls_back(self, tmp_path):
        config_path = tmp_path / "list.yaml"
        config_path.write_text("- tags\n- rungs\n")

        assert load_config(config_path) == ExportConfig()

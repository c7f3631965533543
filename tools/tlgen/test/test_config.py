"""Tests for the generator configuration loader."""

import pytest

from tools.tlgen.config import (
    LAYOUT_CATEGORIZED,
    LAYOUT_SPLIT,
    GeneratorConfig,
    ValidationError,
    load_config,
    parse_config_yaml,
)


FULL_YAML = """\
package: org.acme.td
base: TdModel
layout: domain-mapping-split
mappers: false
classifier:
  min_cluster_size: 6
  anchors:
    Wallet: payment
  stop_words: [Internal]
"""


class TestDefaults:
    """Test the default configuration."""

    def test_defaults(self):
        config = GeneratorConfig()
        assert config.package_name == "com.example.tdlib"
        assert config.base_class == "TdObject"
        assert config.layout == LAYOUT_CATEGORIZED
        assert config.emit_mappers is True
        assert config.min_cluster_size == 4

    def test_empty_yaml(self):
        assert parse_config_yaml("") == GeneratorConfig()

    def test_no_file(self):
        assert load_config(None) == GeneratorConfig()


class TestParse:
    """Test YAML parsing into GeneratorConfig."""

    def test_package(self):
        assert parse_config_yaml(FULL_YAML).package_name == "org.acme.td"

    def test_base(self):
        assert parse_config_yaml(FULL_YAML).base_class == "TdModel"

    def test_layout(self):
        assert parse_config_yaml(FULL_YAML).layout == LAYOUT_SPLIT

    def test_mappers(self):
        assert parse_config_yaml(FULL_YAML).emit_mappers is False

    def test_classifier(self):
        config = parse_config_yaml(FULL_YAML)
        assert config.min_cluster_size == 6
        assert config.anchors == {"Wallet": "payment"}
        assert config.stop_words == ("Internal",)

    def test_partial(self):
        config = parse_config_yaml("base: Model\n")
        assert config.base_class == "Model"
        assert config.package_name == "com.example.tdlib"

    def test_override_skips_none(self):
        config = GeneratorConfig().override(package_name=None, base_class="Base")
        assert config.base_class == "Base"
        assert config.package_name == "com.example.tdlib"

    def test_load_file(self, tmp_path):
        path = tmp_path / "tlgen.yaml"
        path.write_text(FULL_YAML)
        assert load_config(str(path)).package_name == "org.acme.td"


class TestValidation:
    """Test rejection of malformed configuration."""

    def test_invalid_yaml(self):
        with pytest.raises(ValidationError, match="Invalid YAML"):
            parse_config_yaml("{{{{not yaml")

    def test_root_not_mapping(self):
        with pytest.raises(ValidationError, match="mapping"):
            parse_config_yaml("- a\n- b\n")

    def test_unknown_field(self):
        with pytest.raises(ValidationError, match="colour"):
            parse_config_yaml("colour: red\n")

    def test_unknown_layout(self):
        with pytest.raises(ValidationError, match="layout"):
            parse_config_yaml("layout: flat\n")

    def test_mappers_not_bool(self):
        with pytest.raises(ValidationError, match="mappers"):
            parse_config_yaml("mappers: maybe\n")

    def test_min_cluster_size_bool(self):
        with pytest.raises(ValidationError, match="min_cluster_size"):
            parse_config_yaml("classifier:\n  min_cluster_size: true\n")

    def test_min_cluster_size_zero(self):
        with pytest.raises(ValidationError, match="min_cluster_size"):
            parse_config_yaml("classifier:\n  min_cluster_size: 0\n")

    def test_anchors_not_mapping(self):
        with pytest.raises(ValidationError, match="anchors"):
            parse_config_yaml("classifier:\n  anchors: [a, b]\n")

    def test_missing_file(self, tmp_path):
        with pytest.raises(OSError):
            load_config(str(tmp_path / "missing.yaml"))

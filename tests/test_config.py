"""Tests for AnalysisConfig loading and overrides."""

import pytest

from depmap.config import AnalysisConfig, ConfigError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    monkeypatch.delenv("DEPMAP_CARGO", raising=False)
    monkeypatch.delenv("DEPMAP_TOOL_TIMEOUT", raising=False)


class TestDefaults:
    def test_defaults(self):
        config = AnalysisConfig()
        assert config.cargo == "cargo"
        assert config.tool_timeout == 120.0
        assert config.largest_limit == 10
        assert config.deep_threshold == 3
        assert config.enrich is False

    def test_env_overrides(self, monkeypatch):
        monkeypatch.setenv("DEPMAP_CARGO", "/opt/rust/bin/cargo")
        monkeypatch.setenv("DEPMAP_TOOL_TIMEOUT", "15")
        config = AnalysisConfig()
        assert config.cargo == "/opt/rust/bin/cargo"
        assert config.tool_timeout == 15.0

    def test_explicit_value_beats_env(self, monkeypatch):
        monkeypatch.setenv("DEPMAP_CARGO", "/opt/rust/bin/cargo")
        assert AnalysisConfig(cargo="cargo-nightly").cargo == "cargo-nightly"

    def test_bad_env_timeout(self, monkeypatch):
        monkeypatch.setenv("DEPMAP_TOOL_TIMEOUT", "soon")
        with pytest.raises(ConfigError, match="DEPMAP_TOOL_TIMEOUT"):
            AnalysisConfig()

    def test_negative_largest_limit(self):
        with pytest.raises(ConfigError, match="largest_limit"):
            AnalysisConfig(largest_limit=-1)


class TestLoad:
    def test_load_yaml(self, tmp_path):
        path = tmp_path / "depmap.yaml"
        path.write_text("deep_threshold: 5\nenrich: true\ntool_timeout: 30\nunknown_key: 1\n")
        config = AnalysisConfig.load(path)
        assert config.deep_threshold == 5
        assert config.enrich is True
        assert config.tool_timeout == 30

    def test_empty_file(self, tmp_path):
        path = tmp_path / "depmap.yaml"
        path.write_text("")
        assert AnalysisConfig.load(path) == AnalysisConfig()

    def test_missing_explicit_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            AnalysisConfig.load(tmp_path / "nope.yaml")

    def test_missing_default_file(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert AnalysisConfig.load() == AnalysisConfig()

    def test_default_file_picked_up(self, tmp_path, monkeypatch):
        (tmp_path / "depmap.yaml").write_text("largest_limit: 3\n")
        monkeypatch.chdir(tmp_path)
        assert AnalysisConfig.load().largest_limit == 3

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "depmap.yaml"
        path.write_text("deep_threshold: [1, 2\n")
        with pytest.raises(ConfigError, match="Failed to read"):
            AnalysisConfig.load(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "depmap.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigError, match="mapping"):
            AnalysisConfig.load(path)


class TestMerged:
    def test_none_overrides_ignored(self):
        base = AnalysisConfig(metadata_file="meta.json", largest_limit=4)
        merged = base.merged(metadata_file=None, largest_limit=None, enrich=True)
        assert merged.metadata_file == "meta.json"
        assert merged.largest_limit == 4
        assert merged.enrich is True
        assert base.enrich is False

    def test_round_trip_dict(self):
        config = AnalysisConfig(manifest_path="Cargo.toml", deep_threshold=2)
        assert AnalysisConfig.from_dict(config.to_dict()) == config

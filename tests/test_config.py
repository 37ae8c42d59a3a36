"""Tests for configuration loading and validation."""

import zipfile

import pytest

from guse_zip.config import AppConfig, load_config


class TestAppConfig:
    """Tests for AppConfig dataclass."""

    def test_default_config(self):
        """Test default configuration values."""
        config = AppConfig()

        assert config.archive.compression == "deflated"
        assert config.archive.compression_method == zipfile.ZIP_DEFLATED
        assert config.archive.compress_level is None
        assert config.output.overwrite is False
        assert config.logging.level == "WARNING"

    def test_from_yaml_missing_file(self, tmp_path):
        """Test loading from non-existent file returns defaults."""
        config = AppConfig.from_yaml(tmp_path / "nonexistent.yaml")

        assert config.archive.compression == "deflated"

    def test_from_yaml_valid_file(self, sample_config):
        """Test loading from valid YAML file."""
        config = AppConfig.from_yaml(sample_config)

        assert config.archive.compression_method == zipfile.ZIP_STORED
        assert config.output.overwrite is True
        assert config.logging.level == "DEBUG"

    def test_from_yaml_partial_config(self, tmp_path):
        """Test loading partial config preserves defaults."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("""
archive:
  compress_level: 9
""")
        config = AppConfig.from_yaml(config_file)

        # Changed value
        assert config.archive.compress_level == 9
        # Default values preserved
        assert config.archive.compression == "deflated"
        assert config.output.overwrite is False

    def test_unknown_keys_ignored(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("""
archive:
  color: blue
unknown_section:
  key: value
""")
        config = AppConfig.from_yaml(config_file)

        assert not hasattr(config.archive, "color")

    def test_empty_file(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        assert AppConfig.from_yaml(config_file).archive.compression == "deflated"

    def test_invalid_compression(self, tmp_path):
        """Test unknown compression names are rejected at load time."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("""
archive:
  compression: lzma
""")
        with pytest.raises(ValueError, match="Unknown compression 'lzma'"):
            AppConfig.from_yaml(config_file)

    def test_invalid_logging_level(self, tmp_path):
        """Test unknown logging levels are rejected at load time."""
        config_file = tmp_path / "config.yaml"
        config_file.write_text("""
logging:
  level: chatty
""")
        with pytest.raises(ValueError, match="Unknown logging level 'CHATTY'"):
            AppConfig.from_yaml(config_file)

    def test_logging_level_normalized(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("logging:\n  level: info\n")

        assert AppConfig.from_yaml(config_file).logging.level == "INFO"


class TestLoadConfig:
    """Tests for load_config search order."""

    def test_explicit_path(self, sample_config):
        config = load_config(sample_config)
        assert config.output.overwrite is True

    def test_config_dir(self, tmp_path, monkeypatch):
        """Test config.yaml in the config directory is found."""
        monkeypatch.chdir(tmp_path)
        config_dir = tmp_path / "conf"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("output:\n  overwrite: true\n")

        config = load_config(config_dir=config_dir)

        assert config.output.overwrite is True

    def test_env_config_dir(self, tmp_path, monkeypatch):
        """Test GUSEZIP_CONFIG_DIR overrides the default location."""
        monkeypatch.chdir(tmp_path)
        config_dir = tmp_path / "env_conf"
        config_dir.mkdir()
        (config_dir / "config.yaml").write_text("logging:\n  level: INFO\n")
        monkeypatch.setenv("GUSEZIP_CONFIG_DIR", str(config_dir))

        assert load_config().logging.level == "INFO"

    def test_cwd_fallback(self, tmp_path, monkeypatch):
        """Test ./gusezip.yaml is used when no config dir file exists."""
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("GUSEZIP_CONFIG_DIR", str(tmp_path / "missing"))
        (tmp_path / "gusezip.yaml").write_text("archive:\n  compression: stored\n")

        assert load_config().archive.compression == "stored"

    def test_defaults_when_nothing_found(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.setenv("GUSEZIP_CONFIG_DIR", str(tmp_path / "missing"))

        assert load_config() == AppConfig()

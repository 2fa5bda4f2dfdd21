"""
Unit tests for similarity/config.py
"""
import pytest
from pathlib import Path

from similarity.config import AnalysisConfig, load_config, parse_threshold_arg
from similarity.exceptions import ConfigError


class TestLoadConfig:
    """Tests for load_config function."""

    def test_defaults(self):
        """Defaults apply without a config file."""
        config = load_config()
        assert config.threshold == 80
        assert config.batch_size == 50
        assert config.whole_file_threshold == 95
        assert config.function_threshold == 90
        assert config.files[0].path == "src/turtlesoup.ts"
        assert "drawSquare" in config.function_names

    def test_yaml_kebab_case(self, tmp_path):
        """Kebab-case YAML keys map onto config fields."""
        path = tmp_path / "lab.yaml"
        path.write_text(
            "threshold: 70\n"
            "batch-size: 10\n"
            "files:\n"
            "  - src/main.cpp\n"
            "  - path: src/util.cpp\n"
            "    weight: 0.5\n"
            "reference-file: src/main.cpp\n"
            "function-names: [solve, readInput]\n",
            encoding="utf-8",
        )
        config = load_config(path)
        assert config.threshold == 70
        assert config.batch_size == 10
        assert [f.path for f in config.files] == ["src/main.cpp", "src/util.cpp"]
        assert config.files[1].weight == 0.5
        assert config.function_names == ["solve", "readInput"]
        assert config.paths == ["src/main.cpp", "src/util.cpp"]

    def test_env_override(self, monkeypatch):
        """Environment variables override file values."""
        monkeypatch.setenv("SIMILARITY_THRESHOLD", "65")
        monkeypatch.setenv("SIMILARITY_BATCH_SIZE", "5")
        config = load_config()
        assert config.threshold == 65
        assert config.batch_size == 5

    def test_missing_file(self, tmp_path):
        """A missing config file raises ConfigError."""
        with pytest.raises(ConfigError):
            load_config(tmp_path / "nope.yaml")

    def test_invalid_yaml(self, tmp_path):
        """Malformed YAML raises ConfigError."""
        path = tmp_path / "bad.yaml"
        path.write_text("threshold: [unclosed", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        """A YAML list instead of a mapping raises ConfigError."""
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_invalid_value(self, tmp_path):
        """Out-of-range values raise ConfigError."""
        path = tmp_path / "lab.yaml"
        path.write_text("batch-size: 0\n", encoding="utf-8")
        with pytest.raises(ConfigError):
            load_config(path)

    def test_shipped_sample_config(self):
        """The sample config in configs/ loads."""
        config = load_config(Path(__file__).parent.parent / "configs" / "turtle-soup.yaml")
        assert isinstance(config, AnalysisConfig)
        assert config.reference_file == "src/turtlesoup.ts"


class TestParseThresholdArg:
    """Tests for parse_threshold_arg function."""

    def test_valid(self):
        """A valid --threshold value is used."""
        assert parse_threshold_arg(["grade", "--threshold=70"]) == 70

    def test_missing(self):
        """Without the argument the default is used."""
        assert parse_threshold_arg(["grade"]) == 80

    @pytest.mark.parametrize("arg", ["--threshold=0", "--threshold=101", "--threshold=abc"])
    def test_invalid_falls_back(self, arg):
        """Invalid values fall back to the default."""
        assert parse_threshold_arg([arg]) == 80

    def test_custom_default(self):
        """The fallback default can be changed."""
        assert parse_threshold_arg([], default=70) == 70

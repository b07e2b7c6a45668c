"""
Unit tests for configuration loading.
Bad files and values must fall back to defaults with a warning.
"""

import json
import logging
from pathlib import Path

import pytest

from dna_evolve.config import (
    Config,
    EvolutionSettings,
    LoggingSettings,
    get_config,
)


@pytest.fixture(autouse=True)
def isolated(tmp_path, monkeypatch):
    """Run in an empty directory without DNA_EVOLVE_* variables"""
    monkeypatch.chdir(tmp_path)
    for name in [
        "DNA_EVOLVE_POPULATION_SIZE",
        "DNA_EVOLVE_SURVIVAL_CONSTANT",
        "DNA_EVOLVE_INDIVIDUAL_MUTATION_RATE",
        "DNA_EVOLVE_DNA_MUTATION_RATE",
        "DNA_EVOLVE_CROSSOVER_RATE",
        "DNA_EVOLVE_SEED",
        "DNA_EVOLVE_LOG_LEVEL",
        "DNA_EVOLVE_LOG_JSON",
    ]:
        monkeypatch.delenv(name, raising=False)
    return tmp_path


class TestProperties:
    """Java-style properties files."""

    def test_defaults_without_files(self):
        config = get_config()

        assert config.evolution == EvolutionSettings()
        assert config.evolution.population_size == 10
        assert config.evolution.survival_constant == 0.5
        assert config.source is None

    def test_loads_property_keys(self, tmp_path):
        path = tmp_path / "config.properties"
        path.write_text(
            "# demo settings\n"
            "popSize=25\n"
            "probDistConst=0.3\n"
            "individualMutationRate=0.4\n"
            "dnaMutationRate=0.05\n"
            "crossOverRate=0.9\n"
        )

        config = get_config()

        assert config.source == "config.properties"
        assert Path(config.source).resolve() == path.resolve()
        assert config.evolution == EvolutionSettings(
            population_size=25,
            survival_constant=0.3,
            individual_mutation_rate=0.4,
            dna_mutation_rate=0.05,
            crossover_rate=0.9,
        )

    def test_snake_case_keys_and_colon_separator(self, tmp_path):
        path = tmp_path / "evo.properties"
        path.write_text("population_size: 12\nseed = 99\n")

        config = get_config(path)

        assert config.evolution.population_size == 12
        assert config.evolution.seed == 99

    def test_malformed_values_keep_defaults(self, tmp_path, caplog):
        path = tmp_path / "config.properties"
        path.write_text(
            "popSize=lots\nprobDistConst=1.7\ndnaMutationRate=0.1\ncrossOverRate=\n"
        )

        with caplog.at_level(logging.WARNING, logger="dna_evolve.config"):
            config = get_config()

        assert config.evolution.population_size == 10
        assert config.evolution.survival_constant == 0.5
        assert config.evolution.crossover_rate == 1.0
        assert config.evolution.dna_mutation_rate == 0.1
        assert caplog.text.count("Keeping default") == 3

    def test_java_separators_and_comments(self, tmp_path):
        path = tmp_path / "config.properties"
        path.write_text(
            "! java comment\n"
            "popSize 4\n"
            "   # indented comment\n"
            "probDistConst=0.9\n"
            "dnaMutationRate :0.1\n"
            "crossOverRate\t0.25\n"
        )

        config = get_config()

        assert config.evolution.population_size == 4
        assert config.evolution.survival_constant == 0.9
        assert config.evolution.dna_mutation_rate == 0.1
        assert config.evolution.crossover_rate == 0.25

    def test_continuation_lines(self, tmp_path):
        (tmp_path / "config.properties").write_text("popSize=1\\\n    2\nseed=3\n")

        config = get_config()

        assert config.evolution.population_size == 12
        assert config.evolution.seed == 3

    def test_bad_line_only_loses_its_setting(self, tmp_path, caplog):
        (tmp_path / "config.properties").write_text(
            "popSize 4\n"
            "=0.3\n"
            "[evolution]\n"
            "probDistConst=0.9\n"
            "individualMutationRate=often\n"
        )

        with caplog.at_level(logging.WARNING, logger="dna_evolve.config"):
            config = get_config()

        assert config.source == "config.properties"
        assert config.evolution.population_size == 4
        assert config.evolution.survival_constant == 0.9
        assert config.evolution.individual_mutation_rate == 0.5
        assert "Keeping default" in caplog.text
        assert "Using defaults" not in caplog.text

    @pytest.mark.parametrize("size", ["0", "-4", "2.5"])
    def test_invalid_population_size(self, tmp_path, size):
        (tmp_path / "config.properties").write_text(f"popSize={size}\n")
        assert get_config().evolution.population_size == 10

    def test_unknown_keys_warn(self, tmp_path, caplog):
        (tmp_path / "config.properties").write_text("colour=blue\npopSize=4\n")

        with caplog.at_level(logging.WARNING, logger="dna_evolve.config"):
            config = get_config()

        assert config.evolution.population_size == 4
        assert "colour" in caplog.text

    def test_missing_explicit_file_warns(self, tmp_path, caplog):
        with caplog.at_level(logging.WARNING, logger="dna_evolve.config"):
            config = get_config(tmp_path / "absent.properties")

        assert config.evolution == EvolutionSettings()
        assert "not found" in caplog.text

    def test_explicit_file_wins(self, tmp_path):
        (tmp_path / "config.properties").write_text("popSize=4\n")
        explicit = tmp_path / "other.properties"
        explicit.write_text("popSize=6\n")

        assert get_config(explicit).evolution.population_size == 6


class TestJson:
    """JSON configuration files."""

    def test_save_and_load(self, tmp_path):
        config = Config(
            evolution=EvolutionSettings(population_size=30, crossover_rate=0.5),
            logging=LoggingSettings(level="DEBUG", json_output=True),
        )
        path = tmp_path / "nested" / "dna-evolve.json"
        config.save(path)

        loaded = Config.load(path)

        assert loaded.evolution == config.evolution
        assert loaded.logging == config.logging
        assert loaded.source == str(path)

    def test_default_json_file(self, tmp_path):
        (tmp_path / "dna-evolve.json").write_text(
            json.dumps({"evolution": {"population_size": 8}})
        )
        assert get_config().evolution.population_size == 8

    def test_properties_preferred_over_json(self, tmp_path):
        (tmp_path / "config.properties").write_text("popSize=4\n")
        (tmp_path / "dna-evolve.json").write_text(
            json.dumps({"evolution": {"population_size": 8}})
        )
        assert get_config().evolution.population_size == 4

    def test_invalid_json_falls_back(self, tmp_path, caplog):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with caplog.at_level(logging.WARNING, logger="dna_evolve.config"):
            config = get_config(path)

        assert config.evolution == EvolutionSettings()
        assert "Could not read config file" in caplog.text

    def test_non_object_json_falls_back(self, tmp_path):
        path = tmp_path / "list.json"
        path.write_text("[1, 2, 3]")
        assert get_config(path).evolution == EvolutionSettings()

    def test_bad_values_in_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(
            json.dumps(
                {
                    "evolution": {"survival_constant": 5, "dna_mutation_rate": 0.2},
                    "logging": {"level": "LOUD", "json_output": "yes"},
                }
            )
        )

        config = get_config(path)

        assert config.evolution.survival_constant == 0.5
        assert config.evolution.dna_mutation_rate == 0.2
        assert config.logging.level == "INFO"
        assert config.logging.json_output is True

    def test_to_dict(self):
        data = Config().to_dict()
        assert set(data) == {"evolution", "logging"}
        assert data["evolution"]["population_size"] == 10


class TestEnvOverrides:
    """DNA_EVOLVE_* environment variables."""

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        (tmp_path / "config.properties").write_text("popSize=4\n")
        monkeypatch.setenv("DNA_EVOLVE_POPULATION_SIZE", "40")
        monkeypatch.setenv("DNA_EVOLVE_CROSSOVER_RATE", "0.25")
        monkeypatch.setenv("DNA_EVOLVE_SEED", "7")
        monkeypatch.setenv("DNA_EVOLVE_LOG_LEVEL", "debug")
        monkeypatch.setenv("DNA_EVOLVE_LOG_JSON", "true")

        config = get_config()

        assert config.evolution.population_size == 40
        assert config.evolution.crossover_rate == 0.25
        assert config.evolution.seed == 7
        assert config.logging.level == "DEBUG"
        assert config.logging.json_output is True

    def test_invalid_env_values_ignored(self, monkeypatch, caplog):
        monkeypatch.setenv("DNA_EVOLVE_SURVIVAL_CONSTANT", "-1")
        monkeypatch.setenv("DNA_EVOLVE_LOG_JSON", "maybe")

        with caplog.at_level(logging.WARNING, logger="dna_evolve.config"):
            config = get_config()

        assert config.evolution.survival_constant == 0.5
        assert config.logging.json_output is False
        assert "DNA_EVOLVE_SURVIVAL_CONSTANT" in caplog.text

from pathlib import Path

from config import Config, get_migrations_dir, load_config, parse_config, write_config


class TestParseConfig:
    """Tests for parse_config."""

    def test_empty_config_uses_defaults(self):
        config = parse_config({})

        assert config.base_dir == Path.home() / "data" / "budgetr"
        assert config.db_path == Path.home() / "data" / "budgetr" / "db" / "budgetr.db"
        assert config.log_level == "INFO"
        assert config.owner_id == "local"
        assert config.enable_reset is False

    def test_sections_override_defaults(self, tmp_path):
        config = parse_config(
            {
                "base_dir": str(tmp_path),
                "enable_reset": True,
                "database": {"filename": "money.db"},
                "logging": {"level": "debug"},
                "owner": {"id": 42},
            }
        )

        assert config.db_path == tmp_path / "db" / "money.db"
        assert config.log_dir == tmp_path / "logs"
        assert config.log_level == "DEBUG"
        assert config.owner_id == "42"
        assert config.enable_reset is True

    def test_home_is_expanded(self):
        config = parse_config({"base_dir": "~/budgets"})

        assert config.base_dir == Path.home() / "budgets"

    def test_migrations_dir_ships_schema(self):
        assert (get_migrations_dir() / "001_initial_schema.sql").exists()


class TestLoadConfig:
    """Tests for load_config and write_config."""

    def test_missing_file_written_with_defaults(self, tmp_path, monkeypatch):
        config_path = tmp_path / "conf" / "budgetr.toml"
        monkeypatch.setenv("BUDGETR_CONFIG", str(config_path))

        config = load_config()

        assert config == Config.default()
        assert config_path.exists()

    def test_written_config_loads_back(self, tmp_path, monkeypatch, test_config):
        config_path = tmp_path / "budgetr.toml"
        monkeypatch.setenv("BUDGETR_CONFIG", str(config_path))
        test_config.enable_reset = True

        write_config(test_config, config_path)

        assert load_config() == test_config

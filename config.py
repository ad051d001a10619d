"""Configuration for Budgetr.

Settings live in ~/.config/budgetr.toml (or the file named by the
BUDGETR_CONFIG environment variable). A file with default values is written
the first time the CLI runs.

    base_dir = "~/data/budgetr"
    enable_reset = false

    [database]
    data_dir = "~/data/budgetr/db"
    filename = "budgetr.db"

    [logging]
    level = "INFO"
    log_dir = "~/data/budgetr/logs"

    [owner]
    id = "local"
"""

import os
from dataclasses import dataclass
from pathlib import Path

import tomllib
import tomli_w

CONFIG_ENV_VAR = "BUDGETR_CONFIG"
DEFAULT_OWNER_ID = "local"


def _default_base_dir() -> Path:
    return Path.home() / "data" / "budgetr"


@dataclass
class Config:
    """Application configuration.

    Attributes:
        base_dir: Root of everything Budgetr stores.
        db_data_dir: Directory holding the SQLite file.
        db_filename: SQLite file name.
        log_level: Level name for the budgetr logger.
        log_dir: Directory for the daily log files.
        owner_id: Identity every service reads and writes for.
        enable_reset: Whether scripts/reset.py may wipe base_dir.
    """

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    owner_id: str
    enable_reset: bool = False

    @property
    def db_path(self) -> Path:
        return self.db_data_dir / self.db_filename

    @classmethod
    def default(cls) -> "Config":
        return parse_config({})

    def to_dict(self) -> dict:
        """Get the TOML layout of this config."""
        return {
            "base_dir": str(self.base_dir),
            "enable_reset": self.enable_reset,
            "database": {"data_dir": str(self.db_data_dir), "filename": self.db_filename},
            "logging": {"level": self.log_level, "log_dir": str(self.log_dir)},
            "owner": {"id": self.owner_id},
        }


def get_config_path() -> Path:
    override = os.environ.get(CONFIG_ENV_VAR)
    if override:
        return Path(override).expanduser()
    return Path.home() / ".config" / "budgetr.toml"


def get_migrations_dir() -> Path:
    """Get the migrations directory, which always sits next to the code."""
    return Path(__file__).parent / "db" / "migrations"


def load_config() -> Config:
    """Load configuration, writing a default file first if there is none.

    Returns:
        Config object with loaded or default values.
    """
    config_path = get_config_path()

    if not config_path.exists():
        config = Config.default()
        write_config(config, config_path)
        return config

    with open(config_path, "rb") as f:
        return parse_config(tomllib.load(f))


def parse_config(data: dict) -> Config:
    """Build a Config from parsed TOML, filling in any missing keys.

    Paths default relative to base_dir, so setting only base_dir moves the
    database and logs with it. "~" is expanded in every path.

    Args:
        data: Dictionary as returned by tomllib.
    """
    base_dir = Path(data.get("base_dir", _default_base_dir())).expanduser()
    database = data.get("database", {})
    logging_section = data.get("logging", {})
    owner = data.get("owner", {})

    return Config(
        base_dir=base_dir,
        db_data_dir=Path(database.get("data_dir", base_dir / "db")).expanduser(),
        db_filename=database.get("filename", "budgetr.db"),
        log_level=str(logging_section.get("level", "INFO")).upper(),
        log_dir=Path(logging_section.get("log_dir", base_dir / "logs")).expanduser(),
        owner_id=str(owner.get("id", DEFAULT_OWNER_ID)),
        enable_reset=bool(data.get("enable_reset", False)),
    )


def write_config(config: Config, config_path: Path) -> None:
    config_path.parent.mkdir(parents=True, exist_ok=True)
    with open(config_path, "wb") as f:
        tomli_w.dump(config.to_dict(), f)

"""Configuration management for Centavo.

Reads configuration from ~/.config/centavo.toml and creates default config if needed.
"""

from pathlib import Path
from dataclasses import dataclass, field, fields, asdict
from typing import Optional
import logging
import tomllib
import tomli_w


@dataclass
class InferenceSettings:
    """Tunable constants for category inference.

    The defaults are product-tuned values; every one of them can be
    overridden from the [inference] section of the config file.
    """

    # Cascade thresholds
    user_learning_threshold: float = 0.85
    keyword_threshold: float = 0.75
    suggestion_threshold: float = 0.9

    # Learning store lookup
    lookup_limit: int = 5
    coverage_weight: float = 0.6
    strength_weight: float = 0.4
    strength_cap: float = 2.0

    # Reinforcement
    keyword_base_weight: float = 1.0
    keyword_step: float = 0.1
    merchant_base_weight: float = 1.5
    merchant_step: float = 0.2
    max_weight: float = 2.0

    # Decay
    decay_days: int = 90
    decay_factor: float = 0.9
    decay_floor: float = 0.5

    # Keyword/amount matcher
    whole_word_score: float = 0.3
    substring_score: float = 0.15
    merchant_bonus: float = 0.4
    amount_bonus: float = 0.2
    parent_keyword_score: float = 0.1
    max_keyword_confidence: float = 0.95
    amount_ranges_path: Optional[str] = None

    # Catalog and suggestions
    category_cache_ttl: int = 3600
    uncategorized_slug: str = "uncategorized"
    frequent_categories_limit: int = 3
    frequent_categories_days: int = 30

    @classmethod
    def from_dict(cls, data: dict) -> "InferenceSettings":
        """Build settings from a TOML table, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            logging.getLogger("centavo").warning(
                f"Ignoring unknown [inference] settings: {', '.join(sorted(unknown))}"
            )
        return cls(**{k: v for k, v in data.items() if k in known})


@dataclass
class Config:
    """Application configuration."""

    base_dir: Path
    db_data_dir: Path
    db_filename: str
    log_level: str
    log_dir: Path
    llm_enabled: bool = False
    llm_provider: Optional[str] = "openai"
    llm_openai_api_key: str = ""
    llm_openai_model: Optional[str] = "gpt-4o-mini"
    llm_timeout_seconds: float = 10.0
    inference: InferenceSettings = field(default_factory=InferenceSettings)

    @property
    def db_path(self) -> Path:
        """Get the full database path (data_dir/filename)."""
        return self.db_data_dir / self.db_filename

    @classmethod
    def default(cls) -> "Config":
        """Create a Config with default values."""
        base_dir = Path.home() / "data" / "centavo"
        return cls(
            base_dir=base_dir,
            db_data_dir=base_dir / "db",
            db_filename="centavo.db",
            log_level="INFO",
            log_dir=base_dir / "logs",
        )


def get_config_path() -> Path:
    """Get the path to the config file."""
    return Path.home() / ".config" / "centavo.toml"


def get_migrations_dir() -> Path:
    """Get the path to the migrations directory.

    This is always relative to the code location, not configurable.
    """
    return Path(__file__).parent / "db" / "migrations"


def load_config() -> Config:
    """Load configuration from file, creating default if it doesn't exist.

    Returns:
        Config object with loaded or default values.
    """
    config_path = get_config_path()

    if not config_path.exists():
        config = Config.default()
        _write_config(config)
        return config

    with open(config_path, "rb") as f:
        data = tomllib.load(f)

    return parse_config(data)


def parse_config(data: dict) -> Config:
    """Build a Config from parsed TOML data, filling in defaults.

    Args:
        data: Dictionary as returned by tomllib.

    Returns:
        Config object.
    """
    defaults = Config.default()
    base_dir = Path(data.get("base_dir", defaults.base_dir))

    db_config = data.get("database", {})
    db_data_dir = Path(db_config.get("data_dir", base_dir / "db"))
    db_filename = db_config.get("filename", defaults.db_filename)

    log_config = data.get("logging", {})
    log_level = log_config.get("level", defaults.log_level)
    log_dir = Path(log_config.get("log_dir", base_dir / "logs"))

    llm_config = data.get("llm", {})

    return Config(
        base_dir=base_dir,
        db_data_dir=db_data_dir,
        db_filename=db_filename,
        log_level=log_level,
        log_dir=log_dir,
        llm_enabled=llm_config.get("enabled", defaults.llm_enabled),
        llm_provider=llm_config.get("provider", defaults.llm_provider),
        llm_openai_api_key=llm_config.get("openai_api_key", ""),
        llm_openai_model=llm_config.get("openai_model", defaults.llm_openai_model),
        llm_timeout_seconds=float(
            llm_config.get("timeout_seconds", defaults.llm_timeout_seconds)
        ),
        inference=InferenceSettings.from_dict(data.get("inference", {})),
    )


def _write_config(config: Config) -> None:
    """Write config to the config file.

    Args:
        config: Config object to write.
    """
    config_path = get_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)

    # TOML has no null, so unset optional values are left out
    inference = {k: v for k, v in asdict(config.inference).items() if v is not None}

    data = {
        "base_dir": str(config.base_dir),
        "database": {
            "data_dir": str(config.db_data_dir),
            "filename": config.db_filename,
        },
        "logging": {
            "level": config.log_level,
            "log_dir": str(config.log_dir),
        },
        "llm": {
            "enabled": config.llm_enabled,
            "provider": config.llm_provider or "",
            "openai_api_key": config.llm_openai_api_key,
            "openai_model": config.llm_openai_model or "",
            "timeout_seconds": config.llm_timeout_seconds,
        },
        "inference": inference,
    }

    with open(config_path, "wb") as f:
        tomli_w.dump(data, f)

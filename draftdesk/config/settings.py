"""Configuration management using Pydantic."""
from pathlib import Path
from functools import lru_cache
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import yaml

from .constants import (
    DEFAULT_PROJECTS_DIR,
    DEFAULT_DICTIONARY_PATH,
    DEFAULT_AUTOSAVE_INTERVAL,
    DEFAULT_STATUS_FLASH_SECONDS,
    DEFAULT_THEME,
    SPELL_DISPLAY_LIMIT,
    TARGET_WIDTH,
    THEME_NAMES,
    USER_CONFIG_DIR,
)


class Settings(BaseSettings):
    """Application settings loaded from environment and config files."""

    model_config = SettingsConfigDict(
        env_prefix="DRAFTDESK_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_assignment=True
    )

    # Storage paths
    projects_dir: Path = Field(
        default=DEFAULT_PROJECTS_DIR,
        description="Directory that relative project file names resolve against"
    )
    dictionary_path: Path = Field(
        default=DEFAULT_DICTIONARY_PATH,
        description="Newline-delimited word list used by spellcheck"
    )

    # Timers
    autosave_interval: float = Field(
        default=DEFAULT_AUTOSAVE_INTERVAL,
        description="Seconds between autosaves (only once a file name is set)"
    )
    status_flash_seconds: float = Field(
        default=DEFAULT_STATUS_FLASH_SECONDS,
        description="Seconds a transient status message stays visible"
    )

    # Editor preferences
    theme: str = Field(
        default=DEFAULT_THEME,
        description="Color theme: dark, light or retro"
    )
    target_width: int = Field(
        default=TARGET_WIDTH,
        description="Reading width used by the centered view"
    )
    spell_display_limit: int = Field(
        default=SPELL_DISPLAY_LIMIT,
        description="Maximum number of unknown words listed by spellcheck"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Log level for the session log file"
    )
    verbose: bool = Field(
        default=False,
        description="Also echo log records to the console (CLI commands only)"
    )

    @field_validator('autosave_interval', 'status_flash_seconds')
    @classmethod
    def validate_positive(cls, v: float) -> float:
        """Timers must be strictly positive."""
        if v <= 0:
            raise ValueError("Interval must be greater than zero")
        return v

    @field_validator('target_width', 'spell_display_limit')
    @classmethod
    def validate_positive_int(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Value must be at least 1")
        return v

    @field_validator('theme')
    @classmethod
    def validate_theme(cls, v: str) -> str:
        """Validate theme name."""
        v = v.lower()
        if v not in THEME_NAMES:
            raise ValueError(f"Theme must be one of: {', '.join(THEME_NAMES)}")
        return v

    @field_validator('log_level')
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        v = v.upper()
        if v not in {'DEBUG', 'INFO', 'WARNING', 'ERROR'}:
            raise ValueError("Log level must be DEBUG, INFO, WARNING or ERROR")
        return v

    def resolve_path(self, name: str) -> Path:
        """Resolve a user supplied file name against the projects directory."""
        path = Path(name).expanduser()
        if not path.is_absolute():
            path = self.projects_dir / path
        return path

    def load_config_file(self, config_path: Path) -> None:
        """Load additional settings from a YAML config file."""
        if config_path.exists():
            with open(config_path) as f:
                config_data = yaml.safe_load(f) or {}

            # Update settings with config file data
            for key, value in config_data.items():
                if hasattr(self, key):
                    setattr(self, key, value)

    def save_config_file(self, config_path: Path) -> None:
        """Save current settings to a YAML config file."""
        config_data = {
            'projects_dir': str(self.projects_dir),
            'dictionary_path': str(self.dictionary_path),
            'autosave_interval': self.autosave_interval,
            'status_flash_seconds': self.status_flash_seconds,
            'theme': self.theme,
            'target_width': self.target_width,
            'spell_display_limit': self.spell_display_limit,
            'log_level': self.log_level,
            'verbose': self.verbose
        }

        config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(config_path, 'w') as f:
            yaml.dump(config_data, f, default_flow_style=False, sort_keys=False)


@lru_cache()
def get_settings() -> Settings:
    """Get cached settings instance."""
    settings = Settings()

    # Load user config if it exists
    user_config = USER_CONFIG_DIR / 'config.yaml'
    if user_config.exists():
        settings.load_config_file(user_config)

    # Load project config if it exists
    project_config = Path('config.yaml')
    if project_config.exists():
        settings.load_config_file(project_config)

    return settings

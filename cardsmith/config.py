from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment."""

    model_config = SettingsConfigDict(env_file=".env", env_prefix="CARDSMITH_")

    app_name: str = "Cardsmith"
    debug: bool = False
    log_level: str = "INFO"

    # Recents live under one well-known key in the host's key-value store
    recents_key: str = "cardsmith.recents"
    recents_capacity: int = 12
    recents_file: Path = Path.home() / ".cardsmith" / "recents.json"

    # Archive root folder when no project name is supplied
    export_root: str = "game-export"


settings = Settings()


# =============================================================================
# PROJECT FILE FORMAT
# =============================================================================

# Current schema version stamped on every save
SCHEMA_VERSION = 2

# Name given to imported projects whose meta carries none
IMPORTED_PROJECT_NAME = "Imported Project"

# Name given to fresh projects
UNTITLED_PROJECT_NAME = "Untitled Project"

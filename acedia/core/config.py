from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    # ═══════════════════════════════════════════════════
    # Application
    # ═══════════════════════════════════════════════════
    APP_NAME: str = "Acedia"
    VERSION: str = "0.1.0"
    LOG_LEVEL: str = "INFO"

    # ═══════════════════════════════════════════════════
    # Game Modes
    # ═══════════════════════════════════════════════════
    GAME_MODES_FILE: str = "game_modes.json"
    USE_GAME_MODE_VOTING: bool = True

    # Type name of the host's map voting component
    VOTING_HANDLER_CLASS: str = "KFMapVoteHandler"

    # ═══════════════════════════════════════════════════
    # Packages & Features
    # ═══════════════════════════════════════════════════
    PACKAGES: list[str] = []

    # feature name → config name, in enabling order
    AUTO_ENABLE_FEATURES: dict[str, str] = {}

    class Config:
        env_file = ".env"
        env_prefix = "ACEDIA_"
        extra = "ignore"


_settings: Settings | None = None


def get_settings() -> Settings:
    """
    Process-wide Settings instance.

    Read once from the environment (ACEDIA_* variables, optional .env file)
    and reused for every session the hosting process runs:

        settings = get_settings()
        if settings.USE_GAME_MODE_VOTING:
            ...
    """
    global _settings
    if not _settings:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached instance so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None

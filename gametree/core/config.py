"""
Settings for the two game variants, the worker host and logging.

Each group reads its own environment prefix (T3_, FIAR_, WORKER_, LOG_);
a .env file in the working directory is honored as well.
"""

from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


GameVariant = Literal["t3", "fiar"]


# ─────────────────────────────────────────────────────────────
# NESTED SETTINGS
# ─────────────────────────────────────────────────────────────


class TicTacToeSettings(BaseSettings):
    """Fixed 3x3 three-in-a-row configuration."""

    model_config = SettingsConfigDict(env_prefix="T3_", env_file=".env", extra="ignore")

    height: int = Field(default=3, ge=1)
    width: int = Field(default=3, ge=1)
    win_length: int = Field(default=3, ge=1)
    max_depth: int | None = Field(
        default=None,
        ge=1,
        description="Ply budget for expansion (None = enumerate everything)",
    )


class ConnectFourSettings(BaseSettings):
    """Gravity-drop four-in-a-row configuration."""

    model_config = SettingsConfigDict(env_prefix="FIAR_", env_file=".env", extra="ignore")

    height: int = Field(default=6, ge=1)
    width: int = Field(default=7, ge=1)
    win_length: int = Field(default=4, ge=1)
    max_depth: int | None = Field(
        default=6,
        ge=1,
        description="Ply budget for expansion; the full tree does not fit in memory",
    )


class WorkerSettings(BaseSettings):
    """Worker host configuration."""

    model_config = SettingsConfigDict(env_prefix="WORKER_", env_file=".env", extra="ignore")

    game: GameVariant = "t3"
    commit_best_move: bool = Field(
        default=True,
        description="Track the engine's own reply after answering get_best_move",
    )
    poll_interval: float = Field(
        default=0.001,
        ge=0.0,
        description="Seconds to wait for input when expansion is idle (serve)",
    )


class LogSettings(BaseSettings):
    """Logging configuration."""

    model_config = SettingsConfigDict(env_prefix="LOG_", env_file=".env", extra="ignore")

    level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    format: str = "%(asctime)s %(levelname)s %(name)s: %(message)s"


# ─────────────────────────────────────────────────────────────
# MAIN SETTINGS
# ─────────────────────────────────────────────────────────────


class Settings(BaseSettings):
    """
    All settings groups.

    Values from the process environment win over the .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    t3: TicTacToeSettings = Field(default_factory=TicTacToeSettings)
    fiar: ConnectFourSettings = Field(default_factory=ConnectFourSettings)
    worker: WorkerSettings = Field(default_factory=WorkerSettings)
    log: LogSettings = Field(default_factory=LogSettings)

    def variant(self, name: GameVariant) -> TicTacToeSettings | ConnectFourSettings:
        """Get the board settings for a game variant."""
        if name == "t3":
            return self.t3
        if name == "fiar":
            return self.fiar
        raise ValueError(f"Unknown game variant: {name}")


# ─────────────────────────────────────────────────────────────
# SINGLETON ACCESS
# ─────────────────────────────────────────────────────────────

_settings: Settings | None = None


def get_settings() -> Settings:
    """Settings loaded on first use and shared afterwards."""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings


def reset_settings() -> None:
    """Force the next get_settings() to reload (for testing)."""
    global _settings
    _settings = None

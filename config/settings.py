"""Application settings loaded from environment variables."""

from pathlib import Path

from pydantic_settings import BaseSettings

from config import CONFIG_DIR


class Settings(BaseSettings):
    """Application configuration from environment variables."""

    rules_dir: Path | None = None
    log_level: str = "INFO"
    auth_username: str = ""
    auth_password: str = ""

    @property
    def resolved_rules_dir(self) -> Path:
        """Directory holding rule sets; falls back to the bundled config/rules."""
        return self.rules_dir or CONFIG_DIR / "rules"

    model_config = {"env_file": ".env", "extra": "ignore"}


settings = Settings()

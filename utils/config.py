"""
Unified configuration management with Pydantic validation.
Loads and validates all environment variables.
"""

from pathlib import Path
from typing import Optional
from dotenv import load_dotenv
from pydantic import Field, field_validator, ValidationError
from pydantic_settings import BaseSettings

# Load environment variables
load_dotenv()


class Config(BaseSettings):
    """Application configuration with validation."""

    # ========================
    # Inspection API Configuration
    # ========================
    api_base_url: str = Field(
        default="https://hseappapi.vercel.app",
        alias="HSE_API_BASE_URL"
    )
    api_token: Optional[str] = Field(default=None, alias="HSE_API_TOKEN")
    api_timeout: int = Field(default=60, alias="API_TIMEOUT")

    # ========================
    # Image Transport Configuration
    # ========================
    max_upload_bytes: int = Field(default=3_000_000, alias="MAX_UPLOAD_BYTES")
    compress_max_side: int = Field(default=1600, alias="COMPRESS_MAX_SIDE")
    compress_quality: int = Field(default=70, alias="COMPRESS_QUALITY")
    upload_filename: str = Field(default="inspection", alias="UPLOAD_FILENAME")

    # ========================
    # History Configuration
    # ========================
    history_page_size: int = Field(default=10, alias="HISTORY_PAGE_SIZE")

    # ========================
    # Logging Configuration
    # ========================
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    log_dir: str = Field(default="logs", alias="LOG_DIR")
    log_to_file: bool = Field(default=False, alias="LOG_TO_FILE")

    # ========================
    # Development Configuration
    # ========================
    environment: str = Field(default="development", alias="ENVIRONMENT")

    # ========================
    # Validators
    # ========================

    @field_validator("api_base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate API base URL and strip trailing slash."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("HSE_API_BASE_URL must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("api_timeout", "history_page_size", "max_upload_bytes", "compress_max_side")
    @classmethod
    def validate_positive(cls, v: int, info) -> int:
        """Validate positive integer settings."""
        if v <= 0:
            raise ValueError(f"{info.field_name} must be positive")
        return v

    @field_validator("compress_quality")
    @classmethod
    def validate_quality(cls, v: int) -> int:
        """Validate JPEG quality."""
        if not 1 <= v <= 95:
            raise ValueError("COMPRESS_QUALITY must be between 1 and 95")
        return v

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate log level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL must be one of {valid_levels}")
        return v.upper()

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """Validate environment."""
        valid_envs = ["development", "staging", "production"]
        if v.lower() not in valid_envs:
            raise ValueError(f"ENVIRONMENT must be one of {valid_envs}")
        return v.lower()

    # ========================
    # Helper Properties
    # ========================

    def get_log_file(self) -> Optional[Path]:
        """Get log file path if file logging is enabled."""
        if not self.log_to_file:
            return None
        path = Path(self.log_dir)
        path.mkdir(parents=True, exist_ok=True)
        return path / "hse_client.log"

    class Config:
        env_file = ".env"
        case_sensitive = False
        extra = "ignore"
        populate_by_name = True


def get_config() -> Config:
    """
    Load and validate configuration.
    Exits if configuration is invalid.
    """
    try:
        return Config()

    except ValidationError as e:
        print("\n❌ Configuration Error:")
        print("=" * 60)
        for error in e.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            print(f"\n Field: {field}")
            print(f"  Error: {error['msg']}")
            if "input" in error:
                print(f"  Value: {error['input']}")
        print("\n" + "=" * 60)
        print("\nPlease check your .env file and fix the errors above.")
        print("See .env.example for reference.\n")
        raise SystemExit(1)


# Global configuration instance
config = get_config()

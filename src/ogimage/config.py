"""Configuration settings for the Open Graph image proxy."""

from pydantic_settings import BaseSettings

from ogimage import __version__


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Image output
    default_image_format: str = "png"
    image_quality: int = 80
    max_image_size_bytes: int = 15 * 1024 * 1024  # 15MB default

    # Edge cache lifetimes for fallback images
    not_found_ttl_seconds: int = 60 * 60 * 24
    error_ttl_seconds: int = 60 * 5

    # Outbound HTTP
    fetch_timeout_seconds: float = 10.0
    user_agent: str = f"ogimage/{__version__}"

    # Web server settings
    web_port: int = 8080
    web_host: str = "0.0.0.0"
    log_level: str = "INFO"

    model_config = {"env_prefix": "OGIMAGE_"}


settings = Settings()

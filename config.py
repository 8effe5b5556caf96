"""
Configuration management for the IPMA District Safety service
"""

import os
import secrets
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _optional_float(name: str):
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return None
    return float(value)


class Config:
    """Application configuration"""

    # Flask Configuration
    SECRET_KEY = os.getenv("SECRET_KEY", "dev_secret_key_change_in_production")
    DEBUG = os.getenv("FLASK_DEBUG", "True").lower() == "true"
    ENV = os.getenv("FLASK_ENV", "development")

    # IPMA open-data endpoints
    WARNINGS_URL = os.getenv(
        "WARNINGS_URL", "https://api.ipma.pt/open-data/forecast/warnings/warnings_www.json"
    )
    FORECAST_URL_TEMPLATE = os.getenv(
        "FORECAST_URL_TEMPLATE",
        "https://api.ipma.pt/open-data/forecast/meteorology/cities/daily/{forecast_area_id}.json",
    )

    # HTTP Configuration (None keeps the transport default)
    API_TIMEOUT = _optional_float("API_TIMEOUT")
    HTTP_POOL_CONNECTIONS = int(os.getenv("HTTP_POOL_CONNECTIONS", 4))
    HTTP_POOL_MAXSIZE = int(os.getenv("HTTP_POOL_MAXSIZE", 8))

    # Application Configuration
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
    LOG_FILE = os.getenv("LOG_FILE", "app.log")

    # CORS Configuration
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*").split(",")

    @classmethod
    def validate(cls):
        """Validate required configuration values"""
        if "{forecast_area_id}" not in cls.FORECAST_URL_TEMPLATE:
            raise ValueError(
                "FORECAST_URL_TEMPLATE must contain the {forecast_area_id} placeholder"
            )

        if cls.API_TIMEOUT is not None and cls.API_TIMEOUT <= 0:
            raise ValueError("API_TIMEOUT must be a positive number of seconds")

        # Check for insecure secret key in production
        if cls.ENV == "production" and cls.SECRET_KEY == "dev_secret_key_change_in_production":
            raise ValueError(
                "Cannot use default SECRET_KEY in production. Set a secure SECRET_KEY environment variable."
            )

        return True

    @classmethod
    def forecast_url(cls, forecast_area_id: str) -> str:
        """Build the daily forecast URL for a district forecast identifier"""
        return cls.FORECAST_URL_TEMPLATE.format(forecast_area_id=forecast_area_id)

    @classmethod
    def generate_secret_key(cls) -> str:
        """Generate a secure random secret key"""
        return secrets.token_hex(32)


Config.validate()

"""
Application settings and configuration.
"""

from functools import lru_cache
from typing import Optional
from pydantic_settings import BaseSettings
from dotenv import find_dotenv
from pydantic import ConfigDict

# Find .env file automatically
ENV_FILE = find_dotenv(usecwd=True) or ".env"

class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    api_title: str = "Invoice Tracker"
    api_description: str = "Small business invoice tracking with upload and text extraction"
    api_version: str = "1.0"
    environment: str = "development"
    debug: bool = False

    #Logging Configuration
    log_level: str = "INFO"
    log_file: str = "logs/invoice-tracker.log"
    log_to_console: bool = True

    # Invoice persistence
    repository_type: str = "in_memory"  # Options: in_memory, file
    local_storage_dir: str = ".invoice-data"
    invoices_storage_key: str = "invoices"

    # File storage
    storage_type: str = "in_memory"  # Options: in_memory, azure_blob
    blob_storage_account_url: str = ""
    blob_container_name: str = "invoices"

    # Text extraction
    extraction_type: str = "plain_text"  # Options: plain_text, azure_document_intelligence
    document_intelligence_endpoint: str = ""
    document_intelligence_locale: str = "en-US"

    # Business Rules
    default_currency: str = "USD"
    validate_categories: bool = True

    # API Configuration
    api_host: str = "0.0.0.0"
    api_port: int = 8000
    api_reload: bool = True
    cors_origins: list[str] = ["http://localhost:5173", "http://localhost:8080"]

    model_config = ConfigDict(
        str_max_length=200,
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
        )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached application settings.

    Returns:
        Settings instance
    """
    return Settings()

settings = get_settings()

from pydantic_settings import BaseSettings
from typing import List
import os


class Settings(BaseSettings):
    env: str = "dev"
    secret_key: str = "change_me_super_secret"
    jwt_algorithm: str = "HS256"
    access_token_expire_minutes: int = 30
    refresh_token_expire_minutes: int = 60 * 24 * 30
    reset_token_expire_minutes: int = 60
    database_url: str = "postgresql+psycopg2://precosmart:precosmart@db:5432/precosmart"
    organization_header: str = "X-Organization-ID"
    backend_cors_origins: str = "http://localhost:3000"
    log_level: str = "INFO"

    # Margins below this percentage are flagged as low in API output
    low_margin_threshold: float = 30.0

    # Default file for JsonFileSelectionStore
    selection_store_path: str = os.path.join(os.path.expanduser("~"), ".precosmart", "selection.json")

    port: int = int(os.getenv("PORT", "8000"))

    @property
    def cors_origins(self) -> List[str]:
        """Parse CORS origins from comma-separated string"""
        origins = self.backend_cors_origins
        return [origin.strip() for origin in origins.split(",") if origin.strip()]

    class Config:
        env_file = ".env"
        case_sensitive = False


settings = Settings()

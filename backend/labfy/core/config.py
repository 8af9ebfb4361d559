from functools import lru_cache
from typing import List, Optional
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Configurações globais do Labfy Contratos.
    Lê automaticamente variáveis do arquivo .env.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # Projeto
    project_name: str = "Labfy Contratos API"
    api_prefix: str = "/api"
    debug: bool = False

    # Banco de dados
    database_url: str = "sqlite:///./dev.db"

    # Armazenamento local
    labfy_storage: str = "_storage"
    public_base_url: str = "http://localhost:8000"

    # Armazenamento S3 / MinIO
    s3_endpoint_url: Optional[str] = None
    s3_access_key: Optional[str] = None
    s3_secret_key: Optional[str] = None
    s3_region: str = "us-east-1"
    s3_public_url: Optional[str] = None
    bucket_templates: str = "templates"

    # Templates de contrato
    template_max_bytes: int = 10 * 1024 * 1024

    # Contratos
    contrato_strict_transitions: bool = False

    # CORS
    allowed_origins: List[str] = [
        "http://localhost:5173",
        "http://127.0.0.1:5173",
        "http://localhost:3000",
        "http://127.0.0.1:3000",
    ]

    # Logs
    log_dir: str = "log"

    def s3_enabled(self) -> bool:
        return bool(self.s3_endpoint_url and self.s3_access_key and self.s3_secret_key)

    def resolved_public_storage_url(self) -> str:
        """URL pública base usada nos locators do armazenamento local."""
        base = (self.public_base_url or "").rstrip("/")
        return f"{base}/storage" if base else "/storage"


@lru_cache
def get_settings() -> Settings:
    """Retorna a instância de configurações globais (cacheada)."""
    return Settings()


settings = get_settings()

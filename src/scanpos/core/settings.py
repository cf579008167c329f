"""Configurações Pydantic Settings para a aplicação."""
from typing import Literal
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field

class Settings(BaseSettings):
    """Configurações da aplicação. Carrega de env e .env (prefixo SP_)."""
    model_config = SettingsConfigDict(env_file=".env", env_prefix="SP_", case_sensitive=False)

    # Flask
    flask_debug: bool = Field(default=False)
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)

    # Persistência
    storage_backend: Literal["sql", "memory"] = Field(default="sql")
    database_url: str = Field(default="sqlite:///scanpos.db", description="URL do banco, ex: postgresql+psycopg://user:pass@db:5432/app")
    auto_create_schema: bool = Field(default=True, description="Cria a tabela kv_entries no boot (dev/sqlite)")

    # Carrinho / payload
    cart_key: str = Field(default="scanned_cart", min_length=1, max_length=128)
    payload_delimiter: str = Field(default="|", min_length=1)

    # Logs
    log_level: int = Field(default=20)

"""
Configuracion central del comando.
Gestiona variables de entorno y valores por defecto.
La URL de base de datos se puede especificar completa o por componentes.
"""
from typing import Literal

from pydantic_settings import BaseSettings
from pydantic import Field, computed_field
from sqlalchemy.engine import URL


class Settings(BaseSettings):
    """
    Clase de configuracion de la transferencia.
    Lee variables de entorno (o .env) y proporciona valores por defecto.
    
    - DATABASE_URL tiene prioridad sobre los componentes separados.
    - IMPORT_STRATEGY: 'reset' (drop + inserts concurrentes, no atomico)
      o 'swap' (tabla staging + rename, atomico).
    """
    
    DEBUG: bool = Field(default=False)
    
    # Base de datos - Componentes separados
    DATABASE_HOST: str = Field(default="localhost")
    DATABASE_PORT: int = Field(default=5432)
    DATABASE_USER: str = Field(default="")
    DATABASE_PASSWORD: str = Field(default="")
    DATABASE_NAME: str = Field(default="IronHat")
    
    # Base de datos - URL completa (override de componentes si se proporciona)
    DATABASE_URL: str = Field(default="")
    DB_POOL_SIZE: int = Field(default=5)
    DB_MAX_OVERFLOW: int = Field(default=10)
    
    # Import
    IMPORT_STRATEGY: Literal["reset", "swap"] = Field(default="reset")
    IMPORT_CONCURRENCY: int = Field(default=5)
    CSV_ENCODING: str = Field(default="utf-8")
    
    # Logging (LOG_FILE vacio = solo stderr)
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="")

    @computed_field
    @property
    def uses_url_override(self) -> bool:
        """Indica si DATABASE_URL reemplaza a los componentes separados."""
        return bool(self.DATABASE_URL)

    @computed_field
    @property
    def effective_database_url(self) -> str:
        """
        Retorna la URL de base de datos efectiva.
        Si DATABASE_URL esta definida, la usa directamente.
        Si no, construye la URL desde los componentes individuales
        (usuario y contraseña escapados).
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return URL.create(
            "postgresql+asyncpg",
            username=self.DATABASE_USER or None,
            password=self.DATABASE_PASSWORD or None,
            host=self.DATABASE_HOST,
            port=self.DATABASE_PORT,
            database=self.DATABASE_NAME,
        ).render_as_string(hide_password=False)

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


# Instancia global de configuración
settings = Settings()

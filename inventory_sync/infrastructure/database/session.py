"""
Gestión de la conexión a la base de datos.

La conexión es un objeto explícito (AsyncEngine) que se pasa al
repositorio; no hay estado global del proceso.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from loguru import logger
from sqlalchemy import text
from sqlalchemy.engine import URL, make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine

from inventory_sync.core.config import Settings
from inventory_sync.shared.exceptions.sync import StorageConnectionException


@dataclass(frozen=True)
class StorageCredentials:
    """
    Credenciales resueltas para abrir la sesión.

    Si `url` viene definida reemplaza a los componentes separados.
    """

    username: str
    password: str
    host: str = "localhost"
    port: int = 5432
    database: str = "IronHat"
    url: Optional[str] = None

    def sqlalchemy_url(self) -> URL:
        if self.url:
            return make_url(self.url)
        return URL.create(
            "postgresql+asyncpg",
            username=self.username,
            password=self.password,
            host=self.host,
            port=self.port,
            database=self.database,
        )

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        *,
        username: Optional[str] = None,
        password: Optional[str] = None,
    ) -> "StorageCredentials":
        # Sin overrides del CLI se usa la URL efectiva de la configuracion.
        use_settings_url = settings.uses_url_override or (username is None and password is None)
        return cls(
            username=username or settings.DATABASE_USER,
            password=password if password is not None else settings.DATABASE_PASSWORD,
            host=settings.DATABASE_HOST,
            port=settings.DATABASE_PORT,
            database=settings.DATABASE_NAME,
            url=settings.effective_database_url if use_settings_url else None,
        )


def _create_engine_args(url: URL, settings: Optional[Settings]) -> dict:
    """
    Construye los argumentos del engine segun el tipo de base de datos.
    PostgreSQL usa pool de conexiones, SQLite no lo soporta.
    """
    args = {
        "echo": bool(settings and settings.DEBUG),
        "future": True,
    }
    
    # Configuracion de pool solo para PostgreSQL
    if url.get_backend_name() == "postgresql" and settings is not None:
        args.update({
            "pool_size": settings.DB_POOL_SIZE,
            "max_overflow": settings.DB_MAX_OVERFLOW,
            "pool_pre_ping": True,  # Verifica conexion antes de usar
        })
    
    return args


async def connect(
    credentials: StorageCredentials,
    settings: Optional[Settings] = None,
) -> AsyncEngine:
    """
    Abre el engine y valida la sesión con un SELECT 1.

    Raises:
        StorageConnectionException: si no se puede autenticar/conectar
    """
    try:
        url = credentials.sqlalchemy_url()
        engine = create_async_engine(url, **_create_engine_args(url, settings))
    except SQLAlchemyError as e:
        raise StorageConnectionException(f"URL de base de datos inválida: {e}") from e

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as e:
        await engine.dispose()
        raise StorageConnectionException(
            f"No se pudo conectar a la base de datos: {e}",
            details={"url": url.render_as_string(hide_password=True)},
        ) from e

    logger.info(f"Conexión establecida: {url.render_as_string(hide_password=True)}")
    return engine


async def disconnect(engine: AsyncEngine) -> None:
    """Cierra las conexiones de la base de datos."""
    await engine.dispose()

"""
Configuracion central del sincronizador.
Gestiona variables de entorno y configuraciones globales.

Solo contiene valores de infraestructura (credenciales, base de datos,
notificaciones, logging). Lo que cada job necesita para sincronizar
(mapa de estados, source_id, claves naturales) se pasa explicitamente
en un SyncJobConfig al construir el job.
"""
from typing import Optional

from pydantic import Field, computed_field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Clase de configuracion de la aplicacion.
    Lee variables de entorno y proporciona valores por defecto.

    - DATABASE_URL se puede especificar completa o por componentes
    - Las credenciales de Unleashed son obligatorias solo para correr jobs reales
    """

    # Configuracion de la aplicacion
    APP_NAME: str = Field(default="Inventory Sync")
    APP_VERSION: str = Field(default="1.0.0")
    DEBUG: bool = Field(default=False)
    ENVIRONMENT: str = Field(default="production")

    # Base de datos - Componentes separados
    DATABASE_HOST: str = Field(default="localhost")
    DATABASE_PORT: int = Field(default=5432)
    DATABASE_USER: str = Field(default="shop_user")
    DATABASE_PASSWORD: str = Field(default="shop_pass")
    DATABASE_NAME: str = Field(default="shop_db")

    # Base de datos - URL completa (override de componentes si se proporciona)
    DATABASE_URL: str = Field(default="")

    # Unleashed API
    UNLEASHED_API_URL: str = Field(default="https://api.unleashedsoftware.com")
    UNLEASHED_API_ID: str = Field(default="")
    UNLEASHED_API_KEY: str = Field(default="")
    UNLEASHED_CLIENT_TYPE: str = Field(default="inventory-sync")
    UNLEASHED_TIMEOUT_S: int = Field(default=30)
    UNLEASHED_MAX_RETRIES: int = Field(default=4)
    UNLEASHED_MIN_BACKOFF_S: float = Field(default=0.8)
    UNLEASHED_MAX_BACKOFF_S: float = Field(default=20.0)
    # Scoping por defecto de Sales Orders (vacio = sin filtro)
    UNLEASHED_SOURCE_ID: str = Field(default="")

    # Zona horaria en la que se registran los watermarks
    WATERMARK_TIMEZONE: str = Field(default="UTC")

    # Notificaciones
    ADMIN_EMAIL: str = Field(default="")
    EMAIL_FROM: str = Field(default="")
    SMTP_HOST: str = Field(default="localhost")
    SMTP_PORT: int = Field(default=25)
    SMTP_USER: str = Field(default="")
    SMTP_PASSWORD: str = Field(default="")
    SMTP_USE_TLS: bool = Field(default=False)
    TELEGRAM_BOT_TOKEN: str = Field(default="")
    TELEGRAM_CHAT_ID: str = Field(default="")

    # Logging
    LOG_LEVEL: str = Field(default="INFO")
    LOG_FILE: str = Field(default="logs/inventory_sync.log")

    @computed_field
    @property
    def effective_database_url(self) -> str:
        """
        Retorna la URL de base de datos efectiva.
        Si DATABASE_URL esta definida, la usa directamente.
        Si no, construye la URL desde los componentes individuales.
        """
        if self.DATABASE_URL:
            return self.DATABASE_URL
        return (
            f"postgresql+psycopg://{self.DATABASE_USER}:{self.DATABASE_PASSWORD}"
            f"@{self.DATABASE_HOST}:{self.DATABASE_PORT}/{self.DATABASE_NAME}"
        )

    @computed_field
    @property
    def effective_email_from(self) -> Optional[str]:
        """Remitente de los reportes; si no se define se usa ADMIN_EMAIL."""
        return self.EMAIL_FROM or self.ADMIN_EMAIL or None

    @computed_field
    @property
    def default_source_id(self) -> Optional[str]:
        """source_id por defecto para las ordenes (None si no se configuro)."""
        return self.UNLEASHED_SOURCE_ID or None

    class Config:
        """Configuracion de Pydantic."""
        env_file = ".env"
        case_sensitive = True
        extra = "ignore"  # Ignorar campos extra del .env


# Instancia global de configuracion
settings = Settings()

"""
Configuración centralizada de la aplicación.

Este módulo maneja todas las variables de entorno y configuraciones
de la aplicación usando Pydantic Settings para validación automática.
"""

from functools import lru_cache
from typing import List, Optional

import pytz
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings

from app.version import VERSION


class Settings(BaseSettings):
    """
    Configuración de la aplicación usando Pydantic Settings.

    Todas las configuraciones se cargan desde variables de entorno
    con valores por defecto apropiados para desarrollo.
    """

    # === CONFIGURACIÓN BÁSICA DE LA APP ===
    APP_NAME: str = "Shopify Bundle Orders"
    APP_VERSION: str = VERSION
    ENVIRONMENT: str = Field(default="development")
    DEBUG: bool = Field(default=True)

    # === CONFIGURACIÓN DEL SERVIDOR ===
    HOST: str = Field(default="0.0.0.0")
    PORT: int = Field(default=3000)
    WORKERS: int = Field(default=1)
    LOG_LEVEL: str = Field(default="INFO")

    # === CONFIGURACIÓN DE SEGURIDAD ===
    ALLOWED_HOSTS: Optional[List[str]] = Field(default=None)

    # === CONFIGURACIÓN DE SHOPIFY ===
    SHOPIFY_SHOP_URL: str = Field(default="your-shop.myshopify.com")
    SHOPIFY_ACCESS_TOKEN: str = Field(default="your-access-token")
    SHOPIFY_API_VERSION: str = Field(default="2025-04")
    SHOPIFY_MAX_RETRIES: int = Field(default=3)
    # Timeout total por request en segundos
    SHOPIFY_REQUEST_TIMEOUT: int = Field(default=30)

    # === CONFIGURACIÓN DEL LISTADO DE PEDIDOS ===
    ORDERS_PAGE_SIZE: int = Field(default=50)
    LINE_ITEMS_PER_ORDER: int = Field(default=100)
    # Límite de páginas recorridas por una exportación completa
    EXPORT_MAX_PAGES: int = Field(default=20)
    DISPLAY_TIMEZONE: str = Field(default="Europe/Paris")

    # === CONFIGURACIÓN DE LOGGING ===
    LOG_FILE_PATH: Optional[str] = Field(default="logs/app.log")
    LOG_MAX_SIZE_MB: int = Field(default=10)
    LOG_BACKUP_COUNT: int = Field(default=5)
    SLOW_REQUEST_THRESHOLD: float = Field(default=5.0)

    # === CONFIGURACIÓN DE DOCUMENTACIÓN ===
    ENABLE_DOCS: bool = Field(default=True)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": True,
        "extra": "allow",
    }

    @field_validator("ALLOWED_HOSTS", mode="before")
    @classmethod
    def parse_allowed_hosts(cls, v):
        """Parsea ALLOWED_HOSTS como lista separada por comas."""
        if isinstance(v, str):
            return [host.strip() for host in v.split(",") if host.strip()]
        return v

    @field_validator("SHOPIFY_SHOP_URL")
    @classmethod
    def validate_shopify_url(cls, v):
        """Valida que la URL de Shopify tenga el formato correcto."""
        if v in ["your-shop.myshopify.com"]:
            return v
        if not v.rstrip("/").endswith(".myshopify.com"):
            raise ValueError("SHOPIFY_SHOP_URL debe terminar en .myshopify.com")
        return v.rstrip("/")

    @field_validator("ORDERS_PAGE_SIZE", "LINE_ITEMS_PER_ORDER")
    @classmethod
    def validate_connection_size(cls, v):
        """Shopify acepta como máximo 250 nodos por conexión."""
        if not 1 <= v <= 250:
            raise ValueError("El tamaño de página debe estar entre 1 y 250")
        return v

    @field_validator("EXPORT_MAX_PAGES")
    @classmethod
    def validate_export_max_pages(cls, v):
        """Valida que el límite de páginas sea positivo."""
        if v < 1:
            raise ValueError("EXPORT_MAX_PAGES debe ser mayor que 0")
        return v

    @field_validator("DISPLAY_TIMEZONE")
    @classmethod
    def validate_display_timezone(cls, v):
        """Valida la zona horaria contra la base de datos de pytz."""
        if v not in pytz.all_timezones_set:
            raise ValueError(f"DISPLAY_TIMEZONE desconocida: {v}")
        return v

    @field_validator("LOG_LEVEL")
    @classmethod
    def validate_log_level(cls, v):
        """Valida que el nivel de log sea válido."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if v.upper() not in valid_levels:
            raise ValueError(f"LOG_LEVEL debe ser uno de: {valid_levels}")
        return v.upper()

    @field_validator("ENVIRONMENT")
    @classmethod
    def validate_environment(cls, v):
        """Valida que el entorno sea válido."""
        valid_envs = ["development", "staging", "production", "testing"]
        if v.lower() not in valid_envs:
            raise ValueError(f"ENVIRONMENT debe ser uno de: {valid_envs}")
        return v.lower()

    @field_validator("PORT")
    @classmethod
    def validate_port(cls, v):
        """Valida que el puerto esté en rango válido."""
        if not 1 <= v <= 65535:
            raise ValueError("PORT debe estar entre 1 y 65535")
        return v

    @property
    def is_production(self) -> bool:
        """Verifica si está en entorno de producción."""
        return self.ENVIRONMENT == "production"

    @property
    def shop_domain(self) -> str:
        """Dominio de la tienda sin esquema (ej: mi-tienda.myshopify.com)."""
        return self.SHOPIFY_SHOP_URL.replace("https://", "").replace("http://", "").rstrip("/")

    @property
    def shopify_graphql_url(self) -> str:
        """Genera URL del endpoint GraphQL de Shopify Admin."""
        return f"https://{self.shop_domain}/admin/api/{self.SHOPIFY_API_VERSION}/graphql.json"

    def get_shopify_headers(self) -> dict:
        """
        Obtiene headers para requests a Shopify.

        Returns:
            dict: Headers de autenticación
        """
        return {
            "X-Shopify-Access-Token": self.SHOPIFY_ACCESS_TOKEN,
            "Content-Type": "application/json",
            "User-Agent": f"{self.APP_NAME}/{self.APP_VERSION}",
        }


@lru_cache()
def get_settings() -> Settings:
    """
    Obtiene instancia singleton de configuración.

    Usa LRU cache para evitar recrear la configuración
    múltiples veces durante la ejecución.

    Returns:
        Settings: Instancia de configuración
    """
    return Settings()


def get_environment_info() -> dict:
    """
    Obtiene información del entorno actual.

    Returns:
        dict: Información del entorno
    """
    settings = get_settings()

    return {
        "app_name": settings.APP_NAME,
        "version": settings.APP_VERSION,
        "environment": settings.ENVIRONMENT,
        "debug": settings.DEBUG,
        "is_production": settings.is_production,
        "shop": settings.shop_domain,
        "api_version": settings.SHOPIFY_API_VERSION,
        "orders_page_size": settings.ORDERS_PAGE_SIZE,
        "log_level": settings.LOG_LEVEL,
    }

"""
Gestión del ciclo de vida de la aplicación FastAPI.

Este módulo maneja los eventos de startup y shutdown de la aplicación:
configuración de logging, verificación de configuración y apertura/cierre
del cliente de pedidos de Shopify.
"""

import logging
import sys
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.core.config import get_environment_info, get_settings
from app.core.logging_config import setup_logging
from app.db.shopify_clients.order_client import ShopifyOrderClient
from app.utils.error_handler import AppException, ErrorCode
from app.version import version_string

settings = get_settings()
logger = logging.getLogger(__name__)

PLACEHOLDER_VALUES = {"your-shop.myshopify.com", "your-access-token"}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Gestión del ciclo de vida de la aplicación.

    El cliente de pedidos queda en ``app.state.order_client`` para las
    dependencias de los endpoints.

    Args:
        app: Instancia de FastAPI
    """
    # === STARTUP ===
    setup_logging()
    logger.info(f"🚀 Iniciando {settings.APP_NAME} {version_string()} ({settings.ENVIRONMENT})")
    logger.debug(f"Entorno: {get_environment_info()}")

    try:
        startup_verify_configuration()
        app.state.order_client = await startup_initialize_order_client()
        logger.info("🎉 Aplicación iniciada correctamente")

    except AppException as e:
        logger.error(f"❌ Error durante el startup: {e}")
        sys.exit(1)

    # === YIELD (aplicación corriendo) ===
    yield

    # === SHUTDOWN ===
    logger.info(f"🛑 Cerrando {settings.APP_NAME}...")
    await shutdown_close_order_client(app)
    logger.info("👋 Aplicación cerrada correctamente")


# === FUNCIONES DE STARTUP ===


def startup_verify_configuration() -> None:
    """
    Verifica que las credenciales de Shopify estén configuradas.

    Raises:
        AppException: Si faltan credenciales en producción
    """
    missing = [
        name
        for name in ("SHOPIFY_SHOP_URL", "SHOPIFY_ACCESS_TOKEN")
        if not getattr(settings, name, None) or getattr(settings, name) in PLACEHOLDER_VALUES
    ]

    if not missing:
        logger.info("✅ Configuración verificada")
        return

    if settings.is_production:
        raise AppException(
            f"Missing Shopify configuration: {', '.join(missing)}",
            error_code=ErrorCode.CONFIGURATION_ERROR,
            details={"missing": missing},
        )
    logger.warning(f"⚠️ Variables sin configurar (modo {settings.ENVIRONMENT}): {', '.join(missing)}")


async def startup_initialize_order_client() -> ShopifyOrderClient:
    """
    Abre la sesión HTTP del cliente de pedidos.

    La conexión con Shopify solo se prueba en producción.
    """
    client = ShopifyOrderClient()
    await client.initialize(test_connection=settings.is_production)
    logger.info(f"✅ Cliente de pedidos listo: {client!r}")
    return client


# === FUNCIONES DE SHUTDOWN ===


async def shutdown_close_order_client(app: FastAPI) -> None:
    client = getattr(app.state, "order_client", None)
    if client is not None:
        await client.close()
        app.state.order_client = None

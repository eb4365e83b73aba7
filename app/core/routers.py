"""
Configuración centralizada de routers para la aplicación FastAPI.

Este módulo se encarga de registrar los routers de la API y los
endpoints base (raíz, ping, health, versión).
"""

import logging
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.api.v1.endpoints.orders import router as orders_router
from app.core.config import get_settings
from app.version import version_info

settings = get_settings()
logger = logging.getLogger(__name__)


def create_root_endpoints(app: FastAPI) -> None:
    """
    Crea endpoints raíz de la aplicación.

    Args:
        app: Instancia de FastAPI
    """

    @app.get("/", tags=["Root"], summary="API Info")
    async def root():
        """
        Endpoint raíz que proporciona información básica de la API.

        Returns:
            Dict con información de la API
        """
        return {
            "message": settings.APP_NAME,
            "description": "Listado, detalle y exportación CSV de pedidos Shopify agrupados por bundle",
            "version": settings.APP_VERSION,
            "status": "running",
            "documentation": "/docs" if (settings.DEBUG or settings.ENABLE_DOCS) else "disabled",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "endpoints": {
                "health": "/health",
                "orders": "/api/v1/orders",
                "export": "/api/v1/orders/export",
            },
        }

    @app.get("/ping", tags=["Root"], summary="Simple Ping")
    async def ping():
        """Endpoint simple para verificar que la API responde."""
        return {"message": "pong", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/version", tags=["Root"], summary="Version Info")
    async def get_version_info():
        return {
            **version_info(),
            "name": settings.APP_NAME,
            "environment": settings.ENVIRONMENT,
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }


def create_health_endpoints(app: FastAPI) -> None:
    """
    Crea endpoints de health check.

    Args:
        app: Instancia de FastAPI
    """

    @app.get("/health", tags=["Health"], summary="Health Check")
    async def health_check(request: Request):
        """
        Health check rápido: verifica que el cliente de Shopify tenga sesión abierta.

        Returns:
            JSONResponse 200 si está sano, 503 si no
        """
        client = getattr(request.app.state, "order_client", None)
        shopify_ready = client is not None and getattr(client, "session", None) is not None

        return JSONResponse(
            status_code=200 if shopify_ready else 503,
            content={
                "status": "healthy" if shopify_ready else "unhealthy",
                "version": settings.APP_VERSION,
                "timestamp": datetime.now(timezone.utc).isoformat(),
                "services": {"shopify": "ready" if shopify_ready else "not_initialized"},
                "environment": settings.ENVIRONMENT,
            },
        )

    @app.get("/health/liveness", tags=["Health"], summary="Liveness Probe")
    async def liveness_probe():
        """Liveness probe: la aplicación está ejecutándose."""
        return {"status": "alive", "timestamp": datetime.now(timezone.utc).isoformat()}


def configure_api_v1_routers(app: FastAPI) -> None:
    """
    Configura los routers de la API v1.

    Args:
        app: Instancia de FastAPI
    """
    logger.info("🔧 Configurando routers de API v1...")

    app.include_router(
        orders_router,
        prefix="/api/v1/orders",
        tags=["Orders"],
        responses={
            404: {"description": "Order not found"},
            422: {"description": "Invalid filter"},
            502: {"description": "Shopify fetch failed"},
        },
    )
    logger.info("✅ Router de pedidos configurado")


def configure_all_routers(app: FastAPI) -> None:
    """
    Configura todos los routers y endpoints de la aplicación.

    Args:
        app: Instancia de FastAPI
    """
    create_root_endpoints(app)
    create_health_endpoints(app)
    configure_api_v1_routers(app)
    logger.info("✅ Todos los routers configurados")

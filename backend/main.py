"""
Wirt API - Main API Server

A FastAPI-based gateway that accepts signed WireGuard configurations,
writes them to the server config and restarts the interface.
"""
import logging
from typing import Optional

from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from starlette.datastructures import Headers

# Import route handlers
import system_routes
import update_routes
from config_manager import GatewayConfig, load_config
from errors import UNHANDLED_MESSAGE, error_response, register_error_handlers
from signature import decode_public_key
from update_manager import ConfigUpdater

logger = logging.getLogger("uvicorn")


class GatewayCORSMiddleware(CORSMiddleware):
    """CORS handling whose preflight replies follow the gateway's reply shapes"""

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != 200:
            logger.error(
                f"Unhandled rejection: CORS preflight from {request_headers.get('origin')}: "
                f"{response.body.decode(errors='replace')}"
            )
            return error_response(500, UNHANDLED_MESSAGE)
        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=200, headers=headers)


def create_app(config: Optional[GatewayConfig] = None) -> FastAPI:
    """Build the API app. The trusted key is decoded once, here."""
    if config is None:
        config = load_config()

    public_key = decode_public_key(config.public_key)
    logger.info(f"Loaded public key: {config.public_key}")

    app = FastAPI(
        title="Wirt API",
        version="0.1.0",
        description="Apply signed WireGuard configurations",
    )
    app.state.config = config
    app.state.updater = ConfigUpdater(
        public_key,
        config.config_file,
        config.reload_command,
        use_sudo=config.use_sudo,
    )

    # CORS middleware for the Wirt frontend
    app.add_middleware(
        GatewayCORSMiddleware,
        allow_origins=[config.allowed_origin],
        allow_methods=["POST"],
        allow_headers=["content-type"],
    )

    register_error_handlers(app)

    # Include routers
    app.include_router(system_routes.router, tags=["System"])
    app.include_router(update_routes.router, tags=["Update"])

    return app


if __name__ == "__main__":
    import uvicorn

    config = load_config()
    uvicorn.run(
        "main:create_app",
        factory=True,
        host=config.host,
        port=config.port,
        log_level=config.log_level,
    )

"""FastAPI server factory for the EC2 twin of the Lambda function."""
from typing import Optional

from fastapi import FastAPI
from fastapi.responses import PlainTextResponse

from omega_deploy._version import __version__
from omega_deploy.api.middleware import LoggingMiddleware
from omega_deploy.application.hello import hello_world
from omega_deploy.config.schemas.server_schema import ServerConfig
from omega_deploy.infrastructure.logging.logger import get_logger


def create_fastapi_app(server_config: Optional[ServerConfig] = None) -> FastAPI:
    """
    Create the FastAPI application serving the hello-world message.

    Args:
        server_config: Server configuration

    Returns:
        Configured FastAPI application
    """
    server_config = server_config or ServerConfig()
    logger = get_logger(__name__)

    app = FastAPI(
        title="omega-deploy",
        description="Hello world served from the EC2 auto scaling group",
        version=__version__,
    )

    if server_config.access_log:
        app.add_middleware(LoggingMiddleware)

    @app.get("/", response_class=PlainTextResponse)
    async def root():
        """Same response as the Lambda function."""
        return hello_world()

    @app.get("/health", tags=["System"])
    async def health_check():
        return {"status": "healthy", "service": "omega-deploy", "version": __version__}

    logger.info("FastAPI application created", routes=len(app.routes))
    return app


def run_server(server_config: Optional[ServerConfig] = None) -> None:
    """Serve the application with uvicorn until interrupted."""
    import uvicorn

    server_config = server_config or ServerConfig()
    logger = get_logger(__name__)
    logger.info("Starting HTTP server", host=server_config.host, port=server_config.port)

    config = uvicorn.Config(
        app=create_fastapi_app(server_config),
        host=server_config.host,
        port=server_config.port,
        log_level=server_config.log_level,
        access_log=server_config.access_log,
    )
    uvicorn.Server(config).run()

"""HTTP surface of the EC2 server."""
from omega_deploy.api.server import create_fastapi_app, run_server

__all__ = ["create_fastapi_app", "run_server"]

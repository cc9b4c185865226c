"""HTTP surface for the family calendar."""

from .server import ACTOR_HEADER, app, invoke_api_function, list_api_functions, run_local_server

__all__ = [
    "ACTOR_HEADER",
    "app",
    "invoke_api_function",
    "list_api_functions",
    "run_local_server",
]

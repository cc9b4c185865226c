from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ...api import call_api, get_api_functions
from ...api.registry import REGISTRY
from ...config import get_settings
from ...errors import CalendarError
from ...logging import configure_logging

logger = logging.getLogger(__name__)

ACTOR_HEADER = "X-Actor-Id"

app = FastAPI(title="Family Calendar API", version="0.1.0")
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


class ApiCallRequest(BaseModel):
    arguments: Dict[str, Any] = Field(default_factory=dict)


@app.exception_handler(CalendarError)
async def calendar_error_handler(request: Request, exc: CalendarError) -> JSONResponse:
    logger.info("%s %s -> %d %s", request.method, request.url.path, exc.status_code, exc.code)
    return JSONResponse(status_code=exc.status_code, content=exc.to_payload())


@app.get("/api/functions")
async def list_api_functions() -> JSONResponse:
    return JSONResponse({"functions": [function.describe() for function in get_api_functions()]})


@app.post("/api/functions/{function_name}")
def invoke_api_function(
    function_name: str,
    request: ApiCallRequest,
    x_actor_id: Optional[str] = Header(default=None, alias=ACTOR_HEADER),
) -> JSONResponse:
    api_function = REGISTRY.get(function_name)
    if api_function is None:
        logger.warning("API function not found: %s", function_name)
        raise HTTPException(status_code=404, detail=f"API function '{function_name}' is not registered.")
    arguments = dict(request.arguments)
    if x_actor_id and "actor_id" in api_function.signature.parameters:
        arguments["actor_id"] = x_actor_id
    try:
        api_function.signature.bind(**arguments)
    except TypeError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    result = call_api(function_name, **arguments)
    logger.debug("API function %s executed successfully", function_name)
    return JSONResponse({"name": function_name, "result": result})


def run_local_server(host: Optional[str] = None, port: Optional[int] = None) -> None:
    import asyncio
    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    settings = get_settings().server
    configure_logging(settings.log_level)
    config = Config()
    config.bind = [f"{host or settings.host}:{port or settings.port}"]
    logger.info("Serving Family Calendar API on %s", config.bind[0])
    asyncio.run(serve(app, config))

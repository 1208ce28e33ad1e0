from __future__ import annotations

import json
import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from ..errors import InvalidRequest, JobError
from ..formatter import to_bash_script, to_json
from ..jobs import process

logger = logging.getLogger(__name__)

BASH_MEDIA_TYPE = "text/x-shellscript"

# -------------------- Schemas --------------------

class SortedTask(BaseModel):
    name: str
    command: str

class ProcessResponse(BaseModel):
    tasks: list[SortedTask]

class ErrorResponse(BaseModel):
    error: str
    message: str

# -------------------- Helpers --------------------

def determine_format(request: Request) -> str:
    """Query `format` wins, then an Accept header asking for a shell script, else json."""
    fmt = request.query_params.get("format")
    if fmt in ("bash", "json"):
        return fmt

    accept = request.headers.get("accept", "")
    if BASH_MEDIA_TYPE in accept.lower():
        return "bash"
    return "json"

def _detail(status_code: int, detail: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"errors": {"detail": detail}})

# -------------------- App --------------------

def create_app() -> FastAPI:
    app = FastAPI(title="taskorder")

    @app.exception_handler(JobError)
    async def job_error_handler(_request: Request, exc: JobError) -> JSONResponse:
        body = ErrorResponse(error=exc.error_type, message=exc.message)
        return JSONResponse(status_code=exc.status_code, content=body.model_dump())

    @app.exception_handler(StarletteHTTPException)
    async def http_error_handler(_request: Request, exc: StarletteHTTPException) -> JSONResponse:
        detail = "Not Found" if exc.status_code == 404 else str(exc.detail)
        return _detail(exc.status_code, detail)

    @app.exception_handler(Exception)
    async def unexpected_error_handler(_request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error while processing request")
        return _detail(500, "Internal Server Error")

    @app.post(
        "/api/jobs/process",
        response_model=ProcessResponse,
        responses={
            200: {"content": {BASH_MEDIA_TYPE: {}}},
            400: {"model": ErrorResponse},
            422: {"model": ErrorResponse},
        },
    )
    async def process_job(request: Request) -> Response:
        fmt = determine_format(request)

        try:
            job_data = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            raise InvalidRequest("request body must be valid JSON") from None

        sorted_tasks = process(job_data)

        if fmt == "bash":
            return PlainTextResponse(to_bash_script(sorted_tasks), media_type=BASH_MEDIA_TYPE)
        return JSONResponse(ProcessResponse(**to_json(sorted_tasks)).model_dump())

    return app


app = create_app()

# main.py
from dotenv import load_dotenv
load_dotenv()

import time
import uuid
from fastapi import FastAPI, Request, Response
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from routers import admin, campaigns, profiles, session
from db import engine
from errors import MarketplaceError, RemoteFailure
from logging_config import get_logger

logger = get_logger("marketplace", component="api")

app = FastAPI(title="Creator & Brand Marketplace API")


@app.on_event("startup")
def on_startup():
    logger.info("API started", extra={"db_url": engine.url.render_as_string(hide_password=True)})


@app.middleware("http")
async def request_logging_middleware(request: Request, call_next):
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    start = time.time()

    try:
        response: Response = await call_next(request)
    except Exception:
        logger.exception(
            "Unhandled exception",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
            },
        )
        raise

    duration_ms = int((time.time() - start) * 1000)

    logger.info(
        "request",
        extra={
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "duration_ms": duration_ms,
        },
    )

    response.headers["x-request-id"] = request_id
    return response


@app.exception_handler(MarketplaceError)
async def marketplace_error_handler(request: Request, exc: MarketplaceError):
    if exc.status_code >= 500:
        logger.error(
            "request_failed",
            extra={"path": request.url.path, "error": exc.kind, "detail": exc.message},
        )

    body = {"detail": exc.message, "error": exc.kind}
    if exc.field:
        body["field"] = exc.field
    return JSONResponse(status_code=exc.status_code, content=body)


# get_db has already rolled the session back by the time this runs
@app.exception_handler(SQLAlchemyError)
async def store_error_handler(request: Request, exc: SQLAlchemyError):
    return await marketplace_error_handler(
        request, RemoteFailure(f"Store call failed: {exc.__class__.__name__}")
    )


app.include_router(session.router, prefix="/session", tags=["session"])
app.include_router(profiles.router, prefix="/profiles", tags=["profiles"])
app.include_router(campaigns.router, prefix="/campaigns", tags=["campaigns"])
app.include_router(admin.router, prefix="/admin", tags=["admin"])


@app.get("/health")
def health():
    return {"ok": True}

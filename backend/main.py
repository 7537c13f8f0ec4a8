from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

import logging
import os
import uvicorn

from dotenv import load_dotenv
from pathlib import Path


# Load .env file (guard thresholds, dataset paths, port)

env_path = Path(__file__).resolve().parent / ".env"
load_dotenv(dotenv_path=env_path, override=False)

from routes import readings_router  # noqa: E402


def setup_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    root.setLevel(level.upper())

    fmt = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s | %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
    )

    if not any(isinstance(h, logging.StreamHandler) for h in root.handlers):
        ch = logging.StreamHandler()
        ch.setFormatter(fmt)
        root.addHandler(ch)


setup_logging(os.getenv("LOG_LEVEL", "INFO") or "INFO")
logger = logging.getLogger(__name__)


app = FastAPI(
    title="Fal Engine API",
    description="Templated fortune readings with per-user repeat avoidance",
    version="1.0.0",
)


# CORS settings

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(readings_router)


@app.middleware("http")
async def utf8_charset_middleware(request: Request, call_next):
    response = await call_next(request)
    ct = response.headers.get("content-type", "")
    if "application/json" in ct and "charset" not in ct:
        response.headers["content-type"] = ct + "; charset=utf-8"
    return response


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    # Malformed bodies are client errors, same as missing fields.
    return JSONResponse(status_code=400, content={"detail": "invalid request body"})


@app.exception_handler(Exception)
async def internal_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"detail": "internal_error"})


@app.get("/")
async def root():
    return {
        "message": "Fal Engine API - fortune readings without repeats",
        "version": "1.0.0",
    }


@app.get("/health")
async def health_check():
    return {"status": "healthy"}


if __name__ == "__main__":
    port = int(os.getenv("PORT", "3000") or "3000")
    logger.info("fal-engine listening on :%d", port)
    uvicorn.run(app, host="0.0.0.0", port=port)

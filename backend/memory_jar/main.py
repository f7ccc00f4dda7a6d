# memory_jar/main.py
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from memory_jar.config import APP_NAME, APP_VERSION, FRONTEND_URL
from memory_jar.db.session import init_db
from memory_jar.errors import MemoryJarError
from memory_jar.routes.auth import router as auth_router
from memory_jar.routes.memories import router as memories_router
from memory_jar.utils.logger import get_logger, setup_logging

setup_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info("%s v%s started", APP_NAME, APP_VERSION)
    yield
    logger.info("%s stopped", APP_NAME)


app = FastAPI(title=APP_NAME, version=APP_VERSION, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(auth_router)
app.include_router(memories_router)

# ------------------------
# Error mapping
# ------------------------


@app.exception_handler(MemoryJarError)
async def memory_jar_error_handler(request: Request, exc: MemoryJarError):
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    return JSONResponse({"error": exc.message}, status_code=exc.status_code)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    errors = exc.errors()
    msg = str(errors[0].get("msg", "Invalid request")) if errors else "Invalid request"
    return JSONResponse({"error": msg.removeprefix("Value error, ")}, status_code=400)


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception):
    logger.exception("unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse({"error": "Internal server error"}, status_code=500)


# ------------------------
# Public
# ------------------------


@app.get("/")
def root():
    return {"app_name": APP_NAME, "version": APP_VERSION, "status": "running"}


@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("memory_jar.main:app", host="0.0.0.0", port=8000)

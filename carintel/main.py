import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from carintel.auth import router as auth_router
from carintel.bootstrap import router as bootstrap_router
from carintel.contact import router as contact_router
from carintel.core import config, cors, db, errors
from carintel.maintenance import router as maintenance_router
from carintel.sketches import router as sketches_router

logging.basicConfig(
    level=config.log_level(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    try:
        yield
    finally:
        await db.close_pool()


app = FastAPI(title="CarIntel API", lifespan=lifespan)


@app.exception_handler(errors.AppError)
async def app_error_handler(_: Request, exc: errors.AppError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@app.exception_handler(RequestValidationError)
async def request_validation_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    first = (exc.errors() or [{}])[0]
    return JSONResponse(status_code=400, content={"error": str(first.get("msg") or "Invalid request")})


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(_: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": str(exc.detail)})


# Registered before the CORS middleware so it runs inside it: 500s still carry CORS headers.
@app.middleware("http")
async def unhandled_error_middleware(request: Request, call_next):
    try:
        return await call_next(request)
    except Exception:
        logger.exception("unhandled_error method=%s path=%s", request.method, request.url.path)
        return JSONResponse(status_code=500, content={"error": "Internal server error"})


app.middleware("http")(cors.cors_middleware)

app.include_router(auth_router.router, tags=["auth"])
app.include_router(sketches_router.router, tags=["sketches"])
app.include_router(contact_router.router, tags=["contact"])
app.include_router(bootstrap_router.router, tags=["init-db"])
app.include_router(maintenance_router.router, tags=["maintenance"])


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/")
def root() -> dict:
    return {"message": "carintel api"}

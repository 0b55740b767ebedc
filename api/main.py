import logging
from contextlib import asynccontextmanager

import asyncpg
from fastapi import APIRouter, FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

import seed
from auth import router as auth_router
from auth.security import TokenService, TokenSettings
from cameras import router as cameras_router
from core import config, db
from ephemera import router as ephemera_router
from manufacturers import router as manufacturers_router
from uploads import router as uploads_router
from uploads import storage

API_PREFIX = "/api/v1"

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Initialize the DB pool once per process.
    await db.init_pool()
    if app.state.settings.seed_on_startup:
        try:
            await seed.seed_database()
        except (asyncpg.PostgresError, RuntimeError) as exc:
            logger.warning("Database seeding failed: %s", exc)
    try:
        yield
    finally:
        await db.close_pool()


async def _validation_error_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"detail": jsonable_encoder(exc.errors())},
    )


async def _database_error_handler(request: Request, exc: asyncpg.PostgresError) -> JSONResponse:
    logger.error("Database error on %s %s: %s", request.method, request.url.path, exc.__class__.__name__)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": "Internal server error."},
    )


def create_app(
    *,
    settings: config.AppSettings | None = None,
    token_settings: TokenSettings | None = None,
) -> FastAPI:
    settings = settings or config.AppSettings.from_env()

    app = FastAPI(
        title="Thornton-Pickard Catalog API",
        version=settings.version,
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.tokens = TokenService(token_settings or TokenSettings.from_env())

    # Allow local frontend dev server to call this API from the browser.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(asyncpg.PostgresError, _database_error_handler)

    api = APIRouter(prefix=API_PREFIX)
    api.include_router(auth_router.router, tags=["auth"])
    api.include_router(cameras_router.router, tags=["cameras"])
    api.include_router(ephemera_router.router, tags=["ephemera"])
    api.include_router(manufacturers_router.router, tags=["manufacturers"])
    api.include_router(uploads_router.router, tags=["uploads"])
    app.include_router(api)

    upload_root = storage.LocalStorage().ensure_root()
    app.mount(storage.URL_PREFIX, StaticFiles(directory=upload_root), name="uploads")

    @app.get("/health")
    def health() -> dict:
        return {"status": "ok", "version": settings.version}

    return app


_settings = config.AppSettings.from_env()
logging.basicConfig(level=_settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")

app = create_app(settings=_settings)

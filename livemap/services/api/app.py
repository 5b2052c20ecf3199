# livemap/services/api/app.py
"""
FastAPI приложение API & Relay Service.

REST endpoints:
- GET / — проверка, что сервис жив (plain text)
- GET /health — здоровье сервиса и БД
- GET /users, POST /register, POST /login
- GET /markers, POST /markers, PATCH /markers/{id}
- GET /uploads/{name} — загруженные файлы

WebSocket endpoints:
- /ws — push-канал
"""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
from fastapi.staticfiles import StaticFiles

from livemap.common.constants import TypeMsg
from livemap.common.errors import LiveMapError
from livemap.common.logger import log_error, log_info, setup_logging
from livemap.config import settings
from livemap.services.api import realtime, routes
from livemap.services.api.context import AppContext
from livemap.services.api.dependencies import get_context
from livemap.shared.models.common import HealthStatus

SERVICE_NAME = "livemap_api"


async def handle_livemap_error(request: Request, exc: LiveMapError) -> JSONResponse:
    """Единая точка преобразования доменных ошибок в JSON-ответ."""
    level = TypeMsg.ERROR if exc.status_code >= 500 else TypeMsg.WARNING
    await log_info(
        f"{request.method} {request.url.path} -> {exc.status_code}: {exc.message}",
        type_msg=level,
    )
    return JSONResponse(status_code=exc.status_code, content={"message": exc.message})


async def handle_unexpected_error(request: Request, exc: Exception) -> JSONResponse:
    """Любая необработанная ошибка: лог с трейсбеком и JSON 500 без деталей."""
    await log_error(
        f"{request.method} {request.url.path} -> 500: {exc!r}",
        exc_info=True,
    )
    return JSONResponse(status_code=500, content={"message": "Internal server error"})


def create_app(context: AppContext | None = None) -> FastAPI:
    """
    Собирает приложение.

    Args:
        context: Готовый контекст (тесты); по умолчанию строится из настроек
    """
    setup_logging()
    app_context = context or AppContext.from_settings(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        await log_info("Запуск Live Map API...", type_msg=TypeMsg.INFO)
        await app_context.startup()

        yield

        # Shutdown
        await log_info("Остановка Live Map API...", type_msg=TypeMsg.INFO)
        await app_context.shutdown()

    app = FastAPI(
        title="Live Map API",
        description="Пользователи, маркеры с медиа и push-канал геопозиций.",
        version=settings.system.VERSION,
        lifespan=lifespan,
    )
    app.state.context = app_context

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.server.CORS_ORIGINS,
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(LiveMapError, handle_livemap_error)
    app.add_exception_handler(Exception, handle_unexpected_error)

    app.include_router(routes.router)
    app.include_router(realtime.router)

    # Директория создаётся в startup, поэтому не проверяем её при монтировании
    app.mount(
        settings.media.UPLOAD_URL_PREFIX,
        StaticFiles(directory=str(app_context.media.directory), check_dir=False),
        name="uploads",
    )

    @app.get("/", response_class=PlainTextResponse, tags=["Health"])
    async def root() -> str:
        return "Live Map real-time API is running"

    @app.get("/health", response_model=HealthStatus, tags=["Health"])
    async def health_check(ctx: AppContext = Depends(get_context)) -> HealthStatus:
        db_ok = await ctx.db.health_check()
        return HealthStatus(
            service=SERVICE_NAME,
            status="healthy" if db_ok else "degraded",
            version=settings.system.VERSION,
            dependencies={"postgres": "healthy" if db_ok else "unhealthy"},
            push_channel=ctx.connections.get_stats(),
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=settings.server.HOST, port=settings.server.PORT)

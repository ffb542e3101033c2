"""
Главный файл Invent97
"""
import logging

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from backend.core import auth_routes
from backend.core.config import settings
from backend.core.startup_migrations import apply_startup_migrations
from backend.modules.inventory import api as inventory_api
from backend.modules.inventory.errors import (
    ConflictError,
    NotFoundError,
    StoreError,
    ValidationError,
)

# Настройка логирования
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title=settings.app_name,
    description="Учёт оборудования, сотрудников и событий",
    version="1.0.0",
    debug=settings.debug,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.get_cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.exception_handler(ValidationError)
async def _validation_error_handler(request: Request, exc: ValidationError):
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({"detail": exc.errors, "input": exc.data}),
    )


@app.exception_handler(NotFoundError)
async def _not_found_handler(request: Request, exc: NotFoundError):
    return JSONResponse(status_code=404, content={"detail": exc.message})


@app.exception_handler(ConflictError)
async def _conflict_handler(request: Request, exc: ConflictError):
    return JSONResponse(status_code=409, content={"detail": exc.message})


@app.exception_handler(StoreError)
async def _store_error_handler(request: Request, exc: StoreError):
    # Подробности уже в логе сервиса (logger.exception)
    logger.error("%s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=500, content={"detail": "Operation failed"})


# Подключаем роутеры
app.include_router(auth_routes.router)
app.include_router(inventory_api.router)


@app.get("/health")
async def health_check():
    """Health check endpoint"""
    return {
        "status": "ok",
        "service": "invent97",
        "territories": settings.get_territories(),
    }


@app.on_event("startup")
async def on_startup():
    """Инициализация при старте приложения"""
    logger.info("Запуск %s...", settings.app_name)
    apply_startup_migrations()
    logger.info("%s запущен успешно", settings.app_name)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)

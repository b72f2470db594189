from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from core.exceptions import register_exception_handlers
from core.middleware import ExceptionHandlerMiddleware
from core.scheduler import DailyJobScheduler
from db.db_operation import MongoConnection
from routes import admin_routes, auth, dish_routes, restaurant_routes, user_routes
from services.daily_reset import build_daily_reset_scheduler
from settings.config import Settings, settings as default_settings
from utils.logger import get_logger

logger = get_logger("main")


@dataclass
class AppContext:
    """Store handle and background job handle shared by the handlers."""
    mongo: MongoConnection
    scheduler: Optional[DailyJobScheduler] = None

    async def startup(self):
        await self.mongo.connect()
        await self.mongo.create_indexes()
        if self.scheduler is not None:
            self.scheduler.start()

    async def shutdown(self):
        if self.scheduler is not None:
            await self.scheduler.stop()
        self.mongo.close()


def build_context(config: Settings) -> AppContext:
    mongo = MongoConnection(config.MONGO_URI, config.DB_NAME)
    scheduler = None
    if config.DAILY_RESET_ENABLED:
        scheduler = build_daily_reset_scheduler(mongo, hour=config.DAILY_RESET_HOUR, minute=config.DAILY_RESET_MINUTE)
    return AppContext(mongo=mongo, scheduler=scheduler)


def create_app(config: Settings = default_settings) -> FastAPI:
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        context = build_context(config)
        app.state.context = context
        await context.startup()
        logger.info(f"{config.PROJECT_NAME} started in {config.ENVIRONMENT} mode")
        try:
            yield
        finally:
            await context.shutdown()

    app = FastAPI(title=config.PROJECT_NAME, version="1.0.0", lifespan=lifespan)
    app.add_middleware(ExceptionHandlerMiddleware)
    app.add_middleware(CORSMiddleware, allow_origins=["*"], allow_methods=["*"], allow_headers=["*"])
    register_exception_handlers(app)

    @app.get("/")
    async def health_check():
        logger.info("Health check is successful")
        return {
            "status": "ok",
            "app": config.PROJECT_NAME,
            "message": "DailyMeal API is running",
        }

    for router in (auth.router, restaurant_routes.router, dish_routes.router, user_routes.router, admin_routes.router):
        app.include_router(router, prefix="/api")
    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn

    uvicorn.run("main:app", host="0.0.0.0", port=default_settings.PORT)

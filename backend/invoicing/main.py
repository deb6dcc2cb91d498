import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from . import routes
from .database import Database, Settings, load_settings


def create_app(settings: Optional[Settings] = None, database: Optional[Database] = None) -> FastAPI:
    settings = settings or load_settings()
    logging.basicConfig(level=settings.log_level)
    db = database or Database(settings.supabase_url, settings.supabase_key)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        db.open()
        app.state.db = db
        app.state.settings = settings
        try:
            yield
        finally:
            db.close()

    app = FastAPI(title="GST Invoicing", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(routes.router)

    @app.get("/")
    def root():
        return {"message": "Welcome to the GST Invoicing API"}

    return app


app = create_app()

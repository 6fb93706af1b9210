from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from partner_match.api.partners import router as partners_router
from partner_match.core.config import settings
from partner_match.core.logger import configure_logging


def create_app() -> FastAPI:
    configure_logging(settings.log_level, json_output=settings.log_json)

    app = FastAPI(title="Partner Match Backend", version="0.1.0")
    app.state.style_dictionary = None

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(partners_router)

    @app.get("/healthz")
    def healthz():
        return {"ok": True}

    return app


app = create_app()

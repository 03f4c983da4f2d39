from fastapi import FastAPI
from app.wmts_api import router as wmts_router
from app.logging_setup import configure_logging, logging_middleware
from app.settings import build_settings_from_env
from app.wmts.locator import TileLocator


def create_app(locator: TileLocator | None = None) -> FastAPI:
    configure_logging()
    app = FastAPI(title="WMTS tile locator")
    app.middleware("http")(logging_middleware)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    app.include_router(wmts_router)

    # Configuration errors surface at startup, never per record
    app.state.locator = locator if locator is not None else TileLocator(build_settings_from_env())
    return app

app = create_app()

from fastapi import FastAPI

from . import __version__
from .api.routes import router as api_router
from .telemetry import init_telemetry


def create_app() -> FastAPI:
    init_telemetry()
    app = FastAPI(title="scrapeflow API", version=__version__)
    app.include_router(api_router)

    @app.get("/healthz")
    def healthz():
        return {"status": "ok"}

    return app


app = create_app()

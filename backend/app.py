import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from backend.routes import router
from backend import storage

load_dotenv(Path(__file__).parent.parent / ".env")

logger = logging.getLogger(__name__)

DEFAULT_DATA_DIR = Path(__file__).parent.parent / "data"


def create_app(data_dir: Path | None = None) -> FastAPI:
    resolved = data_dir or Path(os.getenv("DATA_DIR", str(DEFAULT_DATA_DIR)))
    storage.init_storage(resolved)

    app = FastAPI(title="Tell Tale")
    app.include_router(router, prefix="/api")

    @app.middleware("http")
    async def internal_errors(request: Request, call_next):
        # Anything the handlers did not turn into an HTTPException becomes a 500.
        try:
            return await call_next(request)
        except Exception:
            logger.exception("Error in %s %s", request.method, request.url.path)
            return JSONResponse({"detail": "Internal server error"}, status_code=500)

    return app


# Default app instance for uvicorn (uses DATA_DIR env var or default)
app = create_app()

import logging

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from user_admin.api.errors import register_exception_handlers
from user_admin.api.v1.router import api_router
from user_admin.config import settings

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app() -> FastAPI:
    configure_logging()

    app = FastAPI(title="User Admin API")

    # 1. Allow the admin SPA to call the API from its own origin
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.CORS_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # 2. Routes
    app.include_router(api_router, prefix=settings.API_PREFIX)

    @app.get("/", include_in_schema=False)
    async def root():
        return {"service": settings.APP_NAME, "docs": "/docs"}

    # 3. Domain error -> HTTP status mapping
    register_exception_handlers(app)

    return app


app = create_app()


if __name__ == "__main__":
    import argparse
    parser = argparse.ArgumentParser()
    parser.add_argument("--host", type=str, default="127.0.0.1")
    parser.add_argument("--port", type=int, default=8000)
    parser.add_argument("--reload", action="store_true")
    args = parser.parse_args()

    logger.info("Server starting on http://%s:%s%s", args.host, args.port, settings.API_PREFIX)

    uvicorn.run("user_admin.main:app", host=args.host, port=args.port, reload=args.reload)

from fastapi import FastAPI, Request
from loguru import logger

from linkrelay.core.bootstrap import init as bootstrap_init

bootstrap_init()

from linkrelay._version import __version__  # noqa: E402
from linkrelay.api.resolve import router as resolve_router  # noqa: E402
from linkrelay.config import CORS_ALLOW_CREDENTIALS, CORS_ALLOW_ORIGINS  # noqa: E402
from linkrelay.core.lifespan import lifespan  # noqa: E402
from linkrelay.cors import apply_cors_middleware  # noqa: E402


app = FastAPI(title="linkrelay", version=__version__, lifespan=lifespan)
apply_cors_middleware(
    app, origins=CORS_ALLOW_ORIGINS, allow_credentials=CORS_ALLOW_CREDENTIALS
)
app.include_router(resolve_router)


# Healthcheck endpoint for CI/CD and monitoring
@app.get("/health")
async def healthcheck(request: Request):
    loaded = getattr(request.app.state, "credentials", None) is not None
    return {
        "status": "ok",
        "credentials": "loaded" if loaded else "missing",
        "version": __version__,
    }


if __name__ == "__main__":
    from linkrelay.cli import run_server

    logger.info("Starting linkrelay FastAPI server...")
    run_server(app)

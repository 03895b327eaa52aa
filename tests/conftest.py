import sys
from pathlib import Path

import httpx
import pytest
from fastapi import FastAPI, Request, Response
from fastapi.testclient import TestClient

BACKEND_BASE = "https://backend.test"
TOKEN = "tok-123456"
USER_ID = "user-9"
VERSION = 7


def build_backend_app(calls: list[dict]) -> FastAPI:
    """
    Create an in-memory FastAPI app that simulates the resolver backend.

    Every POST is recorded in `calls`. The answer depends on the variant flags:
    - direct: 200 {"url": ...}
    - gdrive: 200 {"mega": ...}
    - gdrive+second: 500
    - pix: 200 without a link field
    - pix+nc: 200 with a non-JSON body
    """
    app = FastAPI()

    @app.post("/{path:path}")
    async def resolve(path: str, request: Request):
        body = await request.json()
        calls.append(
            {
                "path": "/" + path,
                "query": dict(request.query_params),
                "headers": dict(request.headers),
                "body": body,
            }
        )
        if body.get("direct"):
            return {"url": f"https://cdn.example/direct/{body['file']}"}
        if body.get("second"):
            return Response(content=b"boom", status_code=500, media_type="text/plain")
        if body.get("gdrive"):
            return {"mega": f"https://mega.example/{body['file']}"}
        if body.get("nc"):
            return Response(content=b"<html>nope</html>", media_type="text/html")
        return {"status": "pending"}

    return app


def patch_async_client(monkeypatch, backend_app):
    """
    Make the resolver client talk to `backend_app` through an ASGI transport.
    """

    def _factory():
        transport = httpx.ASGITransport(app=backend_app)
        return httpx.AsyncClient(transport=transport, trust_env=False)

    monkeypatch.setattr("linkrelay.core.relay.client._build_async_client", _factory)


def _reload_app(tmp_path, monkeypatch):
    monkeypatch.setenv("DATA_DIR", str(tmp_path / "data"))
    monkeypatch.setenv("RELAY_BACKEND_BASE_URL", BACKEND_BASE)
    for var in ("RELAY_TOKEN", "RELAY_USER_ID", "RELAY_VERSION", "CORS_ALLOW_ORIGINS"):
        monkeypatch.delenv(var, raising=False)

    repo_root = Path(__file__).resolve().parents[1]
    if str(repo_root) not in sys.path:
        sys.path.insert(0, str(repo_root))

    for m in list(sys.modules):
        if m == "linkrelay" or m.startswith("linkrelay."):
            del sys.modules[m]

    from linkrelay.main import app

    return app


@pytest.fixture
def backend_calls() -> list[dict]:
    return []


@pytest.fixture
def client(tmp_path, monkeypatch, backend_calls):
    app = _reload_app(tmp_path, monkeypatch)
    from linkrelay.core.relay import StaticCredentialsSupplier

    app.state.credentials_supplier = StaticCredentialsSupplier(TOKEN, USER_ID, VERSION)
    patch_async_client(monkeypatch, build_backend_app(backend_calls))

    with TestClient(app) as c:
        yield c


@pytest.fixture
def client_without_credentials(tmp_path, monkeypatch, backend_calls):
    app = _reload_app(tmp_path, monkeypatch)
    from linkrelay.core.relay import ScriptCredentialsSupplier

    app.state.credentials_supplier = ScriptCredentialsSupplier(tmp_path / "missing.js")
    patch_async_client(monkeypatch, build_backend_app(backend_calls))

    with TestClient(app) as c:
        yield c


@pytest.fixture
def relay_app(tmp_path, monkeypatch, backend_calls):
    """The freshly imported app, with the fake backend patched in but the lifespan not entered."""
    app = _reload_app(tmp_path, monkeypatch)
    patch_async_client(monkeypatch, build_backend_app(backend_calls))
    return app

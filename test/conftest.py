from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, Optional

import httpx
import pytest
import pytest_asyncio

# Load dotenv files early so test fixtures can read overrides via os.getenv
try:  # pragma: no cover
    from dotenv import load_dotenv

    TEST_ROOT = Path(__file__).resolve().parent
    load_dotenv(TEST_ROOT / ".env", override=False)
except Exception:
    pass

from islamwiki.core.configuration import ConfigurationManager, seed_defaults
from islamwiki.core.container import Container
from islamwiki.core.database import create_all, create_engine, create_sessionmaker
from islamwiki.extensions.hooks import HookManager
from islamwiki.server.core.config import Settings

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest.fixture(autouse=True)
def _global_offline_http_guard(monkeypatch: pytest.MonkeyPatch):
    allowed_prefixes: Iterable[str] = (
        "http://testserver",
        "http://localhost",
        "http://127.0.0.1",
        "/",  # Allow relative paths (used by ASGI transport)
    )

    orig_sync = httpx._client.Client.request
    orig_async = httpx._client.AsyncClient.request

    def _is_allowed(url_str: str) -> bool:
        return any(url_str.startswith(p) for p in allowed_prefixes)

    def offline_sync(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return orig_sync(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard: {url_str}")

    async def offline_async(self, method, url, *args, **kwargs):
        url_str = str(url)
        if _is_allowed(url_str):
            return await orig_async(self, method, url, *args, **kwargs)
        raise RuntimeError(f"External HTTP blocked by global offline guard (async): {url_str}")

    monkeypatch.setattr(httpx._client.Client, "request", offline_sync, raising=True)
    monkeypatch.setattr(httpx._client.AsyncClient, "request", offline_async, raising=True)


@pytest.fixture
def make_settings(tmp_path: Path) -> Callable[..., Settings]:
    """Factory for isolated settings; keyword arguments use the environment variable names."""

    def _make(**overrides: Any) -> Settings:
        values: Dict[str, Any] = {
            "DATABASE_URL": TEST_DATABASE_URL,
            "ISLAMWIKI_ENV": "testing",
            "ISLAMWIKI_EXTENSIONS_PATH": str(tmp_path / "extensions"),
            "ISLAMWIKI_RATE_LIMIT_ENABLED": False,
            "ISLAMWIKI_SESSION_SECRET": "test-session-secret",
        }
        values.update(overrides)
        return Settings(**values)

    return _make


@pytest.fixture
def extensions_dir(tmp_path: Path) -> Path:
    path = tmp_path / "extensions"
    path.mkdir()
    return path


@pytest.fixture
def write_extension(extensions_dir: Path) -> Callable[..., Path]:
    """
    Write an extension directory under the test extensions path.

    The default source defines a subclass of ``Extension`` named after the
    directory that registers one ``ContentParse`` hook.
    """

    def _write(
        name: str,
        source: Optional[str] = None,
        manifest: Optional[Dict[str, Any]] = None,
        main: str = "extension.py",
        resources: Iterable[str] = (),
    ) -> Path:
        directory = extensions_dir / name
        directory.mkdir(parents=True, exist_ok=True)
        if manifest is None:
            manifest = {"name": name, "version": "1.2.0", "description": f"{name} test extension", "main": main}
        (directory / "extension.json").write_text(json.dumps(manifest), encoding="utf-8")
        if source is None:
            source = (
                "from islamwiki.extensions import Extension\n"
                "\n"
                "\n"
                f"class {name}(Extension):\n"
                "    def register_hooks(self):\n"
                "        self.add_hook('ContentParse', self.on_content_parse)\n"
                "\n"
                "    def on_content_parse(self, text):\n"
                f"        return text + ' [{name}]'\n"
            )
        (directory / main).write_text(source, encoding="utf-8")
        for resource in resources:
            resource_path = directory / resource
            resource_path.parent.mkdir(parents=True, exist_ok=True)
            resource_path.write_text("/* test */", encoding="utf-8")
        return directory

    return _write


@pytest.fixture
def hook_manager() -> HookManager:
    return HookManager()


@pytest.fixture
def container(hook_manager: HookManager) -> Container:
    container = Container()
    container.instance(HookManager, hook_manager)
    return container


@pytest_asyncio.fixture
async def engine():
    """In-memory SQLite engine with the configuration tables created."""
    engine = create_engine(TEST_DATABASE_URL)
    await create_all(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return create_sessionmaker(engine)


@pytest_asyncio.fixture
async def config_manager(session_factory, hook_manager: HookManager) -> ConfigurationManager:
    """Configuration manager over a freshly seeded database."""
    await seed_defaults(session_factory)
    manager = ConfigurationManager(session_factory, hook_manager)
    await manager.load_configuration()
    return manager


@pytest.fixture
def make_request() -> Callable[..., Any]:
    """Build a Starlette request from an ASGI scope."""
    from starlette.requests import Request

    def _make(
        method: str = "GET",
        path: str = "/",
        headers: Optional[Dict[str, str]] = None,
        query_string: str = "",
        client: tuple = ("127.0.0.1", 50000),
        body: bytes = b"",
        session: Optional[Dict[str, Any]] = None,
    ) -> Request:
        scope: Dict[str, Any] = {
            "type": "http",
            "http_version": "1.1",
            "method": method,
            "scheme": "http",
            "path": path,
            "raw_path": path.encode(),
            "root_path": "",
            "query_string": query_string.encode(),
            "headers": [(key.lower().encode(), value.encode()) for key, value in (headers or {}).items()],
            "client": client,
            "server": ("testserver", 80),
        }
        if session is not None:
            scope["session"] = session

        async def receive() -> Dict[str, Any]:
            return {"type": "http.request", "body": body, "more_body": False}

        return Request(scope, receive)

    return _make

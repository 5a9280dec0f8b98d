from collections.abc import AsyncIterator, Awaitable, Callable

import pytest
from aiohttp import ClientSession, test_utils, web

from parallai import Client, ClientConfig

Serve = Callable[[web.Application], Awaitable[str]]


@pytest.fixture
async def serve() -> AsyncIterator[Serve]:
    """Start local aiohttp apps; returns the base URL ("http://127.0.0.1:<port>/v1") of each."""
    servers: list[test_utils.TestServer] = []

    async def _serve(app: web.Application) -> str:
        server = test_utils.TestServer(app)
        await server.start_server()
        servers.append(server)
        return str(server.make_url("/v1"))

    yield _serve

    for server in servers:
        await server.close()


@pytest.fixture
async def session() -> AsyncIterator[ClientSession]:
    async with ClientSession() as s:
        yield s


@pytest.fixture
def make_client(session: ClientSession) -> Callable[..., Client]:
    """Build a client against a local base URL, sharing the test session."""

    def _make(base_url: str, **overrides: object) -> Client:
        config = ClientConfig(api_key="sk-test", api_base_url=base_url, session=session)
        for name, value in overrides.items():
            setattr(config, name, value)
        return Client(config)

    return _make

"""
Shared fixtures: a local aiohttp server with one route per scenario, and a
raw socket server for responses aiohttp itself would never send.
"""

import asyncio
import logging
import socket
from dataclasses import dataclass, field

import pytest
import pytest_asyncio
from aiohttp import web
from aiohttp.test_utils import TestServer

RESPONSE_BODY = b"responsebody"
RESPONSE_BODY_MD5 = "029f0e2f5b6c5e1bc52e145415d95f8c"
LARGE_SIZE = 20 * 1024

TRUNCATED_RESPONSE = b"HTTP/1.1 200 OK\r\nContent-Length: 100\r\n\r\nhello"
GARBAGE_RESPONSE = b"NOT AN HTTP STATUS LINE\r\n\r\n"


@dataclass
class ServerState:
    """Mutable state shared by the test handlers."""
    release: asyncio.Event = field(default_factory=asyncio.Event)
    active: int = 0
    max_active: int = 0


state_key = web.AppKey("state", ServerState)


async def ok(request):
    return web.Response(status=200, body=RESPONSE_BODY)


async def not_found(request):
    return web.Response(status=404, text="Not Found")


async def server_error(request):
    return web.Response(status=500, text="SERVER ERROR")


async def empty(request):
    return web.Response(status=200, body=b"")


async def large(request):
    # declares the full length but holds the rest of the body back until
    # teardown, so a client that tries to read it all would time out
    response = web.StreamResponse(status=200)
    response.content_length = LARGE_SIZE
    await response.prepare(request)
    await response.write(b"x" * 1024)
    await request.app[state_key].release.wait()
    await response.write(b"x" * (LARGE_SIZE - 1024))
    return response


async def chunked(request):
    response = web.StreamResponse(status=200)
    response.enable_chunked_encoding()
    await response.prepare(request)
    for _ in range(4):
        await response.write(b"y" * 4096)
    await response.write_eof()
    return response


async def slow(request):
    await request.app[state_key].release.wait()
    return web.Response(status=200, body=RESPONSE_BODY)


async def tracked(request):
    state = request.app[state_key]
    state.active += 1
    state.max_active = max(state.max_active, state.active)
    try:
        await asyncio.sleep(0.05)
    finally:
        state.active -= 1
    return web.Response(status=200, body=request.match_info['name'].encode())


def build_app(state: ServerState) -> web.Application:
    app = web.Application()
    app[state_key] = state
    app.router.add_get('/ok', ok)
    app.router.add_get('/notfound', not_found)
    app.router.add_get('/error', server_error)
    app.router.add_get('/empty', empty)
    app.router.add_get('/large', large)
    app.router.add_get('/chunked', chunked)
    app.router.add_get('/slow', slow)
    app.router.add_get('/tracked/{name}', tracked)
    return app


@pytest_asyncio.fixture
async def server_state():
    return ServerState()


@pytest_asyncio.fixture
async def http_server(server_state):
    server = TestServer(build_app(server_state))
    await server.start_server()
    try:
        yield server
    finally:
        server_state.release.set()
        await server.close()


@pytest.fixture
def url_for(http_server):
    def _url_for(path: str) -> str:
        return str(http_server.make_url(path))
    return _url_for


@pytest_asyncio.fixture
async def raw_server():
    """
    Factory for servers that answer every request with fixed raw bytes and
    then close the connection. Returns the server URL.
    """
    servers = []

    async def _start(payload: bytes) -> str:
        async def handle(reader, writer):
            try:
                await reader.readuntil(b"\r\n\r\n")
                writer.write(payload)
                await writer.drain()
            finally:
                writer.close()

        server = await asyncio.start_server(handle, '127.0.0.1', 0)
        servers.append(server)
        port = server.sockets[0].getsockname()[1]
        return f"http://127.0.0.1:{port}/"

    yield _start

    for server in servers:
        server.close()
        await server.wait_closed()


@pytest.fixture
def refused_url():
    """URL of a local port nothing listens on."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(('127.0.0.1', 0))
        port = sock.getsockname()[1]
    return f"http://127.0.0.1:{port}/"


@pytest.fixture(autouse=True)
def restore_root_logger():
    """setup_logging replaces root handlers; put them back after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)

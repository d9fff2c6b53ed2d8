"""MCP server entry point.

Run with ``python -m tidycontext.server`` or the ``tidycontext`` script.
The transport (stdio or streamable HTTP) comes from ``Settings.server``.
"""

from __future__ import annotations

import asyncio
import json
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any

import mcp.types as types
import structlog
from mcp.server.lowlevel import Server
from mcp.server.lowlevel.helper_types import ReadResourceContents

from tidycontext import __version__, tools
from tidycontext.config import Settings
from tidycontext.errors import TidyContextError
from tidycontext.logging_config import setup_logging
from tidycontext.state import AppState, app_state

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable

    from pydantic import AnyUrl

log = structlog.get_logger()

SERVER_NAME = "tidycontext"


class ToolCallFailed(Exception):
    """Carries a serialised error envelope; the MCP layer returns ``str()`` verbatim."""

    def __init__(self, error: TidyContextError) -> None:
        super().__init__(json.dumps(error.to_dict()))
        self.error = error


def create_server(settings: Settings, shared_state: AppState | None = None) -> Server[AppState]:
    """Build the MCP server.

    With ``shared_state`` every session reuses it (HTTP); otherwise each
    server run builds and tears down its own state (stdio).
    """

    @asynccontextmanager
    async def lifespan(_server: Server[AppState]) -> AsyncIterator[AppState]:
        if shared_state is not None:
            yield shared_state
            return
        async with app_state(settings) as state:
            yield state

    server: Server[AppState] = Server(SERVER_NAME, version=__version__, lifespan=lifespan)

    def current_state() -> AppState:
        return server.request_context.lifespan_context

    @server.list_tools()
    async def list_tools() -> list[types.Tool]:
        return [
            types.Tool(name=spec.name, description=spec.description, inputSchema=spec.input_schema())
            for spec in tools.TOOLS.values()
        ]

    @server.call_tool()
    async def call_tool(name: str, arguments: dict[str, Any]) -> list[types.TextContent]:
        log.info("tool_called", tool=name)
        try:
            text = await tools.call_tool(current_state(), name, arguments)
        except TidyContextError as exc:
            log.info("tool_failed", tool=name, code=exc.code.value, error=exc.message)
            raise ToolCallFailed(exc) from exc
        return [types.TextContent(type="text", text=text)]

    @server.list_resources()
    async def list_resources() -> list[types.Resource]:
        try:
            resources = await tools.list_resources(current_state())
        except TidyContextError as exc:
            log.info("resource_list_failed", code=exc.code.value, error=exc.message)
            raise ToolCallFailed(exc) from exc
        return [
            types.Resource(
                uri=info.uri,
                name=info.name,
                mimeType=info.mime_type,
                description=info.description,
            )
            for info in resources
        ]

    @server.read_resource()
    async def read_resource(uri: AnyUrl) -> Iterable[ReadResourceContents]:
        try:
            text, mime_type = await tools.read_resource(current_state(), str(uri))
        except TidyContextError as exc:
            log.info("resource_failed", uri=str(uri), code=exc.code.value, error=exc.message)
            raise ToolCallFailed(exc) from exc
        return [ReadResourceContents(content=text, mime_type=mime_type)]

    return server


async def run_stdio(server: Server[AppState]) -> None:
    from mcp.server.stdio import stdio_server

    async with stdio_server() as (read_stream, write_stream):
        await server.run(read_stream, write_stream, server.create_initialization_options())


async def run_http(settings: Settings) -> None:
    from mcp.server.streamable_http_manager import StreamableHTTPSessionManager

    async with app_state(settings) as state:
        server = create_server(settings, shared_state=state)
        session_manager = StreamableHTTPSessionManager(app=server)
        await _serve_http(session_manager, settings)


async def _serve_http(session_manager: Any, settings: Settings) -> None:
    import uvicorn
    from starlette.applications import Starlette
    from starlette.routing import Mount

    async def handle_mcp(scope: Any, receive: Any, send: Any) -> None:
        await session_manager.handle_request(scope, receive, send)

    @asynccontextmanager
    async def starlette_lifespan(_app: Starlette) -> AsyncIterator[None]:
        async with session_manager.run():
            yield

    app = Starlette(routes=[Mount("/mcp", app=handle_mcp)], lifespan=starlette_lifespan)
    config = uvicorn.Config(
        app,
        host=settings.server.host,
        port=settings.server.port,
        log_level=settings.logging.level.lower(),
    )
    await uvicorn.Server(config).serve()


def main() -> None:
    settings = Settings()
    setup_logging(settings.logging)
    log.info(
        "server_starting",
        version=__version__,
        transport=settings.server.transport,
        org=settings.github.org,
    )
    if settings.server.transport == "http":
        asyncio.run(run_http(settings))
    else:
        asyncio.run(run_stdio(create_server(settings)))


if __name__ == "__main__":
    main()

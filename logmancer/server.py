"""HTTP API over a registry of open log files, and the command that serves it."""

from __future__ import annotations

import argparse
import asyncio
import logging
import os
import tempfile
import threading
import time
from collections.abc import Callable
from http import HTTPStatus
from pathlib import Path
from typing import Any, TypeVar

from aiohttp import BodyPartReader, web

from logmancer.api_models import (
    ApiError,
    ApplyFilterRequest,
    OpenServerFileRequest,
    OpenServerFileResponse,
    ServerBrowserListRequest,
    ServerBrowserOpenRequest,
    ServerBrowserStatusResponse,
    to_dict,
)
from logmancer.reader import LogReader
from logmancer.registry import LogRegistry
from logmancer.server_browser import (
    ServerBrowserError,
    ServerFileRoot,
    is_text_readable,
    list_directory,
    resolve_root_bound_path,
)

logger = logging.getLogger(__name__)

LOG_UPLOAD_BODY_LIMIT_BYTES = 512 * 1024 * 1024
DEFAULT_PORT = 3000
INITIAL_FILE_ENV_VAR = "LOGMANCER_INITIAL_FILE"
LOG_FILE_ENV_VAR = "LOGMANCER_LOG_FILE"

REGISTRY_KEY = web.AppKey("registry", LogRegistry)
SERVER_FILE_ROOT_KEY = web.AppKey("server_file_root", object)

_FILE_NOT_OPENED = "File not opened"
_READ_ERRORS = (OSError, EOFError, IndexError, ValueError)
_UNSET: Any = object()

_T = TypeVar("_T")


def _json(data: Any, status: int = HTTPStatus.OK) -> web.Response:
    return web.json_response(data, status=int(status))


def _api_error(status: HTTPStatus, code: str, message: str) -> web.Response:
    return _json(to_dict(ApiError(code=code, message=message)), status)


def _bad_request(message: str) -> web.HTTPBadRequest:
    return web.HTTPBadRequest(text=message)


def _registry(request: web.Request) -> LogRegistry:
    return request.config_dict[REGISTRY_KEY]


def _server_file_root(request: web.Request) -> ServerFileRoot | None:
    root = request.config_dict.get(SERVER_FILE_ROOT_KEY)
    return root if isinstance(root, ServerFileRoot) else None


def _query_str(request: web.Request, name: str) -> str:
    try:
        return request.query[name]
    except KeyError:
        raise _bad_request(f"missing field `{name}`") from None


def _query_int(request: web.Request, name: str) -> int:
    raw = _query_str(request, name)
    if not raw.isdigit():
        raise _bad_request(f"invalid value for `{name}`: {raw!r}")
    return int(raw)


def _query_bool(request: web.Request, name: str) -> bool:
    raw = _query_str(request, name)
    if raw not in ("true", "false"):
        raise _bad_request(f"invalid value for `{name}`: {raw!r}")
    return raw == "true"


async def _json_body(request: web.Request, build: Callable[..., _T], *fields: str) -> _T:
    try:
        payload = await request.json()
    except ValueError as error:
        raise _bad_request(f"invalid JSON body: {error}") from error
    if not isinstance(payload, dict):
        raise _bad_request("JSON body must be an object")
    values = []
    for name in fields:
        value = payload.get(name)
        if not isinstance(value, str):
            raise _bad_request(f"field `{name}` must be a string")
        values.append(value)
    return build(*values)


async def _reader_call(
    request: web.Request, file_id: str, action: Callable[[LogReader], Any], error_prefix: str
) -> web.Response:
    reader = _registry(request).get_reader(file_id)
    if reader is None:
        return _json(_FILE_NOT_OPENED, HTTPStatus.NOT_FOUND)
    try:
        result = await asyncio.to_thread(action, reader)
    except _READ_ERRORS as error:
        return _json(f"{error_prefix}: {error}", HTTPStatus.INTERNAL_SERVER_ERROR)
    return _json(result.to_dict())


async def server_browser_status(request: web.Request) -> web.Response:
    """Tell whether browsing of server files is configured."""
    enabled = _server_file_root(request) is not None
    message = None if enabled else "Server browsing is not configured on this deployment."
    return _json(to_dict(ServerBrowserStatusResponse(enabled=enabled, message=message)))


def _disabled() -> web.Response:
    return _api_error(
        HTTPStatus.FORBIDDEN, "server_browser_disabled", "Server browser is unavailable."
    )


async def server_browser_list(request: web.Request) -> web.Response:
    """List a directory below the server root."""
    root = _server_file_root(request)
    if root is None:
        return _disabled()
    payload = await _json_body(request, ServerBrowserListRequest, "path")
    try:
        resolved = resolve_root_bound_path(root, payload.path)
    except ServerBrowserError as error:
        return _api_error(error.status, error.code, error.message)

    if not resolved.is_dir():
        return _api_error(
            HTTPStatus.BAD_REQUEST, "not_directory", "Requested path is not a directory."
        )
    try:
        listing = list_directory(root, resolved)
    except (OSError, ValueError):
        return _api_error(
            HTTPStatus.INTERNAL_SERVER_ERROR, "open_failed", "Could not list directory."
        )
    return _json(to_dict(listing))


async def server_browser_open(request: web.Request) -> web.Response:
    """Open a text file below the server root and register it."""
    root = _server_file_root(request)
    if root is None:
        return _disabled()
    payload = await _json_body(request, ServerBrowserOpenRequest, "path")
    try:
        resolved = resolve_root_bound_path(root, payload.path)
    except ServerBrowserError as error:
        return _api_error(error.status, error.code, error.message)

    if not resolved.is_file():
        return _api_error(HTTPStatus.BAD_REQUEST, "not_file", "Requested path is not a file.")
    if not is_text_readable(resolved):
        return _api_error(
            HTTPStatus.BAD_REQUEST,
            "not_text_readable",
            "Requested file is not a readable text file.",
        )
    try:
        file_id = _registry(request).open_file(str(resolved))
    except OSError:
        return _api_error(HTTPStatus.BAD_REQUEST, "open_failed", "Could not open file.")
    return _json(to_dict(OpenServerFileResponse(file_id=file_id)), HTTPStatus.CREATED)


def _upload_name(filename: str | None) -> str:
    name = (filename or "").replace("/", "_").replace("\\", "_")
    return name or "uploaded.log"


async def _store_upload(field: BodyPartReader) -> Path | web.Response:
    path = Path(tempfile.gettempdir()) / (
        f"logmancer-upload-{time.time_ns()}-{_upload_name(field.filename)}"
    )
    try:
        handle = open(path, "wb")
    except OSError as error:
        logger.error("Error creating temp uploaded file path=%s error=%s", path, error)
        return _json(
            "Could not store temporary uploaded file.", HTTPStatus.INTERNAL_SERVER_ERROR
        )

    uploaded_bytes = 0
    with handle:
        while True:
            try:
                chunk = await field.read_chunk()
            except (ValueError, AssertionError, RuntimeError) as error:
                logger.error("Error reading multipart chunk: %s", error)
                handle.close()
                path.unlink(missing_ok=True)
                return _json("Could not read uploaded file.", HTTPStatus.BAD_REQUEST)
            if not chunk:
                break
            uploaded_bytes += len(chunk)
            try:
                handle.write(chunk)
            except OSError as error:
                logger.error("Error writing temp uploaded file path=%s error=%s", path, error)
                handle.close()
                path.unlink(missing_ok=True)
                return _json(
                    "Could not store temporary uploaded file.",
                    HTTPStatus.INTERNAL_SERVER_ERROR,
                )

    if uploaded_bytes == 0:
        logger.warning("Rejected upload-file request with empty payload")
        path.unlink(missing_ok=True)
        return _json("Uploaded file cannot be empty.", HTTPStatus.BAD_REQUEST)
    return path


async def upload_file(request: web.Request) -> web.Response:
    """Store the multipart field ``file`` in a temporary file and open it."""
    stored: Path | None = None
    try:
        multipart = await request.multipart()
    except (ValueError, AssertionError, KeyError) as error:
        logger.error("Error parsing multipart request: %s", error)
        return _json("Could not parse uploaded file.", HTTPStatus.BAD_REQUEST)

    while True:
        try:
            field = await multipart.next()
        except (ValueError, AssertionError, RuntimeError) as error:
            logger.error("Error parsing multipart request: %s", error)
            return _json("Could not parse uploaded file.", HTTPStatus.BAD_REQUEST)
        if field is None:
            break
        if not isinstance(field, BodyPartReader) or field.name != "file":
            continue
        outcome = await _store_upload(field)
        if isinstance(outcome, web.Response):
            return outcome
        stored = outcome
        break

    if stored is None:
        logger.warning("Rejected upload-file request without file field")
        return _json("Upload request is missing the file field.", HTTPStatus.BAD_REQUEST)

    logger.info("Opening uploaded temp file path=%s", stored)
    try:
        file_id = _registry(request).open_file(str(stored))
    except OSError as error:
        logger.error("Error opening uploaded file path=%s error=%s", stored, error)
        return _json(f"Could not open uploaded file: {error}", HTTPStatus.BAD_REQUEST)
    return _json(to_dict(OpenServerFileResponse(file_id=file_id)), HTTPStatus.CREATED)


async def read_page(request: web.Request) -> web.Response:
    """Page of the file from ``start_line``."""
    file_id = _query_str(request, "file_id")
    start_line = _query_int(request, "start_line")
    max_lines = _query_int(request, "max_lines")
    logger.debug("read_page: file_id=%s start_line=%d max_lines=%d", file_id, start_line, max_lines)
    return await _reader_call(
        request,
        file_id,
        lambda reader: reader.read_page(start_line, max_lines),
        "Error reading file",
    )


async def tail(request: web.Request) -> web.Response:
    """Last lines of the file, reloading it first when following."""
    file_id = _query_str(request, "file_id")
    max_lines = _query_int(request, "max_lines")
    follow = _query_bool(request, "follow")
    logger.debug("tail: file_id=%s max_lines=%d follow=%s", file_id, max_lines, follow)
    return await _reader_call(
        request,
        file_id,
        lambda reader: reader.tail(max_lines, follow),
        "Error reading file",
    )


async def file_info(request: web.Request) -> web.Response:
    """Path, line count and indexing progress of an open file."""
    file_id = _query_str(request, "file_id")
    logger.debug("Getting info about: %s", file_id)
    return await _reader_call(
        request, file_id, lambda reader: reader.file_info(), "Error reading file"
    )


async def apply_filter(request: web.Request) -> web.Response:
    """Start filtering an open file with a pattern."""
    payload = await _json_body(request, ApplyFilterRequest, "file_id", "filter")
    logger.debug("apply_filter: file_id=%s, filter=%s", payload.file_id, payload.filter)
    reader = _registry(request).get_reader(payload.file_id)
    if reader is None:
        return _json(_FILE_NOT_OPENED, HTTPStatus.NOT_FOUND)
    await asyncio.to_thread(reader.filter, payload.filter)
    return _json("Filter applied")


async def read_filter_page(request: web.Request) -> web.Response:
    """Page of lines matching the current filter."""
    file_id = _query_str(request, "file_id")
    start_line = _query_int(request, "start_line")
    max_lines = _query_int(request, "max_lines")
    logger.debug(
        "read_filter_page: file_id=%s start_line=%d max_lines=%d", file_id, start_line, max_lines
    )
    return await _reader_call(
        request,
        file_id,
        lambda reader: reader.read_filter(start_line, max_lines),
        "Error reading filter",
    )


async def open_server_file(request: web.Request) -> web.Response:
    """Open any path on the server and register it."""
    payload = await _json_body(request, OpenServerFileRequest, "path")
    trimmed = payload.path.strip()
    if not trimmed:
        logger.warning("Rejected open-server-file request with empty path")
        return _json("Path cannot be empty", HTTPStatus.BAD_REQUEST)

    logger.info("Opening file from API path=%s", trimmed)
    try:
        file_id = _registry(request).open_file(trimmed)
    except OSError as error:
        logger.error("Error opening file path=%s error=%s", trimmed, error)
        return _json(f"Could not open file '{trimmed}': {error}", HTTPStatus.BAD_REQUEST)
    logger.info("Opened file successfully file_id=%s", file_id)
    return _json(to_dict(OpenServerFileResponse(file_id=file_id)), HTTPStatus.CREATED)


def api_routes(
    registry: LogRegistry, server_file_root: ServerFileRoot | None = _UNSET
) -> web.Application:
    """Application with the API routes, meant to be mounted under ``/api``.

    Without ``server_file_root`` the root is read from the environment.
    """
    if server_file_root is _UNSET:
        server_file_root = ServerFileRoot.from_env()
    app = web.Application(client_max_size=LOG_UPLOAD_BODY_LIMIT_BYTES)
    app[REGISTRY_KEY] = registry
    app[SERVER_FILE_ROOT_KEY] = server_file_root
    app.router.add_get("/server-browser/status", server_browser_status)
    app.router.add_post("/server-browser/list", server_browser_list)
    app.router.add_post("/server-browser/open", server_browser_open)
    app.router.add_post("/upload-file", upload_file)
    app.router.add_get("/read-page", read_page)
    app.router.add_get("/file_info", file_info)
    app.router.add_get("/tail", tail)
    app.router.add_post("/apply-filter", apply_filter)
    app.router.add_get("/read-filter-page", read_filter_page)
    return app


def _application(registry: LogRegistry) -> web.Application:
    app = web.Application(client_max_size=LOG_UPLOAD_BODY_LIMIT_BYTES)
    app.add_subapp("/api", api_routes(registry))
    return app


async def start_server(port: int, registry: LogRegistry | None = None) -> None:
    """Serve the API on 127.0.0.1:``port`` until cancelled."""
    init_backend_logging()
    if registry is None:
        registry = LogRegistry()
    runner = web.AppRunner(_application(registry))
    await runner.setup()
    try:
        site = web.TCPSite(runner, "127.0.0.1", port)
        await site.start()
        logger.info("Starting API server on http://127.0.0.1:%d", port)
        await asyncio.Event().wait()
    finally:
        await runner.cleanup()


def try_open_initial_file(registry: LogRegistry, initial_path: str | None) -> str | None:
    """Open the file given at startup, if any; None when absent or unopenable."""
    if initial_path is None:
        return None
    path = initial_path.strip()
    if not path:
        return None
    logger.info("Attempting to open initial file path=%s", path)
    try:
        file_id = registry.open_file(path)
    except OSError as error:
        logger.warning("Could not open initial file path=%s error=%s", path, error)
        logger.error("Continuing startup without initial file")
        return None
    logger.info("Initial file opened successfully file_id=%s", file_id)
    return file_id


_logging_lock = threading.Lock()
_logging_ready = False


def init_backend_logging() -> None:
    """Configure logging once, to LOGMANCER_LOG_FILE if set, else to stderr."""
    global _logging_ready
    with _logging_lock:
        if _logging_ready:
            return
        _logging_ready = True

        handler: logging.Handler
        log_file = os.environ.get(LOG_FILE_ENV_VAR, "").strip()
        if log_file:
            log_path = Path(log_file)
            try:
                log_path.parent.mkdir(parents=True, exist_ok=True)
                handler = logging.FileHandler(log_path, encoding="utf-8")
            except OSError:
                handler = logging.StreamHandler()
        else:
            handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(message)s"))

        root = logging.getLogger()
        if not root.handlers:
            root.addHandler(handler)
            root.setLevel(logging.INFO)
        logging.getLogger("logmancer").setLevel(logging.DEBUG)


def main(argv: list[str] | None = None) -> int:
    """Serve the API, optionally opening a file given on the command line."""
    parser = argparse.ArgumentParser(prog="logmancer-web", description="Serve log files over HTTP.")
    parser.add_argument("path", nargs="?", help="file to open at startup")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="port to listen on")
    args = parser.parse_args(argv)

    init_backend_logging()
    registry = LogRegistry()
    initial_path = args.path if args.path is not None else os.environ.get(INITIAL_FILE_ENV_VAR)
    initial_file_id = try_open_initial_file(registry, initial_path)
    address = f"127.0.0.1:{args.port}"
    if initial_file_id is not None:
        startup_url = f"http://{address}/api/file_info?file_id={initial_file_id}"
    else:
        startup_url = f"http://{address}"
    logger.info("Initial navigation URL: %s", startup_url)

    try:
        asyncio.run(start_server(args.port, registry))
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
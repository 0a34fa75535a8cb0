from __future__ import annotations

import logging
from typing import Any, Literal

from typing_extensions import TypedDict

from mcp.server.fastmcp import FastMCP
from mcp.server.transport_security import TransportSecuritySettings

from kvdb import StorageIOError
from kvdb.settings import get_settings

from .state import get_database

SETTINGS = get_settings()
DEBUG_LOG_REQUESTS = SETTINGS.debug_log_requests

logger = logging.getLogger(__name__)


class ToolTextContent(TypedDict):
    type: Literal["text"]
    text: str


class KvToolResponse(TypedDict, total=False):
    content: list[ToolTextContent]
    structuredContent: dict[str, Any]


def _reply(message: str | None = None, **structured: Any) -> KvToolResponse:
    return {
        "content": ([{"type": "text", "text": message}] if message is not None else []),
        "structuredContent": structured,
    }


def _valid_key(key: Any) -> bool:
    return isinstance(key, str)


mcp = FastMCP(
    "kvdb",
    stateless_http=True,
    json_response=True,
    # Local / tunnel friendly: FastMCP auto-enables DNS rebinding protection on localhost,
    # which rejects forwarded Host headers with 421.
    transport_security=TransportSecuritySettings(enable_dns_rebinding_protection=False),
)


@mcp.tool()
async def kv_get(key: str) -> KvToolResponse:
    """
    Returns the value stored under a key, if any.
    """
    if not _valid_key(key):
        return _reply("Invalid input: `key` must be a string.")
    value = get_database().get(key)
    if DEBUG_LOG_REQUESTS:
        logger.info("MCP KV GET: key=%r hit=%s", key, value is not None)
    if value is None:
        return _reply(f'Key "{key}" is not set.', key=key, found=False)
    return _reply(value, key=key, value=value, found=True)


@mcp.tool()
async def kv_set(key: str, value: str) -> KvToolResponse:
    """
    Stores a string value under a key, replacing any previous value.
    Changes are kept in memory until the next flush.
    """
    if not _valid_key(key):
        return _reply("Invalid input: `key` must be a string.")
    if not isinstance(value, str):
        return _reply("Invalid input: `value` must be a string.")
    try:
        get_database().set(key, value)
    except ValueError as e:
        return _reply(f"Invalid input: {e}.")
    if DEBUG_LOG_REQUESTS:
        logger.info("MCP KV SET: key=%r len=%d", key, len(value))
    return _reply(f'Set "{key}".', key=key, value=value)


@mcp.tool()
async def kv_delete(key: str) -> KvToolResponse:
    """
    Deletes a key. Deleting a key that is not set succeeds.
    """
    if not _valid_key(key):
        return _reply("Invalid input: `key` must be a string.")
    db = get_database()
    existed = db.get(key) is not None
    db.delete(key)
    msg = f'Deleted "{key}".' if existed else f'Key "{key}" was not set.'
    return _reply(msg, key=key, deleted=existed)


@mcp.tool()
async def kv_flush() -> KvToolResponse:
    """
    Writes all pending changes to disk.
    """
    try:
        get_database().flush()
    except StorageIOError as e:
        logger.error("MCP KV FLUSH: failed: %r", e)
        return _reply(f"Flush failed: {e.strerror or e}", flushed=False)
    return _reply("Flushed.", flushed=True)

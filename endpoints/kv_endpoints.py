from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from kvdb import StorageIOError
from kvdb.settings import get_settings

from .state import get_database

router = APIRouter(tags=["kv"])
logger = logging.getLogger(__name__)

SETTINGS = get_settings()
DEBUG_LOG_REQUESTS = SETTINGS.debug_log_requests


class ValueIn(BaseModel):
    value: str


class EntryOut(BaseModel):
    key: str
    value: str


class DeleteOut(BaseModel):
    key: str
    deleted: bool


class FlushOut(BaseModel):
    flushed: bool


# Handlers are `async def` on purpose: they run on the event loop thread, so the
# single database handle is never touched from the threadpool.


@router.get("/kv/{key:path}", response_model=EntryOut)
async def get_value(key: str) -> EntryOut:
    value = get_database().get(key)
    if DEBUG_LOG_REQUESTS:
        logger.info("KV GET: key=%r hit=%s", key, value is not None)
    if value is None:
        raise HTTPException(status_code=404, detail=f"Key {key!r} not found")
    return EntryOut(key=key, value=value)


@router.put("/kv/{key:path}", response_model=EntryOut)
async def put_value(key: str, body: ValueIn) -> EntryOut:
    try:
        get_database().set(key, body.value)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e)) from e
    if DEBUG_LOG_REQUESTS:
        logger.info("KV SET: key=%r len=%d", key, len(body.value))
    return EntryOut(key=key, value=body.value)


@router.delete("/kv/{key:path}", response_model=DeleteOut)
async def delete_value(key: str) -> DeleteOut:
    db = get_database()
    existed = db.get(key) is not None
    db.delete(key)
    if DEBUG_LOG_REQUESTS:
        logger.info("KV DEL: key=%r existed=%s", key, existed)
    return DeleteOut(key=key, deleted=existed)


@router.post("/flush", response_model=FlushOut)
async def flush() -> FlushOut:
    try:
        get_database().flush()
    except StorageIOError as e:
        logger.error("KV FLUSH: failed: %r", e)
        raise HTTPException(status_code=500, detail="Failed to persist the database") from e
    return FlushOut(flushed=True)

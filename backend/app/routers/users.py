"""
Users Router / 用户路由

User registration and usertag availability, over HTTP for one-off checks and
over a WebSocket for as-you-type checks with debounce and stale-result
protection.
"""

import json
from dataclasses import asdict

from fastapi import APIRouter, Depends, HTTPException, Query, Request, WebSocket, WebSocketDisconnect

from app.dependencies import get_user_storage
from app.exceptions import NameCheckError
from app.schemas.setup import UsertagAvailability
from app.schemas.user import UserCreate, UserRecord
from app.services.name_availability import (
    NAME_CHECK_FAILED_MESSAGE,
    NameAvailabilityChecker,
    NameCheckState,
)
from app.storage.users import UserStorage
from app.utils.logger import get_logger
from app.utils.rate_limit import NAME_CHECK_RATE_LIMIT, limiter

logger = get_logger(__name__)

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserRecord, status_code=201)
async def register_user(request: UserCreate, storage: UserStorage = Depends(get_user_storage)):
    """Register a user under a unique usertag."""
    record = await storage.register_user(request.user_id, request.usertag)
    return UserRecord(user_id=request.user_id, **record)


@router.get("/usertag-exists", response_model=UsertagAvailability)
@limiter.limit(NAME_CHECK_RATE_LIMIT)
async def usertag_exists(
    request: Request,
    candidate: str = Query(..., min_length=1, description="Usertag to check"),
    storage: UserStorage = Depends(get_user_storage),
):
    """
    检查用户标签是否已被占用

    Check whether a usertag is taken (trimmed, case-insensitive).
    """
    try:
        exists = await storage.usertag_exists(candidate)
    except NameCheckError as e:
        logger.error("Usertag lookup failed for %r: %s", candidate, e)
        raise HTTPException(status_code=503, detail=NAME_CHECK_FAILED_MESSAGE)
    return UsertagAvailability(candidate=candidate, exists=exists)


@router.websocket("/ws/usertag-check")
async def usertag_check_websocket(
    websocket: WebSocket,
    storage: UserStorage = Depends(get_user_storage),
):
    """
    Stream usertag availability while the user types.

    Client sends ``{"candidate": "..."}`` (or the bare text) on every change.
    Only the answer for the latest candidate is pushed back.
    """
    await websocket.accept()

    async def lookup(candidate, cancel_token):
        return await storage.usertag_exists(candidate, cancel_token)

    async def push(state: NameCheckState):
        await websocket.send_json({"type": "usertag_check", "payload": asdict(state)})

    checker = NameAvailabilityChecker(lookup, on_result=push)
    try:
        await websocket.send_json({"type": "connected"})
        while True:
            data = await websocket.receive_text()
            if data == "ping":
                await websocket.send_text("pong")
                continue
            try:
                candidate = str(json.loads(data).get("candidate") or "")
            except (ValueError, AttributeError):
                candidate = data
            if candidate and candidate.strip():
                checker.submit(candidate)
    except WebSocketDisconnect:
        logger.debug("Usertag check socket disconnected")
    finally:
        await checker.close()

"""
Setup Sessions Router / 账户设置会话路由

Drives one account setup session: attributes, the affected attribute
selection draft, quests and the final submission. Every mutating endpoint
returns the full session snapshot. Rejected moves (boundary, unknown name,
protected attribute) leave the session unchanged and still return 200.
Target names travel in the body or the ``name`` query parameter, never in
the path, since names may contain "/".
"""

from fastapi import APIRouter, Depends, HTTPException, Query
from fastapi.responses import JSONResponse

from app.account_setup.session import AccountSetupSession
from app.dependencies import get_profile_service, get_session_cache
from app.exceptions import ValidationError
from app.schemas.profile import SubmissionResult
from app.schemas.setup import (
    AttributeCreate,
    NamedMoveRequest,
    QuestCommit,
    SelectionUpdate,
    SetupSessionCreate,
    SetupSessionSnapshot,
    SubmitRequest,
)
from app.services.profile_service import ProfileService
from app.storage.session_cache import SessionCache
from app.utils.error_codes import DUPLICATE, UNAUTHORIZED
from app.utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/setup/sessions", tags=["setup"])

SUBMISSION_STATUS = {
    DUPLICATE: 409,
    UNAUTHORIZED: 403,
}


async def get_setup_session(
    session_id: str,
    cache: SessionCache = Depends(get_session_cache),
) -> AccountSetupSession:
    session = await cache.get(session_id)
    if session is None:
        raise HTTPException(status_code=404, detail="Setup session not found")
    return session


@router.post("", response_model=SetupSessionSnapshot, status_code=201)
async def create_session(
    request: SetupSessionCreate,
    cache: SessionCache = Depends(get_session_cache),
):
    """
    创建账户设置会话

    Seeds the default attributes unless a list is supplied. The required
    attribute is always present and first.
    """
    session = AccountSetupSession(request.attributes)
    await cache.put(session)
    logger.info("Created setup session %s", session.session_id)
    return session.snapshot()


@router.get("/{session_id}", response_model=SetupSessionSnapshot)
async def get_session(session: AccountSetupSession = Depends(get_setup_session)):
    return session.snapshot()


# Attributes / 属性

@router.post("/{session_id}/attributes", response_model=SetupSessionSnapshot, status_code=201)
async def add_attribute(
    request: AttributeCreate,
    session: AccountSetupSession = Depends(get_setup_session),
):
    session.add_attribute(request.name)
    return session.snapshot()


@router.delete("/{session_id}/attributes", response_model=SetupSessionSnapshot)
async def delete_attribute(
    name: str = Query(..., description="Attribute name"),
    session: AccountSetupSession = Depends(get_setup_session),
):
    session.delete_attribute(name)
    return session.snapshot()


@router.post("/{session_id}/attributes/move", response_model=SetupSessionSnapshot)
async def move_attribute(
    request: NamedMoveRequest,
    session: AccountSetupSession = Depends(get_setup_session),
):
    session.move_attribute(request.name, request.direction)
    return session.snapshot()


# Selection draft / 选择草稿

@router.put("/{session_id}/selection/current", response_model=SetupSessionSnapshot)
async def update_selection(
    request: SelectionUpdate,
    session: AccountSetupSession = Depends(get_setup_session),
):
    session.update_selection(name=request.name, strength=request.strength)
    return session.snapshot()


@router.post("/{session_id}/selection/affected-attributes", response_model=SetupSessionSnapshot)
async def add_affected_attribute(session: AccountSetupSession = Depends(get_setup_session)):
    session.add_affected_attribute()
    return session.snapshot()


@router.delete("/{session_id}/selection/affected-attributes", response_model=SetupSessionSnapshot)
async def delete_affected_attribute(
    name: str = Query(..., description="Affected attribute name"),
    session: AccountSetupSession = Depends(get_setup_session),
):
    session.delete_affected_attribute(name)
    return session.snapshot()


@router.post("/{session_id}/selection/reset", response_model=SetupSessionSnapshot)
async def reset_selection(session: AccountSetupSession = Depends(get_setup_session)):
    session.reset_selection()
    return session.snapshot()


# Quests / 任务

@router.post("/{session_id}/quests", response_model=SetupSessionSnapshot, status_code=201)
async def commit_quest(
    request: QuestCommit,
    session: AccountSetupSession = Depends(get_setup_session),
):
    """Commit the current selection draft as a quest."""
    session.commit_quest(request.name, request.experience_point_value)
    return session.snapshot()


@router.delete("/{session_id}/quests", response_model=SetupSessionSnapshot)
async def delete_quest(
    name: str = Query(..., description="Quest name"),
    session: AccountSetupSession = Depends(get_setup_session),
):
    session.delete_quest(name)
    return session.snapshot()


@router.post("/{session_id}/quests/move", response_model=SetupSessionSnapshot)
async def move_quest(
    request: NamedMoveRequest,
    session: AccountSetupSession = Depends(get_setup_session),
):
    session.move_quest(request.name, request.direction)
    return session.snapshot()


@router.post("/{session_id}/quests/experience", response_model=SetupSessionSnapshot)
async def change_quest_experience(
    request: NamedMoveRequest,
    session: AccountSetupSession = Depends(get_setup_session),
):
    session.change_quest_experience(request.name, request.direction)
    return session.snapshot()


# Submission / 提交

@router.post("/{session_id}/submit", response_model=SubmissionResult)
async def submit_session(
    request: SubmitRequest,
    session: AccountSetupSession = Depends(get_setup_session),
    cache: SessionCache = Depends(get_session_cache),
    service: ProfileService = Depends(get_profile_service),
):
    """
    提交档案

    Validate, assemble and persist the profile. The session is discarded on
    success.
    """
    blockers = session.submission_blockers()
    if blockers:
        raise ValidationError("Account setup is not complete", blockers)

    result = await service.submit_profile(request.user_id, session.attributes, session.quests)
    if result.success:
        await cache.remove(session.session_id)
        logger.info("Setup session %s submitted for user %s", session.session_id, request.user_id)
        return result

    if result.error_kind is None:
        status_code = 422
    else:
        status_code = SUBMISSION_STATUS.get(result.error_kind, 500)
    return JSONResponse(status_code=status_code, content=result.model_dump())

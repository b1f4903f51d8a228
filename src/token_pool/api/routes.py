"""Token routes: thin mapping from HTTP to the lifecycle manager."""

from fastapi import APIRouter, HTTPException, Request, status
from loguru import logger

from ..tokens import RenewOutcome, TokenLifecycleManager
from .models import (
    AssignResponse,
    ErrorResponse,
    GenerateRequest,
    GenerateResponse,
    KeepAliveResponse,
    MessageResponse,
    TokenRequest,
)

# Every route can fail on its input or on the store
_COMMON_ERRORS = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorResponse},
    status.HTTP_503_SERVICE_UNAVAILABLE: {"model": ErrorResponse},
}
_NOT_FOUND = {status.HTTP_404_NOT_FOUND: {"model": ErrorResponse}}

router = APIRouter(prefix="/token", tags=["token"], responses=_COMMON_ERRORS)


def _manager(request: Request) -> TokenLifecycleManager:
    return request.app.state.manager


def _require_token(body: TokenRequest) -> str:
    if not body.token or not body.token.strip():
        logger.warning("Invalid token provided")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid token")
    return body.token.strip()


@router.post(
    "/generate",
    response_model=GenerateResponse,
    status_code=status.HTTP_201_CREATED,
    responses={status.HTTP_409_CONFLICT: {"model": ErrorResponse}},
    summary="Add new tokens to the pool",
)
async def generate(body: GenerateRequest, request: Request) -> GenerateResponse:
    logger.debug("Attempting to generate tokens")
    if not body.count or body.count <= 0:
        logger.warning("Invalid count provided")
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Invalid count")

    tokens = await _manager(request).issue(body.count)
    logger.info(f"Generated {len(tokens)} tokens")
    return GenerateResponse(tokens=tokens)


@router.get(
    "/assign",
    response_model=AssignResponse,
    responses=_NOT_FOUND,
    summary="Lease a token",
)
async def assign(request: Request) -> AssignResponse:
    logger.debug("Attempting to assign a token")
    token = await _manager(request).lease()
    if token is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No available tokens")
    logger.info("Token assigned successfully")
    return AssignResponse(token=token)


@router.put(
    "/keep-alive",
    response_model=KeepAliveResponse,
    responses=_NOT_FOUND,
    summary="Renew a token",
)
async def keep_alive(body: TokenRequest, request: Request) -> KeepAliveResponse:
    token = _require_token(body)
    logger.debug(f"Attempting to extend keep-alive for token: {token}")

    result = await _manager(request).renew(token)
    if not result:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Token not found or already expired",
        )

    state = "lease" if result.outcome is RenewOutcome.RENEWED_LEASE else "pool"
    logger.info(f"Token keep-alive extended ({state})")
    return KeepAliveResponse(
        message="Token keep-alive extended", state=state, expires_at=result.expires_at
    )


@router.post(
    "/unblock",
    response_model=MessageResponse,
    responses=_NOT_FOUND,
    summary="Release a leased token",
)
async def unblock(body: TokenRequest, request: Request) -> MessageResponse:
    token = _require_token(body)
    logger.debug(f"Attempting to unblock token: {token}")

    if not await _manager(request).release(token):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Token not found or already unblocked",
        )
    logger.info("Token unblocked successfully")
    return MessageResponse(message="Token unblocked")


@router.delete("/delete", response_model=MessageResponse, summary="Revoke a token")
async def delete(body: TokenRequest, request: Request) -> MessageResponse:
    token = _require_token(body)
    logger.debug(f"Attempting to delete token: {token}")

    await _manager(request).revoke(token)
    logger.info("Token deleted successfully")
    return MessageResponse(message="Token deleted")

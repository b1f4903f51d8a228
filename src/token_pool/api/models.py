"""Request and response bodies for the token HTTP API."""

from typing import Optional

from pydantic import BaseModel


class GenerateRequest(BaseModel):
    """How many tokens to add to the pool."""
    count: Optional[int] = None


class TokenRequest(BaseModel):
    """Body carrying a single token."""
    token: Optional[str] = None


class GenerateResponse(BaseModel):
    tokens: list[str]


class AssignResponse(BaseModel):
    token: str


class MessageResponse(BaseModel):
    message: str


class KeepAliveResponse(BaseModel):
    """Result of a keep-alive call; state says which collection held the token."""
    message: str
    state: str
    expires_at: float


class HealthResponse(BaseModel):
    status: str
    pool_size: int
    leased: int
    max_tokens: int


class ErrorResponse(BaseModel):
    statusCode: int
    message: str

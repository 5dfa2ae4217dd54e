"""
Pydantic schemas for request payload validation.
"""

from typing import Optional

from pydantic import BaseModel, EmailStr, Field, field_validator

from gamehub.games import GameId, normalize_game_id

# game_scores.score is a 32-bit INTEGER column
MAX_SCORE = 2**31 - 1


def _strip_username(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError('username must not be blank')
    return v


class RegisterPayload(BaseModel):
    """Body of ``POST /api/register``."""

    username: str = Field(..., min_length=1, max_length=64)
    email: Optional[EmailStr] = None
    password: str = Field(..., min_length=1, max_length=256)

    @field_validator('username')
    @classmethod
    def strip_username(cls, v: str) -> str:
        return _strip_username(v)


class LoginPayload(BaseModel):
    """Body of ``POST /api/login``."""

    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

    @field_validator('username')
    @classmethod
    def strip_username(cls, v: str) -> str:
        return _strip_username(v)


class ScorePayload(BaseModel):
    """Body of ``POST /api/scores``."""

    game: GameId
    score: int = Field(..., ge=0, le=MAX_SCORE, strict=True)

    @field_validator('game', mode='before')
    @classmethod
    def canonical_game(cls, v):
        return normalize_game_id(v)


class GamePath(BaseModel):
    """Game segment of ``GET /api/scores/<game>``."""

    game: GameId

    @field_validator('game', mode='before')
    @classmethod
    def canonical_game(cls, v):
        return normalize_game_id(v)

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator


class CandidateIn(BaseModel):
    name: str = Field(..., min_length=1, examples=["Jane Doe"])
    party: str = Field(..., min_length=1, examples=["Green"])
    age: Optional[int] = Field(None, ge=0)

    @field_validator("name", "party")
    @classmethod
    def not_blank(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class CandidateUpdate(BaseModel):
    """Partial update; only the fields the client sends are written."""
    name: Optional[str] = Field(None, min_length=1)
    party: Optional[str] = Field(None, min_length=1)
    age: Optional[int] = Field(None, ge=0)

    @field_validator("name", "party")
    @classmethod
    def not_blank(cls, value: Optional[str]) -> str:
        if value is None:
            raise ValueError("must not be null")
        value = value.strip()
        if not value:
            raise ValueError("must not be blank")
        return value


class VoteRecord(BaseModel):
    user: str
    votedAt: Optional[datetime] = None


class CandidateOut(BaseModel):
    id: str
    name: str
    party: str
    age: Optional[int] = None
    votes: List[VoteRecord] = []
    voteCount: int = 0


class CandidatePublic(BaseModel):
    name: str
    party: str


class TallyEntry(BaseModel):
    party: str
    count: int

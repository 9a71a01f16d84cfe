"""Account and entitlement schemas."""

from datetime import datetime

from pydantic import BaseModel, Field

SUBSCRIPTION_ACTIVE = "active"
SUBSCRIPTION_ACTIVE_UNLIMITED = "Active Unlimited"
SUBSCRIPTION_TRIALING = "trialing"
SUBSCRIPTION_CANCELED = "canceled"


class AccessDecision(BaseModel):
    allowed: bool
    limit_reached: bool = False
    trial_expired: bool = False
    transcriptions_used: int = 0
    subscription_status: str


class VocabularyEntry(BaseModel):
    id: str
    word: str
    phrases: list[str] = Field(default_factory=list)
    created_at: datetime


class CreateVocabularyRequest(BaseModel):
    word: str = Field(min_length=1, max_length=200)
    phrases: list[str] = Field(default_factory=list, max_length=100)

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class FeedbackType(str, Enum):
    BUG = "bug"
    FEATURE = "feature"
    IMPROVEMENT = "improvement"
    GENERAL = "general"


class FeedbackPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class Feedback(BaseModel):
    id: str
    feedback_type: FeedbackType
    category: Optional[str] = None
    subject: Optional[str] = None
    message: str
    priority: FeedbackPriority = FeedbackPriority.MEDIUM
    status: str = "pending"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class FeedbackCreate(BaseModel):
    feedback_type: FeedbackType = FeedbackType.GENERAL
    category: Optional[str] = Field(None, max_length=100)
    subject: Optional[str] = Field(None, max_length=255)
    message: str = Field(..., min_length=1, max_length=5000)
    priority: FeedbackPriority = FeedbackPriority.MEDIUM

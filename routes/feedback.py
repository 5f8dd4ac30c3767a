from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from models.feedback import Feedback, FeedbackCreate
from models.user import User
from routes.deps import get_current_user
from services.feedback_service import feedback_service

router = APIRouter()


@router.post("", response_model=Feedback, status_code=201)
async def submit_feedback(payload: FeedbackCreate, user: User = Depends(get_current_user)) -> Feedback:
    return feedback_service.submit(user.id, payload)


@router.get("", response_model=List[Feedback])
async def list_feedback(user: User = Depends(get_current_user)) -> List[Feedback]:
    return feedback_service.list_feedback(user.id)


@router.get("/{feedback_id}", response_model=Feedback)
async def get_feedback(feedback_id: str, user: User = Depends(get_current_user)) -> Feedback:
    return feedback_service.get_feedback(user.id, feedback_id)

"""Expense model for recorded (pending/confirmed/rejected) expenses."""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"
STATUS_REJECTED = "rejected"


@dataclass
class Expense:
    id: Optional[int]  # None until inserted
    user_id: int
    description: str
    amount: Optional[float]
    category_id: Optional[int]
    suggested_category_id: Optional[int] = None
    category_confidence: Optional[float] = None
    inference_method: Optional[str] = None  # InferenceMethod value
    status: str = STATUS_PENDING  # 'pending', 'confirmed', or 'rejected'
    created_at: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None

from typing import Optional
from pydantic import BaseModel, Field
from decimal import Decimal
from datetime import date, datetime

from hotel_events.models.promotion import DiscountType


class PromotionBase(BaseModel):
    name: str
    code: str = Field(max_length=20)
    discount_type: DiscountType
    discount_value: Decimal = Field(gt=0)
    start_date: date
    end_date: date
    description: Optional[str] = None
    min_booking_amount: Optional[Decimal] = None
    max_uses: Optional[int] = Field(default=None, ge=1)


class PromotionCreate(PromotionBase):
    pass


class Promotion(PromotionBase):
    id: int
    current_uses: int = 0
    is_active: bool
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True

import logging
from datetime import date
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from hotel_events.core.exceptions import ConflictError, NotFoundError, ValidationError
from hotel_events.models.promotion import Promotion, DiscountType

logger = logging.getLogger(__name__)


def create_promotion(
    db: Session,
    name: str,
    code: str,
    discount_type: DiscountType,
    discount_value,
    start_date: date,
    end_date: date,
    description: Optional[str] = None,
    min_booking_amount=None,
    max_uses: Optional[int] = None,
) -> Promotion:
    if not name or not name.strip():
        raise ValidationError("Promotion name cannot be empty")
    if not code or not code.strip():
        raise ValidationError("Promotion code cannot be empty")
    if Decimal(discount_value) <= 0:
        raise ValidationError("Discount value must be positive")
    if discount_type == DiscountType.PERCENTAGE and Decimal(discount_value) > 100:
        raise ValidationError("Percentage discount cannot exceed 100")
    if end_date < start_date:
        raise ValidationError("End date must not be before start date")

    code = code.strip().upper()
    if db.query(Promotion.id).filter(Promotion.code == code).first():
        raise ConflictError("Promotion code already exists")

    promotion = Promotion(
        name=name.strip(),
        code=code,
        discount_type=discount_type,
        discount_value=Decimal(discount_value),
        min_booking_amount=min_booking_amount,
        start_date=start_date,
        end_date=end_date,
        description=description,
        max_uses=max_uses,
        current_uses=0,
        is_active=True,
    )
    db.add(promotion)
    db.commit()
    db.refresh(promotion)
    logger.info("Promotion created: %s", promotion.code)
    return promotion


def list_promotions(db: Session, active_only: bool = False, on_date: Optional[date] = None) -> List[Promotion]:
    query = db.query(Promotion)
    if active_only:
        query = query.filter(Promotion.is_active == True)  # noqa: E712
    if on_date:
        query = query.filter(Promotion.start_date <= on_date, Promotion.end_date >= on_date)
    return query.order_by(Promotion.start_date.desc(), Promotion.id.desc()).all()


def deactivate_promotion(db: Session, promotion_id: int) -> Promotion:
    promotion = db.query(Promotion).filter(Promotion.id == promotion_id).first()
    if not promotion:
        raise NotFoundError("Promotion not found")
    promotion.is_active = False
    db.commit()
    db.refresh(promotion)
    logger.info("Promotion deactivated: %s", promotion.code)
    return promotion

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from hotel_events.db.session import get_db
from hotel_events.api.deps import require_roles
from hotel_events.models.user import User, RoleName
from hotel_events.schemas.promotion import Promotion as PromotionSchema, PromotionCreate
from hotel_events.services import promotions as promotion_service

router = APIRouter(prefix="/marketing", tags=["Marketing"])

get_current_marketing = require_roles(RoleName.MARKETING_EXECUTIVE, RoleName.GENERAL_MANAGER)


@router.post("/promotions", response_model=PromotionSchema, status_code=status.HTTP_201_CREATED)
def create_promotion(
    body: PromotionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_marketing),
):
    return promotion_service.create_promotion(db, **body.model_dump())


@router.get("/promotions", response_model=list[PromotionSchema])
def list_promotions(
    active_only: bool = False,
    on_date: Optional[date] = None,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_marketing),
):
    return promotion_service.list_promotions(db, active_only=active_only, on_date=on_date)


@router.patch("/promotions/{id}/deactivate", response_model=PromotionSchema)
def deactivate_promotion(
    id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_marketing),
):
    return promotion_service.deactivate_promotion(db, id)

from fastapi import APIRouter

# Auth
from hotel_events.api.v1.public.auth import router as auth_router

# Public: venues, bookings, verification
from hotel_events.api.v1.public.venues import router as venues_router
from hotel_events.api.v1.public.bookings import router as bookings_router
from hotel_events.api.v1.public.verify import router as verify_router

# Public: user profile & notifications
from hotel_events.api.v1.public.me import router as me_router

# Staff
from hotel_events.api.v1.staff.availability import router as availability_router
from hotel_events.api.v1.staff.manager import router as manager_router
from hotel_events.api.v1.staff.coordinator import router as coordinator_router
from hotel_events.api.v1.staff.catering import router as catering_router
from hotel_events.api.v1.staff.reception import router as reception_router
from hotel_events.api.v1.staff.marketing import router as marketing_router

api_router = APIRouter()

# --- Auth ---
api_router.include_router(auth_router)

# --- Public ---
api_router.include_router(venues_router)
api_router.include_router(bookings_router)
api_router.include_router(verify_router)
api_router.include_router(me_router)

# --- Staff ---
api_router.include_router(availability_router)
api_router.include_router(manager_router)
api_router.include_router(coordinator_router)
api_router.include_router(catering_router)
api_router.include_router(reception_router)
api_router.include_router(marketing_router)

from hotel_events.schemas.common import PaginatedResponse, ErrorResponse, MessageResponse, CountResponse
from hotel_events.schemas.user import (
    User, UserCreate, StaffUserCreate, UserUpdate, UserSummary, PasswordChange,
    RoleAssignment, Token, TokenPayload,
)
from hotel_events.schemas.venue import Venue, VenueCreate, VenueUpdate, VenueSummary
from hotel_events.schemas.availability import (
    Slot, SlotCreate, SlotRangeCreate, MaintenanceCreate, SlotStatusUpdate,
    BulkDeleteRequest, CalendarResponse, AvailabilitySummary, VenueAvailabilityCheck,
)
from hotel_events.schemas.booking import (
    Booking, BookingCreate, BookingUpdate, BookingVerification,
    DecorPreferences, CateringPreferences, CoordinatorAssignment, SetupUpdate, CateringUpdate,
)
from hotel_events.schemas.notification import (
    Notification, NotificationSend, NotificationBulkDelete, CleanupStats,
)
from hotel_events.schemas.promotion import Promotion, PromotionCreate

from hotel_events.models.user import User, Role, RoleName, STAFF_ROLES, user_roles
from hotel_events.models.venue import Venue, VenueType
from hotel_events.models.availability import VenueAvailability, AvailabilityStatus
from hotel_events.models.booking import (
    Booking, BookingStatus, DecorPreferences, CateringPreferences, MealType, ServingStyle,
)
from hotel_events.models.notification import Notification, AlertType, SenderType
from hotel_events.models.promotion import Promotion, DiscountType

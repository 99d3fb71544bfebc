from hotel_events.db.session import Base
from hotel_events.models.user import User, Role, user_roles
from hotel_events.models.venue import Venue
from hotel_events.models.availability import VenueAvailability
from hotel_events.models.booking import Booking, DecorPreferences, CateringPreferences
from hotel_events.models.notification import Notification
from hotel_events.models.promotion import Promotion

import random
import re
import string
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from hotel_events.core.config import settings
from hotel_events.core.exceptions import ConflictError
from hotel_events.models.booking import Booking

REFERENCE_CODE_PATTERN = re.compile(r"^\d{8}-\d{6}-[A-Z0-9]{6}$")
_CHARS = string.ascii_uppercase + string.digits


def generate_reference_code(now: Optional[datetime] = None) -> str:
    """Build a 'YYYYMMDD-HHMMSS-XXXXXX' booking reference."""
    now = now or datetime.now()
    suffix = "".join(random.choices(_CHARS, k=6))
    return f"{now:%Y%m%d}-{now:%H%M%S}-{suffix}"


def is_valid_reference_code(code: Optional[str]) -> bool:
    if not code or not code.strip():
        return False
    return REFERENCE_CODE_PATTERN.match(code) is not None


def make_unique_reference_code(db: Session) -> str:
    """Generate a reference code not yet used by any booking, retrying on collision."""
    for _ in range(settings.REFERENCE_CODE_MAX_ATTEMPTS):
        code = generate_reference_code()
        if db.query(Booking.id).filter(Booking.reference_code == code).first() is None:
            return code
    raise ConflictError("Could not allocate a unique booking reference code")

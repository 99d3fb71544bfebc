"""
QR code generation for booking verification links
"""

import base64
import io
import logging
from typing import Optional

import qrcode

from hotel_events.core.config import settings

logger = logging.getLogger(__name__)


def get_verification_url(reference_code: str) -> str:
    """URL reception scans to look a booking up by its reference code"""
    return f"{settings.BASE_URL}/verify-booking?ref={reference_code}"


def generate_qr_png(data: str, size: Optional[int] = None) -> bytes:
    size = size or settings.QR_SIZE
    # version 1 plus the quiet zone is 29 modules wide; fit=True may grow it
    qr = qrcode.QRCode(
        version=1,
        error_correction=qrcode.constants.ERROR_CORRECT_L,
        box_size=max(1, size // 29),
        border=4,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")

    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def generate_booking_qr_data_url(reference_code: str) -> Optional[str]:
    """PNG data URL encoding the verification link, or None if rendering fails"""
    try:
        png = generate_qr_png(get_verification_url(reference_code))
    except (OSError, ValueError):
        logger.exception("Error generating QR code for reference %s", reference_code)
        return None
    return "data:image/png;base64," + base64.b64encode(png).decode("ascii")

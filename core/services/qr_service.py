# =============================================================================
# core/services/qr_service.py - QR Code Rendering
# =============================================================================
# Renders a URL into a PNG QR code and returns it as a data URI that the
# frontend can drop straight into an <img src>.
# =============================================================================

import base64
import io
import logging

import qrcode
from fastapi.concurrency import run_in_threadpool

logger = logging.getLogger(__name__)

DARK_COLOR = "#0e7490"
LIGHT_COLOR = "#ffffff"


def render_qr_data_url(
    data: str,
    border: int = 1,
    fill_color: str = DARK_COLOR,
    back_color: str = LIGHT_COLOR,
) -> str:
    """
    Render `data` as a high error-correction PNG QR code.

    Returns:
        "data:image/png;base64,..." string
    """
    qr = qrcode.QRCode(
        error_correction=qrcode.constants.ERROR_CORRECT_H,
        box_size=4,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color=fill_color, back_color=back_color)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    encoded = base64.b64encode(buf.getvalue()).decode("ascii")
    return f"data:image/png;base64,{encoded}"


class QRService:
    """Service for generating profile QR codes."""

    @staticmethod
    async def generate(data: str) -> str:
        """Render off the event loop and return the data URI."""
        return await run_in_threadpool(render_qr_data_url, data)

"""QR image rendering for redemption tokens."""
import io

import qrcode


class QRService:
    """Renders a token string to PNG; holds no attendance logic."""

    @staticmethod
    def render_png(payload: str, box_size: int = 10, border: int = 2) -> bytes:
        qr = qrcode.QRCode(
            version=None,  # Auto-determine size
            error_correction=qrcode.constants.ERROR_CORRECT_M,
            box_size=box_size,
            border=border,
        )
        qr.add_data(payload)
        qr.make(fit=True)

        img = qr.make_image(fill_color="black", back_color="white")

        buffered = io.BytesIO()
        img.save(buffered, format="PNG")
        return buffered.getvalue()

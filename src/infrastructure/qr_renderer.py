"""QR code rendering (``qrcode`` + Pillow)."""

import io

import qrcode


def render_png(data: str) -> bytes:
    """Encode *data* as a QR code and return the PNG bytes."""
    img = qrcode.make(data)
    buf = io.BytesIO()
    img.save(buf, format="PNG")
    return buf.getvalue()

"""QR payloads: a verify URL that embeds the batch id."""

from __future__ import annotations

from urllib.parse import unquote, urlparse

VERIFY_SEGMENT = "verify"


def verify_url(base_url: str, batch_id: str) -> str:
    return f"{base_url.rstrip('/')}/{batch_id}"


def parse_qr_payload(payload: str) -> str:
    """
    Extract the batch id from a scanned payload.

    Accepts ``https://host/verify/<id>`` (query and fragment ignored, any
    host) or a bare batch id.  Raises ``ValueError`` on a blank payload or a
    URL with no id after ``/verify/``.
    """
    text = (payload or "").strip()
    if not text:
        raise ValueError("Empty QR payload")

    parsed = urlparse(text)
    if not (parsed.scheme and parsed.netloc):
        return text

    segments = [s for s in parsed.path.split("/") if s]
    if VERIFY_SEGMENT in segments:
        idx = len(segments) - 1 - segments[::-1].index(VERIFY_SEGMENT)
        if idx + 1 < len(segments):
            return unquote(segments[idx + 1])
    raise ValueError(f"No batch id in QR payload: {text}")

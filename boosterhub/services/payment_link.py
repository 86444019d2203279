"""
Payment Link Codec
Encode and decode Zelle deep links carrying a base64 JSON payload
"""

import base64
import binascii
import json
from typing import Optional
from urllib.parse import unquote, urlsplit

from pydantic import ValidationError as PydanticValidationError

from boosterhub.exceptions import (
    DecodeError,
    InvalidBase64Error,
    InvalidJsonError,
    MalformedUrlError,
    SchemaMismatchError,
)
from boosterhub.schemas.payment import PaymentLinkPayload

ZELLE_BASE_URL = "https://enroll.zellepay.com/qr-codes"

# Seeded rows carry ".../qr-codes?data=PLACEHOLDER_<club id>" until an admin sets a real link
PLACEHOLDER_MARKER = "PLACEHOLDER"

REQUIRED_FIELDS = ("name", "action", "token")


def encode_payment_link(payload: PaymentLinkPayload, base_url: str = ZELLE_BASE_URL) -> str:
    """
    Build a deep link for a payload.

    Output is byte-identical for identical input, so re-encoding is idempotent.
    """
    document = json.dumps(
        {"name": payload.name, "action": payload.action, "token": payload.token},
        separators=(",", ":"),
        ensure_ascii=False,
    )
    data = base64.b64encode(document.encode("utf-8")).decode("ascii")
    return f"{base_url}?data={data}"


def _extract_data_param(url: str) -> str:
    query = urlsplit(url.strip()).query
    for part in query.split("&"):
        key, sep, value = part.partition("=")
        if sep and key == "data":
            # Percent-decoding only: '+' is part of the base64 alphabet here
            return unquote(value)
    return ""


def _b64decode(data: str) -> bytes:
    data = data.strip().replace("-", "+").replace("_", "/")
    data += "=" * (-len(data) % 4)
    try:
        return base64.b64decode(data, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise InvalidBase64Error() from exc


def decode_payment_link(url: str) -> PaymentLinkPayload:
    """
    Parse a deep link back into its payload

    Raises:
        MalformedUrlError: no data parameter
        InvalidBase64Error: data is not base64
        InvalidJsonError: decoded bytes are not JSON
        SchemaMismatchError: name, action or token missing
    """
    data = _extract_data_param(url or "")
    if not data:
        raise MalformedUrlError()

    raw = _b64decode(data)

    try:
        document = json.loads(raw.decode("utf-8"))
    except (UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise InvalidJsonError() from exc

    if not isinstance(document, dict):
        raise SchemaMismatchError()

    missing = [field for field in REQUIRED_FIELDS if not isinstance(document.get(field), str)]
    if missing:
        raise SchemaMismatchError(f"Payment link data is missing required fields: {', '.join(missing)}")

    try:
        return PaymentLinkPayload(**{field: document[field] for field in REQUIRED_FIELDS})
    except PydanticValidationError as exc:
        raise SchemaMismatchError() from exc


def try_decode_payment_link(url: Optional[str]) -> Optional[PaymentLinkPayload]:
    """Decode for display purposes; None when the link is absent or undecodable"""
    if not url:
        return None
    try:
        return decode_payment_link(url)
    except DecodeError:
        return None


def is_placeholder(url: Optional[str]) -> bool:
    return bool(url) and PLACEHOLDER_MARKER in url


def is_usable_payment_url(url: Optional[str]) -> bool:
    """A payment URL counts only when set and not a seeded placeholder"""
    if url is None or not url.strip():
        return False
    return not is_placeholder(url)

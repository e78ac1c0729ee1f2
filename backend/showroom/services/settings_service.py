from __future__ import annotations

import base64
import binascii
import io
import logging
import re
from dataclasses import replace

from PIL import Image, UnidentifiedImageError

from ..constants import LOGO_JPEG_QUALITY, LOGO_MAX_BYTES, LOGO_MAX_HEIGHT, LOGO_MAX_WIDTH
from ..entities import CompanyProfile
from ..extensions import ledger
from ..ledger import UnitOfWork
from ..validation import STR, ModelValidationPolicy, ValidationError, validate_payload

logger = logging.getLogger(__name__)

DATA_URI_RE = re.compile(r"^data:(?P<mime>image/[A-Za-z0-9.+-]+);base64,(?P<payload>.*)$", re.DOTALL)

COMPANY_POLICY = ModelValidationPolicy(
    field_types={
        "company_name": STR,
        "company_address": STR,
        "company_logo": STR,
    },
    required_on_create={"company_name"},
    max_lengths={"company_name": 255, "company_address": 1000},
)


class SettingsValidationError(ValidationError):
    pass


def _fit_logo(decoded: bytes) -> str:
    try:
        with Image.open(io.BytesIO(decoded)) as image:
            image.load()
            image.thumbnail((LOGO_MAX_WIDTH, LOGO_MAX_HEIGHT))
            if image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info:
                rgba = image.convert("RGBA")
                flattened = Image.new("RGB", rgba.size, (255, 255, 255))
                flattened.paste(rgba, mask=rgba.getchannel("A"))
            else:
                flattened = image.convert("RGB")
    except (UnidentifiedImageError, Image.DecompressionBombError, OSError) as exc:
        raise SettingsValidationError("company_logo could not be read as an image", details={"error": str(exc)})

    buffer = io.BytesIO()
    flattened.save(buffer, format="JPEG", quality=LOGO_JPEG_QUALITY)
    logger.debug("Logo stored at %dx%d", *flattened.size)
    return "data:image/jpeg;base64," + base64.b64encode(buffer.getvalue()).decode("ascii")


def validate_logo(logo: str) -> str:
    """
    Accept "" (no logo) or a base64 image data URI of at most 2 MB decoded.

    The stored logo is the upload scaled down to fit 400x200, re-encoded as
    an 85% JPEG data URI.
    """
    if logo == "":
        return logo

    match = DATA_URI_RE.match(logo)
    if not match:
        raise SettingsValidationError("company_logo must be a base64 data URI with an image/* type")

    try:
        decoded = base64.b64decode(match.group("payload"), validate=True)
    except (binascii.Error, ValueError):
        raise SettingsValidationError("company_logo is not valid base64")

    if not decoded:
        raise SettingsValidationError("company_logo is empty")
    if len(decoded) > LOGO_MAX_BYTES:
        raise SettingsValidationError(
            "company_logo is too large; use an image smaller than 2MB",
            details={"size_bytes": len(decoded), "max_bytes": LOGO_MAX_BYTES},
        )
    return _fit_logo(decoded)


def get_company_profile() -> CompanyProfile:
    with ledger.reading() as state:
        return state.company or ledger.default_company


def update_company_profile(data: dict) -> CompanyProfile:
    """Merge the given fields into the company profile."""
    patch = validate_payload(payload=data, policy=COMPANY_POLICY, partial=True)
    if "company_logo" in patch:
        patch["company_logo"] = validate_logo(patch["company_logo"])

    def _op(uow: UnitOfWork) -> CompanyProfile:
        current = get_company_profile()
        updated = replace(current, **patch)
        if updated != current:
            uow.set_company(updated)
        return updated

    profile = ledger.execute(_op, action="settings.updated")
    logger.info("Updated company profile fields: %s", ", ".join(sorted(patch.keys())) or "none")
    return profile

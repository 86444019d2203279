"""
QR Code Renderer
Render a URL into a PNG image with per-club rendering options
"""

import re
from dataclasses import dataclass
from io import BytesIO
from typing import Mapping, Optional, Union

import qrcode
from PIL import Image
from pydantic import ValidationError as PydanticValidationError
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L, ERROR_CORRECT_M, ERROR_CORRECT_Q

from boosterhub.exceptions import EmptyInputError, InvalidSettingsError
from boosterhub.schemas.payment import QRColor, QRSettings

DEFAULT_WIDTH = 640
MAX_WIDTH = 4096
DEFAULT_MARGIN = 2
DEFAULT_DARK = "#000000"
DEFAULT_LIGHT = "#FFFFFF"
DEFAULT_LEVEL = "M"

ERROR_CORRECTION_LEVELS = {
    "L": ERROR_CORRECT_L,
    "M": ERROR_CORRECT_M,
    "Q": ERROR_CORRECT_Q,
    "H": ERROR_CORRECT_H,
}

HEX_COLOR = re.compile(r"^#(?:[0-9a-fA-F]{3}|[0-9a-fA-F]{6}|[0-9a-fA-F]{8})$")


@dataclass(frozen=True)
class ResolvedQRSettings:
    width: int
    margin: int
    dark: str
    light: str
    level: str

    def to_settings(self) -> QRSettings:
        return QRSettings(
            width=self.width,
            margin=self.margin,
            color=QRColor(dark=self.dark, light=self.light),
            error_correction_level=self.level,
        )


def default_settings() -> ResolvedQRSettings:
    return ResolvedQRSettings(DEFAULT_WIDTH, DEFAULT_MARGIN, DEFAULT_DARK, DEFAULT_LIGHT, DEFAULT_LEVEL)


def resolve_settings(settings: Union[QRSettings, Mapping, None]) -> ResolvedQRSettings:
    """
    Fill defaults for absent options and validate the rest

    Raises:
        InvalidSettingsError: width outside 1..MAX_WIDTH, margin < 0, malformed color or unknown level
    """
    if settings is None:
        return default_settings()

    if not isinstance(settings, QRSettings):
        try:
            settings = QRSettings.model_validate(settings)
        except PydanticValidationError as exc:
            raise InvalidSettingsError("QR settings are malformed") from exc

    width = DEFAULT_WIDTH if settings.width is None else settings.width
    margin = DEFAULT_MARGIN if settings.margin is None else settings.margin
    color = settings.color or QRColor()
    dark = color.dark or DEFAULT_DARK
    light = color.light or DEFAULT_LIGHT
    level = (settings.error_correction_level or DEFAULT_LEVEL).upper()

    if width < 1:
        raise InvalidSettingsError("QR width must be at least 1 pixel")
    if width > MAX_WIDTH:
        raise InvalidSettingsError(f"QR width cannot exceed {MAX_WIDTH} pixels")
    if margin < 0:
        raise InvalidSettingsError("QR margin cannot be negative")
    for value in (dark, light):
        if not HEX_COLOR.match(value):
            raise InvalidSettingsError(f"QR color '{value}' is not a hex color")
    if level not in ERROR_CORRECTION_LEVELS:
        raise InvalidSettingsError("QR error correction level must be one of L, M, Q, H")

    return ResolvedQRSettings(width, margin, dark, light, level)


class QRRenderer:
    """Stateless renderer; every call recomputes the image"""

    def render(self, url: Optional[str], settings: Union[QRSettings, Mapping, None] = None) -> bytes:
        """
        Render a URL as PNG

        Args:
            url: Content to encode
            settings: Rendering options, defaults applied to anything unset

        Returns:
            PNG bytes, exactly width x width pixels
        """
        if url is None or not url.strip():
            raise EmptyInputError("Cannot render a QR code for an empty URL")

        options = resolve_settings(settings)

        qr = qrcode.QRCode(
            error_correction=ERROR_CORRECTION_LEVELS[options.level],
            border=options.margin,
        )
        qr.add_data(url)
        qr.make(fit=True)

        # Largest whole-pixel module size that fits, then scale to the exact width
        total_modules = qr.modules_count + 2 * options.margin
        qr.box_size = max(1, options.width // total_modules)

        img = qr.make_image(fill_color=options.dark, back_color=options.light).get_image()
        if img.size != (options.width, options.width):
            img = img.resize((options.width, options.width), Image.Resampling.NEAREST)

        output = BytesIO()
        img.save(output, format="PNG")
        return output.getvalue()


# Singleton
qr_renderer = QRRenderer()

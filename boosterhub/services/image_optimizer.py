"""
Image Optimization Service
Normalize uploaded QR code images: fit inside a square, strip metadata, PNG
"""

from io import BytesIO
from PIL import Image, UnidentifiedImageError
from typing import Tuple

from boosterhub.exceptions import ValidationError


class ImageOptimizer:
    """Resize (never enlarge) and re-encode as compressed PNG"""

    MAX_DIMENSION = 640  # Max width or height

    @staticmethod
    def optimize(image_bytes: bytes) -> Tuple[bytes, str]:
        """
        Fit an image inside MAX_DIMENSION x MAX_DIMENSION, keeping aspect ratio.

        Args:
            image_bytes: Uploaded image bytes

        Returns:
            Tuple of (png_bytes, content_type)

        Raises:
            ValidationError: If the bytes are not a readable image
        """
        try:
            img = Image.open(BytesIO(image_bytes))
            img.load()
        except (UnidentifiedImageError, OSError) as exc:
            raise ValidationError("Uploaded file is not a valid image") from exc

        has_transparency = img.mode in ('RGBA', 'LA') or (img.mode == 'P' and 'transparency' in img.info)

        # thumbnail() keeps aspect ratio and only ever shrinks
        img.thumbnail((ImageOptimizer.MAX_DIMENSION, ImageOptimizer.MAX_DIMENSION), Image.Resampling.LANCZOS)

        if has_transparency:
            img = img.convert('RGBA')
        elif img.mode != 'RGB':
            img = img.convert('RGB')

        # Metadata is dropped by not copying EXIF
        output = BytesIO()
        img.save(output, format='PNG', optimize=True, compress_level=9)
        return output.getvalue(), "image/png"


# Singleton
image_optimizer = ImageOptimizer()

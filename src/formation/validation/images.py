"""Image dimension rules.

The upload's temp file is opened with Pillow and only its header is read
(``Image.open`` is lazy). Anything Pillow cannot identify fails the rule
instead of raising: an unreadable "image" does not meet the constraint.

Pillow is an optional dependency (``pip install formation[images]``).
"""

import logging
from typing import Any

from formation.http.forms import as_upload

logger = logging.getLogger("formation.images")


def image_size(value: Any) -> tuple[int, int] | None:
    """Return ``(width, height)`` of an uploaded image, or None if undecodable."""
    upload = as_upload(value)
    if upload is None or not upload.uploaded:
        return None

    from formation.errors import ConfigurationError

    try:
        from PIL import Image
    except ImportError:
        msg = (
            "Image dimension rules require the 'Pillow' package. "
            "Install it with: pip install formation[images]"
        )
        raise ConfigurationError(msg) from None

    try:
        with Image.open(upload.tmp_path) as image:
            return image.size
    except (OSError, ValueError, Image.DecompressionBombError) as exc:
        logger.debug("Could not decode %s as an image: %s", upload.name, exc)
        return None


def _bound(size: Any) -> int:
    try:
        return int(size)
    except (TypeError, ValueError):
        return 0


def min_width(value: Any, size: Any = 0) -> bool:
    """Image is at least *size* pixels wide."""
    dims = image_size(value)
    return dims is not None and dims[0] >= _bound(size)


def min_height(value: Any, size: Any = 0) -> bool:
    """Image is at least *size* pixels high."""
    dims = image_size(value)
    return dims is not None and dims[1] >= _bound(size)


def max_width(value: Any, size: Any = 0) -> bool:
    """Image is at most *size* pixels wide."""
    dims = image_size(value)
    return dims is not None and dims[0] <= _bound(size)


def max_height(value: Any, size: Any = 0) -> bool:
    """Image is at most *size* pixels high."""
    dims = image_size(value)
    return dims is not None and dims[1] <= _bound(size)

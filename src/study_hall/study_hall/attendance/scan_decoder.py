from __future__ import annotations

import logging
from typing import BinaryIO, Optional, Union

from PIL import Image, UnidentifiedImageError

logger = logging.getLogger(__name__)


def decode_qr_payload(image: Union[Image.Image, BinaryIO]) -> Optional[str]:
    """Return the text of the first QR code in an image, or None.

    Unreadable images, frames without a code and non-UTF-8 data all count as
    "nothing scanned"; callers treat None as a non-event.
    """

    if not isinstance(image, Image.Image):
        try:
            image = Image.open(image)
        except (UnidentifiedImageError, OSError):
            logger.debug("Uploaded scan is not a readable image")
            return None

    # pyzbar loads the native zbar library at import time.
    from pyzbar.pyzbar import ZBarSymbol
    from pyzbar.pyzbar import decode as pyzbar_decode

    decoded = pyzbar_decode(image, symbols=[ZBarSymbol.QRCODE])
    if not decoded:
        return None

    try:
        return decoded[0].data.decode("utf-8")
    except UnicodeDecodeError:
        logger.debug("QR code data is not valid UTF-8; ignoring frame")
        return None

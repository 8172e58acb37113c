import logging
import os
import re

import barcode
from barcode.writer import ImageWriter
from PIL import ImageOps

from models import CODE128, FORMATS
from services.errors import GenerationError

logger = logging.getLogger(__name__)

# Fixed payload widths; Code128 is not padded
PAD_WIDTHS = {
    'ean13': 13,
    'ean14': 14,
}

SCALE = 3
BAR_HEIGHT = 10
PADDING_X = 20
PADDING_Y = 10

WRITER_OPTIONS = {
    'module_width': 0.1 * SCALE,
    'module_height': float(BAR_HEIGHT),
    'font_size': 4 * SCALE,
    'text_distance': 2.0 * SCALE,
    'quiet_zone': 2.0,
    'write_text': True,
    'center_text': True,
}

_DIGITS = re.compile(r'[0-9]+')

def build_payload(code, fmt):
    """
    Text encoded into the barcode: the code's decimal digits, left padded
    with zeros for the fixed width formats.
    """
    if fmt not in FORMATS:
        raise GenerationError(code, fmt, "unknown format")

    if isinstance(code, float) and code.is_integer():
        code = int(code)
    payload = str(code)

    width = PAD_WIDTHS.get(fmt)
    if width:
        payload = payload.zfill(width)

    if not _DIGITS.fullmatch(payload):
        raise GenerationError(code, fmt, f"payload {payload!r} is not all digits")
    if width and len(payload) != width:
        raise GenerationError(code, fmt, f"payload {payload!r} longer than {width} digits")
    return payload

def barcode_filename(fmt, payload):
    return f"barcode_{fmt}_{payload}.png"

def make_barcode(payload, fmt):
    barcode_class = barcode.get_barcode_class(fmt)
    kwargs = {'writer': ImageWriter()}
    if fmt != CODE128:
        # Render the digits as given rather than recomputing the check digit
        kwargs['no_checksum'] = True

    return barcode_class(payload, **kwargs)

def render_barcode(payload, fmt):
    """Returns a PIL image of the barcode with its text and white margins."""
    image = make_barcode(payload, fmt).render(WRITER_OPTIONS)
    return ImageOps.expand(
        image,
        border=(PADDING_X, PADDING_Y, PADDING_X, PADDING_Y),
        fill='white'
    )

def generate_barcode(code, fmt, barcodes_dir):
    """
    Generates the PNG for a code and returns its path.
    Raises GenerationError when the code cannot be rendered or written.
    """
    payload = build_payload(code, fmt)
    logger.info("Generating %s barcode for %s", fmt, payload)

    try:
        image = render_barcode(payload, fmt)
        os.makedirs(barcodes_dir, exist_ok=True)
        filepath = os.path.join(barcodes_dir, barcode_filename(fmt, payload))
        image.save(filepath, format='PNG')
    except Exception as e:
        raise GenerationError(code, fmt, str(e)) from e

    logger.info("Saved barcode image %s", filepath)
    return filepath

def try_generate_barcode(code, fmt, barcodes_dir):
    """Batch variant of generate_barcode: logs and returns None on failure."""
    try:
        return generate_barcode(code, fmt, barcodes_dir)
    except GenerationError as e:
        logger.warning("Skipping code: %s", e)
        return None

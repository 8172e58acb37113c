import logging
import os

from models import is_valid_format
from services.errors import ClientInputError

logger = logging.getLogger(__name__)

def remove_barcode_images(fmt, barcodes_dir):
    """Deletes barcode_<fmt>_*.png files. Returns how many were removed."""
    if not os.path.isdir(barcodes_dir):
        return 0

    prefix = f"barcode_{fmt}_"
    removed = 0
    for name in os.listdir(barcodes_dir):
        if name.startswith(prefix):
            os.remove(os.path.join(barcodes_dir, name))
            removed += 1
    return removed

def clear_codes(registry, fmt, barcodes_dir):
    if not is_valid_format(fmt):
        raise ClientInputError("Formato inválido. Escolha entre code128, ean13 ou ean14.")

    removed = remove_barcode_images(fmt, barcodes_dir)
    registry.clear(fmt)
    logger.info("Cleared %s codes, removed %d images", fmt, removed)
    return removed

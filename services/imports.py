import io
import logging
import math
from dataclasses import dataclass, field

from openpyxl import load_workbook

from models import is_valid_format
from services.barcodes import try_generate_barcode
from services.errors import ClientInputError

logger = logging.getLogger(__name__)

@dataclass
class ImportResult:
    fmt: str
    imported: list = field(default_factory=list)
    dropped: list = field(default_factory=list)
    skipped_rows: int = 0

def coerce_code(value):
    """
    Turns a cell value into a number, or None when it is not one.
    Integral floats come back as ints so 123.0 is encoded as "123".
    """
    if value is None or isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        number = value
    else:
        text = str(value).strip()
        # Python accepts digit-group underscores, spreadsheets don't
        if not text or '_' in text:
            return None
        try:
            number = int(text)
        except ValueError:
            try:
                number = float(text)
            except ValueError:
                return None

    if isinstance(number, float):
        if not math.isfinite(number):
            return None
        if number.is_integer():
            return int(number)
    return number

def read_codes(data):
    """
    Reads the first column of the first worksheet.
    Returns (codes, skipped_rows); rows that don't hold a number are skipped.
    """
    workbook = load_workbook(io.BytesIO(data), data_only=True, read_only=True)
    try:
        if not workbook.worksheets:
            raise ClientInputError("Planilha não encontrada.")
        worksheet = workbook.worksheets[0]

        codes = []
        skipped = 0
        for row in worksheet.iter_rows(values_only=True):
            if not row or all(v is None for v in row):
                continue
            code = coerce_code(row[0])
            if code is None:
                skipped += 1
                continue
            codes.append(code)
        return codes, skipped
    finally:
        workbook.close()

def import_codes(registry, fmt, data, barcodes_dir):
    """
    Generates barcodes for every code of an uploaded sheet and records the
    ones that rendered. Codes that fail to render are reported in `dropped`.
    """
    if not is_valid_format(fmt):
        raise ClientInputError("Formato inválido. Escolha entre code128, ean13 ou ean14.")
    if not data:
        raise ClientInputError("Nenhum arquivo enviado.")

    codes, skipped = read_codes(data)
    result = ImportResult(fmt=fmt, skipped_rows=skipped)

    for code in codes:
        if try_generate_barcode(code, fmt, barcodes_dir):
            result.imported.append(code)
        else:
            result.dropped.append(code)

    registry.extend(fmt, result.imported)
    logger.info(
        "Imported %d %s codes (%d dropped, %d rows skipped)",
        len(result.imported), fmt, len(result.dropped), skipped
    )
    return result

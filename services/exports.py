import logging
import os
from dataclasses import dataclass, field

from openpyxl import Workbook
from openpyxl.drawing.image import Image as ExcelImage

from models import FORMATS, is_valid_export_format
from services.barcodes import try_generate_barcode
from services.errors import ClientInputError

logger = logging.getLogger(__name__)

SHEET_TITLE = 'Dados'
IMAGE_WIDTH = 200
IMAGE_HEIGHT = 70
ROW_HEIGHT = 70

@dataclass
class ExportResult:
    fmt: str
    rows: int = 0
    dropped: list = field(default_factory=list)
    path: str = None

def export_filename(fmt):
    return f"dados_{fmt}.xlsx"

def select_entries(registry, fmt):
    """(format, code) pairs to export; 'both'/'all' takes every format in order."""
    if not is_valid_export_format(fmt):
        raise ClientInputError("Formato inválido. Escolha entre code128, ean13, ean14 ou both.")
    if fmt in FORMATS:
        return [(fmt, code) for code in registry.codes(fmt)]
    return registry.entries()

def build_workbook(entries, barcodes_dir):
    """
    One row per code: the code as text in column A and its barcode image
    anchored in column B. Codes whose image can't be generated get no row.
    """
    workbook = Workbook()
    worksheet = workbook.active
    worksheet.title = SHEET_TITLE

    worksheet.append(['Código', 'Imagem'])
    worksheet.column_dimensions['A'].width = 20
    worksheet.column_dimensions['B'].width = 40

    result = ExportResult(fmt=None)
    for fmt, code in entries:
        logger.info("Exporting %s code %s", fmt, code)
        # Always regenerated so the sheet matches the current renderer
        image_path = try_generate_barcode(code, fmt, barcodes_dir)
        if not image_path:
            result.dropped.append((fmt, code))
            continue

        worksheet.append([str(code)])
        row = worksheet.max_row
        worksheet.cell(row=row, column=1).number_format = '@'

        image = ExcelImage(image_path)
        image.width = IMAGE_WIDTH
        image.height = IMAGE_HEIGHT
        worksheet.add_image(image, f"B{row}")
        worksheet.row_dimensions[row].height = ROW_HEIGHT
        result.rows += 1

    return workbook, result

def export_codes(registry, fmt, barcodes_dir, export_dir):
    """Writes dados_<fmt>.xlsx to export_dir and returns the ExportResult."""
    entries = select_entries(registry, fmt)
    workbook, result = build_workbook(entries, barcodes_dir)
    result.fmt = fmt

    os.makedirs(export_dir, exist_ok=True)
    result.path = os.path.join(export_dir, export_filename(fmt))
    workbook.save(result.path)

    logger.info(
        "Exported %d rows to %s (%d dropped)",
        result.rows, result.path, len(result.dropped)
    )
    return result

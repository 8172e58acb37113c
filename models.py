import threading

CODE128 = 'code128'
EAN13 = 'ean13'
EAN14 = 'ean14'

# Order matters: it is the concatenation order of a full export
FORMATS = (CODE128, EAN13, EAN14)

# Export-only selectors meaning "every format"
EXPORT_ALL = ('both', 'all')

FORMAT_LABELS = {
    CODE128: 'Code128',
    EAN13: 'EAN13',
    EAN14: 'EAN14',
}

def is_valid_format(fmt):
    return fmt in FORMATS

def is_valid_export_format(fmt):
    return fmt in FORMATS or fmt in EXPORT_ALL

class CodeRegistry:
    """
    In-memory list of generated codes, one per barcode format.
    Lives as long as the process; each format has its own lock.
    """

    def __init__(self):
        self._codes = {fmt: [] for fmt in FORMATS}
        self._locks = {fmt: threading.Lock() for fmt in FORMATS}

    def extend(self, fmt, codes):
        with self._locks[fmt]:
            self._codes[fmt].extend(codes)

    def clear(self, fmt):
        with self._locks[fmt]:
            # In place, so existing references see the empty list
            del self._codes[fmt][:]

    def codes(self, fmt):
        """Snapshot of one format's codes in insertion order."""
        with self._locks[fmt]:
            return list(self._codes[fmt])

    def entries(self):
        """(format, code) pairs for every format, code128 first."""
        pairs = []
        for fmt in FORMATS:
            pairs.extend((fmt, code) for code in self.codes(fmt))
        return pairs

    def counts(self):
        return {fmt: len(self.codes(fmt)) for fmt in FORMATS}

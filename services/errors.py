class ClientInputError(ValueError):
    """Bad request data (format, upload, worksheet). Answered with a 400."""

class GenerationError(Exception):
    """A single code could not be turned into a barcode image."""

    def __init__(self, code, fmt, reason):
        self.code = code
        self.fmt = fmt
        self.reason = reason
        super().__init__(f"Cannot generate {fmt} barcode for {code!r}: {reason}")

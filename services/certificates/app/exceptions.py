"""Domain exception classes for the certificates service.

These are raised by service-layer code and caught by controllers
to map to appropriate HTTP responses.
"""


class CertificateNotFoundError(Exception):
    """Raised when a certificate cannot be found by ID."""

    def __init__(self, identifier: str = ""):
        self.identifier = identifier
        super().__init__(f"Certificate not found: {identifier}")


class CertificateNumberTakenError(Exception):
    """Raised when a certificate number is already used by another record."""

    def __init__(self, certificate_number: str = ""):
        self.certificate_number = certificate_number
        super().__init__("Certificate number already exists")


class CsvParseError(Exception):
    """Raised when bulk-import CSV text is structurally invalid.

    The message is user-facing, e.g. ``Row 3: Expected 8 columns, got 7``.
    """

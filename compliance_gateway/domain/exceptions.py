"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class MalformedSourceData(DomainException):
    """Top-level accounting data is not shaped as expected; no summary can be produced"""

    pass


class AccountingAPIError(DomainException):
    """Accounting platform API returned an error or is unavailable"""

    def __init__(self, source: str, message: str):
        super().__init__(message)
        self.source = source

"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class ConfigurationError(DomainException):
    """Required configuration (e.g. the ledger API token) is missing"""

    pass


class UpstreamError(DomainException):
    """Ledger API returned a non-success response or is unreachable"""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class UpstreamProtocolError(DomainException):
    """Ledger API payload is not parseable or has an unexpected shape"""

    pass


class CustomerLookupError(DomainException):
    """Customer for a qualifying account could not be resolved"""

    def __init__(self, message: str, account_id: str):
        super().__init__(message)
        self.account_id = account_id


class NotificationError(DomainException):
    """Alert webhook delivery failed after all retries"""

    pass

"""Domain exceptions raised by the calculation and database layers."""


class BusinessRuleError(ValueError):
    """A request that is well formed but breaks a business rule."""

    code = "BUSINESS_RULE_VIOLATION"

    def __init__(self, message: str, code: str = None):
        super().__init__(message)
        if code:
            self.code = code


class InvalidStatusError(BusinessRuleError):
    """The record is not in a status that allows the requested change."""

    code = "INVALID_STATUS"


class NoShareholdersError(BusinessRuleError):
    """Nothing to allocate a dividend over."""

    code = "NO_SHAREHOLDERS"


class InsufficientSharesError(BusinessRuleError):
    code = "INSUFFICIENT_SHARES"


class RateNotFoundError(LookupError):
    """No exchange rate links the two currencies."""

    def __init__(self, from_currency: str, to_currency: str):
        super().__init__(
            f"No exchange rate found for {from_currency} to {to_currency}"
        )
        self.from_currency = from_currency
        self.to_currency = to_currency


class UnsupportedFileTypeError(BusinessRuleError):
    code = "INVALID_FILE_TYPE"


class FileTooLargeError(ValueError):
    """Upload exceeds the configured size limit."""

    def __init__(self, max_bytes: int):
        super().__init__(f"File exceeds the {max_bytes // (1024 * 1024)}MB limit")
        self.max_bytes = max_bytes

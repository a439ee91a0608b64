"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class DebtNotFoundError(DomainException):
    """Debt does not exist or belongs to another user"""

    pass


class InvalidPaymentError(DomainException):
    """Payment amount or principal/interest split is invalid"""

    pass


class LLMNotConfiguredError(DomainException):
    """No API key configured for the language model service"""

    pass


class LLMServiceError(DomainException):
    """Language model API returned an error or is unavailable"""

    pass


class InsightParseError(DomainException):
    """Language model response could not be turned into insights"""

    pass

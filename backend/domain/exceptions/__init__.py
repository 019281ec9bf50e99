"""Domain exceptions."""
from backend.domain.exceptions.domain_errors import (
    DomainError,
    InvalidArgumentError,
    FetchUnavailableError,
    OrderRejectedError,
)

__all__ = [
    "DomainError",
    "InvalidArgumentError",
    "FetchUnavailableError",
    "OrderRejectedError",
]

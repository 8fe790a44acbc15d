"""Errors raised by the storage collaborator."""

from typing import Optional


class StorageError(Exception):
    """The store could not serve a request. Infrastructure failure, may be retried."""
    pass


class RestaurantNotFoundError(StorageError):
    """Raised when a restaurant id does not resolve."""

    def __init__(self, restaurant_id: str):
        super().__init__(f"Restaurant {restaurant_id} not found")
        self.restaurant_id = restaurant_id


class BookingConflictError(StorageError):
    """Raised when an insert would overlap a booking already on the table."""

    def __init__(self, table_id: Optional[str], message: Optional[str] = None):
        super().__init__(message or f"Table {table_id} is already booked for that time")
        self.table_id = table_id


class DurationUnresolvableError(ValueError):
    """Neither a requested nor a restaurant default duration is usable."""
    pass

"""Custom exceptions for the Animalagos booking client."""


class BookerError(Exception):
    """Base class for booking errors."""


class AuthenticationError(BookerError):
    """Raised when login cannot be completed and the run has to stop."""


class RegistrationError(BookerError):
    """Raised when a registration form cannot be built."""


class ScheduleError(BookerError):
    """Raised when a schedule module is missing or invalid."""

"""Shared exceptions module."""

from typing import Optional


class VaultException(Exception):
    """Base exception for vault plane services."""

    pass


class InvalidInputException(VaultException, ValueError):
    """Exception raised when a caller hands over a malformed identifier or options map.

    Raised before any query is built, so nothing partial ever reaches the database.
    """

    def __init__(self, message: Optional[str] = "Invalid input"):
        """Create a new InvalidInputException instance.

        Args:
        ----
            message (str, optional): The error message. Has default message.

        """
        self.message = message
        super().__init__(self.message)

from __future__ import annotations

from typing import Optional


class LibraryError(Exception):
    """Base exception for library store errors."""


class CapacityExceededError(LibraryError):
    """A table is full and cannot accept another record."""

    def __init__(self, table_name: str, capacity: Optional[int]) -> None:
        self.table_name = table_name
        self.capacity = capacity
        super().__init__(f"The {table_name} table is full (capacity {capacity}).")


class DecodeError(LibraryError, ValueError):
    """A persisted line could not be turned back into a record."""

    def __init__(self, line: str, reason: str) -> None:
        self.line = line
        self.reason = reason
        super().__init__(f"Malformed line {line!r}: {reason}")


class UserNotRegisteredError(LibraryError, LookupError):
    """The acting user id is not in the user table."""

    def __init__(self, user_id: str) -> None:
        self.user_id = user_id
        super().__init__(f"User {user_id} is not registered.")


class BookNotFoundError(LibraryError, LookupError):
    """No book with the requested ISBN exists."""

    def __init__(self, isbn: str) -> None:
        self.isbn = isbn
        super().__init__(f"Book with ISBN {isbn} not found.")


class AlreadyBorrowedError(LibraryError):
    """The book is already out on loan."""

    def __init__(self, isbn: str) -> None:
        self.isbn = isbn
        super().__init__(f"Book with ISBN {isbn} is already borrowed.")


class NotBorrowedError(LibraryError):
    """The book is on the shelf, so it cannot be returned."""

    def __init__(self, isbn: str) -> None:
        self.isbn = isbn
        super().__init__(f"Book with ISBN {isbn} was not borrowed.")

"""Library Store - Core Application Package

This package contains the core application modules including:
- Record models and line codec (models.py, codec.py)
- In-memory entity tables (tables.py)
- Flat-file persistence (storage.py)
- Library engine (library.py)
- CLI interface (main.py)
"""

from library_store.exceptions import (
    AlreadyBorrowedError,
    BookNotFoundError,
    CapacityExceededError,
    DecodeError,
    LibraryError,
    NotBorrowedError,
    UserNotRegisteredError,
)
from library_store.library import Library
from library_store.models import Book, Transaction, TransactionAction, User

__all__ = [
    "AlreadyBorrowedError",
    "Book",
    "BookNotFoundError",
    "CapacityExceededError",
    "DecodeError",
    "Library",
    "LibraryError",
    "NotBorrowedError",
    "Transaction",
    "TransactionAction",
    "User",
    "UserNotRegisteredError",
]

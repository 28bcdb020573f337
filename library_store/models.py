from __future__ import annotations

import time
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from library_store.codec import decode_flag, encode_flag, join_fields, split_fields
from library_store.exceptions import DecodeError


@dataclass
class Book:
    """Represents a single book in the library."""

    title: str
    author: str
    isbn: str
    available: bool = True

    FIELD_COUNT = 4

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        status = "Available" if self.available else "Issued"
        return f"{self.title} by {self.author} (ISBN: {self.isbn}) [{status}]"

    def to_dict(self) -> dict:
        return {"title": self.title, "author": self.author, "isbn": self.isbn, "available": self.available}

    def to_line(self) -> str:
        return join_fields(self.title, self.author, self.isbn, encode_flag(self.available))

    @staticmethod
    def from_line(line: str) -> "Book":
        title, author, isbn, flag = split_fields(line, Book.FIELD_COUNT)
        return Book(title=title, author=author, isbn=isbn, available=decode_flag(flag))


@dataclass(frozen=True)
class User:
    """A registered library member."""

    id: str
    name: str
    contact: str

    FIELD_COUNT = 3

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.name} (ID: {self.id}, Contact: {self.contact})"

    def to_dict(self) -> dict:
        return {"id": self.id, "name": self.name, "contact": self.contact}

    def to_line(self) -> str:
        return join_fields(self.id, self.name, self.contact)

    @staticmethod
    def from_line(line: str) -> "User":
        user_id, name, contact = split_fields(line, User.FIELD_COUNT)
        return User(id=user_id, name=name, contact=contact)


class TransactionAction(str, Enum):
    BORROWED = "Borrowed"
    RETURNED = "Returned"


@dataclass(frozen=True)
class Transaction:
    """One entry of the append-only borrow/return log."""

    user_id: str
    book_isbn: str
    action: TransactionAction
    timestamp: str

    FIELD_COUNT = 4

    @classmethod
    def create(cls, user_id: str, book_isbn: str, action: TransactionAction,
               timestamp: Optional[str] = None) -> "Transaction":
        """Build a transaction stamped with the current local time.

        ``time.ctime()`` gives the familiar ``Wed Jun 12 14:32:10 2024`` form
        with no trailing newline.
        """
        return cls(user_id=user_id, book_isbn=book_isbn, action=action,
                   timestamp=timestamp if timestamp is not None else time.ctime())

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.user_id} {self.action.value} {self.book_isbn} at {self.timestamp}"

    def to_dict(self) -> dict:
        return {
            "user_id": self.user_id,
            "book_isbn": self.book_isbn,
            "action": self.action.value,
            "timestamp": self.timestamp,
        }

    def to_line(self) -> str:
        return join_fields(self.user_id, self.book_isbn, self.action.value, self.timestamp)

    @staticmethod
    def from_line(line: str) -> "Transaction":
        user_id, isbn, action, timestamp = split_fields(line, Transaction.FIELD_COUNT)
        try:
            parsed = TransactionAction(action)
        except ValueError as exc:
            raise DecodeError(line, f"unknown action {action!r}") from exc
        return Transaction(user_id=user_id, book_isbn=isbn, action=parsed, timestamp=timestamp)

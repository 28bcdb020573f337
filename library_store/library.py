import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

from library_store.config import capacity_limit, settings
from library_store.exceptions import (
    AlreadyBorrowedError,
    BookNotFoundError,
    NotBorrowedError,
    UserNotRegisteredError,
)
from library_store.models import Book, Transaction, TransactionAction, User
from library_store.storage import BOOKS, USERS, FileStorage
from library_store.tables import EntityTable

logger = logging.getLogger(__name__)


class Library:
    """Manages books, users and the borrow/return log, with file persistence."""

    def __init__(self, data_dir: Optional[Union[str, Path]] = None, max_books: Optional[int] = None,
                 max_users: Optional[int] = None, storage: Optional[FileStorage] = None) -> None:
        # Explicit arguments win over settings; 0 leaves a table unbounded either way.
        if storage is None:
            storage = FileStorage(
                data_dir if data_dir is not None else settings.data_dir,
                books_file=settings.books_file,
                users_file=settings.users_file,
                transactions_file=settings.transactions_file,
            )
        self.storage = storage
        self.books: EntityTable[Book] = EntityTable(
            BOOKS, capacity_limit(max_books) if max_books is not None else settings.max_books)
        self.users: EntityTable[User] = EntityTable(
            USERS, capacity_limit(max_users) if max_users is not None else settings.max_users)
        self.storage.load_all(self.books, self.users)

    # ------------------------- Core operations ------------------------- #
    def add_book(self, book: Book) -> Book:
        """Add a book and rewrite the book file. Duplicate ISBNs are allowed."""
        self.books.add(book)
        self._save_books()
        logger.info(f"Added book {book.isbn!r}")
        return book

    def add_user(self, user: User) -> User:
        """Register a user and rewrite the user file. Duplicate ids are allowed."""
        self.users.add(user)
        self.storage.snapshot_write(USERS, self.users)
        logger.info(f"Registered user {user.id!r}")
        return user

    def borrow_book(self, user_id: str, isbn: str) -> Transaction:
        """Lend the first book matching ``isbn`` to ``user_id``."""
        book = self._require_book(user_id, isbn)
        if not book.available:
            raise AlreadyBorrowedError(isbn)
        return self._record(book, user_id, TransactionAction.BORROWED)

    def return_book(self, user_id: str, isbn: str) -> Transaction:
        """Take back the first book matching ``isbn``."""
        book = self._require_book(user_id, isbn)
        if book.available:
            raise NotBorrowedError(isbn)
        return self._record(book, user_id, TransactionAction.RETURNED)

    def sort_books_by_title(self) -> None:
        """Stable ascending sort by title (case-sensitive), then save."""
        self.books.sort_by(lambda b: b.title)
        self._save_books()

    # ------------------------- Queries ------------------------- #
    def list_books(self) -> List[Book]:
        return self.books.rows()

    def list_users(self) -> List[User]:
        return self.users.rows()

    def list_transactions(self) -> List[Transaction]:
        """Read the transaction log from disk, oldest first."""
        return self.storage.read_log()

    def read_transaction_log(self) -> Tuple[List[Transaction], List[str]]:
        """Like list_transactions, plus the raw lines that could not be decoded."""
        return self.storage.read_log_with_skipped()

    def search_books(self, keyword: str) -> List[Book]:
        """Books whose title, author or ISBN equals ``keyword`` exactly."""
        return self.books.find_all(lambda b: keyword in (b.title, b.author, b.isbn))

    def find_book(self, isbn: str) -> Optional[Book]:
        return self.books.find_first(lambda b: b.isbn == isbn)

    def find_user(self, user_id: str) -> Optional[User]:
        return self.users.find_first(lambda u: u.id == user_id)

    def is_registered_user(self, user_id: str) -> bool:
        return self.find_user(user_id) is not None

    def get_statistics(self) -> Dict[str, Any]:
        available = sum(1 for b in self.books if b.available)
        return {
            "total_books": len(self.books),
            "available_books": available,
            "borrowed_books": len(self.books) - available,
            "registered_users": len(self.users),
        }

    # ------------------------- Helpers ------------------------- #
    def _require_book(self, user_id: str, isbn: str) -> Book:
        # The user check comes first so an unknown user never touches book state.
        if not self.is_registered_user(user_id):
            raise UserNotRegisteredError(user_id)
        book = self.find_book(isbn)
        if book is None:
            raise BookNotFoundError(isbn)
        return book

    def _record(self, book: Book, user_id: str, action: TransactionAction) -> Transaction:
        transaction = Transaction.create(user_id, book.isbn, action)
        previous = book.available
        book.available = action is TransactionAction.RETURNED
        try:
            self.storage.log_append(transaction)
        except OSError:
            book.available = previous
            raise
        self._save_books()
        logger.info(f"{action.value} {book.isbn!r} by {user_id!r}")
        return transaction

    def _save_books(self) -> None:
        self.storage.snapshot_write(BOOKS, self.books)

"""Flat-file persistence for the library tables.

Books and users are stored as whole-table snapshots that get rewritten after
every change. Transactions go to an append-only log that is never loaded into
memory; it is read straight from disk whenever someone asks for it.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Iterable, List, Tuple, Union

from library_store.codec import encode
from library_store.exceptions import DecodeError
from library_store.models import Book, Transaction, User
from library_store.tables import EntityTable

logger = logging.getLogger(__name__)

BOOKS = "books"
USERS = "users"
TRANSACTIONS = "transactions"

ENCODING = "utf-8"
ERRORS = "surrogateescape"


class FileStorage:
    """Reads and writes the three data files under one directory."""

    def __init__(self, data_dir: Union[str, Path], books_file: str = "books.txt",
                 users_file: str = "users.txt", transactions_file: str = "transactions.txt") -> None:
        self.data_dir = Path(data_dir)
        self._files: Dict[str, str] = {
            BOOKS: books_file,
            USERS: users_file,
            TRANSACTIONS: transactions_file,
        }

    def path_for(self, table_name: str) -> Path:
        try:
            return self.data_dir / self._files[table_name]
        except KeyError:
            raise ValueError(f"Unknown table: {table_name}") from None

    # ------------------------- Writing ------------------------- #
    def snapshot_write(self, table_name: str, entities: Iterable) -> None:
        """Overwrite the table's file with one encoded line per entity."""
        path = self.path_for(table_name)
        path.parent.mkdir(parents=True, exist_ok=True)
        count = 0
        with open(path, "w", encoding=ENCODING, errors=ERRORS, newline="\n") as f:
            for entity in entities:
                f.write(encode(entity) + "\n")
                count += 1
        logger.info(f"Saved {count} {table_name} records to {path}")

    def log_append(self, transaction: Transaction) -> None:
        """Append one transaction line; the file is closed before returning."""
        path = self.path_for(TRANSACTIONS)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "a", encoding=ENCODING, errors=ERRORS, newline="\n") as f:
            f.write(encode(transaction) + "\n")
        logger.info(f"Logged {transaction.action.value} of {transaction.book_isbn} by {transaction.user_id}")

    # ------------------------- Reading ------------------------- #
    def read_lines(self, table_name: str) -> List[str]:
        """Return the file's lines without line endings; unreadable means empty.

        Lines end only at "\\n", so a stray "\\r" inside a field stays put.
        Bytes that are not valid UTF-8 are carried through as surrogates and
        written back unchanged by the next snapshot.
        """
        path = self.path_for(table_name)
        try:
            with open(path, "r", encoding=ENCODING, errors=ERRORS, newline="\n") as f:
                return [_strip_line_ending(line) for line in f]
        except FileNotFoundError:
            logger.info(f"No {table_name} file at {path}, starting empty")
            return []
        except OSError as e:
            logger.warning(f"Could not read {path}: {e} (starting empty)")
            return []

    def load_table(self, table: EntityTable, table_name: str, decoder) -> int:
        loaded = table.reload(self.read_lines(table_name), decoder)
        logger.info(f"Loaded {loaded} {table_name} records")
        return loaded

    def load_all(self, books: EntityTable, users: EntityTable) -> None:
        """Reload the book and user tables from disk."""
        self.load_table(books, BOOKS, Book.from_line)
        self.load_table(users, USERS, User.from_line)

    def read_log_with_skipped(self) -> Tuple[List[Transaction], List[str]]:
        """Read the transaction log in file order, oldest first.

        Returns the decoded transactions and the raw lines that could not be
        decoded, so callers can still show them.
        """
        transactions: List[Transaction] = []
        skipped: List[str] = []
        for lineno, line in enumerate(self.read_lines(TRANSACTIONS), 1):
            try:
                transactions.append(Transaction.from_line(line))
            except DecodeError as e:
                logger.warning(f"transactions: skipping line {lineno}: {e.reason}")
                skipped.append(line)
        return transactions, skipped

    def read_log(self) -> List[Transaction]:
        return self.read_log_with_skipped()[0]


def _strip_line_ending(line: str) -> str:
    if line.endswith("\n"):
        line = line[:-1]
        # CRLF files
        if line.endswith("\r"):
            line = line[:-1]
    return line

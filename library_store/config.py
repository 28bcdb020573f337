import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

load_dotenv()


def capacity_limit(value: Optional[int]) -> Optional[int]:
    """Normalize a table capacity; None, 0 or less means unbounded."""
    if value is None or value <= 0:
        return None
    return value


def _capacity(raw: Optional[str]) -> Optional[int]:
    """Parse a table capacity; empty or 0 means unbounded."""
    if raw is None or not raw.strip():
        return None
    return capacity_limit(int(raw))


@dataclass
class Settings:
    # Data file settings
    data_dir: str = os.getenv("LIBRARY_DATA_DIR", ".")
    books_file: str = os.getenv("LIBRARY_BOOKS_FILE", "books.txt")
    users_file: str = os.getenv("LIBRARY_USERS_FILE", "users.txt")
    transactions_file: str = os.getenv("LIBRARY_TRANSACTIONS_FILE", "transactions.txt")

    # Table capacities (legacy data files were written with 100 of each)
    max_books: Optional[int] = _capacity(os.getenv("LIBRARY_MAX_BOOKS", "100"))
    max_users: Optional[int] = _capacity(os.getenv("LIBRARY_MAX_USERS", "100"))

    # Application settings
    app_name: str = os.getenv("APP_NAME", "Library Management System")
    log_level: str = os.getenv("LOG_LEVEL", "WARNING").upper()
    debug: bool = os.getenv("DEBUG", "False").lower() in ("true", "1", "yes")


settings = Settings()

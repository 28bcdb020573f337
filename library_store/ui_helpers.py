import os
import json
from typing import Any, Dict, List

from rich.console import Console
from rich.table import Table
from rich.panel import Panel

from library_store.models import Book, Transaction, User

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()


def _display(text: str) -> str:
    # Undecodable bytes read from data files arrive as surrogates; show them as U+FFFD.
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "replace")


def _echo(text: str) -> None:
    print(_display(text))


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()


def _print_json(records: List[Any]) -> None:
    _echo(json.dumps([r.to_dict() for r in records], ensure_ascii=False))


def print_book_list(books: List[Book], empty_message: str = "No books available.") -> None:
    """Print books in the current output mode.
    - plain: 'Title: .. | Author: .. | ISBN: .. | Status: ..' lines
    - json: JSON array of book objects
    - rich: Rich table
    """
    if not books:
        _echo(empty_message)
        return

    mode = get_output_mode()
    if mode == "json":
        _print_json(books)
    elif mode == "rich":
        table = Table(title="📚 Books", show_lines=True, header_style="bold cyan")
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("ISBN", style="magenta", no_wrap=True)
        table.add_column("Status")
        for b in books:
            status = "[green]Available[/]" if b.available else "[red]Issued[/]"
            table.add_row(_display(b.title), _display(b.author), _display(b.isbn), status)
        _console.print(table)
    else:
        for b in books:
            _echo(f"Title: {b.title} | Author: {b.author} | ISBN: {b.isbn} | "
                  f"Status: {'Available' if b.available else 'Issued'}")


def print_user_list(users: List[User]) -> None:
    if not users:
        _echo("No users registered.")
        return

    mode = get_output_mode()
    if mode == "json":
        _print_json(users)
    elif mode == "rich":
        table = Table(title="👤 Users", header_style="bold cyan")
        table.add_column("User ID", style="magenta", no_wrap=True)
        table.add_column("Name", style="white")
        table.add_column("Contact", style="white")
        for u in users:
            table.add_row(_display(u.id), _display(u.name), _display(u.contact))
        _console.print(table)
    else:
        for u in users:
            _echo(f"User ID: {u.id} | Name: {u.name} | Contact: {u.contact}")


def print_transaction_list(transactions: List[Transaction]) -> None:
    if not transactions:
        _echo("No transactions recorded yet.")
        return

    mode = get_output_mode()
    if mode == "json":
        _print_json(transactions)
    elif mode == "rich":
        table = Table(title="🧾 Transactions", header_style="bold cyan")
        table.add_column("User ID", style="magenta")
        table.add_column("Book ISBN", style="magenta")
        table.add_column("Action")
        table.add_column("Time", style="dim")
        for t in transactions:
            table.add_row(_display(t.user_id), _display(t.book_isbn), t.action.value, _display(t.timestamp))
        _console.print(table)
    else:
        for t in transactions:
            _echo(f"User ID: {t.user_id} | Book ISBN: {t.book_isbn} | "
                  f"Action: {t.action.value} | Time: {t.timestamp}")


def print_stats_result(stats: Dict[str, Any]) -> None:
    mode = get_output_mode()
    if mode == "json":
        _echo(json.dumps(stats, ensure_ascii=False))
    elif mode == "rich":
        content = (
            f"[bold]Total Books:[/] {stats['total_books']}\n"
            f"[bold]Available:[/] {stats['available_books']}\n"
            f"[bold]Borrowed:[/] {stats['borrowed_books']}\n"
            f"[bold]Registered Users:[/] {stats['registered_users']}"
        )
        _console.print(Panel.fit(content, title="📊 Stats", border_style="blue"))
    else:
        _echo(f"Total Books: {stats['total_books']}")
        _echo(f"Available: {stats['available_books']}")
        _echo(f"Borrowed: {stats['borrowed_books']}")
        _echo(f"Registered Users: {stats['registered_users']}")


def print_skipped_log_lines(lines: List[str]) -> None:
    """Report transaction log lines that could not be decoded, verbatim."""
    if not lines:
        return
    _echo(f"Skipped {len(lines)} unreadable transaction line(s):")
    for line in lines:
        _echo(f"  {line}")

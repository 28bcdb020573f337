import logging
from typing import Optional

import typer
from rich import box
from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt
from rich.table import Table

from library_store.config import settings
from library_store.exceptions import (
    AlreadyBorrowedError,
    BookNotFoundError,
    CapacityExceededError,
    NotBorrowedError,
    UserNotRegisteredError,
)
from library_store.library import Library
from library_store.models import Book, User
from library_store.ui_helpers import (
    print_book_list,
    print_skipped_log_lines,
    print_stats_result,
    print_transaction_list,
    print_user_list,
    set_output_mode,
)

console = Console()

app = typer.Typer(help=settings.app_name)


# --- Actions shared by the commands and the interactive menu ---
def do_add_book(lib: Library, title: str, author: str, isbn: str) -> None:
    try:
        lib.add_book(Book(title=title, author=author, isbn=isbn))
    except CapacityExceededError:
        print("Book storage full!")
    else:
        print("Book added and saved successfully!")


def do_add_user(lib: Library, user_id: str, name: str, contact: str) -> None:
    try:
        lib.add_user(User(id=user_id, name=name, contact=contact))
    except CapacityExceededError:
        print("User storage full!")
    else:
        print("User added and saved successfully!")


def do_borrow(lib: Library, user_id: str, isbn: str) -> None:
    try:
        lib.borrow_book(user_id, isbn)
    except UserNotRegisteredError:
        print("User not registered! Cannot borrow book.")
    except BookNotFoundError:
        print("Book not found.")
    except AlreadyBorrowedError:
        print("Book already borrowed.")
    else:
        print("Book borrowed successfully!")


def do_return(lib: Library, user_id: str, isbn: str) -> None:
    try:
        lib.return_book(user_id, isbn)
    except UserNotRegisteredError:
        print("User not registered! Cannot return book.")
    except BookNotFoundError:
        print("Book not found.")
    except NotBorrowedError:
        print("Book was not borrowed.")
    else:
        print("Book returned successfully!")


def do_search(lib: Library, keyword: str) -> None:
    print_book_list(lib.search_books(keyword), empty_message="Book not found.")


def do_show_transactions(lib: Library) -> None:
    transactions, skipped = lib.read_transaction_log()
    if transactions or not skipped:
        print_transaction_list(transactions)
    print_skipped_log_lines(skipped)


def do_sort(lib: Library) -> None:
    lib.sort_books_by_title()
    print("Books sorted by title and saved successfully!")


# --- Typer CLI application ---
@app.callback(invoke_without_command=True)
def _global_options(
    ctx: typer.Context,
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
    data_dir: Optional[str] = typer.Option(
        None,
        "--data-dir",
        "-d",
        help="Directory holding books.txt, users.txt and transactions.txt",
    ),
):
    """Global CLI options; runs the interactive menu when no command is given."""
    logging.basicConfig(level=settings.log_level, format="%(levelname)s: %(message)s")
    if output:
        set_output_mode(output)
    ctx.obj = Library(data_dir=data_dir)
    if ctx.invoked_subcommand is None:
        run_menu(ctx.obj)


@app.command("add-book")
def cli_add_book(ctx: typer.Context, title: str, author: str, isbn: str):
    """Add a book to the catalog."""
    do_add_book(ctx.obj, title, author, isbn)


@app.command("add-user")
def cli_add_user(ctx: typer.Context, user_id: str, name: str, contact: str):
    """Register a library member."""
    do_add_user(ctx.obj, user_id, name, contact)


@app.command("borrow")
def cli_borrow(ctx: typer.Context, user_id: str, isbn: str):
    """Borrow a book on behalf of a registered user."""
    do_borrow(ctx.obj, user_id, isbn)


@app.command("return")
def cli_return(ctx: typer.Context, user_id: str, isbn: str):
    """Return a borrowed book."""
    do_return(ctx.obj, user_id, isbn)


@app.command("search")
def cli_search(ctx: typer.Context, keyword: str):
    """Find books whose title, author or ISBN equals KEYWORD."""
    do_search(ctx.obj, keyword)


@app.command("list")
def cli_list(ctx: typer.Context):
    """List all books in catalog order."""
    print_book_list(ctx.obj.list_books())


@app.command("users")
def cli_users(ctx: typer.Context):
    """List registered users."""
    print_user_list(ctx.obj.list_users())


@app.command("transactions")
def cli_transactions(ctx: typer.Context):
    """Show the borrow/return log, oldest first."""
    do_show_transactions(ctx.obj)


@app.command("sort")
def cli_sort(ctx: typer.Context):
    """Sort the catalog by title and save it."""
    do_sort(ctx.obj)


@app.command("stats")
def cli_stats(ctx: typer.Context):
    """Show library statistics."""
    print_stats_result(ctx.obj.get_statistics())


@app.command("menu")
def cli_menu(ctx: typer.Context):
    """Start the interactive menu."""
    run_menu(ctx.obj)


# --- Interactive menu ---
MENU_ITEMS = [
    ("1", "Add Book", "➕"),
    ("2", "Add User", "👤"),
    ("3", "Borrow Book", "📤"),
    ("4", "Return Book", "📥"),
    ("5", "Search Book", "🔎"),
    ("6", "Display Books", "📚"),
    ("7", "Display Transactions", "🧾"),
    ("8", "Sort Books by Title", "🔤"),
    ("0", "Exit", "🚪"),
]


def render_menu() -> None:
    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right", style="bold cyan", width=4)
    table.add_column(justify="left", style="white")
    for key, label, icon in MENU_ITEMS:
        table.add_row(f"[reverse]{key}[/]", f"{icon} {label}")
    console.print(Panel(table, title=settings.app_name, border_style="cyan", box=box.HEAVY, padding=(1, 2)))


def _prompt_user(lib: Library, verb: str) -> Optional[str]:
    # The user is checked before the ISBN is even asked for.
    user_id = Prompt.ask("Enter User ID").strip()
    if not lib.is_registered_user(user_id):
        print(f"User not registered! Cannot {verb} book.")
        return None
    return user_id


def run_menu(lib: Library) -> None:
    """Simple interactive menu over the library operations."""
    choices = [key for key, _, _ in MENU_ITEMS]
    while True:
        render_menu()
        choice = Prompt.ask("Enter choice", choices=choices, default="6").strip()

        if choice == "1":
            do_add_book(lib, Prompt.ask("Enter Title"), Prompt.ask("Enter Author"), Prompt.ask("Enter ISBN"))
        elif choice == "2":
            do_add_user(lib, Prompt.ask("Enter User ID").strip(), Prompt.ask("Enter Name"), Prompt.ask("Enter Contact"))
        elif choice == "3":
            user_id = _prompt_user(lib, "borrow")
            if user_id is not None:
                do_borrow(lib, user_id, Prompt.ask("Enter Book ISBN").strip())
        elif choice == "4":
            user_id = _prompt_user(lib, "return")
            if user_id is not None:
                do_return(lib, user_id, Prompt.ask("Enter Book ISBN").strip())
        elif choice == "5":
            do_search(lib, Prompt.ask("Enter Title/Author/ISBN to search"))
        elif choice == "6":
            print_book_list(lib.list_books())
        elif choice == "7":
            do_show_transactions(lib)
        elif choice == "8":
            do_sort(lib)
        elif choice == "0":
            print("Exiting... Data saved successfully.")
            break
        print()


if __name__ == "__main__":
    app()

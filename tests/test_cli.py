import json

import pytest
from typer.testing import CliRunner

from library_store.main import app

runner = CliRunner()


@pytest.fixture
def invoke(data_dir):
    def _invoke(*args, **kwargs):
        return runner.invoke(app, ["--data-dir", str(data_dir), *args], **kwargs)
    return _invoke


def test_list_no_books(invoke):
    result = invoke("list")
    assert result.exit_code == 0
    assert "No books available." in result.stdout


def test_add_and_list(invoke):
    result = invoke("add-book", "Dune", "Frank Herbert", "111")
    assert result.exit_code == 0
    assert "Book added and saved successfully!" in result.stdout

    result = invoke("list")
    assert "Title: Dune | Author: Frank Herbert | ISBN: 111 | Status: Available" in result.stdout


def test_list_json_output(invoke):
    invoke("add-book", "Dune", "Frank Herbert", "111")

    result = invoke("--output", "json", "list")

    assert json.loads(result.stdout) == [
        {"title": "Dune", "author": "Frank Herbert", "isbn": "111", "available": True}
    ]


def test_borrow_flow(invoke):
    invoke("add-book", "Dune", "Frank Herbert", "111")
    invoke("add-user", "u1", "Ada", "ada@example.com")

    assert "Book borrowed successfully!" in invoke("borrow", "u1", "111").stdout
    assert "Book already borrowed." in invoke("borrow", "u1", "111").stdout
    assert "Book returned successfully!" in invoke("return", "u1", "111").stdout
    assert "Book was not borrowed." in invoke("return", "u1", "111").stdout

    result = invoke("transactions")
    assert "Action: Borrowed" in result.stdout
    assert "Action: Returned" in result.stdout


def test_borrow_unregistered_user(invoke):
    invoke("add-book", "Dune", "Frank Herbert", "111")

    result = invoke("borrow", "ghost", "111")

    assert result.exit_code == 0
    assert "User not registered! Cannot borrow book." in result.stdout


def test_borrow_unknown_book(invoke):
    invoke("add-user", "u1", "Ada", "ada@example.com")
    assert "Book not found." in invoke("borrow", "u1", "999").stdout


def test_search(invoke):
    invoke("add-book", "Dune", "Frank Herbert", "111")

    assert "ISBN: 111" in invoke("search", "Frank Herbert").stdout
    assert "Book not found." in invoke("search", "Frank").stdout


def test_no_transactions(invoke):
    assert "No transactions recorded yet." in invoke("transactions").stdout


def test_sort(invoke):
    invoke("add-book", "Zed", "a", "1")
    invoke("add-book", "Ann", "b", "2")

    assert "Books sorted by title and saved successfully!" in invoke("sort").stdout
    listing = invoke("list").stdout
    assert listing.index("Ann") < listing.index("Zed")


def test_users_and_stats(invoke):
    invoke("add-user", "u1", "Ada", "ada@example.com")

    assert "User ID: u1 | Name: Ada | Contact: ada@example.com" in invoke("users").stdout
    assert "Registered Users: 1" in invoke("stats").stdout


def test_menu_add_and_display(invoke):
    result = invoke("menu", input="1\nDune\nFrank Herbert\n111\n6\n0\n")

    assert result.exit_code == 0
    assert "Book added and saved successfully!" in result.stdout
    assert "Title: Dune" in result.stdout
    assert "Exiting... Data saved successfully." in result.stdout


def test_menu_borrow_rejects_unknown_user_before_isbn(invoke):
    result = invoke("menu", input="3\nghost\n0\n")

    assert result.exit_code == 0
    assert "User not registered! Cannot borrow book." in result.stdout


def test_transactions_reports_unreadable_lines(invoke, data_dir):
    invoke("add-book", "Dune", "Frank Herbert", "111")
    invoke("add-user", "u1", "Ada", "ada@example.com")
    invoke("borrow", "u1", "111")
    with open(data_dir / "transactions.txt", "a", encoding="utf-8") as f:
        f.write("u1|111|Lost|yesterday\n")

    result = invoke("transactions")

    assert "Action: Borrowed" in result.stdout
    assert "Skipped 1 unreadable transaction line(s):" in result.stdout
    assert "u1|111|Lost|yesterday" in result.stdout


def test_list_with_undecodable_title(invoke, data_dir):
    data_dir.mkdir()
    (data_dir / "books.txt").write_bytes(b"Caf\xe9|Anon|222|1\n")

    result = invoke("list")

    assert result.exit_code == 0
    assert "ISBN: 222" in result.stdout

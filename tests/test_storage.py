from library_store.models import Book, Transaction, TransactionAction, User
from library_store.storage import BOOKS, TRANSACTIONS, USERS, FileStorage
from library_store.tables import EntityTable


def test_snapshot_write_overwrites(tmp_path):
    storage = FileStorage(tmp_path / "data")
    storage.snapshot_write(BOOKS, [Book("A", "x", "1"), Book("B", "y", "2", available=False)])
    storage.snapshot_write(BOOKS, [Book("C", "z", "3")])

    assert storage.path_for(BOOKS).read_text(encoding="utf-8") == "C|z|3|1\n"


def test_snapshot_write_empty_table_truncates(tmp_path):
    storage = FileStorage(tmp_path)
    storage.snapshot_write(USERS, [User("1", "A", "a")])
    storage.snapshot_write(USERS, [])

    assert storage.path_for(USERS).read_text(encoding="utf-8") == ""


def test_log_append_and_read_back(tmp_path):
    storage = FileStorage(tmp_path)
    first = Transaction("u1", "1", TransactionAction.BORROWED, "Mon Jan  1 10:00:00 2024")
    second = Transaction("u1", "1", TransactionAction.RETURNED, "Mon Jan  1 11:00:00 2024")

    storage.log_append(first)
    storage.log_append(second)

    assert storage.read_log() == [first, second]
    assert storage.path_for(TRANSACTIONS).read_text(encoding="utf-8").count("\n") == 2


def test_read_log_skips_bad_lines(tmp_path):
    storage = FileStorage(tmp_path)
    storage.path_for(TRANSACTIONS).write_text(
        "u1|1|Borrowed|Mon Jan  1 10:00:00 2024\ngarbage\nu1|1|Stolen|now\n", encoding="utf-8"
    )

    log = storage.read_log()

    assert len(log) == 1
    assert log[0].action is TransactionAction.BORROWED


def test_missing_files_mean_empty(tmp_path):
    storage = FileStorage(tmp_path / "does-not-exist")
    books, users = EntityTable(BOOKS), EntityTable(USERS)

    storage.load_all(books, users)

    assert len(books) == 0
    assert len(users) == 0
    assert storage.read_log() == []


def test_load_all(tmp_path):
    storage = FileStorage(tmp_path, books_file="b.txt", users_file="u.txt")
    (tmp_path / "b.txt").write_text("Dune|Frank Herbert|123|0\nmissing delimiters\n", encoding="utf-8")
    (tmp_path / "u.txt").write_text("u1|Ada|ada@example.com\n", encoding="utf-8")
    books, users = EntityTable(BOOKS), EntityTable(USERS)

    storage.load_all(books, users)

    assert books.rows() == [Book("Dune", "Frank Herbert", "123", available=False)]
    assert users.rows() == [User("u1", "Ada", "ada@example.com")]


def test_unreadable_file_means_empty(tmp_path):
    storage = FileStorage(tmp_path)
    # A directory where the file should be cannot be opened for reading
    storage.path_for(BOOKS).mkdir()

    assert storage.read_lines(BOOKS) == []


def test_undecodable_bytes_survive_round_trip(tmp_path):
    storage = FileStorage(tmp_path)
    raw = b"Dune|Frank Herbert|111|1\nCaf\xe9|Anon|222|1\nEmma|Jane Austen|333|0\n"
    storage.path_for(BOOKS).write_bytes(raw)
    books = EntityTable(BOOKS)

    storage.load_table(books, BOOKS, Book.from_line)
    storage.snapshot_write(BOOKS, books)

    assert [b.isbn for b in books] == ["111", "222", "333"]
    assert storage.path_for(BOOKS).read_bytes() == raw


def test_lines_split_only_on_newline(tmp_path):
    storage = FileStorage(tmp_path)
    storage.path_for(USERS).write_bytes(b"u1|Ada\rLovelace|ada@example.com\nu2|Alan|alan@example.com\r\n")

    assert storage.read_lines(USERS) == ["u1|Ada\rLovelace|ada@example.com", "u2|Alan|alan@example.com"]


def test_read_log_with_skipped_keeps_raw_lines(tmp_path):
    storage = FileStorage(tmp_path)
    storage.path_for(TRANSACTIONS).write_text(
        "u1|1|Borrowed|Mon Jan  1 10:00:00 2024\ngarbage\nu1|1|Stolen|now\n", encoding="utf-8"
    )

    transactions, skipped = storage.read_log_with_skipped()

    assert [t.user_id for t in transactions] == ["u1"]
    assert skipped == ["garbage", "u1|1|Stolen|now"]

"""Pipe-delimited line codec shared by all record types.

Fields are written in a fixed order and joined with ``DELIMITER``. Nothing is
escaped: the last field of a line swallows the remainder verbatim, so free
text such as a timestamp survives, but a delimiter inside any earlier field
shifts every field after it on decode.
"""
from __future__ import annotations

from typing import List, Type, TypeVar

from library_store.exceptions import DecodeError

DELIMITER = "|"

TRUE_FLAG = "1"
FALSE_FLAG = "0"

T = TypeVar("T")


def split_fields(line: str, field_count: int) -> List[str]:
    """Split ``line`` on its first ``field_count - 1`` delimiters.

    The trailing field takes whatever is left, delimiters included.
    Raises DecodeError when too few delimiters are present.
    """
    parts = line.split(DELIMITER, field_count - 1)
    if len(parts) < field_count:
        raise DecodeError(
            line, f"expected {field_count - 1} delimiters, found {len(parts) - 1}"
        )
    return parts


def join_fields(*fields: str) -> str:
    return DELIMITER.join(fields)


def encode_flag(value: bool) -> str:
    return TRUE_FLAG if value else FALSE_FLAG


def decode_flag(raw: str) -> bool:
    # Anything other than the literal "1" reads as false.
    return raw == TRUE_FLAG


def encode(entity) -> str:
    """Encode any record model into its line form (without newline)."""
    return entity.to_line()


def decode(line: str, model: Type[T]) -> T:
    """Decode ``line`` into an instance of ``model`` or raise DecodeError."""
    return model.from_line(line)

"""
Seat index <-> label codec.

Seats are numbered row-major from zero: index = row * cols + col.
Labels are the row letter(s) followed by the one-based column, e.g. index 5
in a 4-column hall is "B2". Rows past Z continue spreadsheet-style
(Z, AA, AB, ...). Inventory keys are the lower-case label ("b2").
"""

import re

_LABEL_RE = re.compile(r"^([A-Za-z]+)([1-9][0-9]*)$")


def _check_cols(cols: int) -> None:
    if cols <= 0:
        raise ValueError(f"cols must be positive, got {cols}")


def row_letters(row: int) -> str:
    """0 -> 'A', 25 -> 'Z', 26 -> 'AA'."""
    if row < 0:
        raise ValueError(f"row must be non-negative, got {row}")
    letters = ""
    n = row + 1
    while n:
        n, rem = divmod(n - 1, 26)
        letters = chr(ord("A") + rem) + letters
    return letters


def letters_to_row(letters: str) -> int:
    row = 0
    for ch in letters.upper():
        if not "A" <= ch <= "Z":
            raise ValueError(f"Invalid row letters: {letters!r}")
        row = row * 26 + (ord(ch) - ord("A") + 1)
    return row - 1


def to_index(row: int, col: int, cols: int) -> int:
    _check_cols(cols)
    if row < 0 or not 0 <= col < cols:
        raise ValueError(f"Seat ({row}, {col}) is outside a {cols}-column layout")
    return row * cols + col


def to_label(index: int, cols: int) -> str:
    _check_cols(cols)
    if index < 0:
        raise ValueError(f"Seat index must be non-negative, got {index}")
    row, col = divmod(index, cols)
    return f"{row_letters(row)}{col + 1}"


def parse_label(label: str, cols: int) -> int:
    """Inverse of to_label. Case-insensitive."""
    _check_cols(cols)
    match = _LABEL_RE.match(label.strip())
    if not match:
        raise ValueError(f"Malformed seat label: {label!r}")
    letters, number = match.groups()
    return to_index(letters_to_row(letters), int(number) - 1, cols)


def format_seats(indices, cols: int) -> list[str]:
    return [to_label(index, cols) for index in indices]


def label_to_key(label: str) -> str:
    return label.strip().lower()


def key_to_label(key: str) -> str:
    return key.strip().upper()

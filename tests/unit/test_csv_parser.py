"""
Unit tests for bulk CSV parsing.

Test Categories:
- test_parses_*: well-formed files
- test_rejects_*: files refused as a whole
"""

import pytest

from src.domain.exceptions import InvalidCsvException
from src.service.ingestion import REQUIRED_COLUMNS, parse_transaction_csv


HEADER = ",".join(REQUIRED_COLUMNS)


def test_parses_rows_in_file_order():
    content = f"{HEADER}\nk1,10,1,credit\nk2,5,2,debit\n".encode()

    rows = parse_transaction_csv(content)

    assert [r["idempotencyKey"] for r in rows] == ["k1", "k2"]
    assert rows[1] == {"idempotencyKey": "k2", "amount": "5", "account": "2", "type": "debit"}


def test_parses_utf8_bom_and_crlf():
    content = f"\ufeff{HEADER}\r\nk1,10,1,credit\r\n".encode("utf-8")

    rows = parse_transaction_csv(content)

    assert rows == [{"idempotencyKey": "k1", "amount": "10", "account": "1", "type": "credit"}]


def test_parses_with_columns_reordered_and_extra_columns():
    content = b"type,note,account,amount,idempotencyKey\ncredit,hello,1,10,k1\n"

    rows = parse_transaction_csv(content)

    assert rows[0]["idempotencyKey"] == "k1"
    assert rows[0]["note"] == "hello"


def test_parses_and_skips_blank_lines():
    content = f"{HEADER}\nk1,10,1,credit\n\n,,,\nk2,10,1,credit\n".encode()

    rows = parse_transaction_csv(content)

    assert len(rows) == 2


def test_parses_short_rows_as_blank_fields():
    content = f"{HEADER}\nk1,10\n".encode()

    rows = parse_transaction_csv(content)

    assert rows[0]["account"] == ""
    assert rows[0]["type"] == ""


def test_parses_quoted_values():
    content = f'{HEADER}\n"k,1","10",1,credit\n'.encode()

    rows = parse_transaction_csv(content)

    assert rows[0]["idempotencyKey"] == "k,1"


@pytest.mark.parametrize("content", [b"", b"   \n\n"])
def test_rejects_empty_files(content):
    with pytest.raises(InvalidCsvException) as exc_info:
        parse_transaction_csv(content)

    assert exc_info.value.code == "INVALID_CSV"


def test_rejects_missing_columns():
    with pytest.raises(InvalidCsvException) as exc_info:
        parse_transaction_csv(b"idempotencyKey,amount\nk1,10\n")

    assert "account" in exc_info.value.message
    assert "type" in exc_info.value.message


def test_rejects_non_utf8():
    with pytest.raises(InvalidCsvException):
        parse_transaction_csv(f"{HEADER}\nk\xe9,10,1,credit\n".encode("latin-1"))


def test_rejects_too_many_rows():
    content = (HEADER + "\n" + "k,1,1,credit\n" * 3).encode()

    with pytest.raises(InvalidCsvException):
        parse_transaction_csv(content, max_rows=2)

    assert len(parse_transaction_csv(content, max_rows=3)) == 3

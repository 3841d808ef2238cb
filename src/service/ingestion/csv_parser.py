"""CSV parsing for bulk transaction uploads."""

import csv
import io
from typing import Dict, List

from src.domain.exceptions import InvalidCsvException

REQUIRED_COLUMNS = ("idempotencyKey", "amount", "account", "type")


def parse_transaction_csv(content: bytes, max_rows: int | None = None) -> List[Dict[str, str]]:
    """
    Parse an uploaded CSV into one mapping of column name to value per row.

    Header names and values are stripped; blank lines are skipped. Rows are
    returned in file order, which bulk ingestion relies on for duplicate
    detection.

    Args:
        content: Raw file bytes (UTF-8, optional BOM)
        max_rows: Reject files with more data rows than this

    Raises:
        InvalidCsvException: If the file is empty, undecodable, malformed,
            lacks a required column or has too many rows
    """
    try:
        text = content.decode("utf-8-sig")
    except UnicodeDecodeError:
        raise InvalidCsvException("file is not valid UTF-8")

    if not text.strip():
        raise InvalidCsvException("file is empty")

    reader = csv.DictReader(io.StringIO(text, newline=""), skipinitialspace=True)

    try:
        header = [name.strip() for name in (reader.fieldnames or [])]
        missing = [column for column in REQUIRED_COLUMNS if column not in header]
        if missing:
            raise InvalidCsvException(f"missing columns: {', '.join(missing)}")

        rows = []
        for raw in reader:
            row = {
                key.strip(): (value or "").strip()
                for key, value in raw.items()
                if key is not None
            }
            if not any(row.values()):
                continue
            rows.append(row)
            if max_rows is not None and len(rows) > max_rows:
                raise InvalidCsvException(f"more than {max_rows} rows")
    except csv.Error as e:
        raise InvalidCsvException(str(e))

    return rows

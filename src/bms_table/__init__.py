"""bms_table package.

Load BMS difficulty tables (HTML page or JSON header -> header -> body) from
unreliable hosts and normalize them into a Table.

Entry points: `load_table()` and the `bms-table` console script.
"""

from .errors import (
    BMSTableError,
    BodyShapeError,
    ConfigurationError,
    HeaderValidationError,
    MalformedDocumentError,
    MissingPointerError,
    TransportError,
)
from .http_engine import HttpEngine, RetryPolicy, make_http_engine_from_meta
from .loader import load_table
from .table import Table
from .table_body import ChecksumIdentity, TableEntry, get_entry_checksum, normalize_body
from .table_head import TableHead, parse_head

__all__ = [
    "BMSTableError",
    "BodyShapeError",
    "ChecksumIdentity",
    "ConfigurationError",
    "HeaderValidationError",
    "HttpEngine",
    "MalformedDocumentError",
    "MissingPointerError",
    "RetryPolicy",
    "Table",
    "TableEntry",
    "TableHead",
    "TransportError",
    "get_entry_checksum",
    "load_table",
    "make_http_engine_from_meta",
    "normalize_body",
    "parse_head",
]

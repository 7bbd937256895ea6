"""GL CSV ingestion: tokenizer, dialect adapters and fallback policy."""

from .demo_data import generate_demo_data
from .errors import FormatError
from .gl_import import GLImportOutcome, load_gl_import, parse_gl_csv
from .parsing import (
    infer_category_type,
    normalize_name,
    parse_amount,
    parse_date,
    parse_rows,
)
from .utils import load_gl_csv

__all__ = [
    "FormatError",
    "GLImportOutcome",
    "generate_demo_data",
    "infer_category_type",
    "load_gl_csv",
    "load_gl_import",
    "normalize_name",
    "parse_amount",
    "parse_date",
    "parse_gl_csv",
    "parse_rows",
]

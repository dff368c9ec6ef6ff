"""
Line-accurate validation of delimited text.

Exports the public API:
- validate_text / ValidationResult
- tokenize, detect_delimiter, check_structure, evaluate, validate_date
- Rule, Record, Document, Defect, ValueKind, DateLayout
- ValidationConfig
"""
from .types import (
    COLUMN_COUNT_MISMATCH,
    EMPTY_FILE,
    REQUIRED_MISSING,
    UNCLOSED_QUOTE,
    DateLayout,
    Defect,
    Document,
    Record,
    Rule,
    RuleConfigError,
    ValueKind,
    type_tag,
)
from .tokenize import tokenize
from .detect import AUTO, detect_delimiter
from .structure import check_structure
from .dates import validate_date
from .rules import bind_rules, evaluate, validate_value
from .engine import ValidationResult, validate_text
from .config import ValidationConfig

"""Check records, results and the bounded runner."""

from .check import DEFAULT_CATEGORY, Check, ScanError, ValidationError, parse_check_line
from .result import Result, StatusList

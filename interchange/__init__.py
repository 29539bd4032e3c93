"""
Interchange module
Delimited text import/export of registry contents
"""

from .csv_codec import CsvCodec, RowScanner, escape_field, split_rows
from .files import InterchangeStore, rebuild_enrolled_courses

__all__ = [
    'CsvCodec', 'RowScanner', 'escape_field', 'split_rows',
    'InterchangeStore', 'rebuild_enrolled_courses',
]

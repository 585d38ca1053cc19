"""Result and diagnostics storage."""

from .csv_storage import CSVStorage
from .json_storage import JSONStorage
from .result_storage import ResultStorage

__all__ = ['CSVStorage', 'JSONStorage', 'ResultStorage']

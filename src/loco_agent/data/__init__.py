"""Parameter data configurations and their distribution across hosts."""

from .base import DataValue, ParameterDataConfig, ProviderLevel
from .files import FileContainer, FileNamesDataConfig
from .listing import ListDataConfig
from .loader import AnyParameterDataConfig, LoaderDataConfig
from .range import RANGE_UPPER_LIMIT, RangeDataConfig

__all__ = (
    'RANGE_UPPER_LIMIT',
    'AnyParameterDataConfig',
    'DataValue',
    'FileContainer',
    'FileNamesDataConfig',
    'ListDataConfig',
    'LoaderDataConfig',
    'ParameterDataConfig',
    'ProviderLevel',
    'RangeDataConfig',
)

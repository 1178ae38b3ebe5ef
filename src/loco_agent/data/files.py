"""File name parameter data."""

from re import compile as regexp
from re import error as RegexpError  # noqa: N812
from typing import Literal, Self

from pydantic import Field, field_validator, model_validator

from loco_agent.models import SchemaModel

from .base import ParameterDataConfig, ProviderLevel

#: Pattern matching every file name.
MATCH_ALL_PATTERN = '.*'

#: Sum of folder percentages.
HUNDRED_PERCENTS = 100


class FileContainer(SchemaModel):
    """A folder files are taken from."""

    path: str = Field(
        min_length=1,
        title='Folder path',
        description='Folder scanned for files.',
    )

    percentage: int = Field(
        default=HUNDRED_PERCENTS,
        ge=0,
        le=HUNDRED_PERCENTS,
        title='Percentage',
        description='Share of the produced file names taken from this folder.',
    )

    pattern: str = Field(
        default=MATCH_ALL_PATTERN,
        title='File name pattern',
        description='Regular expression selecting file names within the folder.',
    )

    @field_validator('pattern')
    @classmethod
    def check_pattern(cls, value: str) -> str:
        """Check that the file name pattern compiles.

        Raises:
            ValueError: If the pattern is not a valid regular expression.
        """
        try:
            regexp(value)
        except RegexpError as base:
            raise ValueError(f'Invalid file name pattern {value!r}: {base}') from base

        return value


class FileNamesDataConfig(ParameterDataConfig):
    """File names collected from one or more folders.

    Every host scans the folders on its own, so distribution clones the
    configuration instead of splitting it.
    """

    kind: Literal['file_names'] = 'file_names'

    provider_level: ProviderLevel = Field(
        default=ProviderLevel.PER_THREAD,
        title='Provider level',
        description='Level at which a new value is taken.',
    )

    folders: tuple[FileContainer, ...] = Field(
        min_length=1,
        title='Folders',
        description='Folders files are taken from, with their percentages.',
    )

    recursive_search: bool = Field(
        default=True,
        title='Recursive search',
        description='Whether sub-folders are scanned as well.',
    )

    return_full_path: bool = Field(
        default=True,
        title='Full path flag',
        description='Produce absolute file paths instead of bare file names.',
    )

    @model_validator(mode='after')
    def check_percentages(self) -> Self:
        """Check that folder percentages add up to a hundred.

        Raises:
            InvalidConfiguration: If the percentages sum to anything else.
        """
        total = sum(folder.percentage for folder in self.folders)
        if total != HUNDRED_PERCENTS:
            raise self.invalid(f'Folder percentages must sum to 100, got {total}')

        return self

    def distribute(self, host_count: int) -> list[Self]:
        """Clone the configuration for every host.

        Raises:
            InvalidConfiguration: If `host_count` is less than one.
        """
        self.check_host_count(host_count)

        return [self.model_copy() for _ in range(host_count)]

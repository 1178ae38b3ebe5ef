"""Name primitive types and validation rules.

Components, actions and parameters are addressed by name across the
process boundary, so the allowed shapes of those names are part of the
agent's public contract.
"""

from re import ASCII
from re import compile as regexp
from typing import Annotated

from pydantic import Field

#: Base pattern for all identifiers.
#: Identifiers must start with a letter and may contain letters, digits, or underscores
_NAME_PATTERN = r'[a-zA-Z][\w]*'

#: Compiled pattern for action identifiers.
#: Supports both plain actions ("upload") and class-qualified actions ("FileOperations.upload").
ACTION_PATTERN = regexp(
    rf'^((?P<group>{_NAME_PATTERN})\.)?(?P<name>{_NAME_PATTERN})$',
    flags=ASCII,
)

#: Compiled pattern for component and parameter identifiers
NAME_PATTERN = regexp(
    rf'^(?P<name>{_NAME_PATTERN})$',
    flags=ASCII,
)


ActionName = Annotated[
    str, Field(
        pattern=rf'^({_NAME_PATTERN}\.)?{_NAME_PATTERN}$',
        title='Action identifier',
        description=(
            'Name under which an action is registered and invoked. '
            'Either a plain name (for example, `upload`) or a name '
            'qualified by the implementing class using dot notation '
            '(for example, `FileOperations.upload`).'
        ),
        examples=[
            'upload',
            'FileOperations.upload',
        ],
    ),
]

ComponentName = Annotated[
    str, Field(
        pattern=rf'^{_NAME_PATTERN}$',
        title='Component identifier',
        description='Name of the agent component owning a set of actions.',
        examples=[
            'system',
            'file_transfer',
        ],
    ),
]

ParameterName = Annotated[
    str, Field(
        pattern=rf'^{_NAME_PATTERN}$',
        title='Parameter identifier',
        description=(
            'Name of an action parameter fed with generated data '
            'during a load run.'
        ),
        examples=[
            'userName',
            'file_path',
        ],
    ),
]

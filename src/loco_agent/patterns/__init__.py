"""Threading patterns and their distribution across hosts."""

from typing import Annotated

from pydantic import Field

from .all_at_once import AllAtOncePattern, FixedDurationAllAtOncePattern
from .base import ThreadingPattern
from .ramp_up import FixedDurationRampUpPattern, RampUpPattern

AnyThreadingPattern = Annotated[
    AllAtOncePattern
    | RampUpPattern
    | FixedDurationAllAtOncePattern
    | FixedDurationRampUpPattern,
    Field(discriminator='pattern'),
]

__all__ = (
    'AllAtOncePattern',
    'AnyThreadingPattern',
    'FixedDurationAllAtOncePattern',
    'FixedDurationRampUpPattern',
    'RampUpPattern',
    'ThreadingPattern',
)

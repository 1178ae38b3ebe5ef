"""Dynamic action dispatch.

Actions are named units of work with one or more overloaded
implementations. Callers pass only runtime values; the resolver picks
the single most specific implementation accepting them, and the invoker
runs it with its failures normalized.
"""

from .components import ActionHandler, ComponentActionMap, ComponentRepository
from .invoker import ActionInvoker, ActivityCounter, ActivityListener
from .resolver import ActionSignatureIndex, MethodResolver, Resolution, ResolvedAction
from .rules import DEFAULT_RULES, StringToEnumRule, TypeCompatibilityRule, is_value_compatible
from .signatures import ActionRequest, ActionSignature, action

__all__ = (
    'DEFAULT_RULES',
    'ActionHandler',
    'ActionInvoker',
    'ActionRequest',
    'ActionSignature',
    'ActionSignatureIndex',
    'ActivityCounter',
    'ActivityListener',
    'ComponentActionMap',
    'ComponentRepository',
    'MethodResolver',
    'Resolution',
    'ResolvedAction',
    'StringToEnumRule',
    'TypeCompatibilityRule',
    'action',
    'is_value_compatible',
)

"""Invocation of resolved actions."""

from threading import Lock
from typing import Any, Protocol

import structlog

from loco_agent.errors import ActionExecutionFailure, ErrorContext

from .resolver import ResolvedAction

logger = structlog.get_logger(__name__)


class ActivityListener(Protocol):
    """Receiver of action activity notifications."""

    def action_started(self, action: ResolvedAction) -> None:
        """Signal that a resolved action is about to run."""

    def action_finished(self, action: ResolvedAction, error: BaseException | None) -> None:
        """Signal that a resolved action returned or raised."""


class ActivityCounter:
    """Thread-safe listener counting running, finished and failed actions."""

    def __init__(self) -> None:
        """Initialize zeroed counters."""
        self._lock = Lock()
        self._running = 0
        self._finished = 0
        self._failed = 0

    def action_started(self, action: ResolvedAction) -> None:  # noqa: ARG002
        """Count a started action."""
        with self._lock:
            self._running += 1

    def action_finished(self, action: ResolvedAction, error: BaseException | None) -> None:  # noqa: ARG002
        """Count a finished action."""
        with self._lock:
            self._running -= 1
            self._finished += 1
            if error is not None:
                self._failed += 1

    @property
    def running(self) -> int:
        """Number of actions currently running."""
        with self._lock:
            return self._running

    @property
    def finished(self) -> int:
        """Number of actions that returned or raised."""
        with self._lock:
            return self._finished

    @property
    def failed(self) -> int:
        """Number of actions that raised."""
        with self._lock:
            return self._failed


class ActionInvoker:
    """Call resolved actions and normalize their failures.

    Attributes:
        listener: Optional activity listener.
    """

    def __init__(self, listener: ActivityListener | None = None) -> None:
        """Initialize the invoker.

        Args:
            listener: Listener notified around every call.
        """
        self.listener = listener

    def invoke(self, action: ResolvedAction, instance: object | None = None) -> Any:  # noqa: ANN401
        """Call a resolved action.

        Args:
            action: Resolved action with its argument values.
            instance: Target instance for actions that take one.

        Returns:
            Whatever the action callable returns.

        Raises:
            ActionExecutionFailure: If an argument can not be converted or
                the callable raises; the original exception is chained.
        """
        signature = action.signature
        context = ErrorContext(
            component=signature.component,
            action=signature.action,
            arguments=list(action.arguments),
        )

        if signature.deprecated:
            logger.warning(
                'deprecated action invoked',
                component=signature.component,
                action=signature.action,
            )

        try:
            arguments = action.bind()
        except (KeyError, ValueError, TypeError) as base:
            raise ActionExecutionFailure(
                f'Could not convert arguments of action {signature.action!r}',
                cause=base,
                context=context,
            ) from base

        if signature.takes_instance:
            if instance is None:
                raise ActionExecutionFailure(
                    f'Action {signature.action!r} requires an instance of '
                    f'{getattr(signature.owner, '__qualname__', 'its owner')}',
                    context=context,
                )
            arguments = (instance, *arguments)

        if self.listener is not None:
            self.listener.action_started(action)

        error: BaseException | None = None
        try:
            return signature.function(*arguments)
        except Exception as base:
            error = base
            raise ActionExecutionFailure(
                f'Action {signature.action!r} failed: {base}',
                cause=base,
                context=context,
            ) from base
        finally:
            if self.listener is not None:
                self.listener.action_finished(action, error)

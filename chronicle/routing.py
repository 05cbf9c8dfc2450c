import inspect
from abc import ABC, abstractmethod
from collections.abc import Callable
from functools import singledispatch
from typing import Any, TypeVar, get_type_hints

from .domain.exceptions import UnhandledCommandError

T = TypeVar("T")


class DefaultHandler(ABC):
    """Base handler for unregistered message types."""

    __slots__ = ("base_type", "operation_name")

    def __init__(self, base_type: type, operation_name: str):
        """Initialize the default handler.

        Args:
            base_type: The base type for messages (e.g., Command, Event).
            operation_name: Name of the operation for error messages.
        """
        self.base_type = base_type
        self.operation_name = operation_name

    @abstractmethod
    def __call__(self, message: Any, instance: Any) -> Any:
        """Handle an unregistered message type.

        Args:
            message: The message to handle.
            instance: The instance handling the message.
        """
        ...


class RaiseHandler(DefaultHandler):
    """Raise an error for unregistered message types."""

    __slots__ = ("error_type",)

    def __init__(
        self,
        base_type: type,
        operation_name: str,
        error_type: type[Exception] = NotImplementedError,
    ):
        super().__init__(base_type, operation_name)
        self.error_type = error_type

    def __call__(self, message: Any, instance: Any) -> Any:
        raise self.error_type(
            f"No {self.operation_name} registered on {type(instance).__name__} for "
            f"{self.base_type.__name__} type {type(message).__name__}"
        )


def _extract_handler_type(func: Callable[..., Any], param_index: int = 1) -> type:
    """Extract the message type annotation from a handler method.

    Args:
        func: The handler method to inspect.
        param_index: Index of the parameter to extract
            (0=self, 1=first arg, etc.)

    Returns:
        The annotated type of the parameter.

    Raises:
        ValueError: If the parameter is missing or lacks a type annotation.
    """
    func_name = getattr(func, "__name__", repr(func))
    params = list(inspect.signature(func).parameters.values())

    if len(params) <= param_index:
        raise ValueError(f"Handler {func_name} must have at least {param_index + 1} parameters")

    param = params[param_index]
    if param.annotation is inspect.Parameter.empty:
        raise ValueError(
            f"Handler {func_name} parameter '{param.name}' must have a type annotation"
        )
    if isinstance(param.annotation, str):
        # Postponed annotations resolve against the defining module
        return get_type_hints(func)[param.name]  # type: ignore[no-any-return]
    return param.annotation  # type: ignore[no-any-return]


class MessageRouter:
    """Generic router for dispatching messages to type-specific handlers.

    This class uses singledispatch to route messages (commands, events) to
    registered handler methods based on their type annotations. Subclasses of
    a registered type are routed to the closest registered handler.
    """

    __slots__ = ("_dispatch",)

    def __init__(self, default_handler: DefaultHandler):
        """Initialize the message router.

        Args:
            default_handler: Handler for unregistered message types.
        """

        @singledispatch
        def dispatch(message: object, instance: object) -> object:
            return default_handler(message, instance)

        self._dispatch = dispatch

    def register(self, message_type: type, handler: Callable[[Any, Any], Any]) -> None:
        """Register a handler for a specific message type.

        Args:
            message_type: The message class this handler processes.
            handler: The method to call when handling this message type.
        """

        # singledispatch keys on the first argument, so swap the
        # order back to (instance, message) for the method call
        def wrapper(msg: object, inst: object, h: Any = handler) -> object:
            return h(inst, msg)

        self._dispatch.register(message_type)(wrapper)

    def route(self, instance: Any, message: Any) -> object:
        """Route a message to its registered handler.

        Args:
            instance: The instance to call the handler on (self).
            message: The message to route.

        Returns:
            The result of the handler method.
        """
        return self._dispatch(message, instance)


class HandlerDecorator:
    """Base class for handler decorators.

    Marks methods as handlers for the message type named by the annotation
    of their first parameter after ``self``.
    """

    def __init__(self, marker_attr: str, type_attr: str):
        """Initialize the decorator.

        Args:
            marker_attr: Attribute name to mark decorated methods
                (e.g., '_is_command_handler').
            type_attr: Attribute name to store the message type
                (e.g., '_handles_command_type').
        """
        self.marker_attr = marker_attr
        self.type_attr = type_attr

    def __call__(self, func: Callable[..., T]) -> Callable[..., T]:
        message_type = _extract_handler_type(func, param_index=1)
        setattr(func, self.type_attr, message_type)
        setattr(func, self.marker_attr, True)
        return func


handles_command = HandlerDecorator("_is_command_handler", "_handles_command_type")
applies_event = HandlerDecorator("_is_event_applier", "_applies_event_type")

handles_command.__doc__ = """Decorator marking a method as a command handler.

The command type is extracted from the method's type annotation. The handler
returns the events the command produced (or None for no events).

Example:
    >>> class Order(Aggregate):
    ...     @handles_command
    ...     def handle_create(self, cmd: CreateOrder) -> list[Event]:
    ...         return [OrderCreated(aggregate_id=cmd.aggregate_id, version=self.version + 1)]
"""

applies_event.__doc__ = """Decorator marking a method as an event applier.

The event type is extracted from the method's type annotation. Appliers must
only mutate state from the event; they are called during replay.

Example:
    >>> class Order(Aggregate):
    ...     @applies_event
    ...     def apply_created(self, evt: OrderCreated) -> None:
    ...         self.state = "created"
"""


def setup_routing(
    cls: type,
    marker_attr: str,
    type_attr: str,
    default_handler: DefaultHandler,
) -> MessageRouter:
    """Set up message routing for a class.

    Scans the class hierarchy for methods decorated with the specified
    marker and registers them with a MessageRouter. Methods on subclasses
    take precedence over methods for the same type on base classes.

    Args:
        cls: The class to set up routing for.
        marker_attr: Attribute name marking decorated methods.
        type_attr: Attribute name storing the message type.
        default_handler: Handler for unregistered message types.

    Returns:
        A configured MessageRouter.
    """
    router = MessageRouter(default_handler)

    for klass in reversed(cls.__mro__):
        for value in klass.__dict__.values():
            if getattr(value, marker_attr, None):
                router.register(getattr(value, type_attr), value)

    return router


def applied_event_types(cls: type) -> list[type]:
    """List the event types ``cls`` has appliers for, base classes first."""
    types = (
        value._applies_event_type
        for klass in reversed(cls.__mro__)
        for value in klass.__dict__.values()
        if getattr(value, "_is_event_applier", None)
    )
    return list(dict.fromkeys(types))


def setup_command_routing(cls: type) -> MessageRouter:
    """Set up command routing for an aggregate class."""
    from .domain.command import Command

    return setup_routing(
        cls,
        marker_attr="_is_command_handler",
        type_attr="_handles_command_type",
        default_handler=RaiseHandler(Command, "handler", UnhandledCommandError),
    )


def setup_event_applying(cls: type) -> MessageRouter:
    """Set up event applying for an aggregate class."""
    from .domain.event import Event

    return setup_routing(
        cls,
        marker_attr="_is_event_applier",
        type_attr="_applies_event_type",
        default_handler=RaiseHandler(Event, "applier"),
    )

"""Command base class for the write side.

Commands represent intentions to change one aggregate and are handled by
producing zero or more events.
"""

from pydantic import BaseModel


class Command(BaseModel):
    """Base class for all commands in the system.

    Commands are dispatched to the aggregate identified by ``aggregate_id``.
    The id is not validated here so that ``Repository.apply`` can reject
    blank ids with an ``InvalidArgumentError``.

    Attributes:
        aggregate_id: ID of the aggregate that should handle this command.

    Examples:
        >>> class DepositMoney(Command):
        ...     amount: Decimal
        >>>
        >>> cmd = DepositMoney(aggregate_id="acc-1", amount=Decimal("10.00"))
    """

    aggregate_id: str

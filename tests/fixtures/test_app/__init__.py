"""Test application package."""

from .aggregates import BankAccount, Entity, Ledger
from .aggregates.bank_account import (
    AccountOpened,
    Audit,
    DepositMoney,
    MoneyDeposited,
    MoneyWithdrawn,
    OpenAccount,
    TransferIn,
    WithdrawMoney,
)
from .aggregates.entity import CreateEntity, Created, RenameEntity, Renamed

ALL_EVENTS = (AccountOpened, MoneyDeposited, MoneyWithdrawn, Created, Renamed)

__all__ = [
    "BankAccount",
    "Entity",
    "Ledger",
    "OpenAccount",
    "DepositMoney",
    "WithdrawMoney",
    "TransferIn",
    "Audit",
    "AccountOpened",
    "MoneyDeposited",
    "MoneyWithdrawn",
    "CreateEntity",
    "RenameEntity",
    "Created",
    "Renamed",
    "ALL_EVENTS",
]

from .bank_account import BankAccount
from .entity import Entity, Ledger

__all__ = ["BankAccount", "Entity", "Ledger"]

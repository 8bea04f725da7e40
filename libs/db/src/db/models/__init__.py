"""Shared SQLAlchemy models registry for the workspace database.

Currently includes the dashboard models used by ``finance_dashboard``.
"""

from .finance import Base, FdAccount, FdAccountBalance, FdItem, FdTransaction

__all__ = [
    "Base",
    "FdItem",
    "FdAccount",
    "FdAccountBalance",
    "FdTransaction",
]

"""Database building blocks shared by the feature modules."""

from .base import EXTENDED_SCHEMA, NAMING_CONVENTION, Base
from .functions import DropTemporaryTable, epoch_seconds, unix_timestamp

__all__ = [
    "EXTENDED_SCHEMA",
    "NAMING_CONVENTION",
    "Base",
    "DropTemporaryTable",
    "epoch_seconds",
    "unix_timestamp",
]

"""Persistence layer hosting translatable records.

Provides the collaborator contract (protocols), filter chains around model
operations, a dict-backed record, a rule-descriptor validator and an
in-memory model implementing all of it.
"""

from infrastructure.persistence.entity import Entity
from infrastructure.persistence.filters import Chain, FilterChain
from infrastructure.persistence.memory import MemoryModel
from infrastructure.persistence.protocols import Record, RecordModel
from infrastructure.persistence.validator import Validator

__all__ = [
    "Chain",
    "Entity",
    "FilterChain",
    "MemoryModel",
    "Record",
    "RecordModel",
    "Validator",
]

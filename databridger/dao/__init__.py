"""
Record access module.

Statement building and the generic CRUD data-access object.
"""

from databridger.dao.builder import Statement
from databridger.dao.conditions import Condition, RawCondition, raw
from databridger.dao.records import RecordDAO

__all__ = ["Condition", "RawCondition", "RecordDAO", "Statement", "raw"]

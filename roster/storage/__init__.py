"""
Document storage for the roster services
"""
from .base import (
    DocumentStore,
    WriteBatch,
    EMPLOYEES,
    HOLIDAYS,
    VACATIONS,
    SCHEDULE,
    ROTATION_META,
    SCHEDULE_STATUS,
)
from .sql_store import SQLAlchemyDocumentStore

__all__ = [
    'DocumentStore',
    'WriteBatch',
    'SQLAlchemyDocumentStore',
    'EMPLOYEES',
    'HOLIDAYS',
    'VACATIONS',
    'SCHEDULE',
    'ROTATION_META',
    'SCHEDULE_STATUS',
]

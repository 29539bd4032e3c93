"""
Entity registry module
Thread-safe in-memory store for all records
"""

from .db import Registry, ENTITY_TYPES

__all__ = ['Registry', 'ENTITY_TYPES']

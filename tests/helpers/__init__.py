"""
Test helpers for dynamodb_bootstrap.

Shared builders for entity declarations and an in-memory TableStore.
"""

from .store_fakes import FakeTableStore, attribute

__all__ = [
    'FakeTableStore',
    'attribute'
]

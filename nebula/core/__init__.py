"""Core modules for nebula"""

from .cache import CacheStore
from .models import AggregatedPackage, Category, OperationOutcome, RemoveMode
from .service import PackageService

__all__ = [
    'CacheStore',
    'AggregatedPackage',
    'Category',
    'OperationOutcome',
    'RemoveMode',
    'PackageService',
]

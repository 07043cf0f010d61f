"""
Service Layer.

Cohesive groups of endpoint methods composed by the Client facade. Every
method funnels through Client.execute().
"""

from .departments import DepartmentService
from .functions import FunctionService
from .metadata import ObjectService
from .records import CreateService, DeleteService, SearchService, UpdateService

__all__ = [
    "CreateService",
    "DeleteService",
    "DepartmentService",
    "FunctionService",
    "ObjectService",
    "SearchService",
    "UpdateService",
]

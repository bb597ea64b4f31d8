"""
API module for the REST implementation.
"""

from .rest_api import CCRMRestAPI

__all__ = [
    "CCRMRestAPI",
]

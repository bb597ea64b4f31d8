"""
Core interfaces and abstract base classes for the CCRM platform.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, TypeVar, Generic


T = TypeVar('T')


class EntityStore(ABC, Generic[T]):
    """Abstract base class for keyed in-memory entity collections."""
    
    @abstractmethod
    def add(self, entity: T) -> T:
        """Add a new entity; its key must not already exist."""
        pass
    
    @abstractmethod
    def find_by_key(self, key: str) -> Optional[T]:
        """Find an entity by key, or return None."""
        pass
    
    @abstractmethod
    def update(self, entity: T) -> T:
        """Replace a stored entity with the same key."""
        pass
    
    @abstractmethod
    def all(self) -> List[T]:
        """Get a sorted snapshot of all entities."""
        pass


class Searchable(ABC, Generic[T]):
    """Interface for collections that can be filtered by a predicate."""
    
    @abstractmethod
    def search(self, criteria: Callable[[T], bool]) -> List[T]:
        """Get the entities matching a predicate, in the collection's sort order."""
        pass

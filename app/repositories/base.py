"""
Repositories keep query logic out of services and routes. Writes are staged
on the session; services decide when to ``save()`` (commit).

Example:
    class TeamRepository(BaseRepository[Team]):
        def find_by_nba_team_id(self, nba_team_id: int) -> Optional[Team]:
            return self.where_first(Team.nba_team_id == nba_team_id)
"""
from abc import ABC
from typing import TypeVar, Generic, Type, Optional, List, Tuple
from datetime import datetime
from sqlalchemy import func
from sqlalchemy.orm import Query, Session

from app.core.exceptions import NotFoundError

T = TypeVar("T")


class BaseRepository(Generic[T], ABC):
    """
    Shared lookups and writes for one mapped model.

    ``entity_name`` is the label used in 404 messages.
    """

    entity_name = "Record"

    def __init__(self, model_type: Type[T], db: Session):
        self.model_type = model_type
        self.db = db

    # ========================================================================
    # CRUD Operations
    # ========================================================================

    def find_by_id(self, id: str) -> Optional[T]:
        """Primary-key lookup; None when absent."""
        return self.db.get(self.model_type, id)

    def get_or_404(self, id: str) -> T:
        """Find a record by ID or raise NotFoundError."""
        instance = self.find_by_id(id)
        if instance is None:
            raise NotFoundError.for_entity(self.entity_name, id)
        return instance

    def create(self, **kwargs) -> T:
        """Create a new record (not yet committed)."""
        instance = self.model_type(**kwargs)
        self.db.add(instance)
        return instance

    def update(self, instance: T, **kwargs) -> T:
        """Apply field values to an instance, stamping ``updated_at`` when the model has one."""
        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)
        if hasattr(instance, "updated_at"):
            instance.updated_at = datetime.utcnow()
        return instance

    def upsert(self, id: str, **kwargs) -> Tuple[T, bool]:
        """
        Create the record with this ID or update it in place.

        Returns:
            (instance, created)
        """
        instance = self.find_by_id(id)
        if instance is None:
            instance = self.create(id=id, **kwargs)
            # pending rows are invisible to find_by_id until flushed
            self.flush()
            return instance, True
        return self.update(instance, **kwargs), False

    def delete(self, instance: T) -> None:
        """Delete an instance (ORM cascades apply)."""
        self.db.delete(instance)

    # ========================================================================
    # Query Builders
    # ========================================================================

    def query(self) -> Query:
        return self.db.query(self.model_type)

    def where_first(self, *criterion) -> Optional[T]:
        """First row matching every criterion, or None."""
        return self.query().filter(*criterion).first()

    def count(self, *criterion) -> int:
        query = self.db.query(func.count(self.model_type.id))
        if criterion:
            query = query.filter(*criterion)
        return query.scalar() or 0

    def in_date_range(
        self,
        date_field: str,
        start: datetime,
        end: datetime,
        *additional_criterion
    ) -> List[T]:
        """Find records whose ``date_field`` lies within [start, end]."""
        column = getattr(self.model_type, date_field)
        query = self.query().filter(column >= start, column <= end)
        if additional_criterion:
            query = query.filter(*additional_criterion)
        return query.order_by(column).all()

    # ========================================================================
    # Unit of work
    # ========================================================================

    def save(self) -> None:
        self.db.commit()

    def flush(self) -> None:
        self.db.flush()

    def refresh(self, instance: T) -> T:
        self.db.refresh(instance)
        return instance


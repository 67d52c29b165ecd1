"""
Persistence Gateway
Maps records onto the Supabase tables declared in app.models and runs the
remote reads and writes, turning backend failures into typed errors
"""
import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from sqlalchemy import inspect

from app.core.exceptions import NotFoundError, PersistenceError, ValidationError
from app.schemas.common import Pagination
from app.services.supabase_client import BackendError, BackendUnavailable, SupabaseClient
from app.utils.validation import FieldError

logger = logging.getLogger(__name__)

MAX_PAGE_SIZE = 100

# (attribute, operator, value), e.g. ("application_status", "eq", "pending")
Filter = Tuple[str, str, Any]


def column_name(model, attribute: str) -> str:
    """Database column behind a model attribute"""
    return inspect(model).columns[attribute].name


def column_names(model) -> List[str]:
    return [column.name for column in model.__table__.columns]


def to_row(model, values: Dict[str, Any]) -> Dict[str, Any]:
    """Rename attribute keys to the table's column names"""
    return {column_name(model, attribute): value for attribute, value in values.items()}


@dataclass
class Page:
    """One page of an admin listing"""
    rows: List[Dict[str, Any]]
    page: int
    limit: int
    total: int

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def pagination(self) -> Dict[str, int]:
        return Pagination(
            page=self.page,
            limit=self.limit,
            total=self.total,
            totalPages=self.total_pages
        ).model_dump()


class PersistenceGateway:
    """Reads and writes submissions through the Supabase REST API"""

    def __init__(self, client: SupabaseClient):
        self.client = client

    def _params(self, model, filters: Optional[Sequence[Filter]]) -> List[Tuple[str, str]]:
        return [
            (column_name(model, attribute), f"{operator}.{value}")
            for attribute, operator, value in (filters or [])
        ]

    async def insert(self, model, values: Dict[str, Any]) -> Dict[str, Any]:
        """
        Insert a record and return the stored row

        Tries a plain insert first. When row-level security rejects it,
        retries through the model's SECURITY DEFINER procedure.

        Args:
            model: Mapped model class naming the table and procedure
            values: Attribute name -> value

        Returns:
            Dict[str, Any]: Inserted row including id and timestamps

        Raises:
            PersistenceError: If neither path stored the row
        """
        row = to_row(model, values)
        try:
            return await self.insert_direct(model, row)
        except BackendError as e:
            if not e.is_policy_denial:
                raise PersistenceError(detail=f"Database insertion failed: {e.message}") from e
            logger.warning(
                f"Direct insert into {model.__tablename__} denied by row-level security, "
                f"falling back to {model.__insert_procedure__}"
            )
        except BackendUnavailable as e:
            raise PersistenceError(detail=f"Database insertion failed: {e}") from e

        try:
            return await self.insert_privileged(model, row)
        except (BackendError, BackendUnavailable) as e:
            raise PersistenceError(detail=f"Database insertion failed: {e}") from e

    async def insert_direct(self, model, row: Dict[str, Any]) -> Dict[str, Any]:
        return await self.client.insert(model.__tablename__, row)

    async def insert_privileged(self, model, row: Dict[str, Any]) -> Dict[str, Any]:
        """Insert through the model's privileged procedure"""
        result = await self.client.rpc(model.__insert_procedure__, {model.__procedure_arg__: row})
        rows = result if isinstance(result, list) else [result]
        if not rows or not rows[0]:
            raise BackendError(500, f"{model.__insert_procedure__} returned no row")
        return rows[0]

    async def list(
        self,
        model,
        page: int = 1,
        limit: int = 10,
        sort_by: str = "created_at",
        sort_order: str = "desc",
        filters: Optional[Sequence[Filter]] = None
    ) -> Page:
        """
        Fetch one page of rows plus the total page count

        Raises:
            ValidationError: If the paging or sort arguments are out of range
            PersistenceError: If the backend call fails
        """
        errors = []
        if page < 1:
            errors.append(FieldError("page", "Page must be a positive integer", page))
        if not 1 <= limit <= MAX_PAGE_SIZE:
            errors.append(FieldError("limit", f"Limit must be between 1 and {MAX_PAGE_SIZE}", limit))
        if sort_by not in column_names(model):
            errors.append(FieldError("sortBy", "Unknown sort column", sort_by))
        if sort_order not in ("asc", "desc"):
            errors.append(FieldError("sortOrder", "Sort order must be asc or desc", sort_order))
        if errors:
            raise ValidationError(errors)

        offset = (page - 1) * limit
        params = [("select", "*"), ("order", f"{sort_by}.{sort_order}")]
        params.extend(self._params(model, filters))

        try:
            rows = await self.client.select(model.__tablename__, params, row_range=(offset, offset + limit - 1))
            total = await self.client.count(model.__tablename__, self._params(model, filters))
        except (BackendError, BackendUnavailable) as e:
            raise PersistenceError(detail=f"Failed to fetch {model.__tablename__}: {e}") from e

        return Page(rows=rows or [], page=page, limit=limit, total=total)

    async def get(self, model, record_id: int) -> Dict[str, Any]:
        """
        Fetch one row by id

        Raises:
            NotFoundError: If no row has this id
        """
        try:
            return await self.client.select(
                model.__tablename__,
                [("select", "*"), ("id", f"eq.{record_id}")],
                single=True
            )
        except BackendError as e:
            if e.is_not_found:
                raise NotFoundError(f"{model.__name__} {record_id} not found") from e
            raise PersistenceError(detail=f"Failed to fetch {model.__tablename__}: {e.message}") from e
        except BackendUnavailable as e:
            raise PersistenceError(detail=str(e)) from e

    async def update(self, model, record_id: int, values: Dict[str, Any]) -> Dict[str, Any]:
        """
        Update one row by id and return it

        Raises:
            NotFoundError: If no row has this id
        """
        try:
            return await self.client.update(
                model.__tablename__,
                [("id", f"eq.{record_id}")],
                to_row(model, values)
            )
        except BackendError as e:
            if e.is_not_found:
                raise NotFoundError(f"{model.__name__} {record_id} not found") from e
            raise PersistenceError(detail=f"Failed to update {model.__tablename__}: {e.message}") from e
        except BackendUnavailable as e:
            raise PersistenceError(detail=str(e)) from e

    async def count(self, model, filters: Optional[Sequence[Filter]] = None) -> int:
        try:
            return await self.client.count(model.__tablename__, self._params(model, filters))
        except (BackendError, BackendUnavailable) as e:
            raise PersistenceError(detail=f"Failed to count {model.__tablename__}: {e}") from e

    async def select_column(self, model, attribute: str) -> List[Any]:
        """Every non-null value of one column"""
        column = column_name(model, attribute)
        try:
            rows = await self.client.select(
                model.__tablename__,
                [("select", column), (column, "not.is.null")]
            )
        except (BackendError, BackendUnavailable) as e:
            raise PersistenceError(detail=f"Failed to read {model.__tablename__}.{column}: {e}") from e
        return [row[column] for row in rows]

    async def ping(self, model) -> bool:
        """Zero-row count query; True when the backend answered"""
        try:
            await self.client.count(model.__tablename__, [("limit", "0")])
            return True
        except BackendError as e:
            logger.error(f"Supabase connection test failed: {e}")
            return False
        except BackendUnavailable as e:
            logger.error(f"Supabase connection error: {e}")
            return False

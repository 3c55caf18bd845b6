"""
Task API endpoints - today view, date view, search, calendar stats and lifecycle
"""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from yarukoto.api.auth import get_user_context
from yarukoto.api.errors import unwrap
from yarukoto.database import get_db
from yarukoto.schemas.task import CreateTaskInput, SkipTaskFields, UpdateTaskFields
from yarukoto.services import task_service
from yarukoto.services.context import UserContext

router = APIRouter()

# Query-string value standing for "no category" / "no priority" in search
NONE_SENTINEL = "none"


def _search_filters(
    keyword: Optional[str],
    status: Optional[str],
    category_id: Optional[str],
    priority: Optional[str],
    date_from: Optional[str],
    date_to: Optional[str],
) -> dict:
    """Only parameters present in the query become filters; "none" selects null"""
    filters = {}
    if keyword is not None:
        filters["keyword"] = keyword
    if status is not None:
        filters["status"] = status
    if category_id is not None:
        filters["category_id"] = None if category_id == NONE_SENTINEL else category_id
    if priority is not None:
        filters["priority"] = None if priority == NONE_SENTINEL else priority
    if date_from:
        filters["date_from"] = date_from
    if date_to:
        filters["date_to"] = date_to
    return filters


# --- Views ---

@router.get("/today")
async def get_today_tasks(
    db: AsyncSession = Depends(get_db),
    user: UserContext = Depends(get_user_context)
):
    """Overdue, today, undated, completed-today and skipped-today buckets"""
    return unwrap(await task_service.get_today_tasks(db, user))


@router.get("/by-date/{date}")
async def get_tasks_by_date(
    date: str,
    db: AsyncSession = Depends(get_db),
    user: UserContext = Depends(get_user_context)
):
    return unwrap(await task_service.get_tasks_by_date(db, user, {"date": date}))


@router.get("/search")
async def search_tasks(
    keyword: Optional[str] = None,
    status: Optional[str] = None,
    category_id: Optional[str] = Query(None, alias="categoryId"),
    priority: Optional[str] = None,
    date_from: Optional[str] = Query(None, alias="dateFrom"),
    date_to: Optional[str] = Query(None, alias="dateTo"),
    db: AsyncSession = Depends(get_db),
    user: UserContext = Depends(get_user_context)
):
    """Search tasks; results grouped by scheduled date, undated last"""
    filters = _search_filters(keyword, status, category_id, priority, date_from, date_to)
    return unwrap(await task_service.search_tasks(db, user, filters))


@router.get("/stats/{month}")
async def get_monthly_task_stats(
    month: str,
    db: AsyncSession = Depends(get_db),
    user: UserContext = Depends(get_user_context)
):
    """Per-day task counts for a YYYY-MM month (days without tasks omitted)"""
    return unwrap(await task_service.get_monthly_task_stats(db, user, {"month": month}))


# --- Lifecycle ---

@router.post("/")
async def create_task(
    data: CreateTaskInput,
    db: AsyncSession = Depends(get_db),
    user: UserContext = Depends(get_user_context)
):
    return unwrap(await task_service.create_task(db, user, data))


@router.patch("/{task_id}")
async def update_task(
    task_id: str,
    data: UpdateTaskFields,
    db: AsyncSession = Depends(get_db),
    user: UserContext = Depends(get_user_context)
):
    """Partial update: omitted fields are kept, null clears a nullable field"""
    payload = {**data.model_dump(exclude_unset=True), "id": task_id}
    return unwrap(await task_service.update_task(db, user, payload))


@router.post("/{task_id}/complete")
async def complete_task(
    task_id: str,
    db: AsyncSession = Depends(get_db),
    user: UserContext = Depends(get_user_context)
):
    return unwrap(await task_service.complete_task(db, user, {"id": task_id}))


@router.post("/{task_id}/uncomplete")
async def uncomplete_task(
    task_id: str,
    db: AsyncSession = Depends(get_db),
    user: UserContext = Depends(get_user_context)
):
    return unwrap(await task_service.uncomplete_task(db, user, {"id": task_id}))


@router.post("/{task_id}/skip")
async def skip_task(
    task_id: str,
    data: Optional[SkipTaskFields] = None,
    db: AsyncSession = Depends(get_db),
    user: UserContext = Depends(get_user_context)
):
    reason = data.reason if data else None
    return unwrap(await task_service.skip_task(db, user, {"id": task_id, "reason": reason}))


@router.post("/{task_id}/unskip")
async def unskip_task(
    task_id: str,
    db: AsyncSession = Depends(get_db),
    user: UserContext = Depends(get_user_context)
):
    return unwrap(await task_service.unskip_task(db, user, {"id": task_id}))


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    db: AsyncSession = Depends(get_db),
    user: UserContext = Depends(get_user_context)
):
    return unwrap(await task_service.delete_task(db, user, {"id": task_id}))

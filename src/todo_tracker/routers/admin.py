from __future__ import annotations

from typing import List

from fastapi import APIRouter, Depends

from ..access import Caller
from ..auth import get_current_caller
from ..schemas import TodoDetail, TodoStatsOut
from ..service import TodoService
from .todos import get_service, unwrap

router = APIRouter(
    prefix="/api/admin/todos",
    tags=["admin"],
)

_ADMIN_RESPONSES = {
    401: {"description": "Not authenticated"},
    403: {"description": "Not authorized"},
}


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoDetail],
    response_model_exclude_none=True,
    summary="List all todos (Admin)",
    description="Get the todos of every user. Requires the ADMIN role.",
    responses={200: {"description": "List of all todos"}, **_ADMIN_RESPONSES},
)
def list_all_todos(
    caller: Caller = Depends(get_current_caller),
    service: TodoService = Depends(get_service),
) -> List[TodoDetail]:
    return [TodoDetail.from_entity(t) for t in unwrap(service.admin_list(caller))]


# PUBLIC_INTERFACE
@router.get(
    "/stats",
    response_model=TodoStatsOut,
    summary="Get todo statistics (Admin)",
    description="Counts of all todos by status, priority and owner. Requires the ADMIN role.",
    responses={200: {"description": "Statistics retrieved"}, **_ADMIN_RESPONSES},
)
def todo_stats(
    caller: Caller = Depends(get_current_caller),
    service: TodoService = Depends(get_service),
) -> TodoStatsOut:
    stats = unwrap(service.admin_stats(caller))
    return TodoStatsOut(
        total_todos=stats.total,
        completed_todos=stats.completed,
        pending_todos=stats.pending,
        by_priority={p.value: n for p, n in stats.by_priority.items()},
        by_user=stats.by_owner,
        overdue_todos=stats.overdue,
    )

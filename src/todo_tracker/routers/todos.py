from __future__ import annotations

from typing import List, Optional, TypeVar

from fastapi import APIRouter, Depends, HTTPException, Query, Request, Response, status

from ..access import Caller
from ..auth import get_current_caller
from ..models import Priority
from ..query import DEFAULT_SORT_ORDER, SortSpec, TodoFilter
from ..schemas import TodoDetail, TodoIn, TodoSummary
from ..service import Outcome, Result, TodoService

T = TypeVar("T")

router = APIRouter(
    prefix="/api/todos",
    tags=["todos"],
)

_NOT_FOUND_RESPONSES = {
    401: {"description": "Not authenticated"},
    404: {"description": "Todo not found"},
}


# PUBLIC_INTERFACE
def get_service(request: Request) -> TodoService:
    """
    Dependency returning the TodoService owned by the running application.
    """
    return request.app.state.service


def unwrap(result: Result[T]) -> T:
    """
    Map a service outcome onto HTTP: NOT_FOUND -> 404, FORBIDDEN -> 403.
    """
    if result.outcome is Outcome.NOT_FOUND:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Todo not found")
    if result.outcome is Outcome.FORBIDDEN:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Not authorized")
    return result.value  # type: ignore[return-value]


# PUBLIC_INTERFACE
@router.get(
    "",
    response_model=List[TodoSummary],
    response_model_exclude_none=True,
    summary="List Todos",
    description=(
        "List the authenticated user's todos.\n\n"
        "Query parameters:\n"
        "- completed: filter by completion status\n"
        "- priority: HIGH, MEDIUM or LOW\n"
        "- dueBefore / dueAfter: yyyy-MM-ddTHH:mm:ss; malformed values are ignored\n"
        "- search: case-insensitive text in title or description\n"
        "- sort: title, priority, dueDate or createdAt (default)\n"
        "- order: asc or desc (default)\n\n"
        "Items use the summary projection (no description)."
    ),
    responses={200: {"description": "List of todos"}, 401: {"description": "Not authenticated"}},
)
def list_todos(
    completed: Optional[bool] = Query(None, description="Filter by completion status"),
    priority: Optional[Priority] = Query(None, description="Filter by priority"),
    due_before: Optional[str] = Query(None, alias="dueBefore", description="Only todos due before this date"),
    due_after: Optional[str] = Query(None, alias="dueAfter", description="Only todos due after this date"),
    search: Optional[str] = Query(None, description="Search in title and description"),
    sort: str = Query("createdAt", description="Sort field (title, priority, dueDate, createdAt)"),
    order: str = Query(DEFAULT_SORT_ORDER, description="Sort order (asc, desc)"),
    caller: Caller = Depends(get_current_caller),
    service: TodoService = Depends(get_service),
) -> List[TodoSummary]:
    todo_filter = TodoFilter.from_params(
        completed=completed,
        priority=priority,
        due_before=due_before,
        due_after=due_after,
        search=search,
    )
    items = unwrap(service.list(caller, todo_filter, SortSpec(field=sort, order=order)))
    return [TodoSummary.from_entity(t) for t in items]


# PUBLIC_INTERFACE
@router.post(
    "",
    response_model=TodoDetail,
    response_model_exclude_none=True,
    status_code=status.HTTP_201_CREATED,
    summary="Create Todo",
    description="Create a new Todo item owned by the authenticated user.",
    responses={
        201: {"description": "Todo created, Location header points at it"},
        401: {"description": "Not authenticated"},
        422: {"description": "Validation error"},
    },
)
def create_todo(
    payload: TodoIn,
    request: Request,
    response: Response,
    caller: Caller = Depends(get_current_caller),
    service: TodoService = Depends(get_service),
) -> TodoDetail:
    created = unwrap(service.create(caller, payload))
    response.headers["Location"] = str(request.url_for("get_todo", todo_id=created["id"]))
    return TodoDetail.from_entity(created)


# PUBLIC_INTERFACE
@router.get(
    "/{todo_id}",
    response_model=TodoDetail,
    response_model_exclude_none=True,
    summary="Get Todo",
    description="Get detailed information about a single Todo item.",
    responses={200: {"description": "Todo found"}, **_NOT_FOUND_RESPONSES},
)
def get_todo(
    todo_id: int,
    caller: Caller = Depends(get_current_caller),
    service: TodoService = Depends(get_service),
) -> TodoDetail:
    return TodoDetail.from_entity(unwrap(service.get(caller, todo_id)))


# PUBLIC_INTERFACE
@router.put(
    "/{todo_id}",
    response_model=TodoDetail,
    response_model_exclude_none=True,
    summary="Replace Todo",
    description=(
        "Replace an existing Todo item. Omitted fields fall back to their defaults; "
        "id, owner and creation time are kept."
    ),
    responses={200: {"description": "Todo updated"}, 422: {"description": "Validation error"}, **_NOT_FOUND_RESPONSES},
)
def put_todo(
    todo_id: int,
    payload: TodoIn,
    caller: Caller = Depends(get_current_caller),
    service: TodoService = Depends(get_service),
) -> TodoDetail:
    return TodoDetail.from_entity(unwrap(service.update(caller, todo_id, payload)))


# PUBLIC_INTERFACE
@router.delete(
    "/{todo_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete Todo",
    description="Delete a Todo item by ID.",
    responses={204: {"description": "Todo deleted"}, **_NOT_FOUND_RESPONSES},
)
def delete_todo(
    todo_id: int,
    caller: Caller = Depends(get_current_caller),
    service: TodoService = Depends(get_service),
) -> None:
    unwrap(service.delete(caller, todo_id))
    return None


# PUBLIC_INTERFACE
@router.patch(
    "/{todo_id}/complete",
    response_model=TodoDetail,
    response_model_exclude_none=True,
    summary="Toggle Todo completion",
    description="Flip the completion status of a Todo item.",
    responses={200: {"description": "Todo completion toggled"}, **_NOT_FOUND_RESPONSES},
)
def toggle_complete(
    todo_id: int,
    caller: Caller = Depends(get_current_caller),
    service: TodoService = Depends(get_service),
) -> TodoDetail:
    return TodoDetail.from_entity(unwrap(service.toggle_complete(caller, todo_id)))

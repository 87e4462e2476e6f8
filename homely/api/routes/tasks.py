"""Task template endpoints.

All endpoints are scoped to households the authenticated user belongs to.

Endpoints:
- GET /api/tasks - Paginated task list with filters
- GET /api/tasks/active - Active tasks of a household
- GET /api/tasks/recurring - Tasks with an interval
- GET /api/tasks/one-time - Tasks without an interval
- GET /api/tasks/count - Number of active tasks
- GET /api/tasks/{task_id} - One task
- POST /api/tasks - Create a task and its event series
- PUT /api/tasks/{task_id} - Update a task
- DELETE /api/tasks/{task_id} - Soft delete a task
- POST /api/tasks/{task_id}/regenerate-events - Rebuild future events
- GET /api/tasks/{task_id}/future-events/count - Pending events due from today
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from homely.api.dependencies import get_current_user_id, get_household_service, get_task_service
from homely.api.schemas.common import CountResponse
from homely.api.schemas.task import (
    RegenerateEventsResponse,
    TaskCreate,
    TaskListResponse,
    TaskResponse,
    TaskUpdate,
)
from homely.services.household_service import HouseholdService
from homely.services.task_service import MAX_PAGE_SIZE, TaskService

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


async def _get_accessible_task(
    task_id: UUID, user_id: UUID, tasks: TaskService, households: HouseholdService
) -> TaskResponse:
    task = await tasks.get_task(task_id)
    await households.ensure_member(task.household_id, user_id)
    return task


@router.get("", response_model=TaskListResponse)
async def list_tasks(
    household_id: UUID = Query(..., description="Household to list tasks for"),
    active_only: bool = Query(True),
    category_id: int | None = Query(None),
    recurring_only: bool = Query(False),
    one_time_only: bool = Query(False),
    page: int = Query(1, description="1-based page number"),
    limit: int = Query(20, description=f"Page size, 1 to {MAX_PAGE_SIZE}"),
    user_id: UUID = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
    households: HouseholdService = Depends(get_household_service),
) -> TaskListResponse:
    """List tasks of a household.

    Raises:
        ValidationError: 400 if recurring_only and one_time_only are both set,
            or page/limit are out of range
    """
    await households.ensure_member(household_id, user_id)
    return await service.list_tasks(
        household_id,
        active_only=active_only,
        category_id=category_id,
        recurring_only=recurring_only,
        one_time_only=one_time_only,
        page=page,
        limit=limit,
    )


@router.get("/active", response_model=list[TaskResponse])
async def list_active_tasks(
    household_id: UUID = Query(...),
    user_id: UUID = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
    households: HouseholdService = Depends(get_household_service),
) -> list[TaskResponse]:
    await households.ensure_member(household_id, user_id)
    return await service.get_active_tasks(household_id)


@router.get("/recurring", response_model=list[TaskResponse])
async def list_recurring_tasks(
    household_id: UUID = Query(...),
    user_id: UUID = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
    households: HouseholdService = Depends(get_household_service),
) -> list[TaskResponse]:
    await households.ensure_member(household_id, user_id)
    return await service.get_recurring_tasks(household_id)


@router.get("/one-time", response_model=list[TaskResponse])
async def list_one_time_tasks(
    household_id: UUID = Query(...),
    user_id: UUID = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
    households: HouseholdService = Depends(get_household_service),
) -> list[TaskResponse]:
    await households.ensure_member(household_id, user_id)
    return await service.get_one_time_tasks(household_id)


@router.get("/count", response_model=CountResponse)
async def count_active_tasks(
    household_id: UUID = Query(...),
    user_id: UUID = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
    households: HouseholdService = Depends(get_household_service),
) -> CountResponse:
    await households.ensure_member(household_id, user_id)
    return CountResponse(count=await service.count_active_tasks(household_id))


@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(
    task_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
    households: HouseholdService = Depends(get_household_service),
) -> TaskResponse:
    return await _get_accessible_task(task_id, user_id, service, households)


@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(
    request: TaskCreate,
    user_id: UUID = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
    households: HouseholdService = Depends(get_household_service),
) -> TaskResponse:
    """Create a task; recurring tasks get their event series generated.

    Raises:
        PlanLimitExceededError: 400 if the household is at its task limit
    """
    await households.ensure_member(request.household_id, user_id)
    return await service.create_task(request, created_by=user_id)


@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: UUID,
    request: TaskUpdate,
    user_id: UUID = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
    households: HouseholdService = Depends(get_household_service),
) -> TaskResponse:
    await _get_accessible_task(task_id, user_id, service, households)
    return await service.update_task(task_id, request)


@router.delete("/{task_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_task(
    task_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
    households: HouseholdService = Depends(get_household_service),
) -> None:
    await _get_accessible_task(task_id, user_id, service, households)
    await service.delete_task(task_id)


@router.post("/{task_id}/regenerate-events", response_model=RegenerateEventsResponse)
async def regenerate_events(
    task_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
    households: HouseholdService = Depends(get_household_service),
) -> RegenerateEventsResponse:
    await _get_accessible_task(task_id, user_id, service, households)
    created = await service.regenerate_events(task_id)
    return RegenerateEventsResponse(task_id=task_id, events_created=created)


@router.get("/{task_id}/future-events/count", response_model=CountResponse)
async def count_future_events(
    task_id: UUID,
    user_id: UUID = Depends(get_current_user_id),
    service: TaskService = Depends(get_task_service),
    households: HouseholdService = Depends(get_household_service),
) -> CountResponse:
    await _get_accessible_task(task_id, user_id, service, households)
    return CountResponse(count=await service.count_future_events(task_id))

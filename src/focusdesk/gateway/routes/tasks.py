"""任务路由

GET    /api/tasks: 列表（搜索 + 排序）与汇总计数
GET    /api/tasks/stats: 汇总计数
POST   /api/tasks: 创建任务
GET    /api/tasks/{task_id}: 任务详情
PATCH  /api/tasks/{task_id}: 编辑任务
DELETE /api/tasks/{task_id}: 删除任务
POST   /api/tasks/{task_id}/advance: 状态推进
"""

from fastapi import APIRouter, Depends, Query
from focusdesk.core.exceptions import TaskNotFoundError, TaskValidationError
from focusdesk.core.models import (
    SortField,
    SortOrder,
    Task,
    TaskDraft,
    TaskPatch,
    TaskStats,
)
from pydantic import BaseModel
from starlette.responses import JSONResponse

from ..deps import get_workspace
from ..services.workspace import Workspace

router = APIRouter()


class TaskResponse(BaseModel):
    """任务详情"""

    task_id: str
    owner_id: str
    title: str
    description: str
    status: str
    priority: str
    due_date: str | None
    due_label: str | None
    created_at: str
    updated_at: str


class TaskListResponse(BaseModel):
    """任务列表响应"""

    tasks: list[TaskResponse]
    stats: TaskStats


class DeleteResponse(BaseModel):
    """删除成功响应"""

    task_id: str
    deleted: bool


def _to_response(task: Task) -> TaskResponse:
    return TaskResponse(
        task_id=task.task_id,
        owner_id=task.owner_id,
        title=task.title,
        description=task.description,
        status=task.status.value,
        priority=task.priority.value,
        due_date=task.due_date.isoformat() if task.due_date else None,
        # 展示用日期，如 "Jan 10, 2025"
        due_label=task.due_date.strftime("%b %d, %Y") if task.due_date else None,
        created_at=task.created_at.isoformat(),
        updated_at=task.updated_at.isoformat(),
    )


def _not_found(error: TaskNotFoundError) -> JSONResponse:
    return JSONResponse(
        status_code=404,
        content={
            "error": {
                "code": "TASK_NOT_FOUND",
                "message": error.message,
            }
        },
    )


def _invalid(error: TaskValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=422,
        content={
            "error": {
                "code": "TASK_INVALID",
                "message": error.message,
            }
        },
    )


@router.get("/api/tasks", response_model=TaskListResponse)
async def list_tasks(
    q: str = Query(default="", description="标题/描述搜索"),
    sort: SortField = Query(default=SortField.PRIORITY, description="排序字段"),
    order: SortOrder = Query(default=SortOrder.DESC, description="排序方向"),
    workspace: Workspace = Depends(get_workspace),
):
    """查询任务列表：先筛选后排序，附带全量汇总计数"""
    tasks = workspace.tasks.query(q, sort, order)
    return TaskListResponse(
        tasks=[_to_response(t) for t in tasks],
        stats=workspace.tasks.stats(),
    )


@router.get("/api/tasks/stats", response_model=TaskStats)
async def task_stats(workspace: Workspace = Depends(get_workspace)):
    """按状态汇总计数"""
    return workspace.tasks.stats()


@router.post("/api/tasks", status_code=201, response_model=TaskResponse)
async def create_task(
    body: TaskDraft,
    workspace: Workspace = Depends(get_workspace),
):
    """创建任务

    - 201: 创建成功
    - 422: 标题为空
    """
    try:
        task = await workspace.tasks.create_task(body)
    except TaskValidationError as e:
        return _invalid(e)
    return _to_response(task)


@router.get("/api/tasks/{task_id}", response_model=TaskResponse)
async def get_task(task_id: str, workspace: Workspace = Depends(get_workspace)):
    """任务详情"""
    try:
        task = workspace.tasks.get_task(task_id)
    except TaskNotFoundError as e:
        return _not_found(e)
    return _to_response(task)


@router.patch("/api/tasks/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: str,
    body: TaskPatch,
    workspace: Workspace = Depends(get_workspace),
):
    """编辑任务（仅合并请求体中出现的字段）"""
    try:
        task = await workspace.tasks.update_task(task_id, body)
    except TaskNotFoundError as e:
        return _not_found(e)
    except TaskValidationError as e:
        return _invalid(e)
    return _to_response(task)


@router.delete("/api/tasks/{task_id}", response_model=DeleteResponse)
async def delete_task(task_id: str, workspace: Workspace = Depends(get_workspace)):
    """删除任务；不存在返回 404"""
    try:
        task = await workspace.tasks.delete_task(task_id)
    except TaskNotFoundError as e:
        return _not_found(e)
    return DeleteResponse(task_id=task.task_id, deleted=True)


@router.post("/api/tasks/{task_id}/advance", response_model=TaskResponse)
async def advance_task(task_id: str, workspace: Workspace = Depends(get_workspace)):
    """状态推进 pending -> ongoing -> completed -> pending"""
    try:
        task = await workspace.tasks.advance_status(task_id)
    except TaskNotFoundError as e:
        return _not_found(e)
    return _to_response(task)

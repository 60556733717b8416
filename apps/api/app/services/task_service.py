"""Task service - matter-scoped work items."""

from datetime import datetime, timezone
from uuid import UUID

from sqlalchemy.orm import Session

from app.core.errors import NotFound
from app.core.matter_access import check_matter_access
from app.db.enums import NotificationTrigger, TaskStatus
from app.db.models import Matter, Task, User
from app.schemas.task import TaskCreate, TaskUpdate
from app.services import user_service


def list_tasks_for_matter(db: Session, matter_id: UUID) -> list[Task]:
    return (
        db.query(Task)
        .filter(Task.matter_id == matter_id)
        .order_by(Task.due_date.is_(None), Task.due_date, Task.created_at)
        .all()
    )


def get_task(db: Session, task_id: UUID) -> Task | None:
    return db.get(Task, task_id)


def get_visible_task(db: Session, user: User, task_id: UUID) -> Task:
    """Task whose matter the user can see, else NotFound."""
    task = get_task(db, task_id)
    if not task:
        raise NotFound("Task not found")
    check_matter_access(db.get(Matter, task.matter_id), user)
    return task


def _notify_completed(db: Session, task: Task) -> None:
    from app.services import notification_service

    matter = db.get(Matter, task.matter_id)
    recipient = db.get(User, matter.client_user_id) if matter else None
    if recipient:
        notification_service.notify(
            db,
            NotificationTrigger.TASK_COMPLETED,
            recipient=recipient,
            matter=matter,
            extra={"task_title": task.title},
        )


def create_task(db: Session, user: User, data: TaskCreate) -> Task:
    """Create a task on a matter the caller can see."""
    check_matter_access(db.get(Matter, data.matter_id), user)
    if data.assigned_to_user_id:
        user_service.require_assignee(db, data.assigned_to_user_id, "assignedToUserId")

    task = Task(
        matter_id=data.matter_id,
        title=data.title,
        status=data.status.value,
        due_date=data.due_date,
        category=data.category,
        pillar=data.pillar.value if data.pillar else None,
        assigned_to_user_id=data.assigned_to_user_id,
        completed_at=datetime.now(timezone.utc) if data.status == TaskStatus.COMPLETE else None,
    )
    db.add(task)
    db.commit()
    db.refresh(task)

    if task.status == TaskStatus.COMPLETE.value:
        _notify_completed(db, task)
    return task


def update_task(db: Session, task: Task, data: TaskUpdate) -> Task:
    """
    Update task fields.

    Uses exclude_unset=True so only explicitly provided fields are updated.
    Moving into COMPLETE stamps completed_at; moving out clears it.
    """
    update_data = data.model_dump(exclude_unset=True)
    if update_data.get("assigned_to_user_id"):
        user_service.require_assignee(db, update_data["assigned_to_user_id"], "assignedToUserId")
    was_complete = task.status == TaskStatus.COMPLETE.value

    # Fields that can be cleared (set to None)
    clearable_fields = {"due_date", "category", "pillar", "assigned_to_user_id"}

    for field, value in update_data.items():
        if value is None and field not in clearable_fields:
            continue
        if field in ("status", "pillar") and value is not None:
            value = value.value
        setattr(task, field, value)

    is_complete = task.status == TaskStatus.COMPLETE.value
    if is_complete and not was_complete:
        task.completed_at = datetime.now(timezone.utc)
    elif was_complete and not is_complete:
        task.completed_at = None

    db.commit()
    db.refresh(task)

    if is_complete and not was_complete:
        _notify_completed(db, task)
    return task

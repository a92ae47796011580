"""Task store: in-memory collections mirrored to key-value storage.

The store owns three collections (tasks, partners, task lists). Every mutation
applies a pure transform, replaces the in-memory collection, notifies
subscribers, then awaits a full-collection overwrite of the matching storage
key. Unknown ids are never errors: the operation is a no-op and nothing is
written.
"""

import asyncio
import logging
import uuid
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from questlog.core.config import Settings, settings
from questlog.core.errors import ErrorCategory, InvitationError, StorageError
from questlog.core.logging import log_with_context, span
from questlog.core.storage import KeyValueStorage
from questlog.domain.create_models import PartnerInvite, TaskCreate, TaskListCreate
from questlog.domain.partner import Partner, PartnerStatus, status_vocabulary
from questlog.domain.task import SubTask, Task
from questlog.domain.task_list import TaskList
from questlog.domain.update_models import SubTaskUpdate, TaskListUpdate, TaskUpdate
from questlog.models.service_models import StoreSnapshot


logger = logging.getLogger(__name__)

_TASKS = TypeAdapter(list[Task])
_PARTNERS = TypeAdapter(list[Partner])
_TASK_LISTS = TypeAdapter(list[TaskList])

# Keys a create payload may not smuggle onto the new record
_RESERVED_KEYS = frozenset({"id", "created_at", "updated_at", "createdAt", "updatedAt"})

Listener = Callable[[StoreSnapshot], None]
R = TypeVar("R", Task, Partner, TaskList)


def _new_id() -> str:
    return uuid.uuid4().hex


def _now() -> datetime:
    return datetime.now(UTC)


def _replace_record(records: Iterable[R], record: R) -> tuple[R, ...]:
    return tuple(record if existing.id == record.id else existing for existing in records)


def _without_record(records: Iterable[R], record_id: str) -> tuple[R, ...]:
    return tuple(existing for existing in records if existing.id != record_id)


def _find(records: Iterable[R], record_id: str) -> R | None:
    return next((record for record in records if record.id == record_id), None)


def _log_not_found(operation: str, **context: object) -> None:
    log_with_context(
        logger,
        "debug",
        f"{operation} ignored unknown reference",
        category=ErrorCategory.REFERENCE_NOT_FOUND.value,
        **context,
    )


class TaskStore:
    """Canonical task, partner and task-list collections for one application run.

    Construct once at startup (see questlog.main), await load(), then pass the
    instance to every consumer. Collections are exposed as tuples of frozen
    records; change them only through the store's operations.

    Example:
        >>> store = TaskStore(InMemoryStorage())
        >>> await store.load()
        >>> task = await store.create_task(TaskCreate(title="Buy groceries"))
        >>> await store.update_task(task.id, TaskUpdate(completed=True))
    """

    def __init__(self, storage: KeyValueStorage, app_settings: Settings | None = None) -> None:
        """Initialize an empty store backed by storage."""
        active = app_settings or settings
        self._storage = storage
        self._tasks_key = active.tasks_storage_key
        self._partners_key = active.partners_storage_key
        self._task_lists_key = active.task_lists_storage_key
        self._current_user_id = active.current_user_id
        self._statuses = status_vocabulary(active.skin)

        self._tasks: tuple[Task, ...] = ()
        self._partners: tuple[Partner, ...] = ()
        self._task_lists: tuple[TaskList, ...] = ()
        self._loading = True
        self._listeners: list[Listener] = []

    # ---- state ----

    @property
    def tasks(self) -> tuple[Task, ...]:
        """Current task collection."""
        return self._tasks

    @property
    def partners(self) -> tuple[Partner, ...]:
        """Current partner collection."""
        return self._partners

    @property
    def task_lists(self) -> tuple[TaskList, ...]:
        """Current task-list collection."""
        return self._task_lists

    @property
    def loading(self) -> bool:
        """True until the initial load has completed."""
        return self._loading

    def snapshot(self) -> StoreSnapshot:
        """Return the current state as one immutable value."""
        return StoreSnapshot(
            tasks=self._tasks,
            partners=self._partners,
            task_lists=self._task_lists,
            loading=self._loading,
        )

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener with a snapshot after every in-memory change.

        Returns:
            A callable that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        if not self._listeners:
            return
        current = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(current)
            except Exception:
                logger.exception("Store listener failed")

    def get_task(self, task_id: str) -> Task | None:
        """Return the task with the given id, or None."""
        return _find(self._tasks, task_id)

    def get_partner(self, partner_id: str) -> Partner | None:
        """Return the partner with the given id, or None."""
        return _find(self._partners, partner_id)

    def get_task_list(self, list_id: str) -> TaskList | None:
        """Return the task list with the given id, or None."""
        return _find(self._task_lists, list_id)

    # ---- load / save ----

    async def load(self) -> None:
        """Load all three collections from storage.

        Each key is read independently. A missing key yields an empty
        collection; a read or parse failure is logged and also yields an
        empty collection. Never raises.
        """
        with span("task_store.load"):
            try:
                tasks, partners, task_lists = await asyncio.gather(
                    self._read_collection(self._tasks_key, _TASKS),
                    self._read_collection(self._partners_key, _PARTNERS),
                    self._read_collection(self._task_lists_key, _TASK_LISTS),
                )
                self._tasks = tuple(tasks)
                self._partners = tuple(partners)
                self._task_lists = tuple(task_lists)
            finally:
                self._loading = False

            logger.info(
                "Task store loaded",
                extra={
                    "tasks": len(self._tasks),
                    "partners": len(self._partners),
                    "task_lists": len(self._task_lists),
                },
            )
            self._notify()

    async def _read_collection(self, key: str, adapter: TypeAdapter[list[Any]]) -> list[Any]:
        try:
            raw = await self._storage.get(key)
        except StorageError as e:
            logger.warning(
                "Failed to read collection, starting empty",
                extra={"storage_key": key, "category": ErrorCategory.STORAGE_READ.value, "error": str(e)},
            )
            return []
        except Exception:
            logger.exception(
                "Unexpected storage failure, starting empty",
                extra={"storage_key": key, "category": ErrorCategory.STORAGE_READ.value},
            )
            return []

        if raw is None:
            return []

        try:
            return adapter.validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "Failed to parse collection, starting empty",
                extra={
                    "storage_key": key,
                    "category": ErrorCategory.STORAGE_READ.value,
                    "error_count": e.error_count(),
                },
            )
            return []

    async def save(
        self,
        *,
        tasks: Iterable[Task] | None = None,
        partners: Iterable[Partner] | None = None,
        task_lists: Iterable[TaskList] | None = None,
    ) -> None:
        """Overwrite the storage key of every collection passed.

        Collections left as None are not touched. Writes run concurrently;
        a failed write is logged and does not affect the others.
        """
        writes: list[tuple[str, TypeAdapter[list[Any]], list[BaseModel]]] = []
        if tasks is not None:
            writes.append((self._tasks_key, _TASKS, list(tasks)))
        if partners is not None:
            writes.append((self._partners_key, _PARTNERS, list(partners)))
        if task_lists is not None:
            writes.append((self._task_lists_key, _TASK_LISTS, list(task_lists)))

        if not writes:
            return

        results = await asyncio.gather(
            *(
                self._storage.set(key, adapter.dump_json(items, by_alias=True).decode())
                for key, adapter, items in writes
            ),
            return_exceptions=True,
        )

        for (key, _, _), result in zip(writes, results, strict=True):
            if isinstance(result, BaseException):
                logger.error(
                    "Failed to persist collection",
                    extra={"storage_key": key, "category": ErrorCategory.STORAGE_WRITE.value, "error": str(result)},
                )

    async def close(self) -> None:
        """Release the storage backend."""
        await self._storage.close()

    async def _commit_tasks(self, tasks: tuple[Task, ...]) -> None:
        self._tasks = tasks
        self._notify()
        await self.save(tasks=tasks)

    async def _commit_partners(self, partners: tuple[Partner, ...]) -> None:
        self._partners = partners
        self._notify()
        await self.save(partners=partners)

    async def _commit_task_lists(self, task_lists: tuple[TaskList, ...]) -> None:
        self._task_lists = task_lists
        self._notify()
        await self.save(task_lists=task_lists)

    # ---- tasks ----

    def _build_task(self, data: TaskCreate, *, assigned_to: str | None = None) -> Task:
        now = _now()
        fields = {
            name: getattr(data, name) for name in TaskCreate.model_fields if name not in ("sub_tasks", "created_by")
        }
        if assigned_to is not None:
            fields["assigned_to"] = assigned_to
        extras = {key: value for key, value in data.extra_fields().items() if key not in _RESERVED_KEYS}

        sub_tasks = [
            SubTask(
                id=_new_id(),
                title=item.title,
                completed=item.completed,
                xp_reward=item.xp_reward,
                created_at=now,
                updated_at=now,
            )
            for item in data.sub_tasks
        ]

        return Task(
            **extras,
            **fields,
            id=_new_id(),
            created_by=data.created_by or self._current_user_id,
            sub_tasks=sub_tasks,
            created_at=now,
            updated_at=now,
        )

    async def create_task(self, data: TaskCreate) -> Task:
        """Create a task, append it to the collection and persist.

        Args:
            data: Validated create payload

        Returns:
            The created task
        """
        with span("task_store.create_task"):
            task = self._build_task(data)
            await self._commit_tasks((*self._tasks, task))
            logger.info("Created task", extra={"task_id": task.id, "title": task.title})
            return task

    async def update_task(self, task_id: str, update: TaskUpdate) -> Task | None:
        """Shallow-merge the fields set on update into the task.

        Returns:
            The updated task, or None if task_id is unknown (nothing written)
        """
        with span("task_store.update_task"):
            current = self.get_task(task_id)
            if current is None:
                _log_not_found("update_task", task_id=task_id)
                return None

            updated = current.model_copy(update={**update.changes(), "updated_at": _now()})
            await self._commit_tasks(_replace_record(self._tasks, updated))
            logger.info("Updated task", extra={"task_id": task_id, "fields": sorted(update.model_fields_set)})
            return updated

    async def toggle_task(self, task_id: str) -> Task | None:
        """Flip the completed flag of a task."""
        current = self.get_task(task_id)
        if current is None:
            _log_not_found("toggle_task", task_id=task_id)
            return None
        return await self.update_task(task_id, TaskUpdate(completed=not current.completed))

    async def delete_task(self, task_id: str) -> bool:
        """Remove a task.

        Returns:
            True if a task was removed, False if task_id is unknown
        """
        with span("task_store.delete_task"):
            if self.get_task(task_id) is None:
                _log_not_found("delete_task", task_id=task_id)
                return False

            await self._commit_tasks(_without_record(self._tasks, task_id))
            logger.info("Deleted task", extra={"task_id": task_id})
            return True

    # ---- sub-tasks ----

    async def add_sub_task(self, task_id: str, title: str) -> SubTask | None:
        """Append a new, incomplete sub-item to a task.

        Returns:
            The created sub-item, or None if task_id is unknown
        """
        with span("task_store.add_sub_task"):
            task = self.get_task(task_id)
            if task is None:
                _log_not_found("add_sub_task", task_id=task_id)
                return None

            now = _now()
            sub_task = SubTask(id=_new_id(), title=title, completed=False, created_at=now, updated_at=now)
            updated = task.model_copy(update={"sub_tasks": [*task.sub_tasks, sub_task], "updated_at": now})
            await self._commit_tasks(_replace_record(self._tasks, updated))
            logger.info("Added sub-task", extra={"task_id": task_id, "sub_task_id": sub_task.id})
            return sub_task

    async def update_sub_task(self, task_id: str, sub_task_id: str, update: SubTaskUpdate) -> SubTask | None:
        """Merge update into a sub-item and refresh both timestamps.

        Returns:
            The updated sub-item, or None if either id is unknown
        """
        with span("task_store.update_sub_task"):
            task = self.get_task(task_id)
            sub_task = task.find_sub_task(sub_task_id) if task else None
            if task is None or sub_task is None:
                _log_not_found("update_sub_task", task_id=task_id, sub_task_id=sub_task_id)
                return None

            now = _now()
            updated_sub = sub_task.model_copy(update={**update.changes(), "updated_at": now})
            updated = task.model_copy(
                update={
                    "sub_tasks": [updated_sub if sub.id == sub_task_id else sub for sub in task.sub_tasks],
                    "updated_at": now,
                }
            )
            await self._commit_tasks(_replace_record(self._tasks, updated))
            logger.info("Updated sub-task", extra={"task_id": task_id, "sub_task_id": sub_task_id})
            return updated_sub

    async def toggle_sub_task(self, task_id: str, sub_task_id: str) -> SubTask | None:
        """Flip the completed flag of a sub-item."""
        task = self.get_task(task_id)
        sub_task = task.find_sub_task(sub_task_id) if task else None
        if sub_task is None:
            _log_not_found("toggle_sub_task", task_id=task_id, sub_task_id=sub_task_id)
            return None
        return await self.update_sub_task(task_id, sub_task_id, SubTaskUpdate(completed=not sub_task.completed))

    async def delete_sub_task(self, task_id: str, sub_task_id: str) -> bool:
        """Remove a sub-item from its task.

        Returns:
            True if removed, False if either id is unknown
        """
        with span("task_store.delete_sub_task"):
            task = self.get_task(task_id)
            if task is None or task.find_sub_task(sub_task_id) is None:
                _log_not_found("delete_sub_task", task_id=task_id, sub_task_id=sub_task_id)
                return False

            updated = task.model_copy(
                update={
                    "sub_tasks": [sub for sub in task.sub_tasks if sub.id != sub_task_id],
                    "updated_at": _now(),
                }
            )
            await self._commit_tasks(_replace_record(self._tasks, updated))
            logger.info("Deleted sub-task", extra={"task_id": task_id, "sub_task_id": sub_task_id})
            return True

    # ---- sharing ----

    async def share_task_with_partner(self, task_id: str, partner_id: str, *, dedupe: bool = False) -> Task | None:
        """Append partner_id to the task's sharedWith list.

        Repeated calls append repeatedly unless dedupe is set, in which case
        an already-present id leaves the task untouched.

        Returns:
            The resulting task, or None if the partner or task is unknown
        """
        with span("task_store.share_task_with_partner"):
            if self.get_partner(partner_id) is None:
                _log_not_found("share_task_with_partner", task_id=task_id, partner_id=partner_id)
                return None

            task = self.get_task(task_id)
            if task is None:
                _log_not_found("share_task_with_partner", task_id=task_id, partner_id=partner_id)
                return None

            if dedupe and partner_id in task.shared_with:
                return task

            updated = task.model_copy(update={"shared_with": [*task.shared_with, partner_id], "updated_at": _now()})
            await self._commit_tasks(_replace_record(self._tasks, updated))
            logger.info("Shared task", extra={"task_id": task_id, "partner_id": partner_id})
            return updated

    async def create_task_for_partner(self, partner_id: str, data: TaskCreate) -> Task | None:
        """Create a task assigned to an existing partner.

        Returns:
            The created task, or None if partner_id is unknown
        """
        with span("task_store.create_task_for_partner"):
            if self.get_partner(partner_id) is None:
                _log_not_found("create_task_for_partner", partner_id=partner_id)
                return None

            task = self._build_task(data, assigned_to=partner_id)
            await self._commit_tasks((*self._tasks, task))
            logger.info("Created task for partner", extra={"task_id": task.id, "partner_id": partner_id})
            return task

    # ---- partners ----

    async def invite_partner(self, email: str, name: str) -> Partner:
        """Create a partner with the skin's initial status.

        Raises:
            InvitationError: If name or email is blank or email is malformed
        """
        with span("task_store.invite_partner"):
            try:
                invite = PartnerInvite(email=email, name=name)
            except ValidationError as e:
                logger.warning(
                    "Rejected partner invitation",
                    extra={"category": ErrorCategory.INVALID_INVITATION.value, "error_count": e.error_count()},
                )
                raise InvitationError(e.errors()[0]["msg"]) from e

            partner = Partner(
                id=_new_id(),
                name=invite.name,
                email=invite.email,
                status=self._statuses.initial,
                invited_at=_now(),
            )
            await self._commit_partners((*self._partners, partner))
            logger.info("Invited partner", extra={"partner_id": partner.id})
            return partner

    async def update_partner_status(self, partner_id: str, status: PartnerStatus | str) -> Partner | None:
        """Set a partner's status. Any status may follow any other.

        Returns:
            The updated partner, or None if partner_id or status is unknown
        """
        with span("task_store.update_partner_status"):
            partner = self.get_partner(partner_id)
            if partner is None:
                _log_not_found("update_partner_status", partner_id=partner_id)
                return None

            try:
                new_status = PartnerStatus(status)
            except ValueError:
                logger.warning("Ignored unknown partner status", extra={"partner_id": partner_id, "status": status})
                return None

            updated = partner.model_copy(update={"status": new_status})
            await self._commit_partners(_replace_record(self._partners, updated))
            logger.info("Updated partner status", extra={"partner_id": partner_id, "status": str(updated.status)})
            return updated

    async def accept_partner(self, partner_id: str) -> Partner | None:
        """Mark a partner as accepted (allied in the quest skin)."""
        return await self.update_partner_status(partner_id, self._statuses.accepted)

    async def decline_partner(self, partner_id: str) -> Partner | None:
        """Mark a partner as declined."""
        return await self.update_partner_status(partner_id, self._statuses.declined)

    async def remove_partner(self, partner_id: str) -> bool:
        """Remove a partner. Task references to it are left in place.

        Returns:
            True if removed, False if partner_id is unknown
        """
        with span("task_store.remove_partner"):
            if self.get_partner(partner_id) is None:
                _log_not_found("remove_partner", partner_id=partner_id)
                return False

            await self._commit_partners(_without_record(self._partners, partner_id))
            logger.info("Removed partner", extra={"partner_id": partner_id})
            return True

    # ---- task lists ----

    async def create_task_list(self, data: TaskListCreate) -> TaskList:
        """Create an empty task list and persist the task-list collection."""
        with span("task_store.create_task_list"):
            now = _now()
            extras = {key: value for key, value in data.extra_fields().items() if key not in _RESERVED_KEYS}
            task_list = TaskList(
                **extras,
                id=_new_id(),
                title=data.title,
                description=data.description,
                tasks=[],
                owner=data.owner or self._current_user_id,
                collaborators=data.collaborators,
                color=data.color,
                emoji=data.emoji,
                created_at=now,
                updated_at=now,
            )
            await self._commit_task_lists((*self._task_lists, task_list))
            logger.info("Created task list", extra={"task_list_id": task_list.id})
            return task_list

    async def update_task_list(self, list_id: str, update: TaskListUpdate) -> TaskList | None:
        """Shallow-merge update into a task list.

        Returns:
            The updated list, or None if list_id is unknown
        """
        with span("task_store.update_task_list"):
            task_list = self.get_task_list(list_id)
            if task_list is None:
                _log_not_found("update_task_list", task_list_id=list_id)
                return None

            updated = task_list.model_copy(update={**update.changes(), "updated_at": _now()})
            await self._commit_task_lists(_replace_record(self._task_lists, updated))
            logger.info("Updated task list", extra={"task_list_id": list_id})
            return updated

    async def delete_task_list(self, list_id: str) -> bool:
        """Remove a task list.

        Returns:
            True if removed, False if list_id is unknown
        """
        with span("task_store.delete_task_list"):
            if self.get_task_list(list_id) is None:
                _log_not_found("delete_task_list", task_list_id=list_id)
                return False

            await self._commit_task_lists(_without_record(self._task_lists, list_id))
            logger.info("Deleted task list", extra={"task_list_id": list_id})
            return True

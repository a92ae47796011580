"""Derived views over task and partner collections.

Everything here is a pure function of the collections passed in; nothing is
persisted. Screens use these for counters, XP totals, progress bars and
partner lookups.

Key Concepts:
- Partner tasks: tasks assigned to a partner or shared with them.
- Stale references: partner ids left on tasks after the partner was removed.
  They resolve to None (or the "Unknown" display name), never to an error.
- XP: the per-task ``xp_reward`` summed over completed (or all) tasks.
"""

from collections.abc import Iterable, Sequence

from questlog.core.config import Constants
from questlog.domain.partner import Partner, PartnerStatus, StatusVocabulary
from questlog.domain.task import Priority, Task
from questlog.models.service_models import PartnerStatistics, PartnerSummary, TaskStatistics


# ---- task filters ----


def completed_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Tasks marked completed."""
    return [task for task in tasks if task.completed]


def pending_tasks(tasks: Iterable[Task]) -> list[Task]:
    """Tasks not yet completed."""
    return [task for task in tasks if not task.completed]


def tasks_assigned_to(tasks: Iterable[Task], partner_id: str) -> list[Task]:
    return [task for task in tasks if task.assigned_to == partner_id]


def tasks_shared_with(tasks: Iterable[Task], partner_id: str) -> list[Task]:
    return [task for task in tasks if partner_id in task.shared_with]


def tasks_with_collaborator(tasks: Iterable[Task], partner_id: str) -> list[Task]:
    return [task for task in tasks if partner_id in task.collaborators]


def tasks_for_partner(tasks: Iterable[Task], partner_id: str) -> list[Task]:
    """Tasks assigned to or shared with a partner, each listed once."""
    return [task for task in tasks if task.assigned_to == partner_id or partner_id in task.shared_with]


# ---- partner lookups ----


def find_partner(partners: Iterable[Partner], partner_id: str | None) -> Partner | None:
    """Resolve a partner id, tolerating stale or missing ids."""
    if not partner_id:
        return None
    return next((partner for partner in partners if partner.id == partner_id), None)


def partner_display_name(partners: Iterable[Partner], partner_id: str | None) -> str:
    """Name of the partner, or the unknown placeholder for a stale id."""
    partner = find_partner(partners, partner_id)
    return partner.name if partner else Constants.UNKNOWN_PARTNER_NAME


def partners_with_status(partners: Iterable[Partner], status: PartnerStatus) -> list[Partner]:
    return [partner for partner in partners if partner.status == status]


def assigned_partner(task: Task, partners: Iterable[Partner]) -> Partner | None:
    """The partner a task is assigned to, if it still exists."""
    return find_partner(partners, task.assigned_to)


def shared_partners_for_task(
    task: Task,
    partners: Iterable[Partner],
    status: PartnerStatus = PartnerStatus.ACCEPTED,
) -> list[Partner]:
    """Partners with the given status that the task is shared with.

    Follows partner order and lists each partner once even if the task was
    shared with them repeatedly.
    """
    shared = set(task.shared_with)
    return [partner for partner in partners if partner.id in shared and partner.status == status]


# ---- progress and rewards ----


def progress_percentage(task: Task) -> float:
    """Percentage of completed sub-items; 0.0 when there are none."""
    total = len(task.sub_tasks)
    if total == 0:
        return 0.0
    done = sum(1 for sub in task.sub_tasks if sub.completed)
    return done / total * 100


def completed_xp(tasks: Iterable[Task]) -> int:
    """XP earned from completed tasks."""
    return sum(task.xp_reward for task in tasks if task.completed)


def total_xp(tasks: Iterable[Task]) -> int:
    """XP available across all tasks."""
    return sum(task.xp_reward for task in tasks)


def difficulty_xp(difficulty: Priority | str) -> int:
    """Base reward for a quest of the given difficulty."""
    return Constants.DIFFICULTY_XP.get(str(difficulty), Constants.DEFAULT_DIFFICULTY_XP)


def sub_quest_xp(difficulty: Priority | str) -> int:
    """Reward for one step of a quest of the given difficulty."""
    return Constants.SUB_QUEST_XP.get(str(difficulty), Constants.DEFAULT_SUB_QUEST_XP)


def quest_xp_reward(difficulty: Priority | str, sub_quest_rewards: Sequence[int] = ()) -> int:
    """Total reward for a new quest: base reward plus its steps' rewards."""
    return difficulty_xp(difficulty) + sum(sub_quest_rewards)


# ---- aggregates ----


def task_statistics(tasks: Iterable[Task]) -> TaskStatistics:
    """Counts and XP totals for a task collection."""
    items = list(tasks)
    done = completed_tasks(items)
    return TaskStatistics(
        total=len(items),
        completed=len(done),
        pending=len(items) - len(done),
        shared=sum(1 for task in items if task.shared_with),
        assigned=sum(1 for task in items if task.assigned_to),
        completed_xp=completed_xp(done),
        total_xp=total_xp(items),
    )


def partner_statistics(partners: Iterable[Partner], vocabulary: StatusVocabulary) -> PartnerStatistics:
    """Partner counts using the statuses of the active skin."""
    items = list(partners)
    return PartnerStatistics(
        total=len(items),
        accepted=len(partners_with_status(items, vocabulary.accepted)),
        pending=len(partners_with_status(items, vocabulary.initial)),
        declined=len(partners_with_status(items, vocabulary.declined)),
    )


def partner_summary(partner: Partner, tasks: Iterable[Task]) -> PartnerSummary:
    """Task and XP totals for one partner."""
    related = tasks_for_partner(tasks, partner.id)
    done = completed_tasks(related)
    return PartnerSummary(
        partner_id=partner.id,
        name=partner.name,
        status=partner.status,
        task_count=len(related),
        completed_count=len(done),
        completed_xp=completed_xp(done),
    )

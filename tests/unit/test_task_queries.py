"""Unit tests for task_queries module."""

from datetime import UTC, datetime

import pytest

from questlog.domain.partner import Partner, PartnerStatus, status_vocabulary
from questlog.domain.task import Priority, SubTask, Task
from questlog.services import task_queries


NOW = datetime(2025, 3, 1, 12, 0, tzinfo=UTC)


def make_task(task_id: str, **overrides) -> Task:
    return Task(id=task_id, title=f"Task {task_id}", created_at=NOW, updated_at=NOW, **overrides)


def make_partner(partner_id: str, status: PartnerStatus = PartnerStatus.ACCEPTED) -> Partner:
    return Partner(
        id=partner_id, name=f"Partner {partner_id}", email=f"{partner_id}@x.io", status=status, invited_at=NOW
    )


def make_sub(sub_id: str, completed: bool = False) -> SubTask:
    return SubTask(id=sub_id, title=sub_id, completed=completed, created_at=NOW, updated_at=NOW)


@pytest.fixture
def partners():
    return [
        make_partner("p1"),
        make_partner("p2", PartnerStatus.PENDING),
        make_partner("p3", PartnerStatus.DECLINED),
    ]


@pytest.fixture
def tasks():
    return [
        make_task("1", completed=True, assigned_to="p1", xp_reward=25),
        make_task("2", shared_with=["p1", "p2"], xp_reward=50),
        make_task("3", completed=True, shared_with=["p2"], collaborators=["p3"], xp_reward=10),
        make_task("4"),
    ]


@pytest.mark.unit
class TestFilters:
    def test_completed_and_pending(self, tasks):
        assert [t.id for t in task_queries.completed_tasks(tasks)] == ["1", "3"]
        assert [t.id for t in task_queries.pending_tasks(tasks)] == ["2", "4"]

    def test_tasks_assigned_to(self, tasks):
        assert [t.id for t in task_queries.tasks_assigned_to(tasks, "p1")] == ["1"]

    def test_tasks_shared_with(self, tasks):
        assert [t.id for t in task_queries.tasks_shared_with(tasks, "p2")] == ["2", "3"]

    def test_tasks_with_collaborator(self, tasks):
        assert [t.id for t in task_queries.tasks_with_collaborator(tasks, "p3")] == ["3"]

    def test_tasks_for_partner_lists_each_task_once(self):
        """Verify a task both assigned and shared to a partner is counted once."""
        tasks = [make_task("1", assigned_to="p1", shared_with=["p1", "p1"]), make_task("2")]

        assert [t.id for t in task_queries.tasks_for_partner(tasks, "p1")] == ["1"]


@pytest.mark.unit
class TestPartnerLookups:
    def test_find_partner(self, partners):
        assert task_queries.find_partner(partners, "p2").id == "p2"
        assert task_queries.find_partner(partners, "gone") is None
        assert task_queries.find_partner(partners, None) is None

    def test_display_name_for_stale_id(self, partners):
        """Verify removed partners render as Unknown instead of failing."""
        assert task_queries.partner_display_name(partners, "p1") == "Partner p1"
        assert task_queries.partner_display_name(partners, "gone") == "Unknown"

    def test_assigned_partner(self, tasks, partners):
        assert task_queries.assigned_partner(tasks[0], partners).id == "p1"
        assert task_queries.assigned_partner(tasks[3], partners) is None

    def test_shared_partners_filters_status_and_duplicates(self, partners):
        task = make_task("1", shared_with=["p1", "p2", "p1", "gone"])

        accepted = task_queries.shared_partners_for_task(task, partners)
        pending = task_queries.shared_partners_for_task(task, partners, PartnerStatus.PENDING)

        assert [p.id for p in accepted] == ["p1"]
        assert [p.id for p in pending] == ["p2"]

    def test_partners_with_status(self, partners):
        assert [p.id for p in task_queries.partners_with_status(partners, PartnerStatus.DECLINED)] == ["p3"]


@pytest.mark.unit
class TestProgressAndRewards:
    def test_progress_without_sub_tasks_is_zero(self):
        assert task_queries.progress_percentage(make_task("1")) == 0.0

    def test_progress_counts_completed_sub_tasks(self):
        task = make_task("1", sub_tasks=[make_sub("a", True), make_sub("b"), make_sub("c", True), make_sub("d")])

        assert task_queries.progress_percentage(task) == 50.0

    def test_xp_totals(self, tasks):
        assert task_queries.completed_xp(tasks) == 35
        assert task_queries.total_xp(tasks) == 85

    @pytest.mark.parametrize(
        ("difficulty", "expected"),
        [(Priority.EASY, 10), (Priority.MEDIUM, 25), (Priority.HARD, 50), (Priority.LEGENDARY, 100)],
    )
    def test_difficulty_xp(self, difficulty, expected):
        assert task_queries.difficulty_xp(difficulty) == expected

    def test_unrated_difficulty_uses_default(self):
        assert task_queries.difficulty_xp(Priority.LOW) == 25
        assert task_queries.sub_quest_xp("unknown") == 10

    def test_quest_xp_reward_adds_steps(self):
        steps = [task_queries.sub_quest_xp("hard")] * 3

        assert task_queries.quest_xp_reward("hard", steps) == 110
        assert task_queries.quest_xp_reward("easy") == 10


@pytest.mark.unit
class TestAggregates:
    def test_task_statistics(self, tasks):
        stats = task_queries.task_statistics(tasks)

        assert stats.total == 4
        assert stats.completed == 2
        assert stats.pending == 2
        assert stats.shared == 2
        assert stats.assigned == 1
        assert stats.completed_xp == 35
        assert stats.total_xp == 85

    def test_task_statistics_accepts_generators(self, tasks):
        stats = task_queries.task_statistics(task for task in tasks)

        assert stats.total == 4

    def test_partner_statistics_task_skin(self, partners):
        stats = task_queries.partner_statistics(partners, status_vocabulary("task"))

        assert (stats.total, stats.accepted, stats.pending, stats.declined) == (3, 1, 1, 1)

    def test_partner_statistics_quest_skin(self):
        allies = [make_partner("a1", PartnerStatus.ALLIED), make_partner("a2", PartnerStatus.INVITED)]

        stats = task_queries.partner_statistics(allies, status_vocabulary("quest"))

        assert (stats.accepted, stats.pending, stats.declined) == (1, 1, 0)

    def test_partner_summary(self, tasks, partners):
        summary = task_queries.partner_summary(partners[1], tasks)

        assert summary.partner_id == "p2"
        assert summary.status == PartnerStatus.PENDING
        assert summary.task_count == 2
        assert summary.completed_count == 1
        assert summary.completed_xp == 10

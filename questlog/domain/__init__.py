"""Domain models and DTOs."""

from questlog.domain.create_models import PartnerInvite, SubTaskCreate, TaskCreate, TaskListCreate
from questlog.domain.partner import Partner, PartnerStatus, StatusVocabulary, status_vocabulary
from questlog.domain.quest import (
    Ally,
    Difficulty,
    Quest,
    QuestBoard,
    QuestBoardCreate,
    QuestCreate,
    SubQuest,
    SubQuestCreate,
)
from questlog.domain.task import Priority, SubTask, Task
from questlog.domain.task_list import TaskList
from questlog.domain.update_models import SubTaskUpdate, TaskListUpdate, TaskUpdate


__all__ = [
    "Ally",
    "Difficulty",
    "Partner",
    "PartnerInvite",
    "PartnerStatus",
    "Priority",
    "Quest",
    "QuestBoard",
    "QuestBoardCreate",
    "QuestCreate",
    "StatusVocabulary",
    "SubQuest",
    "SubQuestCreate",
    "SubTask",
    "SubTaskCreate",
    "SubTaskUpdate",
    "Task",
    "TaskCreate",
    "TaskList",
    "TaskListCreate",
    "TaskListUpdate",
    "TaskUpdate",
    "status_vocabulary",
]

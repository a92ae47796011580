"""Quest-skin names for the task domain.

The quest skin is a naming variant over the same records: quests are tasks,
sub-quests are sub-tasks, allies are partners and quest boards are task lists.
"""

from questlog.domain.create_models import SubTaskCreate, TaskCreate, TaskListCreate
from questlog.domain.partner import Partner
from questlog.domain.task import Priority, SubTask, Task
from questlog.domain.task_list import TaskList


Quest = Task
SubQuest = SubTask
Ally = Partner
QuestBoard = TaskList
Difficulty = Priority

QuestCreate = TaskCreate
SubQuestCreate = SubTaskCreate
QuestBoardCreate = TaskListCreate

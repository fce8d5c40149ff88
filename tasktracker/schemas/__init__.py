from .task import TaskCreated, TaskMessage, TaskRead, TaskWrite  # noqa: F401

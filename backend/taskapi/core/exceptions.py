class TaskNotFoundError(Exception):
    """No row in ``tasks`` matched the requested id."""

    def __init__(self, task_id: int):
        super().__init__(f"Task {task_id} not found")
        self.task_id = task_id


class DataAccessError(Exception):
    """A database round trip failed.

    The original driver exception is chained as ``__cause__`` and only ever
    written to the log, never returned to the client.
    """

    def __init__(self, action: str):
        super().__init__(f"Database error during {action}")
        self.action = action

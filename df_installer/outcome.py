from enum import Enum


class Outcome(Enum):
    """How a flow ended. Only the CLI turns this into an exit status."""

    COMPLETED = "completed"
    # User said no at a confirmation point; not an error
    DECLINED = "declined"
    # User chose to stop in a way that should be reported as a failure
    ABORTED = "aborted"

    @property
    def exit_code(self) -> int:
        return 1 if self is Outcome.ABORTED else 0

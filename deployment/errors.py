"""
Exceptions raised while running migrations
"""


class MigrationError(Exception):
    """Base class for migration failures"""


class OrderingError(MigrationError):
    """A step was issued before the steps it depends on completed"""


class DeploymentError(MigrationError):
    """The backend could not deploy, link or confirm a contract"""


class StepFailure(MigrationError):
    """A migration step failed; the remaining steps were not issued"""

    def __init__(self, step, index: int, cause: BaseException):
        self.step = step
        self.index = index
        self.cause = cause
        super().__init__(f"Step {index} ({step.describe()}) failed: {cause}")

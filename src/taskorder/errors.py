# errors.py
from __future__ import annotations

from dataclasses import dataclass


class JobError(Exception):
    """
    Base class for every failure the job pipeline can report.

    Each subclass carries:
      - kind:        stable name of the failure
      - error_type:  machine-readable tag used in HTTP responses
      - status_code: HTTP status the API answers with

    str(error) is the human-readable message.
    """
    kind = "JobError"
    error_type = "invalid_request"
    status_code = 400
    default_message = "invalid job"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def to_dict(self) -> dict[str, str]:
        return {"error": self.error_type, "message": self.message}


class InvalidRequest(JobError):
    kind = "InvalidRequest"
    default_message = "invalid job data: tasks field is required"


class NotAMap(JobError):
    kind = "NotAMap"
    error_type = "validation_error"
    default_message = "attributes must be a map"


class TasksNotList(JobError):
    kind = "TasksNotList"
    error_type = "validation_error"
    default_message = "tasks must be a list"


# ---- per-task field validation ----

class NameRequired(JobError):
    kind = "NameRequired"
    error_type = "validation_error"
    default_message = "name is required"


class CommandRequired(JobError):
    kind = "CommandRequired"
    error_type = "validation_error"
    default_message = "command is required"


class RequiresNotList(JobError):
    kind = "RequiresNotList"
    error_type = "validation_error"
    default_message = "requires must be a list"


class RequiresNotStrings(JobError):
    kind = "RequiresNotStrings"
    error_type = "validation_error"
    default_message = "requires must contain only strings"


# ---- internal invariants (unreachable through Job.from_mapping) ----

class InvalidStruct(JobError):
    kind = "InvalidStruct"
    default_message = "invalid job struct"


class TasksNotValidStructs(JobError):
    kind = "TasksNotValidStructs"
    error_type = "validation_error"
    default_message = "all tasks must be valid Task structs"


# ---- graph-level failures ----

@dataclass(eq=False)
class MissingReference(JobError):
    name: str

    kind = "MissingReference"
    error_type = "missing_task_reference"
    status_code = 422

    def __post_init__(self) -> None:
        JobError.__init__(self, f"task '{self.name}' is referenced but does not exist")


@dataclass(eq=False)
class DuplicateTaskName(JobError):
    name: str

    kind = "DuplicateTaskName"
    error_type = "duplicate_task_name"
    status_code = 422

    def __post_init__(self) -> None:
        JobError.__init__(self, f"task '{self.name}' is defined more than once")


@dataclass(eq=False)
class CircularDependency(JobError):
    trace: str

    kind = "CircularDependency"
    error_type = "circular_dependency"
    status_code = 422

    def __post_init__(self) -> None:
        JobError.__init__(self, f"circular dependency detected: {self.trace}")

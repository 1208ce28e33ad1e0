# model.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any, Tuple

from .errors import (
    CommandRequired,
    DuplicateTaskName,
    InvalidStruct,
    JobError,
    MissingReference,
    NameRequired,
    NotAMap,
    RequiresNotList,
    RequiresNotStrings,
    TasksNotList,
    TasksNotValidStructs,
)


def _is_sequence(value: Any) -> bool:
    # str/bytes are sequences to Python but never a valid list of names
    return isinstance(value, (list, tuple))


def _check_requires(requires: Any) -> None:
    if not _is_sequence(requires):
        raise RequiresNotList()
    if not all(isinstance(r, str) for r in requires):
        raise RequiresNotStrings()


@dataclass(frozen=True)
class Task:
    """A named shell command plus the names of the tasks it requires."""
    name: str
    command: str
    requires: Tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, attrs: Any) -> Task:
        """
        Build a Task from untrusted input (typically decoded JSON).

        Checks run name -> command -> requires and the first failure is raised:
          - NotAMap             attrs is not a mapping
          - NameRequired        name missing, not a string or empty
          - CommandRequired     command missing, not a string or empty
          - RequiresNotList     requires present but not a list
          - RequiresNotStrings  requires holds a non-string entry

        A missing or null `requires` becomes an empty tuple.
        """
        if not isinstance(attrs, Mapping):
            raise NotAMap()

        name = attrs.get("name")
        if not isinstance(name, str) or name == "":
            raise NameRequired()

        command = attrs.get("command")
        if not isinstance(command, str) or command == "":
            raise CommandRequired()

        requires = attrs.get("requires")
        if requires is None:
            requires = []
        _check_requires(requires)

        return cls(name=name, command=command, requires=tuple(requires))


def validate_task(task: Any) -> None:
    """Re-check the field invariants of an already built Task."""
    if not isinstance(task, Task):
        raise InvalidStruct("invalid task struct")
    if not isinstance(task.name, str) or task.name == "":
        raise NameRequired()
    if not isinstance(task.command, str) or task.command == "":
        raise CommandRequired()
    _check_requires(task.requires)


@dataclass(frozen=True)
class Job:
    """
    An ordered collection of tasks.

    Task order is the input order; it carries no dependency meaning but is
    the starting order for cycle detection and sorting.
    """
    tasks: Tuple[Task, ...] = field(default_factory=tuple)

    @classmethod
    def from_mapping(cls, attrs: Any) -> Job:
        """
        Build a Job from a raw mapping holding a `tasks` list.

        Lenient: tasks that fail Task validation are dropped, not reported.
        Callers that must not lose tasks validate each raw task first
        (see taskorder.jobs.process).
        """
        if not isinstance(attrs, Mapping):
            raise NotAMap()

        raw_tasks = attrs.get("tasks")
        if raw_tasks is None:
            raw_tasks = []
        if not _is_sequence(raw_tasks):
            raise TasksNotList()

        tasks = []
        for raw in raw_tasks:
            try:
                tasks.append(Task.from_mapping(raw))
            except JobError:
                continue

        return cls(tasks=tuple(tasks))

    @property
    def names(self) -> list[str]:
        return [t.name for t in self.tasks]


def validate_structure(job: Any) -> None:
    """Raise unless `job` is a Job whose every element is a valid Task."""
    if not isinstance(job, Job) or not _is_sequence(job.tasks):
        raise InvalidStruct()

    for task in job.tasks:
        try:
            validate_task(task)
        except JobError as e:
            raise TasksNotValidStructs() from e


def validate_unique_names(job: Job) -> None:
    """Raise DuplicateTaskName for the first name defined twice, in job order."""
    if not isinstance(job, Job):
        raise InvalidStruct()

    seen: set[str] = set()
    for task in job.tasks:
        if task.name in seen:
            raise DuplicateTaskName(task.name)
        seen.add(task.name)


def validate_references(job: Job) -> None:
    """
    Every name in any task's `requires` must be the name of a task in the job.

    Scans tasks in job order, then requires in list order, and raises
    MissingReference for the first unknown name.
    """
    if not isinstance(job, Job):
        raise InvalidStruct()

    known = set(job.names)
    for task in job.tasks:
        for required in task.requires:
            if required not in known:
                raise MissingReference(required)

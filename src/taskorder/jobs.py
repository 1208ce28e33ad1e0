# jobs.py
from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any, List

from .dag import sort_job
from .errors import InvalidRequest, JobError, TasksNotList
from .model import (
    Job,
    Task,
    validate_references,
    validate_structure,
    validate_unique_names,
)

logger = logging.getLogger(__name__)


def _validate_all_tasks(raw_tasks: list) -> None:
    # Job.from_mapping silently drops bad tasks, so check them one by one first
    for raw in raw_tasks:
        Task.from_mapping(raw)


def process(job_data: Any) -> List[Task]:
    """
    Validate a raw job document and return its tasks in execution order.

    Pipeline (stops at the first failure):
      1. every raw task is a valid Task
      2. build the Job
      3. structure, unique names, references
      4. cycle detection
      5. topological sort

    Raises a JobError subclass describing the first problem found.
    """
    if not isinstance(job_data, Mapping) or "tasks" not in job_data:
        raise InvalidRequest()

    raw_tasks = job_data["tasks"]
    if not isinstance(raw_tasks, (list, tuple)):
        raise TasksNotList()

    try:
        _validate_all_tasks(raw_tasks)
        job = Job.from_mapping({"tasks": raw_tasks})
        validate_structure(job)
        validate_unique_names(job)
        validate_references(job)
        ordered = sort_job(job)
    except JobError as e:
        logger.info("job rejected (%s): %s", e.error_type, e)
        raise

    logger.debug("job accepted: %d task(s) ordered", len(ordered))
    return ordered

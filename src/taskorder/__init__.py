from .model import Task, Job
from .dag import build_graph, detect_cycles, topo_sort, sort_job
from .jobs import process
from .formatter import to_bash_script, to_json
from .errors import JobError

__all__ = [
    "Task", "Job", "build_graph", "detect_cycles", "topo_sort", "sort_job",
    "process", "to_bash_script", "to_json", "JobError",
]

import logging
import time
from typing import Dict, List, Sequence

from ecs_dispatch.ecs.common import TaskDescribeError, WaitTimeoutError

STOPPED_STATUS = "STOPPED"
DEFAULT_POLL_INTERVAL_SECONDS = 6


def wait_until_tasks_stopped(
    ecs_client,
    cluster: str,
    task_arns: Sequence[str],
    max_wait_seconds: float,
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
) -> List[Dict]:
    """
    Poll ``describe_tasks`` until every task reports ``lastStatus == STOPPED``.

    All tasks are described in a single request per poll. Sleeps between polls and
    gives up once ``max_wait_seconds`` have passed on the monotonic clock.

    Returns:
        List[Dict]: the task descriptions from the last poll

    Raises:
        WaitTimeoutError: the tasks did not all stop before the deadline
        TaskDescribeError: ECS reported failures for some of the tasks
    """
    deadline = time.monotonic() + max_wait_seconds
    last_statuses: Dict[str, str] = {}

    while True:
        response = ecs_client.describe_tasks(cluster=cluster, tasks=list(task_arns))

        failures = response.get("failures", [])
        if failures:
            raise TaskDescribeError(failures)

        tasks = response.get("tasks", [])
        for task in tasks:
            status = task.get("lastStatus", "UNKNOWN")
            if last_statuses.get(task["taskArn"]) != status:
                logging.debug(f"Task {task['taskArn']} status is {status}")
                last_statuses[task["taskArn"]] = status

        if len(tasks) == len(task_arns) and all(task.get("lastStatus") == STOPPED_STATUS for task in tasks):
            return tasks

        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise WaitTimeoutError(task_arns, max_wait_seconds)

        time.sleep(min(poll_interval_seconds, remaining))

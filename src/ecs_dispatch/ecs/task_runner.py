"""
Fargate task dispatch and completion monitoring.

Flow:
    run_task → task ARNs → (optional) wait_for_tasks
                                ↓
                    wait_until_tasks_stopped (poll with deadline)
                                ↓
                    describe_tasks → per-container exit codes → verdict

The verdict is True only when every container of every task exited with code 0.
"""

import dataclasses
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from ecs_dispatch.ecs.common import NoTasksStartedError
from ecs_dispatch.ecs.network import NetworkConfiguration
from ecs_dispatch.ecs.waiter import DEFAULT_POLL_INTERVAL_SECONDS, wait_until_tasks_stopped

LAUNCH_TYPE = "FARGATE"


@dataclasses.dataclass(frozen=True)
class ContainerResult:
    name: Optional[str]
    exit_code: Optional[int]

    @property
    def succeeded(self) -> bool:
        return self.exit_code == 0


@dataclasses.dataclass(frozen=True)
class TaskOutcome:
    task_arn: str
    containers: Tuple[ContainerResult, ...]
    stopped_reason: Optional[str] = None

    @staticmethod
    def from_description(task: Dict) -> "TaskOutcome":
        return TaskOutcome(
            task_arn=task["taskArn"],
            containers=tuple(
                ContainerResult(name=container.get("name"), exit_code=container.get("exitCode"))
                for container in task.get("containers", [])
            ),
            stopped_reason=task.get("stoppedReason"),
        )


def run_task(
    ecs_client, task_definition: str, cluster: str, network_configuration: NetworkConfiguration
) -> List[str]:
    """
    Submit a single Fargate run request.

    Returns:
        List[str]: started task ARNs, in the order ECS returned them

    Raises:
        NoTasksStartedError: ECS accepted the request but placed no task
    """
    response = ecs_client.run_task(
        taskDefinition=task_definition,
        cluster=cluster,
        networkConfiguration=network_configuration.to_request(),
        launchType=LAUNCH_TYPE,
    )

    for failure in response.get("failures", []):
        logging.warning(f"Task placement failure for {failure.get('arn')}: {failure.get('reason')}")

    task_arns = [task["taskArn"] for task in response.get("tasks") or []]
    logging.info(f"Started task(s): {', '.join(task_arns)}")

    if not task_arns:
        logging.error("No tasks were started")
        raise NoTasksStartedError()

    return task_arns


def describe_task_outcomes(ecs_client, cluster: str, task_arns: Sequence[str]) -> List[TaskOutcome]:
    response = ecs_client.describe_tasks(cluster=cluster, tasks=list(task_arns))
    return [TaskOutcome.from_description(task) for task in response.get("tasks", [])]


def wait_for_tasks(
    ecs_client,
    cluster: str,
    task_arns: Sequence[str],
    wait_timeout_seconds: int,
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
) -> bool:
    """
    Block until the tasks stop, then aggregate their container exit codes.

    Every container result is logged, even after a failure has been seen.

    Returns:
        bool: True if all containers exited with code 0

    Raises:
        WaitError: timeout or describe failure while waiting
    """
    logging.info(f"Waiting for task(s) to stop: {', '.join(task_arns)}")

    wait_until_tasks_stopped(
        ecs_client,
        cluster,
        task_arns,
        max_wait_seconds=wait_timeout_seconds,
        poll_interval_seconds=poll_interval_seconds,
    )

    logging.info("Task(s) have stopped, getting exit codes")

    all_successful = True
    for outcome in describe_task_outcomes(ecs_client, cluster, task_arns):
        task_successful = True
        for container in outcome.containers:
            logging.info(f"Task {outcome.task_arn} - Container {container.name} exited with code {container.exit_code}")
            if not container.succeeded:
                task_successful = False

        if not task_successful:
            all_successful = False
            if outcome.stopped_reason:
                logging.debug(f"Task {outcome.task_arn} stopped: {outcome.stopped_reason}")

    if not all_successful:
        logging.error("One or more tasks failed")
        return False

    logging.info("All tasks completed successfully")
    return True

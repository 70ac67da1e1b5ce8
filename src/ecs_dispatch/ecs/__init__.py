"""
ECS task dispatch.

Architecture:
    task-definition inputs → resolve_task_definition ─┐
                                                      ├→ run_task → task ARNs
    subnet / security group inputs → resolve_network ─┘        ↓
                                                  wait_for_tasks (optional)
                                                               ↓
                                                   exit codes → verdict

Components:
    - resolve_network_configuration: awsvpc placement from comma-separated inputs
    - resolve_task_definition: direct value or SSM parameter lookup
    - run_task: submits the Fargate run request
    - wait_for_tasks: polls until stopped and aggregates container exit codes
"""

from ecs_dispatch.ecs.network import NetworkConfiguration, resolve_network_configuration
from ecs_dispatch.ecs.task_definition import SSMParameterStore, resolve_task_definition
from ecs_dispatch.ecs.task_runner import run_task, wait_for_tasks

__all__ = [
    "NetworkConfiguration",
    "resolve_network_configuration",
    "SSMParameterStore",
    "resolve_task_definition",
    "run_task",
    "wait_for_tasks",
]

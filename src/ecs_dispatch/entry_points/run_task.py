#!/usr/bin/env python3
"""
ECS run-task entry point.

Dispatches a Fargate task and, when ``wait-for-finish`` is "true", waits for it to
stop and fails unless every container exited with code 0. Inputs are read from
command line flags, GitHub Actions ``INPUT_*`` environment variables, or a TOML
file section ``[run_task]``.
"""

import logging
import sys
import traceback
from typing import List, Optional

from ecs_dispatch.config.section.run_task import RunTaskConfig
from ecs_dispatch.ecs.clients import create_clients
from ecs_dispatch.ecs.network import resolve_network_configuration
from ecs_dispatch.ecs.task_definition import ParameterStore, SSMParameterStore, resolve_task_definition
from ecs_dispatch.ecs.task_runner import run_task, wait_for_tasks
from ecs_dispatch.utility.logging.utility import setup_logger

PROGRAM_NAME = "ecs_dispatch_run_task"


def report_failure(exception: BaseException):
    logging.error(str(exception))
    logging.debug("".join(traceback.format_exception(type(exception), exception, exception.__traceback__)))


def run(config: RunTaskConfig, ecs_client=None, parameter_store: Optional[ParameterStore] = None) -> bool:
    """
    Dispatch the task described by ``config`` and return whether the run succeeded.

    Every exception, expected or not, is logged here and turned into ``False``. A failed
    verdict has already been logged by ``wait_for_tasks``.
    """
    try:
        if ecs_client is None or parameter_store is None:
            default_ecs_client, ssm_client = create_clients(config.aws_config)
            ecs_client = ecs_client or default_ecs_client
            parameter_store = parameter_store or SSMParameterStore(ssm_client)

        task_definition = resolve_task_definition(
            config.task_definition, config.task_definition_from_parameter, parameter_store
        )
        network_configuration = resolve_network_configuration(config.subnets, config.security_groups)

        task_arns = run_task(ecs_client, task_definition, config.ecs_cluster, network_configuration)

        success = True
        if config.wait_for_finish:
            success = wait_for_tasks(
                ecs_client,
                config.ecs_cluster,
                task_arns,
                config.wait_timeout_seconds,
                poll_interval_seconds=config.poll_interval_seconds,
            )

        return success
    except Exception as e:
        report_failure(e)
        return False


def main(argv: Optional[List[str]] = None):
    setup_logger()

    try:
        config = RunTaskConfig.load(argv, program_name=PROGRAM_NAME)
        logging_config = config.logging_config
        setup_logger(logging_config.logging_paths, logging_config.logging_config_file, logging_config.logging_level)
    except Exception as e:
        report_failure(e)
        sys.exit(1)

    sys.exit(0 if run(config) else 1)


if __name__ == "__main__":
    main()

import dataclasses

from ecs_dispatch.config.common.aws import AWSConfig
from ecs_dispatch.config.common.logging import LoggingConfig
from ecs_dispatch.config.config_class import ConfigClass
from ecs_dispatch.ecs.common import ConfigError
from ecs_dispatch.ecs.waiter import DEFAULT_POLL_INTERVAL_SECONDS

DEFAULT_WAIT_TIMEOUT_SECONDS = 300


@dataclasses.dataclass
class RunTaskConfig(ConfigClass):
    """Run a one-shot ECS Fargate task and optionally wait for its containers to exit."""

    _section_name = "run_task"

    ecs_cluster: str = dataclasses.field(
        metadata=dict(short="-ec", required=True, help="name or ARN of the ECS cluster to run the task on")
    )

    # Subnets and security groups stay raw here, they are parsed when the task is dispatched
    subnets: str = dataclasses.field(default="", metadata=dict(short="-sn", help="comma-separated subnet IDs"))
    security_groups: str = dataclasses.field(
        default="", metadata=dict(short="-sg", help="comma-separated security group IDs")
    )

    task_definition: str = dataclasses.field(
        default="", metadata=dict(short="-td", help="task definition family:revision or ARN")
    )
    task_definition_from_parameter: str = dataclasses.field(
        default="",
        metadata=dict(short="-tdp", help="SSM parameter holding the task definition, used if task-definition is empty"),
    )

    wait_for_finish: bool = dataclasses.field(
        default=False, metadata=dict(short="-wff", help='"true" to wait for the task(s) to stop and check exit codes')
    )
    wait_timeout_seconds: int = dataclasses.field(
        default=DEFAULT_WAIT_TIMEOUT_SECONDS,
        metadata=dict(short="-wts", help="maximum number of seconds to wait for the task(s) to stop"),
    )
    poll_interval_seconds: int = dataclasses.field(
        default=DEFAULT_POLL_INTERVAL_SECONDS,
        metadata=dict(short="-pi", help="number of seconds between task status checks while waiting"),
    )

    aws_config: AWSConfig = dataclasses.field(default_factory=AWSConfig)
    logging_config: LoggingConfig = dataclasses.field(default_factory=LoggingConfig)

    def __post_init__(self):
        if self.wait_timeout_seconds <= 0:
            raise ConfigError("wait-timeout-seconds must be a positive integer.")

        if self.poll_interval_seconds <= 0:
            raise ConfigError("poll-interval-seconds must be a positive integer.")

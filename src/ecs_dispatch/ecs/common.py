from typing import Dict, List, Sequence


class ECSDispatchError(Exception):
    """Base class for every failure reported by a task dispatch."""


class ConfigError(ECSDispatchError, ValueError):
    pass


class NoSubnetsError(ConfigError):
    def __init__(self):
        super().__init__("At least one subnet must be specified")


class NoSecurityGroupsError(ConfigError):
    def __init__(self):
        super().__init__("At least one security group must be specified")


class NoTaskDefinitionProvidedError(ConfigError):
    def __init__(self):
        super().__init__("Either task-definition or task-definition-from-parameter input must be provided")


class ParameterHasNoValueError(ConfigError):
    def __init__(self, parameter_name: str):
        self.parameter_name = parameter_name
        super().__init__(f"task-definition-from-parameter SSM Parameter {parameter_name} has no value")


class DispatchError(ECSDispatchError):
    pass


class NoTasksStartedError(DispatchError):
    def __init__(self):
        super().__init__("No tasks were started")


class WaitError(ECSDispatchError):
    pass


class WaitTimeoutError(WaitError):
    def __init__(self, task_arns: Sequence[str], timeout_seconds: float):
        self.task_arns = list(task_arns)
        self.timeout_seconds = timeout_seconds
        super().__init__(f"Timed out after {timeout_seconds}s waiting for task(s) to stop: {', '.join(self.task_arns)}")


class TaskDescribeError(WaitError):
    """ECS could not describe some of the monitored tasks, so they can never be seen as stopped."""

    def __init__(self, failures: List[Dict[str, str]]):
        self.failures = failures
        details = ", ".join(f"{failure.get('arn')} ({failure.get('reason')})" for failure in failures)
        super().__init__(f"Failed to describe task(s): {details}")

"""
Task definition selection.

The task definition is given either directly (``family:revision`` or a full ARN)
or as the name of an SSM parameter holding it. A direct value always wins.
"""

import abc
import dataclasses
import logging
from typing import Optional, Union

from botocore.exceptions import ClientError

from ecs_dispatch.ecs.common import NoTaskDefinitionProvidedError, ParameterHasNoValueError


class ParameterStore(metaclass=abc.ABCMeta):
    @abc.abstractmethod
    def get(self, name: str) -> Optional[str]:
        """Return the stored value, or None when the parameter is missing or has no value."""
        raise NotImplementedError()


class SSMParameterStore(ParameterStore):
    """Reads parameters from AWS Systems Manager Parameter Store."""

    def __init__(self, ssm_client):
        self._ssm_client = ssm_client

    def get(self, name: str) -> Optional[str]:
        try:
            response = self._ssm_client.get_parameter(Name=name)
        except ClientError as e:
            logging.debug(f"get_parameter {name} failed: {e.response['Error']['Code']}")
            return None

        return (response.get("Parameter") or {}).get("Value")


@dataclasses.dataclass(frozen=True)
class DirectTaskDefinition:
    value: str


@dataclasses.dataclass(frozen=True)
class ParameterTaskDefinition:
    name: str


TaskDefinitionSource = Union[DirectTaskDefinition, ParameterTaskDefinition]


def select_task_definition_source(direct_value: str, parameter_name: str) -> TaskDefinitionSource:
    if direct_value:
        return DirectTaskDefinition(direct_value)

    if parameter_name:
        return ParameterTaskDefinition(parameter_name)

    raise NoTaskDefinitionProvidedError()


def resolve_task_definition(direct_value: str, parameter_name: str, parameter_store: ParameterStore) -> str:
    """
    Resolve the task definition identifier to run.

    The identifier is returned as is; it is not checked to be an ARN or a
    ``family:revision`` pair.

    Raises:
        NoTaskDefinitionProvidedError: both inputs are empty
        ParameterHasNoValueError: the parameter lookup failed or returned nothing
    """
    source = select_task_definition_source(direct_value, parameter_name)
    if isinstance(source, DirectTaskDefinition):
        return source.value

    value = parameter_store.get(source.name)
    if not value:
        raise ParameterHasNoValueError(source.name)

    logging.info(f"Resolved task definition {value} from SSM Parameter {source.name}")
    return value

"""
Network placement for Fargate tasks.

Fargate tasks run in ``awsvpc`` mode, so every dispatch has to name the subnets
and security groups the task's elastic network interface is attached to.
"""

import dataclasses
import enum
from typing import Dict, List, Tuple

from ecs_dispatch.ecs.common import NoSecurityGroupsError, NoSubnetsError


class AssignPublicIp(enum.Enum):
    DISABLED = "DISABLED"


@dataclasses.dataclass(frozen=True)
class NetworkConfiguration:
    subnets: Tuple[str, ...]
    security_groups: Tuple[str, ...]
    assign_public_ip: AssignPublicIp = AssignPublicIp.DISABLED

    def __post_init__(self):
        if not self.subnets:
            raise NoSubnetsError()

        if not self.security_groups:
            raise NoSecurityGroupsError()

    def to_request(self) -> Dict:
        """Shape expected by the ``networkConfiguration`` argument of ``ecs.run_task``."""
        return {
            "awsvpcConfiguration": {
                "subnets": list(self.subnets),
                "securityGroups": list(self.security_groups),
                "assignPublicIp": self.assign_public_ip.value,
            }
        }


def split_comma_separated(raw: str) -> List[str]:
    return [item.strip() for item in raw.split(",") if item.strip()]


def resolve_network_configuration(subnets_raw: str, security_groups_raw: str) -> NetworkConfiguration:
    """
    Parse comma-separated subnet and security group IDs.

    Whitespace around each ID is stripped and empty entries are dropped; order and
    duplicates are kept as given. Public IP assignment is always disabled.

    Raises:
        NoSubnetsError: no subnet ID remains after parsing
        NoSecurityGroupsError: no security group ID remains after parsing
    """
    return NetworkConfiguration(
        subnets=tuple(split_comma_separated(subnets_raw)),
        security_groups=tuple(split_comma_separated(security_groups_raw)),
    )

import dataclasses
from typing import Optional

from ecs_dispatch.config.config_class import ConfigClass
from ecs_dispatch.ecs.common import ConfigError


@dataclasses.dataclass
class AWSConfig(ConfigClass):
    aws_region: Optional[str] = dataclasses.field(
        default=None, metadata=dict(help="AWS region, uses the default region chain if not provided")
    )
    aws_access_key_id: Optional[str] = dataclasses.field(
        default=None, metadata=dict(help="AWS access key ID, uses the default credential chain if not provided")
    )
    aws_secret_access_key: Optional[str] = dataclasses.field(
        default=None, metadata=dict(help="AWS secret access key, uses the default credential chain if not provided")
    )

    def __post_init__(self):
        if bool(self.aws_access_key_id) != bool(self.aws_secret_access_key):
            raise ConfigError("aws-access-key-id and aws-secret-access-key must be provided together")

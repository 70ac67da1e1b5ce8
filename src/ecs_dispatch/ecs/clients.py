import logging
from typing import Tuple

import boto3

from ecs_dispatch.config.common.aws import AWSConfig


def create_clients(aws_config: AWSConfig) -> Tuple[object, object]:
    """Create the ECS and SSM clients, falling back to the default credential chain."""
    session_kwargs = {}
    if aws_config.aws_region:
        session_kwargs["region_name"] = aws_config.aws_region
    if aws_config.aws_access_key_id and aws_config.aws_secret_access_key:
        session_kwargs["aws_access_key_id"] = aws_config.aws_access_key_id
        session_kwargs["aws_secret_access_key"] = aws_config.aws_secret_access_key

    session = boto3.Session(**session_kwargs)
    ecs_client = session.client("ecs")
    ssm_client = session.client("ssm")
    logging.debug(f"AWS clients initialized: region={session.region_name}")
    return ecs_client, ssm_client

import dataclasses
import logging
from typing import Optional, Tuple

from ecs_dispatch.config.config_class import ConfigClass
from ecs_dispatch.ecs.common import ConfigError


@dataclasses.dataclass
class LoggingConfig(ConfigClass):
    logging_paths: Tuple[str, ...] = dataclasses.field(
        default=("/dev/stdout",), metadata=dict(help="comma-separated paths to write logs to, /dev/stdout for stdout")
    )
    logging_level: str = dataclasses.field(
        default="INFO", metadata=dict(help="logging level: DEBUG, INFO, WARNING, ERROR or CRITICAL")
    )
    logging_config_file: Optional[str] = dataclasses.field(
        default=None, metadata=dict(help="logging.config.fileConfig file, overrides the other logging inputs")
    )

    def __post_init__(self):
        self.logging_level = self.logging_level.upper()
        if not isinstance(logging.getLevelName(self.logging_level), int):
            raise ConfigError(f"Unknown logging level: {self.logging_level}")

        if not self.logging_paths:
            raise ConfigError("logging-paths must name at least one path")

import logging
import logging.config
import os
import sys
from typing import Optional, Tuple

STDOUT_PATH = "/dev/stdout"
DEFAULT_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"

# Handlers installed by setup_logger carry this attribute so a second call replaces them
_HANDLER_MARKER = "_ecs_dispatch_handler"


class GitHubActionsFormatter(logging.Formatter):
    """
    Renders records as GitHub Actions workflow commands.

    Errors and warnings become annotations and debug lines are only shown by the
    runner when step debug logging is enabled.
    """

    COMMANDS = {logging.DEBUG: "debug", logging.WARNING: "warning", logging.ERROR: "error", logging.CRITICAL: "error"}

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = self.COMMANDS.get(record.levelno)
        if command is None:
            return message

        # workflow commands end at the first newline
        message = message.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")
        return f"::{command}::{message}"


def running_in_github_actions() -> bool:
    return os.environ.get("GITHUB_ACTIONS", "").lower() == "true"


def setup_logger(
    logging_paths: Tuple[str, ...] = (STDOUT_PATH,),
    logging_config_file: Optional[str] = None,
    logging_level: str = "INFO",
):
    if logging_config_file is not None:
        logging.config.fileConfig(logging_config_file, disable_existing_loggers=False)
        return

    github_actions = running_in_github_actions()
    handlers = []
    for path in logging_paths:
        if path == STDOUT_PATH:
            handler = logging.StreamHandler(sys.stdout)
        else:
            handler = logging.FileHandler(path)

        if github_actions and path == STDOUT_PATH:
            handler.setFormatter(GitHubActionsFormatter("%(message)s"))
        else:
            handler.setFormatter(logging.Formatter(DEFAULT_FORMAT))

        setattr(handler, _HANDLER_MARKER, True)
        handlers.append(handler)

    # old handlers stay in place when a new path cannot be opened
    root = logging.getLogger()
    for handler in list(root.handlers):
        if getattr(handler, _HANDLER_MARKER, False):
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        root.addHandler(handler)

    # RUNNER_DEBUG is set by the runner when step debug logging is enabled
    if github_actions and os.environ.get("RUNNER_DEBUG") == "1":
        logging_level = "DEBUG"

    root.setLevel(logging_level)


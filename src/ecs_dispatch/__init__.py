"""Dispatch one-shot ECS Fargate tasks and report their exit status."""

__version__ = "0.1.0"

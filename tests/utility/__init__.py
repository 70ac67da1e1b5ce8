from tests.utility.utility import ecs_client_with_stubber, logging_test_name, ssm_client_with_stubber

__all__ = ["ecs_client_with_stubber", "logging_test_name", "ssm_client_with_stubber"]

import unittest
from unittest.mock import patch

from ecs_dispatch.ecs.common import NoTasksStartedError, WaitTimeoutError
from ecs_dispatch.ecs.network import resolve_network_configuration
from ecs_dispatch.ecs.task_runner import ContainerResult, TaskOutcome, run_task, wait_for_tasks
from ecs_dispatch.utility.logging.utility import setup_logger
from tests.utility import ecs_client_with_stubber, logging_test_name
from tests.utility.utility import TASK_ARN, TASK_ARN_2, stopped_task

NETWORK_REQUEST = {
    "awsvpcConfiguration": {"subnets": ["subnet-123"], "securityGroups": ["sg-123"], "assignPublicIp": "DISABLED"}
}


class TestRunTask(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        setup_logger()

    def setUp(self):
        logging_test_name(self)
        self.ecs_client, self.stubber = ecs_client_with_stubber()
        self.stubber.activate()
        self.network_configuration = resolve_network_configuration("subnet-123", "sg-123")

    def tearDown(self):
        self.stubber.deactivate()

    def _expect_run_task(self, response):
        self.stubber.add_response(
            "run_task",
            response,
            {
                "taskDefinition": "my-task:1",
                "cluster": "my-cluster",
                "networkConfiguration": NETWORK_REQUEST,
                "launchType": "FARGATE",
            },
        )

    def test_single_task(self):
        self._expect_run_task({"tasks": [{"taskArn": TASK_ARN}]})

        with self.assertLogs(level="INFO") as logs:
            result = run_task(self.ecs_client, "my-task:1", "my-cluster", self.network_configuration)

        self.assertEqual(result, [TASK_ARN])
        self.assertIn(f"INFO:root:Started task(s): {TASK_ARN}", logs.output)
        self.stubber.assert_no_pending_responses()

    def test_multiple_tasks_keep_order(self):
        self._expect_run_task({"tasks": [{"taskArn": TASK_ARN}, {"taskArn": TASK_ARN_2}]})

        with self.assertLogs(level="INFO") as logs:
            result = run_task(self.ecs_client, "my-task:1", "my-cluster", self.network_configuration)

        self.assertEqual(result, [TASK_ARN, TASK_ARN_2])
        self.assertIn(f"INFO:root:Started task(s): {TASK_ARN}, {TASK_ARN_2}", logs.output)

    def test_no_tasks_started(self):
        self._expect_run_task({"tasks": []})

        with self.assertLogs(level="INFO") as logs:
            with self.assertRaises(NoTasksStartedError) as ctx:
                run_task(self.ecs_client, "my-task:1", "my-cluster", self.network_configuration)

        self.assertEqual(str(ctx.exception), "No tasks were started")
        self.assertIn("ERROR:root:No tasks were started", logs.output)

    def test_tasks_field_missing(self):
        self._expect_run_task({})

        with self.assertRaises(NoTasksStartedError):
            run_task(self.ecs_client, "my-task:1", "my-cluster", self.network_configuration)

    def test_placement_failures_logged(self):
        self._expect_run_task({"tasks": [], "failures": [{"arn": "my-task:1", "reason": "RESOURCE:ENI"}]})

        with self.assertLogs(level="INFO") as logs:
            with self.assertRaises(NoTasksStartedError):
                run_task(self.ecs_client, "my-task:1", "my-cluster", self.network_configuration)

        self.assertIn("WARNING:root:Task placement failure for my-task:1: RESOURCE:ENI", logs.output)


class TestWaitForTasks(unittest.TestCase):
    @classmethod
    def setUpClass(cls):
        setup_logger()

    def setUp(self):
        logging_test_name(self)
        self.ecs_client, self.stubber = ecs_client_with_stubber()
        self.stubber.activate()

        patcher = patch("ecs_dispatch.ecs.task_runner.wait_until_tasks_stopped")
        self.mock_wait = patcher.start()
        self.addCleanup(patcher.stop)

    def tearDown(self):
        self.stubber.deactivate()

    def _expect_describe(self, tasks, task_arns):
        self.stubber.add_response(
            "describe_tasks", {"tasks": tasks}, {"cluster": "my-cluster", "tasks": task_arns}
        )

    def test_all_tasks_successful(self):
        self._expect_describe([stopped_task(TASK_ARN, ("container-1", 0))], [TASK_ARN])

        with self.assertLogs(level="INFO") as logs:
            result = wait_for_tasks(self.ecs_client, "my-cluster", [TASK_ARN], 900)

        self.assertTrue(result)
        self.assertEqual(
            [line for line in logs.output if ":root:" in line],
            [
                f"INFO:root:Waiting for task(s) to stop: {TASK_ARN}",
                "INFO:root:Task(s) have stopped, getting exit codes",
                f"INFO:root:Task {TASK_ARN} - Container container-1 exited with code 0",
                "INFO:root:All tasks completed successfully",
            ],
        )
        self.stubber.assert_no_pending_responses()

    def test_non_zero_exit_code(self):
        self._expect_describe([stopped_task(TASK_ARN, ("container-1", 1))], [TASK_ARN])

        with self.assertLogs(level="INFO") as logs:
            result = wait_for_tasks(self.ecs_client, "my-cluster", [TASK_ARN], 900)

        self.assertFalse(result)
        self.assertIn("ERROR:root:One or more tasks failed", logs.output)
        self.assertNotIn("INFO:root:All tasks completed successfully", logs.output)

    def test_multiple_containers(self):
        self._expect_describe([stopped_task(TASK_ARN, ("container-1", 0), ("container-2", 0))], [TASK_ARN])

        with self.assertLogs(level="INFO") as logs:
            result = wait_for_tasks(self.ecs_client, "my-cluster", [TASK_ARN], 900)

        self.assertTrue(result)
        self.assertIn(f"INFO:root:Task {TASK_ARN} - Container container-1 exited with code 0", logs.output)
        self.assertIn(f"INFO:root:Task {TASK_ARN} - Container container-2 exited with code 0", logs.output)

    def test_one_failing_container_fails_run(self):
        self._expect_describe([stopped_task(TASK_ARN, ("container-1", 0), ("container-2", 137))], [TASK_ARN])

        with self.assertLogs(level="INFO") as logs:
            result = wait_for_tasks(self.ecs_client, "my-cluster", [TASK_ARN], 900)

        self.assertFalse(result)
        self.assertIn("ERROR:root:One or more tasks failed", logs.output)

    def test_every_container_reported_after_failure(self):
        task_arns = [TASK_ARN, TASK_ARN_2]
        self._expect_describe(
            [
                stopped_task(TASK_ARN, ("container-1", 0)),
                stopped_task(TASK_ARN_2, ("container-1", 137), ("container-2", 0)),
            ],
            task_arns,
        )

        with self.assertLogs(level="INFO") as logs:
            result = wait_for_tasks(self.ecs_client, "my-cluster", task_arns, 900)

        self.assertFalse(result)
        container_lines = [line for line in logs.output if " - Container " in line]
        self.assertEqual(
            container_lines,
            [
                f"INFO:root:Task {TASK_ARN} - Container container-1 exited with code 0",
                f"INFO:root:Task {TASK_ARN_2} - Container container-1 exited with code 137",
                f"INFO:root:Task {TASK_ARN_2} - Container container-2 exited with code 0",
            ],
        )
        self.assertEqual(
            [line for line in logs.output if line.startswith("ERROR")], ["ERROR:root:One or more tasks failed"]
        )
        self.assertIn(f"INFO:root:Waiting for task(s) to stop: {TASK_ARN}, {TASK_ARN_2}", logs.output)

    def test_verdict_is_conjunction_of_exit_codes(self):
        cases = [
            ([0], True),
            ([0, 0, 0], True),
            ([1], False),
            ([0, 0, 2], False),
            ([255, 0], False),
        ]
        for exit_codes, expected in cases:
            containers = [(f"container-{i}", code) for i, code in enumerate(exit_codes)]
            self._expect_describe([stopped_task(TASK_ARN, *containers)], [TASK_ARN])

            with self.assertLogs(level="INFO"):
                self.assertEqual(wait_for_tasks(self.ecs_client, "my-cluster", [TASK_ARN], 900), expected, exit_codes)

    def test_missing_exit_code_fails(self):
        task = {
            "taskArn": TASK_ARN,
            "lastStatus": "STOPPED",
            "stoppedReason": "CannotPullContainerError",
            "containers": [{"name": "container-1"}],
        }
        self._expect_describe([task], [TASK_ARN])

        with self.assertLogs(level="DEBUG") as logs:
            result = wait_for_tasks(self.ecs_client, "my-cluster", [TASK_ARN], 900)

        self.assertFalse(result)
        self.assertIn(f"INFO:root:Task {TASK_ARN} - Container container-1 exited with code None", logs.output)
        self.assertIn(f"DEBUG:root:Task {TASK_ARN} stopped: CannotPullContainerError", logs.output)

    def test_timeout_passed_to_waiter(self):
        for timeout in (300, 1800):
            self._expect_describe([stopped_task(TASK_ARN, ("container-1", 0))], [TASK_ARN])

            with self.assertLogs(level="INFO"):
                wait_for_tasks(self.ecs_client, "my-cluster", [TASK_ARN], timeout, poll_interval_seconds=10)

            self.mock_wait.assert_called_with(
                self.ecs_client, "my-cluster", [TASK_ARN], max_wait_seconds=timeout, poll_interval_seconds=10
            )

    def test_wait_error_propagates_without_describe(self):
        self.mock_wait.side_effect = WaitTimeoutError([TASK_ARN], 300)

        with self.assertLogs(level="INFO") as logs:
            with self.assertRaises(WaitTimeoutError):
                wait_for_tasks(self.ecs_client, "my-cluster", [TASK_ARN], 300)

        self.assertNotIn("INFO:root:Task(s) have stopped, getting exit codes", logs.output)
        self.stubber.assert_no_pending_responses()


class TestTaskOutcome(unittest.TestCase):
    def test_from_description(self):
        outcome = TaskOutcome.from_description(stopped_task(TASK_ARN, ("app", 0), ("sidecar", 1)))

        self.assertEqual(outcome.task_arn, TASK_ARN)
        self.assertEqual(outcome.containers, (ContainerResult("app", 0), ContainerResult("sidecar", 1)))
        self.assertIsNone(outcome.stopped_reason)

    def test_container_without_name(self):
        outcome = TaskOutcome.from_description({"taskArn": TASK_ARN, "containers": [{"exitCode": 0}]})

        self.assertEqual(outcome.containers, (ContainerResult(None, 0),))

    def test_container_succeeded(self):
        self.assertTrue(ContainerResult("app", 0).succeeded)
        self.assertFalse(ContainerResult("app", 1).succeeded)
        self.assertFalse(ContainerResult("app", None).succeeded)

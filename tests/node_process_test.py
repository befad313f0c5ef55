import os
from unittest import TestCase, mock
from unittest.mock import Mock

import psutil

from smoketesting.config import HarnessConfig
from smoketesting.exceptions import LaunchError, NodeClosedError, NodeDiedError, ReadinessTimeoutError
from smoketesting.models.node_config import NodeConfig, User
from smoketesting.node_process import NodeProcess, NodeProcessFactory


class NodeProcessTest(TestCase):
    def setUp(self):
        self.node_config = NodeConfig(common_name="node-a", rpc_port=10005, users=[User("user1", "pass1")])
        self.process = Mock()
        self.client = Mock()
        self.cleaner = Mock()
        self.node = NodeProcess(self.node_config, "/nodes/node-a", self.process, self.client, cleaner=self.cleaner)

    def test_connect_uses_first_user(self):
        connection = self.node.connect()

        self.assertIs(self.client.start.return_value, connection)
        self.client.start.assert_called_once_with("user1", "pass1")

    def test_connect_returns_independent_connections(self):
        self.client.start.side_effect = [Mock(), Mock()]

        self.assertIsNot(self.node.connect(), self.node.connect())

    def test_close_cooperative_node(self):
        self.process.wait.return_value = True

        self.node.close()

        self.process.terminate.assert_called_once_with(graceful=True)
        self.process.wait.assert_called_once_with(60)
        self.cleaner.cleanup.assert_called_once_with("node-a", "/nodes/node-a")
        self.assertTrue(self.node.closed)

    def test_close_escalates_to_kill(self):
        self.process.wait.return_value = False

        self.node.close()

        self.process.terminate.assert_has_calls([mock.call(graceful=True), mock.call(graceful=False)])
        self.cleaner.cleanup.assert_called_once_with("node-a", "/nodes/node-a")

    def test_close_twice(self):
        self.process.wait.return_value = True

        self.node.close()
        self.node.close()

        self.process.terminate.assert_called_once_with(graceful=True)
        self.cleaner.cleanup.assert_called_once_with("node-a", "/nodes/node-a")

    def test_close_cleans_up_even_if_termination_fails(self):
        self.process.terminate.side_effect = psutil.AccessDenied(1234)

        with self.assertRaises(psutil.AccessDenied):
            self.node.close()

        self.cleaner.cleanup.assert_called_once_with("node-a", "/nodes/node-a")
        self.assertTrue(self.node.closed)

    def test_connect_after_close(self):
        self.node.close()

        with self.assertRaises(NodeClosedError):
            self.node.connect()

    def test_context_manager_closes_node(self):
        self.process.wait.return_value = True

        with self.node as node:
            self.assertFalse(node.closed)

        self.assertTrue(self.node.closed)


class NodeProcessFactoryTest(TestCase):
    def setUp(self):
        self.node_config = NodeConfig(common_name="node-a", rpc_port=10005, users=[User("user1", "pass1")])
        self.harness_config = HarnessConfig(nodes_root="/build/20170101120000", shutdown_timeout=30, rpc_host="127.0.0.1")
        self.launcher = Mock()
        self.process = self.launcher.start.return_value
        self.prober = Mock()
        self.config_writer = Mock()
        self.client_factory = Mock()
        self.cleaner = Mock()

    @mock.patch("smoketesting.utils.io.ensure_dir", side_effect=lambda d: d)
    def create_factory(self, ensure_dir):
        factory = NodeProcessFactory(self.harness_config, launcher=self.launcher, prober=self.prober,
                                     config_writer=self.config_writer, client_factory=self.client_factory,
                                     cleaner=self.cleaner)
        ensure_dir.assert_called_once_with("/build/20170101120000")
        return factory

    def test_base_directory(self):
        factory = self.create_factory()

        self.assertEqual(os.path.join("/build/20170101120000", "node-a"), factory.base_directory(self.node_config))

    @mock.patch("smoketesting.utils.io.ensure_dir", side_effect=lambda d: d)
    def test_create(self, ensure_dir):
        factory = self.create_factory()
        node_dir = os.path.join("/build/20170101120000", "node-a")

        node = factory.create(self.node_config)

        ensure_dir.assert_called_once_with(node_dir)
        self.config_writer.write.assert_called_once_with(self.node_config, node_dir)
        self.launcher.start.assert_called_once_with(self.node_config, node_dir)
        self.client_factory.assert_called_once_with("127.0.0.1", 10005)
        self.prober.wait_until_ready.assert_called_once_with(self.node_config, self.process,
                                                             self.client_factory.return_value)
        self.process.terminate.assert_not_called()
        self.assertEqual(node_dir, node.node_dir)
        self.assertIs(self.node_config, node.config)
        self.assertEqual(30, node.shutdown_timeout)

    @mock.patch("smoketesting.utils.io.ensure_dir", side_effect=lambda d: d)
    def test_create_kills_node_that_did_not_become_ready(self, ensure_dir):
        factory = self.create_factory()
        self.prober.wait_until_ready.side_effect = ReadinessTimeoutError("not ready")

        with self.assertRaises(ReadinessTimeoutError):
            factory.create(self.node_config)

        self.process.terminate.assert_called_once_with(graceful=False)

    @mock.patch("smoketesting.utils.io.ensure_dir", side_effect=lambda d: d)
    def test_create_with_node_died_during_startup(self, ensure_dir):
        factory = self.create_factory()
        self.prober.wait_until_ready.side_effect = NodeDiedError("died", exit_code=1)

        with self.assertRaises(NodeDiedError):
            factory.create(self.node_config)

        self.process.terminate.assert_called_once_with(graceful=False)

    @mock.patch("smoketesting.utils.io.ensure_dir", side_effect=lambda d: d)
    def test_create_kills_node_if_client_cannot_be_created(self, ensure_dir):
        factory = self.create_factory()
        self.client_factory.side_effect = ValueError("invalid host")

        with self.assertRaises(ValueError):
            factory.create(self.node_config)

        self.process.terminate.assert_called_once_with(graceful=False)
        self.prober.wait_until_ready.assert_not_called()

    @mock.patch("smoketesting.utils.io.ensure_dir", side_effect=lambda d: d)
    def test_create_with_launch_failure(self, ensure_dir):
        factory = self.create_factory()
        self.launcher.start.side_effect = LaunchError("no java")

        with self.assertRaises(LaunchError):
            factory.create(self.node_config)

        self.prober.wait_until_ready.assert_not_called()
        self.client_factory.assert_not_called()

    @mock.patch("smoketesting.utils.io.ensure_dir", side_effect=lambda d: d)
    def test_close_all(self, ensure_dir):
        factory = self.create_factory()
        first = factory.create(self.node_config)
        second = factory.create(self.node_config)
        second.close()
        self.process.terminate.reset_mock()

        with factory:
            pass

        self.assertTrue(first.closed)
        self.process.terminate.assert_called_once_with(graceful=True)

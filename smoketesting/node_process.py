import logging
import os

from smoketesting import time
from smoketesting.config import HarnessConfig
from smoketesting.config_writer import ConfigWriter
from smoketesting.exceptions import NodeClosedError
from smoketesting.launchers.exception_handling_launcher import ExceptionHandlingLauncher
from smoketesting.launchers.local_process_launcher import LocalProcessLauncher
from smoketesting.node_dir_cleaner import NodeDirectoryCleaner
from smoketesting.readiness_prober import ReadinessProber
from smoketesting.rpc.client import RpcClient
from smoketesting.utils import io


class NodeProcess:
    """
    A running node that accepts RPC connections. Instances are created by ``NodeProcessFactory`` and own the node
    process until ``close()`` is called.
    """
    SHUTDOWN_TIMEOUT_SECONDS = 60

    def __init__(self, config, node_dir, process, client, cleaner=None, shutdown_timeout=SHUTDOWN_TIMEOUT_SECONDS):
        self.logger = logging.getLogger(__name__)
        self.config = config
        self.node_dir = node_dir
        self._process = process
        self._client = client
        self._cleaner = cleaner or NodeDirectoryCleaner()
        self.shutdown_timeout = shutdown_timeout
        self._closed = False

    @property
    def closed(self):
        return self._closed

    @property
    def pid(self):
        return self._process.pid

    def connect(self):
        """
        :return: A new RPC connection authenticated as the node's first user. The caller needs to close it.
        """
        if self._closed:
            raise NodeClosedError(f"Node [{self.config.common_name}] has already been closed.")
        user = self.config.rpc_user
        return self._client.start(user.username, user.password)

    def close(self):
        node_name = self.config.common_name
        if self._closed:
            self.logger.debug("Node [%s] has already been closed.", node_name)
            return
        self._closed = True

        self.logger.info("Stopping node [%s].", node_name)
        try:
            self._process.terminate(graceful=True)
            if not self._process.wait(self.shutdown_timeout):
                self.logger.warning("Node [%s] has not shutdown correctly within [%s] seconds.", node_name, self.shutdown_timeout)
                self._process.terminate(graceful=False)
        finally:
            self._cleaner.cleanup(node_name, self.node_dir)
        self.logger.info("Done shutting down node [%s].", node_name)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False

    def __repr__(self):
        return f"NodeProcess({self.config.common_name}, pid={self.pid})"


class NodeProcessFactory:
    """
    Creates nodes below ``harness_config.nodes_root``, one directory per node.
    """

    def __init__(self, harness_config=None, launcher=None, prober=None, config_writer=None, client_factory=RpcClient,
                 cleaner=None, clock=time.Clock):
        self.logger = logging.getLogger(__name__)
        self.harness_config = harness_config or HarnessConfig()
        self.launcher = launcher or ExceptionHandlingLauncher(LocalProcessLauncher(self.harness_config))
        self.prober = prober or ReadinessProber.from_config(self.harness_config, clock=clock)
        self.config_writer = config_writer or ConfigWriter()
        self.client_factory = client_factory
        self.cleaner = cleaner or NodeDirectoryCleaner(preserve=self.harness_config.preserve_node_dirs)
        self.nodes_dir = io.ensure_dir(self.harness_config.nodes_root)
        self._nodes = []

    def base_directory(self, node_config):
        return os.path.join(self.nodes_dir, node_config.common_name)

    def create(self, node_config):
        """
        Starts a node and waits until it accepts RPC connections.

        :param node_config: The ``NodeConfig`` of the node.
        :raises LaunchError: if the node could not be started. ``NodeDiedError`` and ``ReadinessTimeoutError`` are
                             raised if it started but never became ready. No node process is left running.
        :return: A ``NodeProcess`` which the caller needs to close.
        """
        node_dir = io.ensure_dir(self.base_directory(node_config))
        self.logger.info("Node directory: [%s]", node_dir)
        self.config_writer.write(node_config, node_dir)

        process = self.launcher.start(node_config, node_dir)
        try:
            client = self.client_factory(self.harness_config.rpc_host, node_config.rpc_port)
            self.prober.wait_until_ready(node_config, process, client)
        except BaseException:
            process.terminate(graceful=False)
            raise

        node = NodeProcess(node_config, node_dir, process, client, cleaner=self.cleaner,
                           shutdown_timeout=self.harness_config.shutdown_timeout)
        self._nodes.append(node)
        return node

    def close_all(self):
        """
        Closes all nodes created by this factory that have not been closed yet.
        """
        while self._nodes:
            node = self._nodes.pop()
            if not node.closed:
                node.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close_all()
        return False

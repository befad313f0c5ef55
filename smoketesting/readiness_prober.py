import logging

from smoketesting import time
from smoketesting.exceptions import NodeDiedError, ReadinessTimeoutError
from smoketesting.utils.periodic_waiter import PeriodicWaiter


class ReadinessProber:
    """
    Polls a freshly started node until it accepts an RPC connection with the credentials of its first user.
    """
    INITIAL_DELAY_SECONDS = 5
    PROBE_INTERVAL_SECONDS = 1
    READINESS_TIMEOUT_SECONDS = 120

    def __init__(self, initial_delay=INITIAL_DELAY_SECONDS, probe_interval=PROBE_INTERVAL_SECONDS,
                 timeout=READINESS_TIMEOUT_SECONDS, clock=time.Clock):
        self.logger = logging.getLogger(__name__)
        self.timeout = timeout
        self.waiter = PeriodicWaiter(probe_interval, timeout, initial_delay=initial_delay, clock=clock)

    @classmethod
    def from_config(cls, harness_config, clock=time.Clock):
        return cls(initial_delay=harness_config.initial_probe_delay,
                   probe_interval=harness_config.probe_interval,
                   timeout=harness_config.readiness_timeout,
                   clock=clock)

    def wait_until_ready(self, node_config, process, client):
        """
        Blocks until the node accepts RPC connections.

        :param node_config: The node's ``NodeConfig``. Its first user is used to connect.
        :param process: The ``NodeProcessHandle`` of the node.
        :param client: The RPC client for the node.
        :raises NodeDiedError: if the process exits before it became ready.
        :raises ReadinessTimeoutError: if the node did not become ready in time.
        """
        node_name = node_config.common_name
        self.logger.info("Waiting for node [%s] to accept RPC connections.", node_name)
        try:
            self.waiter.wait(self._probe, node_name, process, client, node_config.rpc_user)
        except TimeoutError as e:
            raise ReadinessTimeoutError(f"Failed to create RPC connection to node [{node_name}] "
                                        f"within [{self.timeout}] seconds.", e)
        self.logger.info("Node [%s] accepts RPC connections.", node_name)

    def _probe(self, node_name, process, client, user):
        if not process.is_alive():
            self.logger.error("Node [%s] has died.", node_name)
            raise NodeDiedError(f"Node [{node_name}] has died during startup with exit code [{process.exit_code}].",
                                exit_code=process.exit_code)
        try:
            connection = client.start(user.username, user.password)
        except Exception as e:
            self.logger.warning("Node [%s] not ready yet (Error: %s)", node_name, e)
            return False
        connection.close()
        return True

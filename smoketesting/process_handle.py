import logging

import psutil


class NodeProcessHandle:
    """
    Exclusive ownership of a single node process that has been spawned by this harness.
    """
    # how long to wait for the exit status after a forced termination
    REAP_TIMEOUT_SECONDS = 5

    def __init__(self, process, name):
        """
        :param process: A ``psutil.Popen`` instance.
        :param name: The name of the node, used for logging.
        """
        self.logger = logging.getLogger(__name__)
        self._process = process
        self.name = name

    @property
    def pid(self):
        return self._process.pid

    @property
    def exit_code(self):
        return self._process.returncode

    def is_alive(self):
        try:
            return self._process.poll() is None
        except psutil.NoSuchProcess:
            return False

    def terminate(self, graceful=True):
        """
        Sends SIGTERM (``graceful=True``) or SIGKILL to the process. Terminating a process that has already exited
        is a no-op.
        """
        if not self.is_alive():
            self.logger.debug("Node [%s] with PID [%s] has already exited.", self.name, self.pid)
            return
        try:
            if graceful:
                self.logger.info("kill -TERM node [%s] with PID [%s].", self.name, self.pid)
                self._process.terminate()
            else:
                self.logger.info("kill -KILL node [%s] with PID [%s].", self.name, self.pid)
                self._process.kill()
        except psutil.NoSuchProcess:
            self.logger.warning("No process found with PID [%s] for node [%s].", self.pid, self.name)
            return
        if not graceful and not self.wait(NodeProcessHandle.REAP_TIMEOUT_SECONDS):
            self.logger.warning("Node [%s] with PID [%s] is still running after kill -KILL.", self.name, self.pid)

    def wait(self, timeout):
        """
        :return: True iff the process has exited within ``timeout`` seconds, False otherwise.
        """
        try:
            self._process.wait(timeout)
            return True
        except psutil.TimeoutExpired:
            return False
        except psutil.NoSuchProcess:
            return True

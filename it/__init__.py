import os

from smoketesting.launchers.local_process_launcher import LocalProcessLauncher

FAKE_NODE = os.path.join(os.path.dirname(__file__), "resources", "fake_node.py")


class RecordingLauncher(LocalProcessLauncher):
    """Remembers the processes it started so tests can check that they are gone."""

    def __init__(self, harness_config):
        super().__init__(harness_config)
        self.processes = []

    def start(self, node_config, node_dir):
        process = super().start(node_config, node_dir)
        self.processes.append(process)
        return process

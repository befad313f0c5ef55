from abc import ABC, abstractmethod


class Launcher(ABC):
    """
    Launchers are used to start node processes for smoke tests.
    """

    @abstractmethod
    def start(self, node_config, node_dir):
        """
        Starts a node process and returns immediately without waiting for the node to become ready

        ;param node_config: A NodeConfig object describing the node
        ;param node_dir: The working directory of the node which already contains its configuration file
        ;return process: A NodeProcessHandle owning the started process
        """
        raise NotImplementedError

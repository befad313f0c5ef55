import logging
import os

from smoketesting.utils import io


class NodeDirectoryCleaner:
    """
    Deletes the large internal state that a node leaves behind in its working directory.
    """
    LARGE_SUBDIRECTORIES = ("artemis",)

    def __init__(self, preserve=False, subdirectories=LARGE_SUBDIRECTORIES):
        self.logger = logging.getLogger(__name__)
        self.preserve = preserve
        self.subdirectories = subdirectories

    def cleanup(self, node_name, node_dir):
        if self.preserve:
            self.logger.info("Preserving working directory [%s] of node [%s].", node_dir, node_name)
            return

        self.logger.info("Deleting Artemis directories of node [%s], because they're large!", node_name)
        for subdirectory in self.subdirectories:
            path = os.path.join(node_dir, subdirectory)
            try:
                io.delete_path(path)
            except OSError as e:
                self.logger.warning("Could not delete [%s] of node [%s]: %s", path, node_name, e)

import logging
import os

from smoketesting.utils.template_renderer import TemplateRenderer

NODE_CONFIG_FILE_NAME = "node.conf"


class ConfigWriter:
    def __init__(self, template_renderer=None):
        self.logger = logging.getLogger(__name__)
        self.template_renderer = template_renderer or TemplateRenderer()

    def write(self, node_config, node_dir):
        config_file = os.path.join(node_dir, NODE_CONFIG_FILE_NAME)
        self.logger.info("Writing configuration of node [%s] to [%s].", node_config.common_name, config_file)
        with open(config_file, "wt", encoding="utf-8") as f:
            f.write(node_config.to_text(self.template_renderer))
        return config_file

from smoketesting.exceptions import LaunchError
from smoketesting.launchers.launcher import Launcher


class ExceptionHandlingLauncher(Launcher):
    def __init__(self, launcher):
        self.launcher = launcher

    def start(self, node_config, node_dir):
        try:
            return self.launcher.start(node_config, node_dir)
        except LaunchError:
            raise
        except Exception as e:
            raise LaunchError(f"Starting node [{node_config.common_name}] in [{node_dir}] failed", e)

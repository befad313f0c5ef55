import logging
import os
import subprocess

import psutil

from smoketesting import java_resolver
from smoketesting.exceptions import LaunchError
from smoketesting.launchers.launcher import Launcher
from smoketesting.process_handle import NodeProcessHandle


class LocalProcessLauncher(Launcher):
    CACHE_DIR_ENV_VAR = "CAPSULE_CACHE_DIR"
    OUTPUT_FILE_NAME = "node-output.log"

    def __init__(self, harness_config, runtime_resolver=java_resolver.java_path):
        self.logger = logging.getLogger(__name__)
        self.harness_config = harness_config
        self.runtime_resolver = runtime_resolver

    def start(self, node_config, node_dir):
        node_name = node_config.common_name
        cmd = self._prepare_command()
        env = self._prepare_env(node_name)

        self.logger.info("Starting node [%s] in [%s].", node_name, node_dir)
        node_pid, process = self._start_process(node_name, cmd, node_dir, env)
        self.logger.info("Successfully started node [%s] with PID [%s].", node_name, node_pid)
        return NodeProcessHandle(process, node_name)

    def _prepare_command(self):
        artifact_path = self.harness_config.artifact_path
        if not artifact_path:
            raise LaunchError("No node artifact has been configured. Please set [artifact_path].")
        artifact_path = os.path.abspath(artifact_path)
        if not os.path.isfile(artifact_path):
            raise LaunchError(f"Node artifact [{artifact_path}] does not exist.")

        runtime_path = self.harness_config.runtime_path or self.runtime_resolver()
        if os.sep in runtime_path:
            runtime_path = os.path.abspath(runtime_path)
        return [runtime_path, *self.harness_config.runtime_args, artifact_path]

    def _prepare_env(self, node_name):
        env = dict(os.environ)
        # the node runs in its own directory, so relative paths would end up below it
        env[LocalProcessLauncher.CACHE_DIR_ENV_VAR] = os.path.abspath(self.harness_config.cache_dir)
        env.update(self.harness_config.extra_env)
        self.logger.debug("env for [%s]: %s", node_name, str(env))
        return env

    def _start_process(self, node_name, cmd, node_dir, env):
        output_file = os.path.join(node_dir, LocalProcessLauncher.OUTPUT_FILE_NAME)
        self.logger.debug("Starting node [%s] with command [%s].", node_name, " ".join(cmd))
        # the child keeps its own descriptor for the output file
        with open(output_file, "ab") as output:
            try:
                process = psutil.Popen(cmd, cwd=node_dir, env=env, stdin=subprocess.DEVNULL, stdout=output,
                                       stderr=subprocess.STDOUT)
            except OSError as e:
                raise LaunchError(f"Cannot start node [{node_name}] with command [{' '.join(cmd)}]: {e}", e)
        return process.pid, process

import socket
import sys

import pytest

from it import FAKE_NODE
from smoketesting.config import load_config
from smoketesting.models.node_config import NodeConfig, User


@pytest.fixture
def free_port():
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as s:
        s.bind(("127.0.0.1", 0))
        return s.getsockname()[1]


@pytest.fixture
def node_config(free_port):
    return NodeConfig(common_name="node-a", rpc_port=free_port, users=[User("user1", "pass1"), User("user2", "pass2")])


@pytest.fixture
def harness_config_for(tmp_path):
    def harness_config(mode="ready", node_env=None, **overrides):
        settings = {
            "artifact_path": FAKE_NODE,
            "runtime_path": sys.executable,
            "runtime_args": (),
            "nodes_root": str(tmp_path / "nodes"),
            "cache_dir": str(tmp_path / "capsule"),
            "initial_probe_delay": 0.1,
            "probe_interval": 0.1,
            "readiness_timeout": 20,
            "shutdown_timeout": 10,
            "extra_env": {"FAKE_NODE_MODE": mode, **(node_env or {})},
        }
        settings.update(overrides)
        return load_config(env={}, **settings)

    return harness_config

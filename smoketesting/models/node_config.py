import os
from dataclasses import dataclass
from typing import Optional, Tuple

from smoketesting import paths
from smoketesting.exceptions import ConfigError
from smoketesting.utils.template_renderer import TemplateRenderer

NODE_CONFIG_TEMPLATE = "node.conf.j2"


@dataclass(frozen=True)
class User:
    """An RPC user of a node"""

    username: str
    password: str
    permissions: Tuple[str, ...] = ()

    def __post_init__(self):
        if not self.username:
            raise ConfigError("RPC users need a non-empty username.")
        object.__setattr__(self, "permissions", tuple(self.permissions))


@dataclass(frozen=True)
class NetworkMapConfig:
    """The network map service a node registers with"""

    address: str
    legal_name: str


@dataclass(frozen=True)
class NodeConfig:
    """
    The configuration of a single node. The first entry in ``users`` is the credential the harness itself uses to
    check whether the node accepts RPC connections.
    """

    common_name: str
    rpc_port: int
    users: Tuple[User, ...]
    p2p_port: Optional[int] = None
    web_port: Optional[int] = None
    legal_name: Optional[str] = None
    extra_services: Tuple[str, ...] = ()
    network_map: Optional[NetworkMapConfig] = None
    host: str = "localhost"

    def __post_init__(self):
        if not self.common_name or os.sep in self.common_name or self.common_name in (".", ".."):
            raise ConfigError(f"Node name [{self.common_name}] must be a non-empty, single path component.")
        object.__setattr__(self, "users", tuple(self.users))
        object.__setattr__(self, "extra_services", tuple(self.extra_services))
        if not self.users:
            raise ConfigError(f"Node [{self.common_name}] needs at least one RPC user.")
        for name, port in (("rpc_port", self.rpc_port), ("p2p_port", self.p2p_port), ("web_port", self.web_port)):
            if port is not None and not 0 < port < 65536:
                raise ConfigError(f"Node [{self.common_name}] has an invalid {name} [{port}].")
        if self.legal_name is None:
            object.__setattr__(self, "legal_name", f"CN={self.common_name},O=R3,OU=corda,L=London,C=GB")

    @property
    def rpc_user(self):
        return self.users[0]

    def template_variables(self):
        return {
            "legal_name": self.legal_name,
            "host": self.host,
            "p2p_port": self.p2p_port,
            "rpc_port": self.rpc_port,
            "web_port": self.web_port,
            "extra_services": list(self.extra_services),
            "network_map": self.network_map,
            "users": self.users,
        }

    def to_text(self, template_renderer=None):
        """
        :return: The contents of ``node.conf`` for this node.
        """
        renderer = template_renderer or TemplateRenderer()
        return renderer.render_template_file(paths.resources(), self.template_variables(), NODE_CONFIG_TEMPLATE)

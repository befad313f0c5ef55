import json
import logging
import socket

from smoketesting.exceptions import RpcAuthenticationError, RpcCallError, RpcConnectionError


class RpcConnection:
    """
    An authenticated RPC connection to a node. Messages are JSON documents, one per line.
    """

    def __init__(self, sock, username):
        self.username = username
        self._sock = sock
        self._reader = sock.makefile("rb")
        self._closed = False

    def call(self, method, **params):
        if self._closed:
            raise RpcConnectionError(f"Cannot call [{method}] on a closed connection.")
        response = self.request({"type": "call", "method": method, "params": params})
        if "error" in response:
            raise RpcCallError(f"Call [{method}] failed: {response['error']}")
        return response.get("result")

    def request(self, message):
        """
        Sends ``message`` and returns the decoded response.
        """
        try:
            self._sock.sendall(json.dumps(message).encode("utf-8") + b"\n")
            line = self._reader.readline()
        except OSError as e:
            raise RpcConnectionError(f"Communication with node failed: {e}", e)
        if not line:
            raise RpcConnectionError("Node closed the connection.")
        try:
            response = json.loads(line)
        except ValueError as e:
            raise RpcConnectionError(f"Node sent an invalid response [{line!r}].", e)
        if not isinstance(response, dict):
            raise RpcConnectionError(f"Node sent an invalid response [{line!r}].")
        return response

    def close(self):
        if self._closed:
            return
        self._closed = True
        self._reader.close()
        self._sock.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class RpcClient:
    """
    Creates RPC connections to the node listening on ``host:port``.
    """
    CONNECT_TIMEOUT_SECONDS = 5

    def __init__(self, host, port, timeout=CONNECT_TIMEOUT_SECONDS):
        self.logger = logging.getLogger(__name__)
        self.host = host
        self.port = port
        self.timeout = timeout

    def start(self, username, password):
        """
        Opens a new connection and logs in.

        :raises RpcConnectionError: if the node cannot be reached.
        :raises RpcAuthenticationError: if the node rejected the credentials.
        :return: An ``RpcConnection`` that the caller needs to close.
        """
        try:
            sock = socket.create_connection((self.host, self.port), timeout=self.timeout)
        except OSError as e:
            raise RpcConnectionError(f"Cannot connect to [{self.host}:{self.port}]: {e}", e)

        connection = RpcConnection(sock, username)
        try:
            response = connection.request({"type": "login", "username": username, "password": password})
        except BaseException:
            connection.close()
            raise
        if response.get("status") != "ok":
            connection.close()
            raise RpcAuthenticationError(f"Login of user [{username}] at [{self.host}:{self.port}] failed: "
                                         f"{response.get('error', 'unknown error')}")
        self.logger.debug("User [%s] logged in at [%s:%s].", username, self.host, self.port)
        return connection

    def __repr__(self):
        return f"RpcClient({self.host}:{self.port})"


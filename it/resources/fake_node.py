#!/usr/bin/env python3
"""
A stand-in for a real node. It reads ``node.conf`` from its working directory and accepts RPC logins of the
configured users. The environment variable ``FAKE_NODE_MODE`` selects its behavior:

* ``ready`` (default): accepts RPC connections after ``FAKE_NODE_STARTUP_DELAY`` seconds.
* ``never_ready``: stays alive but never opens the RPC port.
* ``exit``: exits immediately with exit code 3.
* ``ignore_sigterm``: like ``ready`` but ignores SIGTERM.
"""
import json
import os
import signal
import socketserver
import sys
import time


def _load_config():
    with open("node.conf", "rt", encoding="utf-8") as f:
        return json.load(f)


def _write_state():
    journal_dir = os.path.join("artemis", "journal", "bindings")
    os.makedirs(journal_dir, exist_ok=True)
    with open(os.path.join(journal_dir, "journal-1.bindings"), "wb") as f:
        f.write(b"\0" * 4096)
    with open("env.json", "wt", encoding="utf-8") as f:
        json.dump({"CAPSULE_CACHE_DIR": os.environ.get("CAPSULE_CACHE_DIR")}, f)


def _handler_for(users):
    class RpcHandler(socketserver.StreamRequestHandler):
        def handle(self):
            username = None
            for line in self.rfile:
                message = json.loads(line)
                if message.get("type") == "login":
                    if users.get(message.get("username")) == message.get("password"):
                        username = message["username"]
                        response = {"status": "ok"}
                    else:
                        response = {"status": "denied", "error": "invalid credentials"}
                elif username is None:
                    response = {"error": "not logged in"}
                elif message.get("method") == "whoami":
                    response = {"result": username}
                elif message.get("method") == "ping":
                    response = {"result": "pong"}
                else:
                    response = {"error": f"unknown method {message.get('method')}"}
                self.wfile.write(json.dumps(response).encode("utf-8") + b"\n")

    return RpcHandler


class RpcServer(socketserver.ThreadingTCPServer):
    allow_reuse_address = True
    daemon_threads = True


def main():
    mode = os.environ.get("FAKE_NODE_MODE", "ready")
    if mode == "exit":
        return 3

    config = _load_config()
    _write_state()
    if mode == "ignore_sigterm":
        signal.signal(signal.SIGTERM, signal.SIG_IGN)

    if mode == "never_ready":
        while True:
            time.sleep(1)

    time.sleep(float(os.environ.get("FAKE_NODE_STARTUP_DELAY", "0")))
    host, port = config["rpcAddress"].rsplit(":", 1)
    users = {user["username"]: user["password"] for user in config["rpcUsers"]}
    with RpcServer((host, int(port)), _handler_for(users)) as server:
        server.serve_forever()
    return 0


if __name__ == "__main__":
    sys.exit(main())

# SPDX-License-Identifier: Apache-2.0
#
# The OpenSearch Contributors require contributions made to
# this file be licensed under the Apache-2.0 license or a
# compatible open source license.
# Modifications Copyright OpenSearch Contributors. See
# GitHub history for details.
# Licensed to Elasticsearch B.V. under one or more contributor
# license agreements. See the NOTICE file distributed with
# this work for additional information regarding copyright
# ownership. Elasticsearch B.V. licenses this file to you under
# the Apache License, Version 2.0 (the "License"); you may
# not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#	http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing,
# software distributed under the License is distributed on an
# "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY
# KIND, either express or implied.  See the License for the
# specific language governing permissions and limitations
# under the License.


class SmokeTestError(Exception):
    """
    Base class for all smoke test harness exceptions
    """

    def __init__(self, message, cause=None):
        super().__init__(message, cause)
        self.message = message
        self.cause = cause

    def __repr__(self):
        return self.message

    def __str__(self):
        return self.message


class LaunchError(SmokeTestError):
    """
    Thrown whenever there was a problem launching a node
    """


class NodeDiedError(LaunchError):
    """
    Thrown when the node process exits before it accepted an RPC connection
    """

    def __init__(self, message, exit_code=None, cause=None):
        super().__init__(message, cause)
        self.exit_code = exit_code


class ReadinessTimeoutError(LaunchError):
    """
    Thrown when the node process is still alive but did not accept an RPC connection in time
    """


class NodeClosedError(SmokeTestError):
    """
    Thrown when a node is used after it has been closed
    """


class SystemSetupError(SmokeTestError):
    """
    Thrown when a user did something wrong, e.g. the node artifact is missing or no Java runtime is installed
    """


class ConfigError(SmokeTestError):
    pass


class InvalidSyntax(SmokeTestError):
    pass


class RpcError(SmokeTestError):
    """
    Base class for errors talking to a node via RPC
    """


class RpcConnectionError(RpcError):
    pass


class RpcAuthenticationError(RpcError):
    pass


class RpcCallError(RpcError):
    pass

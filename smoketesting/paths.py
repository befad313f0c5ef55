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
import datetime
import os

BUILD_DIR = "build"


def smoketesting_root():
    return os.path.dirname(os.path.realpath(__file__))


def resources():
    return os.path.join(smoketesting_root(), "resources")


def current_time_string():
    return datetime.datetime.now().strftime("%Y%m%d%H%M%S")


def default_nodes_root():
    """
    :return: A fresh, timestamped directory below the build directory that holds one subdirectory per node.
    """
    return os.path.join(BUILD_DIR, current_time_string())


def default_cache_dir():
    return os.path.join(BUILD_DIR, "capsule")

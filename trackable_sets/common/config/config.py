#
# Copyright 2022 European Centre for Medium-Range Weather Forecasts (ECMWF)
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#
# In applying this licence, ECMWF does not waive the privileges and immunities
# granted to it by virtue of its status as an intergovernmental organisation nor
# does it submit to any jurisdiction.
#

import copy
import logging
import os

import pykwalify
import yaml
from pykwalify.core import Core
from pykwalify.errors import SchemaError

from .. import config as trackable_config
from ..exceptions import InvalidConfig

DEFAULT_CONFIG_FILE = "/etc/trackable-sets/config.yaml"
SCHEMA_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), "schema.yaml")


def _merge(a, b):
    "merges dict b into dict a"

    a = copy.deepcopy(a)
    b = copy.deepcopy(b)

    if not isinstance(b, dict):
        if isinstance(a, list) and isinstance(b, list):
            return a + b
        return b

    for key in b:
        if key in a:
            if b[key] is None:
                del a[key]
            elif isinstance(a[key], dict) and isinstance(b[key], dict):
                a[key] = _merge(a[key], b[key])
            elif isinstance(a[key], list) and isinstance(b[key], list):
                a[key] = a[key] + b[key]
            else:
                a[key] = b[key]
        elif b[key] is not None:
            a[key] = b[key]
    return a


def merge(*configs):
    new = {}
    for c in configs:
        new = _merge(new, c)
    return new


class ConfigParser:
    def read(self, config_files=None):
        """Read the configuration from YAML files and return it as a dict"""
        self._read_yaml(config_files)
        self.config = self._interpolate_env_vars(self.config)
        self._check_schema()
        trackable_config.global_config = self.config
        return self.config

    def list_config_files(self):
        """List the files that were used by read()"""
        return self.yaml_files

    def dump(self):
        """Dumps the final, merged config created by read()"""
        return yaml.safe_dump(self.config, default_flow_style=False)

    def _read_yaml(self, config_files=None):
        """Reads and merges yaml config files"""

        self.yaml_files = []

        # The system-wide file comes first so that explicit files overlay it
        if os.path.isfile(DEFAULT_CONFIG_FILE):
            self.yaml_files.append(DEFAULT_CONFIG_FILE)

        self.yaml_files.extend(config_files or [])

        if len(self.yaml_files) == 0:
            raise InvalidConfig("No configuration files found, expected {}".format(DEFAULT_CONFIG_FILE))

        configs = []
        for c in self.yaml_files:
            try:
                with open(c, "r") as f:
                    documents = list(yaml.safe_load_all(f))
            except OSError as e:
                raise InvalidConfig("Could not read configuration file {}: {}".format(c, e)) from e
            except yaml.YAMLError as e:
                raise InvalidConfig("Could not parse configuration file {}: {}".format(c, e)) from e
            for doc in documents:
                if doc is None:
                    continue
                if not isinstance(doc, dict):
                    raise InvalidConfig("Configuration file {} must contain a mapping".format(c))
                configs.append(doc)
        self.config = merge(*configs)

    def _check_schema(self):
        """Validates the configuration against the schema"""

        developer = self.config.get("developer")
        if isinstance(developer, dict) and developer.get("disable_schema_check", False):
            return

        schema_check = Core(source_data=self.config, schema_files=[SCHEMA_FILE], extensions=[])

        try:
            pykwalify.init_logging(0)
            schema_check.validate(raise_exception=True)
        except SchemaError as e:
            logging.error(
                "Configuration did not validate against schema:\n - {}".format(
                    "\n - ".join(schema_check.validation_errors)
                )
            )
            raise InvalidConfig(
                "Configuration did not validate against schema: {}".format(", ".join(schema_check.validation_errors))
            ) from e

    def _interpolate_env_vars(self, config):
        """Resolves environment variables in the config file"""

        for k, v in config.items() if isinstance(config, dict) else enumerate(config):
            if isinstance(v, (list, dict)):
                config[k] = self._interpolate_env_vars(v)
            elif isinstance(v, str):
                config[k] = os.path.expanduser(os.path.expandvars(v))
        return config

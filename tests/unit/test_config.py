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

import os

import pytest
import yaml

import trackable_sets.common.config as trackable_config
from trackable_sets.common.exceptions import InvalidConfig


def write_yaml(tmp_path, name, content):
    path = tmp_path / name
    path.write_text(content if isinstance(content, str) else yaml.dump(content))
    return str(path)


class Test:
    def setup_method(self, method):
        parser = trackable_config.ConfigParser()
        self.config = parser.read(pytest.basic_config)

    def test_config_exists(self):
        assert self.config is not None
        assert self.config["logging"]["level"] == "INFO"

    def test_global_config_is_set(self):
        assert trackable_config.global_config is self.config

    def test_config_reset(self):
        self.config["test_reset"] = "test"
        self.config["logging"]["hello"] = "world"
        self.config = trackable_config.ConfigParser().read(pytest.basic_config)
        assert "test_reset" not in self.config
        assert "hello" not in self.config["logging"]

    def test_config_holds_only_file_content(self):
        assert set(self.config) == {"logging"}
        assert "developer" not in trackable_config.global_config

    def test_config_merge(self):
        merge = trackable_config.merge

        a = {"hello": "world"}
        b = {"hello": "world2"}
        c = {"bonjour": "le monde"}

        assert merge(a, b) == b
        assert merge(a, b) != a
        assert "bonjour" in merge(a, b, c)
        assert "hello" in merge(a, b, c)

        d = {"hello": ["world"]}
        e = {"hello": ["le monde"]}

        assert merge(d, e)["hello"] == ["world", "le monde"]

        f = {"one": {"two": {"three": 123}}}
        g = {"one": {"two": {"four": 456}}}

        assert merge(f, g)["one"]["two"] == {"three": 123, "four": 456}

    def test_config_merge_none_deletes(self):
        merged = trackable_config.merge({"a": 1, "b": 2}, {"a": None})
        assert merged == {"b": 2}

    def test_files_are_overlaid_in_order(self, tmp_path):
        first = write_yaml(tmp_path, "first.yaml", {"logging": {"level": "INFO", "mode": "json"}})
        second = write_yaml(tmp_path, "second.yaml", {"logging": {"level": "DEBUG"}})

        parser = trackable_config.ConfigParser()
        config = parser.read([first, second])

        assert config["logging"] == {"level": "DEBUG", "mode": "json"}
        assert parser.list_config_files()[-2:] == [first, second]
        assert yaml.safe_load(parser.dump()) == config

    def test_env_vars_interpolated(self, tmp_path, monkeypatch):
        monkeypatch.setenv("TRACKABLE_SETS_APP", "syncer")
        path = write_yaml(tmp_path, "env.yaml", "logging:\n  defaults:\n    app: ${TRACKABLE_SETS_APP}\n")

        config = trackable_config.ConfigParser().read([path])
        assert config["logging"]["defaults"]["app"] == "syncer"

    def test_schema_violation(self, tmp_path):
        path = write_yaml(tmp_path, "bad.yaml", {"logging": {"level": "LOUD"}})
        with pytest.raises(InvalidConfig):
            trackable_config.ConfigParser().read([path])

    def test_schema_check_can_be_disabled(self, tmp_path):
        path = write_yaml(
            tmp_path,
            "bad.yaml",
            {"developer": {"disable_schema_check": True}, "logging": {"level": "LOUD"}},
        )
        config = trackable_config.ConfigParser().read([path])
        assert config["logging"]["level"] == "LOUD"

    def test_not_a_mapping(self, tmp_path):
        path = write_yaml(tmp_path, "list.yaml", "- one\n- two\n")
        with pytest.raises(InvalidConfig):
            trackable_config.ConfigParser().read([path])

    def test_no_config_files(self):
        if os.path.isfile(trackable_config.config.DEFAULT_CONFIG_FILE):
            pytest.skip("system configuration file present")
        with pytest.raises(InvalidConfig):
            trackable_config.ConfigParser().read()

    def test_developer_not_a_mapping(self, tmp_path):
        path = write_yaml(tmp_path, "developer.yaml", "developer: yes_please\n")
        with pytest.raises(InvalidConfig):
            trackable_config.ConfigParser().read([path])

    def test_missing_config_file(self, tmp_path):
        with pytest.raises(InvalidConfig):
            trackable_config.ConfigParser().read([str(tmp_path / "absent.yaml")])

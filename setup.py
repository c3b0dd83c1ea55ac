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

import io
import re

from setuptools import find_packages, setup

__version__ = re.search(
    r'__version__\s*=\s*[\'"]([^\'"]*)[\'"]',  # It excludes inline comment too
    io.open("trackable_sets/version.py", encoding="utf_8_sig").read(),
).group(1)

with open("requirements.txt") as f:
    requirements = f.read().splitlines()

setup(
    name="trackable_sets",
    version=__version__,
    description="Generic sets with tracking of pending additions and removals.",
    packages=find_packages(include=["trackable_sets", "trackable_sets.*"]),
    install_requires=requirements,
    extras_require={"test": ["pytest"]},
    package_data={"trackable_sets.common.config": ["schema.yaml"]},
    zip_safe=False,
    include_package_data=True,
)

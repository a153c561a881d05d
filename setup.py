# Copyright The pstmt Authors
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


"""
Setup to be able to build the pstmt library.
"""
# Standard
import os

# Third Party
import setuptools

# get version of library
PSTMT_VERSION = os.getenv("PSTMT_VERSION", "0.1.0")

# base directory containing pstmt (location of this file)
base_dir = os.path.dirname(os.path.realpath(__file__))

# read requirements from file
with open(os.path.join(base_dir, "requirements.txt"), encoding="utf-8") as filehandle:
    requirements = filehandle.read().splitlines()

with open(
    os.path.join(base_dir, "requirements-test.txt"), encoding="utf-8"
) as filehandle:
    test_requirements = filehandle.read().splitlines()

setuptools.setup(
    name="pstmt",
    author="pstmt",
    version=PSTMT_VERSION,
    python_requires=">=3.8",
    license="Apache-2.0",
    description="Data model and validator for machine-learning problem statements: "
    "tasks, their label and weight semantics, objectives, metrics and "
    "meta-optimization targets",
    install_requires=requirements,
    extras_require={"test": test_requirements},
    packages=setuptools.find_packages(include=("pstmt*",)),
    package_data={"pstmt": [os.path.join("config", "config.yml")]},
    include_package_data=True,
    entry_points={"console_scripts": ["pstmt-lint=pstmt.lint:main"]},
)

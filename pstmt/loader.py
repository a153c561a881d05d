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

"""Loaders that build problem statements from hand-authored yaml or json files.

A namespace file either holds the namespace message itself:

    problem_statements:
      churn:
        tasks: [...]

or the bare mapping from statement name to statement.
"""

# Standard
from typing import Any, Dict
import json
import os

# Third Party
import yaml

# First Party
import alog

# Local
from .core.data_model import ProblemStatement, ProblemStatementNamespace
from .core.exceptions import error_handler

log = alog.use_channel("LOADER")
error = error_handler.get(log)

YAML_EXTENSIONS = (".yml", ".yaml")
JSON_EXTENSIONS = (".json",)


def load_problem_statement(path: str) -> ProblemStatement:
    """Load a single problem statement from a yaml or json file

    Args:
        path (str): Path to the file

    Returns:
        statement (ProblemStatement): The loaded statement
    """
    statement = ProblemStatement.from_dict(_read_mapping(path))
    _check_task_types(statement, "ProblemStatement")
    return statement


def load_namespace(path: str) -> ProblemStatementNamespace:
    """Load a problem statement namespace from a yaml or json file

    Args:
        path (str): Path to the file

    Returns:
        namespace (ProblemStatementNamespace): The loaded namespace
    """
    content = _read_mapping(path)
    if set(content) != {"problem_statements"}:
        content = {"problem_statements": content}
    namespace = ProblemStatementNamespace.from_dict(content)
    for name, statement in namespace.items():
        _check_task_types(
            statement, "ProblemStatementNamespace.problem_statements[{}]".format(name)
        )
    log.debug("Loaded %d problem statement(s) from %s", len(namespace), path)
    return namespace


## Implementation Details ######################################################


def _read_mapping(path: str) -> Dict[str, Any]:
    error.type_check("<PST11820394E>", str, os.PathLike, path=path)
    error.file_check("<PST11820405E>", path)
    extension = os.path.splitext(str(path))[1].lower()
    error.value_check(
        "<PST11820416E>",
        extension in YAML_EXTENSIONS + JSON_EXTENSIONS,
        "unsupported file extension {} for {}",
        extension,
        path,
    )

    log.debug2("Reading %s", path)
    with open(path, encoding="utf-8") as handle:
        try:
            if extension in JSON_EXTENSIONS:
                content = json.load(handle)
            else:
                content = yaml.safe_load(handle)
        except (json.JSONDecodeError, yaml.YAMLError) as ex:
            error(
                "<PST11820427E>",
                ValueError("could not parse {}: {}".format(path, ex)),
                ex,
            )

    if content is None:
        content = {}
    if not isinstance(content, dict):
        error(
            "<PST11820438E>",
            ValueError(
                "expected a mapping at the top level of {}, got {}".format(
                    path, type(content).__name__
                )
            ),
        )
    return content


def _check_task_types(statement: ProblemStatement, path: str):
    """Every task of a hand-authored statement must declare its type"""
    for idx, task in enumerate(statement.tasks):
        if task.type is None:
            error(
                "<PST11820449E>",
                ValueError("{}.tasks[{}].type: a task needs a type".format(path, idx)),
            )

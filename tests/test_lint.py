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

"""Tests for the problem statement lint command"""

# Standard
import json
import os

# Local
from pstmt import lint
from tests.conftest import FIXTURES_DIR, dump_yml, temp_config

NAMESPACE_FILE = os.path.join(FIXTURES_DIR, "namespace.yml")
BROKEN_NAMESPACE_FILE = os.path.join(FIXTURES_DIR, "broken_namespace.yml")


def test_clean_namespace(capsys):
    assert lint.main([NAMESPACE_FILE]) == lint.EXIT_OK
    assert capsys.readouterr().out == ""


def test_namespace_with_violations(capsys):
    assert lint.main([BROKEN_NAMESPACE_FILE]) == lint.EXIT_VIOLATIONS
    lines = capsys.readouterr().out.splitlines()
    assert lines == [
        "feed: MalformedType at tasks[0].type: multiple task types populated: "
        "binary_classification, one_dimensional_regression",
        "feed: DuplicateTaskName at tasks[1].name: "
        "task name 'click' is already used by tasks[0]",
        "feed: InconsistentTaskWeights at tasks: task_weight is set on tasks[0] "
        "but not on tasks[1]; set it on all tasks or none",
        "feed: UnresolvedTaskReference at meta_optimization_target[0].task_name: "
        "no task named 'ghost'",
        "feed: UnresolvedNamespaceReference at implements[0].name: "
        "no problem statement named 'missing' in the namespace",
    ]


def test_json_output(capsys):
    assert lint.main([BROKEN_NAMESPACE_FILE, "--json"]) == lint.EXIT_VIOLATIONS
    results = json.loads(capsys.readouterr().out)
    assert list(results) == ["feed"]
    assert [entry["kind"] for entry in results["feed"]] == [
        "MalformedType",
        "DuplicateTaskName",
        "InconsistentTaskWeights",
        "UnresolvedTaskReference",
        "UnresolvedNamespaceReference",
    ]


def test_json_output_clean(capsys):
    assert lint.main([NAMESPACE_FILE, "-j"]) == lint.EXIT_OK
    assert json.loads(capsys.readouterr().out) == {}


def test_require_tasks(capsys):
    assert (
        lint.main([BROKEN_NAMESPACE_FILE, "--require-tasks", "-j"])
        == lint.EXIT_VIOLATIONS
    )
    results = json.loads(capsys.readouterr().out)
    assert results["empty"] == [
        {
            "kind": "MissingTasks",
            "path": "tasks",
            "message": "a problem statement needs at least one task",
        }
    ]


def test_require_problem_statements(tmp_path, capsys):
    path = os.path.join(str(tmp_path), "empty.yml")
    dump_yml({}, path)
    assert lint.main([path]) == lint.EXIT_OK
    assert lint.main([path, "--require-problem-statements"]) == lint.EXIT_VIOLATIONS
    assert capsys.readouterr().out.splitlines() == [
        "<namespace>: EmptyNamespace at problem_statements: "
        "a namespace needs at least one problem statement"
    ]


def test_environments(capsys):
    assert lint.main([NAMESPACE_FILE, "-e", "TRAINING"]) == lint.EXIT_OK
    assert (
        lint.main([NAMESPACE_FILE, "-e", "SERVING", "-e", "EVAL"])
        == lint.EXIT_VIOLATIONS
    )
    assert capsys.readouterr().out.splitlines() == [
        "feed: UnknownEnvironment at environment: "
        "environment 'TRAINING' is not one of ['EVAL', 'SERVING']"
    ]


def test_config_file(tmp_path, capsys):
    config_path = os.path.join(str(tmp_path), "config.yml")
    dump_yml({"validation": {"known_environments": ["SERVING"]}}, config_path)
    with temp_config({}):
        assert lint.main([NAMESPACE_FILE, "-c", config_path]) == lint.EXIT_VIOLATIONS
    assert "UnknownEnvironment" in capsys.readouterr().out


def test_missing_file(tmp_path, capsys):
    path = os.path.join(str(tmp_path), "missing.yml")
    assert lint.main([path]) == lint.EXIT_LOAD_ERROR
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "missing.yml" in captured.err


def test_malformed_file(tmp_path, capsys):
    path = os.path.join(str(tmp_path), "namespace.yml")
    dump_yml({"feed": {"tasks": "not a list"}}, path)
    assert lint.main([path]) == lint.EXIT_LOAD_ERROR
    assert "expected a list" in capsys.readouterr().err


def test_task_without_type(tmp_path, capsys):
    path = os.path.join(str(tmp_path), "namespace.yml")
    dump_yml({"feed": {"tasks": [{"name": "click"}]}}, path)
    assert lint.main([path]) == lint.EXIT_LOAD_ERROR
    assert "problem_statements[feed].tasks[0].type" in capsys.readouterr().err


def test_null_problem_statement(tmp_path, capsys):
    path = os.path.join(str(tmp_path), "namespace.yml")
    dump_yml({"feed": None}, path)
    assert lint.main([path]) == lint.EXIT_LOAD_ERROR
    assert "problem_statements[feed]: expected ProblemStatement, got null" in (
        capsys.readouterr().err
    )


def test_lint_function_omits_clean_statements():
    results = lint.lint(BROKEN_NAMESPACE_FILE, require_tasks=False)
    assert list(results) == ["feed"]

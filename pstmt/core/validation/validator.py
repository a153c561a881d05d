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

"""Validation of problem statements.

Validation follows lint semantics rather than parse semantics: every structural
inconsistency found in a statement is reported as a Violation instead of
stopping at the first one. Only programming errors, such as passing something
that is not a ProblemStatement or a Task without a type, raise.
"""

# Standard
from collections import abc
from typing import Dict, Iterable, List, Mapping, Optional, Set, Union

# First Party
import alog

# Local
from ...config import get_config
from ..data_model import (
    MetaOptimizationTarget,
    ProblemStatement,
    ProblemStatementNamespace,
    ProblemStatementReference,
    Task,
    Type,
)
from ..exceptions import MalformedTypeError, error_handler
from .violation import Violation, ViolationKind

log = alog.use_channel("VALID")
error = error_handler.get(log)

NamespaceView = Union[ProblemStatementNamespace, Mapping[str, ProblemStatement]]


## Public ######################################################################


def validate(
    statement: ProblemStatement,
    namespace: Optional[NamespaceView] = None,
    *,
    environments: Optional[Iterable[str]] = None,
) -> List[Violation]:
    """Validate a single problem statement

    Args:
        statement (ProblemStatement): The statement to validate
        namespace (Optional[NamespaceView]): The namespace enclosing the
            statement. When given, implements references are resolved against
            its keys.
        environments (Optional[Iterable[str]]): Declared environment names.
            Defaults to validation.known_environments from the config. When
            empty, the environment is not checked.

    Returns:
        violations (List[Violation]): Every violation found, in validation
            order. Empty if the statement is valid.
    """
    error.type_check("<PST73641590E>", ProblemStatement, statement=statement)
    error.type_check_all("<PST73641601E>", Task, tasks=statement.tasks)
    error.type_check_all(
        "<PST73641612E>",
        MetaOptimizationTarget,
        meta_optimization_target=statement.meta_optimization_target,
    )
    error.type_check_all(
        "<PST73641623E>", ProblemStatementReference, implements=statement.implements
    )
    namespace_names = _namespace_names(namespace)
    known_environments = _known_environments(environments)

    violations = []
    violations.extend(_check_task_types(statement))
    violations.extend(_check_task_names(statement))
    violations.extend(_check_task_weights(statement))
    violations.extend(_check_meta_optimization_targets(statement))
    if namespace_names is not None:
        violations.extend(_check_implements(statement, namespace_names))
    if known_environments:
        violations.extend(_check_environment(statement, known_environments))
    _note_multi_objective_weights(statement)

    log.debug2("Found %d violation(s)", len(violations))
    return violations


def validate_all(
    namespace: NamespaceView,
    *,
    environments: Optional[Iterable[str]] = None,
) -> Dict[str, List[Violation]]:
    """Validate every problem statement in a namespace against that namespace

    Args:
        namespace (NamespaceView): The namespace to validate
        environments (Optional[Iterable[str]]): Declared environment names,
            see validate

    Returns:
        violations (Dict[str, List[Violation]]): The violations of each
            statement keyed by statement name, in namespace order
    """
    statements = namespace_statements(namespace)
    if environments is not None:
        environments = list(environments)
    with alog.ContextTimer(
        log.debug, "Validated %d problem statement(s) in ", len(statements)
    ):
        results = {}
        for name, statement in statements.items():
            with alog.ContextLog(log.debug2, "Validating %s", name):
                results[name] = validate(
                    statement, statements, environments=environments
                )
    n_invalid = sum(1 for violations in results.values() if violations)
    if n_invalid:
        log.info(
            "<PST20871455I>",
            "%d of %d problem statement(s) have violations",
            n_invalid,
            len(results),
        )
    return results


def namespace_statements(namespace: NamespaceView) -> Mapping[str, ProblemStatement]:
    """Get the name to statement mapping behind a namespace view"""
    if isinstance(namespace, ProblemStatementNamespace):
        return namespace.problem_statements
    error.type_check("<PST94410723E>", abc.Mapping, namespace=namespace)
    return namespace


## Implementation Details ######################################################


def _namespace_names(namespace: Optional[NamespaceView]) -> Optional[Set[str]]:
    if namespace is None:
        return None
    return set(namespace_statements(namespace))


def _known_environments(environments: Optional[Iterable[str]]) -> Set[str]:
    if environments is None:
        environments = get_config().validation.known_environments or []
    return set(environments)


def _malformed_type(type_: Type, path: str) -> Optional[Violation]:
    """Inspect the task type union the same way active_task_type does without
    raising
    """
    populated = type_.populated_oneof_fields("task_type")
    if len(populated) == 1:
        return None
    return Violation(
        ViolationKind.MALFORMED_TYPE, path, MalformedTypeError(populated).reason
    )


def _check_task_types(statement: ProblemStatement) -> List[Violation]:
    violations = []
    for idx, task in enumerate(statement.tasks):
        path = "tasks[{}].type".format(idx)
        # Raised even when enable_error_checks is off
        if task.type is None:
            error("<PST28514764E>", TypeError("{} is not set".format(path)))
        error.type_check("<PST28514742E>", Type, **{path: task.type})
        violation = _malformed_type(task.type, path)
        if violation:
            violations.append(violation)
    for idx, target in enumerate(statement.meta_optimization_target):
        if target.type is None:
            continue
        path = "meta_optimization_target[{}].type".format(idx)
        error.type_check("<PST28514753E>", Type, **{path: target.type})
        violation = _malformed_type(target.type, path)
        if violation:
            violations.append(violation)
    return violations


def _check_task_names(statement: ProblemStatement) -> List[Violation]:
    violations = []
    first_seen = {}
    for idx, task in enumerate(statement.tasks):
        if task.name is None:
            continue
        if task.name in first_seen:
            violations.append(
                Violation(
                    ViolationKind.DUPLICATE_TASK_NAME,
                    "tasks[{}].name".format(idx),
                    "task name '{}' is already used by tasks[{}]".format(
                        task.name, first_seen[task.name]
                    ),
                )
            )
        else:
            first_seen[task.name] = idx
    return violations


def _check_task_weights(statement: ProblemStatement) -> List[Violation]:
    weighted = [
        idx for idx, task in enumerate(statement.tasks) if task.task_weight is not None
    ]
    if not weighted or len(weighted) == len(statement.tasks):
        return []
    unweighted = [idx for idx in range(len(statement.tasks)) if idx not in weighted]
    return [
        Violation(
            ViolationKind.INCONSISTENT_TASK_WEIGHTS,
            "tasks",
            "task_weight is set on {} but not on {}; set it on all tasks or none".format(
                ", ".join("tasks[{}]".format(idx) for idx in weighted),
                ", ".join("tasks[{}]".format(idx) for idx in unweighted),
            ),
        )
    ]


def _check_meta_optimization_targets(statement: ProblemStatement) -> List[Violation]:
    violations = []
    task_names = set(statement.task_names())
    for idx, target in enumerate(statement.meta_optimization_target):
        if target.task_name in task_names:
            continue
        if target.task_name is None:
            message = "task_name is not set"
        else:
            message = "no task named '{}'".format(target.task_name)
        violations.append(
            Violation(
                ViolationKind.UNRESOLVED_TASK_REFERENCE,
                "meta_optimization_target[{}].task_name".format(idx),
                message,
            )
        )
    return violations


def _check_implements(
    statement: ProblemStatement, namespace_names: Set[str]
) -> List[Violation]:
    violations = []
    for idx, reference in enumerate(statement.implements):
        if reference.which_oneof("references") != "name":
            continue
        if reference.name not in namespace_names:
            violations.append(
                Violation(
                    ViolationKind.UNRESOLVED_NAMESPACE_REFERENCE,
                    "implements[{}].name".format(idx),
                    "no problem statement named '{}' in the namespace".format(
                        reference.name
                    ),
                )
            )
    return violations


def _check_environment(
    statement: ProblemStatement, known_environments: Set[str]
) -> List[Violation]:
    if statement.environment is None or statement.environment in known_environments:
        return []
    return [
        Violation(
            ViolationKind.UNKNOWN_ENVIRONMENT,
            "environment",
            "environment '{}' is not one of {}".format(
                statement.environment, sorted(known_environments)
            ),
        )
    ]


def _note_multi_objective_weights(statement: ProblemStatement):
    """Weights of a multi-objective statement are informational only"""
    if not statement.multi_objective:
        return
    for idx, target in enumerate(statement.meta_optimization_target):
        if target.weight is not None:
            log.debug(
                "meta_optimization_target[%d].weight is ignored for a "
                "multi_objective problem statement",
                idx,
            )

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

"""Opt-in, caller-level rules for problem statements.

The core validator accepts a statement without tasks and an empty namespace.
Tools that want to reject those can apply these policies on top of validate.
Arguments left as None fall back to validation.policies in the config.
"""

# Standard
from typing import Dict, List, Optional

# First Party
import alog

# Local
from ...config import get_config
from ..data_model import ProblemStatement
from ..exceptions import error_handler
from .validator import NamespaceView, namespace_statements
from .violation import Violation, ViolationKind

log = alog.use_channel("POLICY")
error = error_handler.get(log)

# Key used for namespace-level violations in apply_namespace_policies
NAMESPACE_KEY = ""


def apply_policies(
    statement: ProblemStatement, *, require_tasks: Optional[bool] = None
) -> List[Violation]:
    """Apply statement-level policies

    Args:
        statement (ProblemStatement): The statement to check
        require_tasks (Optional[bool]): Report MissingTasks when the
            statement has no tasks

    Returns:
        violations (List[Violation]): Policy violations, possibly empty
    """
    error.type_check("<PST51094376E>", ProblemStatement, statement=statement)
    if require_tasks is None:
        require_tasks = get_config().validation.policies.require_tasks

    violations = []
    if require_tasks and not statement.tasks:
        violations.append(
            Violation(
                ViolationKind.MISSING_TASKS,
                "tasks",
                "a problem statement needs at least one task",
            )
        )
    return violations


def apply_namespace_policies(
    namespace: NamespaceView,
    *,
    require_tasks: Optional[bool] = None,
    require_problem_statements: Optional[bool] = None,
) -> Dict[str, List[Violation]]:
    """Apply statement-level policies to every statement of a namespace, plus
    namespace-level policies

    Args:
        namespace (NamespaceView): The namespace to check
        require_tasks (Optional[bool]): See apply_policies
        require_problem_statements (Optional[bool]): Report EmptyNamespace
            under NAMESPACE_KEY when the namespace holds no statements

    Returns:
        violations (Dict[str, List[Violation]]): Violations keyed by statement
            name in namespace order
    """
    statements = namespace_statements(namespace)
    if require_problem_statements is None:
        require_problem_statements = (
            get_config().validation.policies.require_problem_statements
        )

    results = {}
    if require_problem_statements and not statements:
        log.debug("Namespace has no problem statements")
        results[NAMESPACE_KEY] = [
            Violation(
                ViolationKind.EMPTY_NAMESPACE,
                "problem_statements",
                "a namespace needs at least one problem statement",
            )
        ]
    for name, statement in statements.items():
        results[name] = apply_policies(statement, require_tasks=require_tasks)
    return results

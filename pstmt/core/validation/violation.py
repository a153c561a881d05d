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

"""Violations reported by problem statement validation"""

# Standard
from enum import Enum
import dataclasses


class ViolationKind(Enum):
    """The kind of structural inconsistency found in a problem statement"""

    # A Type union has zero or multiple populated variants
    MALFORMED_TYPE = "MalformedType"
    # Two or more tasks share a name within one statement
    DUPLICATE_TASK_NAME = "DuplicateTaskName"
    # Some but not all tasks have an explicit task_weight
    INCONSISTENT_TASK_WEIGHTS = "InconsistentTaskWeights"
    # A meta-optimization target names a task that does not exist
    UNRESOLVED_TASK_REFERENCE = "UnresolvedTaskReference"
    # An implements reference names a statement missing from the namespace
    UNRESOLVED_NAMESPACE_REFERENCE = "UnresolvedNamespaceReference"
    # The environment is not one of the declared environments
    UNKNOWN_ENVIRONMENT = "UnknownEnvironment"

    # Reported by opt-in policies only
    MISSING_TASKS = "MissingTasks"
    EMPTY_NAMESPACE = "EmptyNamespace"


@dataclasses.dataclass(frozen=True)
class Violation:
    """A single structural inconsistency. The path names the offending field,
    e.g. tasks[2].name or meta_optimization_target[0].task_name.
    """

    kind: ViolationKind
    path: str
    message: str

    def __str__(self):
        return "{} at {}: {}".format(self.kind.value, self.path, self.message)

    def to_dict(self) -> dict:
        return {"kind": self.kind.value, "path": self.path, "message": self.message}

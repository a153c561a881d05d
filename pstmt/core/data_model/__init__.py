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

"""Data model containing all entities of a problem statement.
"""

# Local
from . import base, enums
from .base import DataObjectBase, dataobject
from .enums import PredictionsOrder, TaskType
from .opaque import ObjectiveFunction, OpaqueMessage, PerformanceMetric
from .problem_statement import (
    DEFAULT_META_TARGET_WEIGHT,
    DEFAULT_N_PREDICTED_LABELS,
    BinaryClassification,
    MetaOptimizationTarget,
    MultiClassClassification,
    OneDimensionalRegression,
    ProblemStatement,
    ProblemStatementNamespace,
    ProblemStatementReference,
    Task,
    TopKClassification,
    Type,
    active_task_type,
)

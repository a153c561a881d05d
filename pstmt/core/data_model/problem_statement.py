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

"""Data model for problem statements: the tasks a model predicts, how they are
weighted and measured, and the targets used to compare models that implement
the same problem statement.
"""

# Standard
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

# First Party
import alog

# Local
from ..exceptions import MalformedTypeError, error_handler
from .base import DataObjectBase, dataobject
from .enums import PredictionsOrder, TaskType
from .opaque import ObjectiveFunction, PerformanceMetric

log = alog.use_channel("PSTMT")
error = error_handler.get(log)

# Weight of a meta-optimization target that does not specify one
DEFAULT_META_TARGET_WEIGHT = 1.0

# Number of labels a top-K classification predicts when unset
DEFAULT_N_PREDICTED_LABELS = 1


## Task types ##################################################################


@dataobject
class BinaryClassification(DataObjectBase):
    """Binary classification. The output is one of two possible class labels,
    encoded as the same type as the label column. This is the same as
    MultiClassClassification with n_classes = 2.
    """

    task_type = TaskType.BINARY_CLASSIFICATION

    label: str
    example_weight: Optional[str]


@dataobject
class MultiClassClassification(DataObjectBase):
    """Multi-class classification. The model predicts a single label out of
    n_classes possible label values. When n_classes is unset the number of
    classes is inferred from the data.
    """

    task_type = TaskType.MULTI_CLASS_CLASSIFICATION

    label: str
    example_weight: Optional[str]
    n_classes: Optional[int]


@dataobject
class TopKClassification(DataObjectBase):
    """Top-K classification. The output is a sequence of n_predicted_labels
    labels out of n_classes possible classes, all coming from the same label
    column, ordered according to predictions_order.
    """

    task_type = TaskType.TOP_K_CLASSIFICATION
    Order = PredictionsOrder

    label: str
    example_weight: Optional[str]
    n_classes: Optional[int]
    n_predicted_labels: Optional[int]
    predictions_order: Optional[PredictionsOrder]

    @property
    def effective_n_predicted_labels(self) -> int:
        if self.n_predicted_labels is None:
            return DEFAULT_N_PREDICTED_LABELS
        return self.n_predicted_labels

    @property
    def effective_predictions_order(self) -> PredictionsOrder:
        return self.predictions_order or PredictionsOrder.UNSPECIFIED


@dataobject
class OneDimensionalRegression(DataObjectBase):
    """Regression with a single real-valued output whose range depends on the
    objective
    """

    task_type = TaskType.ONE_DIMENSIONAL_REGRESSION

    label: str
    weight: Optional[str]


@dataobject(
    oneofs={
        "task_type": [
            "binary_classification",
            "one_dimensional_regression",
            "multi_class_classification",
            "top_k_classification",
        ]
    }
)
class Type(DataObjectBase):
    """The type of a head or meta-objective: its label, weight and output
    type. Exactly one of the task type fields should be set.
    """

    binary_classification: Optional[BinaryClassification]
    one_dimensional_regression: Optional[OneDimensionalRegression]
    multi_class_classification: Optional[MultiClassClassification]
    top_k_classification: Optional[TopKClassification]

    @property
    def task(self):
        """The populated task type message, or None if the union is malformed"""
        which = self.which_oneof("task_type")
        return getattr(self, which) if which else None


def active_task_type(type_: Type, path: Optional[str] = None) -> TaskType:
    """Get the discriminant of the task type populated in the given Type

    Args:
        type_ (Type): The union to inspect
        path (Optional[str]): Location of type_ used in the error message

    Returns:
        task_type (TaskType): The TaskType of the single populated variant

    Raises:
        MalformedTypeError: If zero or more than one variant is populated
    """
    error.type_check("<PST28514720E>", Type, type_=type_)
    populated = type_.populated_oneof_fields("task_type")
    if len(populated) != 1:
        error("<PST28514731E>", MalformedTypeError(populated, path))
    return getattr(type_, populated[0]).task_type


## Problem statement ###########################################################


@dataobject
class Task(DataObjectBase):
    """A single output (head) of a model and all its properties. Tasks within
    the same ProblemStatement should have unique names.
    """

    type: Type
    name: str
    # Weight of this head relative to the others when computing the loss.
    # Either every task of a statement sets it or none does.
    task_weight: Optional[float]
    objective_function: Optional[ObjectiveFunction]
    # Monitored and reported, but not optimized
    performance_metric: Sequence[PerformanceMetric]


@dataobject
class MetaOptimizationTarget(DataObjectBase):
    """A target for an external meta optimizer (e.g. a hyperparameter search)
    used to compare models that implement the same problem statement
    """

    task_name: str
    # Overrides the type of the task named by task_name
    type: Optional[Type]
    performance_metric: Optional[PerformanceMetric]
    # Ignored when the problem statement is multi_objective
    weight: Optional[float]

    @property
    def effective_weight(self) -> float:
        if self.weight is None:
            return DEFAULT_META_TARGET_WEIGHT
        return self.weight

    def resolve_type(self, statement: "ProblemStatement") -> Optional[Type]:
        """Get the type of this target: the override if set, otherwise the
        type of the referenced task in statement (None if it does not resolve)
        """
        if self.type is not None:
            return self.type
        task = statement.get_task(self.task_name)
        return task.type if task is not None else None


@dataobject(oneofs={"references": ["name"]})
class ProblemStatementReference(DataObjectBase):
    """A reference to another problem statement in the same namespace"""

    # Relationship between the two problem statements
    description: Optional[str]
    name: Optional[str]


@dataobject
class ProblemStatement(DataObjectBase):
    """The complete description of what a model is meant to predict and how
    success is measured.

    Repeated meta_optimization_target entries are combined by weighted sum
    when multi_objective is False and are independent objectives otherwise.
    """

    description: Optional[str]
    owner: Sequence[str]
    # Should name an environment declared by the dataset schema
    environment: Optional[str]
    implements: Sequence[ProblemStatementReference]
    meta_optimization_target: Sequence[MetaOptimizationTarget]
    multi_objective: bool = False
    tasks: Sequence[Task]

    def task_names(self) -> List[str]:
        return [task.name for task in self.tasks if task.name is not None]

    def get_task(self, name: str) -> Optional[Task]:
        """Get the first task with the given name"""
        for task in self.tasks:
            if task.name is not None and task.name == name:
                return task
        return None

    def meta_optimization_weights(self) -> Optional[Tuple[float, ...]]:
        """Get the weight of each meta-optimization target for a weighted sum.
        Returns None for multi-objective statements, whose targets must not be
        combined.
        """
        if self.multi_objective:
            return None
        return tuple(
            target.effective_weight for target in self.meta_optimization_target
        )


@dataobject
class ProblemStatementNamespace(DataObjectBase):
    """A uniquely keyed collection of problem statements which may reference
    each other by name
    """

    problem_statements: Dict[str, ProblemStatement]

    def get(self, name: str) -> Optional[ProblemStatement]:
        return self.problem_statements.get(name)

    def names(self) -> List[str]:
        return list(self.problem_statements)

    def items(self) -> Iterator[Tuple[str, ProblemStatement]]:
        return iter(self.problem_statements.items())

    def __contains__(self, name) -> bool:
        return name in self.problem_statements

    def __len__(self) -> int:
        return len(self.problem_statements)

    def __iter__(self) -> Iterator[str]:
        return iter(self.problem_statements)

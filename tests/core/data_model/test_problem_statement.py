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

"""Tests for the problem statement data model"""

# Third Party
import pytest

# Local
from pstmt.core.data_model import (
    DEFAULT_META_TARGET_WEIGHT,
    BinaryClassification,
    MetaOptimizationTarget,
    MultiClassClassification,
    ObjectiveFunction,
    OneDimensionalRegression,
    PerformanceMetric,
    PredictionsOrder,
    ProblemStatement,
    ProblemStatementNamespace,
    ProblemStatementReference,
    Task,
    TaskType,
    TopKClassification,
    Type,
    active_task_type,
)
from pstmt.core.exceptions import MalformedTypeError
from tests.conftest import binary_type, make_task, regression_type

## active_task_type ############################################################


@pytest.mark.parametrize(
    ["type_", "expected"],
    [
        (binary_type(), TaskType.BINARY_CLASSIFICATION),
        (regression_type(), TaskType.ONE_DIMENSIONAL_REGRESSION),
        (
            Type(multi_class_classification=MultiClassClassification(label="topic")),
            TaskType.MULTI_CLASS_CLASSIFICATION,
        ),
        (
            Type(top_k_classification=TopKClassification(label="next_video")),
            TaskType.TOP_K_CLASSIFICATION,
        ),
    ],
)
def test_active_task_type(type_, expected):
    assert active_task_type(type_) is expected


def test_active_task_type_fails_with_no_variant():
    with pytest.raises(MalformedTypeError) as exc_info:
        active_task_type(Type())
    assert exc_info.value.populated_fields == ()


def test_active_task_type_fails_with_two_variants():
    type_ = Type(
        binary_classification=BinaryClassification(label="clicked"),
        one_dimensional_regression=OneDimensionalRegression(label="dwell_time"),
    )
    with pytest.raises(MalformedTypeError, match="tasks\\[0\\].type") as exc_info:
        active_task_type(type_, "tasks[0].type")
    assert exc_info.value.populated_fields == (
        "binary_classification",
        "one_dimensional_regression",
    )


def test_active_task_type_requires_a_type():
    with pytest.raises(TypeError):
        active_task_type(None)


def test_type_task_property():
    assert binary_type("y").task == BinaryClassification(label="y")
    assert Type().task is None


## Optional fields ##############################################################


def test_optional_numbers_distinguish_absent_from_zero():
    unset = MultiClassClassification(label="topic")
    zero = MultiClassClassification(label="topic", n_classes=0)
    assert not unset.has_field("n_classes")
    assert zero.has_field("n_classes")
    assert not make_task("t").has_field("task_weight")
    assert make_task("t", task_weight=0.0).has_field("task_weight")


def test_top_k_defaults():
    top_k = TopKClassification(label="next_video")
    assert top_k.effective_n_predicted_labels == 1
    assert top_k.effective_predictions_order is PredictionsOrder.UNSPECIFIED
    assert TopKClassification.Order is PredictionsOrder

    top_k = TopKClassification(
        label="next_video",
        n_classes=1000,
        n_predicted_labels=10,
        predictions_order=PredictionsOrder.SCORE_DESC,
    )
    assert top_k.effective_n_predicted_labels == 10
    assert top_k.effective_predictions_order is PredictionsOrder.SCORE_DESC


def test_meta_optimization_target_weight_defaults_to_one():
    assert MetaOptimizationTarget(task_name="t").effective_weight == (
        DEFAULT_META_TARGET_WEIGHT
    )
    assert MetaOptimizationTarget(task_name="t", weight=0.25).effective_weight == 0.25
    assert MetaOptimizationTarget(task_name="t", weight=0.0).effective_weight == 0.0


def test_variant_task_type_tags():
    assert BinaryClassification.task_type is TaskType.BINARY_CLASSIFICATION
    assert "task_type" not in BinaryClassification.fields


## Problem statement helpers ###################################################


def test_meta_optimization_weights(valid_statement):
    assert valid_statement.meta_optimization_weights() == (0.7, 1.0)


def test_meta_optimization_weights_multi_objective(valid_statement):
    statement = ProblemStatement(
        tasks=valid_statement.tasks,
        meta_optimization_target=valid_statement.meta_optimization_target,
        multi_objective=True,
    )
    assert statement.meta_optimization_weights() is None


def test_task_lookup(valid_statement):
    assert valid_statement.task_names() == ["click", "dwell"]
    assert valid_statement.get_task("dwell").name == "dwell"
    assert valid_statement.get_task("ghost") is None


def test_resolve_type(valid_statement):
    click_target, _ = valid_statement.meta_optimization_target
    assert click_target.resolve_type(valid_statement) == binary_type()

    override = MetaOptimizationTarget(task_name="click", type=regression_type("ctr"))
    assert override.resolve_type(valid_statement) == regression_type("ctr")

    ghost = MetaOptimizationTarget(task_name="ghost")
    assert ghost.resolve_type(valid_statement) is None


def test_statement_containers_are_immutable(valid_statement):
    assert isinstance(valid_statement.tasks, tuple)
    assert isinstance(valid_statement.owner, tuple)
    assert valid_statement.implements == ()
    assert valid_statement.multi_objective is False


def test_reference_oneof():
    assert ProblemStatementReference(name="other").which_oneof("references") == "name"
    assert ProblemStatementReference(description="x").which_oneof("references") is None


def test_namespace_mapping_helpers(namespace):
    assert len(namespace) == 2
    assert "feed" in namespace
    assert "ghost" not in namespace
    assert list(namespace) == ["feed", "engagement"]
    assert namespace.names() == ["feed", "engagement"]
    assert namespace.get("engagement").description == "Overall engagement"
    assert namespace.get("ghost") is None
    assert [name for name, _ in namespace.items()] == ["feed", "engagement"]


def test_namespace_is_read_only(namespace, valid_statement):
    with pytest.raises(TypeError):
        namespace.problem_statements["other"] = valid_statement
    assert "other" not in namespace

    metric = valid_statement.meta_optimization_target[0].performance_metric
    with pytest.raises(TypeError):
        metric["auc"] = {"curve": "PR"}
    assert metric == {"auc": {}}


## Dict construction ###########################################################


def test_statement_from_dict():
    statement = ProblemStatement.from_dict(
        {
            "description": "Rank videos",
            "owner": ["video@example.com"],
            "tasks": [
                {
                    "name": "next",
                    "type": {
                        "top_k_classification": {
                            "label": "video_id",
                            "n_predicted_labels": 5,
                            "predictions_order": "SCORE_DESC",
                        }
                    },
                    "objective_function": {"cross_entropy": {}},
                    "performance_metric": [{"precision_at_k": {"k": 5}}],
                }
            ],
            "meta_optimization_target": [{"task_name": "next", "weight": 1}],
            "multi_objective": False,
        }
    )
    task = statement.tasks[0]
    assert active_task_type(task.type) is TaskType.TOP_K_CLASSIFICATION
    assert task.type.top_k_classification.predictions_order is (
        PredictionsOrder.SCORE_DESC
    )
    assert isinstance(task.objective_function, ObjectiveFunction)
    assert task.performance_metric == (PerformanceMetric(precision_at_k={"k": 5}),)
    assert isinstance(task.performance_metric[0], PerformanceMetric)
    assert statement.meta_optimization_target[0].weight == 1.0


def test_statement_from_dict_keeps_malformed_types():
    statement = ProblemStatement.from_dict(
        {
            "tasks": [
                {
                    "name": "t",
                    "type": {
                        "binary_classification": {"label": "a"},
                        "one_dimensional_regression": {"label": "b"},
                    },
                }
            ]
        }
    )
    with pytest.raises(MalformedTypeError):
        active_task_type(statement.tasks[0].type)


def test_statement_dict_round_trip(valid_statement):
    assert ProblemStatement.from_dict(valid_statement.to_dict()) == valid_statement


def test_namespace_from_dict():
    namespace = ProblemStatementNamespace.from_dict(
        {"problem_statements": {"a": {"tasks": [{"name": "t"}]}}}
    )
    assert isinstance(namespace.get("a"), ProblemStatement)
    assert namespace.get("a").tasks[0] == Task(name="t")


def test_malformed_type_survives_dict_round_trip():
    statement = ProblemStatement(
        tasks=[
            make_task(
                "t",
                Type(
                    binary_classification=BinaryClassification(label="a"),
                    one_dimensional_regression=OneDimensionalRegression(label="b"),
                ),
            )
        ]
    )
    restored = ProblemStatement.from_dict(statement.to_dict())
    assert restored == statement
    assert restored.tasks[0].type.populated_oneof_fields("task_type") == [
        "binary_classification",
        "one_dimensional_regression",
    ]

"""
This sets up global test configs when pytest starts
"""

# Standard
from contextlib import contextmanager
from unittest.mock import patch
import copy
import os
import uuid

# Third Party
import pytest
import yaml

# First Party
import alog

# Local
from pstmt import get_config
from pstmt.core.data_model import (
    BinaryClassification,
    MetaOptimizationTarget,
    OneDimensionalRegression,
    PerformanceMetric,
    ProblemStatement,
    ProblemStatementNamespace,
    ProblemStatementReference,
    Task,
    Type,
)
import pstmt

log = alog.use_channel("TEST-CONFTEST")

FIXTURES_DIR = os.path.join(
    os.path.dirname(__file__),
    "fixtures",
)


@contextmanager
def temp_config(config_overrides: dict, merge_strategy="override"):
    """Temporarily edit the pstmt config in a mock context"""
    existing_config = copy.deepcopy(getattr(pstmt.config.config, "_CONFIG"))
    # Patch out the internal config, starting with a fresh copy of the current config
    with patch.object(pstmt.config.config, "_CONFIG", existing_config):
        # Patch the immutable view of the config as well
        # This is required otherwise the updated immutable view will persist after the test
        with patch.object(pstmt.config.config, "_IMMUTABLE_CONFIG", None):
            # Run our config overrides inside the patch
            if config_overrides:
                config_overrides["merge_strategy"] = merge_strategy
                pstmt.configure(config_dict=config_overrides)
            else:
                # or just slap some random uuids in there. We need to call `.configure()`
                pstmt.configure(config_dict={str(uuid.uuid4()): str(uuid.uuid4())})
            # Yield to the test with the new overridden config
            yield get_config()


def dump_yml(content: dict, path: str):
    with open(path, "w") as handle:
        yaml.safe_dump(content, handle)
        handle.flush()


## Data model helpers ##########################################################


def binary_type(label="clicked", example_weight=None) -> Type:
    return Type(
        binary_classification=BinaryClassification(
            label=label, example_weight=example_weight
        )
    )


def regression_type(label="dwell_time", weight=None) -> Type:
    return Type(
        one_dimensional_regression=OneDimensionalRegression(label=label, weight=weight)
    )


def make_task(name, type_=None, **kwargs) -> Task:
    return Task(type=type_ or binary_type(), name=name, **kwargs)


@pytest.fixture
def valid_statement() -> ProblemStatement:
    """A multi-task statement that satisfies every invariant"""
    return ProblemStatement(
        description="Predict clicks and dwell time on the home feed",
        owner=["feed-ranking@example.com"],
        environment="TRAINING",
        tasks=[
            make_task("click", binary_type(), task_weight=2.0),
            make_task("dwell", regression_type(), task_weight=1.0),
        ],
        meta_optimization_target=[
            MetaOptimizationTarget(
                task_name="click",
                performance_metric=PerformanceMetric(auc={}),
                weight=0.7,
            ),
            MetaOptimizationTarget(
                task_name="dwell",
                performance_metric=PerformanceMetric(mean_squared_error={}),
            ),
        ],
    )


@pytest.fixture
def namespace(valid_statement) -> ProblemStatementNamespace:
    """A namespace where "feed" implements "engagement" """
    feed = ProblemStatement(
        description=valid_statement.description,
        tasks=valid_statement.tasks,
        meta_optimization_target=valid_statement.meta_optimization_target,
        implements=[
            ProblemStatementReference(
                description="feed model optimizes engagement", name="engagement"
            )
        ],
    )
    engagement = ProblemStatement(
        description="Overall engagement",
        tasks=[make_task("engaged")],
        meta_optimization_target=[MetaOptimizationTarget(task_name="engaged")],
    )
    return ProblemStatementNamespace(
        problem_statements={"feed": feed, "engagement": engagement}
    )

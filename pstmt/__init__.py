"""
pstmt describes machine-learning problem statements (the tasks a model
predicts, how they are weighted and measured, and the targets used to compare
models) and validates that they are well-formed.
"""
# Local
from . import core

# Expose configuration fn and getter at the top level
from .config import configure, get_config

# Expose the data model and validation entry points at the top level
from .core import (
    BinaryClassification,
    MalformedTypeError,
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
    Violation,
    ViolationKind,
    active_task_type,
    validate,
    validate_all,
)
from .loader import load_namespace, load_problem_statement
from .version import __version__

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

"""Enumeration data structures map from strings to integers and back.
"""

# Standard
from enum import Enum
from typing import Tuple, Type

# Third Party
import munch

# First Party
import alog

# Local
from ..exceptions import error_handler

log = alog.use_channel("DATAM")
error = error_handler.get(log)

__all__ = ["import_enum", "lookup"]


def import_enum(enum_class: Type[Enum]) -> Tuple[str, str]:
    """Import a single enum into the global enum module by name

    Args:
        enum_class (Type[Enum]): The enum to import

    Returns:
        name:  str
            The name of the enum global
        rev_name:  str
            The name of the reversed enum global
    """
    if not (isinstance(enum_class, type) and issubclass(enum_class, Enum)):
        error(
            "<PST71783964E>",
            AttributeError(f"`{enum_class}` is not a valid enumeration"),
        )

    name = enum_class.__name__
    log.debug2("Importing enum named %s", name)
    globals()[name] = enum_class
    rev_name = name + "Rev"
    globals()[rev_name] = munch.Munch({entry.value: entry.name for entry in enum_class})
    if name not in __all__:
        __all__.append(name)
        __all__.append(rev_name)
    return name, rev_name


def lookup(enum_class: Type[Enum], value) -> Enum:
    """Resolve an enum member from a member, its name or its number

    Args:
        enum_class (Type[Enum]): The enum to look the value up in
        value (Union[Enum, str, int]): The member, member name or member value

    Returns:
        member (Enum): The matching member of enum_class
    """
    if isinstance(value, enum_class):
        return value
    if isinstance(value, str) and value in enum_class.__members__:
        return enum_class[value]
    rev = globals().get(enum_class.__name__ + "Rev") or {
        entry.value: entry.name for entry in enum_class
    }
    if isinstance(value, int) and not isinstance(value, bool) and value in rev:
        return enum_class[rev[value]]
    error(
        "<PST71783975E>",
        ValueError(
            "`{}` is not a valid value for enum {}: expected one of {}".format(
                value, enum_class.__name__, list(enum_class.__members__)
            )
        ),
    )


class TaskType(Enum):
    """The kind of prediction a task or meta-objective produces"""

    UNKNOWN = 0
    BINARY_CLASSIFICATION = 1
    MULTI_CLASS_CLASSIFICATION = 2
    TOP_K_CLASSIFICATION = 3
    ONE_DIMENSIONAL_REGRESSION = 4


class PredictionsOrder(Enum):
    """Order of the labels predicted by a top-K classification task"""

    UNSPECIFIED = 0
    # Predictions are ordered from the most likely to least likely.
    SCORE_DESC = 1
    # Predictions are ordered from the least likely to most likely.
    SCORE_ASC = 2


import_enum(TaskType)
import_enum(PredictionsOrder)

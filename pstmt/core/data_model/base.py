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


"""This module defines the @dataobject decorator and the DataObjectBase class
that every entity of the problem statement data model derives from.

A data object is a frozen dataclass with a few conventions borrowed from
protobuf messages:

* Every field that does not declare a default is optional and defaults to
  None, so "not set" is always distinguishable from a zero value.
* Repeated fields (annotated as Sequence[...]) are stored as tuples and map
  fields (annotated as Dict[...]) as read-only mapping views over a private
  dict; both default to empty. Instances are immutable but not hashable when
  they hold a map field.
* Groups of fields can be declared as a oneof. The decorator does not enforce
  that exactly one field of a oneof is set. Instead, which_oneof and
  populated_oneof_fields let callers inspect the union so that malformed
  instances can be constructed and reported.
"""

# Standard
from collections import abc
from enum import Enum
from types import MappingProxyType
from typing import (
    Any,
    Callable,
    Dict,
    Iterable,
    List,
    Optional,
    Type,
    TypeVar,
    Union,
    get_args,
    get_origin,
    get_type_hints,
)
import dataclasses
import json

# First Party
import alog

# Local
from ..exceptions import error_handler
from . import enums

## Globals #####################################################################

log = alog.use_channel("SCHEMA")
error = error_handler.get(log)

# Special attribute used to indicate which defaults are user provided
_USER_DEFINED_DEFAULTS = "__user_defined_defaults__"

# Cache of resolved type hints per class
_TYPE_HINTS = "__resolved_type_hints__"

_REPEATED_ORIGINS = (list, tuple, abc.Sequence)
_MAP_ORIGINS = (dict, abc.Mapping)

## Public ######################################################################


class DataObjectBase:
    """A DataObject is a data model class that is backed by a frozen @dataclass.

    Data model classes that use the @dataobject decorator must derive from this
    base class.
    """

    # Populated by @dataobject
    fields = ()
    _fields_oneofs_map = {}
    _fields_to_oneof = {}

    def __post_init__(self):
        """Normalize repeated and map fields so that instances own their
        containers and absent containers read as empty
        """
        hints = self.get_type_hints()
        for field_name in self.fields:
            kind = _container_kind(hints[field_name])
            if kind is None:
                continue
            value = getattr(self, field_name)
            if kind == "repeated":
                value = () if value is None else tuple(value)
            else:
                value = MappingProxyType({} if value is None else dict(value))
            object.__setattr__(self, field_name, value)

    @classmethod
    def get_type_hints(cls) -> Dict[str, Any]:
        """Get the resolved type annotations for all fields of this class"""
        hints = cls.__dict__.get(_TYPE_HINTS)
        if hints is None:
            all_hints = get_type_hints(cls)
            hints = {name: all_hints[name] for name in cls.fields}
            setattr(cls, _TYPE_HINTS, hints)
        return hints

    def has_field(self, field_name: str) -> bool:
        """Check whether the given field is populated. Fields holding None and
        empty repeated or map fields are not populated.

        Args:
            field_name (str): The name of the field to check

        Returns:
            populated (bool): True if the field holds a value
        """
        error.value_check(
            "<PST62817443E>",
            field_name in self.fields,
            "{} has no field named {}",
            type(self).__name__,
            field_name,
        )
        value = getattr(self, field_name)
        if value is None:
            return False
        if _container_kind(self.get_type_hints()[field_name]) is not None:
            return len(value) > 0
        return True

    def populated_oneof_fields(self, oneof_name: str) -> List[str]:
        """Get the names of all fields within the given oneof that are set, in
        declaration order
        """
        oneof_fields = self._fields_oneofs_map.get(oneof_name)
        error.value_check(
            "<PST19357206E>",
            oneof_fields is not None,
            "{} has no oneof named {}",
            type(self).__name__,
            oneof_name,
        )
        return [field for field in oneof_fields if self.has_field(field)]

    def which_oneof(self, oneof_name: str) -> Optional[str]:
        """Get the name of the oneof field set for the given oneof or None if
        no field or more than one field is set
        """
        populated = self.populated_oneof_fields(oneof_name)
        if len(populated) == 1:
            return populated[0]
        return None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DataObjectBase":
        """Build an instance from a plain dict such as one parsed from yaml or
        json. Nested data objects, repeated fields, maps and enums (by name or
        number) are converted recursively.

        Args:
            data (Dict[str, Any]): The dict representation

        Returns:
            obj (DataObjectBase): An instance of cls
        """
        return cls._from_dict(data, cls.__name__)

    @classmethod
    def from_json(cls, json_str: Union[str, dict]) -> "DataObjectBase":
        """Build an instance from a JSON string (or an already parsed dict)"""
        error.type_check("<PST91037250E>", str, dict, json_str=json_str)
        if isinstance(json_str, str):
            try:
                json_str = json.loads(json_str)
            except json.JSONDecodeError as ex:
                error("<PST90619980E>", ValueError(str(ex)), ex)
        return cls.from_dict(json_str)

    def to_dict(self) -> dict:
        """Convert to a dictionary representation. Unset fields are omitted and
        enums are rendered by name.
        """
        return {
            field: _to_dict_element(getattr(self, field))
            for field in self.fields
            if getattr(self, field) is not None
        }

    def to_json(self, **kwargs) -> str:
        """Convert to a json representation."""
        return json.dumps(self.to_dict(), **kwargs)

    def __repr__(self):
        """Human-friendly representation."""
        return "{}({})".format(
            type(self).__name__,
            ", ".join(
                "{}={!r}".format(field, _repr_value(getattr(self, field)))
                for field in self.fields
                if self.has_field(field)
            ),
        )

    ## Implementation Details ##################################################

    @classmethod
    def _from_dict(cls, data: Any, path: str) -> "DataObjectBase":
        if not isinstance(data, abc.Mapping):
            error(
                "<PST45207671E>",
                ValueError(
                    "{}: expected a mapping for {}, got {}".format(
                        path, cls.__name__, type(data).__name__
                    )
                ),
            )
        unknown = [key for key in data if key not in cls.fields]
        if unknown:
            error(
                "<PST71783905E>",
                ValueError(
                    "{}: unknown field(s) {} for {}".format(
                        path, sorted(map(str, unknown)), cls.__name__
                    )
                ),
            )
        hints = cls.get_type_hints()
        kwargs = {
            key: _from_dict_element(hints[key], value, "{}.{}".format(path, key))
            for key, value in data.items()
        }
        return cls(**kwargs)


_DataObjectBaseT = TypeVar("_DataObjectBaseT", bound=DataObjectBase)


def dataobject(
    *args, oneofs: Optional[Dict[str, Iterable[str]]] = None
) -> Callable[[Type[_DataObjectBaseT]], Type[_DataObjectBaseT]]:
    """The @dataobject decorator turns a class with dataclass-style annotations
    into a frozen data model class. For example:

    @dataobject
    class MyDataObject(DataObjectBase):
        '''My Custom Data Object'''
        foo: str
        bar: Sequence[int]

    @dataobject(oneofs={"value": ["text", "number"]})
    class MyUnion(DataObjectBase):
        text: str
        number: int

    Kwargs:
        oneofs (Optional[Dict[str, Iterable[str]]]): Named groups of fields
            which are expected to have exactly one member set

    Returns:
        decorator:  Callable[[Type], Type[DataObjectBase]]
            The decorator function that will wrap the given class
    """

    def decorator(cls: Type[_DataObjectBaseT]) -> Type[_DataObjectBaseT]:
        error.value_check(
            "<PST95184230E>",
            isinstance(cls, type) and issubclass(cls, DataObjectBase),
            "{} must inherit from DataObjectBase when using @dataobject",
            getattr(cls, "__name__", cls),
        )

        # Fill in any missing field defaults as None
        log.debug2("Wrapping data class %s", cls)
        user_defined_defaults = {}
        for annotation in cls.__dict__.get("__annotations__", {}):
            user_defined_default = getattr(cls, annotation, dataclasses.MISSING)
            if user_defined_default is dataclasses.MISSING:
                log.debug3("Filling in None default for %s.%s", cls, annotation)
                setattr(cls, annotation, None)
            else:
                user_defined_defaults[annotation] = user_defined_default

        cls = dataclasses.dataclass(frozen=True, repr=False)(cls)
        setattr(cls, _USER_DEFINED_DEFAULTS, user_defined_defaults)
        cls.fields = tuple(field.name for field in dataclasses.fields(cls))

        oneofs_map = {name: list(members) for name, members in (oneofs or {}).items()}
        for oneof_name, oneof_fields in oneofs_map.items():
            error.value_check(
                "<PST59933157E>",
                oneof_fields and all(field in cls.fields for field in oneof_fields),
                "oneof {} of {} must name existing fields, got {}",
                oneof_name,
                cls.__name__,
                oneof_fields,
            )
        cls._fields_oneofs_map = oneofs_map
        cls._fields_to_oneof = {
            field_name: oneof_name
            for oneof_name, oneof_fields in oneofs_map.items()
            for field_name in oneof_fields
        }
        return cls

    # If called without the function invocation, wrap the class directly
    if args and callable(args[0]):
        assert not oneofs, "This shouldn't happen!"
        return decorator(args[0])
    return decorator


## Implementation Details ######################################################


def _unwrap_optional(hint: Any) -> Any:
    """Strip Optional[] from a type hint"""
    if get_origin(hint) is Union:
        args = [arg for arg in get_args(hint) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return hint


def _container_kind(hint: Any) -> Optional[str]:
    """Determine whether a hint describes a repeated field, a map field or
    neither
    """
    origin = get_origin(_unwrap_optional(hint))
    if origin in _REPEATED_ORIGINS:
        return "repeated"
    if origin in _MAP_ORIGINS:
        return "map"
    return None


def _repr_value(value: Any) -> Any:
    if isinstance(value, MappingProxyType):
        return dict(value)
    return value


def _to_dict_element(value: Any) -> Any:
    if isinstance(value, DataObjectBase):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, abc.Mapping):
        return {key: _to_dict_element(val) for key, val in value.items()}
    if isinstance(value, (list, tuple)):
        return [_to_dict_element(item) for item in value]
    return value


def _from_dict_element(hint: Any, value: Any, path: str) -> Any:
    """Convert a plain value to the python type described by hint"""
    if value is None:
        return None
    hint = _unwrap_optional(hint)
    origin = get_origin(hint)

    if origin in _REPEATED_ORIGINS:
        if not isinstance(value, (list, tuple)):
            _raise_type_mismatch(path, "a list", value)
        item_hint = get_args(hint)[0] if get_args(hint) else Any
        return tuple(
            _from_dict_item(item_hint, item, "{}[{}]".format(path, idx))
            for idx, item in enumerate(value)
        )

    if origin in _MAP_ORIGINS:
        if not isinstance(value, abc.Mapping):
            _raise_type_mismatch(path, "a mapping", value)
        value_hint = get_args(hint)[1] if get_args(hint) else Any
        return {
            str(key): _from_dict_item(value_hint, val, "{}[{}]".format(path, key))
            for key, val in value.items()
        }

    if not isinstance(hint, type):
        return value

    if issubclass(hint, DataObjectBase):
        # pylint: disable=protected-access
        return hint._from_dict(value, path)

    if issubclass(hint, Enum):
        return enums.lookup(hint, value)

    if issubclass(hint, dict):
        if not isinstance(value, abc.Mapping):
            _raise_type_mismatch(path, "a mapping", value)
        return hint(value)

    if hint is bool:
        if not isinstance(value, bool):
            _raise_type_mismatch(path, "a bool", value)
        return value

    if hint is float:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            _raise_type_mismatch(path, "a number", value)
        return float(value)

    if hint is int:
        if isinstance(value, bool) or not isinstance(value, int):
            _raise_type_mismatch(path, "an integer", value)
        return value

    if hint is str:
        if not isinstance(value, str):
            _raise_type_mismatch(path, "a string", value)
        return value

    return value


def _from_dict_item(hint: Any, value: Any, path: str) -> Any:
    """Convert an element of a repeated or map field, which may not be null"""
    if value is None:
        error(
            "<PST71783826E>",
            ValueError("{}: expected {}, got null".format(path, _hint_name(hint))),
        )
    return _from_dict_element(hint, value, path)


def _hint_name(hint: Any) -> str:
    hint = _unwrap_optional(hint)
    return hint.__name__ if isinstance(hint, type) else str(hint)


def _raise_type_mismatch(path: str, expected: str, value: Any):
    error(
        "<PST71783815E>",
        ValueError(
            "{}: expected {}, got {} ({!r})".format(
                path, expected, type(value).__name__, value
            )
        ),
    )

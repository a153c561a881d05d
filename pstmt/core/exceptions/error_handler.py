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

"""Error handler that logs on an alog channel before raising.

Every module in pstmt binds one of these to its own log channel:

    log = alog.use_channel("VALID")
    error = error_handler.get(log)

so that any raised exception is also visible in the logs with a unique log
code, even where stack traces are not available.
"""

# Standard
from collections.abc import Iterable
from types import GeneratorType
import os

# Local
from ...config import get_config

# One handler per log channel name
_error_handlers = {}

# Attribute used to count how often a single exception object was logged
_LOG_COUNT_ATTR = "_pstmt_nexception_log_messages"

# Values that are iterable but are never accepted as a collection of items
_NON_COLLECTION_TYPES = (str, GeneratorType)


def get(log_chan):
    """Get the error handler bound to the given alog channel, creating it on
    first use

    Args:
        log_chan: alog channel
            The channel the handler logs to

    Returns:
        error (ErrorHandler): The handler shared by every caller of this
            channel
    """
    return _error_handlers.setdefault(log_chan.name, ErrorHandler(log_chan))


class ErrorHandler:
    """Reusable argument checks that log before they raise. Calling the
    handler directly is the same as calling log_raise.
    """

    def __init__(self, log_chan):
        self.log_chan = log_chan

    def log_raise(self, log_code, exception, root_exception=None):
        """Log an exception with a log code and raise it.

        Args:
            log_code (str): A log code such as `<PST12345678E>`: the library
                prefix, eight unique digits and a level letter (F, E, W, I, T
                or D).
            exception (Exception): The exception to raise
            root_exception (Optional[Exception]): The exception that caused
                this one. When given, exception is raised from it.

        Notes:
            The same exception object is logged at most
            max_exception_log_messages times, so re-raising it up a recursive
            call chain does not flood the logs.
        """
        self._log_exception(log_code, exception)
        if root_exception:
            self._log_exception(log_code, root_exception)
            raise exception from root_exception
        raise exception

    __call__ = log_raise

    def type_check(self, log_code, *types, allow_none=False, **variables):
        """Raise a TypeError unless every keyword value is an instance of one
        of types. The keyword names are used in the error message, so callers
        can pass a path such as **{"tasks[0].type": task.type}.

        Examples:
            > error.type_check("<PST00000000E>", str, os.PathLike, path=path)
            > error.type_check("<PST00000000E>", Type, allow_none=True, type=t)
        """
        if not self._checks_enabled(log_code, types, variables):
            return
        for name, value in variables.items():
            if allow_none and value is None:
                continue
            if not isinstance(value, types):
                self._raise_type_error(
                    log_code, "variable", name, value, types, allow_none
                )

    def type_check_all(self, log_code, *types, allow_none=False, **variables):
        """Like type_check, but each keyword value must be a collection (not a
        string or generator) whose items are all instances of one of types.
        allow_none lets the collection itself be None, never its items.

        Example:
            > error.type_check_all("<PST00000000E>", Task, tasks=statement.tasks)
        """
        if not self._checks_enabled(log_code, types, variables):
            return
        for name, collection in variables.items():
            if allow_none and collection is None:
                continue
            if not isinstance(collection, Iterable) or isinstance(
                collection, _NON_COLLECTION_TYPES
            ):
                self._raise_type_error(
                    log_code, "variable", name, collection, (Iterable,), allow_none
                )
            for item in collection:
                if not isinstance(item, types):
                    self._raise_type_error(
                        log_code, "element of", name, item, types, False
                    )

    def value_check(self, log_code, condition, *args):
        """Raise a ValueError if condition is false. The first of args is the
        message; the rest are only formatted into it when the check fails.

        Example:
            > error.value_check(
            >     "<PST00000000E>", n >= 0, "n must be non-negative, got {}", n
            > )
        """
        if not get_config().enable_error_checks or condition:
            return
        if not args:
            message = ""
        elif len(args) == 1:
            message = args[0]
        else:
            message = args[0].format(*args[1:])
        self(log_code, ValueError("value check failed: {}".format(message)))

    def file_check(self, log_code, *file_paths):
        """Raise a FileNotFoundError unless every path names an existing
        regular file
        """
        if not get_config().enable_error_checks:
            return
        for file_path in file_paths:
            if not os.path.exists(file_path):
                self(
                    log_code,
                    FileNotFoundError("File `{}` does not exist".format(file_path)),
                )
            if not os.path.isfile(file_path):
                self(
                    log_code,
                    FileNotFoundError("Path `{}` is not a file".format(file_path)),
                )

    ## Implementation Details ##################################################

    def _log_exception(self, log_code, exception):
        count = getattr(exception, _LOG_COUNT_ATTR, -1) + 1
        setattr(exception, _LOG_COUNT_ATTR, count)

        max_messages = get_config().max_exception_log_messages
        if count < max_messages:
            self.log_chan.error(log_code, "exception raised: {!r}".format(exception))
        elif count == max_messages:
            self.log_chan.error(
                log_code,
                "logged {!r} {} times, will not log it again".format(
                    exception, max_messages
                ),
            )

    def _checks_enabled(self, log_code, types, variables) -> bool:
        if not get_config().enable_error_checks:
            return False
        if not types:
            self(log_code, RuntimeError("invalid type check: no types specified"))
        if not variables:
            self(log_code, RuntimeError("invalid type check: no variables specified"))
        return True

    def _raise_type_error(self, log_code, what, name, value, types, allow_none):
        expected = [typ.__name__ for typ in types]
        if allow_none:
            expected.append("NoneType")
        self(
            log_code,
            TypeError(
                "type check failed: {} `{}` has type `{}` not in {}".format(
                    what, name, type(value).__name__, expected
                )
            ),
        )

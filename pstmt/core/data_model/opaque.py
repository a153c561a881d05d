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

"""Message types defined by external schemas that the problem statement data
model carries without inspecting them.
"""

# First Party
import alog

# Local
from ..exceptions import error_handler

log = alog.use_channel("DATAM")
error = error_handler.get(log)


class OpaqueMessage(dict):
    """A message owned by another schema. It is held as a read-only mapping
    and passed through untouched.
    """

    def __repr__(self):
        return "{}({})".format(type(self).__name__, dict.__repr__(self))

    def __reduce__(self):
        return (type(self), (dict(self),))

    def _read_only(self, *_, **__):
        error(
            "<PST40518862E>",
            TypeError("{} is read-only".format(type(self).__name__)),
        )

    __setitem__ = _read_only
    __delitem__ = _read_only
    __ior__ = _read_only
    clear = _read_only
    pop = _read_only
    popitem = _read_only
    setdefault = _read_only
    update = _read_only


class ObjectiveFunction(OpaqueMessage):
    """Parameterized description of the loss used to train a task (e.g. Huber)"""


class PerformanceMetric(OpaqueMessage):
    """Description of a metric that is monitored or meta-optimized"""

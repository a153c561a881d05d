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



class MalformedTypeError(ValueError):
    """Raised when a Type union does not have exactly one task type populated"""

    def __init__(self, populated_fields, path=None):
        if populated_fields:
            reason = "multiple task types populated: {}".format(
                ", ".join(populated_fields)
            )
        else:
            reason = "no task type populated"
        if path:
            message = "Malformed Type at {}: {}".format(path, reason)
        else:
            message = "Malformed Type: {}".format(reason)
        super().__init__(message)
        self._reason = reason
        self._populated_fields = tuple(populated_fields)

    @property
    def reason(self) -> str:
        """The reason this Type is malformed"""
        return self._reason

    @property
    def populated_fields(self) -> tuple:
        """The names of the task type fields that were populated"""
        return self._populated_fields

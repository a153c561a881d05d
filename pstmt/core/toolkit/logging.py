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

"""Set up alog from the log section of the pstmt config"""

# First Party
import alog

# Local
from ...config import get_config


def configure():
    """Configure alog with log.level, log.filters, log.formatter and
    log.thread_id. Only call this from an application entry point such as the
    lint command, since it replaces any log setup of the host application.
    """
    log_config = get_config().log
    formatter = log_config.formatter
    if formatter == "pretty":
        formatter = alog.AlogPrettyFormatter(log_config.channel_width)
    alog.configure(
        default_level=log_config.level,
        filters=log_config.filters,
        formatter=formatter,
        thread_id=log_config.thread_id,
    )

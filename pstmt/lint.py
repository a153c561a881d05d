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

"""Command line linter for problem statement namespace files

    python -m pstmt.lint namespace.yml --environment TRAINING --require-tasks
"""

# Standard
from typing import Dict, List, Optional
import argparse
import json
import sys

# First Party
import alog

# Local
from .config import configure
from .core.toolkit import logging
from .core.validation import (
    Violation,
    apply_namespace_policies,
    validate_all,
)
from .loader import load_namespace

log = alog.use_channel("LINT")

EXIT_OK = 0
EXIT_VIOLATIONS = 1
EXIT_LOAD_ERROR = 2


def lint(
    namespace_path: str,
    environments: Optional[List[str]] = None,
    require_tasks: Optional[bool] = None,
    require_problem_statements: Optional[bool] = None,
) -> Dict[str, List[Violation]]:
    """Load a namespace file and collect core and policy violations for every
    statement. Statements without violations are omitted.
    """
    namespace = load_namespace(namespace_path)
    results = validate_all(namespace, environments=environments or None)
    policy_results = apply_namespace_policies(
        namespace,
        require_tasks=require_tasks,
        require_problem_statements=require_problem_statements,
    )
    for name, violations in policy_results.items():
        results.setdefault(name, []).extend(violations)
    return {name: violations for name, violations in results.items() if violations}


def _render_text(results: Dict[str, List[Violation]]) -> str:
    lines = []
    for name, violations in results.items():
        for violation in violations:
            lines.append("{}: {}".format(name or "<namespace>", violation))
    return "\n".join(lines)


def _render_json(results: Dict[str, List[Violation]]) -> str:
    return json.dumps(
        {
            name: [violation.to_dict() for violation in violations]
            for name, violations in results.items()
        },
        indent=2,
    )


## Main ########################################################################


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Validate the problem statements of a namespace file"
    )
    parser.add_argument(
        "namespace_file",
        type=str,
        help="Path to a yaml or json file holding a problem statement namespace",
    )
    parser.add_argument(
        "-e",
        "--environment",
        dest="environments",
        action="append",
        default=None,
        help="Declared environment name (repeatable). Overrides validation.known_environments",
    )
    parser.add_argument(
        "--require-tasks",
        default=None,
        action="store_true",
        help="Reject problem statements without tasks",
    )
    parser.add_argument(
        "--require-problem-statements",
        default=None,
        action="store_true",
        help="Reject an empty namespace",
    )
    parser.add_argument(
        "-c",
        "--config",
        type=str,
        default=None,
        help="Path to a config yaml with overrides",
    )
    parser.add_argument(
        "-j",
        "--json",
        default=False,
        action="store_true",
        help="Print the violations as json",
    )
    args = parser.parse_args(argv)

    if args.config:
        configure(args.config)

    # Set up logging so users can set LOG_LEVEL etc
    logging.configure()

    try:
        results = lint(
            args.namespace_file,
            environments=args.environments,
            require_tasks=args.require_tasks,
            require_problem_statements=args.require_problem_statements,
        )
    except (FileNotFoundError, ValueError) as err:
        log.error("<PST38815502E>", "Could not load %s: %s", args.namespace_file, err)
        print(str(err), file=sys.stderr)
        return EXIT_LOAD_ERROR

    if args.json:
        print(_render_json(results))
    elif results:
        print(_render_text(results))

    if results:
        log.debug("Found violations in %d problem statement(s)", len(results))
        return EXIT_VIOLATIONS
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())

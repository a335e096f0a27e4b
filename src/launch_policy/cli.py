"""Command-line evaluation of a launch context against a policy file."""

import argparse
import json
import sys
from typing import List, Optional

from launch_policy.common.config.settings import get_config
from launch_policy.common.exceptions import ConfigurationError, LaunchPolicyException
from launch_policy.common.logging import get_logger
from launch_policy.governance.policies.engine import PolicyEngine

EXIT_ALLOWED = 0
EXIT_DENIED = 1
EXIT_ERROR = 2


def _read_context(path: str) -> dict:
    if path == "-":
        return json.load(sys.stdin)
    with open(path, "r") as f:
        return json.load(f)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Evaluate a job launch context against a launch policy"
    )
    parser.add_argument(
        "--policy", "-p",
        default=None,
        help="Policy YAML file (default: LAUNCH_POLICY_POLICY_FILE or config/launch_policy.yaml under the project root)"
    )
    parser.add_argument(
        "--context", "-c",
        required=True,
        help="Launch context JSON file, or - for stdin"
    )
    parser.add_argument(
        "--workers", "-w",
        type=int,
        default=None,
        help="Worker threads for rule evaluation (default: LAUNCH_POLICY_MAX_WORKERS)"
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Print the decision as JSON; exit 0 when allowed, 1 when denied."""
    args = build_parser().parse_args(argv)

    try:
        config = get_config()
    except ConfigurationError as e:
        get_logger(__name__, level="ERROR").error(f"Invalid configuration: {e}")
        return EXIT_ERROR
    logger = get_logger(__name__, level=config.log_level.value)

    try:
        engine = PolicyEngine(policy_file=args.policy, max_workers=args.workers)
        context = _read_context(args.context)
        if not isinstance(context, dict):
            raise ValueError("launch context must be a JSON object")
    except (LaunchPolicyException, OSError, ValueError) as e:
        logger.error(f"Cannot evaluate launch: {e}")
        return EXIT_ERROR

    decision = engine.decide(context)
    print(json.dumps(decision.to_output(), indent=2, ensure_ascii=False))
    return EXIT_ALLOWED if decision.allowed else EXIT_DENIED


if __name__ == "__main__":
    sys.exit(main())

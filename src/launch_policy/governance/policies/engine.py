"""Policy Engine - decides whether a job launch complies with policy.

decide() is the pure aggregator: it runs every rule of a RuleSet over one
launch context and folds the failures into a single Decision.
PolicyEngine wraps it for the host platform: loading the policy file,
logging, and raising on denial.
"""

import atexit
import logging
import threading
from collections.abc import Mapping
from concurrent.futures import Executor, ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from launch_policy.common.config.settings import get_config
from launch_policy.common.exceptions import LaunchDeniedError
from launch_policy.core.types import LaunchContext, RuleSet
from launch_policy.governance.policies.compiler import load_policy_file
from launch_policy.governance.policies.evaluator import evaluate
from launch_policy.governance.schemas import Decision, PolicyCheckResult, Violation


logger = logging.getLogger(__name__)


# Module-level shared executors for parallel rule evaluation, one per pool size
_shared_executors: Dict[int, ThreadPoolExecutor] = {}
_executor_lock = threading.Lock()


def _get_shared_executor(max_workers: int) -> ThreadPoolExecutor:
    """Get or create the shared thread pool executor for a pool size.

    Engines asking for the same size share one pool; a different size
    gets its own pool instead of silently reusing a smaller one.
    """
    with _executor_lock:
        executor = _shared_executors.get(max_workers)
        if executor is None:
            if not _shared_executors:
                atexit.register(_shutdown_shared_executors)
            executor = ThreadPoolExecutor(
                max_workers=max_workers,
                thread_name_prefix=f"RuleWorker{max_workers}"
            )
            _shared_executors[max_workers] = executor
            logger.info(f"Created shared rule executor with {max_workers} workers")

    return executor


def _shutdown_shared_executors() -> None:
    """Shutdown the shared executors on process exit."""
    with _executor_lock:
        executors = list(_shared_executors.values())
        _shared_executors.clear()
    for executor in executors:
        executor.shutdown(wait=True)


def _as_context(context: Union[LaunchContext, Mapping, None]) -> LaunchContext:
    """Wrap a payload as a LaunchContext.

    A payload that is not a mapping has no fields to match, so it is
    evaluated as an empty context.
    """
    if isinstance(context, LaunchContext):
        return context
    if not isinstance(context, Mapping):
        if context is not None:
            logger.debug(f"Launch context is a {type(context).__name__}, evaluating as empty")
        return LaunchContext()
    return LaunchContext.from_dict(context)


def collect_violations(
    rule_set: RuleSet,
    context: Union[LaunchContext, Mapping],
    executor: Optional[Executor] = None,
) -> List[Violation]:
    """Evaluate every rule and return failures in rule-declaration order.

    With an executor, rules run concurrently; results are reassembled by
    rule index so ordering does not depend on completion order.
    """
    context = _as_context(context)

    if executor is None:
        results = [evaluate(rule, context) for rule in rule_set]
    else:
        futures = [executor.submit(evaluate, rule, context) for rule in rule_set]
        results = [future.result() for future in futures]

    return [violation for violation in results if violation is not None]


def decide(
    rule_set: RuleSet,
    context: Union[LaunchContext, Mapping],
    executor: Optional[Executor] = None,
) -> Decision:
    """Run all rules over one launch context and produce the Decision.

    Every rule is evaluated; there is no short-circuit on the first
    failure, so the caller receives the complete list of violations.

    Args:
        rule_set: Compiled rules, evaluated in declaration order
        context: LaunchContext or JSON-like launch payload
        executor: Optional executor for concurrent rule evaluation

    Returns:
        Decision with allowed == (no violations)
    """
    decision = Decision()  # default: allowed, no violations

    violations = collect_violations(rule_set, context, executor)
    if violations:
        decision = Decision.from_violations([v.message for v in violations])

    return decision


class PolicyEngine:
    """Evaluates launch policies before a job starts.
    """

    def __init__(
        self,
        policy_file: Optional[Union[str, Path]] = None,
        rule_set: Optional[RuleSet] = None,
        max_workers: Optional[int] = None,
        executor: Optional[Executor] = None,
    ):
        """Initialize policy engine.

        Args:
            policy_file: Path to a YAML policy. Uses the configured file if
                neither policy_file nor rule_set is provided.
            rule_set: Pre-compiled rules. Takes precedence over policy_file.
            max_workers: Worker threads for rule evaluation (1 = sequential).
                Uses the configured value if not provided.
            executor: Custom executor. Uses the shared one when max_workers > 1.
        """
        config = get_config()
        self.max_workers = max_workers if max_workers is not None else config.max_workers
        self._executor = executor

        if rule_set is not None:
            self.policy_file: Optional[Path] = Path(policy_file) if policy_file else None
            self.rule_set = rule_set
        else:
            self.policy_file = Path(policy_file) if policy_file else config.policy_file
            self.rule_set = self._load_policies()

    def _load_policies(self) -> RuleSet:
        """Load and compile rules from the policy file."""
        rule_set = load_policy_file(self.policy_file)
        logger.info(
            f"Loaded policy {rule_set.name} v{rule_set.version} "
            f"({len(rule_set)} rules) from {self.policy_file}"
        )
        return rule_set

    def reload_policies(self) -> None:
        """Re-read the policy file. The old rules stay active if it fails."""
        if self.policy_file is None:
            return
        self.rule_set = self._load_policies()

    @property
    def policy_name(self) -> str:
        return self.rule_set.name

    @property
    def policy_version(self) -> str:
        """Get current policy version."""
        return self.rule_set.version

    def _get_executor(self) -> Optional[Executor]:
        if self._executor is not None:
            return self._executor
        if self.max_workers > 1:
            return _get_shared_executor(self.max_workers)
        return None

    def decide(self, context: Union[LaunchContext, Mapping]) -> Decision:
        """Pure allow/deny decision for one launch context."""
        return decide(self.rule_set, context, executor=self._get_executor())

    def evaluate(
        self,
        context: Union[LaunchContext, Mapping],
        metadata: Optional[Dict[str, Any]] = None,
    ) -> PolicyCheckResult:
        """Evaluate a launch context against all rules.

        This is the main entry point for the platform. Checks ALL rules
        and returns the decision together with structured violations.

        Args:
            context: Launch payload (extra_vars, credentials, ...)
            metadata: Optional caller context (job template, user, ...)

        Returns:
            PolicyCheckResult with decision and any violations
        """
        rule_set = self.rule_set
        violations = collect_violations(rule_set, context, executor=self._get_executor())
        decision = Decision.from_violations([v.message for v in violations])

        if not decision.allowed:
            logger.warning(
                f"Launch denied by policy {rule_set.name} v{rule_set.version}: "
                f"{len(violations)} violation(s) from rules "
                f"{[v.rule_id for v in violations]}"
            )

        return PolicyCheckResult(
            decision=decision,
            policy_name=rule_set.name,
            policy_version=rule_set.version,
            violations=violations,
            metadata=dict(metadata or {}),
        )

    def enforce(
        self,
        context: Union[LaunchContext, Mapping],
        metadata: Optional[Dict[str, Any]] = None,
        raise_on_violation: bool = True,
    ) -> PolicyCheckResult:
        """Enforce policies with optional exception on violation.

        Args:
            context: Launch payload
            metadata: Optional caller context
            raise_on_violation: If True, raise exception on violation

        Returns:
            PolicyCheckResult

        Raises:
            LaunchDeniedError: If raise_on_violation and the launch is denied
        """
        result = self.evaluate(context, metadata=metadata)

        if raise_on_violation and result.is_denied:
            raise LaunchDeniedError(
                violations=result.decision.violations,
                details={
                    "policy_name": result.policy_name,
                    "policy_version": result.policy_version,
                    "check_id": result.check_id,
                },
            )

        return result

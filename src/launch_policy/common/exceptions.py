"""Custom exceptions for Launch Policy.

Provides a hierarchy of exceptions for different error types.
All Launch Policy exceptions inherit from LaunchPolicyException.

Note that a field missing from a launch context is never an exception:
the resolver reports it as "no match".
"""

from typing import Any, Dict, List, Optional


class LaunchPolicyException(Exception):
    """Base exception for all Launch Policy errors.
    
    Attributes:
        message: Human-readable error message
        code: Machine-readable error code
        details: Additional context about the error
    """
    
    def __init__(
        self,
        message: str,
        code: str = "LAUNCH_POLICY_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)
    
    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationError(LaunchPolicyException):
    """Raised when configuration is invalid or missing."""
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="CONFIG_ERROR", details=details)


class CompilationError(LaunchPolicyException):
    """Raised when a policy declaration cannot be compiled into rules.
    
    Covers unknown predicate kinds, malformed field paths and missing
    or invalid parameters. Compilation of the whole rule set fails;
    a malformed rule is never skipped.
    """
    
    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, code="COMPILATION_ERROR", details=details)


class LaunchDeniedError(LaunchPolicyException):
    """Raised by PolicyEngine.enforce when a launch violates policy."""
    
    def __init__(
        self,
        violations: List[str],
        message: str = "Job launch denied by policy",
        details: Optional[Dict[str, Any]] = None
    ):
        self.violations = list(violations)
        details = details or {}
        details["violations"] = self.violations
        super().__init__(message, code="LAUNCH_DENIED", details=details)

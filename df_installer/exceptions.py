"""
Exception hierarchy for the DreamFactory MCP installer.

Every fatal step failure is raised as an ``InstallerError`` subclass so the
CLI can report it uniformly. Declined prompts are not errors and never appear
here; they are returned as an ``Outcome`` instead.
"""

from typing import Any, Dict, List, Optional, Sequence, Union


class InstallerError(Exception):
    """
    Base exception class for all installer errors.

    Provides structured error information including context, error codes,
    and optional recovery suggestions.
    """

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None,
        recovery_suggestion: Optional[str] = None,
    ) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error message
            error_code: Optional error code for programmatic handling
            context: Optional dictionary with error context
            cause: Optional underlying exception that caused this error
            recovery_suggestion: Optional suggestion for error recovery
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.context = context or {}
        self.cause = cause
        self.recovery_suggestion = recovery_suggestion

    def __str__(self) -> str:
        """Return a formatted error message with context."""
        result = self.message
        if self.error_code:
            result = f"[{self.error_code}] {result}"
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            result += f" (context: {context_str})"
        if self.cause:
            result += f" (caused by: {self.cause})"
        return result

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "error_code": self.error_code,
            "context": self.context,
            "cause": str(self.cause) if self.cause else None,
            "recovery_suggestion": self.recovery_suggestion,
        }


class CommandFailedError(InstallerError):
    """Raised when an external command exits non-zero, is missing, or times out."""

    def __init__(
        self,
        message: str,
        command: Optional[Union[str, Sequence[str]]] = None,
        returncode: Optional[int] = None,
        stderr: Optional[str] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if command:
            context["command"] = (
                command if isinstance(command, str) else " ".join(command)
            )
        if returncode is not None:
            context["returncode"] = returncode
        kwargs["context"] = context
        kwargs.setdefault("error_code", "COMMAND_FAILED")
        super().__init__(message, **kwargs)
        self.command = command
        self.returncode = returncode
        self.stderr = stderr or ""


class ContainerRuntimeUnavailableError(InstallerError):
    """Raised when Docker is missing and cannot be installed interactively."""

    def __init__(self, message: str = "Docker is not available", **kwargs: Any) -> None:
        kwargs.setdefault("error_code", "DOCKER_UNAVAILABLE")
        kwargs.setdefault(
            "recovery_suggestion",
            "Install Docker from https://www.docker.com/get-started, make sure it is running and try again",
        )
        super().__init__(message, **kwargs)


class WebAppSetupError(InstallerError):
    """Raised when the local DreamFactory checkout, build or start fails."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("error_code", "DREAMFACTORY_SETUP_FAILED")
        super().__init__(message, **kwargs)


class ReadinessTimeoutError(InstallerError):
    """Raised when DreamFactory does not answer HTTP 200 within the poll budget."""

    def __init__(
        self, message: str, url: Optional[str] = None, attempts: Optional[int] = None, **kwargs: Any
    ) -> None:
        context = kwargs.get("context", {})
        if url:
            context["url"] = url
        if attempts is not None:
            context["attempts"] = attempts
        kwargs["context"] = context
        kwargs.setdefault("error_code", "DREAMFACTORY_NOT_READY")
        kwargs.setdefault(
            "recovery_suggestion",
            "Check the container logs with 'docker compose logs' in the df-docker directory",
        )
        super().__init__(message, **kwargs)


class IntegrationServerSetupError(InstallerError):
    """Raised when the MCP server checkout, dependency install or build fails."""

    def __init__(self, message: str, **kwargs: Any) -> None:
        kwargs.setdefault("error_code", "MCP_SETUP_FAILED")
        super().__init__(message, **kwargs)


class HostAppNotFoundError(InstallerError):
    """Raised when Claude Desktop is not installed."""

    def __init__(
        self,
        message: str = "Claude Desktop not found",
        searched: Optional[List[str]] = None,
        **kwargs: Any,
    ) -> None:
        context = kwargs.get("context", {})
        if searched:
            context["searched"] = ", ".join(searched)
        kwargs["context"] = context
        kwargs.setdefault("error_code", "CLAUDE_NOT_FOUND")
        kwargs.setdefault(
            "recovery_suggestion",
            "Install Claude Desktop from https://claude.ai/download and run this installer again",
        )
        super().__init__(message, **kwargs)


class HostConfigError(InstallerError):
    """Raised when the Claude Desktop configuration cannot be written."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs: Any) -> None:
        context = kwargs.get("context", {})
        if path:
            context["path"] = path
        kwargs["context"] = context
        kwargs.setdefault("error_code", "CONFIG_UPDATE_FAILED")
        super().__init__(message, **kwargs)


class DemoApiError(InstallerError):
    """Raised inside the demo API provisioning sub-flow; never fatal to the install."""

    def __init__(self, message: str, step: Optional[str] = None, **kwargs: Any) -> None:
        context = kwargs.get("context", {})
        if step:
            context["step"] = step
        kwargs["context"] = context
        kwargs.setdefault("error_code", "DEMO_API_FAILED")
        super().__init__(message, **kwargs)

"""
Exception hierarchy for the Afribac AI service.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class AfribacAIException(Exception):
    """Base exception for all Afribac AI service errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class ConfigurationError(AfribacAIException):
    """Raised when no AI provider API key is configured."""

    def __init__(
        self,
        message: str = "Missing AI API key. Set GOOGLE_GENERATIVE_AI_API_KEY or OPENAI_API_KEY.",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)


class EditSelectionRequiredError(AfribacAIException):
    """Raised when the edit tool is requested without an active selection."""

    def __init__(self, details: dict[str, Any] | None = None) -> None:
        """
        Initialize edit precondition error.

        Args:
            details: Additional context
        """
        super().__init__(
            "L’outil d’édition est disponible uniquement sur une sélection",
            details,
        )


class StreamProtocolError(AfribacAIException):
    """Raised when command stream events are emitted out of order."""

    def __init__(
        self,
        message: str,
        phase: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize stream protocol error.

        Args:
            message: Error message
            phase: Stream phase at the time of the violation
            details: Additional context
        """
        details = details or {}
        if phase:
            details["phase"] = phase
        super().__init__(message, details)


class ModelOutputError(AfribacAIException):
    """Raised when a model returns structured output that cannot be used."""

    def __init__(
        self,
        message: str,
        output_preview: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """
        Initialize model output error.

        Args:
            message: Error message
            output_preview: Truncated raw model output
            details: Additional context
        """
        details = details or {}
        if output_preview is not None:
            details["output_preview"] = output_preview
        super().__init__(message, details)


class ImageInputError(AfribacAIException):
    """Raised when an extraction request carries no usable page image."""

    def __init__(
        self,
        message: str = "Aucune image fournie",
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message, details)

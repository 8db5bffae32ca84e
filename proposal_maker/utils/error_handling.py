"""Application exception hierarchy.

Every failure that should reach an HTTP caller is an ``AppException``. The
API layer turns these into JSON error responses (see ``api.main``), so
services raise them directly instead of building HTTP errors themselves.
"""
from typing import Any, Dict, Optional

CREDENTIAL_SETTINGS_PATH = "/api/settings/credentials"


class AppException(Exception):
    """Base exception for errors surfaced to API callers."""

    status_code = 500
    default_message = "An error occurred while processing your request"

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        self.message = message or self.default_message
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        body = {"detail": self.message, "error": type(self).__name__}
        body.update(self.details)
        return body


# Generic CRUD errors


class ValidationError(AppException):
    status_code = 400
    default_message = "Invalid request"


class AuthenticationError(AppException):
    status_code = 401
    default_message = "Unauthorized"


class PermissionDeniedError(AppException):
    status_code = 403
    default_message = "You do not have permission to modify this resource"


class ResourceNotFoundError(AppException):
    status_code = 404
    default_message = "Resource not found"


class ConflictError(AppException):
    status_code = 409
    default_message = "Resource already exists"


# Template resolution


class TemplateNotFound(ResourceNotFoundError):
    default_message = "Prompt template not found or inactive"


class InvalidTemplate(ValidationError):
    default_message = "Prompt template has no {text} placeholder"


# Credentials


class _CredentialError(AppException):
    """Credential problems point the user at the settings page."""

    def __init__(self, message: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        details = {"settings_url": CREDENTIAL_SETTINGS_PATH, **(details or {})}
        super().__init__(message, details)


class CredentialMissing(_CredentialError):
    status_code = 400
    default_message = "API key is required. Please configure your API key in settings."


class InvalidCredentialFormat(_CredentialError):
    status_code = 400
    default_message = "Invalid API key format. Please check your API key in settings."


class CredentialDecryptionError(_CredentialError):
    status_code = 500
    default_message = "Error accessing API key. Please re-enter your API key in settings."


# Model invocation


class InvalidModel(ValidationError):
    default_message = "Invalid model selection"


class UpstreamError(AppException):
    """Non-success response from the model service. Never retried."""

    def __init__(self, upstream_status: int, upstream_body: str = "", message: Optional[str] = None):
        self.upstream_status = upstream_status
        self.upstream_body = upstream_body
        details = {"upstream_status": upstream_status, "upstream_body": upstream_body}
        if upstream_status in (401, 403):
            details["settings_url"] = CREDENTIAL_SETTINGS_PATH
            message = message or "Invalid API key. Please check your API key in settings."
        elif upstream_status == 429:
            message = message or "Rate limit exceeded. Please try again later."
        super().__init__(message or f"Model service error: {upstream_status}", details)

    @property
    def status_code(self) -> int:  # type: ignore[override]
        if self.upstream_status == 429:
            return 429
        if self.upstream_status in (401, 403):
            return 400
        return 502


class EmptyCompletion(AppException):
    status_code = 502
    default_message = "No response content from the model service"


# Response validation


class MalformedModelOutput(AppException):
    status_code = 502
    default_message = "Invalid JSON response from AI model"


class SchemaViolation(AppException):
    status_code = 502
    default_message = "AI model response did not match the expected structure"


class EmptyResult(AppException):
    status_code = 502
    default_message = "Failed to analyze image. Please try again."

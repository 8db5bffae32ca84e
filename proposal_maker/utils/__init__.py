"""Utility modules."""

from proposal_maker.utils.error_handling import (
    AppException,
    AuthenticationError,
    ConflictError,
    CredentialDecryptionError,
    CredentialMissing,
    EmptyCompletion,
    EmptyResult,
    InvalidCredentialFormat,
    InvalidModel,
    InvalidTemplate,
    MalformedModelOutput,
    PermissionDeniedError,
    ResourceNotFoundError,
    SchemaViolation,
    TemplateNotFound,
    UpstreamError,
    ValidationError,
)

__all__ = [
    "AppException",
    "AuthenticationError",
    "ConflictError",
    "CredentialDecryptionError",
    "CredentialMissing",
    "EmptyCompletion",
    "EmptyResult",
    "InvalidCredentialFormat",
    "InvalidModel",
    "InvalidTemplate",
    "MalformedModelOutput",
    "PermissionDeniedError",
    "ResourceNotFoundError",
    "SchemaViolation",
    "TemplateNotFound",
    "UpstreamError",
    "ValidationError",
]

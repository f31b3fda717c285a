"""
Core Application - Shared Base Classes

Infrastructure used by every marketplace app. Nothing in here knows about
listings, sellers or payments.

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Model Mixins (import from core.model_mixins):
    - UUIDPrimaryKeyMixin: UUID as primary key
    - MetadataMixin: JSON metadata storage

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - BaseApplicationError: Base exception with error codes
    - ValidationError, NotFoundError, PermissionDeniedError,
      ConflictError, RateLimitError, ExternalServiceError
    - exception_for_result: Maps a failed ServiceResult to one of the above

DRF integration (import from core.exception_handler):
    - application_exception_handler: Maps BaseApplicationError to responses
"""

"""
Shared building blocks for the billing apps.

core.models        BaseModel (created_at / updated_at)
core.model_mixins  UUIDPrimaryKeyMixin
core.services      BaseService, ServiceResult
core.exceptions    BaseApplicationError, NotFoundError, PermissionDeniedError
core.views         health_check

Nothing here knows about orders or tiers.
"""

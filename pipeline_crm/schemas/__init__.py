"""Pydantic schema package for API contracts."""

from pipeline_crm.schemas.auth import (
    AuthUser,
    LoginRequest,
    PasswordChangeRequest,
    RegisterRequest,
    TokenResponse,
)
from pipeline_crm.schemas.common import CreatedResponse, ErrorEnvelope, MessageResponse, SuccessResponse
from pipeline_crm.schemas.interlocutors import InterlocutorResponse, InterlocutorWriteRequest
from pipeline_crm.schemas.next_actions import (
    ActivityCreateRequest,
    ActivityResponse,
    NextActionCreateRequest,
    NextActionResponse,
    NextActionUpdateRequest,
)
from pipeline_crm.schemas.prospects import (
    AttachmentUploadResponse,
    ProspectResponse,
    ProspectWriteRequest,
    StatusHistoryResponse,
)
from pipeline_crm.schemas.users import (
    ActiveSessionResponse,
    AdminUserResponse,
    PasswordSetRequest,
    PasswordSetResponse,
    UserCreateRequest,
    UserResponse,
)

__all__ = [
    "ActiveSessionResponse",
    "ActivityCreateRequest",
    "ActivityResponse",
    "AdminUserResponse",
    "AttachmentUploadResponse",
    "AuthUser",
    "CreatedResponse",
    "ErrorEnvelope",
    "InterlocutorResponse",
    "InterlocutorWriteRequest",
    "LoginRequest",
    "MessageResponse",
    "NextActionCreateRequest",
    "NextActionResponse",
    "NextActionUpdateRequest",
    "PasswordChangeRequest",
    "PasswordSetRequest",
    "PasswordSetResponse",
    "ProspectResponse",
    "ProspectWriteRequest",
    "RegisterRequest",
    "StatusHistoryResponse",
    "SuccessResponse",
    "TokenResponse",
    "UserCreateRequest",
    "UserResponse",
]

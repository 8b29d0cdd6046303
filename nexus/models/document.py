"""Document vault pydantic models."""

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DocumentType(str, Enum):
    """Kind of document held in the vault."""

    CONTRACT = "contract"
    AGREEMENT = "agreement"
    REPORT = "report"
    INVOICE = "invoice"
    RECEIPT = "receipt"
    CERTIFICATE = "certificate"
    LICENSE = "license"
    PERMIT = "permit"
    OTHER = "other"


class DocumentStatus(str, Enum):
    """Document status."""

    DRAFT = "draft"
    ACTIVE = "active"
    ARCHIVED = "archived"
    DELETED = "deleted"


class AccessLevel(str, Enum):
    """Document confidentiality level."""

    PUBLIC = "public"
    INTERNAL = "internal"
    CONFIDENTIAL = "confidential"
    RESTRICTED = "restricted"


class AccessType(str, Enum):
    """Permission granted on a document."""

    READ = "read"
    WRITE = "write"
    ADMIN = "admin"


class ActivityType(str, Enum):
    """Audit trail event type."""

    CREATED = "created"
    UPDATED = "updated"
    DOWNLOADED = "downloaded"
    VIEWED = "viewed"
    SHARED = "shared"
    DELETED = "deleted"
    RESTORED = "restored"
    MOVED = "moved"


class DocumentCategoryCreate(BaseModel):
    """Model for creating a document category."""

    name: str = Field(..., min_length=1, max_length=100)
    description: Optional[str] = None
    parent_id: Optional[int] = None
    color: str = Field("#3B82F6", pattern=r"^#[0-9A-Fa-f]{6}$")
    icon: str = Field("folder", max_length=50)


class DocumentCategoryUpdate(BaseModel):
    """Model for updating a document category."""

    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = None
    parent_id: Optional[int] = None
    color: Optional[str] = Field(None, pattern=r"^#[0-9A-Fa-f]{6}$")
    icon: Optional[str] = Field(None, max_length=50)
    is_active: Optional[bool] = None


class DocumentCategory(DocumentCategoryCreate):
    """Complete document category model."""

    id: int
    company_id: int
    is_active: bool
    document_count: int = 0
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DocumentMetadata(BaseModel):
    """Descriptive fields sent alongside an uploaded file."""

    title: str = Field(..., min_length=1, max_length=255)
    category_id: int
    document_type: DocumentType
    description: Optional[str] = None
    tags: List[str] = []
    access_level: AccessLevel = AccessLevel.INTERNAL
    expiry_date: Optional[date] = None
    reminder_date: Optional[date] = None
    notes: Optional[str] = None
    metadata: Dict[str, Any] = {}


class StoredFile(BaseModel):
    """Where and how an uploaded file was saved."""

    file_name: str
    original_file_name: str
    file_path: str
    file_size: int
    mime_type: str
    file_extension: Optional[str] = None


class DocumentUpdate(BaseModel):
    """Model for updating document metadata."""

    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    category_id: Optional[int] = None
    document_type: Optional[DocumentType] = None
    status: Optional[DocumentStatus] = None
    tags: Optional[List[str]] = None
    access_level: Optional[AccessLevel] = None
    expiry_date: Optional[date] = None
    reminder_date: Optional[date] = None
    notes: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None


class Document(BaseModel):
    """Complete document model."""

    id: int
    company_id: int
    category_id: int
    title: str
    description: Optional[str] = None
    file_name: str
    original_file_name: str
    file_path: str
    file_size: int
    mime_type: str
    file_extension: Optional[str] = None
    version: int
    is_current_version: bool
    parent_document_id: Optional[int] = None
    document_type: DocumentType
    status: DocumentStatus
    tags: List[str] = []
    metadata: Dict[str, Any] = {}
    access_level: AccessLevel
    expiry_date: Optional[date] = None
    reminder_date: Optional[date] = None
    uploaded_by: Optional[int] = None
    download_count: int
    last_accessed_at: Optional[datetime] = None
    notes: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DocumentFilter(BaseModel):
    """Filters accepted by the document listing."""

    category_id: Optional[int] = None
    document_type: Optional[DocumentType] = None
    status: Optional[DocumentStatus] = None
    access_level: Optional[AccessLevel] = None
    uploaded_by: Optional[int] = None
    search: Optional[str] = None
    tag: Optional[str] = None
    current_only: bool = True


class DocumentAccessCreate(BaseModel):
    """Model for granting access to a document."""

    user_id: Optional[int] = None
    role_id: Optional[str] = None
    access_type: AccessType
    expires_at: Optional[datetime] = None

    @model_validator(mode="after")
    def require_grantee(self):
        """Access is granted to a user or a role."""
        if self.user_id is None and not self.role_id:
            raise ValueError("Either user_id or role_id is required")
        return self


class DocumentAccess(BaseModel):
    """Complete document access model."""

    id: int
    company_id: int
    document_id: int
    user_id: Optional[int] = None
    role_id: Optional[str] = None
    access_type: AccessType
    granted_by: Optional[int] = None
    granted_at: datetime
    expires_at: Optional[datetime] = None
    is_active: bool

    model_config = ConfigDict(from_attributes=True)


class DocumentActivity(BaseModel):
    """Audit trail entry for a document."""

    id: int
    company_id: int
    document_id: int
    user_id: Optional[int] = None
    activity_type: ActivityType
    description: Optional[str] = None
    metadata: Dict[str, Any] = {}
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class DocumentStatistics(BaseModel):
    """Aggregate view over a company's document vault."""

    total_documents: int
    total_size: int
    by_type: Dict[str, int]
    by_status: Dict[str, int]
    by_category: Dict[str, int]
    expiring_soon: int


class ActivityContext(BaseModel):
    """Who performed a document action and from where."""

    user_id: Optional[int] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None

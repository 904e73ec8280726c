from typing import Optional

from pydantic import BaseModel, Field


class CollectionResult(BaseModel):
    collection: str
    documents: int = 0
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None


class StorageResult(BaseModel):
    prefix: str
    copied: int = 0
    failed: int = 0
    failed_objects: list[str] = []
    error: Optional[str] = None


class AuthResult(BaseModel):
    created: int = 0
    skipped: int = 0
    failed: int = 0
    failed_uids: list[str] = []
    listing_error: Optional[str] = None

    @property
    def total(self) -> int:
        return self.created + self.skipped + self.failed


class CleanupResult(BaseModel):
    collections: list[CollectionResult] = []
    users_deleted: int = 0
    users_failed: int = 0
    listing_error: Optional[str] = None

    @property
    def documents_deleted(self) -> int:
        return sum(c.documents for c in self.collections)


class MigrationReport(BaseModel):
    scope: str
    source_project: str
    target_project: str
    collections: list[CollectionResult] = []
    storage: list[StorageResult] = []
    auth: Optional[AuthResult] = None
    error: Optional[str] = None

    @property
    def documents_copied(self) -> int:
        return sum(c.documents for c in self.collections)

    @property
    def objects_copied(self) -> int:
        return sum(s.copied for s in self.storage)


class CollectionSample(BaseModel):
    collection: str
    sample_size: int = 0
    first_document_id: Optional[str] = None
    error: Optional[str] = None


class UserSummary(BaseModel):
    uid: str
    email: Optional[str] = None
    display_name: Optional[str] = None
    creation_timestamp: Optional[int] = None


class InspectionReport(BaseModel):
    project_id: str = Field(..., description="Project ID from the service-account key file.")
    client_email: Optional[str] = None
    connection_ok: bool = False
    connection_error: Optional[str] = None
    collections: list[CollectionSample] = []
    user_count: int = 0
    users: list[UserSummary] = []
    auth_error: Optional[str] = None
    auth_hint: Optional[str] = None

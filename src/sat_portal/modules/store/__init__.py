"""
Store module - data access facade over the relational store.
"""

from sat_portal.modules.store.models import ApplicationStatus, RequirementType, SeminarType
from sat_portal.modules.store.repository import SaveResult
from sat_portal.modules.store.schemas import (
    DocumentTemplate,
    FileRef,
    InternshipRegistration,
    Lecturer,
    Notification,
    NotificationAttachment,
    PendingFile,
    Requirement,
    SeminarRegistration,
    StoredFile,
    ThesisDefense,
    ThesisRegistration,
    is_placeholder_id,
    new_placeholder_id,
)

__all__ = [
    "ApplicationStatus",
    "SeminarType",
    "RequirementType",
    "SaveResult",
    "FileRef",
    "PendingFile",
    "StoredFile",
    "ThesisRegistration",
    "SeminarRegistration",
    "ThesisDefense",
    "InternshipRegistration",
    "Lecturer",
    "Notification",
    "NotificationAttachment",
    "DocumentTemplate",
    "Requirement",
    "is_placeholder_id",
    "new_placeholder_id",
]

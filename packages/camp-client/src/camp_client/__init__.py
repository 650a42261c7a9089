"""Caller-side services for the camp discovery engine."""

from camp_client.admin import AdminService, CampDraft, MigrationSummary
from camp_client.discovery import CampDiscoveryService, CampListing, ListingState
from camp_client.http_store import HttpDocumentStore
from camp_client.idempotency import IdempotencyStore, InMemoryIdempotencyStore, new_idempotency_key
from camp_client.metrics import InMemoryDiscoveryMetricsCollector
from camp_client.profile import ProfileRegistrations, ProfileService, ProfileUpdate
from camp_client.store import DocumentStore, InMemoryDocumentStore
from camp_client.submissions import (
    ComplaintForm,
    FeedbackForm,
    RegistrationForm,
    SubmissionReceipt,
    SubmissionService,
)

__all__ = [
    "AdminService",
    "CampDiscoveryService",
    "CampDraft",
    "CampListing",
    "ComplaintForm",
    "DocumentStore",
    "FeedbackForm",
    "HttpDocumentStore",
    "IdempotencyStore",
    "InMemoryDiscoveryMetricsCollector",
    "InMemoryDocumentStore",
    "InMemoryIdempotencyStore",
    "ListingState",
    "MigrationSummary",
    "ProfileRegistrations",
    "ProfileService",
    "ProfileUpdate",
    "RegistrationForm",
    "SubmissionReceipt",
    "SubmissionService",
    "new_idempotency_key",
]

"""Camp aggregation and filtering engine."""

from camp_engine.aggregator import aggregate_camps, attach_average_rating, matching_feedback
from camp_engine.distance import distance_to_camp, great_circle_km, haversine_distance_km
from camp_engine.exceptions import (
    CampEngineError,
    CampOwnershipError,
    DataIntegrityError,
    DuplicateSubmissionError,
    ProfileNotFoundError,
    RegistrationStateError,
    RemoteFetchError,
    RemoteStoreError,
    RemoteWriteError,
    SubmissionValidationError,
)
from camp_engine.filtering import CampFilterCriteria, SortMode, available_locations, filter_camps, is_camp_active
from camp_engine.migration import ReferenceResolution, resolve_camp_references
from camp_engine.models import (
    Camp,
    Complaint,
    Document,
    Feedback,
    GeoPoint,
    Registration,
    UserProfile,
    ZeroRatingPolicy,
)
from camp_engine.normalizer import CampNormalizer, NormalizationResult, coerce_datetime
from camp_engine.notifications import has_local_notification, match_local_camps
from camp_engine.rating import average_rating, collect_ratings
from camp_engine.reports import (
    CampRegistrationReport,
    RegisteredCamp,
    build_registration_reports,
    complaints_for_camps,
    feedback_for_camps,
    registrations_for_camp,
    registrations_for_email,
    render_registration_report_csv,
    verify_registration,
)

__all__ = [
    "Camp",
    "CampEngineError",
    "CampOwnershipError",
    "CampFilterCriteria",
    "CampNormalizer",
    "CampRegistrationReport",
    "Complaint",
    "DataIntegrityError",
    "Document",
    "DuplicateSubmissionError",
    "Feedback",
    "GeoPoint",
    "NormalizationResult",
    "ProfileNotFoundError",
    "ReferenceResolution",
    "RegisteredCamp",
    "Registration",
    "RegistrationStateError",
    "RemoteFetchError",
    "RemoteStoreError",
    "RemoteWriteError",
    "SortMode",
    "SubmissionValidationError",
    "UserProfile",
    "ZeroRatingPolicy",
    "aggregate_camps",
    "attach_average_rating",
    "available_locations",
    "average_rating",
    "build_registration_reports",
    "coerce_datetime",
    "collect_ratings",
    "complaints_for_camps",
    "distance_to_camp",
    "feedback_for_camps",
    "filter_camps",
    "great_circle_km",
    "has_local_notification",
    "haversine_distance_km",
    "is_camp_active",
    "match_local_camps",
    "matching_feedback",
    "registrations_for_camp",
    "registrations_for_email",
    "render_registration_report_csv",
    "resolve_camp_references",
    "verify_registration",
]

"""
Servicios de soporte: sesión, notificaciones, documentos,
mensajería, métricas, onboarding, publicación y verificación.
"""

from habitar.services.notifications import WebhookNotifier, build_invite_payload
from habitar.services.session import SessionLoader
from habitar.services.messaging import MessagingService
from habitar.services.documents import DocumentService, generate_user_file_path
from habitar.services.analytics import AnalyticsService, ROIInputs, calculate_roi, parse_roi_inputs
from habitar.services.onboarding import OnboardingService, validate_onboarding
from habitar.services.listings import ListingForm, ListingService
from habitar.services.verification import VerificationService

__all__ = [
    "WebhookNotifier",
    "build_invite_payload",
    "SessionLoader",
    "MessagingService",
    "DocumentService",
    "generate_user_file_path",
    "AnalyticsService",
    "ROIInputs",
    "calculate_roi",
    "parse_roi_inputs",
    "OnboardingService",
    "validate_onboarding",
    "ListingForm",
    "ListingService",
    "VerificationService",
]

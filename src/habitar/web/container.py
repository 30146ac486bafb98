"""
Servicios compartidos por los handlers de la app web.
"""

from dataclasses import dataclass
from typing import Optional

from aiohttp import web

from habitar.database import ListingRepository, ProfileRepository, SupabaseClient, get_supabase_client
from habitar.services import (
    AnalyticsService,
    DocumentService,
    ListingService,
    MessagingService,
    OnboardingService,
    SessionLoader,
    VerificationService,
    WebhookNotifier,
)
from habitar.workflows import InvitationService, ShowingService


@dataclass
class AppServices:
    session_loader: SessionLoader
    invitations: InvitationService
    showings: ShowingService
    documents: DocumentService
    messaging: MessagingService
    analytics: AnalyticsService
    onboarding: OnboardingService
    listings: ListingRepository
    profiles: ProfileRepository
    publishing: ListingService
    verification: VerificationService

    @classmethod
    def build(
        cls,
        client: Optional[SupabaseClient] = None,
        notifier: Optional[WebhookNotifier] = None,
        enforce_showing_transitions: Optional[bool] = None,
    ) -> "AppServices":
        """Arma todos los servicios sobre un mismo cliente de Supabase."""
        client = client or get_supabase_client()
        messaging = MessagingService(client)
        profiles = ProfileRepository(client)
        return cls(
            session_loader=SessionLoader(client, profiles),
            invitations=InvitationService(client, notifier=notifier),
            showings=ShowingService(
                client,
                messaging=messaging,
                enforce_transitions=enforce_showing_transitions,
            ),
            documents=DocumentService(client),
            messaging=messaging,
            analytics=AnalyticsService(client),
            onboarding=OnboardingService(client, profiles),
            listings=ListingRepository(client),
            profiles=profiles,
            publishing=ListingService(client),
            verification=VerificationService(client, profiles),
        )


SERVICES_KEY = web.AppKey("services", AppServices)
FALLBACK_PATH_KEY = web.AppKey("fallback_path", str)

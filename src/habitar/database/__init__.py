"""
Módulo de base de datos.

Provee acceso a Supabase y operaciones CRUD.
"""

from habitar.database.supabase_client import get_supabase_client, SupabaseClient
from habitar.database.repositories import (
    InvitationRepository,
    ShowingRepository,
    ListingRepository,
    ProfileRepository,
    UserRepository,
    DocumentRepository,
    MessagingRepository,
)

__all__ = [
    "get_supabase_client",
    "SupabaseClient",
    "InvitationRepository",
    "ShowingRepository",
    "ListingRepository",
    "ProfileRepository",
    "UserRepository",
    "DocumentRepository",
    "MessagingRepository",
]

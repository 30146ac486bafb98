"""
Modelos de datos del sistema.

Cada entidad se valida en el borde con Supabase:
las filas crudas se convierten a estos modelos al leerlas.
"""

from habitar.models.user import AccessTier, Role, UserSession
from habitar.models.invitation import Invitation, InvitationStatus
from habitar.models.showing import PropertyShowing, ShowingStatus
from habitar.models.profiles import LandlordProfile, RealtorProfile, TenantProfile
from habitar.models.listing import Listing
from habitar.models.document import ApplicationDocument, VerificationStatus
from habitar.models.messaging import (
    Message,
    MessageThread,
    ThreadCreateParams,
    ThreadParticipant,
)

__all__ = [
    # Identidad
    "AccessTier",
    "Role",
    "UserSession",
    # Flujos
    "Invitation",
    "InvitationStatus",
    "PropertyShowing",
    "ShowingStatus",
    # Perfiles
    "TenantProfile",
    "LandlordProfile",
    "RealtorProfile",
    # Listings y documentos
    "Listing",
    "ApplicationDocument",
    "VerificationStatus",
    # Mensajería
    "Message",
    "MessageThread",
    "ThreadCreateParams",
    "ThreadParticipant",
]

"""
Flujos de negocio: invitaciones y visitas.
"""

from habitar.workflows.invitations import InvitationService
from habitar.workflows.showings import ShowingService, can_transition

__all__ = [
    "InvitationService",
    "ShowingService",
    "can_transition",
]

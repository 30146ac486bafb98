"""
Handlers HTTP.

Cada pantalla se protege con route_gate; las secciones opcionales del
dashboard se resuelven con feature_section.
"""

import json
from datetime import date
from typing import Any, Optional

from aiohttp import web
from pydantic import BaseModel, ValidationError as PydanticValidationError

from habitar.access import Permission
from habitar.errors import ValidationError
from habitar.filters import (
    ListingFilterCriteria,
    TenantFilterCriteria,
    apply_listing_filters,
    apply_tenant_filters,
    unique_cities,
)
from habitar.filters.listings import DEFAULT_PRICE_RANGE
from habitar.filters.tenants import DEFAULT_INCOME_RANGE
from habitar.models import (
    AccessTier,
    Listing,
    Role,
    ShowingStatus,
    TenantProfile,
    ThreadCreateParams,
    UserSession,
)
from habitar.services import calculate_roi, parse_roi_inputs
from habitar.web.container import AppServices, SERVICES_KEY
from habitar.web.gating import SESSION_KEY, feature_section, route_gate

routes = web.RouteTableDef()

ALL_ROLES = tuple(Role)
LISTERS = (Role.agent, Role.landlord, Role.admin)

INVITE_FAILED_MESSAGE = "No se pudo enviar la invitación."


def _services(request: web.Request) -> AppServices:
    return request.app[SERVICES_KEY]


def _session(request: web.Request) -> UserSession:
    # route_gate con allowed_roles garantiza que hay sesión
    return request[SESSION_KEY]


def _dump(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, list):
        return [_dump(v) for v in value]
    if isinstance(value, dict):
        return {k: _dump(v) for k, v in value.items()}
    return value


def _json(data: Any, status: int = 200) -> web.Response:
    return web.json_response(_dump(data), status=status)


async def _read_json(request: web.Request) -> dict:
    try:
        data = await request.json()
    except json.JSONDecodeError as e:
        raise ValidationError("El cuerpo no es JSON válido") from e
    if not isinstance(data, dict):
        raise ValidationError("Se esperaba un objeto JSON")
    return data


def _required(data: dict, field: str) -> str:
    value = data.get(field)
    if value in (None, ""):
        raise ValidationError(f"Falta el campo {field}", field=field)
    return value


def _float_param(request: web.Request, name: str, default: float) -> float:
    raw = request.query.get(name)
    if raw in (None, ""):
        return default
    try:
        return float(raw)
    except ValueError as e:
        raise ValidationError(f"{name} debe ser numérico", field=name) from e


def _int_param(request: web.Request, name: str) -> Optional[int]:
    raw = request.query.get(name)
    if raw in (None, ""):
        return None
    try:
        return int(raw)
    except ValueError as e:
        raise ValidationError(f"{name} debe ser entero", field=name) from e


def _date_param(request: web.Request, name: str) -> Optional[date]:
    raw = request.query.get(name)
    if not raw:
        return None
    try:
        return date.fromisoformat(raw)
    except ValueError as e:
        raise ValidationError(f"{name} debe tener formato YYYY-MM-DD", field=name) from e


def _showing_status(value: str) -> ShowingStatus:
    try:
        return ShowingStatus(value)
    except ValueError as e:
        raise ValidationError(f"Estado desconocido: {value}", field="status") from e


# ---------------------------------------------------------------- públicos


@routes.get("/health")
async def health(_: web.Request) -> web.Response:
    return web.Response(text="ok")


@routes.get("/auth")
async def auth(request: web.Request) -> web.Response:
    """Destino de las redirecciones por rol; conserva ?next= para volver."""
    return web.json_response(
        {"message": "Iniciá sesión para continuar", "next": request.query.get("next")},
        status=401,
    )


# ---------------------------------------------------------------- dashboard


@routes.get("/dashboard")
@route_gate(allowed_roles=ALL_ROLES)
async def dashboard(request: web.Request) -> web.Response:
    services = _services(request)
    session = _session(request)

    sections = {
        "invites": feature_section(
            request,
            Permission.view_invites,
            lambda: _dump(
                services.invitations.list_for_tenant(session.user_id)
                if session.role == Role.tenant
                else services.invitations.list_sent(session.user_id)
            ),
        ),
        "messaging": feature_section(
            request,
            Permission.use_messaging,
            lambda: _dump(services.messaging.list_threads(session.user_id)),
            required_tier=AccessTier.verified,
            upgrade_path="/onboarding",
        ),
    }
    if session.role == Role.tenant:
        sections["documents"] = feature_section(
            request,
            Permission.profile_management,
            lambda: _dump(services.documents.list_documents(session.user_id)),
        )
    else:
        sections["listings"] = feature_section(
            request,
            Permission.manage_listings,
            lambda: services.listings.get_by_owner(session.user_id),
        )
        sections["showing_requests"] = feature_section(
            request,
            Permission.review_applications,
            lambda: _dump(
                [
                    showing
                    for showing in services.showings.list_showings(session)
                    if showing.status == ShowingStatus.requested
                ]
            ),
        )
        sections["tenant_directory"] = feature_section(
            request,
            Permission.view_tenant_directory,
            lambda: len(services.profiles.get_verified_tenants()),
            required_tier=AccessTier.verified,
            upgrade_path="/onboarding",
        )
        sections["advanced_screening"] = feature_section(
            request,
            Permission.advanced_screening,
            lambda: {"enabled": True},
            required_tier=AccessTier.premium,
            fallback={"enabled": False},
        )

    return _json(
        {
            "user": {
                "id": session.user_id,
                "email": session.email,
                "role": session.role.value,
                "tier": session.tier.value,
                "is_verified": session.is_verified,
            },
            "sections": sections,
        }
    )


# ---------------------------------------------------------------- listings


@routes.get("/listings")
@route_gate(allowed_roles=ALL_ROLES)
async def list_listings(request: web.Request) -> web.Response:
    listings = [Listing.model_validate(r) for r in _services(request).listings.get_active()]
    criteria = ListingFilterCriteria(
        search_query=request.query.get("q", ""),
        price_range=(
            _float_param(request, "min_price", DEFAULT_PRICE_RANGE[0]),
            _float_param(request, "max_price", DEFAULT_PRICE_RANGE[1]),
        ),
        bedrooms=request.query.get("bedrooms", "any"),
        property_type=request.query.get("property_type", "any"),
        city=request.query.get("city", "any"),
    )
    if criteria.bedrooms != "any" and not criteria.bedrooms.isdigit():
        raise ValidationError("bedrooms debe ser 'any' o un número", field="bedrooms")

    filtered = apply_listing_filters(listings, criteria)
    return _json(
        {
            "listings": filtered,
            "cities": unique_cities(listings),
            "filtered_count": len(filtered),
            "total_count": len(listings),
        }
    )


@routes.post("/listings")
@route_gate(allowed_roles=LISTERS, required_permission=Permission.create_listing)
async def create_listing(request: web.Request) -> web.Response:
    listing = _services(request).publishing.create_listing(
        _session(request).user_id, await _read_json(request)
    )
    return _json(listing, status=201)


@routes.post("/listings/{listing_id}/interest")
@route_gate(allowed_roles=(Role.tenant,), required_permission=Permission.view_invites)
async def express_interest(request: web.Request) -> web.Response:
    invitation = _services(request).invitations.express_interest(
        tenant_id=_session(request).user_id,
        listing_id=request.match_info["listing_id"],
    )
    return _json(invitation, status=201)


# ---------------------------------------------------------------- inquilinos


@routes.get("/tenants")
@route_gate(
    allowed_roles=LISTERS,
    required_permission=Permission.view_tenant_directory,
    require_verification=True,
)
async def tenant_directory(request: web.Request) -> web.Response:
    tenants = [
        TenantProfile.model_validate(r)
        for r in _services(request).profiles.get_verified_tenants()
    ]
    selected_date = _date_param(request, "move_in_after")
    pets = request.query.get("pets", "any")
    if pets not in ("any", "yes", "no"):
        raise ValidationError("pets debe ser any, yes o no", field="pets")

    criteria = TenantFilterCriteria(
        search_query=request.query.get("q", ""),
        income_range=(
            _float_param(request, "min_income", DEFAULT_INCOME_RANGE[0]),
            _float_param(request, "max_income", DEFAULT_INCOME_RANGE[1]),
        ),
        selected_date=selected_date,
        is_filtering_by_date=selected_date is not None,
        location_query=request.query.get("location", ""),
        pets=pets,
        household_size=_int_param(request, "household_size"),
    )
    filtered = apply_tenant_filters(tenants, criteria)
    return _json({"tenants": filtered, "filtered_count": len(filtered), "total_count": len(tenants)})


# ---------------------------------------------------------------- invitaciones


@routes.get("/invites")
@route_gate(allowed_roles=ALL_ROLES, required_permission=Permission.view_invites)
async def list_invites(request: web.Request) -> web.Response:
    session = _session(request)
    invitations = _services(request).invitations
    if session.role == Role.tenant:
        return _json(invitations.list_for_tenant(session.user_id))
    return _json(invitations.list_sent(session.user_id))


@routes.post("/invites")
@route_gate(allowed_roles=LISTERS, required_permission=Permission.create_invite)
async def send_invite(request: web.Request) -> web.Response:
    data = await _read_json(request)
    sent = await _services(request).invitations.send_invite(
        tenant_id=_required(data, "tenant_id"),
        sender_id=_session(request).user_id,
        listing_id=_required(data, "listing_id"),
        message=data.get("message"),
    )
    if not sent:
        return web.json_response({"sent": False, "message": INVITE_FAILED_MESSAGE}, status=502)
    return web.json_response({"sent": True}, status=201)


# ---------------------------------------------------------------- visitas


@routes.get("/showings")
@route_gate(allowed_roles=ALL_ROLES, required_permission=Permission.schedule_showings)
async def list_showings(request: web.Request) -> web.Response:
    return _json(_services(request).showings.list_showings(_session(request)))


@routes.post("/showings")
@route_gate(allowed_roles=(Role.tenant,), required_permission=Permission.schedule_showings)
async def request_showing(request: web.Request) -> web.Response:
    data = await _read_json(request)
    showing = _services(request).showings.request_showing(
        tenant_id=_session(request).user_id,
        listing_id=_required(data, "listing_id"),
        requested_date=_required(data, "requested_date"),
        requested_time=_required(data, "requested_time"),
        message=data.get("message"),
    )
    return _json(showing, status=201)


@routes.post("/showings/{showing_id}/status")
@route_gate(allowed_roles=ALL_ROLES, required_permission=Permission.schedule_showings)
async def update_showing_status(request: web.Request) -> web.Response:
    data = await _read_json(request)
    showings = _services(request).showings.update_status(
        _session(request),
        request.match_info["showing_id"],
        _showing_status(_required(data, "status")),
        notes=data.get("notes"),
    )
    return _json(showings)


@routes.post("/showings/{showing_id}/reschedule")
@route_gate(allowed_roles=ALL_ROLES, required_permission=Permission.schedule_showings)
async def reschedule_showing(request: web.Request) -> web.Response:
    data = await _read_json(request)
    showings = _services(request).showings.reschedule(
        _session(request),
        request.match_info["showing_id"],
        _required(data, "date"),
        _required(data, "time"),
    )
    return _json(showings)


# ---------------------------------------------------------------- documentos


@routes.get("/documents")
@route_gate(allowed_roles=(Role.tenant,), required_permission=Permission.profile_management)
async def list_documents(request: web.Request) -> web.Response:
    return _json(_services(request).documents.list_documents(_session(request).user_id))


@routes.post("/documents")
@route_gate(allowed_roles=(Role.tenant,), required_permission=Permission.profile_management)
async def upload_document(request: web.Request) -> web.Response:
    """Multipart con los campos document_type y file."""
    documents = _services(request).documents
    if not request.content_type.startswith("multipart/"):
        raise ValidationError("Se esperaba multipart/form-data", field="file")

    document_type = ""
    filename = ""
    content_type = None
    content = b""
    reader = await request.multipart()
    async for part in reader:
        if part.name == "document_type":
            document_type = (await part.text()).strip()
        elif part.name == "file":
            filename = part.filename or ""
            content_type = part.headers.get("Content-Type")
            # Cortar la lectura apenas se pasa del máximo
            chunks = []
            size = 0
            while chunk := await part.read_chunk():
                size += len(chunk)
                documents.check_size(size)
                chunks.append(chunk)
            content = b"".join(chunks)

    document = documents.upload(
        _session(request).user_id, document_type, filename, content, content_type
    )
    return _json(document, status=201)


@routes.delete("/documents/{document_id}")
@route_gate(allowed_roles=(Role.tenant,), required_permission=Permission.profile_management)
async def delete_document(request: web.Request) -> web.Response:
    _services(request).documents.delete(
        _session(request).user_id, request.match_info["document_id"]
    )
    return web.Response(status=204)


# ---------------------------------------------------------------- mensajería


@routes.get("/threads")
@route_gate(allowed_roles=ALL_ROLES, required_permission=Permission.use_messaging)
async def list_threads(request: web.Request) -> web.Response:
    return _json(_services(request).messaging.list_threads(_session(request).user_id))


@routes.post("/threads")
@route_gate(allowed_roles=ALL_ROLES, required_permission=Permission.use_messaging)
async def create_thread(request: web.Request) -> web.Response:
    data = await _read_json(request)
    try:
        params = ThreadCreateParams.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e, "Parámetros de hilo inválidos") from e
    session = _session(request)
    thread_id = _services(request).messaging.create_thread(
        session.user_id, session.role.value, params
    )
    return web.json_response({"id": thread_id}, status=201)


@routes.get("/threads/{thread_id}/messages")
@route_gate(allowed_roles=ALL_ROLES, required_permission=Permission.use_messaging)
async def list_messages(request: web.Request) -> web.Response:
    messages = _services(request).messaging.get_thread_messages(
        request.match_info["thread_id"], _session(request).user_id
    )
    return _json(messages)


@routes.post("/threads/{thread_id}/messages")
@route_gate(allowed_roles=ALL_ROLES, required_permission=Permission.use_messaging)
async def send_message(request: web.Request) -> web.Response:
    data = await _read_json(request)
    message = _services(request).messaging.send_message(
        request.match_info["thread_id"], _session(request).user_id, data.get("content", "")
    )
    return _json(message, status=201)


# ---------------------------------------------------------------- métricas


@routes.get("/admin/stats")
@route_gate(allowed_roles=(Role.admin,), required_permission=Permission.admin_access)
async def admin_stats(request: web.Request) -> web.Response:
    analytics = _services(request).analytics
    return _json({"invites": analytics.invite_stats(), "users": analytics.user_stats()})


@routes.post("/admin/users/{user_id}/verify")
@route_gate(allowed_roles=(Role.admin,), required_permission=Permission.admin_access)
async def verify_user(request: web.Request) -> web.Response:
    profile = _services(request).verification.verify_user(
        request.match_info["user_id"], _session(request).user_id
    )
    return _json(profile)


@routes.get("/analytics/market")
@route_gate(allowed_roles=LISTERS)
async def market_metrics(request: web.Request) -> web.Response:
    return _json(_services(request).analytics.market_metrics())


@routes.post("/analytics/roi")
@route_gate(allowed_roles=LISTERS)
async def roi(request: web.Request) -> web.Response:
    inputs = parse_roi_inputs(await _read_json(request))
    return _json(calculate_roi(inputs).to_dict())


# ---------------------------------------------------------------- onboarding


@routes.post("/onboarding")
@route_gate(
    allowed_roles=(Role.tenant, Role.agent, Role.landlord),
    required_permission=Permission.profile_management,
)
async def onboarding(request: web.Request) -> web.Response:
    data = await _read_json(request)
    session = _session(request)
    profile = _services(request).onboarding.save_profile(session.role, session.user_id, data)
    return _json(profile)

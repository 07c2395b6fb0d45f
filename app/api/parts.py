"""Parts management API endpoints."""

from typing import Any

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, Response, request
from spectree import Response as SpectreeResponse

from app.exceptions import InvalidInputException, MissingRequiredFieldException
from app.models.part import Part
from app.schemas.common import ErrorResponseSchema
from app.schemas.part import PartCreateSchema, PartResponseSchema, PartUpdateSchema
from app.schemas.part_history import HistoryEntryResponseSchema
from app.services.container import ServiceContainer
from app.services.inventory_service import InventoryService
from app.services.metrics_service import MetricsService
from app.services.part_lifecycle import PartFields
from app.services.part_service import PartService
from app.services.qr_service import QRService
from app.utils.error_handling import handle_api_errors
from app.utils.request_parsing import resolve_acting_user, resolve_part_id
from app.utils.spectree_config import api

parts_bp = Blueprint("parts", __name__, url_prefix="/parts")


def serialize_part(part: Part) -> dict[str, Any]:
    """Convert a Part model into its camelCase JSON representation."""
    return PartResponseSchema.model_validate(part).model_dump(mode="json", by_alias=True)


def _require_part_id(part_id: str | None) -> str:
    resolved = resolve_part_id(part_id)
    if not resolved:
        raise MissingRequiredFieldException(["id"], "A part ID is required.")
    return resolved


@parts_bp.route("", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=list[PartResponseSchema], HTTP_503=ErrorResponseSchema))
@handle_api_errors
@inject
def list_parts(part_service: PartService = Provide[ServiceContainer.part_service]) -> Any:
    """List all parts, optionally filtered by ``?search=``."""
    parts = part_service.list_parts(request.args.get("search"))
    return [serialize_part(part) for part in parts]


@parts_bp.route("", methods=["POST"])
@api.validate(json=PartCreateSchema, resp=SpectreeResponse(HTTP_201=PartResponseSchema, HTTP_400=ErrorResponseSchema, HTTP_409=ErrorResponseSchema))
@handle_api_errors
@inject
def create_part(inventory_service: InventoryService = Provide[ServiceContainer.inventory_service]) -> Any:
    """Create new part with its initial-add history entry."""
    data = PartCreateSchema.model_validate(request.get_json())
    fields = PartFields(
        id=data.id,
        name=data.name,
        location=data.location,
        serial_number=data.serial_number,
        project_name=data.project_name,
        project_number=data.project_number,
        description=data.description,
        status=data.status,
    )
    part = inventory_service.add_part(fields, data.quantity, resolve_acting_user(data.user_id))
    return serialize_part(part), 201


@parts_bp.route("/<string:part_id>", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=PartResponseSchema, HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def get_part(part_id: str, part_service: PartService = Provide[ServiceContainer.part_service]) -> Any:
    """Get single part with full history."""
    return serialize_part(part_service.get_part(part_id))


@parts_bp.route("", methods=["PUT"])
@parts_bp.route("/<string:part_id>", methods=["PUT"])
@api.validate(json=PartUpdateSchema, resp=SpectreeResponse(HTTP_200=PartResponseSchema, HTTP_400=ErrorResponseSchema, HTTP_404=ErrorResponseSchema, HTTP_409=ErrorResponseSchema))
@handle_api_errors
@inject
def update_part(part_id: str | None = None, part_service: PartService = Provide[ServiceContainer.part_service]) -> Any:
    """Replace part attributes.

    The part is addressed by the path or by ``?id=``; an ``id`` in the body
    must agree with it.
    """
    data = PartUpdateSchema.model_validate(request.get_json())

    resolved_id = resolve_part_id(part_id, data.id)
    if not resolved_id:
        raise MissingRequiredFieldException(["id"], "A part ID is required.")
    if data.id and data.id.strip() != resolved_id:
        raise InvalidInputException(
            f"Part ID in the request body ('{data.id}') does not match the requested part ('{resolved_id}')."
        )

    fields = PartFields(
        id=resolved_id,
        name=data.name,
        location=data.location,
        serial_number=data.serial_number,
        project_name=data.project_name,
        project_number=data.project_number,
        description=data.description,
        status=data.status,
    )
    part = part_service.replace_part(
        resolved_id,
        fields,
        quantity=data.quantity,
        expected_version=data.version,
        acting_user=resolve_acting_user(data.user_id),
    )
    return serialize_part(part)


@parts_bp.route("", methods=["DELETE"])
@parts_bp.route("/<string:part_id>", methods=["DELETE"])
@api.validate(resp=SpectreeResponse(HTTP_204=None, HTTP_400=ErrorResponseSchema, HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def delete_part(
    part_id: str | None = None,
    part_service: PartService = Provide[ServiceContainer.part_service],
    metrics_service: MetricsService = Provide[ServiceContainer.metrics_service],
) -> Any:
    """Delete a part and its history."""
    part_service.delete_part(_require_part_id(part_id))
    metrics_service.record_part_deleted()
    return "", 204


@parts_bp.route("/<string:part_id>/history", methods=["GET"])
@api.validate(resp=SpectreeResponse(HTTP_200=list[HistoryEntryResponseSchema], HTTP_404=ErrorResponseSchema))
@handle_api_errors
@inject
def get_part_history(part_id: str, part_service: PartService = Provide[ServiceContainer.part_service]) -> Any:
    """Get the audit trail of a part, oldest entry first."""
    return [
        HistoryEntryResponseSchema.model_validate(entry).model_dump(mode="json", by_alias=True)
        for entry in part_service.get_history(part_id)
    ]


@parts_bp.route("/<string:part_id>/qr", methods=["GET"])
@handle_api_errors
@inject
def get_part_qr(
    part_id: str,
    part_service: PartService = Provide[ServiceContainer.part_service],
    qr_service: QRService = Provide[ServiceContainer.qr_service],
) -> Any:
    """Render a printable PNG label linking to the part's details page."""
    part = part_service.get_part(part_id)
    png = qr_service.render_part_label(part)
    return Response(
        png,
        mimetype="image/png",
        headers={"Content-Disposition": f'inline; filename="{part.id}-qr.png"'},
    )

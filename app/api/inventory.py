"""Inventory lifecycle API endpoints: check-in, check-out and status updates."""

from typing import Any

from dependency_injector.wiring import Provide, inject
from flask import Blueprint, request
from spectree import Response as SpectreeResponse

from app.api.parts import serialize_part
from app.schemas.common import ErrorResponseSchema
from app.schemas.inventory import CheckInOutSchema, StatusUpdateSchema
from app.schemas.part import PartResponseSchema
from app.services.container import ServiceContainer
from app.services.inventory_service import InventoryService
from app.utils.error_handling import handle_api_errors
from app.utils.request_parsing import resolve_acting_user
from app.utils.spectree_config import api

inventory_bp = Blueprint("inventory", __name__, url_prefix="/inventory")


@inventory_bp.route("/check-in-out", methods=["POST"])
@api.validate(json=CheckInOutSchema, resp=SpectreeResponse(HTTP_200=PartResponseSchema, HTTP_400=ErrorResponseSchema, HTTP_404=ErrorResponseSchema, HTTP_409=ErrorResponseSchema))
@handle_api_errors
@inject
def check_in_out(inventory_service: InventoryService = Provide[ServiceContainer.inventory_service]) -> Any:
    """Check stock in or out of a part and record the movement."""
    data = CheckInOutSchema.model_validate(request.get_json())

    part = inventory_service.check_in_out(
        data.part_id,
        data.type,
        data.change,
        acting_user=resolve_acting_user(data.user_id),
        expected_quantity=data.new_quantity,
    )
    return serialize_part(part)


@inventory_bp.route("/status", methods=["POST"])
@api.validate(json=StatusUpdateSchema, resp=SpectreeResponse(HTTP_200=PartResponseSchema, HTTP_400=ErrorResponseSchema, HTTP_404=ErrorResponseSchema, HTTP_409=ErrorResponseSchema))
@handle_api_errors
@inject
def update_status(inventory_service: InventoryService = Provide[ServiceContainer.inventory_service]) -> Any:
    """Move a part to another status and record the transition."""
    data = StatusUpdateSchema.model_validate(request.get_json())

    part = inventory_service.update_status(
        data.part_id,
        data.new_status,
        acting_user=resolve_acting_user(data.user_id),
    )
    return serialize_part(part)

"""
Availability endpoints for API v1.

All three routes take the same JSON body, ``{"start": <RFC3339>,
"duration": <duration>}``:

* ``GET``    reports whether the slot is free,
* ``POST``   reserves it (``201``) unless it overlaps (``409``),
* ``DELETE`` cancels an exactly matching reservation (``204``/``404``).

Malformed input always yields ``400``.  Store failures yield ``500``
with a generic message while the full error is logged for operators.
Error bodies have the form ``{"err": "<message>"}``.
"""

import logging

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from availability_api.app.core.exceptions import (
    BadPayloadError,
    InvalidTimeSlotError,
    SlotConflictError,
    SlotNotFoundError,
    SlotStoreError,
)
from availability_api.app.schemas.time_slot import AvailabilityRead, ErrorRead, TimeSlotJSON
from availability_api.app.services.availability_service import AvailabilityService


logger = logging.getLogger(__name__)

router = APIRouter()

_ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": ErrorRead, "description": "Invalid time slot"},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": ErrorRead, "description": "Store failure"},
}


def get_availability_service(request: Request) -> AvailabilityService:
    """Return the service attached to the application by ``create_app``."""
    return request.app.state.availability_service


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"err": message})


def _bad_request(exc: InvalidTimeSlotError) -> JSONResponse:
    logger.debug("Rejected time slot input: %s", exc)
    return _error(status.HTTP_400_BAD_REQUEST, exc.detail)


async def read_time_slot_json(request: Request) -> TimeSlotJSON:
    """Parse the request body into ``TimeSlotJSON``.

    Raises ``BadPayloadError`` when the body is not a JSON object with
    string ``start`` and ``duration`` fields.
    """
    try:
        data = await request.json()
    except ValueError as exc:
        raise BadPayloadError() from exc
    try:
        return TimeSlotJSON.model_validate(data)
    except ValidationError as exc:
        raise BadPayloadError() from exc


@router.get(
    "",
    response_model=AvailabilityRead,
    responses=_ERROR_RESPONSES,
    summary="Check whether a time slot is free",
)
async def get_availability(
    request: Request,
    service: AvailabilityService = Depends(get_availability_service),
):
    try:
        payload = await read_time_slot_json(request)
        available = await service.check(payload)
    except InvalidTimeSlotError as exc:
        return _bad_request(exc)
    except SlotStoreError:
        logger.exception("Availability check failed")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "failed to check time slot availability")
    return AvailabilityRead(available=available)


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_class=Response,
    responses={**_ERROR_RESPONSES, status.HTTP_409_CONFLICT: {"model": ErrorRead, "description": "Slot overlaps"}},
    summary="Reserve a time slot",
)
async def post_availability(
    request: Request,
    service: AvailabilityService = Depends(get_availability_service),
):
    try:
        payload = await read_time_slot_json(request)
        slot = await service.reserve(payload)
    except InvalidTimeSlotError as exc:
        return _bad_request(exc)
    except SlotConflictError as exc:
        logger.info("Reservation rejected, slot overlaps an existing one")
        return _error(status.HTTP_409_CONFLICT, exc.detail)
    except SlotStoreError:
        logger.exception("Failed to add time slot")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "failed to add time slot")
    logger.info("Reserved slot starting %s for %s", slot.start.isoformat(), slot.duration)
    return Response(status_code=status.HTTP_201_CREATED)


@router.delete(
    "",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    responses={**_ERROR_RESPONSES, status.HTTP_404_NOT_FOUND: {"model": ErrorRead, "description": "No matching slot"}},
    summary="Cancel an exactly matching reservation",
)
async def delete_availability(
    request: Request,
    service: AvailabilityService = Depends(get_availability_service),
):
    try:
        payload = await read_time_slot_json(request)
        slot = await service.cancel(payload)
    except InvalidTimeSlotError as exc:
        return _bad_request(exc)
    except SlotNotFoundError as exc:
        logger.info("Cancellation matched no stored slot")
        return _error(status.HTTP_404_NOT_FOUND, exc.detail)
    except SlotStoreError:
        logger.exception("Failed to delete time slot")
        return _error(status.HTTP_500_INTERNAL_SERVER_ERROR, "failed to delete matching time slot")
    logger.info("Cancelled slot starting %s for %s", slot.start.isoformat(), slot.duration)
    return Response(status_code=status.HTTP_204_NO_CONTENT)

"""Device management endpoints."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response, status

from device_api.interfaces.http.deps import get_device_service
from device_api.modules.devices import (
    Device,
    DeviceAlreadyExistsError,
    DeviceCreateInput,
    DeviceInUseError,
    DeviceNotFoundError,
    DevicePatchInput,
    DeviceReplaceInput,
    DeviceService,
    DeviceState,
    InvalidDeviceStateError,
)
from device_api.schemas import DeviceCreate, DevicePatch, DeviceResponse, DeviceUpdate

logger = logging.getLogger(__name__)

router = APIRouter()


def _to_schema(device: Device) -> DeviceResponse:
    return DeviceResponse.model_validate(device)


def _not_found(exc: DeviceNotFoundError) -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))


def _conflict(exc: Exception) -> HTTPException:
    logger.info("Rejected device request: %s", exc)
    return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(exc))


@router.post(
    "",
    response_model=DeviceResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a device",
)
async def create_device(payload: DeviceCreate, service: DeviceService = Depends(get_device_service)):
    try:
        device = await service.create_device(
            DeviceCreateInput(
                name=payload.name,
                brand=payload.brand,
                state=payload.state,
                creation_time=payload.creation_time,
            )
        )
    except DeviceAlreadyExistsError as exc:
        raise _conflict(exc) from exc
    return _to_schema(device)


@router.get("", response_model=list[DeviceResponse], summary="List devices by brand and/or state")
async def list_devices(
    brand: Optional[str] = None,
    state: Optional[str] = None,
    service: DeviceService = Depends(get_device_service),
):
    try:
        state_filter = DeviceState.parse(state) if state is not None else None
    except InvalidDeviceStateError as exc:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(exc)) from exc

    try:
        devices = await service.list_devices(brand=brand, state=state_filter)
    except DeviceNotFoundError as exc:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="No devices found!") from exc
    return [_to_schema(device) for device in devices]


@router.get("/{device_id}", response_model=DeviceResponse, summary="Get a device")
async def get_device(device_id: int, service: DeviceService = Depends(get_device_service)):
    try:
        device = await service.get_device(device_id)
    except DeviceNotFoundError as exc:
        raise _not_found(exc) from exc
    return _to_schema(device)


@router.put("/{device_id}", response_model=DeviceResponse, summary="Replace a device")
async def replace_device(
    device_id: int,
    payload: DeviceUpdate,
    service: DeviceService = Depends(get_device_service),
):
    try:
        device = await service.replace_device(
            device_id,
            DeviceReplaceInput(name=payload.name, brand=payload.brand, state=payload.state),
        )
    except DeviceNotFoundError as exc:
        raise _not_found(exc) from exc
    return _to_schema(device)


@router.patch("/{device_id}", response_model=DeviceResponse, summary="Partially update a device")
async def patch_device(
    device_id: int,
    payload: DevicePatch,
    service: DeviceService = Depends(get_device_service),
):
    # null and missing fields both mean "leave unchanged".
    changes = payload.model_dump(exclude_none=True)
    try:
        device = await service.patch_device(device_id, DevicePatchInput(**changes))
    except DeviceNotFoundError as exc:
        raise _not_found(exc) from exc
    except DeviceInUseError as exc:
        raise _conflict(exc) from exc
    return _to_schema(device)


@router.delete("/{device_id}", status_code=status.HTTP_204_NO_CONTENT, summary="Delete a device")
async def delete_device(device_id: int, service: DeviceService = Depends(get_device_service)):
    try:
        await service.delete_device(device_id)
    except DeviceNotFoundError as exc:
        raise _not_found(exc) from exc
    except DeviceInUseError as exc:
        raise _conflict(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)

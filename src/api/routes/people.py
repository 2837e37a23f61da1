"""
People API routes
All database operations go through the people service layer.
"""

import logging
from fastapi import APIRouter, HTTPException

from models.person import PersonCreateRequest, PersonUpdateRequest, SuccessResponse
from services.base_service import ServiceResult
from services.people_service import get_people_service
from utils.error_handling import set_endpoint_context

router = APIRouter()
logger = logging.getLogger(__name__)


def _raise_for_failure(result: ServiceResult):
    """Translate a failed service result into an HTTP error"""
    if result.success:
        return
    if result.error_type == "INVALID_DATA":
        raise HTTPException(status_code=400, detail=result.error)
    raise HTTPException(status_code=500, detail=result.error)


def _success(result: ServiceResult, status_code: int) -> SuccessResponse:
    return SuccessResponse(statusCode=status_code, data=result.data or [])


@router.get("/", response_model=SuccessResponse)
async def list_people():
    """List every person; an empty table is reported as 404"""
    set_endpoint_context("list_people")
    result = await get_people_service().list_people()
    _raise_for_failure(result)

    if not result.data:
        raise HTTPException(status_code=404, detail="Data Not Found")

    return _success(result, 200)

@router.post("/", response_model=SuccessResponse, status_code=201)
async def create_person(request: PersonCreateRequest):
    """Create a person and return the whole table"""
    set_endpoint_context("create_person")
    # Any client-supplied uuid is ignored
    result = await get_people_service().create_person(
        name=request.name,
        nickname=request.nickname
    )
    _raise_for_failure(result)
    return _success(result, 201)

@router.get("/person/{person_id}", response_model=SuccessResponse)
async def get_person(person_id: str):
    """Get a person by identifier; no match yields an empty list"""
    set_endpoint_context("get_person")
    result = await get_people_service().get_person(person_id)
    _raise_for_failure(result)
    return _success(result, 200)

@router.delete("/person/{person_id}", response_model=SuccessResponse)
async def delete_person(person_id: str):
    """Delete a person and return the remaining rows"""
    set_endpoint_context("delete_person")
    result = await get_people_service().delete_person(person_id)
    _raise_for_failure(result)
    return _success(result, 200)

@router.put("/person/{person_id}", response_model=SuccessResponse)
async def update_person(person_id: str, request: PersonUpdateRequest):
    """Update a person's name and nickname and return the whole table"""
    set_endpoint_context("update_person")
    result = await get_people_service().update_person(
        person_id,
        name=request.name,
        nickname=request.nickname
    )
    _raise_for_failure(result)
    return _success(result, 200)

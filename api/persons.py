"""Person endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query

from nexus.db import NexusDatabase
from nexus.models import Pagination, Person, PersonCreate, PersonUpdate

from .dependencies import get_db, require_company
from .responses import (
    ApiResponse,
    bad_request,
    not_found,
    server_error,
    success_response,
)

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/companies/{company_id}/persons",
    tags=["persons"],
    dependencies=[Depends(require_company)],
)


@router.get("", response_model=ApiResponse[List[Person]])
async def list_persons(
    company_id: int,
    is_active: Optional[bool] = Query(None),
    search: Optional[str] = Query(None, description="Name, email or ID number"),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    """List persons."""
    try:
        persons, total = db.persons.list_persons(
            company_id, is_active, search, page, limit
        )
        return success_response(
            persons,
            "Persons retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except Exception as e:
        logger.error(f"Error listing persons for company {company_id}: {e}")
        raise server_error(e)


@router.post("", response_model=ApiResponse[Person], status_code=201)
async def create_person(
    company_id: int, person: PersonCreate, db: NexusDatabase = Depends(get_db)
):
    try:
        created = db.persons.create_person(company_id, person)
        return success_response(created, "Person created successfully")
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error creating person: {e}")
        raise server_error(e)


@router.get("/{person_id}", response_model=ApiResponse[Person])
async def get_person(
    company_id: int, person_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        person = db.persons.get_person(company_id, person_id)
        if person is None:
            raise not_found("Person")
        return success_response(person, "Person retrieved successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting person {person_id}: {e}")
        raise server_error(e)


@router.put("/{person_id}", response_model=ApiResponse[Person])
async def update_person(
    company_id: int,
    person_id: int,
    person_update: PersonUpdate,
    db: NexusDatabase = Depends(get_db),
):
    try:
        person = db.persons.update_person(company_id, person_id, person_update)
        if person is None:
            raise not_found("Person")
        return success_response(person, "Person updated successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error updating person {person_id}: {e}")
        raise server_error(e)


@router.delete("/{person_id}", response_model=ApiResponse[None])
async def delete_person(
    company_id: int, person_id: int, db: NexusDatabase = Depends(get_db)
):
    """Delete a person that nothing references."""
    try:
        if not db.persons.delete_person(company_id, person_id):
            raise not_found("Person")
        return success_response(message="Person deleted successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error deleting person {person_id}: {e}")
        raise server_error(e)

"""Board of directors, beneficial owner and share certificate endpoints."""

import logging
from typing import List, Optional

from fastapi import APIRouter, Body, Depends, HTTPException, Query

from nexus.db import NexusDatabase
from nexus.models import (
    BeneficialOwner,
    BeneficialOwnerCessation,
    BeneficialOwnerCreate,
    BeneficialOwnerStatus,
    BoardComposition,
    CertificateCancellation,
    CertificateStatus,
    Director,
    DirectorCreate,
    DirectorResignation,
    DirectorStatus,
    DirectorType,
    DirectorUpdate,
    OwnershipType,
    Pagination,
    ShareCertificate,
    ShareCertificateCreate,
)

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
    prefix="/companies/{company_id}",
    tags=["directors"],
    dependencies=[Depends(require_company)],
)


@router.get("/directors", response_model=ApiResponse[List[Director]])
async def list_directors(
    company_id: int,
    status: Optional[DirectorStatus] = Query(None),
    director_type: Optional[DirectorType] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    """List directors, most recent appointment first."""
    try:
        found, total = db.directors.list_directors(
            company_id, status, director_type, page, limit
        )
        return success_response(
            found,
            "Directors retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except Exception as e:
        logger.error(f"Error listing directors: {e}")
        raise server_error(e)


@router.get(
    "/directors/board-composition", response_model=ApiResponse[BoardComposition]
)
async def board_composition(company_id: int, db: NexusDatabase = Depends(get_db)):
    try:
        composition = db.directors.board_composition(company_id)
        return success_response(composition, "Board composition retrieved successfully")
    except Exception as e:
        logger.error(f"Error building board composition: {e}")
        raise server_error(e)


@router.post("/directors", response_model=ApiResponse[Director], status_code=201)
async def appoint_director(
    company_id: int, director: DirectorCreate, db: NexusDatabase = Depends(get_db)
):
    """Appoint a person of the company to the board."""
    try:
        created = db.directors.appoint_director(company_id, director)
        return success_response(created, "Director appointed successfully")
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error appointing director: {e}")
        raise server_error(e)


@router.get("/directors/{director_id}", response_model=ApiResponse[Director])
async def get_director(
    company_id: int, director_id: int, db: NexusDatabase = Depends(get_db)
):
    try:
        director = db.directors.get_director(company_id, director_id)
        if director is None:
            raise not_found("Director")
        return success_response(director, "Director retrieved successfully")
    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error getting director {director_id}: {e}")
        raise server_error(e)


@router.put("/directors/{director_id}", response_model=ApiResponse[Director])
async def update_director(
    company_id: int,
    director_id: int,
    director_update: DirectorUpdate,
    db: NexusDatabase = Depends(get_db),
):
    try:
        director = db.directors.update_director(
            company_id, director_id, director_update
        )
        if director is None:
            raise not_found("Director")
        return success_response(director, "Director updated successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error updating director {director_id}: {e}")
        raise server_error(e)


@router.post("/directors/{director_id}/resign", response_model=ApiResponse[Director])
async def resign_director(
    company_id: int,
    director_id: int,
    resignation: DirectorResignation = Body(default_factory=DirectorResignation),
    db: NexusDatabase = Depends(get_db),
):
    """Record a resignation. The date defaults to today."""
    try:
        director = db.directors.resign_director(company_id, director_id, resignation)
        if director is None:
            raise not_found("Director")
        return success_response(director, "Director resigned successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error resigning director {director_id}: {e}")
        raise server_error(e)


@router.get("/beneficial-owners", response_model=ApiResponse[List[BeneficialOwner]])
async def list_beneficial_owners(
    company_id: int,
    status: Optional[BeneficialOwnerStatus] = Query(None),
    ownership_type: Optional[OwnershipType] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    try:
        owners, total = db.directors.list_beneficial_owners(
            company_id, status, ownership_type, page, limit
        )
        return success_response(
            owners,
            "Beneficial owners retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except Exception as e:
        logger.error(f"Error listing beneficial owners: {e}")
        raise server_error(e)


@router.post(
    "/beneficial-owners", response_model=ApiResponse[BeneficialOwner], status_code=201
)
async def add_beneficial_owner(
    company_id: int, owner: BeneficialOwnerCreate, db: NexusDatabase = Depends(get_db)
):
    try:
        created = db.directors.add_beneficial_owner(company_id, owner)
        return success_response(created, "Beneficial owner added successfully")
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error adding beneficial owner: {e}")
        raise server_error(e)


@router.post(
    "/beneficial-owners/{owner_id}/cease", response_model=ApiResponse[BeneficialOwner]
)
async def cease_beneficial_owner(
    company_id: int,
    owner_id: int,
    cessation: BeneficialOwnerCessation = Body(
        default_factory=BeneficialOwnerCessation
    ),
    db: NexusDatabase = Depends(get_db),
):
    try:
        owner = db.directors.cease_beneficial_owner(company_id, owner_id, cessation)
        if owner is None:
            raise not_found("Beneficial owner")
        return success_response(owner, "Beneficial ownership ended successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error ending beneficial ownership {owner_id}: {e}")
        raise server_error(e)


@router.get("/share-certificates", response_model=ApiResponse[List[ShareCertificate]])
async def list_certificates(
    company_id: int,
    shareholder_id: Optional[int] = Query(None),
    status: Optional[CertificateStatus] = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    db: NexusDatabase = Depends(get_db),
):
    """List certificates, most recently issued first."""
    try:
        certificates, total = db.directors.list_certificates(
            company_id, shareholder_id, status, page, limit
        )
        return success_response(
            certificates,
            "Share certificates retrieved successfully",
            Pagination.build(total, page, limit),
        )
    except Exception as e:
        logger.error(f"Error listing share certificates: {e}")
        raise server_error(e)


@router.post(
    "/share-certificates", response_model=ApiResponse[ShareCertificate], status_code=201
)
async def issue_certificate(
    company_id: int,
    certificate: ShareCertificateCreate,
    db: NexusDatabase = Depends(get_db),
):
    try:
        issued = db.directors.issue_certificate(company_id, certificate)
        return success_response(issued, "Share certificate issued successfully")
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error issuing share certificate: {e}")
        raise server_error(e)


@router.post(
    "/share-certificates/{certificate_id}/cancel",
    response_model=ApiResponse[ShareCertificate],
)
async def cancel_certificate(
    company_id: int,
    certificate_id: int,
    cancellation: CertificateCancellation = Body(
        default_factory=CertificateCancellation
    ),
    db: NexusDatabase = Depends(get_db),
):
    """Retire a certificate as cancelled, replaced or lost."""
    try:
        certificate = db.directors.cancel_certificate(
            company_id, certificate_id, cancellation
        )
        if certificate is None:
            raise not_found("Share certificate")
        return success_response(certificate, "Share certificate cancelled successfully")
    except HTTPException:
        raise
    except ValueError as e:
        raise bad_request(e)
    except Exception as e:
        logger.error(f"Error cancelling share certificate {certificate_id}: {e}")
        raise server_error(e)

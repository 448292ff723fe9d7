"""
Alumni Directory Routes

GET /alumni         - Search, filter and paginate the directory
GET /alumni/stats   - Counts by course, batch and city
GET /alumni/{id}    - Single alumni record
"""

from fastapi import APIRouter, Depends, HTTPException, Query

from resumate.api.deps import get_alumni_directory
from resumate.schemas.schemas import AlumniListResponse, AlumniStatsResponse
from resumate.services.mongo_service import AlumniDirectoryService

router = APIRouter(prefix="/alumni", tags=["Alumni"])


@router.get("", response_model=AlumniListResponse)
def list_alumni(
    search: str = Query("", description="Full-text search"),
    course: str = Query(""),
    batch: str = Query(""),
    city: str = Query("", description="Matches current city or home town"),
    company: str = Query("", description="Matched against experience"),
    page: int = Query(1, ge=1),
    limit: int = Query(12, ge=1, le=100),
    directory: AlumniDirectoryService = Depends(get_alumni_directory)
):
    """
    Browse the alumni directory.

    Text search results are ordered by relevance, everything else by name.
    """
    return directory.search(
        search=search, course=course, batch=batch, city=city,
        company=company, page=page, limit=limit
    )


@router.get("/stats", response_model=AlumniStatsResponse)
def alumni_stats(directory: AlumniDirectoryService = Depends(get_alumni_directory)):
    return directory.stats()


@router.get("/{alumni_id}")
def get_alumni(alumni_id: str, directory: AlumniDirectoryService = Depends(get_alumni_directory)):
    alumni = directory.get_by_id(alumni_id)
    if not alumni:
        raise HTTPException(status_code=404, detail="Alumni not found")
    return alumni

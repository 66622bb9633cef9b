# routes/service_profiles.py

from fastapi import APIRouter, Depends
from typing import Optional

from database import get_store
from models import AvailabilityUpdate, ProfessionType, RatingUpdate, ServiceProfileCreate, ServiceProfileUpdate
from repositories import ServiceProfileRepository

router = APIRouter(prefix="/service-profiles", tags=["Service Profiles"])


def get_profile_repository(store=Depends(get_store)) -> ServiceProfileRepository:
    return ServiceProfileRepository(store)


@router.get("")
def list_profiles(
    profession: Optional[ProfessionType] = None,
    search: Optional[str] = None,
    repo: ServiceProfileRepository = Depends(get_profile_repository),
):
    if search:
        profiles = repo.search_by_name(search)
        if profession:
            profiles = [p for p in profiles if p.profession == profession]
    else:
        profiles = repo.get_by_profession(profession) if profession else repo.get_all()
    return {"service_profiles": profiles, "count": len(profiles)}

@router.get("/available")
def available_profiles(
    profession: Optional[ProfessionType] = None,
    repo: ServiceProfileRepository = Depends(get_profile_repository),
):
    profiles = repo.get_available_by_profession(profession) if profession else repo.get_available()
    return {"service_profiles": profiles, "count": len(profiles)}

@router.get("/top-rated")
def top_rated_profiles(limit: int = 10, repo: ServiceProfileRepository = Depends(get_profile_repository)):
    profiles = repo.get_top_rated(limit)
    return {"service_profiles": profiles, "count": len(profiles)}

@router.get("/{profile_id}")
def get_profile(profile_id: str, repo: ServiceProfileRepository = Depends(get_profile_repository)):
    return repo.get_by_id_or_raise(profile_id)

@router.post("", status_code=201)
def create_profile(payload: ServiceProfileCreate, repo: ServiceProfileRepository = Depends(get_profile_repository)):
    return repo.create_profile(payload)

@router.put("/{profile_id}")
def update_profile(
    profile_id: str,
    payload: ServiceProfileUpdate,
    repo: ServiceProfileRepository = Depends(get_profile_repository),
):
    return repo.update_profile(profile_id, payload)

@router.patch("/{profile_id}/availability")
def update_availability(
    profile_id: str,
    payload: AvailabilityUpdate,
    repo: ServiceProfileRepository = Depends(get_profile_repository),
):
    return repo.update_availability(profile_id, payload.available)

# Range is checked by the repository so the error carries the validation code
@router.patch("/{profile_id}/rating")
def update_rating(
    profile_id: str,
    payload: RatingUpdate,
    repo: ServiceProfileRepository = Depends(get_profile_repository),
):
    return repo.update_rating(profile_id, payload.rating)

@router.delete("/{profile_id}")
def delete_profile(profile_id: str, repo: ServiceProfileRepository = Depends(get_profile_repository)):
    repo.delete(profile_id)
    return {"message": "Service profile deleted"}

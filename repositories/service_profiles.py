import time
from typing import List

import config
from models import ProfessionType, ServiceProfile, ServiceProfileCreate, ServiceProfileUpdate

from .base import BaseRepository, check_positive, check_rating, new_id


class ServiceProfileRepository(BaseRepository):
    table = config.SERVICE_PROFILES_COLLECTION
    entity_name = "ServiceProfile"
    model = ServiceProfile

    def create_profile(self, data: ServiceProfileCreate) -> ServiceProfile:
        check_positive("rate", data.rate)
        check_rating(data.rating)
        return self.create({
            "id": new_id(),
            "name": data.name,
            "profession": data.profession,
            "rate": data.rate,
            "rating": data.rating if data.rating is not None else 0,
            "image": data.image or f"https://picsum.photos/200/200?random={int(time.time() * 1000)}",
            "available": data.available if data.available is not None else True,
        })

    def update_profile(self, id: str, data: ServiceProfileUpdate) -> ServiceProfile:
        check_positive("rate", data.rate)
        return self.update(id, data.model_dump(exclude_unset=True))

    def get_by_profession(self, profession: ProfessionType) -> List[ServiceProfile]:
        return self.scan({"profession": profession})

    def get_available(self) -> List[ServiceProfile]:
        return self.scan({"available": True})

    def get_available_by_profession(self, profession: ProfessionType) -> List[ServiceProfile]:
        return self.scan({"profession": profession, "available": True})

    def update_availability(self, id: str, available: bool) -> ServiceProfile:
        return self.update(id, {"available": available})

    def update_rating(self, id: str, rating: float) -> ServiceProfile:
        check_rating(rating)
        return self.update(id, {"rating": rating})

    def get_top_rated(self, limit: int = 10) -> List[ServiceProfile]:
        return sorted(self.get_all(), key=lambda p: p.rating, reverse=True)[:limit]

    def search_by_name(self, term: str) -> List[ServiceProfile]:
        needle = term.lower()
        return [
            p for p in self.get_all()
            if needle in p.name.lower() or needle in p.profession.lower()
        ]

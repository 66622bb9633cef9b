import logging
from datetime import datetime
from typing import List, Optional

import config
from errors import ConflictError, NotFoundError, ValidationError
from models import RequestStatus, ServiceRequest, ServiceRequestCreate
from store import ConditionFailed, ItemMissing

from .base import BaseRepository, new_id, now_iso, storage_errors

logger = logging.getLogger(__name__)

# status a request must currently be in to move to the key status
REQUIRED_PRIOR_STATUS = {
    "IN_PROGRESS": "OPEN",
    "COMPLETED": "IN_PROGRESS",
}


def display_date(moment: Optional[datetime] = None) -> str:
    moment = moment or datetime.now()
    return f"{moment.month}/{moment.day}/{moment.year}"


class ServiceRequestRepository(BaseRepository):
    """Job requests and their OPEN -> IN_PROGRESS -> COMPLETED lifecycle.

    Transitions are applied with a conditional update on the current status,
    so two professionals racing to accept the same job cannot both win. The
    customer and professional ids are stored as given and not checked against
    the user or profile collections.
    """

    table = config.SERVICE_REQUESTS_COLLECTION
    entity_name = "ServiceRequest"
    model = ServiceRequest

    def create_request(self, data: ServiceRequestCreate) -> ServiceRequest:
        for field in ("customer_id", "customer_name", "description", "category"):
            if not getattr(data, field).strip():
                raise ValidationError(f"{field} is required", {"field": field})
        return self.create({
            "id": new_id(),
            "customer_id": data.customer_id,
            "customer_name": data.customer_name,
            "description": data.description,
            "category": data.category,
            "status": "OPEN",
            "date": display_date(),
        })

    def get_by_customer_id(self, customer_id: str) -> List[ServiceRequest]:
        return self.scan({"customer_id": customer_id})

    def get_by_professional_id(self, professional_id: str) -> List[ServiceRequest]:
        return self.scan({"professional_id": professional_id})

    def get_by_status(self, status: RequestStatus) -> List[ServiceRequest]:
        return self.scan({"status": status})

    def get_open_requests(self) -> List[ServiceRequest]:
        return self.get_by_status("OPEN")

    def get_by_category(self, category: str) -> List[ServiceRequest]:
        return self.scan({"category": category})

    def get_recent(self, limit: int = 20) -> List[ServiceRequest]:
        # sorted() is stable, so equal timestamps keep scan order
        requests = sorted(self.get_all(), key=lambda r: r.created_at or "", reverse=True)
        return requests[:limit]

    def update_status(self, id: str, status: RequestStatus, professional_id: Optional[str] = None) -> ServiceRequest:
        if status not in REQUIRED_PRIOR_STATUS:
            raise ConflictError(
                f"ServiceRequest cannot move to {status}",
                {"id": id, "status": status},
            )
        if status == "IN_PROGRESS" and not professional_id:
            raise ValidationError("professional_id is required to start a job", {"id": id})

        required = REQUIRED_PRIOR_STATUS[status]
        changes = {"status": status, "updated_at": now_iso()}
        condition = {"status": required}
        if status == "IN_PROGRESS":
            changes["professional_id"] = professional_id
        elif professional_id:
            # completion never reassigns; a supplied id must be the assigned one
            condition["professional_id"] = professional_id
        try:
            with storage_errors(self.entity_name, "update_status", id):
                item = self.store.update(self.table, id, changes, condition=condition)
        except ItemMissing:
            raise NotFoundError(self.entity_name, id)
        except ConditionFailed:
            current = self.get_by_id(id)
            if current is None:
                raise NotFoundError(self.entity_name, id)
            if current.status == required:
                raise ValidationError(
                    f"ServiceRequest is assigned to {current.professional_id}, not {professional_id}",
                    {"id": id, "professional_id": professional_id},
                )
            raise ConflictError(
                f"ServiceRequest is {current.status}, expected {required}",
                {"id": id, "status": current.status, "requested": status},
            )
        logger.info("ServiceRequest %s moved to %s", id, status)
        return self._to_model(item)

    def accept_job(self, id: str, professional_id: str) -> ServiceRequest:
        return self.update_status(id, "IN_PROGRESS", professional_id)

    def complete_job(self, id: str) -> ServiceRequest:
        return self.update_status(id, "COMPLETED")

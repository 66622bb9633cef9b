# routes/service_requests.py

from fastapi import APIRouter, Depends

from database import get_store
from models import AcceptJob, RequestStatus, ServiceRequestCreate, StatusUpdate
from repositories import ServiceRequestRepository

router = APIRouter(prefix="/service-requests", tags=["Service Requests"])


def get_request_repository(store=Depends(get_store)) -> ServiceRequestRepository:
    return ServiceRequestRepository(store)


@router.get("")
def list_requests(repo: ServiceRequestRepository = Depends(get_request_repository)):
    requests = repo.get_all()
    return {"service_requests": requests, "count": len(requests)}

@router.get("/open")
def open_requests(repo: ServiceRequestRepository = Depends(get_request_repository)):
    requests = repo.get_open_requests()
    return {"service_requests": requests, "count": len(requests)}

@router.get("/recent")
def recent_requests(limit: int = 20, repo: ServiceRequestRepository = Depends(get_request_repository)):
    requests = repo.get_recent(limit)
    return {"service_requests": requests, "count": len(requests)}

@router.get("/status/{status}")
def requests_by_status(status: RequestStatus, repo: ServiceRequestRepository = Depends(get_request_repository)):
    requests = repo.get_by_status(status)
    return {"service_requests": requests, "count": len(requests)}

@router.get("/category/{category}")
def requests_by_category(category: str, repo: ServiceRequestRepository = Depends(get_request_repository)):
    requests = repo.get_by_category(category)
    return {"service_requests": requests, "count": len(requests)}

@router.get("/customer/{customer_id}")
def customer_requests(customer_id: str, repo: ServiceRequestRepository = Depends(get_request_repository)):
    requests = repo.get_by_customer_id(customer_id)
    return {"service_requests": requests, "count": len(requests)}

@router.get("/professional/{professional_id}")
def professional_requests(professional_id: str, repo: ServiceRequestRepository = Depends(get_request_repository)):
    requests = repo.get_by_professional_id(professional_id)
    return {"service_requests": requests, "count": len(requests)}

@router.get("/{request_id}")
def get_request(request_id: str, repo: ServiceRequestRepository = Depends(get_request_repository)):
    return repo.get_by_id_or_raise(request_id)

@router.post("", status_code=201)
def create_request(payload: ServiceRequestCreate, repo: ServiceRequestRepository = Depends(get_request_repository)):
    return repo.create_request(payload)

@router.patch("/{request_id}/status")
def update_request_status(
    request_id: str,
    payload: StatusUpdate,
    repo: ServiceRequestRepository = Depends(get_request_repository),
):
    return repo.update_status(request_id, payload.status, payload.professional_id)

@router.post("/{request_id}/accept")
def accept_job(request_id: str, payload: AcceptJob, repo: ServiceRequestRepository = Depends(get_request_repository)):
    return repo.accept_job(request_id, payload.professional_id)

@router.post("/{request_id}/complete")
def complete_job(request_id: str, repo: ServiceRequestRepository = Depends(get_request_repository)):
    return repo.complete_job(request_id)

# routes/users.py

from fastapi import APIRouter, Depends

from auth import Identity, get_current_identity
from database import get_store
from errors import NotFoundError, ValidationError
from models import USER_ROLES, UserCreate, UserUpdate
from repositories import UserRepository

router = APIRouter(prefix="/users", tags=["Users"])


def get_user_repository(store=Depends(get_store)) -> UserRepository:
    return UserRepository(store)


# Called after sign-up; repeating it for the same identity returns the same profile
@router.post("", status_code=201)
def create_user(payload: UserCreate, repo: UserRepository = Depends(get_user_repository)):
    return repo.create(payload)

@router.get("")
def list_users(limit: int = 50, repo: UserRepository = Depends(get_user_repository)):
    users = repo.get_all(limit)
    return {"users": users, "count": len(users)}

@router.get("/me")
def me(identity: Identity = Depends(get_current_identity), repo: UserRepository = Depends(get_user_repository)):
    return repo.get_by_id_or_raise(identity.id)

@router.get("/customer/{customer_id}")
def get_by_customer_id(customer_id: str, repo: UserRepository = Depends(get_user_repository)):
    user = repo.get_by_customer_id(customer_id)
    if user is None:
        raise NotFoundError("User", customer_id)
    return user

@router.get("/email/{email}")
def get_by_email(email: str, repo: UserRepository = Depends(get_user_repository)):
    user = repo.get_by_email(email)
    if user is None:
        raise NotFoundError("User", email)
    return user

@router.get("/role/{role}")
def get_by_role(role: str, repo: UserRepository = Depends(get_user_repository)):
    role = role.upper()
    if role not in USER_ROLES:
        raise ValidationError("Invalid role. Must be CUSTOMER or PROFESSIONAL", {"role": role})
    users = repo.get_by_role(role)
    return {"users": users, "count": len(users)}

@router.get("/{user_id}")
def get_user(user_id: str, repo: UserRepository = Depends(get_user_repository)):
    return repo.get_by_id_or_raise(user_id)

@router.patch("/{user_id}")
def update_user(user_id: str, payload: UserUpdate, repo: UserRepository = Depends(get_user_repository)):
    return repo.update(user_id, payload)

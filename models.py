# models.py

from pydantic import BaseModel, EmailStr, Field
from typing import List, Literal, Optional

ProductCategory = Literal["Power Tools", "Hand Tools", "Electrical", "Plumbing", "Safety"]
ProfessionType = Literal["Electrician", "Carpenter", "Plumber", "HVAC", "General Handyman"]
RequestStatus = Literal["OPEN", "IN_PROGRESS", "COMPLETED"]
# GUEST only exists on the client before sign-in; it is never stored
UserRole = Literal["CUSTOMER", "PROFESSIONAL"]
ChatRole = Literal["user", "model"]

PRODUCT_CATEGORIES = ("Power Tools", "Hand Tools", "Electrical", "Plumbing", "Safety")
PROFESSION_TYPES = ("Electrician", "Carpenter", "Plumber", "HVAC", "General Handyman")
REQUEST_STATUSES = ("OPEN", "IN_PROGRESS", "COMPLETED")
USER_ROLES = ("CUSTOMER", "PROFESSIONAL")


# Products

class Product(BaseModel):
    id: str
    name: str
    price: float
    category: ProductCategory
    image: str
    description: str
    rating: float = 0
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

class ProductCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    price: float = Field(..., gt=0)
    category: ProductCategory
    image: Optional[str] = None
    description: str = Field(..., max_length=2000)
    rating: Optional[float] = Field(None, ge=0, le=5)

class ProductUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=200)
    price: Optional[float] = Field(None, gt=0)
    category: Optional[ProductCategory] = None
    image: Optional[str] = None
    description: Optional[str] = Field(None, max_length=2000)
    rating: Optional[float] = Field(None, ge=0, le=5)


# Service professionals

class ServiceProfile(BaseModel):
    id: str
    name: str
    profession: ProfessionType
    rate: float
    rating: float = 0
    image: str
    available: bool = True
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

class ServiceProfileCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    profession: ProfessionType
    rate: float = Field(..., gt=0, description="Hourly rate")
    rating: Optional[float] = Field(None, ge=0, le=5)
    image: Optional[str] = None
    available: Optional[bool] = None

class ServiceProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    profession: Optional[ProfessionType] = None
    rate: Optional[float] = Field(None, gt=0)
    rating: Optional[float] = Field(None, ge=0, le=5)
    image: Optional[str] = None
    available: Optional[bool] = None

class AvailabilityUpdate(BaseModel):
    available: bool

class RatingUpdate(BaseModel):
    rating: float


# Job requests

class ServiceRequest(BaseModel):
    id: str
    customer_id: str
    # snapshot taken at creation, not kept in sync with the user profile
    customer_name: str
    description: str
    category: str
    status: RequestStatus = "OPEN"
    date: str
    professional_id: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

class ServiceRequestCreate(BaseModel):
    customer_id: str = Field(..., min_length=1)
    customer_name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=1000)
    category: str = Field(..., min_length=1)

class StatusUpdate(BaseModel):
    status: RequestStatus
    professional_id: Optional[str] = None

class AcceptJob(BaseModel):
    professional_id: str = Field(..., min_length=1)


# Users

class User(BaseModel):
    id: str
    customer_id: str
    email: EmailStr
    role: UserRole
    display_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    profile_complete: bool = False
    created_at: str
    updated_at: str

class UserCreate(BaseModel):
    id: str = Field(..., min_length=1, description="Identity provider user id")
    email: EmailStr
    role: UserRole
    display_name: Optional[str] = None

class UserUpdate(BaseModel):
    display_name: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    role: Optional[UserRole] = None


# Chat

class ChatMessage(BaseModel):
    id: str
    session_id: str
    role: ChatRole
    text: str
    timestamp: str

class ChatTurn(BaseModel):
    role: ChatRole
    text: str

class AIRequest(BaseModel):
    prompt: str = Field(..., min_length=1)
    history: List[ChatTurn] = []
    session_id: Optional[str] = None

class AIResponse(BaseModel):
    text: str
    session_id: Optional[str] = None

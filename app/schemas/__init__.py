from app.schemas.customer import (
    CustomerCreate,
    CustomerUpdate,
    CustomerResponse,
    CustomerListResponse,
)
from app.schemas.equipment import (
    EquipmentCreate,
    EquipmentUpdate,
    EquipmentResponse,
    ServiceHistoryResponse,
)
from app.schemas.job import (
    JobCreate,
    JobUpdate,
    JobResponse,
    JobListResponse,
)
from app.schemas.invoice import (
    InvoiceCreate,
    InvoiceUpdate,
    InvoiceResponse,
    InvoiceListResponse,
)
from app.schemas.auth import (
    SignupRequest,
    LoginRequest,
    UserResponse,
    CompleteOnboardingRequest,
)
from app.schemas.dashboard import DashboardStats, TodayJob

__all__ = [
    "CustomerCreate",
    "CustomerUpdate",
    "CustomerResponse",
    "CustomerListResponse",
    "EquipmentCreate",
    "EquipmentUpdate",
    "EquipmentResponse",
    "ServiceHistoryResponse",
    "JobCreate",
    "JobUpdate",
    "JobResponse",
    "JobListResponse",
    "InvoiceCreate",
    "InvoiceUpdate",
    "InvoiceResponse",
    "InvoiceListResponse",
    "SignupRequest",
    "LoginRequest",
    "UserResponse",
    "CompleteOnboardingRequest",
    "DashboardStats",
    "TodayJob",
]

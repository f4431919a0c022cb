from pydantic import BaseModel, EmailStr, Field
from typing import Literal, Optional

Plan = Literal["basic", "pro", "enterprise"]
VendorStatus = Literal["active", "suspended", "pending"]
SubscriptionStatus = Literal["trial", "active", "suspended", "cancelled"]

class VendorCreate(BaseModel):
    owner_email: EmailStr
    name: str = Field(min_length=1)
    domain: str = Field(min_length=1)
    description: Optional[str] = None
    plan: Plan = "basic"
    status: VendorStatus = "active"
    subscription_status: SubscriptionStatus = "trial"

class VendorUpdate(BaseModel):
    name: Optional[str] = None
    domain: Optional[str] = None
    description: Optional[str] = None
    plan: Optional[Plan] = None
    status: Optional[VendorStatus] = None
    subscription_status: Optional[SubscriptionStatus] = None

class CustomDomainCreate(BaseModel):
    domain: str = Field(min_length=1)
    vendor_id: Optional[str] = None
    is_active: bool = True
    ssl_enabled: bool = False

class CustomDomainUpdate(BaseModel):
    domain: Optional[str] = None
    vendor_id: Optional[str] = None
    is_active: Optional[bool] = None
    ssl_enabled: Optional[bool] = None

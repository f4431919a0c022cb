"""Domain to vendor resolution and role-aware routing.

Every storefront is addressed by a host name: either the vendor's own
``domain`` (usually a subdomain of ``BASE_DOMAIN``) or an attached custom
domain. Local development hosts bypass the lookup.
"""
import logging
import re
from dataclasses import dataclass
from typing import Optional

from fastapi import Request
from sqlalchemy.orm import Session

from multistore.core.config import settings
from multistore.models.vendor import Vendor, CustomDomain

HOME_PATHS = {
    "super_admin": "/admin",
    "admin": "/admin",
    "seller": "/seller",
}

def normalize_domain(host: Optional[str]) -> Optional[str]:
    if not host:
        return None
    domain = host.strip().split(":")[0].lower().rstrip(".")
    return domain or None

def request_domain(request: Request) -> Optional[str]:
    return normalize_domain(request.headers.get("host") or request.query_params.get("domain"))

def is_local_domain(domain: str) -> bool:
    return domain in settings.LOCAL_HOSTS

def home_path_for_role(role: str) -> str:
    return HOME_PATHS.get(role, "/buyer")

def slugify_subdomain(name: str) -> str:
    slug = re.sub(r"[^a-z0-9]", "-", name.lower())
    slug = re.sub(r"-+", "-", slug)
    return slug.strip("-")

def find_vendor_by_domain(db: Session, domain: str):
    """Return ``(vendor, via_custom_domain)`` for a host name, or ``(None, False)``"""
    vendor = db.query(Vendor).filter(Vendor.domain == domain).first()
    if vendor:
        return vendor, False

    custom = db.query(CustomDomain).filter(
        CustomDomain.domain == domain,
        CustomDomain.is_active == True
    ).first()
    if custom and custom.vendor:
        return custom.vendor, True
    return None, False

def resolve_storefront_vendor(db: Session, domain: str):
    vendor, via_custom = find_vendor_by_domain(db, domain)
    if not vendor and "." in domain:
        # shop.example.com -> "shop"
        vendor, via_custom = find_vendor_by_domain(db, domain.split(".")[0])
    return vendor, via_custom

def vendor_for_owner(db: Session, user_id: str):
    return db.query(Vendor).filter(Vendor.owner_id == user_id).order_by(Vendor.created_at).first()

def effective_role(role: str, user_vendor, domain_vendor, local: bool) -> str:
    """A seller keeps the seller role only on their own storefront."""
    if role != "seller" or local:
        return role
    if user_vendor is not None and domain_vendor is not None and user_vendor.id == domain_vendor.id:
        return "seller"
    return "buyer"

@dataclass
class StoreContext:
    domain: str
    local: bool
    role: str
    domain_vendor: Optional[Vendor] = None
    user_vendor: Optional[Vendor] = None
    # vendor the caller may act for on this request
    vendor: Optional[Vendor] = None

    @property
    def is_domain_owner(self) -> bool:
        return bool(self.domain_vendor and self.user_vendor and self.domain_vendor.id == self.user_vendor.id)

def build_store_context(db: Session, domain: str, user: Optional[dict]) -> StoreContext:
    """Resolve which vendor (if any) the caller acts for on ``domain``.

    Raises ``LookupError`` when a non-local domain has no store.
    """
    local = is_local_domain(domain)
    role = user["role"] if user else "buyer"
    user_vendor = vendor_for_owner(db, user["id"]) if user and role == "seller" else None

    if local:
        return StoreContext(domain=domain, local=True, role=role, user_vendor=user_vendor, vendor=user_vendor)

    domain_vendor, _ = find_vendor_by_domain(db, domain)
    if not domain_vendor:
        raise LookupError(domain)

    ctx = StoreContext(
        domain=domain,
        local=False,
        role=effective_role(role, user_vendor, domain_vendor, local=False),
        domain_vendor=domain_vendor,
        user_vendor=user_vendor,
    )
    if role == "super_admin" or ctx.is_domain_owner:
        ctx.vendor = domain_vendor
    elif role == "seller":
        logging.info(f"Seller {user['email']} on foreign domain {domain}, acting as buyer")
    return ctx

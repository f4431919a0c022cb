from sqlalchemy import Column, String, Boolean, ForeignKey, DateTime, Text
from sqlalchemy.orm import relationship
from multistore.db.base import Base
from multistore.utils.common import generate_id, utcnow

class Vendor(Base):
    __tablename__ = "vendors"

    id = Column(String(36), primary_key=True, default=generate_id)
    owner_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    name = Column(String(200), nullable=False)
    domain = Column(String(255), unique=True, nullable=False) # default subdomain
    custom_domain_id = Column(String(36), ForeignKey("custom_domains.id", use_alter=True, ondelete="SET NULL"), nullable=True)
    description = Column(Text, nullable=True)
    plan = Column(String(20), nullable=False, default="basic") # basic, pro, enterprise
    status = Column(String(20), nullable=False, default="active") # active, suspended, pending
    subscription_status = Column(String(20), nullable=False, default="trial") # trial, active, suspended, cancelled
    created_by = Column(String(36), ForeignKey("users.id"), nullable=True)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    owner = relationship("User", back_populates="vendors", foreign_keys=[owner_id])
    custom_domain = relationship("CustomDomain", foreign_keys=[custom_domain_id], post_update=True)
    products = relationship("Product", back_populates="vendor", cascade="all, delete-orphan")
    categories = relationship("Category", back_populates="vendor", cascade="all, delete-orphan")
    orders = relationship("Order", back_populates="vendor")

class CustomDomain(Base):
    __tablename__ = "custom_domains"

    id = Column(String(36), primary_key=True, default=generate_id)
    domain = Column(String(255), unique=True, nullable=False)
    vendor_id = Column(String(36), ForeignKey("vendors.id", ondelete="SET NULL"), nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    ssl_enabled = Column(Boolean, nullable=False, default=False)
    created_by = Column(String(36), ForeignKey("users.id"), nullable=False)

    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)

    vendor = relationship("Vendor", foreign_keys=[vendor_id])

from sqlalchemy import String, DateTime, JSON, Index
from sqlalchemy.orm import Mapped, mapped_column
from datetime import datetime
from salon.db import Base
from salon.models.common import IdMixin, TSMMixin

# ── Collections ─────────────────────────────────────────────────────────────
USERS = "users"
SERVICES = "services"                  # sales ledger
CATALOG_SERVICES = "catalog_services"
CATALOG_EXTRAS = "catalog_extras"
CHEMICAL_PRODUCTS = "chemical_products"
CONSUMABLES = "consumables"
MATERIAL_RECIPES = "material_recipes"  # legacy, read-only
SERVICE_RECIPES = "service_recipes"    # legacy, read-only
CLIENTS = "clients"
EXPENSES = "expenses"
AUDIT_LOG = "audit_log"

# ── Documents ───────────────────────────────────────────────────────────────
class Document(Base, IdMixin, TSMMixin):
    """One record of a collection. The body is stored as-is, so a key that was
    never written stays absent (distinct from an explicit empty list)."""
    __tablename__ = "document"
    collection: Mapped[str] = mapped_column(String(60))
    tenant_id: Mapped[str] = mapped_column(String(36))
    sort_ts: Mapped[datetime] = mapped_column(DateTime(timezone=True))  # "timestamp" order key
    body: Mapped[dict] = mapped_column(JSON, default=dict)
    __table_args__ = (
        Index("ix_document_collection_ts", "tenant_id", "collection", "sort_ts", "id"),
    )

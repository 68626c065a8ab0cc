# Importing the module registers tables with Base for create_all()
from .core import (  # noqa: F401
    # Tables
    Document,

    # Collection names
    USERS, SERVICES, CATALOG_SERVICES, CATALOG_EXTRAS, CHEMICAL_PRODUCTS,
    CONSUMABLES, MATERIAL_RECIPES, SERVICE_RECIPES, CLIENTS, EXPENSES, AUDIT_LOG,
)

__all__ = [
    "Document",
    "USERS", "SERVICES", "CATALOG_SERVICES", "CATALOG_EXTRAS", "CHEMICAL_PRODUCTS",
    "CONSUMABLES", "MATERIAL_RECIPES", "SERVICE_RECIPES", "CLIENTS", "EXPENSES", "AUDIT_LOG",
]

"""Database models. Importing this package registers every API resource."""
from app.models.user import User
from app.models.token import PersonalAccessToken
from app.models.product import Product
from app.models.estimate import Estimate

__all__ = [
    "User",
    "PersonalAccessToken",
    "Product",
    "Estimate",
]

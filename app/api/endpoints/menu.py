"""Navigation menu endpoint."""
from fastapi import APIRouter, Depends

from app.api.deps import get_current_user
from app.core.responses import success_response

router = APIRouter()

MENU_ITEMS = [
    {"type": "item", "id": 1, "name": "Home", "path": "/", "icon": "bi-house"},
    {
        "type": "section",
        "title": "List",
        "items": [
            {"id": 20, "name": "Products", "path": "/list/products", "icon": "bi-calculator"},
        ],
    },
    {"type": "divider"},
    {
        "type": "section",
        "title": "Sales",
        "items": [
            {"id": 40, "name": "Estimate", "path": "/list/estimates", "icon": "bi-receipt"},
        ],
    },
    {"type": "divider"},
    {
        "type": "section",
        "title": "Administration",
        "items": [
            {"id": 60, "name": "Users", "path": "/list/users", "icon": "bi-people", "mode": "form"},
            {"id": 61, "name": "Estimate", "path": "/list/estimates", "icon": "bi-receipt", "mode": "doc"},
        ],
    },
    {"type": "divider"},
    {"type": "item", "id": 90, "name": "Help", "path": "/help", "icon": "bi-question-circle"},
]


@router.get("", dependencies=[Depends(get_current_user)])
async def get_menu():
    """Menu entries for the signed-in user."""
    return success_response(data=MENU_ITEMS, message="Menu items retrieved successfully")

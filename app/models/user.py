"""User model."""
from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship

from app.core.database import Base, utcnow
from app.core.resources import api_resource
from app.core.security import get_password_hash
from app.models.mixins import ResourceMixin
from app.schemas.user import UserCreate, UserResponse, UserRole, UserUpdate


@api_resource(
    uri="users",
    create_schema=UserCreate,
    update_schema=UserUpdate,
    response_schema=UserResponse,
)
class User(ResourceMixin, Base):
    """User model."""

    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    username = Column(String(50), unique=True, index=True, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    whatsapp = Column(String(20))
    password = Column(String(255))

    # Status
    active = Column(Boolean, default=True, nullable=False)
    role = Column(String(20), default=UserRole.USER.value, nullable=False)

    # Timestamps
    created_at = Column(DateTime, default=utcnow)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow)
    last_login_at = Column(DateTime)

    # Relationships
    tokens = relationship(
        "PersonalAccessToken",
        back_populates="user",
        cascade="all, delete-orphan",
    )

    hidden_fields = ("password",)

    database_defaults = {
        "active": True,
        "role": UserRole.USER.value,
    }

    index_columns = [
        {"field": "name", "label": "Name", "sortable": True, "clickable": True, "search": True},
        {"field": "username", "label": "Username", "sortable": True, "search": True},
        {"field": "email", "label": "Email", "sortable": True, "search": True},
        {"field": "whatsapp", "label": "WhatsApp", "search": True},
        {"field": "role", "label": "Role", "sortable": True, "search": True},
        {"field": "active", "label": "Active", "sortable": True, "format": "boolean"},
    ]

    api_schema = [
        {
            "group": "Account",
            "fields": [
                {"field": "name", "label": "Full Name", "placeholder": "Enter full name",
                 "required": True, "maxLength": 255},
                {"field": "username", "label": "Username", "placeholder": "Enter username",
                 "required": True, "minlength": 3, "maxLength": 50, "unique": True},
                {"field": "email", "type": "email", "label": "Email Address",
                 "placeholder": "name@example.com", "required": True, "unique": True},
                {"field": "whatsapp", "type": "tel", "label": "WhatsApp Number",
                 "placeholder": "Enter WhatsApp number", "required": False,
                 "pattern": "^[0-9]{10,15}$"},
            ],
        },
        {
            "group": "Access",
            "fields": [
                {"field": "role", "type": "select", "label": "Role", "required": True,
                 "default": UserRole.USER.value,
                 "options": [
                     {"value": UserRole.ADMIN.value, "label": "Administrator"},
                     {"value": UserRole.USER.value, "label": "User"},
                 ]},
                {"field": "active", "type": "checkbox", "label": "Active",
                 "required": False, "default": True},
            ],
        },
        {
            "group": "Security",
            "fields": [
                {"field": "password", "type": "password", "label": "Password",
                 "placeholder": "Leave blank to keep the current password",
                 "required": False, "minlength": 8,
                 "help": "Users without a password are created inactive."},
            ],
        },
    ]

    @classmethod
    def prepare_data(cls, data: dict, is_update: bool = False) -> dict:
        """Hash passwords; an empty password keeps the current one."""
        if "password" in data:
            password = data.pop("password")
            if password:
                data["password"] = get_password_hash(password)
            elif not is_update:
                data["password"] = None
                data["active"] = False
        elif not is_update:
            data["active"] = False
        return data

    def __repr__(self):
        return f"<User {self.username}>"

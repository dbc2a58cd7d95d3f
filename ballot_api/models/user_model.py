from enum import Enum

from pydantic import BaseModel


class Role(str, Enum):
    VOTER = "voter"
    ADMIN = "admin"


class CurrentUser(BaseModel):
    """The authenticated caller, as loaded from the users collection."""
    id: str
    role: Role = Role.VOTER

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN

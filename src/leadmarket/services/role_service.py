"""
Role management
"""
from typing import List
from sqlalchemy.orm import Session

from leadmarket.database.models import Role
from leadmarket.services.base_service import BaseService
from leadmarket.utils.exceptions import NotFound, ValidationError
from leadmarket.utils.logging import get_logger

logger = get_logger(__name__)


class RoleService(BaseService[Role]):
    def __init__(self, db: Session):
        super().__init__(db, Role)

    def list_roles(self) -> List[Role]:
        return self.db.query(Role).order_by(Role.name).all()

    def add_role(self, name: str) -> Role:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Role name cannot be empty")
        if self.db.query(Role).filter(Role.name == name).first() is not None:
            raise ValidationError(f"Role '{name}' already exists")

        role = self.create(name=name)
        logger.info(f"[green]✅ Role added:[/green] [cyan]{name}[/cyan]")
        return role

    def delete_role(self, role_id: str) -> None:
        if not self.delete(role_id):
            raise NotFound(f"Role with ID '{role_id}' not found")
        logger.info(f"[yellow]Role deleted:[/yellow] {role_id}")

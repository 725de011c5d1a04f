"""Seed default roles and approval configuration

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-12

Creates the Approver and Administrator roles and the single approval
configuration row (majority, no threshold, comments optional).
"""
from typing import Sequence, Union
import uuid
from datetime import datetime

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "0002"
down_revision: Union[str, Sequence[str], None] = "0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


DEFAULT_ROLES = ["Approver", "Administrator"]

roles_table = sa.table(
    "roles",
    sa.column("id", sa.Uuid(as_uuid=True)),
    sa.column("name", sa.String),
    sa.column("created_at", sa.DateTime),
)

approval_configs_table = sa.table(
    "approval_configs",
    sa.column("id", sa.Integer),
    sa.column("mode", sa.String),
    sa.column("threshold_value", sa.Integer),
    sa.column("comments_required", sa.Boolean),
    sa.column("updated_at", sa.DateTime),
)


def upgrade() -> None:
    """Insert default roles and configuration if missing."""
    connection = op.get_bind()

    existing = {
        row[0] for row in connection.execute(sa.select(roles_table.c.name)).fetchall()
    }
    now = datetime.utcnow()
    missing = [name for name in DEFAULT_ROLES if name not in existing]
    if missing:
        op.bulk_insert(
            roles_table,
            [{"id": uuid.uuid4(), "name": name, "created_at": now} for name in missing],
        )

    has_config = connection.execute(sa.select(approval_configs_table.c.id)).first()
    if has_config is None:
        op.bulk_insert(
            approval_configs_table,
            [{
                "id": 1,
                "mode": "majority",
                "threshold_value": 0,
                "comments_required": False,
                "updated_at": now,
            }],
        )


def downgrade() -> None:
    """Remove seeded rows."""
    connection = op.get_bind()
    connection.execute(
        sa.delete(approval_configs_table).where(approval_configs_table.c.id == 1)
    )
    connection.execute(
        sa.delete(roles_table).where(roles_table.c.name.in_(DEFAULT_ROLES))
    )

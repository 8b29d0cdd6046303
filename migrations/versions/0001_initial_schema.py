"""Create the Office Nexus schema

Revision ID: 0001
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""

import sqlalchemy as sa
from alembic import op

from nexus.db.schema import metadata

# revision identifiers, used by Alembic.
revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Tables are created in foreign-key order from the shared metadata
    bind = op.get_bind()
    for table in metadata.sorted_tables:
        table.create(bind, checkfirst=True)


def downgrade() -> None:
    bind = op.get_bind()
    for table in reversed(metadata.sorted_tables):
        table.drop(bind, checkfirst=True)

    # Postgres keeps named enum types after their tables are dropped
    if bind.dialect.name == "postgresql":
        enum_names = {
            column.type.name
            for table in metadata.sorted_tables
            for column in table.columns
            if isinstance(column.type, sa.Enum) and column.type.name
        }
        for name in sorted(enum_names):
            op.execute(f"DROP TYPE IF EXISTS {name}")

"""add news.imageuploaded flag

Revision ID: 8e3f0b6c21d7
Revises: 5c1d2e7a9b40
Create Date: 2025-07-20 18:41:52.503117

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '8e3f0b6c21d7'
down_revision: Union[str, Sequence[str], None] = '5c1d2e7a9b40'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    with op.batch_alter_table('news') as batch_op:
        batch_op.add_column(sa.Column('imageuploaded', sa.Boolean(), server_default=sa.false(), nullable=False))

    # Локальные загрузки до этой ревизии лежат под /uploads/
    op.execute("UPDATE news SET imageuploaded = TRUE WHERE imageurl LIKE '/uploads/%'")


def downgrade() -> None:
    """Downgrade schema."""
    with op.batch_alter_table('news') as batch_op:
        batch_op.drop_column('imageuploaded')

"""create users, news and comments tables

Revision ID: 5c1d2e7a9b40
Revises:
Create Date: 2025-07-12 10:14:03.118204

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5c1d2e7a9b40'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('users',
    sa.Column('id', sa.String(length=255), nullable=False),
    sa.Column('username', sa.String(length=255), nullable=False),
    sa.Column('password_hash', sa.Text(), nullable=False),
    sa.Column('name', sa.Text(), nullable=True),
    sa.Column('avatar', sa.Text(), nullable=True),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    op.create_table('news',
    sa.Column('id', sa.String(length=255), nullable=False),
    sa.Column('category', sa.Text(), nullable=False),
    sa.Column('title', sa.Text(), nullable=False),
    sa.Column('fullcontent', sa.Text(), nullable=False),
    sa.Column('imageurl', sa.Text(), nullable=True),
    sa.Column('author', sa.Text(), nullable=False),
    sa.Column('authorimage', sa.Text(), nullable=True),
    sa.Column('publishdate', sa.DateTime(timezone=True), nullable=False),
    sa.Column('isfeatured', sa.Boolean(), nullable=False),
    sa.Column('issidefeature', sa.Boolean(), nullable=False),
    sa.Column('authorid', sa.String(length=255), nullable=False),
    sa.ForeignKeyConstraint(['authorid'], ['users.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_news_authorid'), 'news', ['authorid'], unique=False)
    op.create_index(op.f('ix_news_publishdate'), 'news', ['publishdate'], unique=False)

    op.create_table('comments',
    sa.Column('id', sa.String(length=255), nullable=False),
    sa.Column('news_id', sa.String(length=255), nullable=False),
    sa.Column('author', sa.Text(), nullable=False),
    sa.Column('authorid', sa.String(length=255), nullable=False),
    sa.Column('avatar', sa.Text(), nullable=True),
    sa.Column('text', sa.Text(), nullable=False),
    sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
    sa.ForeignKeyConstraint(['authorid'], ['users.id'], ondelete='CASCADE'),
    sa.ForeignKeyConstraint(['news_id'], ['news.id'], ondelete='CASCADE'),
    sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_comments_news_id'), 'comments', ['news_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index(op.f('ix_comments_news_id'), table_name='comments')
    op.drop_table('comments')
    op.drop_index(op.f('ix_news_publishdate'), table_name='news')
    op.drop_index(op.f('ix_news_authorid'), table_name='news')
    op.drop_table('news')
    op.drop_index(op.f('ix_users_username'), table_name='users')
    op.drop_table('users')

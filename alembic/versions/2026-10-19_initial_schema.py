"""initial_schema

Revision ID: 3f1c9a2e7b10
Revises:
Create Date: 2026-10-19 09:12:41.208533

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a2e7b10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps(updated: bool = True):
    columns = [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
    ]
    if updated:
        columns.append(
            sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=True)
        )
    return columns


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table('users',
        sa.Column('id', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=True),
        sa.Column('first_name', sa.String(255), nullable=True),
        sa.Column('last_name', sa.String(255), nullable=True),
        sa.Column('profile_image_url', sa.String(500), nullable=True),
        sa.Column('username', sa.String(100), nullable=True),
        sa.Column('bio', sa.Text(), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('website', sa.String(500), nullable=True),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_banned', sa.Boolean(), nullable=False, server_default=sa.false()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='users_pkey'),
    )
    op.create_index('users_email_idx', 'users', ['email'], unique=True)
    op.create_index('users_username_idx', 'users', ['username'], unique=True)

    op.create_table('posts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('image_url', sa.String(512), nullable=True),
        sa.Column('parent_post_id', sa.Integer(), nullable=True),
        sa.Column('is_repost', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('original_post_id', sa.Integer(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='posts_pkey'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='posts_user_id_fkey', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['parent_post_id'], ['posts.id'], name='posts_parent_post_id_fkey', ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['original_post_id'], ['posts.id'], name='posts_original_post_id_fkey', ondelete='SET NULL'),
    )
    op.create_index('posts_id_idx', 'posts', ['id'])
    op.create_index('posts_user_id_idx', 'posts', ['user_id'])
    op.create_index('posts_original_post_id_idx', 'posts', ['original_post_id'])

    op.create_table('likes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('post_id', sa.Integer(), nullable=False),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id', name='likes_pkey'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='likes_user_id_fkey', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], name='likes_post_id_fkey', ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'post_id', name='uq_likes_user_post'),
    )
    op.create_index('likes_id_idx', 'likes', ['id'])
    op.create_index('likes_post_id_idx', 'likes', ['post_id'])

    op.create_table('follows',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('follower_id', sa.String(255), nullable=False),
        sa.Column('following_id', sa.String(255), nullable=False),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id', name='follows_pkey'),
        sa.ForeignKeyConstraint(['follower_id'], ['users.id'], name='follows_follower_id_fkey', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['following_id'], ['users.id'], name='follows_following_id_fkey', ondelete='CASCADE'),
        sa.UniqueConstraint('follower_id', 'following_id', name='uq_follows_follower_following'),
        sa.CheckConstraint('follower_id <> following_id', name='follows_no_self_follow_check'),
    )
    op.create_index('follows_id_idx', 'follows', ['id'])
    op.create_index('follows_following_id_idx', 'follows', ['following_id'])

    op.create_table('bookmarks',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('post_id', sa.Integer(), nullable=False),
        *_timestamps(updated=False),
        sa.PrimaryKeyConstraint('id', name='bookmarks_pkey'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='bookmarks_user_id_fkey', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], name='bookmarks_post_id_fkey', ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'post_id', name='uq_bookmarks_user_post'),
    )
    op.create_index('bookmarks_id_idx', 'bookmarks', ['id'])
    op.create_index('bookmarks_post_id_idx', 'bookmarks', ['post_id'])

    op.create_table('comments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('post_id', sa.Integer(), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id', name='comments_pkey'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], name='comments_user_id_fkey', ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['post_id'], ['posts.id'], name='comments_post_id_fkey', ondelete='CASCADE'),
    )
    op.create_index('comments_id_idx', 'comments', ['id'])
    op.create_index('comments_post_id_idx', 'comments', ['post_id'])


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index('comments_post_id_idx', table_name='comments')
    op.drop_index('comments_id_idx', table_name='comments')
    op.drop_table('comments')

    op.drop_index('bookmarks_post_id_idx', table_name='bookmarks')
    op.drop_index('bookmarks_id_idx', table_name='bookmarks')
    op.drop_table('bookmarks')

    op.drop_index('follows_following_id_idx', table_name='follows')
    op.drop_index('follows_id_idx', table_name='follows')
    op.drop_table('follows')

    op.drop_index('likes_post_id_idx', table_name='likes')
    op.drop_index('likes_id_idx', table_name='likes')
    op.drop_table('likes')

    op.drop_index('posts_original_post_id_idx', table_name='posts')
    op.drop_index('posts_user_id_idx', table_name='posts')
    op.drop_index('posts_id_idx', table_name='posts')
    op.drop_table('posts')

    op.drop_index('users_username_idx', table_name='users')
    op.drop_index('users_email_idx', table_name='users')
    op.drop_table('users')

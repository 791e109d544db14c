"""
Relationship rows between an actor and a target: likes, follows, bookmarks.

Each table carries a unique constraint on (actor, target) so that an insert
racing another insert for the same pair fails in the database instead of
producing a duplicate row.
"""
from sqlalchemy import Column, Integer, String, ForeignKey, UniqueConstraint, CheckConstraint
from sqlalchemy.orm import relationship
from src.database import Base
from src.orm_mixins import CreatedAtMixin


class Like(Base, CreatedAtMixin):
    __tablename__ = "likes"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User", back_populates="likes")
    post = relationship("Post", back_populates="likes")

    __table_args__ = (UniqueConstraint('user_id', 'post_id', name='uq_likes_user_post'),)


class Follow(Base, CreatedAtMixin):
    __tablename__ = "follows"

    id = Column(Integer, primary_key=True, index=True)
    follower_id = Column(String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    following_id = Column(String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    follower = relationship("User", foreign_keys=[follower_id])
    following = relationship("User", foreign_keys=[following_id])

    __table_args__ = (
        UniqueConstraint('follower_id', 'following_id', name='uq_follows_follower_following'),
        CheckConstraint('follower_id <> following_id', name='no_self_follow'),
    )


class Bookmark(Base, CreatedAtMixin):
    __tablename__ = "bookmarks"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(255), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    post_id = Column(Integer, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)

    user = relationship("User", back_populates="bookmarks")
    post = relationship("Post", back_populates="bookmarks")

    __table_args__ = (UniqueConstraint('user_id', 'post_id', name='uq_bookmarks_user_post'),)

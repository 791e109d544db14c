"""
Models for Users module
"""
from sqlalchemy import Column, String, Text, Boolean
from sqlalchemy.orm import relationship
from src.database import Base
from src.orm_mixins import TimestampMixin


class User(Base, TimestampMixin):
    """User synced from the identity provider; id is the provider's subject."""
    __tablename__ = "users"

    id = Column(String(255), primary_key=True)
    email = Column(String(255), unique=True, index=True, nullable=True)
    first_name = Column(String(255), nullable=True)
    last_name = Column(String(255), nullable=True)
    profile_image_url = Column(String(500), nullable=True)
    username = Column(String(100), unique=True, index=True, nullable=True)
    bio = Column(Text, nullable=True)
    location = Column(String(255), nullable=True)
    website = Column(String(500), nullable=True)
    is_admin = Column(Boolean, default=False, nullable=False)
    is_banned = Column(Boolean, default=False, nullable=False)

    # Relationships
    posts = relationship("Post", back_populates="author", passive_deletes=True)
    likes = relationship("Like", back_populates="user", passive_deletes=True)
    bookmarks = relationship("Bookmark", back_populates="user", passive_deletes=True)
    comments = relationship("Comment", back_populates="user", passive_deletes=True)

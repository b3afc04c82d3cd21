"""
User database model.

Riders are identified by email address.
"""

from sqlalchemy import Column, String, JSON
from movr.app.db.session import Base


class User(Base):
    """User model. Created on registration, never updated."""
    __tablename__ = "users"

    email = Column(String(255), primary_key=True)
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    phone_numbers = Column(JSON, nullable=False, default=list)

    def __repr__(self):
        return f"<User(email='{self.email}', name='{self.first_name} {self.last_name}')>"

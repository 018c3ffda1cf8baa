from sqlalchemy import Column, Integer, String, Text
from .base import Base


class Role(Base):
    __tablename__ = "roles"

    role_id = Column(Integer, primary_key=True, autoincrement=False)
    role_name = Column(String(50), nullable=True)  # e.g. "nurse", "charge_nurse", "admin"
    description = Column(Text, nullable=True)


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=False)
    username = Column(String(100), nullable=True, index=True)
    email = Column(String(255), nullable=True)
    display_name = Column(String(200), nullable=True)
    role = Column(String(50), nullable=True)  # role name; a role_id column would make the file classify as roles
    ward_id = Column(Integer, nullable=True)  # home ward

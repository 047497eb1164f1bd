# artify/db/models/user.py
from sqlalchemy import Column, Date, DateTime, Integer, String

from artify.db.base import Base, utcnow


class PrincipalMixin:
    """
    Columns shared by the three principal tables.
    Admins, customers and editors never share a table; the role lives in
    the session, not in a column.
    """

    id = Column(Integer, primary_key=True, index=True)
    first_name = Column(String, nullable=False)
    last_name = Column(String, nullable=False)
    email = Column(String, unique=True, index=True, nullable=False)
    password_hash = Column(String, nullable=False)

    dob = Column(Date, nullable=True)
    phone_no = Column(String, nullable=True)
    address = Column(String, nullable=True)

    created_at = Column(DateTime, default=utcnow)

    @property
    def name(self) -> str:
        return f"{self.first_name} {self.last_name}"


class Admin(PrincipalMixin, Base):
    __tablename__ = "admins"


class Customer(PrincipalMixin, Base):
    __tablename__ = "customers"


class Editor(PrincipalMixin, Base):
    __tablename__ = "editors"

    skills = Column(String, nullable=True)
    experience = Column(String, nullable=True)
    portfolio = Column(String, nullable=True)
    awards = Column(String, nullable=True)

"""SQLAlchemy ORM models for the SQL snapshot store"""

from sqlalchemy import Column, Integer, Numeric, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class CredentialRow(Base):
    """Stored username/password pair (duplicates allowed, first row wins)"""

    __tablename__ = "credential"

    id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(Text, nullable=False, index=True)
    password = Column(Text, nullable=False)


class DebitAccountRow(Base):
    """Stored debit account balance and owner"""

    __tablename__ = "debit_account"

    account_number = Column(Text, primary_key=True)
    balance = Column(Numeric(24, 6, asdecimal=True), nullable=False)
    owner = Column(Text, nullable=False)

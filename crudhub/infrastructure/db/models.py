"""
SQLAlchemy models for the database.
Maps domain entities to database tables.
"""

from sqlalchemy import (
    Column, Integer, String, DateTime, Text, Boolean,
    Numeric, Date, ForeignKey, Index, UniqueConstraint, CheckConstraint
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from crudhub.infrastructure.db.database import Base


class ClientModel(Base):
    """Client table"""
    __tablename__ = 'clients'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False)
    phone = Column(String(20))
    address = Column(String(255))

    # Timestamps
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())
    deleted_at = Column(DateTime)

    # Relationships
    invoices = relationship("InvoiceModel", back_populates="client")

    __table_args__ = (
        UniqueConstraint('email', name='uq_clients_email'),
        Index('idx_clients_deleted_at', 'deleted_at'),
    )


class InvoiceModel(Base):
    """Invoice table"""
    __tablename__ = 'invoices'

    id = Column(Integer, primary_key=True, autoincrement=True)
    number = Column(String(50), nullable=False)
    client_id = Column(
        Integer,
        ForeignKey('clients.id', ondelete='RESTRICT', onupdate='CASCADE'),
        nullable=False
    )
    amount = Column(Numeric(10, 2), nullable=False)
    status = Column(String(20), nullable=False, default='draft')
    issue_date = Column(Date, nullable=False)
    due_date = Column(Date)
    description = Column(Text)

    # Timestamps
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())
    deleted_at = Column(DateTime)

    # Relationships
    client = relationship("ClientModel", back_populates="invoices")

    __table_args__ = (
        UniqueConstraint('number', name='uq_invoices_number'),
        CheckConstraint('amount > 0', name='ck_invoices_amount_positive'),
        CheckConstraint(
            "status IN ('draft', 'sent', 'paid', 'overdue', 'cancelled')",
            name='ck_invoices_status'
        ),
        Index('idx_invoices_client_id', 'client_id'),
        Index('idx_invoices_status', 'status'),
        Index('idx_invoices_issue_date', 'issue_date'),
        Index('idx_invoices_deleted_at', 'deleted_at'),
    )


class CategoryModel(Base):
    """Category table"""
    __tablename__ = 'categories'

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False)
    description = Column(String(500))
    parent_id = Column(Integer, ForeignKey('categories.id', ondelete='RESTRICT'))
    is_active = Column(Boolean, nullable=False, default=True)
    sort_order = Column(Integer, nullable=False, default=0)

    # Timestamps
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())
    deleted_at = Column(DateTime)

    # Relationships
    parent = relationship("CategoryModel", remote_side=[id], back_populates="children")
    children = relationship("CategoryModel", back_populates="parent")
    products = relationship("ProductModel", back_populates="category")

    __table_args__ = (
        UniqueConstraint('name', 'parent_id', name='uq_categories_name_parent'),
        Index('idx_categories_parent_id', 'parent_id'),
        Index('idx_categories_deleted_at', 'deleted_at'),
    )


class ProductModel(Base):
    """Product table"""
    __tablename__ = 'products'

    id = Column(Integer, primary_key=True, autoincrement=True)
    sku = Column(String(50), nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(String(1000))
    price = Column(Numeric(10, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default='USD')
    category_id = Column(Integer, ForeignKey('categories.id', ondelete='RESTRICT'))
    is_active = Column(Boolean, nullable=False, default=True)

    # Timestamps
    created_at = Column(DateTime, nullable=False, server_default=func.now())
    updated_at = Column(DateTime, nullable=False, server_default=func.now())
    deleted_at = Column(DateTime)

    # Relationships
    category = relationship("CategoryModel", back_populates="products")

    __table_args__ = (
        UniqueConstraint('sku', name='uq_products_sku'),
        CheckConstraint('price >= 0', name='ck_products_price_non_negative'),
        Index('idx_products_category_id', 'category_id'),
        Index('idx_products_deleted_at', 'deleted_at'),
    )

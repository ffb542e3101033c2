"""
Модели модуля инвентаря
"""

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    Float,
    ForeignKey,
    Integer,
    String,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from backend.core.database import Base


class Admin(Base):
    """Оператор (единственная роль)"""

    __tablename__ = "admins"

    id = Column(Integer, primary_key=True)
    username = Column(String(150), unique=True, nullable=False)
    password_hash = Column(String(255), nullable=False)


class EquipmentType(Base):
    """Тип оборудования (ноутбук, телефон, ...)"""

    __tablename__ = "equipment_types"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    equipment_items = relationship("Equipment", back_populates="type_ref")


class Employee(Base):
    """Сотрудник, за которым закрепляется оборудование"""

    __tablename__ = "employees"

    id = Column(Integer, primary_key=True)
    first_name = Column(String(255), nullable=False)
    last_name = Column(String(255), nullable=False)
    email = Column(String(255), unique=True, nullable=True)
    phone = Column(String(64), nullable=True)
    role = Column(String(255), nullable=True)  # должность
    territory = Column(String(64), nullable=False)
    comment = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    equipment_items = relationship("Equipment", back_populates="employee")

    @property
    def display_name(self) -> str:
        return f"{self.first_name or ''} {self.last_name or ''}".strip()


class Equipment(Base):
    """Оборудование"""

    __tablename__ = "equipment"

    id = Column(Integer, primary_key=True)
    type_id = Column(
        Integer,
        ForeignKey("equipment_types.id", ondelete="SET NULL"),
        nullable=True,
    )
    # Текстовое название типа: остаётся для старых и отвязанных записей
    type_label = Column(String(255), nullable=False, default="")
    brand = Column(String(255), nullable=False)
    model = Column(String(255), nullable=False)
    serial_number = Column(String(255), nullable=True)
    state = Column(String(32), nullable=False)  # EquipmentState
    purchase_date = Column(Date, nullable=True)
    purchase_place = Column(String(255), nullable=True)
    price = Column(Float, nullable=True)
    warranty_years = Column(Integer, nullable=True)
    employee_id = Column(
        Integer, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True
    )
    # Кеш display_name сотрудника, пишется только через assign_employee()
    employee_label = Column(String(512), nullable=True)
    comment = Column(Text, nullable=True)
    invoice_ref = Column(String(512), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    # Relationships
    type_ref = relationship("EquipmentType", back_populates="equipment_items")
    employee = relationship("Employee", back_populates="equipment_items")
    credentials = relationship(
        "EquipmentCredential",
        back_populates="equipment",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    events = relationship(
        "EquipmentEvent",
        back_populates="equipment",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    @property
    def resolved_type_label(self) -> str:
        if self.type_ref is not None:
            return self.type_ref.name
        return self.type_label


class EquipmentCredential(Base):
    """Учётные данные для входа на оборудование"""

    __tablename__ = "equipment_credentials"

    id = Column(Integer, primary_key=True)
    equipment_id = Column(
        Integer,
        ForeignKey("equipment.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name = Column(String(255), nullable=False)
    # base64(salt + nonce + ciphertext), см. services/crypto.py
    secret = Column(Text, nullable=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    equipment = relationship("Equipment", back_populates="credentials")


class EquipmentEvent(Base):
    """Событие жизненного цикла оборудования"""

    __tablename__ = "equipment_events"

    id = Column(Integer, primary_key=True)
    equipment_id = Column(
        Integer,
        ForeignKey("equipment.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    category = Column(String(32), nullable=False)  # EventCategory
    description = Column(Text, nullable=True)
    event_date = Column(Date, nullable=False)
    document_ref = Column(String(512), nullable=True)
    # Только для Attribution
    target_employee_id = Column(
        Integer, ForeignKey("employees.id", ondelete="SET NULL"), nullable=True
    )
    # Только для État
    target_state = Column(String(32), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now()
    )

    equipment = relationship("Equipment", back_populates="events")
    target_employee = relationship("Employee", foreign_keys=[target_employee_id])


class SchemaVersion(Base):
    """Номер последнего применённого шага startup-миграций"""

    __tablename__ = "schema_version"

    version = Column(Integer, primary_key=True, autoincrement=False)

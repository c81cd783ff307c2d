"""
Degree order model
A ranked degree, classified as either a symbolic or a high-degree lodge
"""

from sqlalchemy import Column, String, Integer, Text, Index
import enum

from .base import Base, ReferenceModel

class LogeType(str, enum.Enum):
    """Two-tier lodge classification"""
    SYMBOLIQUE = "Loge Symbolique"
    HAUTS_GRADES = "Loge Hauts Grades"

class DegreeOrder(Base, ReferenceModel):
    """Masonic degree with its rank and lodge classification"""

    __tablename__ = "degree_orders"

    name = Column(String(150), nullable=False)
    level = Column(Integer, nullable=False)
    loge_type = Column(String(50), nullable=False, index=True)
    description = Column(Text, nullable=True)
    legacy_id = Column(String(64), nullable=True, index=True)

    __table_args__ = (
        Index("idx_degree_orders_loge_type_level", "loge_type", "level"),
    )

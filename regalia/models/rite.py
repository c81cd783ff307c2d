"""Rite model: a Masonic ceremonial tradition products can be tagged with"""

from sqlalchemy import Column, String, Text

from .base import Base, ReferenceModel

class Rite(Base, ReferenceModel):
    """Masonic rite (e.g. REAA, RER)"""

    __tablename__ = "rites"

    name = Column(String(150), nullable=False, unique=True)
    code = Column(String(20), nullable=False, unique=True, index=True)
    abbreviation = Column(String(20), nullable=True)
    description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    legacy_id = Column(String(64), nullable=True, index=True)

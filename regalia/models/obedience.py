"""Obedience model: a governing Masonic organization"""

from sqlalchemy import Column, String, Text

from .base import Base, ReferenceModel

class Obedience(Base, ReferenceModel):
    """Masonic obedience (e.g. GLDF, GODF)"""

    __tablename__ = "obediences"

    name = Column(String(150), nullable=False, unique=True)
    code = Column(String(20), nullable=False, unique=True, index=True)
    abbreviation = Column(String(20), nullable=True)
    description = Column(Text, nullable=True)
    image_url = Column(String(500), nullable=True)
    legacy_id = Column(String(64), nullable=True, index=True)

"""
Reference catalog
Read-only lookups of the entities products are tagged with
"""

from typing import List, Optional, Type, Union
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select
import enum
import logging
import uuid

from regalia.models import Category, Rite, Obedience, DegreeOrder
from regalia.utils.helpers import generate_slug

logger = logging.getLogger(__name__)

ReferenceEntity = Union[Category, Rite, Obedience, DegreeOrder]

class ReferenceKind(str, enum.Enum):
    """Reference entity kinds a product can be linked to"""
    CATEGORY = "category"
    RITE = "rite"
    OBEDIENCE = "obedience"
    DEGREE = "degree"

MODELS = {
    ReferenceKind.CATEGORY: Category,
    ReferenceKind.RITE: Rite,
    ReferenceKind.OBEDIENCE: Obedience,
    ReferenceKind.DEGREE: DegreeOrder,
}

def model_for(kind: ReferenceKind) -> Type[ReferenceEntity]:
    return MODELS[ReferenceKind(kind)]

class ReferenceCatalog:
    """Lookups of categories, rites, obediences and degree orders"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def find_active_by_id(
        self,
        kind: ReferenceKind,
        entity_id: uuid.UUID
    ) -> Optional[ReferenceEntity]:
        """Get an active entity by its identity"""
        model = model_for(kind)
        result = await self.db.execute(
            select(model).where(model.id == entity_id, model.is_active.is_(True))
        )
        return result.scalar_one_or_none()

    async def find_by_slug(
        self,
        kind: ReferenceKind,
        slug: str
    ) -> Optional[ReferenceEntity]:
        """
        Resolve a human readable key to an entity

        Only categories carry a slug; other kinds resolve to None.

        Args:
            kind: Entity kind
            slug: Slug as typed in a URL, normalised before lookup

        Returns:
            Matching entity or None
        """
        kind = ReferenceKind(kind)
        if kind == ReferenceKind.CATEGORY:
            normalised = generate_slug(slug)
            if not normalised:
                return None
            query = select(Category).where(Category.slug == normalised)
        else:
            return None

        result = await self.db.execute(query.limit(1))
        entity = result.scalar_one_or_none()
        if entity is None:
            logger.debug(f"No {kind.value} found for slug {slug!r}")
        return entity

    async def find_active_by_loge_type(self, loge_type: str) -> List[DegreeOrder]:
        """Get active degree orders of one lodge classification"""
        result = await self.db.execute(
            select(DegreeOrder)
            .where(DegreeOrder.loge_type == loge_type, DegreeOrder.is_active.is_(True))
            .order_by(DegreeOrder.level, DegreeOrder.id)
        )
        return list(result.scalars().all())

    async def list_active(self, kind: ReferenceKind) -> List[ReferenceEntity]:
        """Active entities in sidebar order"""
        model = model_for(kind)
        query = select(model).where(model.is_active.is_(True))
        if model is DegreeOrder:
            query = query.order_by(DegreeOrder.loge_type, DegreeOrder.level, DegreeOrder.name)
        else:
            query = query.order_by(model.display_order, model.name)

        result = await self.db.execute(query)
        return list(result.scalars().all())

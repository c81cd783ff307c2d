"""Shared seeded catalogue for query, facet and API tests."""

from types import SimpleNamespace
import uuid

from regalia.models import LogeType

from .factories import (
    create_category,
    create_degree,
    create_obedience,
    create_product,
    create_rite,
)


async def seed_catalogue(db):
    """
    Six products, one of them inactive.

    The only high-degree order is inactive, so "Loge Hauts Grades" resolves
    to no degree at all even though a product links to it.
    """
    tabliers = await create_category(db, "Tabliers", display_order=1)
    cordons = await create_category(db, "Cordons", display_order=2)

    reaa = await create_rite(db, "Rite Écossais Ancien et Accepté", "REAA")
    rer = await create_rite(db, "Rite Écossais Rectifié", "RER")

    godf = await create_obedience(db, "Grand Orient de France", "GODF")
    glnf = await create_obedience(db, "Grande Loge Nationale Française", "GLNF")

    apprenti = await create_degree(db, "Apprenti", 1, LogeType.SYMBOLIQUE)
    maitre = await create_degree(db, "Maître", 3, LogeType.SYMBOLIQUE)
    rose_croix = await create_degree(
        db, "Chevalier Rose-Croix", 18, LogeType.HAUTS_GRADES, is_active=False
    )

    tablier_maitre = await create_product(
        db,
        "Tablier Maître REAA",
        120,
        compare_at_price=150,
        categories=[tabliers],
        rites=[reaa],
        obediences=[godf],
        degrees=[maitre],
        sizes=["M"],
        colors=["Bleu marine"],
        materials=["Satin"],
        tags=["brodé"],
        stock_quantity=0,
        featured=True,
        age_days=5,
        images=["a.jpg", "b.jpg", "c.jpg"],
        cost_price=40,
        legacy_id="legacy-1",
        admin_notes="supplier delay",
        sku="TAB-MAI-01",
    )
    tablier_apprenti = await create_product(
        db,
        "Tablier Apprenti",
        60,
        categories=[tabliers],
        rites=[rer],
        degrees=[apprenti],
        sizes=["S", "M"],
        colors=["Blanc"],
        materials=["Cuir"],
        stock_quantity=3,
        age_days=40,
    )
    cordon_maitre = await create_product(
        db,
        "Cordon Maître",
        90,
        categories=[cordons],
        rites=[reaa],
        obediences=[glnf],
        degrees=[maitre],
        colors=["Bleu ciel"],
        materials=["Soie"],
        stock_quantity=0,
        allow_backorders=True,
        review_count=12,
        average_rating=4.5,
        age_days=10,
    )
    gants = await create_product(
        db,
        "Gants blancs",
        25,
        short_description="Assortis au tablier",
        sizes=["L"],
        colors=["Blanc"],
        stock_quantity=50,
        review_count=30,
        average_rating=4,
        age_days=60,
    )
    sautoir = await create_product(
        db,
        "Sautoir 18e",
        300,
        degrees=[rose_croix],
        stock_quantity=1,
        age_days=3,
    )
    tablier_ancien = await create_product(
        db,
        "Tablier Ancien",
        80,
        categories=[tabliers],
        rites=[reaa],
        degrees=[maitre],
        colors=["Bleu"],
        stock_quantity=5,
        is_active=False,
        age_days=2,
    )

    await db.commit()

    return SimpleNamespace(
        categories=SimpleNamespace(tabliers=tabliers, cordons=cordons),
        rites=SimpleNamespace(reaa=reaa, rer=rer),
        obediences=SimpleNamespace(godf=godf, glnf=glnf),
        degrees=SimpleNamespace(apprenti=apprenti, maitre=maitre, rose_croix=rose_croix),
        products=SimpleNamespace(
            tablier_maitre=tablier_maitre,
            tablier_apprenti=tablier_apprenti,
            cordon_maitre=cordon_maitre,
            gants=gants,
            sautoir=sautoir,
            tablier_ancien=tablier_ancien,
        ),
        unknown_id=str(uuid.uuid4()),
    )


ACTIVE_NAMES = [
    "Cordon Maître",
    "Gants blancs",
    "Sautoir 18e",
    "Tablier Apprenti",
    "Tablier Maître REAA",
]

from __future__ import annotations

from .models import Part, Supplier, SupplierOffer


def sample_suppliers() -> list[Supplier]:
    return [
        Supplier(supplier_id="S1", name="Gulf Auto Parts"),
        Supplier(supplier_id="S2", name="Riyadh Motors Supply"),
        Supplier(supplier_id="S3", name="Eastern Spares Co."),
    ]


def sample_parts() -> list[Part]:
    return [
        Part(
            part_id="p-1",
            part_number="96700-B11004X",
            name="Steering wheel audio switch",
            name_localized="مفتاح صوت المقود",
            brand="Hyundai",
            category="Electrical",
            price=120.0,
            stock=14,
            offers=(SupplierOffer("S1", 120.0, 8), SupplierOffer("S2", 115.0, 6)),
        ),
        Part(
            part_id="p-2",
            part_number="TOY-BRK-001",
            name="Front brake pad set",
            name_localized="فحمات فرامل أمامية",
            brand="Toyota",
            category="Brakes",
            price=185.0,
            stock=25,
            offers=(SupplierOffer("S2", 180.0, 20), SupplierOffer("S3", 178.5, 5)),
        ),
        Part(
            part_id="p-3",
            part_number="TOY-FLT-010",
            name="Oil filter",
            name_localized="فلتر زيت",
            brand="Toyota",
            category="Filters",
            price=25.0,
            stock=120,
            offers=(SupplierOffer("S1", 24.0, 60),),
        ),
        Part(
            part_id="p-4",
            part_number="NIS-SPK-220",
            name="Spark plug iridium",
            name_localized="بوجي إيريديوم",
            brand="Nissan",
            category="Ignition",
            price=42.0,
            stock=2,
            offers=(SupplierOffer("S3", 41.0, 2),),
        ),
        Part(
            part_id="p-5",
            part_number="HYU-BLT-330",
            name="Timing belt",
            name_localized="سير التوقيت",
            brand="Hyundai",
            category="Engine",
            price=260.0,
            stock=0,
        ),
    ]

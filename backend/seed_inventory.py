"""Seed the medicine catalog with demo stock. Existing names are left untouched."""
from datetime import date, timedelta

from pharmacy.db.init_db import init_db
from pharmacy.db.session import SessionLocal
from pharmacy.models.medicine import Medicine
from pharmacy.schemas.medicine import MedicineCreate
from pharmacy.services.inventory_service import create_medicine

# (name, brand, category, price, quantity, days until expiry)
MEDICINES = [
    ("Paracetamol 500mg", "Calpol", "Analgesic", 2.50, 200, 540),
    ("Ibuprofen 400mg", "Brufen", "Analgesic", 4.00, 120, 400),
    ("Amoxicillin 500mg", "Mox", "Antibiotic", 12.00, 60, 300),
    ("Azithromycin 500mg", "Azee", "Antibiotic", 25.00, 4, 200),
    ("Cetirizine 10mg", "Zyrtec", "Antihistamine", 1.50, 300, 20),
    ("Omeprazole 20mg", "Omez", "Antacid", 3.20, 90, 365),
    ("Metformin 500mg", "Glycomet", "Antidiabetic", 2.10, 3, 250),
    ("Amlodipine 5mg", "Amlong", "Antihypertensive", 2.80, 80, -10),
    ("ORS Sachet", "Electral", "Rehydration", 20.00, 45, 700),
    ("Vitamin D3 60K", "Uprise", "Supplement", 35.00, 25, 15),
]


def seed_inventory():
    init_db()
    db = SessionLocal()
    added = 0
    try:
        for name, brand, category, price, quantity, days in MEDICINES:
            if db.query(Medicine).filter(Medicine.name == name).first():
                continue
            create_medicine(db, MedicineCreate(
                name=name,
                brand=brand,
                category=category,
                price=price,
                quantity=quantity,
                expiry_date=date.today() + timedelta(days=days),
            ))
            added += 1
    finally:
        db.close()

    print(f"[OK] Added {added} medicines ({len(MEDICINES) - added} already present)")


if __name__ == "__main__":
    seed_inventory()

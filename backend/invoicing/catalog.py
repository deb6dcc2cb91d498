"""Built-in catalog entries used to seed the items table."""
from typing import Dict, List

SEED_CATEGORY = 'Medical Supplies'

# (name, unit packing, sold per)
SEED_ITEMS = [
    ('Absorbent Cotton Wool IP', '500 gm', 'Pkt'),
    ('Absorbent Gauze Cloth Sch F II', '90cm x 18mtrs', 'Than'),
    ('Absorbent Gauze Cloth Sch F II', '50cm x 18mtrs', 'Than'),
    ('Bandage Cloth Sch F II', '100cm x 20 mtrs', 'Than'),
    ('Rolled bandage Sch F II', '7.5 cm x 4mtrs', 'Than'),
    ('Rolled bandage Sch F II', '10 cm x 4mtrs', 'Roll'),
    ('Rolled bandage Sch F II', '15 cm x 4mtrs', 'Roll'),
    ('Plaster of Paris Bandage (BP)', '10 cm x 2.7mtrs', 'Roll'),
    ('Plaster of Paris Bandage (BP)', '15 cm x 2.7mtrs', 'Roll'),
    ('Cotton Crepe Bandage (BP)', '10 cm x 2.7mtrs', 'Roll'),
    ('Cotton Crepe Bandage (BP)', '15 cm x 2.7mtrs', 'Roll'),
    ('Elastic Adhesive bandages', '10 cm x 4mtrs', 'Roll'),
]


def seed_records() -> List[Dict]:
    """Item rows for the seed list. Prices start at zero and are filled in later."""
    records = []
    for name, packing, per in SEED_ITEMS:
        records.append({
            'name': name,
            'description': f'Per: {per}' if per else None,
            'category': SEED_CATEGORY,
            'unit_price': 0,
            'unit_packing': packing,
            'hsn_code': None,
            'gst_rate': None,
            'is_active': True,
        })
    return records

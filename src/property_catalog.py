"""
property_catalog.py - Static property catalog

Rentable properties shown on the public site. Review statistics are not
stored here; PropertyRegistry computes them on every read.
"""

from typing import List

from src.schemas import Property


def _unsplash(photo_id: str) -> str:
    return f"https://images.unsplash.com/photo-{photo_id}?w=800&h=600&fit=crop"


_PHOTOS = {
    'a': _unsplash('1560448204-e02f11c3d0e2'),
    'b': _unsplash('1522708323590-d24dbb6b0267'),
    'c': _unsplash('1502672260266-1c1ef2d93688'),
    'd': _unsplash('1484154218962-a197022b5858'),
    'e': _unsplash('1560448204-603b3fc33ddc'),
}


def _images(order: str) -> List[str]:
    return [_PHOTOS[key] for key in order]


PROPERTY_CATALOG: List[Property] = [
    Property(
        id='2b-n1-a-29-shoreditch-heights',
        name='2B N1 A - 29 Shoreditch Heights',
        address='29 Shoreditch Heights, London',
        city='London',
        country='UK',
        images=_images('abcde'),
        description=(
            "A stunning 2-bedroom apartment in the heart of Shoreditch, featuring "
            "modern amenities and stylish decor. Perfect for business travelers "
            "and tourists exploring London's vibrant East End."
        ),
        house_rules=[
            'No smoking inside the property',
            'No pets allowed',
            'Check-in after 3:00 PM',
            'Check-out before 11:00 AM',
            'No parties or events',
            'Quiet hours after 10:00 PM',
        ],
        price_per_night=180,
        currency='GBP',
    ),
    Property(
        id='luxury-loft-manhattan',
        name='Luxury Loft in Manhattan',
        address='123 Broadway, New York',
        city='New York',
        country='USA',
        images=_images('cbade'),
        description=(
            "Experience the ultimate Manhattan lifestyle in this luxurious loft "
            "with floor-to-ceiling windows, high-end finishes, and breathtaking "
            "city views. Ideal for discerning guests seeking comfort and "
            "sophistication."
        ),
        house_rules=[
            'No smoking anywhere on the property',
            'Pets considered with prior approval',
            'Check-in after 4:00 PM',
            'Check-out before 12:00 PM',
            'Maximum 4 guests',
            'No loud music after 9:00 PM',
        ],
        price_per_night=450,
        currency='USD',
    ),
    Property(
        id='modern-studio-brooklyn',
        name='Modern Studio in Brooklyn',
        address='456 Park Ave, Brooklyn',
        city='Brooklyn',
        country='USA',
        images=_images('dacbe'),
        description=(
            "Chic and contemporary studio apartment in trendy Brooklyn, featuring "
            "smart home technology and designer furniture. Perfect for solo "
            "travelers or couples exploring NYC's cultural scene."
        ),
        house_rules=[
            'No smoking',
            'No pets',
            'Check-in after 2:00 PM',
            'Check-out before 10:00 AM',
            'Maximum 2 guests',
            'Respect building quiet hours',
        ],
        price_per_night=220,
        currency='USD',
    ),
    Property(
        id='cozy-apartment-queens',
        name='Cozy Apartment in Queens',
        address='789 Main St, Queens',
        city='Queens',
        country='USA',
        images=_images('edcba'),
        description=(
            "A warm and inviting apartment in Queens offering comfort and "
            "convenience. Close to public transportation and local attractions, "
            "perfect for budget-conscious travelers who want to explore NYC."
        ),
        house_rules=[
            'No smoking inside',
            'Pets welcome with deposit',
            'Check-in after 3:00 PM',
            'Check-out before 11:00 AM',
            'Maximum 3 guests',
            'Keep noise levels reasonable',
        ],
        price_per_night=150,
        currency='USD',
    ),
    Property(
        id='penthouse-city-views',
        name='Penthouse with City Views',
        address='321 High Rise, Manhattan',
        city='Manhattan',
        country='USA',
        images=_images('badce'),
        description=(
            "Ultra-luxurious penthouse with panoramic city views, premium "
            "amenities, and exclusive access to building facilities. The ultimate "
            "Manhattan experience for those who demand the finest accommodations."
        ),
        house_rules=[
            'No smoking anywhere on premises',
            'No pets allowed',
            'Check-in after 5:00 PM',
            'Check-out before 12:00 PM',
            'Maximum 6 guests',
            'Formal attire required in common areas',
            'No parties or events without approval',
        ],
        price_per_night=850,
        currency='USD',
    ),
]

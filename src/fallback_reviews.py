"""
fallback_reviews.py - Fixed provider datasets

Served by the provider adapters whenever the real provider can't be
reached (no credentials, sandbox account, network/auth failure). Records
are in each provider's native shape and go through the normal
normalization path.
"""

from typing import Any, Dict, List


HOSTAWAY_FALLBACK: List[Dict[str, Any]] = [
    {
        'id': 7453,
        'type': 'host-to-guest',
        'status': 'published',
        'rating': None,
        'publicReview': 'Shane and family are wonderful! Would definitely host again :)',
        'reviewCategory': [
            {'category': 'cleanliness', 'rating': 10},
            {'category': 'communication', 'rating': 10},
            {'category': 'respect_house_rules', 'rating': 10},
        ],
        'submittedAt': '2020-08-21 22:45:14',
        'guestName': 'Shane Finkelstein',
        'listingName': '2B N1 A - 29 Shoreditch Heights',
    },
    {
        'id': 7454,
        'type': 'guest-to-host',
        'status': 'published',
        'rating': 9,
        'publicReview': (
            'Amazing stay! The apartment was spotless and the location was '
            'perfect. Highly recommend!'
        ),
        'reviewCategory': [
            {'category': 'cleanliness', 'rating': 10},
            {'category': 'communication', 'rating': 9},
            {'category': 'respect_house_rules', 'rating': 9},
            {'category': 'check_in', 'rating': 10},
            {'category': 'value', 'rating': 8},
            {'category': 'location', 'rating': 10},
        ],
        'submittedAt': '2023-12-15 14:30:22',
        'guestName': 'Sarah Johnson',
        'listingName': 'Luxury Loft in Manhattan',
    },
    {
        'id': 7455,
        'type': 'guest-to-host',
        'status': 'published',
        'rating': 8,
        'publicReview': (
            'Great place with excellent amenities. The host was very responsive '
            'and helpful.'
        ),
        'reviewCategory': [
            {'category': 'cleanliness', 'rating': 8},
            {'category': 'communication', 'rating': 9},
            {'category': 'respect_house_rules', 'rating': 8},
            {'category': 'check_in', 'rating': 9},
            {'category': 'value', 'rating': 7},
            {'category': 'location', 'rating': 8},
        ],
        'submittedAt': '2023-12-10 09:15:45',
        'guestName': 'Michael Chen',
        'listingName': 'Modern Studio in Brooklyn',
    },
    {
        'id': 7456,
        'type': 'guest-to-host',
        'status': 'pending',
        'rating': 7,
        'publicReview': (
            'Good location but the apartment was a bit noisy. Overall decent stay.'
        ),
        'reviewCategory': [
            {'category': 'cleanliness', 'rating': 7},
            {'category': 'communication', 'rating': 8},
            {'category': 'respect_house_rules', 'rating': 7},
            {'category': 'check_in', 'rating': 8},
            {'category': 'value', 'rating': 6},
            {'category': 'location', 'rating': 9},
        ],
        'submittedAt': '2023-12-08 16:45:12',
        'guestName': 'Emma Wilson',
        'listingName': 'Cozy Apartment in Queens',
    },
    {
        'id': 7457,
        'type': 'guest-to-host',
        'status': 'published',
        'rating': 10,
        'publicReview': (
            'Absolutely perfect! Everything exceeded our expectations. Will '
            'definitely book again.'
        ),
        'reviewCategory': [
            {'category': 'cleanliness', 'rating': 10},
            {'category': 'communication', 'rating': 10},
            {'category': 'respect_house_rules', 'rating': 10},
            {'category': 'check_in', 'rating': 10},
            {'category': 'value', 'rating': 10},
            {'category': 'location', 'rating': 10},
        ],
        'submittedAt': '2023-12-05 11:20:33',
        'guestName': 'David Rodriguez',
        'listingName': 'Penthouse with City Views',
    },
]


# Google place reviews keyed by the property name they were fetched for.
# "time" is epoch seconds, "rating" is 1-5 stars.
GOOGLE_FALLBACK: List[Dict[str, Any]] = [
    {
        'property_name': 'Luxury Loft in Manhattan',
        'author_name': 'Jennifer Martinez',
        'rating': 5,
        'text': (
            'Excellent location and beautiful property. The host was very '
            'accommodating and the check-in process was smooth.'
        ),
        'time': 1702377000,  # 2023-12-12T10:30:00Z
        'language': 'en',
        'relative_time_description': 'a year ago',
    },
    {
        'property_name': 'Modern Studio in Brooklyn',
        'author_name': 'Robert Kim',
        'rating': 4,
        'text': (
            'Great place to stay! Clean, comfortable, and well-equipped. The '
            'neighborhood is quiet and safe.'
        ),
        'time': 1702223100,  # 2023-12-10T15:45:00Z
        'language': 'en',
        'relative_time_description': 'a year ago',
    },
]

"""
property_slugs.py - Property slug derivation

A provider's display name is lowercased, whitespace runs become single
dashes, and the result is looked up in the provider's alias table so that
naming variants across providers land on the catalog slug.

New variants are added to the tables below; no code changes needed.
"""

import re
from typing import Dict, Optional

from src.schemas import Channel


_WHITESPACE = re.compile(r"\s+")


# Variants seen on more than one provider
SHARED_SLUG_ALIASES: Dict[str, str] = {
    '2b-n1-a---29-shoreditch-heights': '2b-n1-a-29-shoreditch-heights',
    '2b-n1-a-—-29-shoreditch-heights': '2b-n1-a-29-shoreditch-heights',
    '2b-n1-a-–-29-shoreditch-heights': '2b-n1-a-29-shoreditch-heights',
    'luxury-loft-in-manhattan': 'luxury-loft-manhattan',
    'modern-studio-in-brooklyn': 'modern-studio-brooklyn',
    'cozy-apartment-in-queens': 'cozy-apartment-queens',
    'penthouse-with-city-views': 'penthouse-city-views',
}

# Provider-specific variants
PROVIDER_SLUG_ALIASES: Dict[Channel, Dict[str, str]] = {
    Channel.HOSTAWAY: {},
    Channel.GOOGLE: {
        '29-shoreditch-heights': '2b-n1-a-29-shoreditch-heights',
        'shoreditch-heights-2b-n1-a': '2b-n1-a-29-shoreditch-heights',
        'luxury-loft-manhattan-new-york': 'luxury-loft-manhattan',
    },
}


def base_slug(display_name: str) -> str:
    """Lowercase and collapse whitespace runs to single dashes."""
    return _WHITESPACE.sub('-', display_name.strip().lower())


def alias_table(channel: Optional[Channel] = None) -> Dict[str, str]:
    """Shared aliases merged with the provider's own table."""
    table = dict(SHARED_SLUG_ALIASES)
    if channel is not None:
        table.update(PROVIDER_SLUG_ALIASES.get(channel, {}))
    return table


def derive_property_slug(display_name: str, channel: Optional[Channel] = None) -> str:
    """
    Map a provider display name to a canonical property slug.

    Args:
        display_name: Listing/place name as reported by the provider
        channel: Provider, selects the provider-specific alias table

    Returns:
        Canonical slug, or the plain slug when no alias is known
    """
    slug = base_slug(display_name)
    return alias_table(channel).get(slug, slug)

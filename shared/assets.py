"""
Static asset paths for the storefront.

Images live under img/ beneath the deployment base URL. The base URL differs
between environments (the site is sometimes served from a subdirectory), so
every path is built by prefixing it.
"""

from enum import Enum
from typing import Optional

from shared.config import get_settings


class ProductImage(str, Enum):
    """Image files shipped with the storefront."""
    SHILAJIT = "Organic-Shilijit (20g).png"
    HERO = "Hero-section.png"
    HERO_2 = "Hero-section2.png"
    HERO_OIL = "Hero-section-oil.png"
    ALMONDS = "Almoid-599g.png"
    DRIED_APRICOT = "Dried-Appricot-599g.png"
    ORGANIC_SHILAJIT_20G = "Organic-Shilijit (20g).png"
    ORGANIC_SHILAJIT_3G = "Organic-shilijit-3g.png"
    PURE_SHILAJIT_20G = "PURE-SHILIJIT(20g).png"
    SHILAJIT_10G = "Shilijit-10g.png"
    BUY1_GET1_FREE = "Buy1-Get1-Free.png"
    PURE_APRICOT_OIL = "Pure-Appricot-oil.png"


def asset_url(filename: str, base_url: Optional[str] = None) -> str:
    """
    Build the public URL of an image.

    Args:
        filename: File name under img/
        base_url: Deployment base URL; defaults to ASSET_BASE_URL from the
            settings. A trailing slash is added if missing

    Returns:
        The joined path, e.g. "/shop/img/Hero-section.png"
    """
    if base_url is None:
        base_url = get_settings().asset_base_url
    if not base_url:
        base_url = "/"
    if not base_url.endswith("/"):
        base_url += "/"
    return f"{base_url}img/{filename}"


def image_urls(base_url: Optional[str] = None) -> dict[str, str]:
    """Map every ProductImage name to its URL under base_url."""
    if base_url is None:
        base_url = get_settings().asset_base_url
    # Aliases (ORGANIC_SHILAJIT_20G) collapse in iteration, so walk __members__
    return {
        name: asset_url(image.value, base_url)
        for name, image in ProductImage.__members__.items()
    }

"""Pricing model inference from generated pricing reviews."""
from ..models.analysis import PricingType


def infer_pricing_type(text: str) -> PricingType:
    """
    Guess the pricing model from a French pricing review.

    ``FREE`` when the text says "gratuit" without "version gratuite";
    ``FREEMIUM`` when it mentions a free version, freemium or a free offer;
    ``PAID`` otherwise. "gratuit" alone also matches "gratuite", so a
    review mentioning an "offre gratuite" is classified ``FREE``.
    """
    lowered = (text or "").lower()
    if "gratuit" in lowered and "version gratuite" not in lowered:
        return PricingType.FREE
    if "version gratuite" in lowered or "freemium" in lowered or "offre gratuite" in lowered:
        return PricingType.FREEMIUM
    return PricingType.PAID

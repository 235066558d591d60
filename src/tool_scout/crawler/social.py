"""Social network and affiliate link detection."""
from typing import Dict, List, Optional, Tuple
import re

from ..models.crawl import Link
from ..utils.url_utils import get_hostname


SOCIAL_PATTERNS = {
    "twitter": re.compile(r"twitter\.com/([^/?]+)", re.I),
    "instagram": re.compile(r"instagram\.com/([^/?]+)", re.I),
    "facebook": re.compile(r"facebook\.com/([^/?]+)", re.I),
    "linkedin": re.compile(r"linkedin\.com/(?:company|in)/([^/?]+)", re.I),
    "github": re.compile(r"github\.com/([^/?]+)", re.I),
    "youtube": re.compile(r"youtube\.com/(?:channel|user|c)/([^/?]+)", re.I),
    "appStore": re.compile(r"apps\.apple\.com/[^/]+/app/([^/]+)", re.I),
    "playStore": re.compile(r"play\.google\.com/store/apps/details\?id=([^&]+)", re.I),
}

AFFILIATE_PATTERN = re.compile(r"(?:affili(?:ate|é)|partenaire|refer(?:ral)?)", re.I)

# Social link keys and the tool columns they are stored in
SOCIAL_FIELDS = {
    "twitter": "twitter_url",
    "instagram": "instagram_url",
    "facebook": "facebook_url",
    "linkedin": "linkedin_url",
    "github": "github_url",
    "youtube": "youtube_url",
    "appStore": "app_store_url",
    "playStore": "play_store_url",
}


def match_social_links(links: List[Link], site_url: str) -> Tuple[Dict[str, Optional[str]], List[str], bool]:
    """
    Classify page links by social network.

    The first match per network wins. A link mentioning affiliation,
    partnership or referral counts as an affiliate program only when it
    leaves the site.

    Args:
        links: Absolute links of the page
        site_url: URL of the site being inspected

    Returns:
        ``(social_links, found, has_affiliate_program)`` where
        ``social_links`` maps every network (plus ``affiliate``) to a URL or
        None and ``found`` lists the matched URLs in discovery order
    """
    social: Dict[str, Optional[str]] = {name: None for name in SOCIAL_PATTERNS}
    social["affiliate"] = None
    found: List[str] = []
    has_affiliate = False
    site_host = get_hostname(site_url) or ""

    for link in links:
        url = link.url
        for name, pattern in SOCIAL_PATTERNS.items():
            if social[name] is None and pattern.search(url):
                social[name] = url
                if url not in found:
                    found.append(url)

        if AFFILIATE_PATTERN.search(url) and site_host not in url:
            social["affiliate"] = url
            has_affiliate = True
            if url not in found:
                found.append(url)

    return social, found, has_affiliate

"""
French prompts for the vidéo-ia.net enrichment endpoints.

Each builder truncates the crawled content to what the model is given.
"""
from typing import Any, Dict, List
import json


SITE_NAME = "vidéo-ia.net"

CONTENT_LIMIT = 50_000
DESCRIPTION_LIMIT = 100_000
METADATA_LIMIT = 25_000
AFFILIATE_LINK_LIMIT = 1_500

CATEGORY_CHOICES = (
    "AI, Productivity, Design, Development, Marketing, Analytics, Communication, "
    "Content Creation, Social Media, Education, Finance, Security"
)
USER_TYPE_CHOICES = (
    "Developers, Designers, Marketers, Content Creators, Entrepreneurs, Students, "
    "Professionals, Teams, Enterprise"
)

CONTENT_FIELDS = {
    "name": "Nom de l'outil (court et précis, max 50 caractères)",
    "description": "Description détaillée (500-1000 caractères)",
    "summary": "Résumé concis (max 150 caractères)",
    "seoTitle": "Titre SEO (max 60 caractères)",
    "seoDescription": "Description SEO (max 155 caractères)",
    "pros": ["Avantage 1", "Avantage 2", "Avantage 3"],
    "cons": ["Inconvénient 1", "Inconvénient 2"],
    "hasAffiliateProgram": "true ou false",
    "affiliateDetails": "Détails du programme d'affiliation (si applicable)",
    "affiliateUrl": "URL d'affiliation (si applicable)",
    "hasFreeVersion": "true ou false",
    "pricingDetails": "Détails des prix",
    "features": ["Fonctionnalité 1", "Fonctionnalité 2", "Fonctionnalité 3"],
    "summarizedDescription": "Description résumée (1-2 phrases)",
    "categories": [f"2-3 parmi: {CATEGORY_CHOICES}"],
    "recommendedUserTypes": [f"1-2 parmi: {USER_TYPE_CHOICES}"],
}

METADATA_STRUCTURE = {
    "analysis": {
        "name": "Nom court et précis de l'outil (max 50 caractères)",
        "description": "Description détaillée et factuelle de l'outil, ses fonctionnalités principales, son utilité (500-1000 caractères)",
        "summary": "Un résumé concis de l'outil en 1-2 phrases (max 150 caractères)",
        "seoTitle": "Un titre SEO optimisé (max 60 caractères)",
        "seoDescription": "Une meta description SEO optimisée (max 155 caractères)",
        "pros": ["Avantage 1", "Avantage 2", "Avantage 3", "Avantage 4", "Avantage 5"],
        "cons": ["Inconvénient 1", "Inconvénient 2", "Inconvénient 3"],
        "hasAffiliateProgram": "true ou false",
        "affiliateDetails": "Description brève du programme d'affiliation si trouvé",
        "affiliateUrl": "URL vers la page du programme d'affiliation si trouvée",
        "pricing": {
            "hasFreeVersion": "true ou false",
            "pricingDetails": "Résumé bref des niveaux de prix",
        },
        "features": ["Fonctionnalité clé 1", "Fonctionnalité clé 2", "Fonctionnalité clé 3"],
        "summarizedDescription": "Une description concise en 1-2 phrases de ce que fait cet outil",
        "categories": [f"Sélectionne 2-3 catégories parmi: {CATEGORY_CHOICES}"],
        "recommendedUserTypes": [f"Sélectionne 1-2 types d'utilisateurs parmi: {USER_TYPE_CHOICES}"],
    }
}


def content_prompt(url: str, title: str, content: str, social_links: List[str]) -> str:
    """Form-filling prompt for the content crawler."""
    structure = json.dumps(CONTENT_FIELDS, ensure_ascii=False, indent=2)
    return f"""Analyse ce site web d'un outil technologique et extrait les informations pour remplir un formulaire.

URL analysée: {url}
Titre de la page: {title}

Liens sociaux trouvés:
{chr(10).join(social_links)}

CONTENU DU SITE:
{content[:CONTENT_LIMIT]}

Basé sur ce contenu, remplis les champs de notre base de données.
Réponds uniquement avec un objet JSON de cette structure:
{structure}"""


def pricing_prompt(url: str, content: str) -> str:
    """HTML pricing review prompt, written as a first-hand test of the tool."""
    return f"""Analyse cette page de tarification d'un outil technologique et rédige un contenu pour le site {SITE_NAME}.

URL analysée: {url}

CONTENU DES PAGES DE TARIFICATION:
{content[:CONTENT_LIMIT]}

Tu es un expert en IA et technologies qui rédige pour le site {SITE_NAME}. Tu as testé personnellement cet outil et tu partages ton expérience concrète avec ton lectorat. Tu t'adresses directement à eux en utilisant un ton conversationnel, avec des "je" et des "vous". N'écris pas "Détails de tarification:" ou des formules du genre.

Ton analyse de tarification doit:
- Être structurée en HTML avec h2, h3, p, ul, li, strong et em
- Comparer les offres entre elles et avec d'autres solutions du marché
- Indiquer ton avis personnel sur le rapport qualité/prix
- Mentionner des cas d'usage spécifiques pour chaque niveau de prix
- Recommander le meilleur plan selon différents profils d'utilisateurs

Inclus les éléments suivants en HTML structuré:

<h2>Vue d'ensemble des tarifs</h2>
<p>Ton analyse du modèle de tarification (gratuit, freemium, payant) ainsi que ton opinion personnelle sur cette stratégie de prix.</p>

<h2>Analyse détaillée par plan</h2>
<h3>Nom du plan</h3>
<p>Prix (mensuel et annuel), description détaillée de ce que tu obtiens.</p>

<h2>Comment tirer le maximum de son abonnement</h2>
<p>Tes conseils d'expert pour optimiser son utilisation selon le plan choisi.</p>

IMPORTANT: Ne génère PAS de bloc ```html au début ou à la fin. Écris directement le HTML sans l'entourer de backticks.

Écris directement en français avec le balisage HTML."""


def description_prompt(url: str, content: str) -> str:
    """SEO description prompt for the detailed description crawler."""
    return f"""Tu es un expert en rédaction SEO avec une excellente compréhension des outils et services d'intelligence artificielle.

Je vais te fournir le contenu d'une page web décrivant un outil d'IA, et j'ai besoin que tu génères une description détaillée et optimisée pour le SEO, en français, pour le site {SITE_NAME}.

URL: {url}

CONTENU DE LA PAGE WEB:
{content[:DESCRIPTION_LIMIT]}

DIRECTIVES:
1. Crée une description détaillée, factuelle et informative de l'outil (600-800 caractères).
2. La description doit être bien structurée, engageante et optimisée pour le référencement.
3. Inclus les fonctionnalités principales, les cas d'utilisation et les avantages de l'outil.
4. Adapte le ton pour qu'il soit professionnel mais accessible.
5. N'invente pas de fonctionnalités qui ne sont pas mentionnées dans le contenu.
6. Fournis uniquement la description en HTML (p, ul, li, strong), sans introduction ni conclusion."""


def affiliate_prompt(site_url: str, links: List[Dict[str, Any]]) -> str:
    """Prompt asking which visited footer link is an affiliate program page."""
    details = "---\n\n".join(
        f"LIEN {index}:\nURL: {link['url']}\nTEXTE DU LIEN: {link.get('text', '')}\n"
        f"CONTENU:\n{link.get('content', '')[:AFFILIATE_LINK_LIMIT]}\n\n"
        for index, link in enumerate(links, start=1)
    )
    return f"""Tu es un expert en analyse de sites web, spécialisé dans la détection de programmes d'affiliation.

J'ai extrait {len(links)} liens depuis le site web {site_url} et visité chacun pour obtenir leur contenu.

Analyse chaque lien et détermine lequel est le plus susceptible de représenter un programme d'affiliation, partenariat ou référencement. Les pages de programme d'affiliation contiennent généralement des termes comme "affiliate", "affiliation", "partenaire", "référer", "commission", "reward", "earn", "partner program", etc.

LISTE DES LIENS ANALYSÉS:
{details}
Réponds UNIQUEMENT au format JSON exact suivant:
{{
  "mostProbableAffiliateUrl": "URL complète du lien le plus probable d'être une page d'affiliation, ou null si aucun n'est pertinent",
  "confidence": note de 0 à 10 indiquant ton niveau de confiance,
  "explanation": "Une explication brève (max 150 caractères) justifiant ton choix"
}}

N'inclus AUCUN autre texte en dehors de ce JSON."""


def metadata_prompt(
    url: str,
    title: str,
    content: str,
    social_links: List[str],
    affiliate_links: List[Any]
) -> str:
    """Full tool metadata prompt embedding the expected JSON structure."""
    structure = json.dumps(METADATA_STRUCTURE, ensure_ascii=False, indent=2)
    return f"""Analyse soigneusement le contenu de ce site web d'un outil ou service technologique et extrait les informations suivantes au format JSON.

URL: {url}
Titre: {title}

CONTENU DU SITE WEB:
{content[:METADATA_LIMIT]}

LIENS DE RÉSEAUX SOCIAUX POTENTIELS:
{chr(10).join(social_links)}

LIENS D'AFFILIATION POTENTIELS:
{json.dumps(affiliate_links, ensure_ascii=False, indent=2)}

Basé sur ces informations, fournis les détails suivants dans cette structure JSON exacte:
{structure}

IMPORTANT:
- Si tu n'es pas sûr d'un champ, fournis ta meilleure estimation mais fais-la précise.
- S'il n'y a pas de programme d'affiliation, définis hasAffiliateProgram sur false.
- Extrait toujours les liens réels directement à partir du contenu fourni, ne les invente pas.
- Assure-toi que le résumé et la description soient informatifs et professionnels."""

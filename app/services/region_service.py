"""
Region service - public reports around a postal code, their summary and
per-category pattern analysis.

Reads only through the PUBLIC view of the repository; rejected reports can
never leak into a region listing, an AI summary or an analysis.
"""

from collections import Counter, defaultdict
from datetime import datetime
from typing import Dict, List, Optional
import logging

from app.core.settings import settings
from app.models.report import Report
from app.services.moderation.base import OracleError, TextOracle
from app.services.report_repository import ReportRepository
from app.utils.geocoding import PostalCodeInfo, haversine_km

logger = logging.getLogger(__name__)

EMPTY_REGION_SUMMARY = "Geen recente meldingen in deze regio."
BLANK_SUMMARY = "Gemengde meldingen in de buurt."

# Pattern analysis needs at least this many reports in the category
MIN_ANALYSIS_REPORTS = 2
# Answers this short carry no pattern worth showing
MIN_ANALYSIS_LENGTH = 50
NO_PATTERN_MARKERS = ("geen patronen", "geen opvallende")


def reports_near(reports: List[Report], postal_info: PostalCodeInfo, radius_km: float) -> List[Report]:
    nearby = []
    for report in reports:
        if report.latitude is None or report.longitude is None:
            continue
        distance = haversine_km(postal_info.latitude, postal_info.longitude, report.latitude, report.longitude)
        if distance <= radius_km:
            nearby.append(report)
    return nearby


def get_region_reports(
    postal_info: PostalCodeInfo,
    repository: ReportRepository,
    category: Optional[str] = None,
    radius_km: Optional[float] = None,
) -> List[Report]:
    if category and category != "all":
        candidates = repository.get_public_reports_by_category(category)
    else:
        candidates = repository.get_all_public_reports()
    return reports_near(candidates, postal_info, radius_km if radius_km is not None else settings.REGION_RADIUS_KM)


def get_category_region_reports(
    postal_info: PostalCodeInfo,
    repository: ReportRepository,
    category: str,
    radius_km: Optional[float] = None,
) -> List[Report]:
    """Exact category match; "all" is not a wildcard here."""
    candidates = repository.get_public_reports_by_category(category)
    return reports_near(candidates, postal_info, radius_km if radius_km is not None else settings.REGION_RADIUS_KM)


def build_summary_prompt(reports: List[Report]) -> str:
    by_category: Dict[str, List[str]] = defaultdict(list)
    for report in reports:
        by_category[report.category].append(report.description)

    category_texts = ". ".join(
        f"{category} ({len(descriptions)} meldingen): {', '.join(descriptions)}"
        for category, descriptions in by_category.items()
    )

    return f"""Je bent een stadsmanager die rapporteert aan de burgemeester. Groepeer deze buurtmeldingen per hoofdcategorie: {category_texts}

Maak een samenvatting per categorie:
- Vermeld aantal meldingen per categorie
- Beschrijf kort wat de hoofdproblemen zijn binnen elke categorie
- Focus op publieke veiligheid en openbare ruimte
- Negeer administratieve/private zaken

Format:
**[Categorie naam] ({{aantal}} meldingen):** korte beschrijving

Maximaal 3-4 categorieën, professionele toon."""


def fallback_summary(reports: List[Report]) -> str:
    counts = Counter(report.category for report in reports)
    top_category, top_count = counts.most_common(1)[0]
    return f"{len(reports)} meldingen in deze regio. Meest voorkomend: {top_category} ({top_count} meldingen)."


def summarize_region(reports: List[Report], oracle: TextOracle, max_tokens: Optional[int] = None) -> str:
    """
    Summarise public region reports with the oracle.

    An empty answer gets a generic line; counts are used only when the
    oracle call itself fails.
    """
    if not reports:
        return EMPTY_REGION_SUMMARY

    try:
        summary = oracle.generate(build_summary_prompt(reports), max_tokens=max_tokens or settings.AI_MAX_TOKENS)
    except OracleError as e:
        logger.warning(f"⚠️ Region summary unavailable, using counts: {e}")
        return fallback_summary(reports)

    return (summary or "").strip() or BLANK_SUMMARY


def _dutch_date(value: datetime) -> str:
    return f"{value.day}-{value.month}-{value.year}"


def _analysis_entry(index: int, report: Report) -> str:
    location = report.location_description or f"{report.latitude:.4f}, {report.longitude:.4f}"
    lines = [
        f"Melding {index}:",
        f"- Beschrijving: {report.description}",
        f"- Locatie: {location}",
        f"- Gemeld op: {_dutch_date(report.created_at)}",
        f"- Subcategorie: {report.subcategory or 'Algemeen'}",
    ]
    if report.incident_date_time:
        lines.append(f"- Incident datum: {_dutch_date(report.incident_date_time)}")
    return "\n".join(lines)


def build_analysis_prompt(category: str, reports: List[Report]) -> str:
    entries = "\n\n".join(_analysis_entry(i, report) for i, report in enumerate(reports, start=1))

    return f"""Je bent een onderzoeksjournalist die patronen analyseert in buurtmeldingen.

Analyseer deze {len(reports)} meldingen in categorie "{category}":

{entries}

Schrijf ALLEEN een korte journalistieke notitie ALS je duidelijke patronen ziet:
- Tijdsclusters (bijv. "3 fietsdiefstallen in één nacht")
- Locatieclusters (bijv. "alle incidenten rond Park X")
- Gedragspatronen (bijv. "steeds dezelfde aanpak")
- Escalatie (bijv. "toenemende ernst")

SCHRIJF NIETS als er geen opvallende patronen zijn.

Als je wel patronen ziet, format zo:
**Opvallend patroon:** [korte, pakkende kop]
[2-3 zinnen uitleg]

Journalist toon: professioneel maar toegankelijk, focus op wat burgers moeten weten."""


def is_substantial_analysis(text: Optional[str]) -> bool:
    if not text or len(text) <= MIN_ANALYSIS_LENGTH:
        return False
    lowered = text.lower()
    return not any(marker in lowered for marker in NO_PATTERN_MARKERS)


def analyze_category_patterns(
    category: str,
    reports: List[Report],
    oracle: TextOracle,
    max_tokens: Optional[int] = None,
) -> Optional[str]:
    """
    Journalistic note on patterns in one category's public region reports.

    Returns None when there is too little data, when the oracle finds no
    pattern, or when the oracle fails. Never raises OracleError.
    """
    if len(reports) < MIN_ANALYSIS_REPORTS:
        return None

    try:
        analysis = oracle.generate(
            build_analysis_prompt(category, reports),
            max_tokens=max_tokens or settings.AI_MAX_TOKENS,
        )
    except OracleError as e:
        logger.warning(f"⚠️ Pattern analysis unavailable for {category}: {e}")
        return None

    if not is_substantial_analysis(analysis):
        logger.info(f"No notable pattern in {len(reports)} {category} reports")
        return None
    return analysis.strip()

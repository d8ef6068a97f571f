"""
Geocoding utilities: postal code lookup and great-circle distance.

Postal codes come from a built-in table of Belgian municipalities; no
external geocoding service is called.
"""

import logging
import math
from typing import Dict, Optional, Tuple

from pydantic import BaseModel

logger = logging.getLogger(__name__)

EARTH_RADIUS_KM = 6371.0
BOUNDS_DELTA_DEGREES = 0.01

# postal code -> (municipality, latitude, longitude, province)
BELGIAN_POSTAL_CODES: Dict[str, Tuple[str, float, float, str]] = {
    # Antwerp
    "2000": ("Antwerpen", 51.2213, 4.4051, "Antwerp"),
    "2018": ("Antwerpen", 51.2300, 4.4200, "Antwerp"),
    "2020": ("Antwerpen", 51.2100, 4.3900, "Antwerp"),
    "2030": ("Antwerpen", 51.2400, 4.3800, "Antwerp"),
    "2060": ("Antwerpen", 51.2200, 4.3600, "Antwerp"),
    "2100": ("Deurne", 51.2100, 4.4600, "Antwerp"),
    "2140": ("Borgerhout", 51.2100, 4.4300, "Antwerp"),
    "2170": ("Merksem", 51.2400, 4.4400, "Antwerp"),
    "2300": ("Turnhout", 51.3227, 4.9447, "Antwerp"),
    "2500": ("Lier", 51.1313, 4.5700, "Antwerp"),
    "2600": ("Berchem", 51.1950, 4.4150, "Antwerp"),
    "2800": ("Mechelen", 51.0280, 4.4774, "Antwerp"),
    # Brussels Capital Region
    "1000": ("Brussel", 50.8466, 4.3528, "Brussels"),
    "1030": ("Schaarbeek", 50.8700, 4.3800, "Brussels"),
    "1040": ("Etterbeek", 50.8300, 4.3900, "Brussels"),
    "1050": ("Elsene", 50.8200, 4.3600, "Brussels"),
    "1060": ("Sint-Gillis", 50.8300, 4.3400, "Brussels"),
    "1070": ("Anderlecht", 50.8400, 4.3100, "Brussels"),
    "1080": ("Molenbeek-Saint-Jean", 50.8600, 4.3300, "Brussels"),
    "1180": ("Ukkel", 50.8000, 4.3400, "Brussels"),
    # East Flanders
    "9000": ("Gent", 50.8504, 3.7304, "East Flanders"),
    "9100": ("Sint-Niklaas", 51.1658, 4.1431, "East Flanders"),
    "9300": ("Aalst", 50.9368, 4.0397, "East Flanders"),
    # Flemish Brabant
    "3000": ("Leuven", 50.8798, 4.7005, "Flemish Brabant"),
    "1800": ("Vilvoorde", 50.9276, 4.4276, "Flemish Brabant"),
    # Limburg
    "3500": ("Hasselt", 50.9307, 5.3378, "Limburg"),
    "3600": ("Genk", 50.9658, 5.5037, "Limburg"),
    # West Flanders
    "8000": ("Brugge", 51.2085, 3.2251, "West Flanders"),
    "8400": ("Oostende", 51.2289, 2.9187, "West Flanders"),
    "8500": ("Kortrijk", 50.8279, 3.2646, "West Flanders"),
    # Wallonia
    "7000": ("Mons", 50.4542, 3.9564, "Hainaut"),
    "6000": ("Charleroi", 50.4108, 4.4446, "Hainaut"),
    "4000": ("Luik", 50.6326, 5.5797, "Liège"),
    "5000": ("Namen", 50.4674, 4.8720, "Namur"),
    "6700": ("Arlon", 49.6837, 5.8164, "Luxembourg"),
}


class PostalBounds(BaseModel):
    north: float
    south: float
    east: float
    west: float


class PostalCodeInfo(BaseModel):
    postalCode: str
    municipality: str
    latitude: float
    longitude: float
    bounds: PostalBounds


def haversine_km(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """Great-circle distance between two points in kilometres."""
    d_lat = math.radians(lat2 - lat1)
    d_lon = math.radians(lon2 - lon1)
    a = (
        math.sin(d_lat / 2) ** 2
        + math.cos(math.radians(lat1)) * math.cos(math.radians(lat2)) * math.sin(d_lon / 2) ** 2
    )
    return EARTH_RADIUS_KM * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def get_postal_code_info(postal_code: str) -> Optional[PostalCodeInfo]:
    entry = BELGIAN_POSTAL_CODES.get((postal_code or "").strip())
    if entry is None:
        logger.info(f"Postal code {postal_code} not found in local table")
        return None

    municipality, latitude, longitude, _province = entry
    return PostalCodeInfo(
        postalCode=postal_code.strip(),
        municipality=municipality,
        latitude=latitude,
        longitude=longitude,
        bounds=PostalBounds(
            north=latitude + BOUNDS_DELTA_DEGREES,
            south=latitude - BOUNDS_DELTA_DEGREES,
            east=longitude + BOUNDS_DELTA_DEGREES,
            west=longitude - BOUNDS_DELTA_DEGREES,
        ),
    )


def nearest_postal_code(latitude: float, longitude: float) -> Optional[str]:
    """Closest postal code centre to the given point."""
    if not BELGIAN_POSTAL_CODES:
        return None
    return min(
        BELGIAN_POSTAL_CODES,
        key=lambda code: haversine_km(latitude, longitude, BELGIAN_POSTAL_CODES[code][1], BELGIAN_POSTAL_CODES[code][2]),
    )

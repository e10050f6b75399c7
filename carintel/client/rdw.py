"""
RDW open-data vehicle lookup.

Used endpoints:
- GET https://opendata.rdw.nl/resource/m9d7-ebf2.json?kenteken=<normalized>&$limit=1
  -> [ {"kenteken": "...", "merk": "...", ...} ]
- GET https://opendata.rdw.nl/resource/m9d7-ebf2.json?$where=...&$limit=...   (search)
- GET https://opendata.rdw.nl/resource/t3ee-brg3.json?kenteken=<normalized>&$limit=50   (recalls)
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any

import httpx

from . import kenteken as plates
from .store import AppState

RDW_BASE_URL = "https://opendata.rdw.nl/resource"
VEHICLES_PATH = "/m9d7-ebf2.json"
RECALLS_PATH = "/t3ee-brg3.json"
APK_WARNING_DAYS = 60

SEARCH_LIMIT = 100
LIKE_LIMIT = 1000
BROAD_WILDCARD_LIMIT = 10000
RECALL_LIMIT = 50
BATCH_SIZE = 10

# filter key -> (RDW column, upper-case the value)
FILTER_COLUMNS = {
    "merk": ("merk", True),
    "handelsbenaming": ("handelsbenaming", True),
    "kleur": ("eerste_kleur", True),
    "brandstof": ("brandstof_hoofdsoort", True),
    "voertuigsoort": ("voertuigsoort", False),
    "aantalDeuren": ("aantal_deuren", False),
    "aantalZitplaatsen": ("aantal_zitplaatsen", False),
    "aantalCilinders": ("aantal_cilinders", False),
    "euroKlasse": ("emissiecode_omschrijving", False),
    "zuinigheidslabel": ("zuinigheidslabel", False),
}

FUEL_TYPES = {
    "BENZINE": "Benzine",
    "DIESEL": "Diesel",
    "LPG": "LPG",
    "GAS": "LPG",
    "AUTOGAS": "LPG",
    "ELEKTRICITEIT": "Elektrisch",
    "ELEKTRISCH": "Elektrisch",
    "ELECTRIC": "Elektrisch",
    "WATERSTOF": "Waterstof",
    "CNG": "CNG",
    "AARDGAS": "CNG",
    "LNG": "LNG",
    "HYBRIDE": "Hybride",
    "ALCOHOL": "Alcohol",
}

COLORS = {
    "ZWART": "Zwart",
    "WIT": "Wit",
    "GRIJS": "Grijs",
    "ZILVER": "Zilver",
    "BLAUW": "Blauw",
    "ROOD": "Rood",
    "GROEN": "Groen",
    "GEEL": "Geel",
    "ORANJE": "Oranje",
    "BRUIN": "Bruin",
    "PAARS": "Paars",
    "ROZE": "Roze",
}

logger = logging.getLogger(__name__)


class RdwError(RuntimeError):
    pass


class VehicleNotFoundError(RdwError):
    def __init__(self, kenteken: str) -> None:
        self.kenteken = kenteken
        super().__init__(
            f"Geen voertuig gevonden met kenteken {kenteken}. Probeer een echt Nederlands kenteken."
        )


def parse_rdw_date(raw: str | None) -> date | None:
    """
    RDW dates are YYYYMMDD; some datasets use ISO. Anything else is None.
    """
    value = (raw or "").strip()
    if not value or value == "0":
        return None
    try:
        if len(value) == 8 and value.isdigit():
            return datetime.strptime(value, "%Y%m%d").date()
        return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
    except ValueError:
        return None


def parse_number(raw: Any) -> int:
    try:
        return int(str(raw).strip().split(".")[0])
    except (TypeError, ValueError):
        return 0


def normalize_fuel_type(raw: str | None) -> str:
    if not raw:
        return "Onbekend"
    return FUEL_TYPES.get(raw.strip().upper(), raw)


def normalize_color(raw: str | None) -> str:
    if not raw:
        return "Onbekend"
    return COLORS.get(raw.strip().upper(), raw)


def process_vehicle_data(record: dict[str, Any], *, today: date | None = None) -> dict[str, Any]:
    """
    Flatten one raw RDW record into the vehicle shape the app works with.
    """
    today = today or date.today()
    apk = parse_rdw_date(record.get("apk_geldig_tot"))
    first_admission = parse_rdw_date(record.get("datum_eerste_toelating"))

    return {
        "kenteken": record.get("kenteken") or "",
        "merk": record.get("merk") or "Onbekend",
        "model": record.get("handelsbenaming") or record.get("type_uitvoering") or "Onbekend",
        "bouwjaar": first_admission.year if first_admission else 0,
        "datumEersteToelating": first_admission.isoformat() if first_admission else None,
        "brandstof": normalize_fuel_type(
            record.get("brandstof_hoofdsoort") or record.get("brandstof_nevensoort")
        ),
        "kleur": normalize_color(record.get("eerste_kleur")),
        "voertuigsoort": record.get("voertuigsoort") or "Personenauto",
        "eerste_kleur": record.get("eerste_kleur") or "Onbekend",
        "apkGeldigTot": apk.isoformat() if apk else None,
        "apkVerlooptBinnenkort": bool(apk and (apk - today).days <= APK_WARNING_DAYS),
        "massa": {
            "ledig": parse_number(record.get("massa_ledig_voertuig")),
            "rijklaar": parse_number(record.get("massa_rijklaar")),
            "technischMaximum": parse_number(record.get("technische_max_massa_voertuig")),
        },
        "trekgewicht": {
            "ongeremd": parse_number(record.get("maximum_massa_trekken_ongeremd")),
            "geremd": parse_number(record.get("maximum_trekken_massa_geremd")),
        },
        "milieu": {
            "euroKlasse": record.get("euro_klasse") or "Onbekend",
            "co2Uitstoot": parse_number(record.get("uitstoot_co2_gecombineerd")),
            "zuinigheidslabel": record.get("zuinigheidslabel") or "",
            "roetfilter": record.get("roetfilter") == "Ja",
        },
        "motor": {
            "cilinderinhoud": parse_number(record.get("cilinderinhoud")),
            "vermogen": parse_number(record.get("nettomaximumvermogen")),
            "cilinders": parse_number(record.get("aantal_cilinders")),
        },
        "afmetingen": {
            "lengte": parse_number(record.get("lengte")),
            "breedte": parse_number(record.get("breedte")),
            "hoogte": parse_number(record.get("hoogte")),
        },
        "hasRecall": record.get("openstaande_terugroepactie_indicator") == "Ja",
    }


def _literal(value: Any) -> str:
    return "'" + str(value).replace("'", "''") + "'"


def _year(value: Any) -> int:
    year = parse_number(value)
    if year <= 0:
        raise RdwError(f"Ongeldig bouwjaar: {value}")
    return year


def build_search_params(query: str, filters: dict[str, Any] | None = None) -> dict[str, Any]:
    """
    Translate a search box query plus filter values into RDW (SoQL) query parameters.

    Column filters become plain equality parameters. Plate wildcards and the
    bouwjaar / cilinderinhoud ranges are AND-ed into a single `$where`.
    """
    query = (query or "").strip()
    filters = filters or {}
    params: dict[str, Any] = {"$limit": SEARCH_LIMIT, "$order": "datum_eerste_toelating DESC"}
    where: list[str] = []

    if query and "*" not in query and len(query) < 3:
        raise RdwError("Voer minstens 3 karakters in of gebruik wildcards (*)")

    if "*" in query:
        pattern = plates.normalize_license_plate(query)
        if len(pattern.replace("*", "")) >= 2:
            where.append(f"upper(kenteken) like {_literal(pattern.replace('*', '%'))}")
            params["$limit"] = LIKE_LIMIT
        else:
            params["$limit"] = BROAD_WILDCARD_LIMIT
        params["$order"] = "kenteken"
    elif query:
        params["kenteken"] = plates.normalize_license_plate(query)

    for key, (column, upper) in FILTER_COLUMNS.items():
        value = filters.get(key)
        if value in (None, ""):
            continue
        params[column] = str(value).upper() if upper else value

    roetfilter = filters.get("roetfilter")
    if roetfilter is not None:
        params["roetfilter"] = "J" if roetfilter else "N"

    year_from, year_to = filters.get("bouwjaarVan"), filters.get("bouwjaarTot")
    if year_from and year_to:
        where.append(
            f"datum_eerste_toelating between '{_year(year_from)}0101' and '{_year(year_to)}1231'"
        )
    elif year_from:
        where.append(f"datum_eerste_toelating >= '{_year(year_from)}0101'")
    elif year_to:
        where.append(f"datum_eerste_toelating <= '{_year(year_to)}1231'")

    if filters.get("cilinderinhoudVan"):
        where.append(f"cilinderinhoud >= {parse_number(filters['cilinderinhoudVan'])}")
    if filters.get("cilinderinhoudTot"):
        where.append(f"cilinderinhoud <= {parse_number(filters['cilinderinhoudTot'])}")

    if where:
        params["$where"] = " AND ".join(where)
    return params


def needs_local_wildcard_filter(query: str) -> bool:
    query = (query or "").strip()
    return "*" in query and len(query.replace("*", "").replace("-", "")) < 2


@dataclass(frozen=True)
class TrekgewichtResult:
    toegestaan: bool
    maximum_gewicht: int
    message: str
    vehicle: dict[str, Any]
    no_data: bool = False


class RdwClient:
    """
    Vehicle lookups that read through and write to the app's vehicle cache.
    """

    def __init__(self, http: httpx.Client, state: AppState, *, batch_pause_s: float = 0.1) -> None:
        self.http = http
        self.state = state
        self.batch_pause_s = batch_pause_s

    def _get(self, path: str, params: dict[str, Any]) -> list[dict[str, Any]]:
        resp = self.http.get(
            f"{RDW_BASE_URL}{path}",
            params=params,
            headers={"Accept": "application/json"},
        )
        if resp.status_code != 200:
            raise RdwError(f"RDW request failed: {resp.status_code} {resp.text[:200]}")

        data = resp.json()
        return data if isinstance(data, list) else []

    def fetch_record(self, kenteken: str) -> dict[str, Any] | None:
        rows = self._get(
            VEHICLES_PATH,
            {"kenteken": plates.normalize_license_plate(kenteken), "$limit": 1},
        )
        return rows[0] if rows else None

    def lookup(self, kenteken: str) -> dict[str, Any]:
        if not (kenteken or "").strip():
            raise RdwError("Kenteken is verplicht")

        cached = self.state.get_cached_vehicle(kenteken)
        if cached is not None:
            return cached

        record = self.fetch_record(kenteken)
        if record is None:
            raise VehicleNotFoundError(kenteken)

        vehicle = process_vehicle_data(record)
        self.state.cache_vehicle(kenteken, vehicle)
        self.state.add_recent_search(kenteken)
        logger.debug("rdw_lookup kenteken=%s merk=%s", kenteken, vehicle["merk"])
        return vehicle

    def search(self, query: str, filters: dict[str, Any] | None = None) -> list[dict[str, Any]]:
        """
        Run a plate / filter search and publish the results to the app state.

        Broad wildcards (fewer than two literal characters) cannot be narrowed
        server-side, so those rows are matched against the pattern locally.
        """
        params = build_search_params(query, filters)
        self.state.set_search_query(query)
        self.state.set_searching(True)
        try:
            vehicles = [process_vehicle_data(row) for row in self._get(VEHICLES_PATH, params)]
        finally:
            self.state.set_searching(False)

        if needs_local_wildcard_filter(query):
            pattern = plates.normalize_license_plate(query)
            vehicles = [
                v
                for v in vehicles
                if plates.matches_wildcard(plates.normalize_license_plate(v["kenteken"]), pattern)
            ]

        self.state.set_search_results(vehicles)
        logger.info("rdw_search query=%r results=%s", query, len(vehicles))
        return vehicles

    def check_trekgewicht(self, kenteken: str, gewicht: int, *, geremd: bool = True) -> TrekgewichtResult:
        if gewicht < 0:
            raise RdwError("Gewicht mag niet negatief zijn")

        vehicle = self.lookup(kenteken)
        kind = "geremd" if geremd else "ongeremd"
        maximum = vehicle["trekgewicht"][kind]

        if maximum == 0:
            return TrekgewichtResult(
                toegestaan=False,
                maximum_gewicht=0,
                message=(
                    f"Geen trekgewicht data beschikbaar - Voor kenteken {kenteken} zijn geen "
                    "trekhaken specificaties bekend in de RDW database."
                ),
                vehicle=vehicle,
                no_data=True,
            )

        if gewicht <= maximum:
            message = f"Toegestaan - Dit voertuig mag {gewicht}kg trekken ({kind})"
        else:
            message = (
                f"Niet toegestaan - Maximum {kind} trekgewicht is {maximum}kg, "
                f"maar u wilt {gewicht}kg trekken"
            )
        return TrekgewichtResult(
            toegestaan=gewicht <= maximum,
            maximum_gewicht=maximum,
            message=message,
            vehicle=vehicle,
        )

    def recalls(self, kenteken: str) -> list[dict[str, Any]]:
        if not (kenteken or "").strip():
            return []
        return self._get(
            RECALLS_PATH,
            {"kenteken": plates.normalize_license_plate(kenteken), "$limit": RECALL_LIMIT},
        )

    def lookup_many(self, kentekens: list[str]) -> list[dict[str, Any]]:
        """
        Look up plates in batches; plates that are unknown or fail are left out.
        """
        vehicles: list[dict[str, Any]] = []
        for start in range(0, len(kentekens), BATCH_SIZE):
            if start and self.batch_pause_s:
                time.sleep(self.batch_pause_s)
            for kenteken in kentekens[start : start + BATCH_SIZE]:
                try:
                    record = self.fetch_record(kenteken)
                except (RdwError, httpx.HTTPError) as exc:
                    logger.warning("rdw_batch_lookup_failed kenteken=%s error=%s", kenteken, exc)
                    continue
                if record is not None:
                    vehicles.append(process_vehicle_data(record))
        return vehicles

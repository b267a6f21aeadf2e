"""
Build report records from JSON-shaped dictionaries.

Keys are accepted in snake_case or in the camelCase the upstream API emits
(`claimNumber`, `adjusterTotal`, ...). Missing or malformed optional values
fall back to defaults; parsing never raises for bad field values.
"""

from __future__ import annotations

import logging
import math
from datetime import datetime
from typing import Any, Callable, Dict, Optional, Tuple, Union

from reporting.schemas import (
    ClaimInfo,
    CompanyInfo,
    Coverage,
    DecoderRecord,
    Deductible,
    Endorsement,
    Exclusion,
    FavorableProvision,
    HourlyWeather,
    JustificationRecord,
    Landmine,
    LineItem,
    ReportType,
    RoofMeasurements,
    SupplementRecord,
    WeatherEvent,
    WeatherObservation,
    WeatherRecord,
    WeatherVerdict,
    sort_line_items,
)

logger = logging.getLogger(__name__)

Record = Union[SupplementRecord, JustificationRecord, WeatherRecord, DecoderRecord]


class UnknownReportTypeError(ValueError):
    """Raised for a report type name the engine does not know."""

    def __init__(self, name: str):
        self.name = name
        valid = ", ".join(t.value for t in ReportType)
        super().__init__(f"Unknown report type '{name}' (expected one of: {valid})")


def parse_report_type(name: Union[str, ReportType]) -> ReportType:
    if isinstance(name, ReportType):
        return name
    try:
        return ReportType(str(name).strip().lower())
    except ValueError:
        raise UnknownReportTypeError(str(name)) from None


# =============================================================================
# Field Helpers
# =============================================================================


def _camel(key: str) -> str:
    head, *rest = key.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _get(data: Dict[str, Any], key: str, *aliases: str) -> Any:
    """Value for a snake_case key, its camelCase form, or any alias."""
    for candidate in (key, _camel(key), *aliases):
        if candidate in data and data[candidate] is not None:
            return data[candidate]
    return None


def _text(data: Dict[str, Any], key: str, *aliases: str, default: str = "") -> str:
    value = _get(data, key, *aliases)
    if value is None:
        return default
    return str(value).strip()


def _optional_text(data: Dict[str, Any], key: str, *aliases: str) -> Optional[str]:
    value = _text(data, key, *aliases)
    return value or None


def _number(data: Dict[str, Any], key: str, *aliases: str, default: Optional[float] = None) -> Optional[float]:
    value = _get(data, key, *aliases)
    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.replace("$", "").replace(",", "").strip()
        if not value:
            return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        number = math.nan
    if not math.isfinite(number):
        logger.warning("Ignoring non-numeric value for %s: %r", key, value)
        return default
    return number


def _section(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = _get(data, key)
    return value if isinstance(value, dict) else {}


def _strings(value: Any) -> Tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,) if value.strip() else ()
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(str(v) for v in value if v is not None and str(v).strip())


def _records(data: Dict[str, Any], key: str, parse: Callable[[Dict[str, Any]], Any], *aliases: str) -> tuple:
    value = _get(data, key, *aliases)
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(parse(entry) for entry in value if isinstance(entry, dict))


def _today() -> str:
    return datetime.now().strftime("%B %d, %Y")


# =============================================================================
# Line Items
# =============================================================================


def parse_line_item(data: Dict[str, Any]) -> LineItem:
    return LineItem(
        code=_text(data, "code", "xactimate_code", "xactimateCode"),
        description=_text(data, "description"),
        category=_text(data, "category", default="General"),
        quantity=_number(data, "quantity", default=0.0),
        unit=_text(data, "unit"),
        unit_price=_number(data, "unit_price", default=0.0),
        total_price=_number(data, "total_price", default=0.0),
        justification=_text(data, "justification"),
        code_reference=_optional_text(data, "code_reference", "irc_reference", "ircReference"),
        photo_references=_strings(_get(data, "photo_references")),
    )


def _line_items(data: Dict[str, Any]) -> Tuple[LineItem, ...]:
    return tuple(sort_line_items(_records(data, "items", parse_line_item, "line_items", "lineItems")))


# =============================================================================
# Records
# =============================================================================


def parse_supplement(data: Dict[str, Any]) -> SupplementRecord:
    company_data = _section(data, "company")
    claim_data = _section(data, "claim")

    company = CompanyInfo(
        name=_text(company_data, "name") or _text(data, "company_name"),
        phone=_text(company_data, "phone") or _text(data, "company_phone"),
        address=_text(company_data, "address") or _text(data, "company_address"),
        license=_text(company_data, "license") or _text(data, "company_license"),
    )
    claim = ClaimInfo(
        claim_name=_text(claim_data, "claim_name") or _text(data, "claim_name"),
        claim_number=_text(claim_data, "claim_number") or _text(data, "claim_number"),
        policy_number=_text(claim_data, "policy_number") or _text(data, "policy_number"),
        carrier_name=_text(claim_data, "carrier_name") or _text(data, "carrier_name"),
        property_address=_text(claim_data, "property_address") or _text(data, "property_address"),
        date_of_loss=_text(claim_data, "date_of_loss") or _text(data, "date_of_loss"),
        adjuster_name=_text(claim_data, "adjuster_name") or _text(data, "adjuster_name"),
    )
    measurement_data = _section(data, "measurements") or data
    measurements = RoofMeasurements(
        measured_squares=_number(measurement_data, "measured_squares"),
        waste_percent=_number(measurement_data, "waste_percent"),
        suggested_squares=_number(measurement_data, "suggested_squares"),
        pitch=_optional_text(measurement_data, "pitch"),
    )
    items = _line_items(data)
    supplement_total = _number(data, "supplement_total")
    if supplement_total is None:
        supplement_total = sum(item.total_price for item in items)

    return SupplementRecord(
        company=company,
        claim=claim,
        supplement_total=supplement_total,
        adjuster_total=_number(data, "adjuster_total"),
        measurements=measurements,
        items=items,
        generated_date=_text(data, "generated_date") or _today(),
    )


def parse_justification(data: Dict[str, Any]) -> JustificationRecord:
    return JustificationRecord(
        claim_number=_text(data, "claim_number"),
        carrier_name=_text(data, "carrier_name"),
        property_address=_text(data, "property_address"),
        company_name=_text(data, "company_name"),
        generated_date=_text(data, "generated_date") or _today(),
        items=_line_items(data),
        waste_percent=_number(data, "waste_percent"),
        roof_squares=_number(data, "roof_squares", "measured_squares", "measuredSquares"),
        suggested_squares=_number(data, "suggested_squares"),
    )


def parse_hourly_weather(data: Dict[str, Any]) -> HourlyWeather:
    return HourlyWeather(
        datetime=_text(data, "datetime"),
        temp=_number(data, "temp"),
        windspeed=_number(data, "windspeed"),
        windgust=_number(data, "windgust"),
        precip=_number(data, "precip"),
        preciptype=_strings(_get(data, "preciptype")),
        snow=_number(data, "snow"),
        humidity=_number(data, "humidity"),
        pressure=_number(data, "pressure"),
        cloudcover=_number(data, "cloudcover"),
        visibility=_number(data, "visibility"),
        conditions=_text(data, "conditions"),
        severerisk=_number(data, "severerisk"),
    )


def parse_weather_event(data: Dict[str, Any]) -> WeatherEvent:
    epoch = _number(data, "datetime_epoch", "datetimeEpoch")
    return WeatherEvent(
        datetime=_text(data, "datetime"),
        type=_text(data, "type", default="unknown"),
        description=_text(data, "description"),
        datetime_epoch=int(epoch) if epoch is not None else None,
        size=_number(data, "size"),
        speed=_number(data, "speed"),
    )


def parse_weather_observation(data: Dict[str, Any]) -> WeatherObservation:
    return WeatherObservation(
        address=_text(data, "address"),
        resolved_address=_text(data, "resolved_address", "resolvedAddress"),
        latitude=_number(data, "latitude"),
        longitude=_number(data, "longitude"),
        date=_text(data, "date"),
        tempmax=_number(data, "tempmax"),
        tempmin=_number(data, "tempmin"),
        temp=_number(data, "temp"),
        windspeed=_number(data, "windspeed"),
        windgust=_number(data, "windgust"),
        precip=_number(data, "precip"),
        preciptype=_strings(_get(data, "preciptype")),
        snow=_number(data, "snow"),
        conditions=_text(data, "conditions"),
        description=_text(data, "description"),
        humidity=_number(data, "humidity"),
        pressure=_number(data, "pressure"),
        cloudcover=_number(data, "cloudcover"),
        visibility=_number(data, "visibility"),
        severerisk=_number(data, "severerisk"),
        hours=_records(data, "hours", parse_hourly_weather),
        events=_records(data, "events", parse_weather_event),
        max_wind_gust=_number(data, "max_wind_gust"),
        hail_detected=bool(_get(data, "hail_detected")),
        hail_size_max=_number(data, "hail_size_max"),
        storm_window=_records(data, "storm_window", parse_hourly_weather),
        verdict=WeatherVerdict.parse(_text(data, "verdict")),
        verdict_text=_text(data, "verdict_text"),
        fetched_at=_text(data, "fetched_at"),
    )


def parse_weather(data: Dict[str, Any]) -> WeatherRecord:
    return WeatherRecord(
        property_address=_text(data, "property_address"),
        date_of_loss=_text(data, "date_of_loss"),
        claim_number=_text(data, "claim_number"),
        company_name=_text(data, "company_name"),
        weather=parse_weather_observation(_section(data, "weather")),
        generated_date=_text(data, "generated_date") or _today(),
    )


def parse_decoder(data: Dict[str, Any]) -> DecoderRecord:
    return DecoderRecord(
        policy_type=_text(data, "policy_type"),
        carrier=_text(data, "carrier"),
        policy_number=_text(data, "policy_number"),
        effective_date=_optional_text(data, "effective_date"),
        expiration_date=_optional_text(data, "expiration_date"),
        named_insured=_text(data, "named_insured"),
        property_address=_text(data, "property_address"),
        risk_level=_text(data, "risk_level", default="unknown"),
        confidence=_number(data, "confidence", default=0.0),
        summary_for_contractor=_text(data, "summary_for_contractor", "summary"),
        document_type=_text(data, "document_type"),
        scan_quality=_text(data, "scan_quality"),
        coverages=_records(data, "coverages", lambda c: Coverage(
            label=_text(c, "label"),
            limit=_optional_text(c, "limit"),
            description=_text(c, "description"),
        )),
        deductibles=_records(data, "deductibles", lambda d: Deductible(
            type=_text(d, "type"),
            amount=_text(d, "amount"),
            dollar_amount=_number(d, "dollar_amount"),
            applies_to=_text(d, "applies_to"),
        )),
        depreciation_method=_text(data, "depreciation_method"),
        depreciation_notes=_text(data, "depreciation_notes"),
        exclusions=_records(data, "exclusions", lambda e: Exclusion(
            name=_text(e, "name"),
            severity=_text(e, "severity"),
            description=_text(e, "description"),
            impact=_text(e, "impact"),
        )),
        endorsements=_records(data, "endorsements", lambda e: Endorsement(
            name=_text(e, "name"),
            number=_optional_text(e, "number"),
            severity=_text(e, "severity"),
            description=_text(e, "description"),
            impact=_text(e, "impact"),
        )),
        landmines=_records(data, "landmines", lambda m: Landmine(
            name=_text(m, "name"),
            severity=_text(m, "severity"),
            impact=_text(m, "impact"),
            action_item=_text(m, "action_item"),
        )),
        favorable_provisions=_records(data, "favorable_provisions", lambda f: FavorableProvision(
            name=_text(f, "name"),
            impact=_text(f, "impact"),
        )),
        generated_date=_text(data, "generated_date") or _today(),
    )


_PARSERS: Dict[ReportType, Callable[[Dict[str, Any]], Record]] = {
    ReportType.SUPPLEMENT: parse_supplement,
    ReportType.JUSTIFICATION: parse_justification,
    ReportType.WEATHER: parse_weather,
    ReportType.DECODER: parse_decoder,
}


def record_from_dict(report_type: Union[str, ReportType], data: Dict[str, Any]) -> Record:
    """
    Parse a dictionary into the record for the given report type.

    Raises:
        UnknownReportTypeError: report_type is not a known type
        TypeError: data is not a dictionary
    """
    kind = parse_report_type(report_type)
    if not isinstance(data, dict):
        raise TypeError(f"{kind.value} record must be a JSON object, got {type(data).__name__}")
    return _PARSERS[kind](data)

"""
Input records for claim report generation.

Each report type takes one flat, immutable record. Records are built by the
caller (from database rows or JSON) and never mutated by the renderers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List, Optional, Tuple


class ReportType(Enum):
    """Report types the engine can compose."""
    SUPPLEMENT = "supplement"
    JUSTIFICATION = "justification"
    WEATHER = "weather"
    DECODER = "decoder"


# =============================================================================
# Line Items
# =============================================================================


@dataclass(frozen=True)
class LineItem:
    """
    One priced entry of a supplement.

    total_price is authoritative: renderers never recompute it from
    quantity x unit_price.
    """
    code: str
    description: str
    category: str = ""
    quantity: float = 0.0
    unit: str = ""
    unit_price: float = 0.0
    total_price: float = 0.0
    justification: str = ""
    code_reference: Optional[str] = None
    photo_references: Tuple[str, ...] = ()

    @property
    def has_justification(self) -> bool:
        return bool(self.justification and self.justification.strip())


def sort_line_items(items: Iterable[LineItem]) -> List[LineItem]:
    """Order items by category, then code, the order tables expect."""
    return sorted(items, key=lambda item: (item.category, item.code))


# =============================================================================
# Supplement
# =============================================================================


@dataclass(frozen=True)
class CompanyInfo:
    name: str = ""
    phone: str = ""
    address: str = ""
    license: str = ""

    def lines(self) -> List[str]:
        """Address block lines, empty parts dropped."""
        lines = [self.address]
        if self.phone:
            lines.append(f"Phone: {self.phone}")
        if self.license:
            lines.append(f"License #: {self.license}")
        return [line for line in lines if line]


@dataclass(frozen=True)
class ClaimInfo:
    claim_name: str = ""
    claim_number: str = ""
    policy_number: str = ""
    carrier_name: str = ""
    property_address: str = ""
    date_of_loss: str = ""
    adjuster_name: str = ""


@dataclass(frozen=True)
class RoofMeasurements:
    measured_squares: Optional[float] = None
    waste_percent: Optional[float] = None
    suggested_squares: Optional[float] = None
    pitch: Optional[str] = None

    @property
    def has_data(self) -> bool:
        return any(
            value is not None
            for value in (self.measured_squares, self.waste_percent, self.suggested_squares, self.pitch)
        )


@dataclass(frozen=True)
class SupplementRecord:
    """Everything the supplement report needs."""
    company: CompanyInfo
    claim: ClaimInfo
    supplement_total: float
    adjuster_total: Optional[float] = None
    measurements: RoofMeasurements = field(default_factory=RoofMeasurements)
    items: Tuple[LineItem, ...] = ()
    generated_date: str = ""

    @property
    def revised_total(self) -> Optional[float]:
        """Adjuster's estimate plus the supplement, when the estimate is known."""
        if self.adjuster_total is None:
            return None
        return self.adjuster_total + self.supplement_total


# =============================================================================
# Justification
# =============================================================================


@dataclass(frozen=True)
class JustificationRecord:
    claim_number: str = ""
    carrier_name: str = ""
    property_address: str = ""
    company_name: str = ""
    generated_date: str = ""
    items: Tuple[LineItem, ...] = ()
    waste_percent: Optional[float] = None
    roof_squares: Optional[float] = None
    suggested_squares: Optional[float] = None

    @property
    def has_waste_data(self) -> bool:
        return self.waste_percent is not None and self.roof_squares is not None

    @classmethod
    def from_supplement(cls, record: SupplementRecord) -> "JustificationRecord":
        """Support-points record for the same claim as a supplement."""
        return cls(
            claim_number=record.claim.claim_number,
            carrier_name=record.claim.carrier_name,
            property_address=record.claim.property_address,
            company_name=record.company.name,
            generated_date=record.generated_date,
            items=record.items,
            waste_percent=record.measurements.waste_percent,
            roof_squares=record.measurements.measured_squares,
            suggested_squares=record.measurements.suggested_squares,
        )


# =============================================================================
# Weather
# =============================================================================


class WeatherVerdict(Enum):
    """Overall storm assessment for the date of loss."""
    SEVERE_CONFIRMED = "severe_confirmed"
    MODERATE_WEATHER = "moderate_weather"
    NO_SIGNIFICANT_WEATHER = "no_significant_weather"

    @classmethod
    def parse(cls, value: Optional[str]) -> "WeatherVerdict":
        try:
            return cls(value)
        except ValueError:
            return cls.NO_SIGNIFICANT_WEATHER


@dataclass(frozen=True)
class HourlyWeather:
    datetime: str
    temp: Optional[float] = None
    windspeed: Optional[float] = None
    windgust: Optional[float] = None
    precip: Optional[float] = None
    preciptype: Tuple[str, ...] = ()
    snow: Optional[float] = None
    humidity: Optional[float] = None
    pressure: Optional[float] = None
    cloudcover: Optional[float] = None
    visibility: Optional[float] = None
    conditions: str = ""
    severerisk: Optional[float] = None

    @property
    def has_hail(self) -> bool:
        return "hail" in self.preciptype


@dataclass(frozen=True)
class WeatherEvent:
    datetime: str
    type: str
    description: str = ""
    datetime_epoch: Optional[int] = None
    size: Optional[float] = None
    speed: Optional[float] = None

    @property
    def is_severe_type(self) -> bool:
        kind = self.type.lower()
        return "hail" in kind or "tornado" in kind


@dataclass(frozen=True)
class WeatherObservation:
    """
    Historical weather for the property on the date of loss.

    Storm window, severe-risk index and the verdict are computed upstream;
    the report only displays them.
    """
    address: str = ""
    resolved_address: str = ""
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    date: str = ""
    tempmax: Optional[float] = None
    tempmin: Optional[float] = None
    temp: Optional[float] = None
    windspeed: Optional[float] = None
    windgust: Optional[float] = None
    precip: Optional[float] = None
    preciptype: Tuple[str, ...] = ()
    snow: Optional[float] = None
    conditions: str = ""
    description: str = ""
    humidity: Optional[float] = None
    pressure: Optional[float] = None
    cloudcover: Optional[float] = None
    visibility: Optional[float] = None
    severerisk: Optional[float] = None
    hours: Tuple[HourlyWeather, ...] = ()
    events: Tuple[WeatherEvent, ...] = ()
    max_wind_gust: Optional[float] = None
    hail_detected: bool = False
    hail_size_max: Optional[float] = None
    storm_window: Tuple[HourlyWeather, ...] = ()
    verdict: WeatherVerdict = WeatherVerdict.NO_SIGNIFICANT_WEATHER
    verdict_text: str = ""
    fetched_at: str = ""


@dataclass(frozen=True)
class WeatherRecord:
    property_address: str = ""
    date_of_loss: str = ""
    claim_number: str = ""
    company_name: str = ""
    weather: WeatherObservation = field(default_factory=WeatherObservation)
    generated_date: str = ""


# =============================================================================
# Policy Decoder
# =============================================================================


@dataclass(frozen=True)
class Coverage:
    label: str
    limit: Optional[str] = None
    description: str = ""


@dataclass(frozen=True)
class Deductible:
    type: str
    amount: str = ""
    dollar_amount: Optional[float] = None
    applies_to: str = ""


@dataclass(frozen=True)
class Exclusion:
    name: str
    severity: str = ""
    description: str = ""
    impact: str = ""


@dataclass(frozen=True)
class Endorsement:
    name: str
    number: Optional[str] = None
    severity: str = ""
    description: str = ""
    impact: str = ""


@dataclass(frozen=True)
class Landmine:
    name: str
    severity: str = ""
    impact: str = ""
    action_item: str = ""


@dataclass(frozen=True)
class FavorableProvision:
    name: str
    impact: str = ""


@dataclass(frozen=True)
class DecoderRecord:
    """Plain-language summary of an insurance policy."""
    policy_type: str = ""
    carrier: str = ""
    policy_number: str = ""
    effective_date: Optional[str] = None
    expiration_date: Optional[str] = None
    named_insured: str = ""
    property_address: str = ""
    risk_level: str = ""
    confidence: float = 0.0
    summary_for_contractor: str = ""
    document_type: str = ""
    scan_quality: str = ""
    coverages: Tuple[Coverage, ...] = ()
    deductibles: Tuple[Deductible, ...] = ()
    depreciation_method: str = ""
    depreciation_notes: str = ""
    exclusions: Tuple[Exclusion, ...] = ()
    endorsements: Tuple[Endorsement, ...] = ()
    landmines: Tuple[Landmine, ...] = ()
    favorable_provisions: Tuple[FavorableProvision, ...] = ()
    generated_date: str = ""

    @property
    def policy_period(self) -> Optional[str]:
        if self.effective_date and self.expiration_date:
            return f"{self.effective_date} - {self.expiration_date}"
        return self.effective_date or self.expiration_date


# =============================================================================
# Sample Data
# =============================================================================


def create_sample_line_items() -> List[LineItem]:
    """Four items across two categories."""
    return [
        LineItem(
            code="RFG LAMI",
            description="Laminated comp. shingle rfg. - w/out felt",
            category="Roofing",
            quantity=25.5,
            unit="SQ",
            unit_price=95.0,
            total_price=2422.5,
            justification="Per manufacturer installation requirements, the full roof must be replaced.",
            code_reference="IRC R905.2.8.5",
        ),
        LineItem(
            code="RFG FELT",
            description="Roofing felt - 15 lb.",
            category="Roofing",
            quantity=25.5,
            unit="SQ",
            unit_price=22.0,
            total_price=561.0,
            justification="1. Required by code 2. Manufacturer warranty requires underlayment",
            code_reference="IRC R905.1.1",
        ),
        LineItem(
            code="RFG ICE",
            description="Ice & water barrier",
            category="Roofing",
            quantity=180,
            unit="SF",
            unit_price=1.85,
            total_price=333.0,
            justification="Required at eaves per local building code.",
            code_reference="IRC R905.1.2",
        ),
        LineItem(
            code="DRY CLN",
            description="Drywall cleanup and repair",
            category="Interior",
            quantity=1,
            unit="EA",
            unit_price=933.5,
            total_price=933.5,
            justification="Water damage from roof leak requires drywall replacement.",
        ),
    ]


def create_sample_supplement() -> SupplementRecord:
    """Sample supplement for demos and tests."""
    return SupplementRecord(
        company=CompanyInfo(
            name="Acme Roofing LLC",
            phone="(555) 123-4567",
            address="123 Main St, Anytown, USA",
            license="RC-12345",
        ),
        claim=ClaimInfo(
            claim_name="Smith Residence",
            claim_number="CLM-2024-0042",
            policy_number="POL-987654",
            carrier_name="State Farm",
            property_address="456 Oak Ave, Anytown, USA",
            date_of_loss="2024-06-15",
            adjuster_name="Jane Doe",
        ),
        adjuster_total=8500.0,
        supplement_total=4250.0,
        measurements=RoofMeasurements(
            measured_squares=25.5,
            waste_percent=12.0,
            suggested_squares=28.6,
            pitch="6/12",
        ),
        items=tuple(sort_line_items(create_sample_line_items())),
        generated_date="June 20, 2024",
    )


def create_sample_weather() -> WeatherRecord:
    """Sample severe-weather verification for the sample claim."""
    storm_hours = (
        HourlyWeather(
            datetime="15:00:00", temp=84, windspeed=22, windgust=48, precip=0.32,
            preciptype=("rain",), humidity=71, pressure=1008, cloudcover=92,
            visibility=4.1, conditions="Thunderstorm", severerisk=55,
        ),
        HourlyWeather(
            datetime="16:00:00", temp=79, windspeed=31, windgust=64, precip=0.85,
            preciptype=("rain", "hail"), humidity=83, pressure=1006, cloudcover=100,
            visibility=1.8, conditions="Thunderstorm, Hail", severerisk=78,
        ),
    )
    return WeatherRecord(
        property_address="456 Oak Ave, Anytown, USA",
        date_of_loss="June 15, 2024",
        claim_number="CLM-2024-0042",
        company_name="Acme Roofing LLC",
        weather=WeatherObservation(
            address="456 Oak Ave, Anytown, USA",
            resolved_address="456 Oak Ave, Anytown, TX 75001, United States",
            latitude=32.9537,
            longitude=-96.8903,
            date="2024-06-15",
            tempmax=91,
            tempmin=68,
            temp=80.2,
            windspeed=31,
            windgust=64,
            precip=1.42,
            preciptype=("rain", "hail"),
            conditions="Rain, Thunderstorm",
            description="Severe thunderstorms in the afternoon with large hail.",
            humidity=74,
            pressure=1007,
            cloudcover=88,
            visibility=6.2,
            severerisk=78,
            hours=storm_hours,
            events=(
                WeatherEvent(
                    datetime="2024-06-15T16:12:00", type="hail",
                    description="1.75 inch hail reported near Anytown", size=1.75,
                ),
                WeatherEvent(
                    datetime="2024-06-15T16:30:00", type="wind",
                    description="Thunderstorm wind damage to trees", speed=65,
                ),
            ),
            max_wind_gust=64,
            hail_detected=True,
            hail_size_max=1.75,
            storm_window=storm_hours,
            verdict=WeatherVerdict.SEVERE_CONFIRMED,
            verdict_text=(
                "Hail up to 1.75\" and wind gusts of 64 mph were recorded at the "
                "property location on the date of loss."
            ),
            fetched_at="2024-06-20T14:03:00Z",
        ),
        generated_date="June 20, 2024",
    )


def create_sample_decoder() -> DecoderRecord:
    """Sample policy decode."""
    return DecoderRecord(
        policy_type="HO-3",
        carrier="State Farm",
        policy_number="POL-987654",
        effective_date="2024-01-01",
        expiration_date="2025-01-01",
        named_insured="John Smith",
        property_address="456 Oak Ave, Anytown, USA",
        risk_level="medium",
        confidence=0.86,
        summary_for_contractor=(
            "Replacement cost policy with a percentage wind/hail deductible. "
            "Cosmetic damage to metal roofing is excluded."
        ),
        document_type="Full policy",
        scan_quality="Good",
        coverages=(
            Coverage(label="Dwelling (Coverage A)", limit="$350,000", description="Main structure"),
            Coverage(label="Other Structures (Coverage B)", limit="$35,000"),
        ),
        deductibles=(
            Deductible(type="All Other Perils", amount="$1,000", dollar_amount=1000),
            Deductible(type="Wind/Hail", amount="2%", dollar_amount=7000, applies_to="Wind and hail losses"),
        ),
        depreciation_method="RCV",
        depreciation_notes="Recoverable depreciation paid once repairs are complete.",
        exclusions=(
            Exclusion(
                name="Cosmetic Damage",
                severity="warning",
                description="Excludes dents to metal surfaces that do not affect function.",
                impact="Metal vents and flashing dents may be denied.",
            ),
        ),
        endorsements=(
            Endorsement(
                name="Ordinance or Law",
                number="HO 04 77",
                severity="info",
                description="Covers code upgrade costs up to 10% of Coverage A.",
            ),
        ),
        landmines=(
            Landmine(
                name="Matching limitation",
                severity="critical",
                impact="Carrier may refuse to match undamaged slopes.",
                action_item="Document discontinued shingle line with a manufacturer letter.",
            ),
        ),
        favorable_provisions=(
            FavorableProvision(name="Replacement cost", impact="Full RCV paid after completion."),
        ),
        generated_date="June 20, 2024",
    )

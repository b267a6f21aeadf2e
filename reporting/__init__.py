"""
Reporting module for the claim report engine.

Composes paginated PDF documents from claim and policy records:
supplement requests, justification support points, weather
verification reports and unbranded policy analyses.

Usage:
    from reporting import SupplementReportComposer
    from reporting.schemas import create_sample_supplement

    pdf_bytes = SupplementReportComposer().generate_to_buffer(create_sample_supplement())

From JSON:
    from reporting import compose_report, record_from_dict

    record = record_from_dict("weather", payload)
    report = compose_report("weather", record)
"""

from .composer import (
    PDF_MAGIC,
    ComposedReport,
    ReportComposer,
    ReportGenerationError,
    ReportSuccess,
)
from .decoder_report import DecoderReportComposer, generate_decoder_pdf
from .justification_report import JustificationReportComposer, generate_justification_pdf
from .parsing import UnknownReportTypeError, parse_report_type, record_from_dict
from .registry import COMPOSERS, compose_report, get_composer, sample_record
from .schemas import (
    ClaimInfo,
    CompanyInfo,
    DecoderRecord,
    JustificationRecord,
    LineItem,
    ReportType,
    RoofMeasurements,
    SupplementRecord,
    WeatherObservation,
    WeatherRecord,
    WeatherVerdict,
)
from .supplement_report import SupplementReportComposer, generate_supplement_pdf
from .tables import CategoryOrderError
from .weather_report import WeatherReportComposer, generate_weather_pdf

__all__ = [
    # Composers
    "PDF_MAGIC",
    "ComposedReport",
    "ReportComposer",
    "ReportGenerationError",
    "ReportSuccess",
    "SupplementReportComposer",
    "JustificationReportComposer",
    "WeatherReportComposer",
    "DecoderReportComposer",
    "generate_supplement_pdf",
    "generate_justification_pdf",
    "generate_weather_pdf",
    "generate_decoder_pdf",
    # Registry
    "COMPOSERS",
    "compose_report",
    "get_composer",
    "sample_record",
    # Parsing
    "UnknownReportTypeError",
    "parse_report_type",
    "record_from_dict",
    # Records
    "ReportType",
    "LineItem",
    "CompanyInfo",
    "ClaimInfo",
    "RoofMeasurements",
    "SupplementRecord",
    "JustificationRecord",
    "WeatherVerdict",
    "WeatherObservation",
    "WeatherRecord",
    "DecoderRecord",
    "CategoryOrderError",
]

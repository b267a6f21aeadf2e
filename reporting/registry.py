"""
Composer registry.

Maps each report type to the composer that renders it, and the sample
record used by the CLI and smoke tests.
"""

from __future__ import annotations

from typing import Callable, Dict, Final, Optional, Type, Union

from reporting.composer import ComposedReport, ReportComposer
from reporting.decoder_report import DecoderReportComposer
from reporting.justification_report import JustificationReportComposer
from reporting.parsing import Record, parse_report_type
from reporting.schemas import (
    JustificationRecord,
    ReportType,
    create_sample_decoder,
    create_sample_supplement,
    create_sample_weather,
)
from reporting.supplement_report import SupplementReportComposer
from reporting.weather_report import WeatherReportComposer
from utils.config import Config

_COMPOSERS: Dict[ReportType, Type[ReportComposer]] = {
    ReportType.SUPPLEMENT: SupplementReportComposer,
    ReportType.JUSTIFICATION: JustificationReportComposer,
    ReportType.WEATHER: WeatherReportComposer,
    ReportType.DECODER: DecoderReportComposer,
}

COMPOSERS: Final = _COMPOSERS


def _sample_justification() -> JustificationRecord:
    return JustificationRecord.from_supplement(create_sample_supplement())


SAMPLE_RECORDS: Final[Dict[ReportType, Callable[[], Record]]] = {
    ReportType.SUPPLEMENT: create_sample_supplement,
    ReportType.JUSTIFICATION: _sample_justification,
    ReportType.WEATHER: create_sample_weather,
    ReportType.DECODER: create_sample_decoder,
}


def get_composer(report_type: Union[str, ReportType], config: Optional[Config] = None) -> ReportComposer:
    """
    Instantiate the composer for a report type.

    Raises:
        UnknownReportTypeError: report_type is not a known type
    """
    return _COMPOSERS[parse_report_type(report_type)](config)


def compose_report(
    report_type: Union[str, ReportType],
    record: Record,
    config: Optional[Config] = None,
) -> ComposedReport:
    return get_composer(report_type, config).compose(record)


def sample_record(report_type: Union[str, ReportType]) -> Record:
    return SAMPLE_RECORDS[parse_report_type(report_type)]()

"""
Weather verification report.

Shows the recorded conditions at the property on the date of loss: a verdict
banner, the daily summary, reported storm events and, on a new page, the
hourly readings for the storm window (or the whole day when no storm window
was identified).
"""

from __future__ import annotations

import math
from datetime import datetime
from typing import Final, List, Optional, Tuple

from reporting.composer import ReportComposer
from reporting.layout import CONTENT_WIDTH, MARGIN, LayoutCursor, PageSurface
from reporting.schemas import HourlyWeather, WeatherEvent, WeatherObservation, WeatherRecord, WeatherVerdict
from reporting.sections import (
    PanelField,
    draw_divider,
    draw_key_value_panel,
    draw_lines,
    draw_paragraph,
    draw_title,
)
from reporting.tables import Cell, ColumnSpec, TableRenderer
from reporting.text_flow import wrap_text
from utils.config import Config
from utils.formatting import PLACEHOLDER, format_number, format_time_12h, safe_filename

# Gusts at or above this speed (mph) meet the severe thunderstorm threshold.
SEVERE_GUST_MPH: Final[float] = 58
VERDICT_BANNER_HEIGHT: Final[float] = 52
DATA_SOURCE: Final[str] = "Visual Crossing Historical Weather API"

SOURCE_DISCLAIMER: Final[str] = (
    "Weather data sourced from Visual Crossing Historical Weather API (visualcrossing.com). "
    "Data reflects conditions recorded at the nearest weather station to the property address. "
    "For official NOAA/NWS storm reports in this area, visit https://www.spc.noaa.gov/climo/reports/"
)

# verdict -> (label, fill token, text color token)
VERDICT_STYLES: Final[dict] = {
    WeatherVerdict.SEVERE_CONFIRMED: ("SEVERE WEATHER CONFIRMED", "red", "white"),
    WeatherVerdict.MODERATE_WEATHER: ("MODERATE WEATHER DETECTED", "amber", "white"),
    WeatherVerdict.NO_SIGNIFICANT_WEATHER: ("NO SIGNIFICANT SEVERE WEATHER", "neutral_bg", "neutral_text"),
}

EVENT_COLUMNS: Final[Tuple[ColumnSpec, ...]] = (
    ColumnSpec("Time", 0, 70),
    ColumnSpec("Event Type", 75, 80),
    ColumnSpec("Description", 160, 220, max_chars=50),
    ColumnSpec("Size / Speed", 390, 90),
)

HOURLY_COLUMNS: Final[Tuple[ColumnSpec, ...]] = (
    ColumnSpec("Time", 0, 55),
    ColumnSpec("Temp", 58, 40),
    ColumnSpec("Wind", 100, 42),
    ColumnSpec("Gust", 145, 42),
    ColumnSpec("Precip", 190, 42),
    ColumnSpec("Type", 235, 65),
    ColumnSpec("Conditions", 305, 110, max_chars=20),
    ColumnSpec("Risk", 420, 45),
)


# =============================================================================
# Value Formatting
# =============================================================================


def _whole(value: Optional[float]) -> Optional[int]:
    """Round half up, the way the readings are reported."""
    if value is None:
        return None
    return int(math.floor(value + 0.5))


def _fmt(value: Optional[float], template: str, decimals: Optional[int] = None) -> Optional[str]:
    if value is None:
        return None
    number = _whole(value) if decimals is None else f"{value:.{decimals}f}"
    return template.format(number)


def _precip_types(types: Tuple[str, ...]) -> str:
    return ", ".join(t[:1].upper() + t[1:] for t in types)


def peak_gust(weather: WeatherObservation) -> Optional[float]:
    return weather.max_wind_gust if weather.max_wind_gust is not None else weather.windgust


def hail_summary(weather: WeatherObservation) -> str:
    if not weather.hail_detected:
        return "Not reported"
    if weather.hail_size_max:
        return f"DETECTED — up to {format_number(weather.hail_size_max)}\" diameter"
    return "DETECTED"


def daily_stats(weather: WeatherObservation) -> List[PanelField]:
    """Daily summary grid; severe values carry the alert color."""
    gust = peak_gust(weather)
    high_low = None
    if weather.tempmax is not None and weather.tempmin is not None:
        high_low = f"{_whole(weather.tempmax)}°F / {_whole(weather.tempmin)}°F"

    return [
        PanelField("Conditions", weather.conditions),
        PanelField("High / Low Temp", high_low),
        PanelField("Avg Wind Speed", _fmt(weather.windspeed, "{} mph")),
        PanelField(
            "Max Wind Gust",
            _fmt(gust, "{} mph"),
            color="red" if gust is not None and gust >= SEVERE_GUST_MPH else None,
        ),
        PanelField("Total Precipitation", _fmt(weather.precip, "{} in", decimals=2)),
        PanelField("Precipitation Type", _precip_types(weather.preciptype) or "None"),
        PanelField("Hail", hail_summary(weather), color="red" if weather.hail_detected else None),
        PanelField("Snowfall", _fmt(weather.snow, "{} in", decimals=1)),
        PanelField("Severe Risk Index", _fmt(weather.severerisk, "{} / 100")),
        PanelField("Humidity", _fmt(weather.humidity, "{}%")),
        PanelField("Barometric Pressure", _fmt(weather.pressure, "{} mb", decimals=1)),
        PanelField("Cloud Cover", _fmt(weather.cloudcover, "{}%")),
        PanelField("Visibility", _fmt(weather.visibility, "{} mi", decimals=1)),
    ]


def event_cells(event: WeatherEvent) -> List[Cell]:
    if event.size:
        magnitude = f"{format_number(event.size)}\" hail"
    elif event.speed:
        magnitude = f"{format_number(event.speed)} mph"
    else:
        magnitude = PLACEHOLDER
    kind = event.type[:1].upper() + event.type[1:]
    return [
        Cell(event.datetime),
        Cell(kind, "table_cell_alert" if event.is_severe_type else "table_cell"),
        Cell(event.description),
        Cell(magnitude),
    ]


def hourly_cells(hour: HourlyWeather) -> List[Cell]:
    high_wind = hour.windgust is not None and hour.windgust >= SEVERE_GUST_MPH
    risk = _whole(hour.severerisk)
    if risk is not None and risk > 50:
        risk_style = "table_cell_alert"
    elif risk is not None and risk > 30:
        risk_style = "table_cell_warning"
    else:
        risk_style = "table_cell"

    return [
        Cell(format_time_12h(hour.datetime)),
        Cell(_fmt(hour.temp, "{}°F") or ""),
        Cell(_fmt(hour.windspeed, "{}") or ""),
        Cell(_fmt(hour.windgust, "{}") or "", "table_cell_alert" if high_wind else "table_cell"),
        Cell(_fmt(hour.precip, "{}", decimals=2) or ""),
        Cell(_precip_types(hour.preciptype), "table_cell_alert" if hour.has_hail else "table_cell"),
        Cell(hour.conditions),
        Cell("" if risk is None else str(risk), risk_style),
    ]


def format_fetched_at(value: str) -> str:
    if not value:
        return "N/A"
    try:
        fetched = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return value
    return fetched.strftime("%m/%d/%Y, %I:%M:%S %p")


# =============================================================================
# Composer
# =============================================================================


class WeatherReportComposer(ReportComposer[WeatherRecord]):
    """Composes the branded weather verification report."""

    report_type = "weather"
    document_title = "Weather Verification Report"

    def filename(self, record: WeatherRecord) -> str:
        return f"{safe_filename(record.claim_number, fallback='claim')}_Weather_Report.pdf"

    def render(self, record: WeatherRecord, surface: PageSurface, cursor: LayoutCursor) -> None:
        weather = record.weather

        draw_title(surface, cursor, "WEATHER VERIFICATION REPORT", underline_width=260)
        if record.company_name:
            draw_lines(surface, cursor, [record.company_name])
            cursor.advance(6)

        self._property_panel(record, surface, cursor)
        self._verdict_banner(weather, surface, cursor)

        self._section_heading(surface, cursor, "DAILY CONDITIONS SUMMARY")
        if weather.description:
            draw_paragraph(surface, cursor, weather.description, style="note")
            cursor.advance(4)
        draw_key_value_panel(
            surface,
            cursor,
            daily_stats(weather),
            columns=2,
            label_width=105,
            max_chars=40,
            omit_empty=False,
            boxed=False,
        )

        if weather.events:
            self._section_heading(surface, cursor, "STORM EVENTS")
            table = TableRenderer(surface, cursor)
            table.header(EVENT_COLUMNS)
            for event in weather.events:
                table.row(EVENT_COLUMNS, event_cells(event))

        cursor.new_page()
        self._hourly_section(weather, surface, cursor)
        self._disclaimer(weather, surface, cursor)

    # -------------------------------------------------------------------------
    # Sections
    # -------------------------------------------------------------------------

    def _section_heading(self, surface: PageSurface, cursor: LayoutCursor, title: str) -> None:
        cursor.ensure_space(60)
        draw_divider(surface, cursor, gap=15)
        surface.text(MARGIN, cursor.y, title, "section")
        cursor.advance(18)

    def _property_panel(self, record: WeatherRecord, surface: PageSurface, cursor: LayoutCursor) -> None:
        weather = record.weather
        coordinates = None
        if weather.latitude is not None and weather.longitude is not None:
            coordinates = f"{weather.latitude:.4f}, {weather.longitude:.4f}"

        draw_key_value_panel(
            surface,
            cursor,
            [
                PanelField("Property Address", record.property_address),
                PanelField("Date of Loss", record.date_of_loss),
                PanelField("Claim #", record.claim_number),
                PanelField("Coordinates", coordinates),
                PanelField("Resolved Location", weather.resolved_address),
                PanelField("Data Source", DATA_SOURCE),
            ],
            heading="PROPERTY & CLAIM INFORMATION",
            label_width=CONTENT_WIDTH * 0.38,
            max_chars=70,
        )

    def _verdict_banner(self, weather: WeatherObservation, surface: PageSurface, cursor: LayoutCursor) -> None:
        label, fill, text_color = VERDICT_STYLES[weather.verdict]
        cursor.ensure_space(VERDICT_BANNER_HEIGHT + 20)
        top = cursor.y
        surface.rect(MARGIN, top, CONTENT_WIDTH, VERDICT_BANNER_HEIGHT, fill=fill, radius=4)
        surface.text(MARGIN + 16, top + 20, label, "banner_title", color=text_color)

        style = surface.theme.text("banner_text")
        lines = wrap_text(weather.verdict_text, style.font, style.size, CONTENT_WIDTH - 32)
        for index, line in zip(range(2), lines):
            surface.text(MARGIN + 16, top + 34 + index * style.line_height, line, "banner_text", color=text_color)

        cursor.move_to(top + VERDICT_BANNER_HEIGHT + 16)

    def _hourly_section(self, weather: WeatherObservation, surface: PageSurface, cursor: LayoutCursor) -> None:
        storm_window = bool(weather.storm_window)
        title = "HOURLY WEATHER DATA — STORM WINDOW" if storm_window else "HOURLY WEATHER DATA — FULL DAY"
        draw_title(surface, cursor, title, style="page_title", underline_width=280)

        if storm_window:
            draw_paragraph(
                surface,
                cursor,
                f"Showing {len(weather.storm_window)} hour(s) with severe risk > 30, "
                f"wind gusts > 40 mph, or hail activity.",
                style="note",
            )
            cursor.advance(6)

        hours = weather.storm_window if storm_window else weather.hours
        table = TableRenderer(surface, cursor)
        if not hours:
            table.placeholder("No hourly data available.")
        else:
            table.header(HOURLY_COLUMNS)
            for hour in hours:
                highlight = hour.has_hail or (hour.windgust is not None and hour.windgust >= SEVERE_GUST_MPH)
                table.row(HOURLY_COLUMNS, hourly_cells(hour), highlight="highlight_bg" if highlight else None)

        gust = peak_gust(weather)
        if gust is not None and gust > 0:
            cursor.ensure_space(20)
            cursor.advance(8)
            surface.text(MARGIN, cursor.y, "Peak Wind Gust:", "summary_value")
            surface.text(
                MARGIN + 100,
                cursor.y,
                f"{_whole(gust)} mph",
                "summary_value",
                color="red" if gust >= SEVERE_GUST_MPH else None,
            )
            cursor.advance(12)

    def _disclaimer(self, weather: WeatherObservation, surface: PageSurface, cursor: LayoutCursor) -> None:
        cursor.ensure_space(80)
        cursor.advance(20)
        draw_divider(surface, cursor)
        draw_paragraph(surface, cursor, SOURCE_DISCLAIMER, style="disclaimer")
        cursor.advance(8)
        draw_paragraph(surface, cursor, f"Weather data fetched: {format_fetched_at(weather.fetched_at)}", style="caption")


def generate_weather_pdf(record: WeatherRecord, config: Optional[Config] = None) -> bytes:
    """Render a weather verification report and return the PDF bytes."""
    return WeatherReportComposer(config).generate_to_buffer(record)

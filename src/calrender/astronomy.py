"""Astronomical calculations for lunar phases, sun times and seasons.

Angles returned by the position helpers are radians. Azimuth follows the
common low-precision convention: measured from south, positive toward west.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from enum import Enum
from zoneinfo import ZoneInfo

logger = logging.getLogger(__name__)

SYNODIC_MONTH_DAYS = 29.530588853
REFERENCE_NEW_MOON = datetime(2000, 1, 6, 18, 14, tzinfo=timezone.utc)

# Max distance (in phase units) for a day to count as a phase day. One day is ~0.0339.
PHASE_TOLERANCE = 0.017

# Days are sampled at noon UTC.
SAMPLE_TIME = time(12, 0)

J2000 = 2451545.0
_UNIX_EPOCH_JD = 2440587.5
_ORDINAL_EPOCH_JD = 1721425.5
_RAD = math.pi / 180
_OBLIQUITY = _RAD * 23.4397
_SUN_ALTITUDE_AT_RISE = _RAD * -0.833
_TRANSIT_OFFSET = 0.0009


class MoonPhase(Enum):
    """Named lunar phases."""

    NEW = "new"
    FIRST_QUARTER = "first_quarter"
    FULL = "full"
    LAST_QUARTER = "last_quarter"


_PHASE_TARGETS = (
    (MoonPhase.NEW, 0.0),
    (MoonPhase.FIRST_QUARTER, 0.25),
    (MoonPhase.FULL, 0.5),
    (MoonPhase.LAST_QUARTER, 0.75),
)


class SeasonType(Enum):
    """Equinoxes and solstices in calendar order."""

    SPRING_EQUINOX = "spring_equinox"
    SUMMER_SOLSTICE = "summer_solstice"
    AUTUMN_EQUINOX = "autumn_equinox"
    WINTER_SOLSTICE = "winter_solstice"


@dataclass(frozen=True)
class MoonPhaseData:
    """A day on which a named phase occurs."""

    day: date
    phase: MoonPhase
    phase_value: float


@dataclass(frozen=True)
class MoonIllumination:
    """Lit fraction of the disc plus the raw phase value."""

    fraction: float
    phase: float


@dataclass(frozen=True)
class MoonPosition:
    altitude: float
    azimuth: float
    parallactic_angle: float


@dataclass(frozen=True)
class SunriseSunset:
    """Local clock times as HH:MM; None when the sun never rises or sets."""

    sunrise: str | None
    sunset: str | None


@dataclass(frozen=True)
class SeasonalEvent:
    type: SeasonType
    day: date


def _as_utc_moment(when: date | datetime) -> datetime:
    if isinstance(when, datetime):
        if when.tzinfo is None:
            return when.replace(tzinfo=timezone.utc)
        return when.astimezone(timezone.utc)
    return datetime.combine(when, SAMPLE_TIME, tzinfo=timezone.utc)


def resolve_timezone(zone: tzinfo | str | None) -> tzinfo:
    """Resolve a zone name or tzinfo, defaulting to UTC."""
    if zone is None or zone == "" or zone == "UTC":
        return timezone.utc
    if isinstance(zone, tzinfo):
        return zone
    return ZoneInfo(zone)


# Moon phase


def moon_phase_value(when: date | datetime) -> float:
    """Return the phase value in [0, 1): 0 new, 0.25 first quarter, 0.5 full."""
    elapsed_days = (_as_utc_moment(when) - REFERENCE_NEW_MOON).total_seconds() / 86400
    value = (elapsed_days / SYNODIC_MONTH_DAYS) % 1.0
    if value >= 1.0:
        return 0.0
    return value


def _phase_distance(value: float, target: float) -> float:
    distance = abs(value - target)
    return min(distance, 1.0 - distance)


def moon_phase_on(day: date) -> MoonPhase | None:
    """Return the named phase occurring on ``day``, if any.

    A day carries a phase when it is the closest daily sample to that phase
    and lies within PHASE_TOLERANCE of it.
    """
    value = moon_phase_value(day)
    # Neighbours past the ends of the calendar never win the comparison.
    previous_value = moon_phase_value(day - timedelta(days=1)) if day > date.min else None
    next_value = moon_phase_value(day + timedelta(days=1)) if day < date.max else None
    for phase, target in _PHASE_TARGETS:
        distance = _phase_distance(value, target)
        if distance >= PHASE_TOLERANCE:
            continue
        if previous_value is not None and distance > _phase_distance(previous_value, target):
            continue
        if next_value is not None and distance >= _phase_distance(next_value, target):
            continue
        return phase
    return None


def is_moon_phase_day(day: date) -> bool:
    return moon_phase_on(day) is not None


def is_full_moon_day(day: date) -> bool:
    return moon_phase_on(day) is MoonPhase.FULL


def moon_phases_for_year(year: int) -> list[MoonPhaseData]:
    """Return every named phase day of ``year`` in chronological order."""
    phases: list[MoonPhaseData] = []
    for ordinal in range(date(year, 1, 1).toordinal(), date(year, 12, 31).toordinal() + 1):
        day = date.fromordinal(ordinal)
        phase = moon_phase_on(day)
        if phase is not None:
            phases.append(MoonPhaseData(day=day, phase=phase, phase_value=moon_phase_value(day)))
    logger.debug("computed %d moon phase days for %d", len(phases), year)
    return phases


def moon_illumination(when: date | datetime) -> MoonIllumination:
    """Return the illuminated fraction derived from the phase angle."""
    phase = moon_phase_value(when)
    # Sun-moon-earth angle: pi at new moon, 0 at full moon.
    phase_angle = math.pi - 2 * math.pi * phase
    fraction = (1 + math.cos(phase_angle)) / 2
    return MoonIllumination(fraction=min(1.0, max(0.0, fraction)), phase=phase)


# Shared low-precision ephemeris helpers


def _days_since_j2000(moment: datetime) -> float:
    return moment.timestamp() / 86400 + _UNIX_EPOCH_JD - J2000


def _julian_to_datetime(julian_day: float) -> datetime:
    epoch = datetime(1, 1, 1, tzinfo=timezone.utc)
    return epoch + timedelta(days=julian_day - _ORDINAL_EPOCH_JD)


def _right_ascension(longitude: float, latitude: float) -> float:
    return math.atan2(
        math.sin(longitude) * math.cos(_OBLIQUITY) - math.tan(latitude) * math.sin(_OBLIQUITY),
        math.cos(longitude),
    )


def _declination(longitude: float, latitude: float) -> float:
    return math.asin(
        math.sin(latitude) * math.cos(_OBLIQUITY)
        + math.cos(latitude) * math.sin(_OBLIQUITY) * math.sin(longitude)
    )


def _sidereal_time(days: float, west_longitude: float) -> float:
    return _RAD * (280.16 + 360.9856235 * days) - west_longitude


def _altitude(hour_angle: float, latitude: float, declination: float) -> float:
    return math.asin(
        math.sin(latitude) * math.sin(declination)
        + math.cos(latitude) * math.cos(declination) * math.cos(hour_angle)
    )


def _azimuth(hour_angle: float, latitude: float, declination: float) -> float:
    return math.atan2(
        math.sin(hour_angle),
        math.cos(hour_angle) * math.sin(latitude) - math.tan(declination) * math.cos(latitude),
    )


def _refraction(altitude: float) -> float:
    altitude = max(altitude, 0.0)
    return 0.0002967 / math.tan(altitude + 0.00312536 / (altitude + 0.08901179))


def _moon_equatorial(days: float) -> tuple[float, float]:
    mean_longitude = _RAD * (218.316 + 13.176396 * days)
    mean_anomaly = _RAD * (134.963 + 13.064993 * days)
    mean_distance = _RAD * (93.272 + 13.229350 * days)

    longitude = mean_longitude + _RAD * 6.289 * math.sin(mean_anomaly)
    latitude = _RAD * 5.128 * math.sin(mean_distance)
    return _right_ascension(longitude, latitude), _declination(longitude, latitude)


def moon_position(when: date | datetime, latitude: float, longitude: float) -> MoonPosition:
    """Return the moon's altitude, azimuth and parallactic angle for an observer."""
    days = _days_since_j2000(_as_utc_moment(when))
    phi = _RAD * latitude
    west_longitude = _RAD * -longitude

    right_ascension, declination = _moon_equatorial(days)
    hour_angle = _sidereal_time(days, west_longitude) - right_ascension
    altitude = _altitude(hour_angle, phi, declination)
    parallactic_angle = math.atan2(
        math.sin(hour_angle),
        math.tan(phi) * math.cos(declination) - math.sin(declination) * math.cos(hour_angle),
    )
    return MoonPosition(
        altitude=altitude + _refraction(altitude),
        azimuth=_azimuth(hour_angle, phi, declination),
        parallactic_angle=parallactic_angle,
    )


# Sun


def _solar_mean_anomaly(days: float) -> float:
    return _RAD * (357.5291 + 0.98560028 * days)


def _ecliptic_longitude(mean_anomaly: float) -> float:
    center = _RAD * (
        1.9148 * math.sin(mean_anomaly)
        + 0.02 * math.sin(2 * mean_anomaly)
        + 0.0003 * math.sin(3 * mean_anomaly)
    )
    perihelion = _RAD * 102.9372
    return mean_anomaly + center + perihelion + math.pi


def _solar_transit(approx: float, mean_anomaly: float, ecliptic_longitude: float) -> float:
    return (
        J2000
        + approx
        + 0.0053 * math.sin(mean_anomaly)
        - 0.0069 * math.sin(2 * ecliptic_longitude)
    )


def sun_event_times(
    day: date, latitude: float, longitude: float, *, zone: tzinfo | str | None = None
) -> tuple[datetime | None, datetime | None]:
    """Return aware sunrise and sunset datetimes in ``zone``.

    Both values are None during polar day or polar night.
    """
    local_zone = resolve_timezone(zone)
    noon = datetime.combine(day, SAMPLE_TIME, tzinfo=local_zone)
    days = _days_since_j2000(noon)
    west_longitude = _RAD * -longitude
    phi = _RAD * latitude

    cycle = round(days - _TRANSIT_OFFSET - west_longitude / (2 * math.pi))
    approx_noon = _TRANSIT_OFFSET + west_longitude / (2 * math.pi) + cycle
    mean_anomaly = _solar_mean_anomaly(approx_noon)
    ecliptic_longitude = _ecliptic_longitude(mean_anomaly)
    declination = _declination(ecliptic_longitude, 0.0)
    solar_noon = _solar_transit(approx_noon, mean_anomaly, ecliptic_longitude)

    cos_hour_angle = (
        math.sin(_SUN_ALTITUDE_AT_RISE) - math.sin(phi) * math.sin(declination)
    ) / (math.cos(phi) * math.cos(declination))
    if not -1.0 <= cos_hour_angle <= 1.0:
        logger.debug("no sunrise/sunset on %s at latitude %.2f", day, latitude)
        return None, None

    hour_angle = math.acos(cos_hour_angle)
    approx_set = _TRANSIT_OFFSET + (hour_angle + west_longitude) / (2 * math.pi) + cycle
    sunset = _solar_transit(approx_set, mean_anomaly, ecliptic_longitude)
    sunrise = solar_noon - (sunset - solar_noon)
    return (
        _julian_to_datetime(sunrise).astimezone(local_zone),
        _julian_to_datetime(sunset).astimezone(local_zone),
    )


def sunrise_sunset(
    day: date, latitude: float, longitude: float, *, zone: tzinfo | str | None = None
) -> SunriseSunset:
    """Return sunrise and sunset as HH:MM strings in ``zone`` (UTC by default)."""
    sunrise, sunset = sun_event_times(day, latitude, longitude, zone=zone)
    return SunriseSunset(
        sunrise=sunrise.strftime("%H:%M") if sunrise is not None else None,
        sunset=sunset.strftime("%H:%M") if sunset is not None else None,
    )


# Seasons

# Mean event instants (JDE) for years 1000..3000, as polynomials in millennia from 2000.
_SEASON_POLYNOMIALS = {
    SeasonType.SPRING_EQUINOX: (2451623.80984, 365242.37404, 0.05169, -0.00411, -0.00057),
    SeasonType.SUMMER_SOLSTICE: (2451716.56767, 365241.62603, 0.00325, 0.00888, -0.00030),
    SeasonType.AUTUMN_EQUINOX: (2451810.21715, 365242.01767, -0.11575, 0.00337, 0.00078),
    SeasonType.WINTER_SOLSTICE: (2451900.05952, 365242.74049, -0.06223, -0.00823, 0.00032),
}

_SEASON_PERIODIC_TERMS = (
    (485, 324.96, 1934.136),
    (203, 337.23, 32964.467),
    (199, 342.08, 20.186),
    (182, 27.85, 445267.112),
    (156, 73.14, 45036.886),
    (136, 171.52, 22518.443),
    (77, 222.54, 65928.934),
    (74, 296.72, 3034.906),
    (70, 243.58, 9037.513),
    (58, 119.81, 33718.147),
    (52, 297.17, 150.678),
    (50, 21.02, 2281.226),
    (45, 247.54, 29929.562),
    (44, 325.15, 31555.956),
    (29, 60.93, 4443.417),
    (18, 155.12, 67555.328),
    (17, 288.79, 4562.452),
    (16, 198.04, 62894.029),
    (14, 199.76, 31436.921),
    (12, 95.39, 14577.848),
    (12, 287.11, 31931.756),
    (12, 320.81, 34777.259),
    (9, 227.73, 1222.114),
    (8, 15.45, 16859.074),
)


def season_instant(year: int, season: SeasonType) -> datetime:
    """Return the UTC instant of an equinox or solstice."""
    millennia = (year - 2000) / 1000
    coefficients = _SEASON_POLYNOMIALS[season]
    mean_jde = sum(coef * millennia**power for power, coef in enumerate(coefficients))

    centuries = (mean_jde - J2000) / 36525
    w = _RAD * (35999.373 * centuries - 2.47)
    delta_lambda = 1 + 0.0334 * math.cos(w) + 0.0007 * math.cos(2 * w)
    periodic = sum(
        amplitude * math.cos(_RAD * (phase + rate * centuries))
        for amplitude, phase, rate in _SEASON_PERIODIC_TERMS
    )
    return _julian_to_datetime(mean_jde + 0.00001 * periodic / delta_lambda)


def seasonal_events(year: int, *, zone: tzinfo | str | None = None) -> list[SeasonalEvent]:
    """Return the four equinoxes and solstices of ``year`` in order."""
    local_zone = resolve_timezone(zone)
    return [
        SeasonalEvent(type=season, day=season_instant(year, season).astimezone(local_zone).date())
        for season in SeasonType
    ]

# ============================================================================
# app/services/holidays/holiday_calendar.py
# Statutory holidays per German federal state
# ============================================================================
"""
Statutory holiday calendar.

Holidays are computed per year and region; nothing carries over between
years, so a date range spanning New Year needs both years computed.
The result is descriptive only: whether a shop is closed is decided by
its opening hours and closed dates, never by this module.
"""
from datetime import date, timedelta
from functools import lru_cache
from typing import Dict, FrozenSet, List
import enum


class Region(str, enum.Enum):
    BW = "BW"  # Baden-Württemberg
    BY = "BY"  # Bayern
    BE = "BE"  # Berlin
    BB = "BB"  # Brandenburg
    HB = "HB"  # Bremen
    HH = "HH"  # Hamburg
    HE = "HE"  # Hessen
    MV = "MV"  # Mecklenburg-Vorpommern
    NI = "NI"  # Niedersachsen
    NW = "NW"  # Nordrhein-Westfalen
    RP = "RP"  # Rheinland-Pfalz
    SL = "SL"  # Saarland
    SN = "SN"  # Sachsen
    ST = "ST"  # Sachsen-Anhalt
    SH = "SH"  # Schleswig-Holstein
    TH = "TH"  # Thüringen


REGION_LABELS: Dict[Region, str] = {
    Region.BW: "Baden-Württemberg",
    Region.BY: "Bayern",
    Region.BE: "Berlin",
    Region.BB: "Brandenburg",
    Region.HB: "Bremen",
    Region.HH: "Hamburg",
    Region.HE: "Hessen",
    Region.MV: "Mecklenburg-Vorpommern",
    Region.NI: "Niedersachsen",
    Region.NW: "Nordrhein-Westfalen",
    Region.RP: "Rheinland-Pfalz",
    Region.SL: "Saarland",
    Region.SN: "Sachsen",
    Region.ST: "Sachsen-Anhalt",
    Region.SH: "Schleswig-Holstein",
    Region.TH: "Thüringen",
}

# Regional holidays and the states that observe them
EPIPHANY = {Region.BW, Region.BY, Region.ST}
WOMENS_DAY = {Region.BE, Region.MV}
CORPUS_CHRISTI = {Region.BW, Region.BY, Region.HE, Region.NW, Region.RP, Region.SL}
ASSUMPTION = {Region.BY, Region.SL}
CHILDRENS_DAY = {Region.TH}
REFORMATION_DAY = {
    Region.BB, Region.HB, Region.HH, Region.MV, Region.NI,
    Region.SN, Region.ST, Region.SH, Region.TH,
}
ALL_SAINTS = {Region.BW, Region.BY, Region.NW, Region.RP, Region.SL}
DAY_OF_REPENTANCE = {Region.SN}


def easter_sunday(year: int) -> date:
    """Easter Sunday in the Gregorian calendar (anonymous Gregorian algorithm)"""
    a = year % 19
    b = year // 100
    c = year % 100
    d = b // 4
    e = b % 4
    f = (b + 8) // 25
    g = (b - f + 1) // 3
    h = (19 * a + b - d - g + 15) % 30
    i = c // 4
    k = c % 4
    l = (32 + 2 * e + 2 * i - h - k) % 7
    m = (a + 11 * h + 22 * l) // 451
    month = (h + l - 7 * m + 114) // 31
    day = (h + l - 7 * m + 114) % 31 + 1
    return date(year, month, day)


def day_of_repentance(year: int) -> date:
    """Buß- und Bettag: the Wednesday strictly before November 23"""
    nov23 = date(year, 11, 23)
    days_back = (nov23.weekday() - 2) % 7 or 7
    return nov23 - timedelta(days=days_back)


def parse_region(value) -> Region:
    """Coerce a region code; raises ValueError for unknown codes"""
    if isinstance(value, Region):
        return value
    return Region(str(value).strip().upper())


@lru_cache(maxsize=256)
def _holidays(year: int, region: Region) -> Dict[date, str]:
    easter = easter_sunday(year)

    holidays = {
        date(year, 1, 1): "Neujahr",
        easter - timedelta(days=2): "Karfreitag",
        easter + timedelta(days=1): "Ostermontag",
        date(year, 5, 1): "Tag der Arbeit",
        easter + timedelta(days=39): "Christi Himmelfahrt",
        easter + timedelta(days=50): "Pfingstmontag",
        date(year, 10, 3): "Tag der Deutschen Einheit",
        date(year, 12, 25): "1. Weihnachtstag",
        date(year, 12, 26): "2. Weihnachtstag",
    }

    if region in EPIPHANY:
        holidays[date(year, 1, 6)] = "Heilige Drei Könige"
    if region in WOMENS_DAY:
        holidays[date(year, 3, 8)] = "Internationaler Frauentag"
    if region in CORPUS_CHRISTI:
        holidays[easter + timedelta(days=60)] = "Fronleichnam"
    if region in ASSUMPTION:
        holidays[date(year, 8, 15)] = "Mariä Himmelfahrt"
    if region in CHILDRENS_DAY:
        holidays[date(year, 9, 20)] = "Weltkindertag"
    if region in REFORMATION_DAY:
        holidays[date(year, 10, 31)] = "Reformationstag"
    if region in ALL_SAINTS:
        holidays[date(year, 11, 1)] = "Allerheiligen"
    if region in DAY_OF_REPENTANCE:
        holidays[day_of_repentance(year)] = "Buß- und Bettag"

    return holidays


def get_holidays(year: int, region) -> Dict[date, str]:
    """All statutory holidays of one year for a region, keyed by date"""
    return dict(_holidays(year, parse_region(region)))


def holidays_for(year: int, region) -> FrozenSet[date]:
    """Statutory holiday dates of one year for a region"""
    return frozenset(_holidays(year, parse_region(region)))


def get_holidays_for_display(year: int, region) -> Dict[date, str]:
    """Statutory holidays plus Easter Sunday and Whit Sunday for calendars"""
    holidays = get_holidays(year, region)
    easter = easter_sunday(year)
    holidays[easter] = "Ostersonntag"
    holidays[easter + timedelta(days=49)] = "Pfingstsonntag"
    return holidays


def is_holiday(day: date, region) -> bool:
    return day in _holidays(day.year, parse_region(region))


def get_holiday_name(day: date, region):
    return _holidays(day.year, parse_region(region)).get(day)


def get_holidays_list(year: int, region) -> List[Dict[str, str]]:
    """Holidays of a year as a date-sorted list of {"date", "name"}"""
    return [
        {"date": day.isoformat(), "name": name}
        for day, name in sorted(_holidays(year, parse_region(region)).items())
    ]


def count_working_days(start: date, end: date, region) -> int:
    """
    Count working days between two dates (inclusive).

    A working day is Monday to Saturday and not a statutory holiday.
    Shop closures are not considered.
    """
    if end < start:
        return 0

    region = parse_region(region)
    holidays = set()
    for year in range(start.year, end.year + 1):
        holidays |= holidays_for(year, region)

    working_days = 0
    for offset in range((end - start).days + 1):
        current = start + timedelta(days=offset)
        if current.weekday() != 6 and current not in holidays:
            working_days += 1

    return working_days

# panchang/core/constants.py
"""
Panchanga core constants.

Single source of truth for the name tables (tithi, nakshatra, yoga,
karana, vara, rashi, lunar months, ritu, samvatsara) and the nakshatra
lore table. Pure data; safe to import from any core module.
"""
from __future__ import annotations

from typing import Tuple

__all__ = [
    "NAKSHATRA_SPAN", "PADA_SPAN", "TITHI_SPAN", "KARANA_SPAN", "RASHI_SPAN",
    "TITHI_NAMES", "PURNIMA", "AMAVASYA",
    "NAKSHATRA_NAMES", "NAKSHATRA_LORE",
    "YOGA_NAMES",
    "MOVABLE_KARANAS", "FIXED_KARANAS", "MOVABLE_KARANA_SLOTS",
    "VARA_NAMES", "VARA_LORDS",
    "MOON_PHASES",
    "RASHI_NAMES", "LUNAR_MONTHS", "RITU_NAMES", "SAMVATSARA_NAMES",
    "GRAHAS",
]

# ───────────────────────── arc widths (degrees) ─────────────────────────
NAKSHATRA_SPAN = 360.0 / 27.0     # 13°20'
PADA_SPAN = NAKSHATRA_SPAN / 4.0  # 3°20'
TITHI_SPAN = 12.0
KARANA_SPAN = 6.0
RASHI_SPAN = 30.0

# ───────────────────────── tithi ─────────────────────────
TITHI_NAMES: Tuple[str, ...] = (
    "Pratipada", "Dwitiya", "Tritiya", "Chaturthi", "Panchami",
    "Shashthi", "Saptami", "Ashtami", "Navami", "Dashami",
    "Ekadashi", "Dwadashi", "Trayodashi", "Chaturdashi",
)
PURNIMA = "Purnima"
AMAVASYA = "Amavasya"

# ───────────────────────── nakshatra ─────────────────────────
# (name, ruler, deity, symbol)
NAKSHATRA_LORE: Tuple[Tuple[str, str, str, str], ...] = (
    ("Ashwini", "Ketu", "Ashwini Kumaras", "Horse's head"),
    ("Bharani", "Venus", "Yama", "Yoni"),
    ("Krittika", "Sun", "Agni", "Razor/flame"),
    ("Rohini", "Moon", "Brahma", "Cart/chariot"),
    ("Mrigashira", "Mars", "Soma", "Deer's head"),
    ("Ardra", "Rahu", "Rudra", "Teardrop"),
    ("Punarvasu", "Jupiter", "Aditi", "Quiver of arrows"),
    ("Pushya", "Saturn", "Brihaspati", "Cow's udder"),
    ("Ashlesha", "Mercury", "Nagas", "Serpent"),
    ("Magha", "Ketu", "Pitrs", "Throne"),
    ("Purva Phalguni", "Venus", "Bhaga", "Hammock"),
    ("Uttara Phalguni", "Sun", "Aryaman", "Bed"),
    ("Hasta", "Moon", "Savitar", "Hand"),
    ("Chitra", "Mars", "Vishvakarma", "Pearl"),
    ("Swati", "Rahu", "Vayu", "Young sprout"),
    ("Vishakha", "Jupiter", "Indragni", "Triumphal arch"),
    ("Anuradha", "Saturn", "Mitra", "Lotus"),
    ("Jyeshtha", "Mercury", "Indra", "Earring"),
    ("Mula", "Ketu", "Nirriti", "Bunch of roots"),
    ("Purva Ashadha", "Venus", "Apah", "Fan"),
    ("Uttara Ashadha", "Sun", "Vishvedevas", "Elephant tusk"),
    ("Shravana", "Moon", "Vishnu", "Ear"),
    ("Dhanishta", "Mars", "Vasus", "Drum"),
    ("Shatabhisha", "Rahu", "Varuna", "Empty circle"),
    ("Purva Bhadrapada", "Jupiter", "Ajaikapat", "Front legs of bed"),
    ("Uttara Bhadrapada", "Saturn", "Ahirbudhnya", "Back legs of bed"),
    ("Revati", "Mercury", "Pushan", "Fish"),
)
NAKSHATRA_NAMES: Tuple[str, ...] = tuple(row[0] for row in NAKSHATRA_LORE)

# ───────────────────────── yoga ─────────────────────────
YOGA_NAMES: Tuple[str, ...] = (
    "Vishkambha", "Priti", "Ayushman", "Saubhagya", "Shobhana", "Atiganda",
    "Sukarma", "Dhriti", "Shoola", "Ganda", "Vriddhi", "Dhruva",
    "Vyaghata", "Harshana", "Vajra", "Siddhi", "Vyatipata", "Variyana",
    "Parigha", "Shiva", "Siddha", "Sadhya", "Shubha", "Shukla",
    "Brahma", "Indra", "Vaidhriti",
)

# ───────────────────────── karana ─────────────────────────
MOVABLE_KARANAS: Tuple[str, ...] = ("Bava", "Balava", "Kaulava", "Taitila", "Gara", "Vanija", "Vishti")
FIXED_KARANAS: Tuple[str, ...] = ("Shakuni", "Chatushpada", "Naga", "Kimstughna")
# cycle indices [0, MOVABLE_KARANA_SLOTS) are movable, the rest fixed
MOVABLE_KARANA_SLOTS = 57

# ───────────────────────── vara ─────────────────────────
VARA_NAMES: Tuple[str, ...] = ("Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday")
VARA_LORDS: Tuple[str, ...] = ("Sun", "Moon", "Mars", "Mercury", "Jupiter", "Venus", "Saturn")

MOON_PHASES: Tuple[str, ...] = (
    "New Moon", "Waxing Crescent", "First Quarter", "Waxing Gibbous",
    "Full Moon", "Waning Gibbous", "Last Quarter", "Waning Crescent",
)

# ───────────────────────── calendar ─────────────────────────
RASHI_NAMES: Tuple[str, ...] = (
    "Mesha", "Vrishabha", "Mithuna", "Karka", "Simha", "Kanya",
    "Tula", "Vrishchika", "Dhanu", "Makara", "Kumbha", "Meena",
)
LUNAR_MONTHS: Tuple[str, ...] = (
    "Chaitra", "Vaishakha", "Jyeshtha", "Ashadha", "Shravana", "Bhadrapada",
    "Ashwin", "Kartika", "Margashirsha", "Pausha", "Magha", "Phalguna",
)
RITU_NAMES: Tuple[str, ...] = ("Vasanta", "Grishma", "Varsha", "Sharad", "Hemanta", "Shishira")

SAMVATSARA_NAMES: Tuple[str, ...] = (
    "Prabhava", "Vibhava", "Shukla", "Pramoda", "Prajapati", "Angirasa",
    "Shrimukha", "Bhava", "Yuva", "Dhatri", "Ishvara", "Bahudhanya",
    "Pramathi", "Vikrama", "Vrisha", "Chitrabhanu", "Svabhanu", "Tarana",
    "Parthiva", "Vyaya", "Sarvajit", "Sarvadhari", "Virodhi", "Vikriti",
    "Khara", "Nandana", "Vijaya", "Jaya", "Manmatha", "Durmukhi",
    "Hevilambi", "Vilambi", "Vikari", "Sharvari", "Plava", "Shubhakrit",
    "Shobhakrit", "Krodhi", "Vishvavasu", "Parabhava", "Plavanga", "Kilaka",
    "Saumya", "Sadharana", "Virodhikrit", "Paridhavi", "Pramadi", "Ananda",
    "Rakshasa", "Nala", "Pingala", "Kalayukta", "Siddharthi", "Raudra",
    "Durmati", "Dundubhi", "Rudhirodgari", "Raktakshi", "Krodhana", "Akshaya",
)

# Navagraha order used for planetary tables
GRAHAS: Tuple[str, ...] = ("Sun", "Moon", "Mars", "Mercury", "Jupiter", "Venus", "Saturn", "Rahu", "Ketu")


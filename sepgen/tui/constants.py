"""Shared constants for TUI modules.

Centralizes the dropdown option sets used by the form template. Each
option is (display label, value written to the XML file).
"""

from __future__ import annotations

from sepgen.tui.models.field import Option

LINE_BUTTON_COUNT = 4
DEFAULT_SIP_PORT = "5060"
DEVICE_PROTOCOL = "SIP"

IDENTITY_TAG = "device"
SIP_PORT_TAG = "voipControlPort"

DISABLED_ENABLED = (Option("Disabled", "0"), Option("Enabled", "1"))
NO_YES = (Option("No", "false"), Option("Yes", "true"))

TRANSPORTS = (Option("UDP", "1"), Option("TCP", "2"), Option("TLS", "3"))

CODECS = (
    Option("G.711u (Standard US)", "PCMU"),
    Option("G.711a (Standard EU)", "PCMA"),
    Option("G.722 (HD Audio)", "G722"),
    Option("G.729 (Compressed)", "G729"),
)

DATE_FORMATS = (
    Option("M/D/Y", "M/D/Y"),
    Option("D/M/Y", "D/M/Y"),
    Option("Y/M/D", "Y/M/D"),
)
TIME_FORMATS = (Option("12 Hour", "12"), Option("24 Hour", "24"))

VIDEO_BITRATES = (
    Option("384k", "384"),
    Option("768k", "768"),
    Option("1.5M", "1500"),
    Option("2.5M", "2500"),
    Option("4M", "4000"),
)

USER_LOCALES = (
    Option("US (English)", "United_States"),
    Option("UK (English)", "United_Kingdom"),
    Option("France (French)", "France"),
    Option("Germany (German)", "Germany"),
    Option("Spain (Spanish)", "Spain"),
)
NETWORK_LOCALES = (
    Option("United States", "United_States"),
    Option("United Kingdom", "United_Kingdom"),
    Option("France", "France"),
    Option("Germany", "Germany"),
    Option("Spain", "Spain"),
)

BLUETOOTH_PROFILES = (
    Option("Handsfree Only", "Handsfree"),
    Option("Headset Only", "Headset"),
    Option("Both", "Handsfree,Headset"),
)

DND_ALERTS = (
    Option("None", "0"),
    Option("Flash Screen", "5"),
    Option("Beep", "1"),
    Option("Flash & Beep", "2"),
)

PC_VLAN_MODES = (
    Option("Native / Untagged", "0"),
    Option("Tag with Voice VLAN", "1"),
    Option("Tag with Specific VLAN", "2"),
)
PC_VLAN_SPECIFIC = 2

# Key function of a line button
BUTTON_DISABLED = 0
BUTTON_LINE = 1
BUTTON_TYPES = (
    Option("Disabled", "0"),
    Option("Line", "1"),
    Option("SpeedDial", "2"),
    Option("BLF", "3"),
)
FEATURE_ID_LINE = "9"
FEATURE_ID_OTHER = "21"

# Cisco time zone names; the label adds the UTC offset for the operator
_TIME_ZONES = [
    ("Dateline Standard Time", "GMT-12"),
    ("Samoa Standard Time", "GMT-11"),
    ("Hawaiian Standard Time", "GMT-10"),
    ("Alaskan Standard Time", "GMT-9"),
    ("Pacific Standard/Daylight Time", "GMT-8"),
    ("Mountain Standard/Daylight Time", "GMT-7"),
    ("US Mountain Standard Time", "GMT-7"),
    ("Central Standard/Daylight Time", "GMT-6"),
    ("Mexico Standard/Daylight Time", "GMT-6"),
    ("Canada Central Standard Time", "GMT-6"),
    ("SA Pacific Standard Time", "GMT-5"),
    ("Eastern Standard/Daylight Time", "GMT-5"),
    ("US Eastern Standard Time", "GMT-5"),
    ("Atlantic Standard Time", "GMT-4"),
    ("SA Western Standard Time", "GMT-4"),
    ("Newfoundland Standard Time", "GMT-3.5"),
    ("E. South America Standard Time", "GMT-3"),
    ("SA Eastern Standard Time", "GMT-3"),
    ("Mid-Atlantic Standard Time", "GMT-2"),
    ("Azores Standard Time", "GMT-1"),
    ("GMT Standard/Daylight Time", "GMT"),
    ("Greenwich Standard Time", "GMT"),
    ("W. Europe Standard/Daylight Time", "GMT+1"),
    ("GTB Standard/Daylight Time", "GMT+2"),
    ("Egypt Standard/Daylight Time", "GMT+2"),
    ("E. Europe Standard/Daylight Time", "GMT+2"),
    ("Romance Standard/Daylight Time", "GMT+2"),
    ("Russian Standard Time", "GMT+3"),
    ("Near East Standard/Daylight Time", "GMT+3"),
    ("Iran Standard Time", "GMT+3.5"),
    ("Arabian Standard Time", "GMT+4"),
    ("Caucasus Standard/Daylight Time", "GMT+4"),
    ("Transitional Islamic State of Afghanistan Standard Time", "GMT+4.5"),
    ("Ekaterinburg Standard Time", "GMT+5"),
    ("West Asia Standard Time", "GMT+5"),
    ("India Standard Time", "GMT+5.5"),
    ("Nepal Standard Time", "GMT+5.75"),
    ("Central Asia Standard Time", "GMT+6"),
    ("Sri Lanka Standard Time", "GMT+6"),
    ("N. Central Asia Standard Time", "GMT+6"),
    ("Myanmar Standard Time", "GMT+6.5"),
    ("SE Asia Standard Time", "GMT+7"),
    ("North Asia Standard Time", "GMT+7"),
    ("China Standard/Daylight Time", "GMT+8"),
    ("Singapore Standard Time", "GMT+8"),
    ("Taipei Standard Time", "GMT+8"),
    ("W. Australia Standard Time", "GMT+8"),
    ("North Asia East Standard Time", "GMT+8"),
    ("Korea Standard Time", "GMT+9"),
    ("Tokyo Standard Time", "GMT+9"),
    ("Yakutsk Standard Time", "GMT+9"),
    ("Aus Central Standard Time", "GMT+9.5"),
    ("Cen. Australia Standard/Daylight Time", "GMT+9.5"),
    ("Aus Eastern Standard/Daylight Time", "GMT+10"),
    ("E. Australia Standard Time", "GMT+10"),
    ("Vladivostok Standard Time", "GMT+10"),
    ("Tasmania Standard/Daylight Time", "GMT+10"),
    ("Central Pacific Standard Time", "GMT+11"),
    ("New Zealand Standard/Daylight Time", "GMT+12"),
    ("Fiji Standard Time", "GMT+12"),
]
TIME_ZONES = tuple(Option(f"{name} ({offset})", name) for name, offset in _TIME_ZONES)
DEFAULT_TIME_ZONE = 4  # Pacific


def line_tag(button: int, element: str) -> str:
    """Tag of a per-button field, e.g. ``line_tag(1, "name") == "line1.name"``."""
    return f"line{button}.{element}"


def element_name(tag: str) -> str:
    """XML element name for a tag (drops the ``lineN.`` prefix)."""
    return tag.rsplit(".", 1)[-1]

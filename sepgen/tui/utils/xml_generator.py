"""Generate the SEP<MAC>.cnf.xml provisioning document from form state.

Each block of the document is described by an emission table: a list of
:class:`Emission` entries saying which element to write, where its text
comes from, and under which condition. One interpreter, :func:`emit`,
walks the tables, so every conditional in the output is data that can be
tested on its own.
"""

from __future__ import annotations

import logging
import xml.etree.ElementTree as ET
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Any, Optional, Protocol, Sequence, Union

from sepgen.lib.errors import DestinationError
from sepgen.lib.identity import destination_name, require_identity
from sepgen.tui.constants import (
    BUTTON_DISABLED,
    BUTTON_LINE,
    DEFAULT_SIP_PORT,
    DEVICE_PROTOCOL,
    FEATURE_ID_LINE,
    FEATURE_ID_OTHER,
    IDENTITY_TAG,
    PC_VLAN_SPECIFIC,
    SIP_PORT_TAG,
)

if TYPE_CHECKING:
    from sepgen.tui.models.registry import FieldRegistry

logger = logging.getLogger(__name__)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'
CALL_MANAGER_TAGS = ("processNodeName1", "processNodeName2", "processNodeName3")


# =============================================================================
# Predicates
# =============================================================================


class Predicate(Protocol):
    def __call__(self, registry: "FieldRegistry", **context: Any) -> bool: ...


@dataclass(frozen=True)
class Selected:
    """True when a dropdown's selected index equals ``index``."""

    tag: str
    index: int
    negate: bool = False

    def __call__(self, registry: "FieldRegistry", **context: Any) -> bool:
        field = registry.require(self.tag.format(**context))
        return (field.selected_index == self.index) != self.negate


@dataclass(frozen=True)
class Filled:
    """True when a free-text field is non-empty."""

    tag: str

    def __call__(self, registry: "FieldRegistry", **context: Any) -> bool:
        return bool(registry.require(self.tag.format(**context)).value)


@dataclass(frozen=True)
class AllOf:
    """True when every wrapped predicate holds."""

    predicates: tuple[Predicate, ...]

    def __call__(self, registry: "FieldRegistry", **context: Any) -> bool:
        return all(p(registry, **context) for p in self.predicates)


# =============================================================================
# Emission tables
# =============================================================================


@dataclass(frozen=True)
class Emission:
    """One element of the output document.

    Attributes:
        element: XML element name
        source: Tag to read (may contain ``{button}``); None for constants
        constant: Fixed text, used instead of a source
        when: Condition that must hold for the element to be written
        always: Write free-text sources even when empty
    """

    element: str
    source: Optional[str] = None
    constant: Optional[str] = None
    when: Optional[Predicate] = None
    always: bool = False

    def text(self, registry: "FieldRegistry", **context: Any) -> Optional[str]:
        """Text to write, or None if this element is skipped."""
        if self.when is not None and not self.when(registry, **context):
            return None
        if self.constant is not None:
            return self.constant
        field = registry.require((self.source or self.element).format(**context))
        if field.is_dropdown:
            return field.selected_value
        if field.value or self.always:
            return field.value
        return None


def field(element: str, source: Optional[str] = None, **kwargs: Any) -> Emission:
    """Emission reading a field; the tag defaults to the element name."""
    return Emission(element=element, source=source or element, **kwargs)


def constant(element: str, text: str, **kwargs: Any) -> Emission:
    return Emission(element=element, constant=text, **kwargs)


DEVICE_HEADER: list[Emission] = [
    constant("deviceProtocol", DEVICE_PROTOCOL),
    field("deviceLabel"),
    field("loadInformation"),
]

# ntpServerAddr is read from the field declared as "ntpServer"
DATE_TIME_SETTING: list[Emission] = [
    field("ntpServerAddr", "ntpServer"),
    field("timeZone"),
    field("dateTemplate"),
    field("timeFormat"),
]

NAT_ON = Selected("natEnabled", 1)

SIP_STACK: list[Emission] = [
    field("transportLayerProtocol"),
    constant("natEnabled", "true", when=NAT_ON),
    field("natAddress", when=NAT_ON, always=True),
]

USER_LOCALE: list[Emission] = [
    field("name", "userLocale"),
    field("langCode", "userLocale"),
]

NETWORK_LOCALE: list[Emission] = [
    field("networkLocale"),
]

ETHERNET_CONFIG: list[Emission] = [
    field("adminVlanId"),
    field("pcPortVlanId", when=Selected("pcVoiceVlanAccess", PC_VLAN_SPECIFIC)),
]

IS_LINE = Selected("line{button}.lineType", BUTTON_LINE)
NOT_LINE = Selected("line{button}.lineType", BUTTON_LINE, negate=True)
AUTO_ANSWER = AllOf((IS_LINE, Selected("line{button}.autoAnswerEnabled", 1)))

SIP_LINE: list[Emission] = [
    constant("featureID", FEATURE_ID_LINE, when=IS_LINE),
    constant("featureID", FEATURE_ID_OTHER, when=NOT_LINE),
    field("name", "line{button}.name", always=True),
    field("displayName", "line{button}.displayName", always=True),
    field("authName", "line{button}.authName", when=IS_LINE, always=True),
    field("authPassword", "line{button}.authPassword", when=IS_LINE, always=True),
    constant("autoAnswerEnabled", "2", when=AUTO_ANSWER),
    constant("autoAnswerTimer", "1", when=AUTO_ANSWER),
    field("callForwardURI", "line{button}.callForwardURI", when=IS_LINE),
    field("callPickupGroupURI", "line{button}.callPickupGroupURI", when=IS_LINE),
    field("voiceMailPilot", "line{button}.voiceMailPilot", when=IS_LINE),
]

SNMP_ON = Selected("snmpEnabled", 1)

# Flat settings block: dropdowns always carry a value, text only if filled
VENDOR_CONFIG: list[Emission] = [
    field("settingsAccess"),
    field("webAccess"),
    field("sshAccess"),
    field("sshUserId"),
    field("sshPassword"),
    field("adminPassword"),
    field("pcPort"),
    field("pcVoiceVlanAccess"),
    field("spanToPCPort"),
    field("gratuitousARP"),
    field("bluetooth"),
    field("bluetoothProfile"),
    field("preferredCodec"),
    field("advertiseG722Codec"),
    field("dscpForAudio"),
    field("startMediaPort"),
    field("stopMediaPort", when=Filled("startMediaPort"), always=True),
    field("videoCapability"),
    field("autoTransmitVideo"),
    field("videoBitRate"),
    field("dscpForVideo"),
    field("rtcp"),
    field("dndControl"),
    field("dndCallAlert"),
    field("dndReminderTimer"),
    constant("snmpEnable", "1", when=SNMP_ON),
    field("snmpCommunity", when=SNMP_ON, always=True),
    field("syslogAddr"),
    field("directoryURL"),
    field("servicesURL"),
    field("authenticationURL"),
    field("informationURL"),
    field("dialTemplate"),
    field("softKeyFile"),
    field("idleURL"),
    field("idleTimeout"),
    field("backgroundImage"),
]

DEVICE_TRAILER: list[Emission] = [
    field("mtu"),
]


# =============================================================================
# Interpreter
# =============================================================================


def emit(
    parent: ET.Element,
    table: Sequence[Emission],
    registry: "FieldRegistry",
    **context: Any,
) -> int:
    """Append the elements of ``table`` that apply to ``parent``.

    Returns:
        Number of elements written
    """
    written = 0
    for entry in table:
        text = entry.text(registry, **context)
        if text is None:
            continue
        ET.SubElement(parent, entry.element).text = text
        written += 1
    return written


def _call_manager_group(
    device: ET.Element, registry: "FieldRegistry", port: str
) -> None:
    group = ET.SubElement(device, "callManagerGroup")
    members = ET.SubElement(group, "members")
    # Priority follows declaration order, not how many servers are filled in
    for priority, tag in enumerate(CALL_MANAGER_TAGS):
        address = registry.require(tag).value
        if not address:
            continue
        member = ET.SubElement(members, "member", priority=str(priority))
        manager = ET.SubElement(member, "callManager")
        ports = ET.SubElement(manager, "ports")
        ET.SubElement(ports, "ethernetPhonePort").text = port
        ET.SubElement(manager, "processNodeName").text = address


def _sip_lines(device: ET.Element, registry: "FieldRegistry") -> None:
    lines = ET.SubElement(device, "sipLines")
    for button in registry.groups():
        key = registry.require(f"line{button}.lineType")
        if key.selected_index == BUTTON_DISABLED:
            continue
        line = ET.SubElement(lines, "line", button=str(button))
        emit(line, SIP_LINE, registry, button=button)


def _block(
    device: ET.Element, name: str, table: Sequence[Emission], registry: "FieldRegistry"
) -> ET.Element:
    element = ET.SubElement(device, name)
    emit(element, table, registry)
    return element


def serialize(
    registry: "FieldRegistry", *, default_port: str = DEFAULT_SIP_PORT
) -> ET.Element:
    """Build the ``<device>`` document from the registry.

    Raises:
        ShapeError: If the MAC address is not 12 hex characters
        UnknownTagError: If an emission table names a tag the form lacks
    """
    require_identity(registry.require(IDENTITY_TAG).value)

    device = ET.Element("device")
    emit(device, DEVICE_HEADER, registry)

    port = registry.require(SIP_PORT_TAG).value or default_port
    _call_manager_group(device, registry, port)

    _block(device, "dateTimeSetting", DATE_TIME_SETTING, registry)
    _block(device, "sipStack", SIP_STACK, registry)
    _block(device, "userLocale", USER_LOCALE, registry)
    emit(device, NETWORK_LOCALE, registry)
    _block(device, "ethernetConfig", ETHERNET_CONFIG, registry)
    _sip_lines(device, registry)
    _block(device, "vendorConfig", VENDOR_CONFIG, registry)
    emit(device, DEVICE_TRAILER, registry)
    return device


def render_xml(document: ET.Element) -> str:
    """Serialize a document with a declaration and two-space indentation."""
    ET.indent(document, space="  ")
    body = ET.tostring(document, encoding="unicode", short_empty_elements=False)
    return f"{XML_DECLARATION}\n{body}\n"


def generate_xml(
    registry: "FieldRegistry", *, default_port: str = DEFAULT_SIP_PORT
) -> str:
    """Serialize the registry straight to XML text."""
    return render_xml(serialize(registry, default_port=default_port))


def write_document(
    registry: "FieldRegistry",
    output_dir: Union[str, Path],
    *,
    default_port: str = DEFAULT_SIP_PORT,
) -> Path:
    """Validate, render and write ``SEP<MAC>.cnf.xml`` into ``output_dir``.

    The document is rendered completely before anything is opened, then
    written to a hidden temp file and renamed over the destination. A
    failure at any step leaves the previous file (if any) untouched.

    Returns:
        Path of the written file

    Raises:
        ShapeError: If the MAC address is not 12 hex characters
        DestinationError: If the file cannot be opened or written
    """
    identity = require_identity(registry.require(IDENTITY_TAG).value)
    content = generate_xml(registry, default_port=default_port)

    path = Path(output_dir) / destination_name(identity)
    tmp_path = path.with_name(f".{path.name}.tmp")
    try:
        with open(tmp_path, "w", encoding="utf-8") as f:
            f.write(content)
        tmp_path.replace(path)
    except OSError as e:
        tmp_path.unlink(missing_ok=True)
        raise DestinationError(
            f"Cannot write {path.name}", path=str(path), cause=e
        ) from e

    logger.info("Wrote %s (%d bytes)", path, len(content.encode("utf-8")))
    return path

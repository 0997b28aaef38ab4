"""Tests for the SEP<MAC>.cnf.xml generator."""

from __future__ import annotations

import errno
import xml.etree.ElementTree as ET
from pathlib import Path

import pytest

import sepgen.tui.utils.xml_generator as xml_generator_module
from sepgen.lib.errors import DestinationError, ShapeError, UnknownTagError
from sepgen.tui.models.registry import FieldRegistry
from sepgen.tui.models.schema import default_rules
from sepgen.tui.models.visibility import recompute
from sepgen.tui.utils.xml_generator import (
    XML_DECLARATION,
    AllOf,
    Filled,
    Selected,
    emit,
    field,
    generate_xml,
    render_xml,
    serialize,
    write_document,
)

MAC = "001122AABBCC"


@pytest.fixture
def form(registry: FieldRegistry) -> FieldRegistry:
    """Default form with a valid MAC and primary server."""
    registry.set_value("device", MAC)
    registry.set_value("processNodeName1", "192.168.1.10")
    return registry


def _line(document: ET.Element, button: int) -> ET.Element | None:
    return document.find(f"sipLines/line[@button='{button}']")


class TestDocumentShape:
    """Tests for the overall document layout."""

    def test_top_level_order(self, form: FieldRegistry) -> None:
        """Blocks appear in the fixed order the phone expects."""
        form.set_value("mtu", "1400")
        document = serialize(form)

        assert document.tag == "device"
        assert [child.tag for child in document] == [
            "deviceProtocol",
            "callManagerGroup",
            "dateTimeSetting",
            "sipStack",
            "userLocale",
            "networkLocale",
            "ethernetConfig",
            "sipLines",
            "vendorConfig",
            "mtu",
        ]
        assert document.findtext("deviceProtocol") == "SIP"

    def test_optional_header_fields(self, form: FieldRegistry) -> None:
        """Phone label and firmware load are written only when filled."""
        assert serialize(form).find("deviceLabel") is None

        form.set_value("deviceLabel", "Reception")
        form.set_value("loadInformation", "sip8941_45.9-4-2-13")
        document = serialize(form)
        assert document.findtext("deviceLabel") == "Reception"
        assert document.findtext("loadInformation") == "sip8941_45.9-4-2-13"

    def test_dropdowns_write_serialized_values(self, form: FieldRegistry) -> None:
        """Dropdowns emit the option value, never the display label."""
        document = serialize(form)

        assert document.findtext("sipStack/transportLayerProtocol") == "1"
        assert document.findtext("dateTimeSetting/timeZone") == "Pacific Standard/Daylight Time"
        assert document.findtext("userLocale/name") == "United_States"
        assert document.findtext("userLocale/langCode") == "United_States"
        assert document.findtext("networkLocale") == "United_States"
        assert document.findtext("vendorConfig/dndCallAlert") == "5"

    def test_ntp_server_written_as_ntp_server_addr(self, form: FieldRegistry) -> None:
        """The NTP server field is emitted under the element the phone reads."""
        form.set_value("ntpServer", "pool.ntp.org")
        document = serialize(form)

        assert document.findtext("dateTimeSetting/ntpServerAddr") == "pool.ntp.org"
        assert document.find("dateTimeSetting/ntpServer") is None

    def test_render_has_declaration_and_indent(self, form: FieldRegistry) -> None:
        """Rendered text starts with the declaration and uses two-space indents."""
        text = generate_xml(form)

        assert text.startswith(XML_DECLARATION + "\n<device>\n  <deviceProtocol>SIP</deviceProtocol>")
        assert text.endswith("</device>\n")

    def test_empty_elements_are_not_self_closing(self, form: FieldRegistry) -> None:
        """Always-written empty elements keep an explicit end tag."""
        text = generate_xml(form)
        assert "<displayName></displayName>" in text

    def test_deterministic(self, form: FieldRegistry) -> None:
        """Same registry state gives byte-identical output."""
        form.set_selected("natEnabled", 1)
        form.set_value("natAddress", "203.0.113.7")
        assert generate_xml(form) == generate_xml(form)

    def test_render_xml_of_element(self) -> None:
        """render_xml works on any element tree."""
        root = ET.Element("device")
        ET.SubElement(root, "mtu").text = "1500"
        assert render_xml(root) == f"{XML_DECLARATION}\n<device>\n  <mtu>1500</mtu>\n</device>\n"


class TestCallManagerGroup:
    """Tests for the server member list."""

    def test_primary_only(self, form: FieldRegistry) -> None:
        members = serialize(form).findall("callManagerGroup/members/member")

        assert len(members) == 1
        assert members[0].get("priority") == "0"
        assert members[0].findtext("callManager/processNodeName") == "192.168.1.10"

    def test_priority_follows_position(self, form: FieldRegistry) -> None:
        """Skipping the secondary keeps the tertiary at priority 2."""
        form.set_value("processNodeName3", "192.168.1.12")
        members = serialize(form).findall("callManagerGroup/members/member")

        assert [m.get("priority") for m in members] == ["0", "2"]

    def test_default_port(self, form: FieldRegistry) -> None:
        """An empty SIP port falls back to 5060."""
        port = serialize(form).findtext("callManagerGroup/members/member/callManager/ports/ethernetPhonePort")
        assert port == "5060"

    def test_configured_default_port(self, form: FieldRegistry) -> None:
        document = serialize(form, default_port="5080")
        assert document.findtext(".//ethernetPhonePort") == "5080"

    def test_explicit_port_wins(self, form: FieldRegistry) -> None:
        form.set_value("voipControlPort", "5070")
        assert serialize(form, default_port="5080").findtext(".//ethernetPhonePort") == "5070"


class TestConditionalEmission:
    """Elements gated on another field's state."""

    def test_nat_off_drops_stale_address(self, form: FieldRegistry) -> None:
        """NAT off: no natEnabled/natAddress even if an address was typed."""
        form.set_selected("natEnabled", 1)
        form.set_value("natAddress", "203.0.113.7")
        form.set_selected("natEnabled", 0)
        document = serialize(form)

        assert document.find("sipStack/natEnabled") is None
        assert document.find("sipStack/natAddress") is None

    def test_nat_on(self, form: FieldRegistry) -> None:
        form.set_selected("natEnabled", 1)
        form.set_value("natAddress", "203.0.113.7")
        document = serialize(form)

        assert document.findtext("sipStack/natEnabled") == "true"
        assert document.findtext("sipStack/natAddress") == "203.0.113.7"

    def test_nat_toggle_keeps_address(self, form: FieldRegistry) -> None:
        """Flipping NAT off and on again restores the element without retyping."""
        form.set_value("natAddress", "203.0.113.7")

        states = []
        for selected in (0, 1, 0):
            form.set_selected("natEnabled", selected)
            recompute(form, default_rules())
            states.append(serialize(form).findtext("sipStack/natAddress"))

        assert states == [None, "203.0.113.7", None]
        assert form.value("natAddress") == "203.0.113.7"

    @pytest.mark.parametrize(
        "controller, selected, element",
        [
            ("natEnabled", 1, "sipStack/natAddress"),
            ("snmpEnabled", 1, "vendorConfig/snmpCommunity"),
        ],
    )
    def test_gated_element_written_empty(
        self, form: FieldRegistry, controller: str, selected: int, element: str
    ) -> None:
        """Once the switch is on, the dependent element is written even if blank."""
        form.set_selected(controller, selected)
        assert serialize(form).findtext(element) == ""

    def test_snmp_toggle(self, form: FieldRegistry) -> None:
        """SNMP community follows the SNMP switch."""
        form.set_value("snmpCommunity", "public")
        off = serialize(form)
        assert off.find("vendorConfig/snmpEnable") is None
        assert off.find("vendorConfig/snmpCommunity") is None

        form.set_selected("snmpEnabled", 1)
        on = serialize(form)
        assert on.findtext("vendorConfig/snmpEnable") == "1"
        assert on.findtext("vendorConfig/snmpCommunity") == "public"

    def test_stop_port_needs_start_port(self, form: FieldRegistry) -> None:
        form.set_value("stopMediaPort", "32766")
        assert serialize(form).find("vendorConfig/stopMediaPort") is None

        form.set_value("startMediaPort", "16384")
        document = serialize(form)
        assert document.findtext("vendorConfig/startMediaPort") == "16384"
        assert document.findtext("vendorConfig/stopMediaPort") == "32766"

    def test_blank_stop_port_written_with_start_port(self, form: FieldRegistry) -> None:
        form.set_value("startMediaPort", "16384")
        assert serialize(form).findtext("vendorConfig/stopMediaPort") == ""

    def test_pc_vlan_id_needs_specific_mode(self, form: FieldRegistry) -> None:
        form.set_value("pcPortVlanId", "20")
        form.set_selected("pcVoiceVlanAccess", 1)
        assert serialize(form).find("ethernetConfig/pcPortVlanId") is None

        form.set_selected("pcVoiceVlanAccess", 2)
        assert serialize(form).findtext("ethernetConfig/pcPortVlanId") == "20"

    def test_empty_text_fields_skipped(self, form: FieldRegistry) -> None:
        """Blank optional settings are left to the phone's defaults."""
        vendor = serialize(form).find("vendorConfig")
        assert vendor.find("sshUserId") is None
        assert vendor.find("directoryURL") is None


class TestSipLines:
    """Tests for per-button line entries."""

    def test_disabled_button_omitted(self, form: FieldRegistry) -> None:
        form.set_selected("line1.lineType", 0)
        document = serialize(form)

        assert _line(document, 1) is None
        assert document.find("sipLines") is not None

    def test_line_button(self, form: FieldRegistry) -> None:
        """A Line button gets featureID 9 and its credentials."""
        form.set_value("line1.name", "1001")
        line = _line(serialize(form), 1)

        assert line is not None
        assert line.findtext("featureID") == "9"
        assert line.findtext("name") == "1001"
        assert line.find("authName") is not None
        assert line.find("authPassword") is not None
        assert line.find("autoAnswerEnabled") is None

    def test_speed_dial_button(self, form: FieldRegistry) -> None:
        """Non-line buttons get featureID 21 and no credentials."""
        form.set_selected("line2.lineType", 2)
        form.set_value("line2.name", "5551234")
        form.set_value("line2.authName", "stale")
        line = _line(serialize(form), 2)

        assert line.findtext("featureID") == "21"
        assert line.findtext("name") == "5551234"
        assert line.find("authName") is None
        assert line.find("voiceMailPilot") is None

    def test_auto_answer(self, form: FieldRegistry) -> None:
        form.set_selected("line1.autoAnswerEnabled", 1)
        line = _line(serialize(form), 1)

        assert line.findtext("autoAnswerEnabled") == "2"
        assert line.findtext("autoAnswerTimer") == "1"

    def test_voicemail_per_button(self, form: FieldRegistry) -> None:
        """Each button writes its own voicemail pilot."""
        form.set_selected("line2.lineType", 1)
        form.set_value("line1.voiceMailPilot", "8000")
        form.set_value("line2.voiceMailPilot", "8001")
        document = serialize(form)

        assert _line(document, 1).findtext("voiceMailPilot") == "8000"
        assert _line(document, 2).findtext("voiceMailPilot") == "8001"

    def test_buttons_in_order(self, form: FieldRegistry) -> None:
        for button in (2, 3, 4):
            form.set_selected(f"line{button}.lineType", 3)
        buttons = [line.get("button") for line in serialize(form).findall("sipLines/line")]
        assert buttons == ["1", "2", "3", "4"]


class TestEmissionTables:
    """Tests for predicates and the table interpreter."""

    def test_predicates(self, form: FieldRegistry) -> None:
        assert Selected("natEnabled", 0)(form) is True
        assert Selected("natEnabled", 0, negate=True)(form) is False
        assert Filled("processNodeName1")(form) is True
        assert Filled("processNodeName2")(form) is False
        assert Selected("line{button}.lineType", 1)(form, button=1) is True
        assert AllOf((Filled("device"), Selected("natEnabled", 1)))(form) is False

    def test_emit_counts_written_elements(self, form: FieldRegistry) -> None:
        parent = ET.Element("x")
        written = emit(parent, [field("deviceLabel"), field("timeZone")], form)

        assert written == 1
        assert [child.tag for child in parent] == ["timeZone"]

    def test_unknown_source_tag(self, form: FieldRegistry) -> None:
        """A table naming an undeclared tag is a hard error."""
        with pytest.raises(UnknownTagError):
            emit(ET.Element("x"), [field("ntpServerAddr")], form)


class TestWriteDocument:
    """Tests for writing the file."""

    def test_writes_named_file(self, form: FieldRegistry, tmp_path: Path) -> None:
        path = write_document(form, tmp_path)

        assert path == tmp_path / f"SEP{MAC}.cnf.xml"
        assert path.read_text(encoding="utf-8") == generate_xml(form)

    def test_short_identity_writes_nothing(self, registry: FieldRegistry, tmp_path: Path) -> None:
        """A MAC that normalizes to fewer than 12 characters is refused."""
        registry.set_value("device", "12")
        recompute(registry, default_rules())

        with pytest.raises(ShapeError) as excinfo:
            write_document(registry, tmp_path)
        assert "12 hex characters" in str(excinfo.value)
        assert list(tmp_path.iterdir()) == []

    def test_unwritable_destination(self, form: FieldRegistry, tmp_path: Path) -> None:
        """A missing directory is reported as a DestinationError."""
        with pytest.raises(DestinationError) as excinfo:
            write_document(form, tmp_path / "missing")
        assert isinstance(excinfo.value.cause, OSError)

    def test_failed_write_keeps_previous_file(
        self, form: FieldRegistry, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """A write that dies halfway leaves the earlier file intact and no temp file."""
        path = write_document(form, tmp_path)
        previous = path.read_text(encoding="utf-8")
        form.set_value("deviceLabel", "Reception")

        real_open = open

        def disk_full_open(file, *args, **kwargs):
            handle = real_open(file, *args, **kwargs)
            real_write = handle.write

            def write(text: str) -> int:
                real_write(text[:50])
                handle.flush()
                raise OSError(errno.ENOSPC, "No space left on device")

            handle.write = write
            return handle

        monkeypatch.setattr(xml_generator_module, "open", disk_full_open, raising=False)

        with pytest.raises(DestinationError) as excinfo:
            write_document(form, tmp_path)

        assert excinfo.value.cause.errno == errno.ENOSPC
        assert path.read_text(encoding="utf-8") == previous
        assert list(tmp_path.iterdir()) == [path]

"""The fixed form template for an 8945-class SIP phone.

Declares every field in display order, plus the visibility rules that
tie them together. Build order is display order only; nothing downstream
depends on the position of a field.
"""

from __future__ import annotations

import logging

from sepgen.lib.identity import normalize_identity
from sepgen.tui.constants import (
    BLUETOOTH_PROFILES,
    BUTTON_DISABLED,
    BUTTON_LINE,
    BUTTON_TYPES,
    CODECS,
    DATE_FORMATS,
    DEFAULT_TIME_ZONE,
    DISABLED_ENABLED,
    DND_ALERTS,
    IDENTITY_TAG,
    LINE_BUTTON_COUNT,
    NETWORK_LOCALES,
    NO_YES,
    PC_VLAN_MODES,
    PC_VLAN_SPECIFIC,
    SIP_PORT_TAG,
    TIME_FORMATS,
    TIME_ZONES,
    TRANSPORTS,
    USER_LOCALES,
    VIDEO_BITRATES,
    line_tag,
)
from sepgen.tui.models.field import FieldKind
from sepgen.tui.models.registry import FieldRegistry
from sepgen.tui.models.visibility import (
    ModeDependentRule,
    SingleDependentRule,
    VisibilityRule,
    group_rule,
)

logger = logging.getLogger(__name__)

MANDATORY = FieldKind.MANDATORY
OPTIONAL = FieldKind.OPTIONAL

# Sub-fields of a line button: shown for any enabled key function
LINE_COMMON_FIELDS = ("name", "displayName")
# Sub-fields only meaningful for a registered "Line"
LINE_ONLY_FIELDS = (
    "authName",
    "authPassword",
    "autoAnswerEnabled",
    "callForwardURI",
    "callPickupGroupURI",
    "voiceMailPilot",
)


def _identity_section(reg: FieldRegistry) -> None:
    reg.add_header("=== IDENTITY & NETWORK ===", "Core System Settings")
    reg.add_field(
        "MAC Address", IDENTITY_TAG, MANDATORY,
        "REQUIRED: The unique 12-char ID on the back of the phone.",
        normalizer=normalize_identity,
    )
    reg.add_field(
        "Phone Label", "deviceLabel", OPTIONAL,
        "Custom text shown in the top status bar (e.g. 'Reception').",
    )
    reg.add_field(
        "Primary PBX IP", "processNodeName1", MANDATORY,
        "REQUIRED: IP Address of your SIP Server / PBX (e.g. 192.168.1.10).",
    )
    reg.add_field(
        "Secondary PBX", "processNodeName2", OPTIONAL,
        "Backup Server IP (e.g. 192.168.1.11). Leave blank if none.",
    )
    reg.add_field(
        "Tertiary PBX", "processNodeName3", OPTIONAL,
        "Second Backup Server IP. Leave blank if none.",
    )
    reg.add_dropdown(
        "Transport", "transportLayerProtocol",
        "Network Protocol. UDP (Standard) is faster with lower overhead. Use "
        "TCP/TLS only if your provider requires reliable or encrypted signaling.",
        TRANSPORTS, 0,
    )
    reg.add_field(
        "Firmware Load", "loadInformation", OPTIONAL,
        "Specific firmware version to load (e.g. sip8941_45.9-4-2-13). Leave "
        "blank to use the default load defined in the TFTP server config.",
    )
    reg.add_field(
        "SIP Port", SIP_PORT_TAG, OPTIONAL,
        "Port for SIP Signaling. Default is 5060. Changing this may "
        "require firewall adjustments.",
    )


def _ethernet_section(reg: FieldRegistry) -> None:
    reg.add_header("=== ETHERNET & VLAN ===", "Network Layer 2 Settings")
    reg.add_field(
        "Voice VLAN ID", "adminVlanId", OPTIONAL,
        "VLAN ID for Voice traffic. Leave blank if Network Port is untagged.",
    )
    reg.add_dropdown(
        "PC Port VLAN Mode", "pcVoiceVlanAccess",
        "Determines which VLAN the computer connected to the phone will use.",
        PC_VLAN_MODES, 0,
    )
    reg.add_field(
        "PC VLAN ID", "pcPortVlanId", OPTIONAL,
        "Enter the VLAN ID for the computer (Data VLAN).",
    )
    reg.add_dropdown(
        "Span to PC", "spanToPCPort",
        "Advanced: Copies all phone audio/traffic to the PC port. Used for "
        "Wireshark/Packet Capture. WARNING: Can reduce network performance.",
        DISABLED_ENABLED, 0,
    )
    reg.add_dropdown(
        "Gratuitous ARP", "gratuitousARP",
        "Send ARP updates on boot. Critical for scenarios where the Router might "
        "not know where the phone is (e.g. redundant links). (Rec: Enabled)",
        DISABLED_ENABLED, 1,
    )
    reg.add_field(
        "MTU Size", "mtu", OPTIONAL,
        "Max Transmission Unit. 1500 is Ethernet Standard. Use 1300-1400 "
        "for VPNs to prevent packet fragmentation and dropped calls.",
    )


def _security_section(reg: FieldRegistry) -> None:
    reg.add_header("=== SECURITY & ACCESS ===", "Device Access Control")
    reg.add_dropdown(
        "Settings Lock", "settingsAccess",
        "Locks the 'Settings' menu on the phone screen to prevent changes.",
        DISABLED_ENABLED, 1,
    )
    reg.add_dropdown(
        "Web Access", "webAccess",
        "Enables the phone's web page for viewing/changing settings.",
        DISABLED_ENABLED, 1,
    )
    reg.add_dropdown(
        "SSH Access", "sshAccess",
        "Enables SSH for advanced remote administration.",
        DISABLED_ENABLED, 0,
    )
    reg.add_field("SSH Username", "sshUserId", OPTIONAL, "Username for SSH login.")
    reg.add_field("SSH Password", "sshPassword", OPTIONAL, "Password for SSH login.")
    reg.add_field(
        "Admin Password", "adminPassword", OPTIONAL,
        "Password to unlock the Settings menu or Web Interface.",
    )
    reg.add_dropdown(
        "PC Port", "pcPort", "Enable/Disable the PC Ethernet port.",
        DISABLED_ENABLED, 1,
    )


def _hardware_section(reg: FieldRegistry) -> None:
    reg.add_header("=== HARDWARE ===", "Physical Peripherals")
    reg.add_dropdown("Bluetooth", "bluetooth", "Enable Bluetooth Radio.", DISABLED_ENABLED, 1)
    reg.add_dropdown(
        "BT Profiles", "bluetoothProfile",
        "Allowed BT Profiles (Handsfree/Headset).",
        BLUETOOTH_PROFILES, 2,
    )


def _media_section(reg: FieldRegistry) -> None:
    reg.add_header("=== AUDIO & VIDEO ===", "Codecs and Call Quality")
    reg.add_dropdown(
        "Preferred Codec", "preferredCodec",
        "Audio quality. G.711 is standard. G.729 is compressed.",
        CODECS, 0,
    )
    reg.add_dropdown(
        "Advertise G.722", "advertiseG722Codec",
        "Advertise G.722 support for High Definition calls.",
        DISABLED_ENABLED, 1,
    )
    reg.add_field(
        "Audio DSCP", "dscpForAudio", OPTIONAL,
        "QoS Packet Tagging. 184 (EF - Expedited Forwarding) is the industry "
        "standard for Voice. Ensure your Switch/Router respects this tag.",
    )
    reg.add_field(
        "RTP Min Port", "startMediaPort", OPTIONAL,
        "Start of UDP Port range for Audio/Video. Default 16384. Ensure "
        "your Firewall allows this range inbound/outbound.",
    )
    reg.add_field(
        "RTP Max Port", "stopMediaPort", OPTIONAL,
        "End of UDP Port range for Audio/Video. Default 32766. Range must "
        "be large enough to handle concurrent calls.",
    )
    reg.add_dropdown(
        "Video Enable", "videoCapability",
        "Enable the built-in camera for video calls. Requires a PBX "
        "that supports Video (H.264).",
        NO_YES, 1,
    )
    reg.add_dropdown(
        "Start Video on Answer", "autoTransmitVideo",
        "Control if video starts automatically when you answer. 'No' "
        "provides privacy (Audio only) until you press the Video "
        "button. 'Yes' sends video immediately upon answering.",
        NO_YES, 0,
    )
    reg.add_dropdown(
        "Video Quality", "videoBitRate",
        "Max bandwidth/quality for Video. Select based on your upload "
        "speed. 1.5M+ recommended for HD 720p.",
        VIDEO_BITRATES, 2,
    )
    reg.add_field(
        "Video DSCP", "dscpForVideo", OPTIONAL,
        "QoS Tag for Video. 136 (AF41) is standard. Set lower priority "
        "than Audio to prioritize voice clarity.",
    )
    reg.add_dropdown(
        "RTCP Stats", "rtcp",
        "Send detailed call quality reports (Jitter/Latency "
        "constraints) to the SIP Server.",
        DISABLED_ENABLED, 1,
    )


def _features_section(reg: FieldRegistry) -> None:
    reg.add_header("=== FEATURES ===", "Do Not Disturb & User Features")
    reg.add_dropdown(
        "Do Not Disturb", "dndControl",
        "Show the 'Do Not Disturb' button on the main screen.",
        DISABLED_ENABLED, 1,
    )
    reg.add_dropdown(
        "DND Alert", "dndCallAlert",
        "How to notify you of incoming calls when DND is active.",
        DND_ALERTS, 1,
    )
    reg.add_field(
        "DND Timer", "dndReminderTimer", OPTIONAL,
        "Play a reminder tone every X minutes when DND is active.",
    )
    reg.add_dropdown(
        "NAT Enabled", "natEnabled",
        "Select 'Yes' if this phone is behind a home router/firewall. "
        "Essential for remote phones.",
        NO_YES, 0,
    )
    reg.add_field(
        "NAT Address", "natAddress", OPTIONAL,
        "The Public IP Address of your internet connection. PRO TIP: If you have "
        "'One-Way Audio' (can't hear caller), setting this usually fixes it.",
    )


def _monitoring_section(reg: FieldRegistry) -> None:
    reg.add_header("=== MONITORING ===", "SNMP & Syslog")
    reg.add_dropdown(
        "SNMP Enable", "snmpEnabled", "Enable Remote Monitoring.",
        DISABLED_ENABLED, 0,
    )
    reg.add_field("Community String", "snmpCommunity", OPTIONAL, "SNMP Password (e.g. public).")
    reg.add_field(
        "Syslog Server", "syslogAddr", OPTIONAL,
        "IP Address for sending Debug Logs (e.g. 192.168.1.50).",
    )


def _region_section(reg: FieldRegistry) -> None:
    reg.add_header("=== REGION & TIME ===", "Localization")
    reg.add_dropdown(
        "Language", "userLocale", "Screen Language (Load from Server).",
        USER_LOCALES, 0,
    )
    reg.add_dropdown(
        "Dial Tones", "networkLocale",
        "Sets the specific frequencies for Dial Tone, Busy Signal, and Ringback. "
        "Must match your region (e.g. US vs UK) or calls may sound 'wrong'.",
        NETWORK_LOCALES, 0,
    )
    reg.add_field(
        "Dial Plan", "dialTemplate", OPTIONAL,
        "Dialing Rules File (e.g. dialplan.xml).",
    )
    reg.add_dropdown("Time Zone", "timeZone", "Local Time Zone.", TIME_ZONES, DEFAULT_TIME_ZONE)
    reg.add_field(
        "NTP Server", "ntpServer", OPTIONAL,
        "Time Server IP (e.g. pool.ntp.org or 4.2.2.2).",
    )
    reg.add_dropdown("Date Format", "dateTemplate", "Display format.", DATE_FORMATS, 0)
    reg.add_dropdown("Time Format", "timeFormat", "Clock format.", TIME_FORMATS, 0)


def _urls_section(reg: FieldRegistry) -> None:
    reg.add_header("=== EXTERNAL URLS ===", "Integration Links")
    reg.add_field("Directory URL", "directoryURL", OPTIONAL, "URL for the Corporate Phonebook.")
    reg.add_field("Services URL", "servicesURL", OPTIONAL, "URL for the Services Menu.")
    reg.add_field("Auth URL", "authenticationURL", OPTIONAL, "URL for validating Services.")
    reg.add_field("Info URL", "informationURL", OPTIONAL, "URL for the '?' Help button.")
    reg.add_field(
        "Softkey Template", "softKeyFile", OPTIONAL,
        "XML file on TFTP server defining button layouts (e.g. "
        "softkeys.xml). Allows removing/reordering buttons like 'Redial'.",
    )
    reg.add_field(
        "Idle/Saver URL", "idleURL", OPTIONAL,
        "URL to an XML file for the screensaver. Activated when phone is "
        "idle for the Timeout duration.",
    )
    reg.add_field(
        "Saver Timeout", "idleTimeout", OPTIONAL,
        "Time in seconds before the screensaver starts (e.g. 300 = 5 "
        "Minutes). Set to 0 to disable.",
    )
    reg.add_field(
        "Wallpaper URL", "backgroundImage", OPTIONAL,
        "URL to a Background Image. SPECS: 640x480 resolution, PNG format, "
        "24-bit Color Depth. Other formats (JPG/BMP) will NOT work.",
    )


def _button_section(reg: FieldRegistry, button: int) -> None:
    reg.add_header(f"=== BUTTON {button} ===", "Line Configuration")
    reg.add_dropdown(
        "Key Function", line_tag(button, "lineType"),
        "Choose 'Line' for a standard extension, 'SpeedDial' for 1-touch "
        "calling, or 'BLF' to monitor if a colleague is on the phone.",
        BUTTON_TYPES, BUTTON_LINE if button == 1 else BUTTON_DISABLED,
        group=button,
    )
    reg.add_field(
        "Extension", line_tag(button, "name"), OPTIONAL,
        "The phone number for this line (e.g. 1001).", group=button,
    )
    reg.add_field(
        "Label", line_tag(button, "displayName"), OPTIONAL,
        "Label shown next to the button (e.g. 'Line 1').", group=button,
    )
    reg.add_field(
        "Auth ID", line_tag(button, "authName"), OPTIONAL,
        "SIP Username (Often the same as Extension, but check provider).",
        group=button,
    )
    reg.add_field(
        "SIP Password", line_tag(button, "authPassword"), OPTIONAL,
        "SIP Password for this extension.", group=button,
    )
    reg.add_dropdown(
        "Auto Answer", line_tag(button, "autoAnswerEnabled"),
        "If Enabled, the phone answers calls automatically on speaker.",
        DISABLED_ENABLED, 0, group=button,
    )
    reg.add_field(
        "Forward All", line_tag(button, "callForwardURI"), OPTIONAL,
        "Number to forward calls to unconditionally.", group=button,
    )
    reg.add_field(
        "Pickup Group", line_tag(button, "callPickupGroupURI"), OPTIONAL,
        "Code to dial to pick up a call ringing in your group.", group=button,
    )
    reg.add_field(
        "Voicemail #", line_tag(button, "voiceMailPilot"), OPTIONAL,
        "Number dialed when the 'Messages' button is pressed.", group=button,
    )


def build_registry() -> FieldRegistry:
    """Create a registry holding the full form with default selections.

    Visibility is not computed here; callers run
    :func:`sepgen.tui.models.visibility.recompute` with :func:`default_rules`.
    """
    reg = FieldRegistry()
    _identity_section(reg)
    _ethernet_section(reg)
    _security_section(reg)
    _hardware_section(reg)
    _media_section(reg)
    _features_section(reg)
    _monitoring_section(reg)
    _region_section(reg)
    _urls_section(reg)
    for button in range(1, LINE_BUTTON_COUNT + 1):
        _button_section(reg, button)

    logger.debug("Built form registry with %d fields", len(reg))
    return reg


def line_button_rule(button: int) -> VisibilityRule:
    """Key function of a button governs its sub-fields."""
    return group_rule(
        line_tag(button, "lineType"),
        shown_unless={line_tag(button, t): BUTTON_DISABLED for t in LINE_COMMON_FIELDS},
        shown_only_for={line_tag(button, t): BUTTON_LINE for t in LINE_ONLY_FIELDS},
        option_count=len(BUTTON_TYPES),
    )


def default_rules() -> list[VisibilityRule]:
    """Visibility rules for the form built by :func:`build_registry`."""
    rules: list[VisibilityRule] = [
        line_button_rule(button) for button in range(1, LINE_BUTTON_COUNT + 1)
    ]
    rules.extend([
        SingleDependentRule("snmpEnabled", "snmpCommunity", off_index=0),
        SingleDependentRule("natEnabled", "natAddress", off_index=0),
        ModeDependentRule("pcVoiceVlanAccess", "pcPortVlanId", target_index=PC_VLAN_SPECIFIC),
    ])
    return rules

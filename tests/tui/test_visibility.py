"""Tests for conditional visibility rules."""

from __future__ import annotations

import pytest

from sepgen.lib.errors import UnknownTagError
from sepgen.tui.constants import BUTTON_LINE, BUTTON_TYPES, LINE_BUTTON_COUNT, PC_VLAN_MODES
from sepgen.tui.models.registry import FieldRegistry
from sepgen.tui.models.schema import (
    LINE_COMMON_FIELDS,
    LINE_ONLY_FIELDS,
    build_registry,
    default_rules,
)
from sepgen.tui.models.visibility import (
    GroupRule,
    ModeDependentRule,
    SingleDependentRule,
    group_rule,
    hidden_tags,
    recompute,
    validate_rules,
)


def _snapshot(registry: FieldRegistry) -> list[bool]:
    return [field.hidden for field in registry]


class TestRules:
    """Tests for the individual rule types."""

    def test_single_dependent_rule(self, mini_registry: FieldRegistry) -> None:
        """Dependent is hidden exactly when the controller is at the off index."""
        rule = SingleDependentRule("mode", "detail")

        rule.apply(mini_registry)
        assert mini_registry.require("detail").hidden is True

        mini_registry.set_selected("mode", 1)
        rule.apply(mini_registry)
        assert mini_registry.require("detail").hidden is False

    def test_mode_dependent_rule(self) -> None:
        """Dependent is shown only for the target index."""
        reg = FieldRegistry()
        reg.add_dropdown("Mode", "mode", "", PC_VLAN_MODES, 0)
        reg.add_field("VLAN", "vlan")
        rule = ModeDependentRule("mode", "vlan", target_index=2)

        for index, expected_hidden in [(0, True), (1, True), (2, False)]:
            reg.set_selected("mode", index)
            rule.apply(reg)
            assert reg.require("vlan").hidden is expected_hidden

    def test_group_rule_members(self) -> None:
        """Each member of a group follows its own set of showing indices."""
        reg = FieldRegistry()
        reg.add_dropdown("Key", "key", "", BUTTON_TYPES, 0)
        reg.add_field("Name", "name")
        reg.add_field("Auth", "auth")
        rule = group_rule("key", shown_unless={"name": 0}, shown_only_for={"auth": BUTTON_LINE})

        expected = {0: (True, True), 1: (False, False), 2: (False, True), 3: (False, True)}
        for index, (name_hidden, auth_hidden) in expected.items():
            reg.set_selected("key", index)
            rule.apply(reg)
            assert reg.require("name").hidden is name_hidden
            assert reg.require("auth").hidden is auth_hidden

    def test_controller_cannot_depend_on_itself(self) -> None:
        """A controller may never hide itself."""
        with pytest.raises(ValueError):
            SingleDependentRule("mode", "mode")
        with pytest.raises(ValueError):
            ModeDependentRule("mode", "mode", target_index=1)
        with pytest.raises(ValueError):
            GroupRule("key", {"key": frozenset({1})})

    def test_validate_rules_unknown_tag(self, mini_registry: FieldRegistry) -> None:
        """Rules naming undeclared tags are rejected."""
        with pytest.raises(UnknownTagError):
            validate_rules(mini_registry, [SingleDependentRule("mode", "ghost")])

    def test_validate_rules_text_controller(self, mini_registry: FieldRegistry) -> None:
        """Controllers must be dropdowns."""
        with pytest.raises(ValueError, match="must be a dropdown"):
            validate_rules(mini_registry, [SingleDependentRule("detail", "other")])

    def test_default_rules_are_valid(self) -> None:
        """The shipped rule table matches the shipped form."""
        validate_rules(build_registry(), default_rules())


class TestRecompute:
    """Tests for recompute over the full form."""

    def test_default_visibility(self, registry: FieldRegistry) -> None:
        """Defaults hide NAT address, SNMP community, PC VLAN and buttons 2-4."""
        hidden = hidden_tags(registry)

        assert {"natAddress", "snmpCommunity", "pcPortVlanId"} <= hidden
        for element in LINE_COMMON_FIELDS + LINE_ONLY_FIELDS:
            assert f"line1.{element}" not in hidden
            for button in range(2, LINE_BUTTON_COUNT + 1):
                assert f"line{button}.{element}" in hidden
        assert len(hidden) == 3 + (LINE_BUTTON_COUNT - 1) * 8

    def test_idempotent(self, registry: FieldRegistry) -> None:
        """Running recompute twice changes nothing."""
        rules = default_rules()
        registry.set_selected("natEnabled", 1)
        registry.set_selected("line2.lineType", 2)

        recompute(registry, rules)
        first = _snapshot(registry)
        recompute(registry, rules)
        assert _snapshot(registry) == first

    def test_recompute_clears_stale_flags(self, registry: FieldRegistry) -> None:
        """Fields not governed by any rule end up visible."""
        registry.require("deviceLabel").hidden = True
        recompute(registry, default_rules())
        assert registry.require("deviceLabel").hidden is False

    def test_returns_hidden_count(self, registry: FieldRegistry) -> None:
        """The return value is the number of hidden fields."""
        count = recompute(registry, default_rules())
        assert count == len(hidden_tags(registry))

    @pytest.mark.parametrize("button", range(1, LINE_BUTTON_COUNT + 1))
    @pytest.mark.parametrize("key_index", range(len(BUTTON_TYPES)))
    def test_line_button_coverage(self, registry: FieldRegistry, button: int, key_index: int) -> None:
        """Every button sub-field is governed by its own key function only."""
        registry.set_selected(f"line{button}.lineType", key_index)
        recompute(registry, default_rules())

        for element in LINE_COMMON_FIELDS:
            assert registry.require(f"line{button}.{element}").hidden is (key_index == 0)
        for element in LINE_ONLY_FIELDS:
            assert registry.require(f"line{button}.{element}").hidden is (key_index != BUTTON_LINE)
        assert registry.require(f"line{button}.lineType").hidden is False

    def test_single_dependent_coverage(self, registry: FieldRegistry) -> None:
        """NAT and SNMP toggles show and hide exactly their dependent."""
        rules = default_rules()
        for controller, dependent in [("natEnabled", "natAddress"), ("snmpEnabled", "snmpCommunity")]:
            registry.set_selected(controller, 1)
            recompute(registry, rules)
            assert registry.require(dependent).hidden is False

            registry.set_selected(controller, 0)
            recompute(registry, rules)
            assert registry.require(dependent).hidden is True

    def test_mode_dependent_coverage(self, registry: FieldRegistry) -> None:
        """PC VLAN ID appears only for 'Tag with Specific VLAN'."""
        rules = default_rules()
        for index in range(len(PC_VLAN_MODES)):
            registry.set_selected("pcVoiceVlanAccess", index)
            recompute(registry, rules)
            assert registry.require("pcPortVlanId").hidden is (index != 2)

    def test_hiding_keeps_values(self, registry: FieldRegistry) -> None:
        """Hiding a field never clears what the operator typed."""
        registry.set_selected("natEnabled", 1)
        registry.set_value("natAddress", "203.0.113.7")
        registry.set_selected("natEnabled", 0)
        recompute(registry, default_rules())

        assert registry.require("natAddress").hidden is True
        assert registry.value("natAddress") == "203.0.113.7"

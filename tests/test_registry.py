"""Tests for tock.commands — contract registry and built-in command types."""

from __future__ import annotations

import pytest

from tests.conftest import make_api_command, make_command
from tock._errors import RegistryError
from tock.commands.builtin import default_registry
from tock.commands.registry import (
    CommandContract,
    CommandRegistry,
    default_search_text,
    payload_get,
)

BUILTIN_TYPES = (
    "log",
    "image",
    "display",
    "client.intro",
    "benchmark.report",
    "asyncStorage.mutation",
    "state.action.complete",
    "saga.task.complete",
    "state.values.change",
    "state.keys.response",
    "state.values.response",
    "state.backup.response",
    "api.response",
)


class TestRegistry:
    def test_resolve_registered(self) -> None:
        registry = CommandRegistry()
        contract = CommandContract("Thing", lambda c: "thing")
        registry.register("thing", contract)
        assert registry.resolve("thing") is contract
        assert "thing" in registry

    def test_resolve_unknown_is_none(self) -> None:
        assert CommandRegistry().resolve("nope") is None

    def test_duplicate_registration_rejected(self) -> None:
        registry = CommandRegistry()
        registry.register("thing", CommandContract("A", str))
        with pytest.raises(RegistryError, match="already registered"):
            registry.register("thing", CommandContract("B", str))

    def test_replace(self) -> None:
        registry = CommandRegistry()
        registry.register("thing", CommandContract("A", str))
        replacement = CommandContract("B", str)
        registry.register("thing", replacement, replace=True)
        assert registry.resolve("thing") is replacement

    def test_empty_type_rejected(self) -> None:
        with pytest.raises(RegistryError):
            CommandRegistry().register("", CommandContract("A", str))

    def test_unregister(self) -> None:
        registry = CommandRegistry()
        registry.register("thing", CommandContract("A", str))
        registry.unregister("thing")
        registry.unregister("never-registered")
        assert registry.resolve("thing") is None
        assert len(registry) == 0

    def test_groups_keep_registration_order(self) -> None:
        registry = CommandRegistry()
        registry.register("b", CommandContract("B", str, group="One"))
        registry.register("a", CommandContract("A", str, group="Two"))
        registry.register("c", CommandContract("C", str, group="One"))
        assert registry.groups() == {"One": ("b", "c"), "Two": ("a",)}

    def test_contract_search_extends_default_projection(self) -> None:
        contract = CommandContract("X", str, search=lambda c: ["extra"])
        command = make_command("x", {"message": "hi"})
        assert list(contract.search_text(command)) == ["x", "hi", "extra"]


class TestDefaultProjection:
    def test_common_paths(self) -> None:
        command = make_command(
            "custom",
            {"message": "m", "name": "n", "request": {"url": "u"}, "action": {"type": "T"}},
        )
        assert list(default_search_text(command)) == ["custom", "m", "n", "u", "T"]

    def test_non_string_values_skipped(self) -> None:
        command = make_command("custom", {"message": {"nested": True}, "name": 5})
        assert list(default_search_text(command)) == ["custom"]

    def test_payload_get(self) -> None:
        payload = {"a": {"b": {"c": 1}}}
        assert payload_get(payload, "a", "b", "c") == 1
        assert payload_get(payload, "a", "x", "c") is None
        assert payload_get(None, "a") is None


class TestBuiltins:
    def test_all_builtin_types_registered(self) -> None:
        assert default_registry().types() == BUILTIN_TYPES

    def test_groups(self) -> None:
        groups = default_registry().groups()
        assert groups["Network"] == ("api.response",)
        assert groups["Informational"] == ("log", "image", "display")
        assert "state.action.complete" in groups["State & Sagas"]

    def test_default_registries_are_independent(self) -> None:
        first = default_registry()
        first.unregister("log")
        assert default_registry().resolve("log") is not None

    @pytest.mark.parametrize("command_type", BUILTIN_TYPES)
    def test_renderers_tolerate_empty_payload(self, command_type: str) -> None:
        contract = default_registry().resolve(command_type)
        assert contract is not None
        assert isinstance(contract.render(make_command(command_type, {})), str)

    @pytest.mark.parametrize("command_type", BUILTIN_TYPES)
    def test_renderers_tolerate_non_mapping_payload(self, command_type: str) -> None:
        contract = default_registry().resolve(command_type)
        assert contract is not None
        assert isinstance(contract.render(make_command(command_type, "raw")), str)

    def test_render_log(self) -> None:
        contract = default_registry().resolve("log")
        command = make_command("log", {"level": "warn", "message": "careful"})
        assert contract.render(command) == "[warn] careful"  # type: ignore[union-attr]

    def test_render_api_response(self) -> None:
        contract = default_registry().resolve("api.response")
        command = make_api_command(method="post", url="http://x/y", status=201, duration=40)
        assert contract.render(command) == "POST http://x/y -> 201 (40ms)"  # type: ignore[union-attr]

    def test_render_action(self) -> None:
        contract = default_registry().resolve("state.action.complete")
        command = make_command("state.action.complete", {"name": "INCREMENT", "ms": 2})
        assert contract.render(command) == "action INCREMENT (2ms)"  # type: ignore[union-attr]

    def test_render_truncates_long_values(self) -> None:
        contract = default_registry().resolve("display")
        command = make_command("display", {"name": "Big", "value": "x" * 500})
        text = contract.render(command)  # type: ignore[union-attr]
        assert text.startswith("Big: ")
        assert text.endswith("...")
        assert len(text) < 100

    def test_state_change_paths_searchable(self) -> None:
        registry = default_registry()
        command = make_command(
            "state.values.change", {"changes": [{"path": "user.name", "value": "Ann"}]}
        )
        assert "user.name" in list(registry.search_text(command))

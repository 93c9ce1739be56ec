"""Tests for the event type registry and YAML loader."""

import textwrap
from pathlib import Path

import pytest

from eventlog.events import (
    EventConfigError,
    EventType,
    EventTypeLoader,
    EventTypeRegistry,
)
from eventlog.hooks import HookSpec


@pytest.fixture
def registry():
    return EventTypeRegistry()


def _write_types(path: Path, content: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(content))
    return path


def _module(tmp_path: Path, name: str, content: str) -> Path:
    module_dir = tmp_path / "modules" / name
    _write_types(module_dir / "config" / "event_types.yaml", content)
    return module_dir


# =============================================================================
# EventTypeRegistry tests
# =============================================================================


class TestRegister:
    def test_register_and_lookup(self, registry):
        assert registry.register("user_login", "User logged in", "Signed in", ["notify"])

        event_type = registry.lookup("user_login")
        assert event_type == EventType(
            slug="user_login",
            label="User logged in",
            description="Signed in",
            hooks=(HookSpec("notify"),),
        )

    def test_empty_slug_fails_without_raising(self, registry):
        assert registry.register("") is False
        assert len(registry) == 0

    def test_mapping_form(self, registry):
        assert registry.register({
            "slug": "password_changed",
            "label": "Password changed",
            "hooks": [{"name": "notify", "description": "Tell the user"}],
        })
        event_type = registry.lookup("password_changed")
        assert event_type.label == "Password changed"
        assert event_type.description == ""
        assert event_type.hooks == (HookSpec("notify", "Tell the user"),)

    def test_mapping_without_slug_fails(self, registry):
        assert registry.register({"label": "No slug"}) is False

    def test_second_registration_replaces_first(self, registry):
        registry.register("user_login", "Login", "Old", ["a", "b"])
        registry.register("user_login", "Signed in", "New", ["c"])

        event_type = registry.lookup("user_login")
        assert event_type.label == "Signed in"
        assert event_type.description == "New"
        assert [h.name for h in event_type.hooks] == ["c"]
        assert len(registry) == 1

    def test_replacing_keeps_original_position(self, registry):
        registry.register("a")
        registry.register("b")
        registry.register("a", "A again")
        assert list(registry.all()) == ["a", "b"]

    def test_single_hook_name_is_one_hook(self, registry):
        registry.register("user_login", hooks="notifyAdmins")
        assert registry.hooks_for("user_login") == [HookSpec("notifyAdmins")]

    def test_lookup_unknown(self, registry):
        assert registry.lookup("nope") is None
        assert "nope" not in registry


class TestListing:
    def test_all_in_registration_order(self, registry):
        for slug in ("zeta", "alpha", "mid"):
            registry.register(slug)
        assert list(registry.all()) == ["zeta", "alpha", "mid"]

    def test_all_returns_a_copy(self, registry):
        registry.register("a")
        registry.all().clear()
        assert "a" in registry

    def test_all_flat_uses_label(self, registry):
        registry.register("user_login", "User logged in")
        assert registry.all_flat() == {"user_login": "User logged in"}

    def test_all_flat_title_cases_slug_without_label(self, registry):
        registry.register("password_changed", "")
        assert registry.all_flat() == {"password_changed": "Password Changed"}

    def test_hooks_for(self, registry):
        registry.register("user_login", hooks=["first", "second"])
        assert [h.name for h in registry.hooks_for("user_login")] == ["first", "second"]
        assert registry.hooks_for("unknown") == []


# =============================================================================
# EventTypeLoader tests
# =============================================================================


class TestEventTypeLoader:
    def test_loads_modules_in_order(self, tmp_path):
        auth = _module(tmp_path, "auth", """
            event_types:
              - slug: user_login
                label: Logged in
              - slug: user_logout
        """)
        shop = _module(tmp_path, "shop", """
            event_types:
              - slug: order_placed
                hooks:
                  - notifyWarehouse
        """)

        registry = EventTypeLoader([auth, shop]).load()

        assert list(registry.all()) == ["user_login", "user_logout", "order_placed"]
        assert registry.hooks_for("order_placed") == [HookSpec("notifyWarehouse")]

    def test_later_module_overrides_earlier(self, tmp_path):
        first = _module(tmp_path, "first", """
            event_types:
              - slug: user_login
                label: From first
        """)
        second = _module(tmp_path, "second", """
            event_types:
              - slug: user_login
                label: From second
        """)

        registry = EventTypeLoader([first, second]).load()
        assert registry.lookup("user_login").label == "From second"

    def test_app_config_overrides_modules(self, tmp_path):
        auth = _module(tmp_path, "auth", """
            event_types:
              - slug: user_login
                label: Logged in
                hooks: [audit]
        """)
        app_config = _write_types(tmp_path / "config" / "event_types.yaml", """
            event_types:
              - slug: user_login
                label: Signed in
              - slug: report_exported
        """)

        registry = EventTypeLoader([auth], app_config).load()

        login = registry.lookup("user_login")
        assert login.label == "Signed in"
        assert login.hooks == ()
        assert "report_exported" in registry

    def test_missing_files_are_ignored(self, tmp_path):
        registry = EventTypeLoader(
            [tmp_path / "no_such_module"], tmp_path / "missing.yaml"
        ).load()
        assert len(registry) == 0

    def test_empty_file_is_ignored(self, tmp_path):
        module = _module(tmp_path, "empty", "")
        assert len(EventTypeLoader([module]).load()) == 0

    def test_populates_given_registry(self, tmp_path):
        registry = EventTypeRegistry()
        registry.register("manual")
        module = _module(tmp_path, "m", """
            event_types:
              - slug: from_yaml
        """)

        result = EventTypeLoader([module]).load(registry)

        assert result is registry
        assert list(registry.all()) == ["manual", "from_yaml"]

    def test_entry_without_slug_is_skipped(self, tmp_path, caplog):
        module = _module(tmp_path, "m", """
            event_types:
              - label: Nameless
              - slug: named
        """)
        registry = EventTypeLoader([module]).load()
        assert list(registry.all()) == ["named"]
        assert "without a slug" in caplog.text

    def test_invalid_yaml_raises(self, tmp_path):
        module = _module(tmp_path, "bad", "event_types: [unclosed\n")
        with pytest.raises(EventConfigError, match="Invalid YAML"):
            EventTypeLoader([module]).load()

    def test_non_list_raises(self, tmp_path):
        module = _module(tmp_path, "bad", """
            event_types:
              user_login: Logged in
        """)
        with pytest.raises(EventConfigError, match="must be a list"):
            EventTypeLoader([module]).load()

    def test_hooks_must_be_a_list(self, tmp_path):
        module = _module(tmp_path, "bad", """
            event_types:
              - slug: user_login
                hooks: notifyAdmins
        """)
        with pytest.raises(EventConfigError, match="'hooks' for event type 'user_login'.*must be a list"):
            EventTypeLoader([module]).load()

    def test_hook_mapping_without_name_raises(self, tmp_path):
        module = _module(tmp_path, "bad", """
            event_types:
              - slug: user_login
                hooks:
                  - description: Nameless hook
        """)
        with pytest.raises(EventConfigError, match="needs a name"):
            EventTypeLoader([module]).load()

    def test_blank_hook_name_raises(self, tmp_path):
        module = _module(tmp_path, "bad", """
            event_types:
              - slug: user_login
                hooks: [""]
        """)
        with pytest.raises(EventConfigError, match="needs a name"):
            EventTypeLoader([module]).load()

    def test_top_level_must_be_a_mapping(self, tmp_path):
        module = _module(tmp_path, "bad", """
            - slug: user_login
        """)
        with pytest.raises(EventConfigError, match="must be a mapping"):
            EventTypeLoader([module]).load()

"""Tests for service wiring and the create_event helper."""

import sys
import textwrap
import uuid

import pytest
from sqlalchemy import text

from eventlog.auth import ActorContext, acting_as
from eventlog.config import Settings
from eventlog.events import EventConfigError, EventService, UnrecognisedEventTypeError
from eventlog.hooks import HookRegistry, event_hook
from eventlog.persistence import DatabaseConfig
from eventlog.services import (
    build_event_service,
    create_event,
    get_event_service,
    set_event_service,
)


@pytest.fixture
def app_config(tmp_path):
    path = tmp_path / "config" / "event_types.yaml"
    path.parent.mkdir(parents=True)
    path.write_text(textwrap.dedent("""
        event_types:
          - slug: user_login
            label: User logged in
          - slug: invoice_sent
            hooks:
              - name: recordInvoice
                description: Keep a copy of the invoice event
    """))
    return path


@pytest.fixture
def settings(tmp_path, app_config):
    return Settings(
        database=DatabaseConfig(f"sqlite:///{tmp_path / 'data' / 'eventlog.db'}"),
        app_config_path=app_config,
    )


class TestBuildEventService:
    def test_loads_types_and_syncs_table(self, settings):
        service = build_event_service(settings)

        assert list(service.get_all_types()) == ["user_login", "invoice_sent"]
        with service._store._engine.connect() as conn:
            slugs = conn.execute(text("SELECT slug FROM event_type ORDER BY id")).scalars().all()
        assert slugs == ["user_login", "invoice_sent"]

    def test_creates_database_directory(self, settings, tmp_path):
        build_event_service(settings)
        assert (tmp_path / "data" / "eventlog.db").exists()

    def test_registers_builtin_hooks(self, settings):
        build_event_service(settings)
        assert HookRegistry.is_registered("logEvent")

    def test_imports_hook_modules(self, settings, tmp_path, monkeypatch):
        name = f"invoice_hooks_{uuid.uuid4().hex}"
        (tmp_path / f"{name}.py").write_text(textwrap.dedent("""
            from eventlog.hooks import event_hook

            SEEN = []

            @event_hook("recordInvoice")
            def record_invoice(event_type, event_data):
                SEEN.append(event_data["ref"])
        """))
        monkeypatch.syspath_prepend(str(tmp_path))
        settings.hook_modules = [name]

        service = build_event_service(settings)
        service.create("invoice_sent", ref=5)

        assert HookRegistry.get("recordInvoice").__module__ == name
        assert sys.modules[name].SEEN == [5]

    def test_missing_hook_module_raises(self, settings):
        settings.hook_modules = ["no_such_module_for_eventlog"]
        with pytest.raises(EventConfigError, match="Could not import hook module"):
            build_event_service(settings)

    def test_uses_configured_environment(self, settings):
        settings.environment = "production"
        service = build_event_service(settings)
        with acting_as(ActorContext(user_id=1, was_admin=True)):
            assert service.create("user_login") is True
        assert service.count_all() == 0


class TestCreateEvent:
    def test_uses_installed_service(self, settings):
        service = build_event_service(settings)
        set_event_service(service)

        event_id = create_event("user_login", {"ip": "127.0.0.1"}, ref=12)

        event = service.get_by_id(event_id)
        assert event.data == {"ip": "127.0.0.1"}
        assert event.ref == 12

    def test_fires_registered_hooks(self, settings):
        seen = []

        @event_hook("recordInvoice")
        def record_invoice(event_type, event_data):
            seen.append((event_type, event_data["ref"]))

        set_event_service(build_event_service(settings))
        create_event("invoice_sent", ref=99)

        assert seen == [("invoice_sent", 99)]

    def test_credits_acting_user(self, settings):
        service = build_event_service(settings)
        set_event_service(service)

        with acting_as(ActorContext(user_id=8, url="/invoices/3")):
            event_id = create_event("user_login")

        event = service.get_by_id(event_id)
        assert event.user.id == 8
        assert event.url == "/invoices/3"

    def test_unknown_type_raises(self, settings):
        set_event_service(build_event_service(settings))
        with pytest.raises(UnrecognisedEventTypeError):
            create_event("never_registered")

    def test_builds_service_from_environment(self, tmp_path, app_config, monkeypatch):
        monkeypatch.chdir(tmp_path)
        monkeypatch.delenv("DATABASE_URL", raising=False)
        monkeypatch.delenv("EVENTLOG_APP_CONFIG", raising=False)
        monkeypatch.delenv("EVENTLOG_MODULES", raising=False)
        monkeypatch.delenv("EVENTLOG_ENV", raising=False)
        monkeypatch.delenv("EVENTLOG_HOOK_MODULES", raising=False)
        monkeypatch.setenv("EVENTLOG_DB_PATH", str(tmp_path / "env.db"))

        event_id = create_event("user_login")

        service = get_event_service()
        assert isinstance(service, EventService)
        assert service.get_by_id(event_id).type.label == "User logged in"
        assert (tmp_path / "env.db").exists()

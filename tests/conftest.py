import pytest

from habitar.config import get_settings
from tests.fakes import RecordingNotifier, make_client


@pytest.fixture(autouse=True)
def settings_env(monkeypatch):
    monkeypatch.setenv("SUPABASE_URL", "https://project.supabase.test")
    monkeypatch.setenv("SUPABASE_KEY", "anon-key")
    monkeypatch.setenv("WEBHOOK_URL", "https://hooks.test/invite")
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def supabase():
    """(SupabaseClient, FakeClient) compartiendo las mismas tablas."""
    return make_client()


@pytest.fixture
def client(supabase):
    return supabase[0]


@pytest.fixture
def fake(supabase):
    return supabase[1]


@pytest.fixture
def notifier():
    return RecordingNotifier()

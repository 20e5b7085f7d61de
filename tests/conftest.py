import pytest
import structlog

from plugfetch.kernel.artifacts import Artifact, HostVersion, Platform


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep every test's app data directory inside tmp_path."""
    home = tmp_path / "plugfetch-home"
    monkeypatch.setenv("PLUGFETCH_HOME", str(home))
    yield home


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


@pytest.fixture
def host_version():
    return HostVersion.parse("1.20.4-R0.1-SNAPSHOT")


@pytest.fixture
def make_artifact(tmp_path):
    """Builds an Artifact whose destination lives under tmp_path."""
    def _make(name="Example", activate=False, **candidates):
        return Artifact(
            name=name,
            candidates={Platform.parse(k): v for k, v in candidates.items()},
            destination=tmp_path / "plugins" / f"{name}.jar",
            activate_after_fetch=activate,
        )
    return _make

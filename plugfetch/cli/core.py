"""
Core, reusable logic for CLI commands.
Responsible ONLY for wiring adapters into the kernel and running a batch.
"""
from pathlib import Path
from typing import Optional

from plugfetch.adapters.activation import ActivationBridge
from plugfetch.adapters.http_client import ApiClient
from plugfetch.adapters.platforms import default_resolvers
from plugfetch.adapters.storage_fs import Fetcher
from plugfetch.internal import paths
from plugfetch.internal.constants import READ_TIMEOUT_SECONDS
from plugfetch.internal.logging import get_logger
from plugfetch.kernel.artifacts import Artifact, CascadeResult, HostVersion
from plugfetch.kernel.batch import BatchCoordinator
from plugfetch.kernel.cascade import CascadeEngine

logger = get_logger(__name__)


def build_engine(
    client: ApiClient,
    host_version: HostVersion,
    activation: Optional[ActivationBridge] = None,
) -> CascadeEngine:
    return CascadeEngine(
        resolvers=default_resolvers(client),
        fetcher=Fetcher(client),
        host_version=host_version,
        activation=activation,
    )


def run_batch(
    artifacts: list[Artifact],
    host_version: HostVersion,
    app_name: str,
    app_version: str,
    timeout: Optional[float] = None,
    activation: Optional[ActivationBridge] = None,
) -> list[CascadeResult]:
    """
    Resolve and fetch every artifact, blocking until the whole batch is done.
    """
    client = ApiClient(app_name, app_version, read_timeout=timeout or READ_TIMEOUT_SECONDS)
    try:
        engine = build_engine(client, host_version, activation)
        logger.info("Processing plugins", total=len(artifacts), host_version=str(host_version))
        return BatchCoordinator(engine, artifacts, on_worker_exit=client.release).run()
    finally:
        client.close()


def default_destination(dest_dir: Optional[Path]) -> Path:
    return Path(dest_dir) if dest_dir else paths.get_plugins_dir()

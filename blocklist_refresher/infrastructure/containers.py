"""
Dependency Injection container for the blocklist refresher.

This container uses the `dependency-injector` library to wire together all
the components of the application, such as services and infrastructure adapters,
based on the application's configuration.
"""

from dependency_injector import containers, providers
import httpx

from ..application.domain import *
from ..application.service import RefresherService
from ..settings import load_settings

from .fetcher import HttpFetcher
from .installer import AtomicFileInstaller
from .settings_models import (
    LoggingSettings,
    PathSettings,
    RefreshSettings,
    SupervisorSettings,
    load_section,
)
from .supervisor import ProcessSupervisor


class Container(containers.DeclarativeContainer):
    """DI container for wiring the application components."""

    cli_args = providers.Configuration()

    config = providers.Singleton(load_settings)

    logging_settings = providers.Singleton(
        load_section, config, "logging", LoggingSettings
    )
    refresh_settings = providers.Singleton(
        load_section, config, "refresh", RefreshSettings
    )
    path_settings = providers.Singleton(
        load_section, config, "paths", PathSettings
    )
    supervisor_settings = providers.Singleton(
        load_section, config, "supervisor", SupervisorSettings
    )

    http_client = providers.Singleton(httpx.AsyncClient, follow_redirects=True)

    fetcher: providers.Factory[Fetcher] = providers.Factory(
        HttpFetcher,
        client=http_client,
        base_url=refresh_settings.provided.base_url,
        timeout=refresh_settings.provided.timeout_seconds,
        user_agent=refresh_settings.provided.user_agent,
    )

    installer: providers.Factory[Installer] = providers.Factory(
        AtomicFileInstaller,
    )

    supervisor: providers.Factory[Supervisor] = providers.Factory(
        ProcessSupervisor,
        stream_limit=supervisor_settings.provided.stream_limit_bytes,
    )

    refresher_service = providers.Factory(
        RefresherService,
        fetcher=fetcher,
        installer=installer,
        supervisor=supervisor,
        install_dir=cli_args.install_dir,
        show_progress=refresh_settings.provided.show_progress,
    )

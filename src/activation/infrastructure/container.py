"""Dependency injection container for the activation engine."""

from dependency_injector import containers, providers

from src.activation.application.dispatcher import ActivationDispatcher
from src.activation.application.rule_evaluator import RuleEvaluator
from src.activation.domain.models import DispatchConfig
from src.activation.infrastructure.activation_log import create_activation_log
from src.activation.infrastructure.clock import SystemClock
from src.activation.infrastructure.profile_source import FileProfileSource
from src.activation.infrastructure.system_probe import SystemNetworkProbe
from src.config import AppConfig


class ActivationContainer(containers.DeclarativeContainer):
    """Dependency injection container for the activation engine."""

    config = providers.Configuration()

    # Infrastructure
    probe = providers.Singleton(
        SystemNetworkProbe,
        timeout_secs=config.probe.timeout_secs,
        sysfs_root=config.probe.sysfs_root,
        nmcli_path=config.probe.nmcli_path,
        ip_path=config.probe.ip_path,
        ping_path=config.probe.ping_path,
    )

    clock = providers.Singleton(SystemClock)

    profile_source = providers.Singleton(FileProfileSource, path=config.profiles.path)

    activation_log = providers.Singleton(
        create_activation_log,
        csv_path=config.history.csv_path,
        buffer_size=config.history.buffer_size,
        max_events=config.history.max_events,
    )

    # Application
    evaluator = providers.Singleton(
        RuleEvaluator,
        probe=probe,
        clock=clock,
        regex_size_limit=config.autoswitch.regex_size_limit,
    )

    dispatch_config = providers.Factory(
        DispatchConfig,
        schedule_interval_secs=config.scheduler.interval_secs,
        rule_interval_secs=config.autoswitch.interval_secs,
        scheduling_enabled=config.scheduler.enabled,
        auto_switch_enabled=config.autoswitch.enabled,
    )

    # The activate callback is supplied by the caller: container.dispatcher(activate=...)
    dispatcher = providers.Factory(
        ActivationDispatcher,
        evaluator=evaluator,
        profile_source=profile_source,
        schedule_source=profile_source,
        clock=clock,
        config=dispatch_config,
        activation_log=activation_log,
    )


# Global container instance
_container: ActivationContainer | None = None


def init_container(config: AppConfig | None = None) -> ActivationContainer:
    """Initialize the global container."""
    global _container
    _container = ActivationContainer()
    _container.config.from_pydantic(config or AppConfig())
    return _container


def get_container() -> ActivationContainer:
    """Get the global container instance."""
    if _container is None:
        raise RuntimeError("Container not initialized. Call init_container() first.")
    return _container

from dishka import Container, Provider, from_context, make_container, provide

from kubecatalog.config import Config
from kubecatalog.domain.catalog.service.transform import TransformService
from kubecatalog.infrastructure.discovery import create_discovery
from kubecatalog.sdk.discovery import ResourceDiscovery
from kubecatalog.util.di.scope import Scope


class TransformProvider(Provider):
    config = from_context(provides=Config, scope=Scope.APP)
    transform_service = provide(TransformService, scope=Scope.RUN)

    @provide(scope=Scope.APP)
    def get_discovery(self, config: Config) -> ResourceDiscovery:
        """Instantiate the configured discovery backend.

        Backends are found via entry points and their configuration is
        validated against the backend's config_class.
        """
        return create_discovery(config.discovery)


def create_container(config: Config | None = None) -> Container:
    # Pydantic Settings populates from env vars and the YAML file at runtime
    if config is None:
        config = Config()

    return make_container(
        TransformProvider(),
        context={Config: config},
        scopes=Scope,  # type: ignore[arg-type]  # Custom scope class
    )

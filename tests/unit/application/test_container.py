"""Tests for the dependency injection container."""

import pytest

from kubecatalog.application.di import create_container
from kubecatalog.config import Config, DiscoveryConfig
from kubecatalog.domain.catalog.service.transform import TransformService
from kubecatalog.domain.shared.error import ConfigurationError
from kubecatalog.infrastructure.discovery.file import FileDiscovery
from kubecatalog.sdk.discovery import ResourceDiscovery


class TestContainer:
    def test_transform_service_per_run(self, config: Config) -> None:
        container = create_container(config)
        try:
            with container() as run:
                service = run.get(TransformService)
                assert service.config is config
        finally:
            container.close()

    def test_discovery_backend(self, tmp_path, monkeypatch: pytest.MonkeyPatch) -> None:
        """The backend is resolved through the registry with the configured settings."""
        monkeypatch.setattr(
            "kubecatalog.infrastructure.discovery.registry.discover_backends",
            lambda: {"file": FileDiscovery},
        )
        config = Config(discovery=DiscoveryConfig(backend="file", config={"paths": [str(tmp_path)]}))
        container = create_container(config)
        try:
            assert isinstance(container.get(ResourceDiscovery), FileDiscovery)
        finally:
            container.close()

    def test_unknown_backend(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr(
            "kubecatalog.infrastructure.discovery.registry.discover_backends",
            lambda: {"file": FileDiscovery},
        )
        container = create_container(Config(discovery=DiscoveryConfig(backend="nope")))
        try:
            with pytest.raises(ConfigurationError):
                container.get(ResourceDiscovery)
        finally:
            container.close()

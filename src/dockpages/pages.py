"""Page definitions for each Docker resource kind."""

from typing import List, Optional

from .backend import DockerBackend
from .config import ConfigManager, config_manager
from .dialog import BooleanOptions, DeleteImageOptions
from .model import ContainerInfo, ImageInfo, NetworkInfo, VolumeInfo
from .page import ActionBinding, NavigationKeys, ResourcePage


def _navigation(config: ConfigManager) -> NavigationKeys:
    return NavigationKeys(
        up=config.get_keys("up"),
        down=config.get_keys("down"),
        first=config.get_keys("first"),
        last=config.get_keys("last"),
    )


def containers_page(docker_backend: DockerBackend,
                    config: ConfigManager = config_manager) -> ResourcePage[ContainerInfo]:
    bindings = [
        ActionBinding(
            keys=config.get_keys("delete"),
            capability="remove",
            label="delete",
            confirm=True,
            prompt=lambda c: f"Are you sure you wish to delete container {c.id}, running {c.image}?",
        ),
        ActionBinding(keys=config.get_keys("start"), capability="start", label="run"),
        ActionBinding(keys=config.get_keys("stop"), capability="stop", label="stop"),
        ActionBinding(keys=config.get_keys("attach"), capability="attach", label="attach"),
    ]
    return ResourcePage(
        "Containers",
        docker_backend.containers,
        bindings,
        decision_options=BooleanOptions,
        navigation=_navigation(config),
    )


def images_page(docker_backend: DockerBackend,
                config: ConfigManager = config_manager) -> ResourcePage[ImageInfo]:
    bindings = [
        ActionBinding(
            keys=config.get_keys("image_delete"),
            capability="remove",
            label="delete",
            confirm=True,
            prompt=lambda i: f"Are you sure you wish to delete image {i.name}:{i.tag} ({i.short_id})?",
        ),
        ActionBinding(keys=config.get_keys("run"), capability="start", label="run"),
    ]
    filters = {"dangling": False} if config.get_config().docker.hide_dangling_images else None
    return ResourcePage(
        "Images",
        docker_backend.images,
        bindings,
        decision_options=DeleteImageOptions,
        navigation=_navigation(config),
        filters=filters,
    )


def volumes_page(docker_backend: DockerBackend,
                 config: ConfigManager = config_manager) -> ResourcePage[VolumeInfo]:
    bindings = [
        ActionBinding(
            keys=config.get_keys("delete"),
            capability="remove",
            label="delete",
            confirm=True,
            prompt=lambda v: f"Are you sure you wish to delete volume {v.name}?",
        ),
    ]
    return ResourcePage("Volumes", docker_backend.volumes, bindings, navigation=_navigation(config))


def networks_page(docker_backend: DockerBackend,
                  config: ConfigManager = config_manager) -> ResourcePage[NetworkInfo]:
    bindings = [
        ActionBinding(
            keys=config.get_keys("delete"),
            capability="remove",
            label="delete",
            confirm=True,
            prompt=lambda n: f"Are you sure you wish to delete network {n.name} ({n.id[:12]})?",
        ),
    ]
    return ResourcePage("Networks", docker_backend.networks, bindings, navigation=_navigation(config))


def build_pages(docker_backend: DockerBackend,
                config: Optional[ConfigManager] = None) -> List[ResourcePage]:
    config = config or config_manager
    return [
        containers_page(docker_backend, config),
        images_page(docker_backend, config),
        volumes_page(docker_backend, config),
        networks_page(docker_backend, config),
    ]

"""
Docker API wrapper implementing the resource backend capability set.

Pages only ever talk to a ResourceBackend: list/start/stop/remove/attach on
opaque identifiers. This module provides the abstract interface and one
implementation per resource kind on top of the docker-py library:
  - ContainerBackend: list, start, stop, remove, attach
  - ImageBackend: list, remove, start (runs a new detached container)
  - VolumeBackend / NetworkBackend: list, remove

All concrete backends share a single docker.DockerClient owned by
DockerBackend.

Error Handling:
  Every Docker call goes through @docker_errors, which logs the failure and
  re-raises it as one of the typed errors in errors.py:
  - docker.errors.NotFound        -> NotFound
  - HTTP 409 / 403                -> Conflict
  - HTTP 401                      -> Unauthorized
  - DockerException / OSError     -> Unreachable (daemon down, socket gone)
  - anything else                 -> UnknownBackendError

Calls are blocking; pages run them through asyncio.to_thread.
"""

import abc
import functools
import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional

import docker

from .errors import (
    BackendError,
    Conflict,
    NotFound,
    Unauthorized,
    UnknownBackendError,
    Unreachable,
    Unsupported,
)
from .model import ContainerInfo, ImageInfo, NetworkInfo, PortMapping, VolumeInfo

logger = logging.getLogger(__name__)

ATTACH_TAIL_LINES = 200


def docker_errors(func: Callable) -> Callable:
    """
    Decorator translating docker-py exceptions into backend errors.

    Usage:
        @docker_errors
        def stop(self, resource_id: str) -> None:
            ...
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Any:
        try:
            return func(*args, **kwargs)
        except BackendError:
            raise
        except docker.errors.NotFound as e:
            logger.warning(f"{func.__name__}: resource not found: {e}")
            raise NotFound(str(e)) from e
        except docker.errors.APIError as e:
            status = e.status_code
            logger.error(f"Docker API error in {func.__name__} (HTTP {status}): {e}")
            if status in (403, 409):
                raise Conflict(str(e)) from e
            if status == 401:
                raise Unauthorized(str(e)) from e
            raise UnknownBackendError(str(e)) from e
        except (docker.errors.DockerException, OSError) as e:
            logger.error(f"Docker daemon unreachable in {func.__name__}: {e}", exc_info=True)
            raise Unreachable(str(e)) from e
        except Exception as e:
            logger.error(f"Docker operation failed in {func.__name__}: {e}", exc_info=True)
            raise UnknownBackendError(str(e)) from e
    return wrapper


def format_created(value: Any) -> str:
    """Format a Docker creation time (epoch seconds or RFC 3339 string)."""
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value).strftime("%Y-%m-%d %H:%M:%S")
    if isinstance(value, str) and value:
        return value[:19].replace("T", " ")
    return ""


def format_size(size_bytes: Optional[int]) -> str:
    return f"{(size_bytes or 0) / (1024 * 1024):.1f}MB"


class ResourceBackend(abc.ABC):
    """Capability set consumed by pages.

    list() and remove() are mandatory. The remaining capabilities raise
    Unsupported unless a resource kind provides them.
    """

    kind = "resource"

    @abc.abstractmethod
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Any]:
        ...

    @abc.abstractmethod
    def remove(self, resource_id: str, force: bool = False) -> None:
        ...

    def start(self, resource_id: str) -> Any:
        raise Unsupported(f"cannot start a {self.kind}")

    def stop(self, resource_id: str) -> Any:
        raise Unsupported(f"cannot stop a {self.kind}")

    def attach(self, resource_id: str) -> Any:
        raise Unsupported(f"cannot attach to a {self.kind}")


class DockerBackend:
    """Owns the Docker client shared by every resource backend."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[int] = None,
                 show_all_containers: bool = True):
        try:
            if base_url:
                kwargs = {"base_url": base_url}
                if timeout:
                    kwargs["timeout"] = timeout
                self.client = docker.DockerClient(**kwargs)
            elif timeout:
                self.client = docker.from_env(timeout=timeout)
            else:
                self.client = docker.from_env()
        except Exception as e:
            logger.error(f"Could not connect to Docker: {e}")
            self.client = None

        self.containers = ContainerBackend(self, show_all=show_all_containers)
        self.images = ImageBackend(self)
        self.volumes = VolumeBackend(self)
        self.networks = NetworkBackend(self)

    def require_client(self) -> "docker.DockerClient":
        if self.client is None:
            raise Unreachable("Docker daemon not connected")
        return self.client


class _DockerResourceBackend(ResourceBackend):
    def __init__(self, docker_backend: DockerBackend):
        self._docker = docker_backend

    @property
    def client(self) -> "docker.DockerClient":
        return self._docker.require_client()


class ContainerBackend(_DockerResourceBackend):
    kind = "container"

    def __init__(self, docker_backend: DockerBackend, show_all: bool = True):
        super().__init__(docker_backend)
        self.show_all = show_all

    @docker_errors
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[ContainerInfo]:
        # sparse=True keeps the /containers/json summary instead of one inspect per container
        raw = self.client.containers.list(all=self.show_all, filters=filters, sparse=True)
        return [_container_from_summary(c.attrs) for c in raw]

    @docker_errors
    def start(self, resource_id: str) -> None:
        container = self.client.containers.get(resource_id)
        if container.status == "running":
            raise Conflict(f"container {container.short_id} is already running")
        container.start()
        logger.info(f"Started container {resource_id}")

    @docker_errors
    def stop(self, resource_id: str) -> None:
        container = self.client.containers.get(resource_id)
        if container.status != "running":
            raise Conflict(f"container {container.short_id} is not running")
        container.stop()
        logger.info(f"Stopped container {resource_id}")

    @docker_errors
    def remove(self, resource_id: str, force: bool = False) -> None:
        self.client.containers.get(resource_id).remove(force=force)
        logger.info(f"Removed container {resource_id} (force={force})")

    @docker_errors
    def attach(self, resource_id: str) -> List[str]:
        """Attach without streaming and return the container's recent output."""
        container = self.client.containers.get(resource_id)
        if container.status != "running":
            raise Conflict(f"container {container.short_id} is not running")
        raw = container.attach(stdout=True, stderr=True, stream=False, logs=True)
        lines = raw.decode('utf-8', errors='replace').splitlines()
        return lines[-ATTACH_TAIL_LINES:]


class ImageBackend(_DockerResourceBackend):
    kind = "image"

    @docker_errors
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[ImageInfo]:
        raw = self.client.images.list(filters=filters)
        return [_image_from_attrs(i.attrs) for i in raw]

    @docker_errors
    def remove(self, resource_id: str, force: bool = False) -> None:
        self.client.images.remove(image=resource_id, force=force)
        logger.info(f"Removed image {resource_id} (force={force})")

    @docker_errors
    def start(self, resource_id: str) -> str:
        """Run a new detached container from the image, returning its short id."""
        container = self.client.containers.run(resource_id, detach=True)
        logger.info(f"Started container {container.short_id} from image {resource_id}")
        return container.short_id


class VolumeBackend(_DockerResourceBackend):
    kind = "volume"

    @docker_errors
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[VolumeInfo]:
        res = []
        for v in self.client.volumes.list(filters=filters):
            attrs = v.attrs
            res.append(VolumeInfo(
                id=attrs.get('Name', v.name),
                name=attrs.get('Name', v.name),
                driver=attrs.get('Driver', 'local'),
                mountpoint=attrs.get('Mountpoint', 'n/a'),
            ))
        return res

    @docker_errors
    def remove(self, resource_id: str, force: bool = False) -> None:
        self.client.volumes.get(resource_id).remove(force=force)
        logger.info(f"Removed volume {resource_id}")


class NetworkBackend(_DockerResourceBackend):
    kind = "network"

    @docker_errors
    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[NetworkInfo]:
        res = []
        for n in self.client.networks.list(filters=filters):
            attrs = n.attrs
            subnet = "n/a"
            configs = (attrs.get('IPAM') or {}).get('Config') or []
            if configs and 'Subnet' in configs[0]:
                subnet = configs[0]['Subnet']
            res.append(NetworkInfo(
                id=attrs.get('Id', n.id),
                name=attrs.get('Name', ''),
                driver=attrs.get('Driver', 'bridge'),
                scope=attrs.get('Scope', 'local'),
                subnet=subnet,
            ))
        return res

    @docker_errors
    def remove(self, resource_id: str, force: bool = False) -> None:
        # networks have no force flag
        self.client.networks.get(resource_id).remove()
        logger.info(f"Removed network {resource_id}")


def _container_from_summary(attrs: Dict[str, Any]) -> ContainerInfo:
    container_id = attrs.get('Id', '')
    names = attrs.get('Names') or []
    ports = []
    for p in attrs.get('Ports') or []:
        public = p.get('PublicPort')
        ports.append(PortMapping(
            private_port=p.get('PrivatePort', 0),
            ip=p.get('IP', ''),
            public_port=str(public) if public is not None else "",
            type=p.get('Type', ''),
        ))
    return ContainerInfo(
        id=container_id,
        short_id=container_id[:12],
        name=", ".join(n.lstrip('/') for n in names),
        image=attrs.get('Image', ''),
        command=attrs.get('Command', ''),
        created=format_created(attrs.get('Created')),
        state=attrs.get('State', ''),
        status=attrs.get('Status', ''),
        ports=tuple(ports),
    )


def _image_from_attrs(attrs: Dict[str, Any]) -> ImageInfo:
    image_id = attrs.get('Id', '')
    tags = attrs.get('RepoTags') or []
    if tags and tags[0] != "<none>:<none>":
        name, _, tag = tags[0].rpartition(':')
    else:
        name, tag = "<none>", "<none>"
    return ImageInfo(
        id=image_id,
        short_id=image_id.split(':')[-1][:12],
        name=name,
        tag=tag,
        created=format_created(attrs.get('Created')),
        size=format_size(attrs.get('Size')),
    )

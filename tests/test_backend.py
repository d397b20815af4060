import pytest
from unittest.mock import MagicMock

import docker

from dockpages.backend import DockerBackend, format_created
from dockpages.errors import Conflict, NotFound, Unauthorized, Unreachable, Unsupported


@pytest.fixture
def mock_docker(mocker):
    mock_client = MagicMock()
    mocker.patch("dockpages.backend.docker.from_env", return_value=mock_client)
    return mock_client


def api_error(status):
    response = MagicMock()
    response.status_code = status
    return docker.errors.APIError("api error", response=response)


def test_list_containers_parses_summaries(mock_docker):
    c1 = MagicMock()
    c1.attrs = {
        'Id': 'a' * 64,
        'Names': ['/web_server'],
        'Image': 'nginx:latest',
        'Command': 'nginx -g daemon off;',
        'Created': 1700000000,
        'State': 'running',
        'Status': 'Up 2 hours',
        'Ports': [{'IP': '0.0.0.0', 'PrivatePort': 80, 'PublicPort': 8080, 'Type': 'tcp'},
                  {'PrivatePort': 443, 'Type': 'tcp'}],
    }
    c2 = MagicMock()
    c2.attrs = {'Id': 'b' * 64, 'Names': ['/db'], 'Image': 'postgres', 'State': 'exited'}
    mock_docker.containers.list.return_value = [c1, c2]

    results = DockerBackend().containers.list()

    mock_docker.containers.list.assert_called_once_with(all=True, filters=None, sparse=True)
    assert len(results) == 2
    web = results[0]
    assert web.name == "web_server"
    assert web.short_id == "a" * 12
    assert web.is_running
    assert [str(p) for p in web.ports] == ["0.0.0.0:80:8080:tcp", ":443::tcp"]
    assert web.created == format_created(1700000000)
    assert results[1].ports == ()
    assert not results[1].is_running


def test_list_images_splits_name_and_tag(mock_docker):
    i1 = MagicMock()
    i1.attrs = {'Id': 'sha256:' + 'f' * 64, 'RepoTags': ['localhost:5000/ubuntu:20.04'],
                'Size': 104857600, 'Created': '2023-01-01T12:00:00.000Z'}
    i2 = MagicMock()
    i2.attrs = {'Id': 'sha256:' + 'e' * 64, 'RepoTags': [], 'Size': 0, 'Created': ''}
    mock_docker.images.list.return_value = [i1, i2]

    results = DockerBackend().images.list({"dangling": False})

    mock_docker.images.list.assert_called_once_with(filters={"dangling": False})
    assert results[0].name == "localhost:5000/ubuntu"
    assert results[0].tag == "20.04"
    assert results[0].short_id == "f" * 12
    assert results[0].size == "100.0MB"
    assert results[0].created == "2023-01-01 12:00:00"
    assert results[1].name == "<none>"
    assert results[1].reference == results[1].id


def test_list_volumes_and_networks(mock_docker):
    v = MagicMock()
    v.attrs = {'Name': 'data', 'Driver': 'local', 'Mountpoint': '/var/lib/docker/volumes/data'}
    mock_docker.volumes.list.return_value = [v]
    n = MagicMock()
    n.attrs = {'Id': 'n' * 64, 'Name': 'bridge', 'Driver': 'bridge', 'Scope': 'local',
               'IPAM': {'Config': [{'Subnet': '172.17.0.0/16'}]}}
    mock_docker.networks.list.return_value = [n]

    backend = DockerBackend()
    volumes = backend.volumes.list()
    networks = backend.networks.list()

    assert volumes[0].id == volumes[0].name == "data"
    assert networks[0].subnet == "172.17.0.0/16"


def test_no_daemon_raises_unreachable(mocker):
    mocker.patch("dockpages.backend.docker.from_env", side_effect=docker.errors.DockerException("no socket"))

    backend = DockerBackend()

    assert backend.client is None
    with pytest.raises(Unreachable):
        backend.containers.list()


def test_start_running_container_is_a_conflict(mock_docker):
    container = MagicMock()
    container.status = "running"
    mock_docker.containers.get.return_value = container

    with pytest.raises(Conflict):
        DockerBackend().containers.start("c1")
    container.start.assert_not_called()


def test_start_and_stop_call_docker(mock_docker):
    container = MagicMock()
    container.status = "exited"
    mock_docker.containers.get.return_value = container
    backend = DockerBackend()

    backend.containers.start("123")
    mock_docker.containers.get.assert_called_with("123")
    container.start.assert_called_once()

    container.status = "running"
    backend.containers.stop("123")
    container.stop.assert_called_once()


def test_stop_and_attach_are_distinct(mock_docker):
    container = MagicMock()
    container.status = "running"
    container.attach.return_value = b"line one\nline two\n"
    mock_docker.containers.get.return_value = container

    lines = DockerBackend().containers.attach("c1")

    assert lines == ["line one", "line two"]
    container.stop.assert_not_called()
    container.attach.assert_called_once_with(stdout=True, stderr=True, stream=False, logs=True)


def test_attach_to_stopped_container_is_a_conflict(mock_docker):
    container = MagicMock()
    container.status = "exited"
    mock_docker.containers.get.return_value = container

    with pytest.raises(Conflict):
        DockerBackend().containers.attach("c1")


def test_remove_missing_container_is_not_found(mock_docker):
    mock_docker.containers.get.side_effect = docker.errors.NotFound("No such container")

    with pytest.raises(NotFound):
        DockerBackend().containers.remove("gone")


@pytest.mark.parametrize("status,expected", [(409, Conflict), (403, Conflict), (401, Unauthorized)])
def test_api_errors_are_translated(mock_docker, status, expected):
    mock_docker.images.remove.side_effect = api_error(status)

    with pytest.raises(expected):
        DockerBackend().images.remove("img", force=False)


def test_connection_error_during_call_is_unreachable(mock_docker):
    mock_docker.networks.list.side_effect = ConnectionError("connection refused")

    with pytest.raises(Unreachable):
        DockerBackend().networks.list()


def test_image_remove_passes_force(mock_docker):
    DockerBackend().images.remove("img", force=True)
    mock_docker.images.remove.assert_called_once_with(image="img", force=True)


def test_image_start_runs_detached_container(mock_docker):
    mock_docker.containers.run.return_value = MagicMock(short_id="abc123")

    assert DockerBackend().images.start("img") == "abc123"
    mock_docker.containers.run.assert_called_once_with("img", detach=True)


def test_unsupported_capabilities(mock_docker):
    backend = DockerBackend()
    with pytest.raises(Unsupported):
        backend.images.stop("img")
    with pytest.raises(Unsupported):
        backend.volumes.attach("data")
    with pytest.raises(Unsupported):
        backend.networks.start("net")

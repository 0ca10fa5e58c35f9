import importlib
import sys
from pathlib import Path

import httpx
import pytest
from fastapi.testclient import TestClient


def _prepare_gateway(monkeypatch, handler, *, urls="http://fichiers-a,http://fichiers-b"):
    project_root = Path(__file__).resolve().parents[1]
    project_root_str = str(project_root)
    if project_root_str not in sys.path:
        sys.path.insert(0, project_root_str)

    monkeypatch.setenv("FICHIERS_SERVICE_URLS", urls)

    for module_name in ["gateway.config", "gateway.client", "gateway.routes", "gateway.main"]:
        module = importlib.import_module(module_name)
        importlib.reload(module)

    main = sys.modules["gateway.main"]
    client_module = sys.modules["gateway.client"]
    config = sys.modules["gateway.config"]

    main.app.state.fichiers_client = client_module.LoadBalancedClient(
        config.FICHIERS_SERVICE_URLS, transport=httpx.MockTransport(handler)
    )
    return TestClient(main.app)


def test_list_relays_downstream_body(monkeypatch):
    seen = []

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(200, json=["a.txt", "b.csv"])

    with _prepare_gateway(monkeypatch, handler) as client:
        response = client.get("/api/files/list")

    assert response.status_code == 200
    assert response.json() == ["a.txt", "b.csv"]
    assert seen == ["http://fichiers-a/files/listAll"]


def test_list_round_robins_between_instances(monkeypatch):
    seen = []

    def handler(request):
        seen.append(request.url.host)
        return httpx.Response(200, json=[])

    with _prepare_gateway(monkeypatch, handler) as client:
        for _ in range(3):
            client.get("/api/files/list")

    assert seen == ["fichiers-a", "fichiers-b", "fichiers-a"]


def test_list_relays_downstream_failure(monkeypatch):
    def handler(request):
        return httpx.Response(500, json=[])

    with _prepare_gateway(monkeypatch, handler) as client:
        response = client.get("/api/files/list")

    assert response.status_code == 500
    assert response.json() == []


def test_list_unreachable_service(monkeypatch):
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with _prepare_gateway(monkeypatch, handler) as client:
        response = client.get("/api/files/list")

    assert response.status_code == 502


def test_client_requires_an_instance():
    from gateway.client import LoadBalancedClient

    with pytest.raises(ValueError):
        LoadBalancedClient([])

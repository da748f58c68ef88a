import threading

import pytest

from eduanim.script import OfflineProvider
from eduanim.web import create_app
from eduanim.web.sessions import SessionManager, session_manager


@pytest.fixture
def client():
    app = create_app({"OFFLINE": True, "TESTING": True})
    return app.test_client()


def new_session(client):
    resp = client.post("/api/sessions")
    assert resp.status_code == 201
    return resp.get_json()["id"]


def generated_session(client):
    session_id = new_session(client)
    resp = client.post(f"/api/sessions/{session_id}/generate", json={"topic": "Trade routes"})
    assert resp.status_code == 202
    session_manager.get(session_id).worker.join(5)
    return session_id


def test_generate_and_inspect(client):
    session_id = generated_session(client)
    state = client.get(f"/api/sessions/{session_id}").get_json()
    assert state["title"] == "Offline Demo"
    assert state["scene_count"] == 2
    assert state["loading"] is False
    script = client.get(f"/api/sessions/{session_id}/script").get_json()
    assert script["scenes"][0]["elements"][2]["targetX"] == 78
    frame = client.get(f"/api/sessions/{session_id}/frame").get_json()
    assert frame["scene_id"] == "the-journey"
    assert frame["backdrop"]["style"] == "map"


def test_transport_routes(client):
    session_id = generated_session(client)
    state = client.post(f"/api/sessions/{session_id}/seek", json={"progress": 60}).get_json()
    assert state["progress"] == 60
    state = client.post(f"/api/sessions/{session_id}/scenes/1").get_json()
    assert (state["scene_index"], state["progress"]) == (1, 0)
    state = client.post(f"/api/sessions/{session_id}/play").get_json()
    assert state["playing"] is True
    state = client.post(f"/api/sessions/{session_id}/pause").get_json()
    assert state["playing"] is False
    state = client.post(f"/api/sessions/{session_id}/restart").get_json()
    assert (state["scene_index"], state["progress"]) == (0, 0)
    assert client.delete(f"/api/sessions/{session_id}").status_code == 204


def test_bad_requests(client):
    session_id = new_session(client)
    assert client.post(f"/api/sessions/{session_id}/generate", json={"topic": " "}).status_code == 400
    assert client.post(f"/api/sessions/{session_id}/seek", json={"progress": "far"}).status_code == 400
    assert client.post(f"/api/sessions/{session_id}/rewind").status_code == 404
    assert client.get(f"/api/sessions/{session_id}/frame").status_code == 404
    assert client.get("/api/sessions/nope").status_code == 404


class SlowProvider:
    def __init__(self, release):
        self.release = release

    def generate_json(self, prompt, system_instruction=None, response_schema=None):
        self.release.wait(5)
        return OfflineProvider().generate_json(prompt)


def test_concurrent_generation_requests_start_one_worker():
    release = threading.Event()
    manager = SessionManager()
    session = manager.create(lambda: SlowProvider(release))
    barrier = threading.Barrier(8)
    results = []

    def request():
        barrier.wait()
        results.append(manager.run_generation(session, "Tides"))

    threads = [threading.Thread(target=request) for _ in range(8)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(5)
    assert results.count(True) == 1
    assert session.busy
    release.set()
    session.worker.join(5)
    assert session.studio.script.title == "Offline Demo"
    assert manager.run_generation(session, "Tides")
    session.worker.join(5)
    manager.remove(session.id)


def test_generate_while_busy_conflicts(client):
    session_id = new_session(client)
    session = session_manager.get(session_id)
    release = threading.Event()
    session.studio.provider_factory = lambda: SlowProvider(release)
    assert client.post(f"/api/sessions/{session_id}/generate", json={"topic": "Tides"}).status_code == 202
    assert client.post(f"/api/sessions/{session_id}/generate", json={"topic": "Tides"}).status_code == 409
    release.set()
    session.worker.join(5)

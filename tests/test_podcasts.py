from __future__ import annotations

from pathlib import Path
from uuid import uuid4

import pytest

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 64


@pytest.fixture
def make_podcast(client, admin_headers):
    def _make(title="Episode", content="Talking about things", **files):
        resp = client.post(
            "/podcasts",
            headers=admin_headers,
            data={"title": title, "content": content},
            files=files or None,
        )
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


def test_create_podcast_with_image(client, make_podcast, settings):
    podcast = make_podcast(image=("cover.png", PNG_BYTES, "image/png"))
    assert podcast["title"] == "Episode"
    assert podcast["questions"] == []
    assert podcast["image"].startswith("/uploads/podcasts/")
    assert podcast["image"].endswith("-cover.png")

    stored = Path(settings.upload_dir) / podcast["image"].removeprefix("/uploads/")
    assert stored.read_bytes() == PNG_BYTES

    served = client.get(podcast["image"])
    assert served.status_code == 200
    assert served.content == PNG_BYTES


def test_create_podcast_without_image(make_podcast):
    assert make_podcast()["image"] is None


def test_create_podcast_requires_admin(client, member_headers):
    assert client.post("/podcasts", data={"title": "x"}).status_code == 401
    assert client.post("/podcasts", headers=member_headers, data={"title": "x"}).status_code == 403


def test_create_podcast_requires_title(client, admin_headers):
    resp = client.post("/podcasts", headers=admin_headers, data={"content": "no title"})
    assert resp.status_code == 400
    resp = client.post("/podcasts", headers=admin_headers, data={"title": "  "})
    assert resp.status_code == 400


def test_image_upload_rejects_other_types(client, admin_headers, store):
    resp = client.post(
        "/podcasts",
        headers=admin_headers,
        data={"title": "Episode"},
        files={"image": ("notes.txt", b"hello", "text/plain")},
    )
    assert resp.status_code == 400
    assert "Unsupported file type" in resp.json()["message"]
    assert store.podcasts == {}


def test_image_upload_enforces_size_ceiling(client, admin_headers, store, settings):
    too_big = b"\x00" * (settings.max_image_upload_bytes + 1)
    resp = client.post(
        "/podcasts",
        headers=admin_headers,
        data={"title": "Episode"},
        files={"image": ("big.jpg", too_big, "image/jpeg")},
    )
    assert resp.status_code == 413
    assert resp.json()["error"] == "payload_too_large"
    assert store.podcasts == {}
    assert not any(Path(settings.upload_dir).rglob("*.jpg"))


def test_list_podcasts_newest_first(client, make_podcast):
    make_podcast(title="First")
    make_podcast(title="Second")
    resp = client.get("/podcasts")
    assert resp.status_code == 200
    assert [p["title"] for p in resp.json()] == ["Second", "First"]


def test_search_podcasts_matches_title_or_content(client, make_podcast):
    make_podcast(title="Deep Learning Hour", content="neural nets")
    make_podcast(title="Cooking", content="Pasta and LEARNING to knead")
    make_podcast(title="Gardening", content="soil")

    titles = {p["title"] for p in client.get("/podcasts/search", params={"q": "learning"}).json()}
    assert titles == {"Deep Learning Hour", "Cooking"}

    assert client.get("/podcasts/search", params={"q": "zzz"}).json() == []


def test_search_query_is_literal(client, make_podcast):
    make_podcast(title="Plain", content="nothing special")
    assert client.get("/podcasts/search", params={"q": ".*"}).json() == []


@pytest.mark.parametrize("params", [{}, {"q": ""}, {"q": "   "}])
def test_search_requires_query(client, params):
    resp = client.get("/podcasts/search", params=params)
    assert resp.status_code == 400


def test_get_podcast(client, make_podcast):
    podcast = make_podcast()
    resp = client.get(f"/podcasts/{podcast['id']}")
    assert resp.status_code == 200
    assert resp.json()["id"] == podcast["id"]


@pytest.mark.parametrize("podcast_id", [str(uuid4()), "12345"])
def test_missing_or_malformed_podcast_is_404(client, admin_headers, podcast_id):
    assert client.get(f"/podcasts/{podcast_id}").status_code == 404
    assert client.delete(f"/podcasts/{podcast_id}", headers=admin_headers).status_code == 404
    resp = client.put(f"/podcasts/{podcast_id}", headers=admin_headers, data={"title": "x"})
    assert resp.status_code == 404
    assert resp.json()["message"] == "Podcast not found"


def test_update_podcast_is_sparse(client, make_podcast, admin_headers):
    podcast = make_podcast(title="Old", content="Keep me", image=("a.png", PNG_BYTES, "image/png"))

    resp = client.put(f"/podcasts/{podcast['id']}", headers=admin_headers, data={"title": "New", "content": ""})
    assert resp.status_code == 200
    body = resp.json()
    assert body["title"] == "New"
    assert body["content"] == "Keep me"
    assert body["image"] == podcast["image"]

    resp = client.put(
        f"/podcasts/{podcast['id']}",
        headers=admin_headers,
        files={"image": ("b.jpeg", PNG_BYTES, "image/jpeg")},
    )
    assert resp.status_code == 200
    assert resp.json()["image"].endswith("-b.jpeg")
    assert resp.json()["title"] == "New"


def test_delete_podcast(client, make_podcast, admin_headers, store):
    podcast = make_podcast()
    resp = client.delete(f"/podcasts/{podcast['id']}", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json() == {"message": "Podcast deleted"}
    assert store.podcasts == {}
    assert client.delete(f"/podcasts/{podcast['id']}", headers=admin_headers).status_code == 404


def test_add_questions(client, make_podcast, admin_headers):
    podcast = make_podcast()
    url = f"/podcasts/{podcast['id']}/questions"

    first = client.post(url, headers=admin_headers, json={"question": "Q1", "answer": "A1"})
    assert first.status_code == 200
    assert len(first.json()["questions"]) == 1

    second = client.post(url, headers=admin_headers, json={"question": "Q2", "answer": "A2"})
    questions = second.json()["questions"]
    assert [q["question"] for q in questions] == ["Q1", "Q2"]
    assert len({q["id"] for q in questions}) == 2


def test_add_question_requires_admin_and_podcast(client, make_podcast, member_headers, admin_headers):
    podcast = make_podcast()
    body = {"question": "Q", "answer": "A"}
    assert client.post(f"/podcasts/{podcast['id']}/questions", json=body).status_code == 401
    assert client.post(f"/podcasts/{podcast['id']}/questions", headers=member_headers, json=body).status_code == 403
    assert client.post(f"/podcasts/{uuid4()}/questions", headers=admin_headers, json=body).status_code == 404
    resp = client.post(f"/podcasts/{podcast['id']}/questions", headers=admin_headers, json={"question": "Q"})
    assert resp.status_code == 400


def test_update_and_delete_question(client, make_podcast, admin_headers):
    podcast = make_podcast()
    added = client.post(
        f"/podcasts/{podcast['id']}/questions",
        headers=admin_headers,
        json={"question": "Q1", "answer": "A1"},
    ).json()
    qid = added["questions"][0]["id"]
    url = f"/podcasts/{podcast['id']}/questions/{qid}"

    resp = client.put(url, headers=admin_headers, json={"answer": "Better answer"})
    assert resp.status_code == 200
    assert resp.json()["questions"] == [{"id": qid, "question": "Q1", "answer": "Better answer"}]

    resp = client.delete(url, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["questions"] == []

    resp = client.delete(url, headers=admin_headers)
    assert resp.status_code == 404
    assert resp.json()["message"] == "Podcast or question not found"


def test_question_routes_404_on_unknown_ids(client, make_podcast, admin_headers):
    podcast = make_podcast()
    for url in (
        f"/podcasts/{podcast['id']}/questions/{uuid4()}",
        f"/podcasts/{podcast['id']}/questions/bad-id",
        f"/podcasts/{uuid4()}/questions/{uuid4()}",
    ):
        assert client.put(url, headers=admin_headers, json={"question": "x"}).status_code == 404
        assert client.delete(url, headers=admin_headers).status_code == 404


def test_update_question_requires_a_field(client, make_podcast, admin_headers):
    podcast = make_podcast()
    added = client.post(
        f"/podcasts/{podcast['id']}/questions",
        headers=admin_headers,
        json={"question": "Q1", "answer": "A1"},
    ).json()
    qid = added["questions"][0]["id"]
    resp = client.put(f"/podcasts/{podcast['id']}/questions/{qid}", headers=admin_headers, json={})
    assert resp.status_code == 400

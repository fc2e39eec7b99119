import uuid

from conftest import ADMIN_EMAIL, auth_headers


def _create(client, user_id, **fields):
    body = {"name": "Alex Rivera", "type": "creator"}
    body.update(fields)
    return client.post("/profiles", json=body, headers=auth_headers(user_id, "alex@example.com"))


def test_health(client):
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"ok": True}
    assert r.headers["x-request-id"]


def test_create_requires_a_session(client):
    r = client.post("/profiles", json={"name": "Alex", "type": "creator"})
    assert r.status_code == 401
    assert r.json()["error"] == "unauthorized"


def test_create_profile(client):
    user_id = uuid.uuid4()
    r = _create(
        client,
        user_id,
        categories=["Fitness"],
        social_links=[
            {"platform": "Instagram", "url": "https://instagram.com/alex", "followers": 4000},
            {"platform": "TikTok", "url": "https://tiktok.com/@alex", "followers": 1000},
        ],
    )
    assert r.status_code == 200, r.text
    body = r.json()

    assert body["id"] == str(user_id)
    assert body["email"] == "alex@example.com"
    assert body["followers_count"] == 5000
    assert body["visibility"] == "draft"
    assert body["gender"] == "prefer_not_to_say"
    assert body["preferred_contact"] == "email"
    assert body["platforms"] == []


def test_create_twice_conflicts(client):
    user_id = uuid.uuid4()
    assert _create(client, user_id).status_code == 200

    r = _create(client, user_id)
    assert r.status_code == 409
    assert r.json()["error"] == "precondition_failed"


def test_blank_name_is_rejected(client):
    r = _create(client, uuid.uuid4(), name="   ")
    assert r.status_code == 422
    assert r.json()["field"] == "name"


def test_brands_cannot_carry_engagement_stats(client):
    r = _create(
        client,
        uuid.uuid4(),
        type="brand",
        engagement_stats={"likes": [1, 2, 3], "comments": [0, 0, 0]},
    )
    assert r.status_code == 422


def test_get_me_without_profile_is_404(client):
    r = client.get("/profiles/me", headers=auth_headers(uuid.uuid4()))
    assert r.status_code == 404


def test_update_me_normalizes_null_lists(client):
    user_id = uuid.uuid4()
    _create(client, user_id, categories=["Travel"])

    r = client.patch(
        "/profiles/me",
        json={"categories": None, "bio": "Backpacker"},
        headers=auth_headers(user_id),
    )
    assert r.status_code == 200
    assert r.json()["categories"] == []
    assert r.json()["bio"] == "Backpacker"


def test_submitted_profile_is_hidden_from_strangers(client):
    user_id = uuid.uuid4()
    _create(client, user_id)

    r = client.post(
        "/profiles/me/submit_for_review",
        json={"bio": "Daily workouts"},
        headers=auth_headers(user_id),
    )
    assert r.status_code == 200
    assert r.json()["visibility"] == "under_review"
    assert r.json()["bio"] == "Daily workouts"

    assert client.get(f"/profiles/{user_id}").status_code == 404
    assert client.get(f"/profiles/{user_id}", headers=auth_headers(uuid.uuid4())).status_code == 404
    assert client.get(f"/profiles/{user_id}", headers=auth_headers(user_id)).status_code == 200
    assert client.get(f"/profiles/{user_id}", headers=auth_headers(uuid.uuid4(), ADMIN_EMAIL)).status_code == 200

    again = client.post("/profiles/me/submit_for_review", headers=auth_headers(user_id))
    assert again.status_code == 409


def test_brand_publishes_itself_and_creators_cannot(client):
    brand_id = uuid.uuid4()
    _create(client, brand_id, name="Acme Coffee", type="brand")

    r = client.post("/profiles/me/visibility", json={"is_public": True}, headers=auth_headers(brand_id))
    assert r.status_code == 200
    assert r.json()["visibility"] == "public"
    assert client.get(f"/profiles/{brand_id}").status_code == 200

    creator_id = uuid.uuid4()
    _create(client, creator_id)
    r = client.post("/profiles/me/visibility", json={"is_public": True}, headers=auth_headers(creator_id))
    assert r.status_code == 403


def test_hidden_analytics_are_owner_only(client, make_profile):
    row = make_profile(
        is_public=True,
        followers_count=5000,
        engagement_stats={"likes": [100, 120, 110], "comments": [10, 8, 12], "hideAnalytics": True},
    )

    public_view = client.get(f"/profiles/{row.id}").json()
    assert public_view["engagement_stats"] is None
    assert public_view["engagement"] is None

    owner_view = client.get(f"/profiles/{row.id}", headers=auth_headers(row.id)).json()
    assert owner_view["engagement_stats"]["hideAnalytics"] is True
    assert owner_view["engagement"]["level"] == "moderate"


def test_directory_lists_public_profiles_of_one_type(client, make_profile):
    make_profile(name="Zoe", is_public=True, followers_count=20_000, platforms=["Instagram"])
    make_profile(name="Yara", is_public=True, followers_count=2_000, platforms=["TikTok"])
    make_profile(name="Hidden", is_public=False, followers_count=900_000)
    make_profile(name="Acme", type="brand", is_public=True)

    r = client.get("/profiles", params={"type": "creator", "sort": "followers"})
    assert r.status_code == 200
    assert [p["name"] for p in r.json()] == ["Zoe", "Yara"]

    r = client.get("/profiles", params={"type": "brand"})
    assert [p["name"] for p in r.json()] == ["Acme"]

    r = client.get("/profiles", params={"follower_ranges": ["1K-10K"], "platforms": ["TikTok", "YouTube"]})
    assert [p["name"] for p in r.json()] == ["Yara"]

    r = client.get("/profiles", params={"sort": "alphabetical", "limit": 1})
    assert [p["name"] for p in r.json()] == ["Yara"]


def test_directory_legacy_rows(client, make_profile):
    make_profile(name="Legacy", is_public=True, categories=None, platforms="Instagram")

    r = client.get("/profiles", params={"platforms": ["Instagram"]})
    assert r.status_code == 200
    assert r.json()[0]["categories"] == []
    assert r.json()[0]["platforms"] == ["Instagram"]


def test_directory_rejects_bad_parameters(client):
    assert client.get("/profiles", params={"sort": "random"}).status_code == 422
    assert client.get("/profiles", params={"follower_ranges": ["2M+"]}).status_code == 422
    assert client.get("/profiles", params={"engagement": ["stellar"]}).status_code == 422
    assert client.get("/profiles", params={"limit": 0}).status_code == 422


def test_engagement_preview(client):
    r = client.post(
        "/profiles/engagement/preview",
        json={
            "engagement_stats": {"likes": [100, 120, 110], "comments": [10, 8, 12]},
            "social_links": [{"platform": "Instagram", "url": "x", "followers": 5000}],
        },
        headers=auth_headers(uuid.uuid4()),
    )
    assert r.status_code == 200
    body = r.json()
    assert body["total_followers"] == 5000
    assert round(body["engagement"]["rate"], 6) == 2.4
    assert body["engagement"]["level"] == "moderate"
    assert body["completion_score"] == 60


def test_engagement_preview_without_followers(client):
    r = client.post(
        "/profiles/engagement/preview",
        json={"engagement_stats": {"likes": [5, 5, 5], "comments": [1, 1, 1]}, "total_followers": 0},
        headers=auth_headers(uuid.uuid4()),
    )
    assert r.json()["engagement"] == {"avg_likes": 5.0, "avg_comments": 1.0, "rate": 0.0, "level": "low"}


def test_store_failure_on_save_is_a_remote_failure(client, make_profile, break_store, monkeypatch):
    row = make_profile(bio="Before")
    break_store("commit")

    r = client.patch("/profiles/me", json={"bio": "After"}, headers=auth_headers(row.id))
    assert r.status_code == 503
    assert r.json() == {"detail": "Store call failed: OperationalError", "error": "remote_failure"}

    monkeypatch.undo()
    assert client.get("/profiles/me", headers=auth_headers(row.id)).json()["bio"] == "Before"


def test_blank_stored_name_does_not_break_the_directory(client, make_profile):
    make_profile(name="Good", is_public=True)
    make_profile(name="", is_public=True)

    r = client.get("/profiles", params={"sort": "alphabetical"})
    assert r.status_code == 200
    assert [p["name"] for p in r.json()] == ["Good", "Unnamed profile"]

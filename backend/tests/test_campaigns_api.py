import uuid

import pytest

from conftest import auth_headers


@pytest.fixture
def brand(make_profile):
    return make_profile(name="Acme Coffee", type="brand", is_public=True, avatar_url="https://cdn/acme.png")


@pytest.fixture
def creator(make_profile):
    return make_profile(name="Alex Rivera", type="creator", is_public=True)


def _create(client, brand_id, **fields):
    body = {"title": "Summer launch"}
    body.update(fields)
    return client.post("/campaigns", json=body, headers=auth_headers(brand_id))


def test_only_brands_create_campaigns(client, creator):
    r = _create(client, creator.id)
    assert r.status_code == 403
    assert r.json()["detail"] == "Only brands can create campaigns"

    # no profile at all
    assert _create(client, uuid.uuid4()).status_code == 403


def test_create_campaign_defaults_to_draft(client, brand):
    r = _create(
        client,
        brand.id,
        preferred_niches=["Coffee", "Lifestyle"],
        preferred_gender=["open to all"],
        max_budget=1500,
    )
    assert r.status_code == 200, r.text
    body = r.json()

    assert body["status"] == "draft"
    assert body["brand_id"] == str(brand.id)
    assert body["is_owner"] is True
    assert body["brand"] == {"id": str(brand.id), "name": "Acme Coffee", "avatar_url": "https://cdn/acme.png"}
    assert body["preferred_gender"] == ["open to all"]
    assert body["hashtags"] == []
    assert body["max_budget"] == 1500


def test_blank_title_is_rejected(client, brand):
    r = _create(client, brand.id, title="  ")
    assert r.status_code == 422
    assert r.json()["field"] == "title"


def test_draft_is_private_until_activated(client, brand, creator):
    campaign_id = _create(client, brand.id).json()["id"]

    assert client.get(f"/campaigns/{campaign_id}", headers=auth_headers(creator.id)).status_code == 404
    assert client.get("/campaigns", headers=auth_headers(creator.id)).json() == []
    assert client.get(f"/campaigns/{campaign_id}", headers=auth_headers(brand.id)).status_code == 200

    r = client.patch(f"/campaigns/{campaign_id}/status", json={"status": "active"}, headers=auth_headers(brand.id))
    assert r.status_code == 200
    assert r.json()["status"] == "active"

    seen = client.get(f"/campaigns/{campaign_id}", headers=auth_headers(creator.id))
    assert seen.status_code == 200
    assert seen.json()["is_owner"] is False
    assert [c["id"] for c in client.get("/campaigns", headers=auth_headers(creator.id)).json()] == [campaign_id]


def test_scopes(client, brand, make_profile, make_campaign):
    other = make_profile(name="Other Brand", type="brand")
    make_campaign(brand.id, title="Mine draft", status="draft")
    make_campaign(brand.id, title="Mine active", status="active")
    make_campaign(other.id, title="Theirs active", status="active")
    make_campaign(other.id, title="Theirs paused", status="paused")

    headers = auth_headers(brand.id)

    everything = client.get("/campaigns", params={"scope": "all"}, headers=headers).json()
    assert [c["title"] for c in everything] == ["Theirs active"]
    assert everything[0]["brand"]["name"] == "Other Brand"

    mine = client.get("/campaigns", params={"scope": "my", "sort": "oldest"}, headers=headers).json()
    assert [c["title"] for c in mine] == ["Mine draft", "Mine active"]

    drafts = client.get("/campaigns", params={"scope": "my", "status": "draft"}, headers=headers).json()
    assert [c["title"] for c in drafts] == ["Mine draft"]


def test_list_filters_and_sorts(client, creator, brand, make_campaign):
    make_campaign(brand.id, title="Cold brew", status="active", min_budget=100, max_budget=400,
                  preferred_platforms=["Instagram"], preferred_niches=["Food"])
    make_campaign(brand.id, title="Espresso", status="active", min_budget=1000, max_budget=5000,
                  preferred_platforms=["YouTube"], preferred_niches=["Food"], follower_range="100K-500K")
    make_campaign(brand.id, title="Latte art", status="active", min_budget=300, max_budget=900,
                  preferred_platforms=["TikTok"], preferred_niches=["Art"], min_engagement_rate=4)

    headers = auth_headers(creator.id)

    def titles(**params):
        r = client.get("/campaigns", params=params, headers=headers)
        assert r.status_code == 200, r.text
        return [c["title"] for c in r.json()]

    assert titles(sort="highest-paying") == ["Espresso", "Latte art", "Cold brew"]
    assert titles(sort="lowest-paying") == ["Cold brew", "Latte art", "Espresso"]
    assert titles(niches=["Food"], sort="alphabetical") == ["Cold brew", "Espresso"]
    assert titles(follower_ranges=["100K-500K"]) == ["Espresso"]
    assert titles(engagement=["high"]) == ["Latte art"]
    assert titles(q="ART") == ["Latte art"]

    assert client.get("/campaigns", params={"sort": "followers"}, headers=headers).status_code == 422


def test_legacy_preferred_gender(client, creator, brand, make_campaign):
    as_json_text = make_campaign(brand.id, status="active", preferred_gender='["female", "any"]')
    as_plain_text = make_campaign(brand.id, status="active", preferred_gender="open to all")
    as_null = make_campaign(brand.id, status="active", preferred_gender=None, hashtags=None)

    headers = auth_headers(creator.id)
    assert client.get(f"/campaigns/{as_json_text.id}", headers=headers).json()["preferred_gender"] == [
        "female",
        "any",
    ]
    assert client.get(f"/campaigns/{as_plain_text.id}", headers=headers).json()["preferred_gender"] == [
        "open to all"
    ]
    body = client.get(f"/campaigns/{as_null.id}", headers=headers).json()
    assert body["preferred_gender"] == []
    assert body["hashtags"] == []


def test_only_the_owner_edits(client, brand, make_profile, make_campaign):
    campaign = make_campaign(brand.id, status="active")
    other = make_profile(name="Rival", type="brand")

    r = client.patch(f"/campaigns/{campaign.id}", json={"title": "Hijacked"}, headers=auth_headers(other.id))
    assert r.status_code == 403
    assert r.json()["detail"] == "Not authorized"

    assert client.patch(
        f"/campaigns/{campaign.id}/status", json={"status": "paused"}, headers=auth_headers(other.id)
    ).status_code == 403
    assert client.delete(f"/campaigns/{campaign.id}", headers=auth_headers(other.id)).status_code == 403

    r = client.patch(
        f"/campaigns/{campaign.id}",
        json={"title": "Renamed", "hashtags": ["#coffee"]},
        headers=auth_headers(brand.id),
    )
    assert r.status_code == 200
    assert r.json()["title"] == "Renamed"
    assert r.json()["hashtags"] == ["#coffee"]


def test_delete_campaign(client, brand, make_campaign):
    campaign = make_campaign(brand.id)

    r = client.delete(f"/campaigns/{campaign.id}", headers=auth_headers(brand.id))
    assert r.status_code == 200
    assert r.json() == {"deleted": True, "campaign_id": str(campaign.id)}

    assert client.get(f"/campaigns/{campaign.id}", headers=auth_headers(brand.id)).status_code == 404


def test_campaigns_require_a_session(client):
    assert client.get("/campaigns").status_code == 401


def test_store_failure_on_status_change_is_a_remote_failure(client, brand, make_campaign, break_store, monkeypatch):
    campaign = make_campaign(brand.id, status="draft")
    break_store("commit")

    r = client.patch(f"/campaigns/{campaign.id}/status", json={"status": "active"}, headers=auth_headers(brand.id))
    assert r.status_code == 503
    assert r.json()["error"] == "remote_failure"

    monkeypatch.undo()
    assert client.get(f"/campaigns/{campaign.id}", headers=auth_headers(brand.id)).json()["status"] == "draft"

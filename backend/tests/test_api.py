from datetime import datetime, timedelta, timezone

from sqlalchemy import select

from creator_api.models import Creation, UserAccount

from conftest import TODAY, YESTERDAY

GENERATE_URL = "/api/v1/generate-content"
API_KEY_URL = "/api/v1/handle-api-key"


def test_probe_needs_no_authentication(client):
    for url in (GENERATE_URL, API_KEY_URL):
        response = client.options(url)
        assert response.status_code == 200
        assert response.text == "ok"
        assert response.headers["access-control-allow-origin"] == "*"
        assert "authorization" in response.headers["access-control-allow-headers"]
        assert "apikey" in response.headers["access-control-allow-headers"]


def test_browser_preflight(client):
    response = client.options(
        GENERATE_URL,
        headers={
            "Origin": "https://dashboard.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "authorization, content-type",
        },
    )
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"


def test_generate_requires_authentication(client, provider):
    response = client.post(GENERATE_URL, json={"prompt": "hello"})

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Unauthorized"}
    assert provider.calls == []


def test_invalid_token_is_unauthorized(client, make_token):
    expired = make_token(exp=1)
    for header in ("Bearer not-a-jwt", f"Bearer {expired}", "Basic abc"):
        response = client.post(GENERATE_URL, json={"prompt": "hello"}, headers={"Authorization": header})
        assert response.json() == {"success": False, "error": "Unauthorized"}


def test_blank_prompt(client, auth_headers):
    response = client.post(GENERATE_URL, json={"prompt": "  "}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Prompt is required"}


def test_malformed_body(client, auth_headers):
    response = client.post(
        GENERATE_URL,
        content="{not json",
        headers={**auth_headers, "Content-Type": "application/json"},
    )
    assert response.status_code == 400
    assert response.json() == {"success": False, "error": "Invalid request body"}


def test_authentication_is_checked_before_the_body(client, provider):
    for url in (GENERATE_URL, API_KEY_URL):
        response = client.post(url, content="{not json", headers={"Content-Type": "application/json"})
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "Unauthorized"}
    assert provider.calls == []


def test_non_object_body_is_invalid(client, auth_headers):
    for url in (GENERATE_URL, API_KEY_URL):
        response = client.post(url, json=["hello"], headers=auth_headers)
        assert response.json() == {"success": False, "error": "Invalid request body"}


def test_generate_without_saved_key(client, auth_headers, provider):
    response = client.post(GENERATE_URL, json={"prompt": "hello"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Please configure your OpenAI API key in Settings.",
    }
    assert provider.calls == []


def test_save_key_then_generate(client, db, auth_headers, provider):
    saved = client.post(API_KEY_URL, json={"action": "save", "apiKey": "sk-abc123"}, headers=auth_headers)
    assert saved.status_code == 200
    assert saved.json() == {"success": True, "message": "API key saved successfully"}

    response = client.post(GENERATE_URL, json={"prompt": "hello"}, headers=auth_headers)

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["generated_text"] == "hi there"
    assert body["generated_image_url"]
    assert response.headers["access-control-allow-origin"] == "*"
    assert provider.calls == [("hello", "sk-abc123")]

    db.expire_all()
    account = db.get(UserAccount, "user-1")
    assert account.daily_generation_count == 1
    assert account.last_generation_date == TODAY
    assert [c.prompt for c in db.scalars(select(Creation))] == ["hello"]


def test_exhausted_user_is_refused(client, make_account, auth_headers, provider):
    make_account(count=5, last_date=TODAY)

    response = client.post(GENERATE_URL, json={"prompt": "hello"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json() == {
        "success": False,
        "error": "Daily generation limit reached. Upgrade to Pro for unlimited access.",
    }
    assert provider.calls == []


def test_save_rejects_invalid_key(client, auth_headers):
    for payload in ({"action": "save", "apiKey": "not-a-key"}, {"action": "save", "apiKey": "  "}, {"action": "save"}):
        response = client.post(API_KEY_URL, json=payload, headers=auth_headers)
        assert response.status_code == 400
        assert response.json() == {"success": False, "error": "A valid OpenAI API key is required."}


def test_saved_key_is_encrypted_at_rest(client, db, cipher, auth_headers):
    client.post(API_KEY_URL, json={"action": "save", "apiKey": " sk-abc123 "}, headers=auth_headers)

    db.expire_all()
    stored = db.get(UserAccount, "user-1").api_key_encrypted
    assert "sk-abc123" not in stored
    assert cipher.decrypt(stored) == "sk-abc123"


def test_delete_key_is_idempotent(client, db, auth_headers):
    client.post(API_KEY_URL, json={"action": "save", "apiKey": "sk-abc123"}, headers=auth_headers)

    for _ in range(2):
        response = client.post(API_KEY_URL, json={"action": "delete"}, headers=auth_headers)
        assert response.status_code == 200
        assert response.json() == {"success": True, "message": "API key deleted successfully"}

    db.expire_all()
    assert db.get(UserAccount, "user-1").api_key_encrypted is None


def test_unknown_action(client, auth_headers):
    response = client.post(API_KEY_URL, json={"action": "rotate"}, headers=auth_headers)

    assert response.status_code == 400
    assert response.json()["success"] is False
    assert response.json()["error"].startswith("Invalid action")


def test_profile_creates_account_from_token(client, make_token):
    token = make_token(sub="user-9", email="grace@example.com", user_metadata={"full_name": "Grace Hopper"})

    response = client.get("/api/v1/account/me", headers={"Authorization": f"Bearer {token}"})

    assert response.status_code == 200
    profile = response.json()
    assert profile["id"] == "user-9"
    assert profile["display_name"] == "Grace Hopper"
    assert profile["remaining_today"] == 5
    assert profile["has_api_key"] is False
    assert profile["total_creations"] == 0


def test_profile_reports_rollover(client, make_account, auth_headers):
    make_account(count=5, last_date=YESTERDAY)

    profile = client.get("/api/v1/account/me", headers=auth_headers).json()

    assert profile["generations_today"] == 0
    assert profile["remaining_today"] == 5
    assert profile["has_api_key"] is True


def test_creations_newest_first_and_searchable(client, db, make_account, auth_headers):
    make_account()
    make_account(user_id="someone-else")
    now = datetime.now(timezone.utc)
    rows = [
        ("user-1", "coffee tagline", "Brewed for you", now - timedelta(minutes=3)),
        ("user-1", "tea poem", "Steeped in calm", now - timedelta(minutes=2)),
        ("user-1", "bakery slogan", "Fresh COFFEE and bread", now - timedelta(minutes=1)),
        ("someone-else", "coffee", "not yours", now),
    ]
    for user_id, prompt, text, created_at in rows:
        db.add(Creation(user_id=user_id, prompt=prompt, generated_text=text,
                        generated_image_url="https://placehold.co/x", created_at=created_at))
    db.commit()

    listing = client.get("/api/v1/creations", headers=auth_headers).json()
    assert [c["prompt"] for c in listing["creations"]] == ["bakery slogan", "tea poem", "coffee tagline"]
    assert listing["total"] == 3

    searched = client.get("/api/v1/creations", params={"q": "coffee"}, headers=auth_headers).json()
    assert [c["prompt"] for c in searched["creations"]] == ["bakery slogan", "coffee tagline"]

    recent = client.get("/api/v1/creations", params={"limit": 1}, headers=auth_headers).json()
    assert [c["prompt"] for c in recent["creations"]] == ["bakery slogan"]

import pytest
from sqlalchemy import select, func

from flashnews.core.config import DEFAULT_NEWS_IMAGE
from flashnews.models.news import Comment


@pytest.mark.asyncio
async def test_create_then_read_returns_same_fields(client, register_user, create_news):
    user, headers = await register_user("prince", name="Prince Ade", avatar="https://cdn.test/p.png")

    created = await create_news(headers, title="Rain expected", category="Weather", fullContent="  Heavy rain tonight.  ")

    assert created["title"] == "Rain expected"
    assert created["category"] == "Weather"
    assert created["fullContent"] == "Heavy rain tonight."
    assert created["imageUrl"] == DEFAULT_NEWS_IMAGE
    assert created["author"] == "Prince Ade"
    assert created["authorImage"] == "https://cdn.test/p.png"
    assert created["authorId"] == user["id"]
    assert created["isFeatured"] is False
    assert created["isSideFeature"] is False
    assert created["comments"] == []

    response = await client.get(f"/api/news/{created['id']}")
    assert response.status_code == 200
    fetched = response.json()
    for key in ("id", "title", "category", "fullContent", "imageUrl", "author", "authorImage", "authorId"):
        assert fetched[key] == created[key]


@pytest.mark.asyncio
async def test_create_ignores_client_supplied_author(client, register_user, create_news):
    user, headers = await register_user("prince")

    created = await create_news(headers, author="Someone Else", authorId="user-prince")

    assert created["authorId"] == user["id"]
    assert created["author"] == "prince"


@pytest.mark.asyncio
async def test_create_keeps_external_image_url(client, register_user, create_news):
    _, headers = await register_user("prince")

    created = await create_news(headers, imageUrl="https://res.cloudinary.com/demo/image/upload/v1/flashnews/abc.jpg")

    assert created["imageUrl"] == "https://res.cloudinary.com/demo/image/upload/v1/flashnews/abc.jpg"


@pytest.mark.asyncio
@pytest.mark.parametrize("missing", ["title", "category", "fullContent"])
async def test_create_requires_fields(client, register_user, missing):
    _, headers = await register_user("prince")
    data = {"title": "T", "category": "C", "fullContent": "Body"}
    data[missing] = "   " if missing == "fullContent" else ""

    response = await client.post("/api/news", data=data, headers=headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Missing required news fields or full content is empty."


@pytest.mark.asyncio
async def test_create_requires_authentication(client):
    response = await client.post("/api/news", data={"title": "T", "category": "C", "fullContent": "Body"})

    assert response.status_code == 401


@pytest.mark.asyncio
async def test_get_missing_news_is_404(client):
    response = await client.get("/api/news/does-not-exist")

    assert response.status_code == 404
    assert response.json()["message"] == "News item not found"


@pytest.mark.asyncio
async def test_list_is_newest_first_and_filters(client, register_user, create_news):
    alice, alice_headers = await register_user("alice")
    _, bob_headers = await register_user("bob")
    first = await create_news(alice_headers, title="Quantum chips", category="Technology")
    second = await create_news(bob_headers, title="Cup final", category="Sports", fullContent="A thrilling QUANTUM of luck.")
    third = await create_news(alice_headers, title="Market rally", category="Business")

    response = await client.get("/api/news")
    assert [item["id"] for item in response.json()] == [third["id"], second["id"], first["id"]]

    for category in ("all", "my-posts"):
        response = await client.get("/api/news", params={"category": category})
        assert len(response.json()) == 3

    response = await client.get("/api/news", params={"category": "Sports"})
    assert [item["id"] for item in response.json()] == [second["id"]]

    response = await client.get("/api/news", params={"search": "quantum"})
    assert {item["id"] for item in response.json()} == {first["id"], second["id"]}

    response = await client.get("/api/news", params={"search": "BOB"})
    assert [item["id"] for item in response.json()] == [second["id"]]

    response = await client.get("/api/news", params={"authorId": alice["id"]})
    assert [item["id"] for item in response.json()] == [third["id"], first["id"]]


@pytest.mark.asyncio
async def test_list_embeds_comments(client, register_user, create_news):
    _, headers = await register_user("prince")
    news = await create_news(headers)
    await client.post(f"/api/news/{news['id']}/comments", json={"text": "First!"}, headers=headers)

    response = await client.get("/api/news")

    assert [c["text"] for c in response.json()[0]["comments"]] == ["First!"]


@pytest.mark.asyncio
async def test_update_is_partial(client, register_user, create_news):
    _, headers = await register_user("prince")
    news = await create_news(headers, imageUrl="https://images.test/old.jpg")

    response = await client.put(f"/api/news/{news['id']}", data={"title": "Updated title"}, headers=headers)

    assert response.status_code == 200
    body = response.json()
    assert body["title"] == "Updated title"
    assert body["category"] == news["category"]
    assert body["fullContent"] == news["fullContent"]
    assert body["imageUrl"] == "https://images.test/old.jpg"
    assert body["publishDate"] == news["publishDate"]


@pytest.mark.asyncio
async def test_update_image_url_and_clear(client, register_user, create_news):
    _, headers = await register_user("prince")
    news = await create_news(headers)

    response = await client.put(f"/api/news/{news['id']}", data={"imageUrl": "https://images.test/new.jpg"}, headers=headers)
    assert response.json()["imageUrl"] == "https://images.test/new.jpg"

    response = await client.put(f"/api/news/{news['id']}", data={"clearImage": "true"}, headers=headers)
    assert response.json()["imageUrl"] == DEFAULT_NEWS_IMAGE


@pytest.mark.asyncio
async def test_update_rejects_blank_content(client, register_user, create_news):
    _, headers = await register_user("prince")
    news = await create_news(headers)

    response = await client.put(f"/api/news/{news['id']}", data={"fullContent": "   "}, headers=headers)

    assert response.status_code == 400
    assert response.json()["message"] == "Full content cannot be empty."


@pytest.mark.asyncio
async def test_update_and_delete_by_other_user_forbidden(client, register_user, create_news):
    _, owner_headers = await register_user("owner")
    _, other_headers = await register_user("intruder")
    news = await create_news(owner_headers)

    response = await client.put(f"/api/news/{news['id']}", data={"title": "Hacked"}, headers=other_headers)
    assert response.status_code == 403
    assert response.json()["message"] == "You are not authorized to edit this news item."

    response = await client.delete(f"/api/news/{news['id']}", headers=other_headers)
    assert response.status_code == 403

    response = await client.get(f"/api/news/{news['id']}")
    assert response.json()["title"] == news["title"]


@pytest.mark.asyncio
async def test_update_and_delete_missing_news_is_404(client, register_user):
    _, headers = await register_user("prince")

    assert (await client.put("/api/news/nope", data={"title": "x"}, headers=headers)).status_code == 404
    assert (await client.delete("/api/news/nope", headers=headers)).status_code == 404


@pytest.mark.asyncio
async def test_delete_removes_news_and_cascades_comments(client, register_user, create_news, session_maker):
    _, headers = await register_user("prince")
    _, reader_headers = await register_user("reader")
    news = await create_news(headers)
    await client.post(f"/api/news/{news['id']}/comments", json={"text": "Nice"}, headers=reader_headers)
    await client.post(f"/api/news/{news['id']}/comments", json={"text": "Agreed"}, headers=headers)

    response = await client.delete(f"/api/news/{news['id']}", headers=headers)

    assert response.status_code == 200
    assert response.json() == {"message": "News item deleted successfully"}
    assert (await client.get(f"/api/news/{news['id']}")).status_code == 404
    async with session_maker() as session:
        count = await session.scalar(select(func.count(Comment.id)).where(Comment.news_id == news["id"]))
    assert count == 0


@pytest.mark.asyncio
async def test_upload_image_is_stored_and_removed_on_delete(client, register_user, media_root, png_bytes):
    _, headers = await register_user("prince")

    response = await client.post(
        "/api/news",
        data={"title": "Photo story", "category": "Culture", "fullContent": "See the picture."},
        files={"image": ("photo.png", png_bytes, "image/png")},
        headers=headers,
    )

    assert response.status_code == 201, response.text
    image_url = response.json()["imageUrl"]
    assert image_url.startswith("/uploads/") and image_url.endswith(".png")
    stored = media_root / image_url.rsplit("/", 1)[-1]
    assert stored.read_bytes() == png_bytes

    response = await client.delete(f"/api/news/{response.json()['id']}", headers=headers)
    assert response.status_code == 200
    assert not stored.exists()


@pytest.mark.asyncio
async def test_replacing_uploaded_image_removes_old_file(client, register_user, media_root, png_bytes):
    _, headers = await register_user("prince")
    created = await client.post(
        "/api/news",
        data={"title": "Photo story", "category": "Culture", "fullContent": "See the picture."},
        files={"image": ("photo.png", png_bytes, "image/png")},
        headers=headers,
    )
    old_file = media_root / created.json()["imageUrl"].rsplit("/", 1)[-1]

    response = await client.put(
        f"/api/news/{created.json()['id']}",
        files={"image": ("second.png", png_bytes, "image/png")},
        headers=headers,
    )

    assert response.status_code == 200
    new_file = media_root / response.json()["imageUrl"].rsplit("/", 1)[-1]
    assert new_file.exists()
    assert not old_file.exists()


@pytest.mark.asyncio
async def test_upload_rejects_non_images(client, register_user):
    _, headers = await register_user("prince")

    response = await client.post(
        "/api/news",
        data={"title": "T", "category": "C", "fullContent": "Body"},
        files={"image": ("notes.txt", b"plain text", "text/plain")},
        headers=headers,
    )

    assert response.status_code == 400
    assert response.json()["message"] == "Only images (jpeg, jpg, png, gif) are allowed!"
    assert (await client.get("/api/news")).json() == []


@pytest.mark.asyncio
async def test_borrowed_image_url_is_not_deleted_by_other_user(client, register_user, create_news, media_root, png_bytes):
    _, owner_headers = await register_user("owner")
    _, other_headers = await register_user("other")
    uploaded = await client.post(
        "/api/news",
        data={"title": "Photo story", "category": "Culture", "fullContent": "See the picture."},
        files={"image": ("photo.png", png_bytes, "image/png")},
        headers=owner_headers,
    )
    image_url = uploaded.json()["imageUrl"]
    stored = media_root / image_url.rsplit("/", 1)[-1]

    borrowed = await create_news(other_headers, imageUrl=image_url)
    response = await client.put(
        f"/api/news/{borrowed['id']}", data={"imageUrl": "https://images.test/mine.jpg"}, headers=other_headers
    )
    assert response.status_code == 200
    assert stored.exists()

    borrowed_again = await create_news(other_headers, imageUrl=image_url)
    response = await client.delete(f"/api/news/{borrowed_again['id']}", headers=other_headers)
    assert response.status_code == 200
    assert stored.exists()


@pytest.mark.asyncio
async def test_shared_uploaded_image_kept_while_referenced(client, register_user, create_news, media_root, png_bytes):
    _, owner_headers = await register_user("owner")
    _, other_headers = await register_user("other")
    uploaded = await client.post(
        "/api/news",
        data={"title": "Photo story", "category": "Culture", "fullContent": "See the picture."},
        files={"image": ("photo.png", png_bytes, "image/png")},
        headers=owner_headers,
    )
    image_url = uploaded.json()["imageUrl"]
    stored = media_root / image_url.rsplit("/", 1)[-1]
    borrowed = await create_news(other_headers, imageUrl=image_url)

    await client.delete(f"/api/news/{uploaded.json()['id']}", headers=owner_headers)
    assert stored.exists()

    await client.delete(f"/api/news/{borrowed['id']}", headers=other_headers)
    assert stored.exists()


@pytest.mark.asyncio
async def test_resubmitting_same_image_url_keeps_ownership(client, register_user, media_root, png_bytes):
    _, headers = await register_user("prince")
    uploaded = await client.post(
        "/api/news",
        data={"title": "Photo story", "category": "Culture", "fullContent": "See the picture."},
        files={"image": ("photo.png", png_bytes, "image/png")},
        headers=headers,
    )
    image_url = uploaded.json()["imageUrl"]
    stored = media_root / image_url.rsplit("/", 1)[-1]

    await client.put(f"/api/news/{uploaded.json()['id']}", data={"imageUrl": image_url}, headers=headers)
    response = await client.delete(f"/api/news/{uploaded.json()['id']}", headers=headers)

    assert response.status_code == 200
    assert not stored.exists()

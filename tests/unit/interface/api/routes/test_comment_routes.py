"""Route tests for the comment API, backed by in-memory persistence."""

from uuid import uuid4

import pytest
from fastapi.testclient import TestClient
from starlette.websockets import WebSocketDisconnect

from cookbook.domain.error import StoreUnavailableError
from cookbook.domain.value import RecipeId, UserId
from cookbook.interface.api.app import create_app
from cookbook.persistence.repository.inmemory import (
    InMemoryCommentRepository,
    InMemoryRecipeRepository,
)
from tests.di import build_test_container


def headers(user_id: UserId, name: str = "cook") -> dict[str, str]:
    return {
        "X-User-Id": str(user_id),
        "X-User-Email": f"{name}@example.com",
        "X-User-Name": name.title(),
    }


@pytest.fixture
def container():
    return build_test_container()


@pytest.fixture
def client(container):
    with TestClient(create_app(container)) as test_client:
        yield test_client


@pytest.fixture
def recipes(client, container) -> InMemoryRecipeRepository:
    return client.portal.call(container.get, InMemoryRecipeRepository)


@pytest.fixture
def recipe(recipes) -> tuple[RecipeId, UserId]:
    recipe_id = RecipeId(uuid4())
    owner_id = UserId(uuid4())
    recipes.add_recipe(recipe_id, owner_id)
    return recipe_id, owner_id


def comments_url(recipe_id, suffix: str = "") -> str:
    return f"/recipes/{recipe_id}/comments{suffix}"


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "healthy"


class TestCreateAndRead:
    """POST and GET on the comment collection."""

    def test_review_roundtrip(self, client, recipe, recipes):
        recipe_id, _ = recipe
        user_id = UserId(uuid4())

        created = client.post(
            comments_url(recipe_id),
            json={"text": "Perfect weeknight dinner", "rating": 5},
            headers=headers(user_id),
        )

        assert created.status_code == 201
        body = created.json()
        assert body["comment"]["rating"] == 5
        assert body["comment"]["author_id"] == str(user_id)
        assert body["rating_stale"] is False
        assert recipes.get_rating(recipe_id) == (5.0, 1)

        listing = client.get(comments_url(recipe_id)).json()
        assert len(listing["threads"]) == 1
        assert listing["rating"]["avg_rating"] == 5.0
        assert listing["rating"]["review_count"] == 1

    def test_requires_identity(self, client, recipe):
        recipe_id, _ = recipe

        response = client.post(comments_url(recipe_id), json={"text": "Hi"})

        assert response.status_code == 401

    def test_invalid_rating(self, client, recipe):
        recipe_id, _ = recipe

        response = client.post(
            comments_url(recipe_id),
            json={"text": "Hmm", "rating": 0},
            headers=headers(UserId(uuid4())),
        )

        assert response.status_code == 422
        assert response.json()["detail"]["issues"] == ["rating_out_of_range"]

    def test_text_too_long(self, client, recipe):
        recipe_id, _ = recipe

        response = client.post(
            comments_url(recipe_id),
            json={"text": "a" * 1001},
            headers=headers(UserId(uuid4())),
        )

        assert response.status_code == 422

    def test_owner_rating_conflict(self, client, recipe):
        recipe_id, owner_id = recipe

        response = client.post(
            comments_url(recipe_id),
            json={"text": "My best one", "rating": 5},
            headers=headers(owner_id, "owner"),
        )

        assert response.status_code == 409

    def test_duplicate_rating_conflict(self, client, recipe):
        recipe_id, _ = recipe
        user = headers(UserId(uuid4()))
        client.post(comments_url(recipe_id), json={"text": "A", "rating": 4}, headers=user)

        response = client.post(
            comments_url(recipe_id), json={"text": "B", "rating": 1}, headers=user
        )

        assert response.status_code == 409

    def test_unknown_recipe(self, client):
        response = client.get(comments_url(uuid4()))

        assert response.status_code == 404

    def test_stats_and_mine(self, client, recipe):
        recipe_id, _ = recipe
        user_id = UserId(uuid4())
        client.post(
            comments_url(recipe_id),
            json={"text": "Good", "rating": 4},
            headers=headers(user_id),
        )

        stats = client.get(comments_url(recipe_id, "/stats")).json()
        mine = client.get(comments_url(recipe_id, "/mine"), headers=headers(user_id))

        assert stats["total_comments"] == 1
        assert stats["rating"]["histogram"]["4"] == 1
        assert mine.json()["has_rated"] is True
        assert mine.json()["rating"] == 4


class TestRepliesEditsDeletes:
    """Replies, PATCH and DELETE."""

    def test_reply_then_nested_reply(self, client, recipe):
        recipe_id, owner_id = recipe
        review = client.post(
            comments_url(recipe_id),
            json={"text": "Too salty"},
            headers=headers(UserId(uuid4())),
        ).json()["comment"]

        reply = client.post(
            comments_url(recipe_id, f"/{review['comment_id']}/replies"),
            json={"text": "Try half the salt"},
            headers=headers(owner_id, "owner"),
        )
        assert reply.status_code == 201
        assert reply.json()["comment"]["is_owner_reply"] is True

        nested = client.post(
            comments_url(recipe_id, f"/{reply.json()['comment']['comment_id']}/replies"),
            json={"text": "Will do"},
            headers=headers(UserId(uuid4())),
        )
        assert nested.status_code == 409

    def test_patch_by_author_and_stranger(self, client, recipe, recipes):
        recipe_id, _ = recipe
        author = headers(UserId(uuid4()))
        review = client.post(
            comments_url(recipe_id), json={"text": "OK", "rating": 3}, headers=author
        ).json()["comment"]
        url = comments_url(recipe_id, f"/{review['comment_id']}")

        forbidden = client.patch(
            url, json={"text": "Mine now"}, headers=headers(UserId(uuid4()))
        )
        edited = client.patch(url, json={"rating": 5}, headers=author)

        assert forbidden.status_code == 403
        assert edited.status_code == 200
        assert edited.json()["comment"]["rating"] == 5
        assert edited.json()["comment"]["text"] == "OK"
        assert recipes.get_rating(recipe_id) == (5.0, 1)

    def test_delete_cascades(self, client, recipe, recipes):
        recipe_id, owner_id = recipe
        author = headers(UserId(uuid4()))
        review = client.post(
            comments_url(recipe_id), json={"text": "Nice", "rating": 4}, headers=author
        ).json()["comment"]
        reply = client.post(
            comments_url(recipe_id, f"/{review['comment_id']}/replies"),
            json={"text": "Thanks!"},
            headers=headers(owner_id, "owner"),
        ).json()["comment"]

        response = client.delete(
            comments_url(recipe_id, f"/{review['comment_id']}"), headers=author
        )

        assert response.status_code == 200
        assert response.json()["deleted_ids"] == [
            reply["comment_id"],
            review["comment_id"],
        ]
        assert client.get(comments_url(recipe_id)).json()["threads"] == []
        assert recipes.get_rating(recipe_id) == (0.0, 0)

    def test_rating_sync(self, client, recipe, recipes):
        recipe_id, _ = recipe
        client.post(
            comments_url(recipe_id),
            json={"text": "Fine", "rating": 2},
            headers=headers(UserId(uuid4())),
        )
        client.portal.call(recipes.write_rating, recipe_id, 0.0, 0)

        response = client.post(comments_url(recipe_id, "/rating/sync"))

        assert response.status_code == 200
        assert response.json()["rating"]["avg_rating"] == 2.0
        assert recipes.get_rating(recipe_id) == (2.0, 1)


class TestFeed:
    """The WebSocket comment feed."""

    def test_snapshot_on_connect_and_after_change(self, client, recipe):
        recipe_id, _ = recipe

        with client.websocket_connect(comments_url(recipe_id, "/feed")) as websocket:
            initial = websocket.receive_json()
            client.post(
                comments_url(recipe_id),
                json={"text": "Live!"},
                headers=headers(UserId(uuid4())),
            )
            update = websocket.receive_json()

        assert initial == {"recipe_id": str(recipe_id), "comments": []}
        assert [c["text"] for c in update["comments"]] == ["Live!"]

    def test_unknown_recipe_closes(self, client):
        with pytest.raises(WebSocketDisconnect) as exc_info:
            with client.websocket_connect(comments_url(uuid4(), "/feed")) as websocket:
                websocket.receive_json()

        assert exc_info.value.code == 4404


class TestRecipePathScope:
    """Comment routes only act on comments under the recipe in the path."""

    def test_patch_under_other_recipe(self, client, recipe, recipes):
        recipe_id, _ = recipe
        other_recipe = RecipeId(uuid4())
        recipes.add_recipe(other_recipe, UserId(uuid4()))
        author = headers(UserId(uuid4()))
        review = client.post(
            comments_url(recipe_id), json={"text": "OK", "rating": 3}, headers=author
        ).json()["comment"]

        response = client.patch(
            comments_url(other_recipe, f"/{review['comment_id']}"),
            json={"rating": 5},
            headers=author,
        )

        assert response.status_code == 404
        thread = client.get(comments_url(recipe_id)).json()["threads"][0]
        assert thread["comment"]["rating"] == 3
        assert recipes.get_rating(recipe_id) == (3.0, 1)

    def test_delete_under_other_recipe(self, client, recipe):
        recipe_id, _ = recipe
        author = headers(UserId(uuid4()))
        review = client.post(
            comments_url(recipe_id), json={"text": "Nice"}, headers=author
        ).json()["comment"]

        response = client.delete(
            comments_url(uuid4(), f"/{review['comment_id']}"), headers=author
        )

        assert response.status_code == 404
        assert len(client.get(comments_url(recipe_id)).json()["threads"]) == 1


class TestPartialDeleteRoute:
    def test_incomplete_cascade_is_a_retryable_500(
        self, client, container, recipe, monkeypatch
    ):
        recipe_id, owner_id = recipe
        author = headers(UserId(uuid4()))
        review = client.post(
            comments_url(recipe_id), json={"text": "Nice"}, headers=author
        ).json()["comment"]
        reply = client.post(
            comments_url(recipe_id, f"/{review['comment_id']}/replies"),
            json={"text": "Thanks!"},
            headers=headers(owner_id, "owner"),
        ).json()["comment"]

        comments = client.portal.call(container.get, InMemoryCommentRepository)
        original_delete = comments.delete
        deletes_left = [1]

        async def delete_once(comment_id):
            if not deletes_left[0]:
                raise StoreUnavailableError("delete", "connection reset")
            deletes_left[0] -= 1
            await original_delete(comment_id)

        monkeypatch.setattr(comments, "delete", delete_once)

        response = client.delete(
            comments_url(recipe_id, f"/{review['comment_id']}"), headers=author
        )

        assert response.status_code == 500
        detail = response.json()["detail"]
        assert detail["deleted_ids"] == [reply["comment_id"]]
        assert detail["remaining_ids"] == [review["comment_id"]]
        assert detail["retry"] is True

        monkeypatch.undo()
        retried = client.delete(
            comments_url(recipe_id, f"/{review['comment_id']}"), headers=author
        )

        assert retried.status_code == 200
        assert retried.json()["deleted_ids"] == [review["comment_id"]]

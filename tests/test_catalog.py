"""
Restaurant and food catalog endpoints, including image galleries
"""
import pytest

from food_ordering.core.config import settings
from food_ordering.models import Food, Restaurant, Review
from food_ordering.services.catalog import apply_partial_update, calculate_average_rating
from food_ordering.services.image_storage import ImageStorage
from tests.conftest import auth_headers


def png(name="photo.png"):
    return ("images", (name, b"\x89PNG fake image bytes", "image/png"))


# Restaurants

def test_list_restaurants_resolves_owner(client, owner, restaurant):
    response = client.get("/api/restaurants")

    assert response.status_code == 200
    [item] = response.json()
    assert item["_id"] == restaurant.id
    assert item["owner"] == {"_id": owner.id, "name": owner.name, "email": owner.email}


def test_get_restaurant_includes_menu_reviews_and_average(client, db, restaurant, food, create_user):
    for rating in (5, 4):
        reviewer = create_user()
        db.add(Review(user_id=reviewer.id, restaurant_id=restaurant.id, rating=rating))
    db.commit()

    response = client.get(f"/api/restaurants/{restaurant.id}")

    assert response.status_code == 200
    body = response.json()
    assert [f["_id"] for f in body["foods"]] == [food.id]
    assert len(body["reviews"]) == 2
    assert set(body["reviews"][0]["user"]) == {"_id", "name"}
    assert body["averageRating"] == pytest.approx(4.5)


def test_get_restaurant_without_reviews_has_zero_average(client, restaurant):
    response = client.get(f"/api/restaurants/{restaurant.id}")

    assert response.json()["averageRating"] == 0


def test_get_missing_restaurant(client):
    response = client.get("/api/restaurants/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"message": "Restaurant not found"}


def test_owner_updates_restaurant_and_empty_values_are_kept(client, owner, restaurant):
    response = client.put(
        f"/api/restaurants/{restaurant.id}",
        json={"name": "", "description": "Wood-fired pizza", "cuisineType": "Italian"},
        headers=auth_headers(owner),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Oscar's Restaurant"
    assert body["description"] == "Wood-fired pizza"
    assert body["cuisineType"] == "Italian"


def test_admin_may_update_any_restaurant(client, admin, restaurant):
    response = client.put(
        f"/api/restaurants/{restaurant.id}",
        json={"openingHours": "9-17"},
        headers=auth_headers(admin),
    )

    assert response.status_code == 200
    assert response.json()["openingHours"] == "9-17"


def test_other_restaurant_owner_cannot_update(client, other_owner, restaurant):
    response = client.put(
        f"/api/restaurants/{restaurant.id}",
        json={"name": "Hijacked"},
        headers=auth_headers(other_owner),
    )

    assert response.status_code == 401
    assert response.json() == {"message": "Not authorized"}


def test_customer_cannot_update_restaurant(client, customer, restaurant):
    response = client.put(
        f"/api/restaurants/{restaurant.id}",
        json={"name": "Hijacked"},
        headers=auth_headers(customer),
    )

    assert response.status_code == 403


# Foods

def test_list_foods_resolves_restaurant(client, restaurant, food):
    response = client.get("/api/foods")

    assert response.status_code == 200
    [item] = response.json()
    assert item["restaurant"] == {
        "_id": restaurant.id,
        "name": restaurant.name,
        "location": restaurant.location,
    }
    assert item["isAvailable"] is True


def test_list_foods_by_restaurant(client, restaurant, other_restaurant, food, create_food):
    create_food(other_restaurant, name="Sushi")

    response = client.get(f"/api/foods/restaurant/{restaurant.id}")

    assert response.status_code == 200
    assert [f["_id"] for f in response.json()] == [food.id]
    assert response.json()[0]["restaurant"] == restaurant.id


def test_get_food(client, restaurant, food):
    response = client.get(f"/api/foods/{food.id}")

    assert response.status_code == 200
    assert response.json()["restaurant"]["_id"] == restaurant.id


def test_get_missing_food(client):
    response = client.get("/api/foods/missing")

    assert response.status_code == 404
    assert response.json() == {"message": "Food not found"}


def test_owner_creates_food(client, owner, restaurant):
    response = client.post(
        "/api/foods",
        json={"name": "Calzone", "price": 12.5, "restaurant": restaurant.id, "category": "Pizza"},
        headers=auth_headers(owner),
    )

    assert response.status_code == 201
    body = response.json()
    assert body["name"] == "Calzone"
    assert body["restaurant"] == restaurant.id
    assert body["isAvailable"] is True
    assert body["images"] == []


def test_create_food_for_missing_restaurant(client, owner):
    response = client.post(
        "/api/foods",
        json={"name": "Calzone", "price": 12.5, "restaurant": "missing"},
        headers=auth_headers(owner),
    )

    assert response.status_code == 404
    assert response.json() == {"message": "Restaurant not found"}


def test_create_food_in_someone_elses_restaurant(client, db, other_owner, restaurant):
    response = client.post(
        "/api/foods",
        json={"name": "Calzone", "price": 12.5, "restaurant": restaurant.id},
        headers=auth_headers(other_owner),
    )

    assert response.status_code == 401
    assert db.query(Food).count() == 0


def test_create_food_rejects_negative_price(client, owner, restaurant):
    response = client.post(
        "/api/foods",
        json={"name": "Calzone", "price": -1, "restaurant": restaurant.id},
        headers=auth_headers(owner),
    )

    assert response.status_code == 400
    assert "price" in response.json()["message"]


def test_update_food_keeps_falsy_values_but_applies_availability(client, owner, food):
    response = client.put(
        f"/api/foods/{food.id}",
        json={"name": "", "price": 0, "description": "Tomato and basil", "isAvailable": False},
        headers=auth_headers(owner),
    )

    assert response.status_code == 200
    body = response.json()
    assert body["name"] == "Margherita"
    assert body["price"] == 10.0
    assert body["description"] == "Tomato and basil"
    assert body["isAvailable"] is False


def test_owner_update_with_invalid_body_is_rejected(client, owner, restaurant, food):
    response = client.put(f"/api/foods/{food.id}", json={"price": -5}, headers=auth_headers(owner))
    assert response.status_code == 400
    assert response.json()["message"].startswith("price")

    response = client.put(f"/api/restaurants/{restaurant.id}", json={"name": 5}, headers=auth_headers(owner))
    assert response.status_code == 400
    assert response.json()["message"].startswith("name")


def test_update_accepts_snake_case_fields(client, owner, food):
    response = client.put(f"/api/foods/{food.id}", json={"is_available": False}, headers=auth_headers(owner))

    assert response.status_code == 200
    assert response.json()["isAvailable"] is False


def test_update_food_by_non_owner(client, other_owner, food):
    response = client.put(
        f"/api/foods/{food.id}",
        json={"price": 1},
        headers=auth_headers(other_owner),
    )

    assert response.status_code == 401


def test_delete_food_destroys_images_and_reviews(client, db, owner, restaurant, create_food, customer, image_storage):
    food = create_food(restaurant, images=[
        {"public_id": "tests/a", "url": "https://example.com/a"},
        {"public_id": "tests/b", "url": "https://example.com/b"},
    ])
    food_id = food.id
    db.add(Review(user_id=customer.id, food_id=food_id, rating=4))
    db.commit()

    response = client.delete(f"/api/foods/{food_id}", headers=auth_headers(owner))

    assert response.status_code == 200
    assert response.json() == {"message": "Food removed"}
    assert sorted(image_storage.destroyed) == ["tests/a", "tests/b"]
    db.expire_all()
    assert db.get(Food, food_id) is None
    assert db.query(Review).count() == 0


def test_delete_food_by_non_owner_keeps_it(client, db, other_owner, food, image_storage):
    food_id = food.id

    response = client.delete(f"/api/foods/{food_id}", headers=auth_headers(other_owner))

    assert response.status_code == 401
    assert db.get(Food, food_id) is not None
    assert image_storage.destroyed == []


# Images

def test_upload_restaurant_images_appends(client, db, owner, restaurant, image_storage):
    restaurant.images = [{"public_id": "tests/existing", "url": "https://example.com/existing"}]
    db.commit()

    response = client.put(
        f"/api/restaurants/{restaurant.id}/images",
        files=[png("front.png"), png("inside.png")],
        headers=auth_headers(owner),
    )

    assert response.status_code == 200
    images = response.json()["images"]
    assert len(images) == 3
    assert images[0]["public_id"] == "tests/existing"
    assert sorted(image["public_id"] for image in images[1:]) == ["tests/image-1", "tests/image-2"]
    assert images[1]["url"] == image_storage.url_for(images[1]["public_id"])
    assert sorted(image_storage.uploaded) == ["front.png", "inside.png"]


def test_upload_without_files(client, owner, restaurant):
    response = client.put(
        f"/api/restaurants/{restaurant.id}/images",
        headers=auth_headers(owner),
    )

    assert response.status_code == 400
    assert response.json() == {"message": "No files uploaded"}


def test_upload_too_many_files(client, owner, food, image_storage):
    files = [png(f"{n}.png") for n in range(settings.MAX_IMAGES_PER_UPLOAD + 1)]

    response = client.put(f"/api/foods/{food.id}/images", files=files, headers=auth_headers(owner))

    assert response.status_code == 400
    assert image_storage.uploaded == []


def test_upload_rejects_non_image(client, owner, food, image_storage):
    response = client.put(
        f"/api/foods/{food.id}/images",
        files=[("images", ("notes.txt", b"hello", "text/plain"))],
        headers=auth_headers(owner),
    )

    assert response.status_code == 400
    assert response.json() == {"message": "Unsupported image type: text/plain"}
    assert image_storage.uploaded == []


def test_upload_food_images_by_non_owner(client, other_owner, food, image_storage):
    response = client.put(
        f"/api/foods/{food.id}/images",
        files=[png()],
        headers=auth_headers(other_owner),
    )

    assert response.status_code == 401
    assert image_storage.uploaded == []


def test_delete_food_image(client, owner, restaurant, create_food, image_storage):
    food = create_food(restaurant, images=[
        {"public_id": "tests/keep", "url": "https://example.com/keep"},
        {"public_id": "tests/drop", "url": "https://example.com/drop"},
    ])

    response = client.delete(f"/api/foods/{food.id}/images/tests/drop", headers=auth_headers(owner))

    assert response.status_code == 200
    assert [image["public_id"] for image in response.json()["images"]] == ["tests/keep"]
    assert image_storage.destroyed == ["tests/drop"]


def test_delete_unknown_restaurant_image(client, owner, restaurant, image_storage):
    response = client.delete(
        f"/api/restaurants/{restaurant.id}/images/tests/missing",
        headers=auth_headers(owner),
    )

    assert response.status_code == 404
    assert response.json() == {"message": "Image not found"}
    assert image_storage.destroyed == []


# Helpers

def test_apply_partial_update_skips_falsy_values():
    restaurant = Restaurant(name="Old", description="Keep me", location="Here")

    apply_partial_update(restaurant, {"name": "New", "description": "", "location": None})

    assert restaurant.name == "New"
    assert restaurant.description == "Keep me"
    assert restaurant.location == "Here"


def test_calculate_average_rating():
    assert calculate_average_rating([]) == 0
    assert calculate_average_rating([Review(rating=3), Review(rating=4)]) == pytest.approx(3.5)


def test_image_storage_defaults_to_configured_bucket():
    storage = ImageStorage(client=object())

    assert storage.bucket_name == settings.S3_BUCKET_NAME
    assert storage.folder == settings.S3_IMAGE_FOLDER
    assert storage.url_for("food-ordering/a.png") == f"https://{settings.S3_BUCKET_NAME}.s3.amazonaws.com/food-ordering/a.png"

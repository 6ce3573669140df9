import io

import pytest
from django.core.files.uploadedfile import SimpleUploadedFile
from PIL import Image

from catalog.models import Category, Game

pytestmark = pytest.mark.django_db


def _image_file(name: str = "cover.png") -> SimpleUploadedFile:
    buffer = io.BytesIO()
    image = Image.new("RGB", (32, 32), color="red")
    image.save(buffer, format="PNG")
    buffer.seek(0)
    return SimpleUploadedFile(name, buffer.read(), content_type="image/png")


def _listing_payload(category, **overrides):
    payload = {
        "name": "Nintendo Switch OLED",
        "platform": "Switch",
        "condition": "good",
        "category": category.pk,
        "stock": 2,
        "price_per_day": "40000.00",
        "deposit": "150000.00",
    }
    payload.update(overrides)
    return payload


def test_public_list_only_shows_approved_active_games(api_client, make_game):
    visible = make_game(name="Visible")
    make_game(name="Pending", approval_status=Game.APPROVAL_PENDING, is_active=False)
    make_game(name="Hidden", is_active=False)

    response = api_client.get("/api/games/")

    assert response.status_code == 200
    names = [item["name"] for item in response.json()["results"]]
    assert names == [visible.name]


def test_public_search_matches_name(api_client, make_game):
    make_game(name="PlayStation 5")
    make_game(name="Xbox Series X", platform="Xbox")

    response = api_client.get("/api/games/", {"search": "xbox"})

    assert response.status_code == 200
    assert [item["name"] for item in response.json()["results"]] == ["Xbox Series X"]


def test_partner_creates_pending_inactive_listing(api_client, partner, category):
    api_client.force_authenticate(partner)

    response = api_client.post("/api/partner/games/", _listing_payload(category), format="json")

    assert response.status_code == 201
    body = response.json()
    assert body["approval_status"] == Game.APPROVAL_PENDING
    assert body["is_active"] is False
    assert body["available_stock"] == 2
    game = Game.objects.get(pk=body["id"])
    assert game.owner == partner


def test_customer_cannot_create_listing(api_client, customer, category):
    api_client.force_authenticate(customer)

    response = api_client.post("/api/partner/games/", _listing_payload(category), format="json")

    assert response.status_code == 403
    assert Game.objects.count() == 0


def test_listing_rejects_non_positive_price(api_client, partner, category):
    api_client.force_authenticate(partner)

    response = api_client.post(
        "/api/partner/games/",
        _listing_payload(category, price_per_day="0"),
        format="json",
    )

    assert response.status_code == 400
    assert "price_per_day" in response.json()


def test_partner_cannot_edit_approved_listing(api_client, partner, game):
    api_client.force_authenticate(partner)

    response = api_client.patch(f"/api/partner/games/{game.pk}/", {"name": "Renamed"}, format="json")

    assert response.status_code == 409
    game.refresh_from_db()
    assert game.name == "PlayStation 5"


def test_editing_rejected_listing_resubmits_it(api_client, partner, make_game):
    game = make_game(
        approval_status=Game.APPROVAL_REJECTED,
        is_active=False,
        rejection_reason="Blurry photos",
    )
    api_client.force_authenticate(partner)

    response = api_client.patch(
        f"/api/partner/games/{game.pk}/", {"description": "New photos"}, format="json"
    )

    assert response.status_code == 200
    game.refresh_from_db()
    assert game.approval_status == Game.APPROVAL_PENDING
    assert game.rejection_reason == ""
    assert game.description == "New photos"


def test_partner_stock_change_moves_available_stock(api_client, partner, make_game):
    game = make_game(stock=2, available_stock=1, approval_status=Game.APPROVAL_PENDING)
    api_client.force_authenticate(partner)

    response = api_client.patch(f"/api/partner/games/{game.pk}/", {"stock": 4}, format="json")

    assert response.status_code == 200
    game.refresh_from_db()
    assert (game.stock, game.available_stock) == (4, 3)


def test_partner_only_sees_own_listings(api_client, partner, make_user, make_game):
    mine = make_game()
    other = make_user("other-partner@example.com", role="partner")
    make_game(owner=other, name="Not mine")
    api_client.force_authenticate(partner)

    response = api_client.get("/api/partner/games/")

    assert response.status_code == 200
    assert [item["id"] for item in response.json()["results"]] == [mine.pk]


def test_partner_uploads_and_deletes_image(settings, tmp_path, api_client, partner, game):
    settings.MEDIA_ROOT = tmp_path
    api_client.force_authenticate(partner)

    response = api_client.post(
        f"/api/partner/games/{game.pk}/images/", {"image": _image_file()}, format="multipart"
    )

    assert response.status_code == 201
    image_id = response.json()["id"]
    image = game.images.get(pk=image_id)
    assert image.image.name.startswith("game-images/")

    response = api_client.delete(f"/api/partner/games/{game.pk}/images/{image_id}/")

    assert response.status_code == 204
    assert not game.images.exists()


def test_image_upload_rejects_invalid_type(settings, tmp_path, api_client, partner, game):
    settings.MEDIA_ROOT = tmp_path
    api_client.force_authenticate(partner)
    bogus = SimpleUploadedFile("notes.txt", b"hello", content_type="text/plain")

    response = api_client.post(
        f"/api/partner/games/{game.pk}/images/", {"image": bogus}, format="multipart"
    )

    assert response.status_code == 400
    assert not game.images.exists()


def test_admin_approves_listing(api_client, admin_user, make_game):
    game = make_game(approval_status=Game.APPROVAL_PENDING, is_active=False)
    api_client.force_authenticate(admin_user)

    response = api_client.post(f"/api/admin/games/{game.pk}/approve/")

    assert response.status_code == 200
    game.refresh_from_db()
    assert game.approval_status == Game.APPROVAL_APPROVED
    assert game.is_active is True
    assert game.approved_by == admin_user
    assert game.approved_at is not None


def test_admin_rejects_listing_with_reason(api_client, admin_user, make_game):
    game = make_game(approval_status=Game.APPROVAL_PENDING, is_active=False)
    api_client.force_authenticate(admin_user)

    response = api_client.post(
        f"/api/admin/games/{game.pk}/reject/", {"reason": "Missing accessories"}, format="json"
    )

    assert response.status_code == 200
    game.refresh_from_db()
    assert game.approval_status == Game.APPROVAL_REJECTED
    assert game.rejection_reason == "Missing accessories"


def test_approving_twice_is_refused(api_client, admin_user, game):
    api_client.force_authenticate(admin_user)

    response = api_client.post(f"/api/admin/games/{game.pk}/approve/")

    assert response.status_code == 409


def test_partner_cannot_moderate(api_client, partner, make_game):
    game = make_game(approval_status=Game.APPROVAL_PENDING, is_active=False)
    api_client.force_authenticate(partner)

    response = api_client.post(f"/api/admin/games/{game.pk}/approve/")

    assert response.status_code == 403


def test_categories_are_public_and_hide_inactive(api_client):
    Category.objects.create(name="Console")
    Category.objects.create(name="Retro", is_active=False)

    response = api_client.get("/api/categories/")

    assert response.status_code == 200
    assert [item["name"] for item in response.json()] == ["Console"]


def test_admin_toggles_category(api_client, admin_user, category):
    api_client.force_authenticate(admin_user)

    response = api_client.patch(f"/api/categories/{category.pk}/toggle/")

    assert response.status_code == 200
    category.refresh_from_db()
    assert category.is_active is False


def test_category_with_games_cannot_be_deleted(api_client, admin_user, game):
    api_client.force_authenticate(admin_user)

    response = api_client.delete(f"/api/categories/{game.category_id}/")

    assert response.status_code == 400
    assert Category.objects.filter(pk=game.category_id).exists()


def test_customer_cannot_create_category(api_client, customer):
    api_client.force_authenticate(customer)

    response = api_client.post("/api/categories/", {"name": "Handheld"}, format="json")

    assert response.status_code == 403

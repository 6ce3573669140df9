import pytest

from accounts.models import User
from partners.models import PartnerApplication

pytestmark = pytest.mark.django_db

APPLY_URL = "/api/partner-applications/me/"

PAYLOAD = {
    "business_name": "Rina Game Rental",
    "business_address": "Jl. Sudirman 1, Jakarta",
    "business_phone": "0812000111",
    "business_description": "Consoles and party games",
}


@pytest.fixture
def application(customer):
    return PartnerApplication.objects.create(user=customer, **PAYLOAD)


def test_customer_submits_application(api_client, customer):
    api_client.force_authenticate(customer)

    response = api_client.post(APPLY_URL, PAYLOAD, format="json")

    assert response.status_code == 201
    body = response.json()
    assert body["status"] == PartnerApplication.PENDING
    assert body["user"]["email"] == customer.email


def test_second_application_is_refused(api_client, customer, application):
    api_client.force_authenticate(customer)

    response = api_client.post(APPLY_URL, PAYLOAD, format="json")

    assert response.status_code == 409
    assert PartnerApplication.objects.count() == 1


def test_partner_cannot_apply_again(api_client, partner):
    api_client.force_authenticate(partner)

    response = api_client.post(APPLY_URL, PAYLOAD, format="json")

    assert response.status_code == 400


def test_customer_views_own_application(api_client, customer, application):
    api_client.force_authenticate(customer)

    response = api_client.get(APPLY_URL)

    assert response.status_code == 200
    assert response.json()["id"] == application.pk


def test_missing_application_is_404(api_client, customer):
    api_client.force_authenticate(customer)

    assert api_client.get(APPLY_URL).status_code == 404


def test_admin_lists_pending_applications(api_client, admin_user, application, other_customer):
    PartnerApplication.objects.create(
        user=other_customer, status=PartnerApplication.REJECTED, **PAYLOAD
    )
    api_client.force_authenticate(admin_user)

    response = api_client.get("/api/admin/partner-applications/", {"status": "pending"})

    assert response.status_code == 200
    assert [item["id"] for item in response.json()["results"]] == [application.pk]


def test_approval_promotes_user_to_partner(api_client, admin_user, customer, application):
    api_client.force_authenticate(admin_user)

    response = api_client.post(f"/api/admin/partner-applications/{application.pk}/approve/")

    assert response.status_code == 200
    customer.refresh_from_db()
    application.refresh_from_db()
    assert customer.role == User.PARTNER
    assert application.status == PartnerApplication.APPROVED
    assert application.decided_by == admin_user
    assert application.decided_at is not None


def test_rejection_records_reason(api_client, admin_user, customer, application):
    api_client.force_authenticate(admin_user)

    response = api_client.post(
        f"/api/admin/partner-applications/{application.pk}/reject/",
        {"reason": "Address could not be verified"},
        format="json",
    )

    assert response.status_code == 200
    customer.refresh_from_db()
    application.refresh_from_db()
    assert customer.role == User.CUSTOMER
    assert application.rejection_reason == "Address could not be verified"


def test_decided_application_cannot_be_redecided(api_client, admin_user, application):
    api_client.force_authenticate(admin_user)
    api_client.post(f"/api/admin/partner-applications/{application.pk}/approve/")

    response = api_client.post(
        f"/api/admin/partner-applications/{application.pk}/reject/", {"reason": "late"}, format="json"
    )

    assert response.status_code == 409


def test_customer_cannot_review_applications(api_client, other_customer, application):
    api_client.force_authenticate(other_customer)

    response = api_client.post(f"/api/admin/partner-applications/{application.pk}/approve/")

    assert response.status_code == 403

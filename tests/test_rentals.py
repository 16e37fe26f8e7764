from datetime import datetime

import pytest
from sqlalchemy import delete
from sqlalchemy.orm import Session

import marketplace.repositories.payment as payment_repo
import marketplace.repositories.product as product_repo
import marketplace.repositories.review as review_repo
from marketplace.db.models.payment import Payment as PaymentModel
from marketplace.db.models.rental import Rental as RentalModel
from marketplace.db.models.review import Review as ReviewModel
from marketplace.db.transaction import transaction
from marketplace.domain.statuses import PaymentMethod, ProductStatus, RentalStatus
from marketplace.errors import ConflictError, DomainValidationError, NotFoundError
from marketplace.services import rental as rental_service
from marketplace.services.cascade import CascadePlan, remove_rental, rental_removal_plan
from marketplace.services.payment import create_payment
from marketplace.services.rental import create_rental, restore_availability, update_rental_status
from marketplace.services.review import create_review


def _rental_json(product_id: int, owner_id: int, renter_id: int, **overrides) -> dict:
    payload = {
        "product_id": product_id,
        "owner_id": owner_id,
        "renter_id": renter_id,
        "start_date": "2026-01-10T10:00:00",
        "end_date": "2026-01-12T10:00:00",
        "total_price": 100,
    }
    payload.update(overrides)
    return payload


def _product_status(db: Session, product_id: int) -> ProductStatus:
    return product_repo.get_product_by_id(db, product_id).status


# ============================================================================
# CREATE RENTAL TESTS
# ============================================================================


def test_create_rental_success(client, db: Session, owner, renter, product):
    """Creating a rental returns the nested snapshot and marks the product RENTED."""
    response = client.post(
        "/api/v1/rentals", json=_rental_json(product.id, owner.id, renter.id)
    )
    assert response.status_code == 201
    data = response.json()
    assert data["product_id"] == product.id
    assert data["owner_id"] == owner.id
    assert data["renter_id"] == renter.id
    assert data["total_price"] == 100
    assert data["status"] == "ACTIVE"
    assert data["product"]["id"] == product.id
    assert data["owner"]["email"] == "owner@example.com"
    assert data["renter"]["email"] == "renter@example.com"
    assert data["payment"] is None
    assert data["review"] is None

    assert _product_status(db, product.id) == ProductStatus.RENTED


def test_create_rental_with_explicit_status(client, db: Session, owner, renter, product):
    response = client.post(
        "/api/v1/rentals",
        json=_rental_json(product.id, owner.id, renter.id, status="PENDING"),
    )
    assert response.status_code == 201
    assert response.json()["status"] == "PENDING"


def test_create_rental_product_not_found(client, db: Session, owner, renter):
    response = client.post("/api/v1/rentals", json=_rental_json(99999, owner.id, renter.id))
    assert response.status_code == 404
    assert response.json()["code"] == "NOT_FOUND"
    assert "Product with id 99999" in response.json()["detail"]


def test_create_rental_owner_not_found(client, db: Session, renter, product):
    response = client.post("/api/v1/rentals", json=_rental_json(product.id, 99999, renter.id))
    assert response.status_code == 404
    assert "Owner with id 99999" in response.json()["detail"]


def test_create_rental_renter_not_found(client, db: Session, owner, product):
    response = client.post("/api/v1/rentals", json=_rental_json(product.id, owner.id, 99999))
    assert response.status_code == 404
    assert "Renter with id 99999" in response.json()["detail"]


def test_create_rental_owner_mismatch(client, db: Session, owner, renter, another_renter, product):
    """The owner in the request must own the product."""
    response = client.post(
        "/api/v1/rentals", json=_rental_json(product.id, another_renter.id, renter.id)
    )
    assert response.status_code == 409
    assert response.json()["code"] == "CONFLICT"
    assert response.json()["detail"] == "owner mismatch"
    assert _product_status(db, product.id) == ProductStatus.AVAILABLE
    assert db.query(RentalModel).count() == 0


def test_create_rental_unavailable_product_makes_no_changes(
    client, db: Session, owner, renter, another_renter, product
):
    first = client.post("/api/v1/rentals", json=_rental_json(product.id, owner.id, renter.id))
    assert first.status_code == 201

    second = client.post(
        "/api/v1/rentals",
        json=_rental_json(product.id, owner.id, another_renter.id, total_price=50),
    )
    assert second.status_code == 409
    assert second.json()["detail"] == "product unavailable"

    rentals = db.query(RentalModel).all()
    assert len(rentals) == 1
    assert rentals[0].renter_id == renter.id
    assert _product_status(db, product.id) == ProductStatus.RENTED


def test_create_rental_end_before_start(client, db: Session, owner, renter, product):
    response = client.post(
        "/api/v1/rentals",
        json=_rental_json(
            product.id,
            owner.id,
            renter.id,
            start_date="2026-01-12T10:00:00",
            end_date="2026-01-10T10:00:00",
        ),
    )
    assert response.status_code == 400
    assert response.json()["code"] == "VALIDATION_ERROR"
    assert response.json()["field"] == "end_date"
    assert _product_status(db, product.id) == ProductStatus.AVAILABLE


def test_create_rental_negative_price(client, db: Session, owner, renter, product):
    response = client.post(
        "/api/v1/rentals", json=_rental_json(product.id, owner.id, renter.id, total_price=-1)
    )
    assert response.status_code == 422


def test_create_rental_missing_required_fields(client, db: Session, product):
    response = client.post("/api/v1/rentals", json={"product_id": product.id})
    assert response.status_code == 422


def test_claim_loses_to_concurrent_rental(
    db: Session, owner, renter, another_renter, product, make_rental, monkeypatch
):
    """
    A request that passed the guard before another request claimed the
    product must still fail, and must not leave a rental row behind.
    """
    make_rental(product.id, owner.id, renter.id)
    assert _product_status(db, product.id) == ProductStatus.RENTED

    # Simulate the losing request: its guard ran while the product was still AVAILABLE
    monkeypatch.setattr(rental_service, "check_rental_request", lambda *args, **kwargs: None)

    with pytest.raises(ConflictError) as exc_info:
        make_rental(product.id, owner.id, another_renter.id)

    assert exc_info.value.reason == "product unavailable"
    assert db.query(RentalModel).count() == 1
    assert db.query(RentalModel).filter(RentalModel.renter_id == another_renter.id).count() == 0


def test_create_rental_rejects_window_before_guard(db: Session):
    """Window validation needs no stored entities."""
    with pytest.raises(DomainValidationError) as exc_info:
        create_rental(
            db,
            product_id=99999,
            owner_id=99999,
            renter_id=99999,
            start_date=datetime(2026, 1, 10),
            end_date=datetime(2026, 1, 10),
            total_price=10,
        )
    assert exc_info.value.field == "end_date"


# ============================================================================
# READ / STATUS TESTS
# ============================================================================


def test_get_rental_by_id(client, db: Session, owner, renter, product, make_rental):
    rental = make_rental(product.id, owner.id, renter.id)
    response = client.get(f"/api/v1/rentals/{rental.id}")
    assert response.status_code == 200
    assert response.json()["id"] == rental.id


def test_get_rental_not_found(client, db: Session):
    response = client.get("/api/v1/rentals/99999")
    assert response.status_code == 404


def test_list_rentals_with_filters(
    client, db: Session, owner, renter, another_renter, product, make_rental
):
    first = make_rental(product.id, owner.id, renter.id)
    first_id = first.id
    update_rental_status(db, first_id, RentalStatus.COMPLETED)
    remove_rental(db, first_id)
    second = make_rental(product.id, owner.id, another_renter.id)

    response = client.get("/api/v1/rentals", params={"owner": owner.id})
    assert response.status_code == 200
    assert [r["id"] for r in response.json()] == [second.id]

    response = client.get("/api/v1/rentals", params={"renter": renter.id})
    assert response.json() == []

    response = client.get("/api/v1/rentals", params={"status": "ACTIVE"})
    assert [r["id"] for r in response.json()] == [second.id]

    response = client.get("/api/v1/rentals", params={"product": product.id})
    assert len(response.json()) == 1


def test_list_rentals_unknown_owner(client, db: Session):
    response = client.get("/api/v1/rentals", params={"owner": 99999})
    assert response.status_code == 404
    assert "Owner" in response.json()["detail"]


def test_list_rentals_unknown_product(client, db: Session):
    response = client.get("/api/v1/rentals", params={"product": 99999})
    assert response.status_code == 404


def test_update_rental_status_keeps_product_rented(
    client, db: Session, owner, renter, product, make_rental
):
    rental = make_rental(product.id, owner.id, renter.id)
    response = client.patch(f"/api/v1/rentals/{rental.id}/status", json={"status": "COMPLETED"})
    assert response.status_code == 200
    assert response.json()["status"] == "COMPLETED"
    assert _product_status(db, product.id) == ProductStatus.RENTED


def test_update_rental_status_not_found(client, db: Session):
    response = client.patch("/api/v1/rentals/99999/status", json={"status": "COMPLETED"})
    assert response.status_code == 404


def test_update_rental_status_invalid_value(client, db: Session, owner, renter, product, make_rental):
    rental = make_rental(product.id, owner.id, renter.id)
    response = client.patch(f"/api/v1/rentals/{rental.id}/status", json={"status": "LOST"})
    assert response.status_code == 422


# ============================================================================
# REMOVE RENTAL TESTS
# ============================================================================


def test_rent_conflict_remove_scenario(client, db: Session, owner, renter, another_renter, product):
    """Rent, fail to double-book, remove, and the product is available again."""
    product_id = product.id
    created = client.post("/api/v1/rentals", json=_rental_json(product_id, owner.id, renter.id))
    assert created.status_code == 201
    rental_id = created.json()["id"]
    assert _product_status(db, product_id) == ProductStatus.RENTED

    conflict = client.post(
        "/api/v1/rentals",
        json=_rental_json(
            product_id,
            owner.id,
            another_renter.id,
            start_date="2026-02-01T10:00:00",
            end_date="2026-02-03T10:00:00",
            total_price=50,
        ),
    )
    assert conflict.status_code == 409
    assert conflict.json()["detail"] == "product unavailable"

    removed = client.delete(f"/api/v1/rentals/{rental_id}")
    assert removed.status_code == 200
    assert removed.json()["id"] == rental_id
    assert _product_status(db, product_id) == ProductStatus.AVAILABLE


def test_remove_rental_not_found(client, db: Session):
    response = client.delete("/api/v1/rentals/99999")
    assert response.status_code == 404
    assert "Rental with id 99999" in response.json()["detail"]


def test_remove_rental_restores_availability_every_time(
    db: Session, owner, renter, another_renter, product, make_rental
):
    product_id = product.id
    for renter_id in (renter.id, another_renter.id, renter.id):
        rental = make_rental(product_id, owner.id, renter_id)
        assert _product_status(db, product_id) == ProductStatus.RENTED
        remove_rental(db, rental.id)
        assert _product_status(db, product_id) == ProductStatus.AVAILABLE


def test_remove_rental_with_payment_and_review_leaves_no_orphans(
    client, db: Session, owner, renter, product, make_rental
):
    rental = make_rental(product.id, owner.id, renter.id)
    rental_id = rental.id
    payment = create_payment(
        db, rental_id=rental_id, user_id=renter.id, amount=100, method=PaymentMethod.CARD
    )
    payment_id = payment.id
    update_rental_status(db, rental_id, RentalStatus.COMPLETED)
    review = create_review(
        db,
        rental_id=rental_id,
        product_id=product.id,
        reviewer_id=renter.id,
        reviewee_id=owner.id,
        rating=5,
    )
    review_id = review.id

    response = client.delete(f"/api/v1/rentals/{rental_id}")
    assert response.status_code == 200
    data = response.json()
    assert data["payment"]["id"] == payment_id
    assert data["review"]["id"] == review_id

    assert client.get(f"/api/v1/rentals/{rental_id}").status_code == 404
    assert client.get(f"/api/v1/payments/{payment_id}").status_code == 404
    assert client.get(f"/api/v1/reviews/{review_id}").status_code == 404
    assert payment_repo.get_payment_by_rental_id(db, rental_id) is None
    assert review_repo.get_review_by_rental_id(db, rental_id) is None
    assert _product_status(db, product.id) == ProductStatus.AVAILABLE


def test_remove_rental_twice(client, db: Session, owner, renter, product, make_rental):
    rental = make_rental(product.id, owner.id, renter.id)
    rental_id = rental.id
    assert client.delete(f"/api/v1/rentals/{rental_id}").status_code == 200
    assert client.delete(f"/api/v1/rentals/{rental_id}").status_code == 404


def test_failed_cascade_leaves_nothing_behind(db: Session, owner, renter, product, make_rental):
    """
    If the target delete matches no row, the dependent deletes and the
    availability restore that already ran are rolled back with it.
    """
    rental = make_rental(product.id, owner.id, renter.id)
    rental_id = rental.id
    product_id = product.id
    payment = create_payment(
        db, rental_id=rental_id, user_id=renter.id, amount=100, method=PaymentMethod.CASH
    )
    payment_id = payment.id
    update_rental_status(db, rental_id, RentalStatus.COMPLETED)
    review = create_review(
        db,
        rental_id=rental_id,
        product_id=product_id,
        reviewer_id=renter.id,
        reviewee_id=owner.id,
        rating=4,
    )
    review_id = review.id

    # Dependents hit the real rental's records; the target row is missing
    plan = CascadePlan(
        entity="Rental",
        entity_id=99999,
        dependents=(
            delete(PaymentModel).where(PaymentModel.rental_id == rental_id),
            delete(ReviewModel).where(ReviewModel.rental_id == rental_id),
            restore_availability(product_id),
        ),
        target=delete(RentalModel).where(RentalModel.id == 99999),
    )
    with pytest.raises(NotFoundError):
        with transaction(db) as tx:
            plan.apply(tx)

    assert _product_status(db, product_id) == ProductStatus.RENTED
    assert payment_repo.get_payment_by_id(db, payment_id) is not None
    assert review_repo.get_review_by_id(db, review_id) is not None
    assert db.query(RentalModel).filter(RentalModel.id == rental_id).count() == 1


def test_cascade_plan_for_missing_rental(db: Session, owner, renter, product, make_rental):
    """A removal plan for a rental that is already gone rolls back the availability restore."""
    make_rental(product.id, owner.id, renter.id)

    plan = rental_removal_plan(rental_id=99999, product_id=product.id)
    with pytest.raises(NotFoundError) as exc_info:
        with transaction(db) as tx:
            plan.apply(tx)

    assert "Rental with id 99999" in str(exc_info.value)
    assert _product_status(db, product.id) == ProductStatus.RENTED

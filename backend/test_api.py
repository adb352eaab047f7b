"""HTTP-level checks: auth, role gating, wire format and error mapping."""
import csv
import io
from datetime import date, timedelta

from conftest import PASSWORD
from pharmacy.core.config import settings
from pharmacy.core.security import verify_password
from pharmacy.db.init_db import seed_admin
from pharmacy.models import Medicine, Role, User
from pharmacy.services.export_service import SALES_COLUMNS


# ==============================================================================
# AUTH
# ==============================================================================

def test_login_returns_token_and_role(client, admin):
    res = client.post("/auth/login", json={"email": admin.email, "password": PASSWORD})

    assert res.status_code == 200
    body = res.json()
    assert body["role"] == "Admin"
    assert body["email"] == admin.email

    me = client.get("/auth/me", headers={"Authorization": f"Bearer {body['token']}"})
    assert me.status_code == 200
    assert me.json()["isActive"] is True


def test_login_wrong_password(client, admin):
    res = client.post("/auth/login", json={"email": admin.email, "password": "nope-nope"})
    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid credentials"


def test_login_unknown_user_looks_like_wrong_password(client):
    res = client.post("/auth/login", json={"email": "ghost@pharmacy.com", "password": PASSWORD})
    assert res.status_code == 401
    assert res.json()["detail"] == "Invalid credentials"


def test_disabled_user_cannot_log_in(client, add_user):
    user = add_user("off@pharmacy.com", active=False)

    res = client.post("/auth/login", json={"email": user.email, "password": PASSWORD})

    assert res.status_code == 401
    assert "disabled" in res.json()["detail"]


def test_missing_or_bad_token(client):
    assert client.get("/medicines").status_code == 401
    assert client.get("/medicines", headers={"Authorization": "Bearer garbage"}).status_code == 401


def test_pharmacist_is_kept_out_of_admin_routes(client, pharmacist_headers):
    assert client.get("/reports/summary", headers=pharmacist_headers).status_code == 403
    assert client.get("/users", headers=pharmacist_headers).status_code == 403
    assert client.get("/sales/export", headers=pharmacist_headers).status_code == 403
    assert client.post(
        "/medicines",
        json={"name": "X", "expiryDate": "2030-01-01"},
        headers=pharmacist_headers,
    ).status_code == 403


# ==============================================================================
# USERS
# ==============================================================================

def test_admin_creates_user_and_duplicate_conflicts(client, admin_headers):
    payload = {"name": "New Staff", "email": "new@pharmacy.com", "password": "LongEnough1"}

    res = client.post("/users", json=payload, headers=admin_headers)
    assert res.status_code == 201
    assert res.json()["role"] == Role.PHARMACIST.value

    dup = client.post("/users", json=payload, headers=admin_headers)
    assert dup.status_code == 409
    assert dup.json()["error"] == "Conflict"


def test_short_password_rejected(client, admin_headers):
    res = client.post(
        "/users",
        json={"name": "S", "email": "short@pharmacy.com", "password": "abc"},
        headers=admin_headers,
    )
    assert res.status_code == 422


def test_disabling_user_revokes_access(client, admin_headers, pharmacist, pharmacist_headers):
    res = client.put(f"/users/{pharmacist.id}/status", headers=admin_headers)

    assert res.status_code == 200
    assert res.json()["isActive"] is False
    assert client.get("/medicines", headers=pharmacist_headers).status_code == 401


def test_admin_cannot_disable_self(client, admin, admin_headers):
    res = client.put(f"/users/{admin.id}/status", headers=admin_headers)
    assert res.status_code == 400


# ==============================================================================
# MEDICINES / INVENTORY
# ==============================================================================

def test_medicine_crud_in_camel_case(client, admin_headers):
    res = client.post(
        "/medicines",
        json={"name": "Azithromycin", "brand": "Zithro", "category": "Antibiotic",
              "price": 45.5, "quantity": 12, "expiryDate": "2027-05-01"},
        headers=admin_headers,
    )
    assert res.status_code == 201
    created = res.json()
    assert created["expiryDate"] == "2027-05-01"
    assert created["price"] == 45.5

    dup = client.post(
        "/medicines", json={"name": "Azithromycin", "expiryDate": "2027-05-01"}, headers=admin_headers
    )
    assert dup.status_code == 409

    upd = client.put(f"/medicines/{created['id']}", json={"quantity": 3}, headers=admin_headers)
    assert upd.json()["quantity"] == 3
    assert upd.json()["brand"] == "Zithro"

    assert client.delete(f"/medicines/{created['id']}", headers=admin_headers).status_code == 200
    assert client.get(f"/medicines/{created['id']}", headers=admin_headers).status_code == 404


def test_inventory_alerts_and_stats(client, add_medicine, pharmacist_headers):
    today = date.today()
    add_medicine(name="Old Syrup", expiry_date=today - timedelta(days=1))
    add_medicine(name="Eye Drops", expiry_date=today + timedelta(days=10))
    add_medicine(name="Bandage", quantity=2)
    add_medicine(name="Vitamin C", quantity=100)

    alerts = client.get("/inventory/alerts", headers=pharmacist_headers).json()
    assert [(a["name"], a["type"]) for a in alerts] == [
        ("Old Syrup", "expired"),
        ("Eye Drops", "nearExpiry"),
        ("Bandage", "lowStock"),
    ]

    stats = client.get("/inventory/stats", headers=pharmacist_headers).json()
    assert stats == {"totalMedicines": 4, "lowStock": 1, "expired": 1, "nearExpiry": 1}


def test_pharmacist_corrects_inventory_count(client, add_medicine, pharmacist_headers):
    med = add_medicine(quantity=10)

    res = client.put(f"/inventory/{med.id}", json={"quantity": 8}, headers=pharmacist_headers)

    assert res.status_code == 200
    assert res.json()["quantity"] == 8


# ==============================================================================
# SALES
# ==============================================================================

def test_sale_over_http(client, db, add_medicine, pharmacist, pharmacist_headers):
    med = add_medicine(quantity=10, price="2.00")

    res = client.post(
        "/sales",
        json={"productId": med.id, "quantity": 3, "price": 2.00, "discount": 1.00, "paymentType": "Card"},
        headers=pharmacist_headers,
    )

    assert res.status_code == 201
    body = res.json()
    assert body["invoiceNumber"].startswith("INV-")
    assert body["total"] == 5.0
    assert body["paymentType"] == "Card"
    assert body["cashier"] == pharmacist.email

    db.expire_all()
    assert db.get(Medicine, med.id).quantity == 7


def test_sale_errors_map_to_codes(client, add_medicine, pharmacist_headers):
    med = add_medicine(quantity=1)

    short = client.post("/sales", json={"productId": med.id, "quantity": 2}, headers=pharmacist_headers)
    assert short.status_code == 400
    assert short.json()["error"] == "InsufficientStock"

    missing = client.post("/sales", json={"productId": 9999, "quantity": 1}, headers=pharmacist_headers)
    assert missing.status_code == 400
    assert missing.json()["error"] == "ProductNotFound"

    zero = client.post("/sales", json={"productId": med.id, "quantity": 0}, headers=pharmacist_headers)
    assert zero.status_code == 400
    assert zero.json()["error"] == "ValidationError"


def test_sales_export_has_fixed_header(client, add_medicine, admin_headers):
    med = add_medicine(quantity=5)
    client.post("/sales", json={"productId": med.id, "quantity": 1, "customer": "Walk-in"}, headers=admin_headers)

    res = client.get("/sales/export", headers=admin_headers)

    assert res.status_code == 200
    assert res.headers["content-type"].startswith("text/csv")
    assert "sales-report.csv" in res.headers["content-disposition"]
    rows = list(csv.reader(io.StringIO(res.text)))
    assert rows[0] == SALES_COLUMNS
    assert rows[0][0] == "InvoiceNumber"
    assert rows[1][2] == "Walk-in"
    assert len(rows) == 2


# ==============================================================================
# PURCHASES / REPORTS
# ==============================================================================

def test_purchase_create_and_receive_over_http(client, db, add_medicine, pharmacist_headers):
    med = add_medicine(name="Amoxicillin", quantity=4)

    created = client.post(
        "/purchases",
        json={"supplier": "MedSupply", "medicine": "Amoxicillin", "quantity": 20, "totalCost": 150},
        headers=pharmacist_headers,
    )
    assert created.status_code == 201
    assert created.json()["status"] == "Pending"
    assert created.json()["orderNumber"].startswith("PO-")

    pid = created.json()["id"]
    received = client.put(f"/purchases/{pid}/receive", headers=pharmacist_headers)
    assert received.status_code == 200
    assert received.json()["status"] == "Received"

    cancel = client.put(f"/purchases/{pid}/cancel", headers=pharmacist_headers)
    assert cancel.status_code == 409
    assert cancel.json()["error"] == "InvalidTransition"

    db.expire_all()
    assert db.get(Medicine, med.id).quantity == 24


def test_unknown_purchase_is_404(client, pharmacist_headers):
    res = client.put("/purchases/12345/receive", headers=pharmacist_headers)
    assert res.status_code == 404
    assert res.json()["error"] == "NotFound"


def test_reports_for_admin(client, add_medicine, admin_headers):
    med = add_medicine(quantity=10, price="3.00")
    client.post("/sales", json={"productId": med.id, "quantity": 2}, headers=admin_headers)

    monthly = client.get("/reports/monthly-sales", headers=admin_headers).json()
    assert len(monthly) == 1
    assert float(monthly[0]["total"]) == 6.0

    top = client.get("/reports/top-products?limit=1", headers=admin_headers).json()
    assert top[0]["product"] == "Paracetamol"
    assert top[0]["totalQuantity"] == 2

    summary = client.get("/reports/summary", headers=admin_headers).json()
    assert summary["todaySalesCount"] == 1


def test_seed_admin_runs_once(db):
    generated = seed_admin(db)

    admin = db.query(User).one()
    assert admin.role == Role.ADMIN.value
    assert verify_password(generated or settings.ADMIN_PASSWORD, admin.hashed_password)
    assert seed_admin(db) is None
    assert db.query(User).count() == 1

"""Integration tests for domain based storefront resolution."""

from multistore.models import CustomDomain


def test_serves_store_for_host(client, store, make_product, make_category):
    make_product(store, name="Visible")
    make_product(store, name="Draft", is_active=False)
    make_category("Global", is_global=True)
    make_category("Mine", vendor=store)
    make_category("Archived", vendor=store, status="inactive")

    response = client.get("/api/storefront/by-domain", headers={"Host": "shop.example.com"})

    assert response.status_code == 200
    data = response.json()
    assert data["vendor"]["id"] == store.id
    assert data["vendor"]["custom_domain"] is None
    assert [p["name"] for p in data["products"]] == ["Visible"]
    assert [c["name"] for c in data["categories"]] == ["Global", "Mine"]


def test_host_port_is_ignored(client, store):
    response = client.get("/api/storefront/by-domain", headers={"Host": "SHOP.example.com:8443"})
    assert response.json()["vendor"]["id"] == store.id


def test_custom_domain(client, db, store, super_admin):
    db.add(CustomDomain(domain="brand.shop", vendor_id=store.id, created_by=super_admin.id))
    db.commit()

    data = client.get("/api/storefront/by-domain", headers={"Host": "brand.shop"}).json()

    assert data["vendor"]["id"] == store.id
    assert data["vendor"]["custom_domain"] == "brand.shop"


def test_subdomain_fallback(client, make_vendor):
    legacy = make_vendor(name="Legacy", domain="legacy")
    data = client.get("/api/storefront/by-domain", headers={"Host": "legacy.example.com"}).json()
    assert data["vendor"]["id"] == legacy.id


def test_unknown_domain(client, store):
    response = client.get("/api/storefront/by-domain", headers={"Host": "ghost.example.com"})
    assert response.status_code == 404
    assert response.json()["detail"] == "Store not found"


def test_suspended_store_hidden(client, make_vendor):
    make_vendor(name="Paused", domain="paused.example.com", status="suspended")
    assert client.get("/api/storefront/by-domain", headers={"Host": "paused.example.com"}).status_code == 404


def test_pending_store_is_served(client, make_vendor):
    pending = make_vendor(name="Soon", domain="soon.example.com", status="pending")

    response = client.get("/api/storefront/by-domain", headers={"Host": "soon.example.com"})

    assert response.json()["vendor"]["id"] == pending.id


def test_local_host_skips_suspended_stores(client, make_vendor):
    make_vendor(name="Paused", domain="paused.example.com", status="suspended")
    later = make_vendor(name="Later", domain="later.example.com")
    assert client.get("/api/storefront/by-domain").json()["vendor"]["id"] == later.id


def test_local_host_serves_first_store(client, store, make_vendor):
    make_vendor(name="Later", domain="later.example.com")
    assert client.get("/api/storefront/by-domain").json()["vendor"]["id"] == store.id


def test_local_host_preview_by_query(client, store, make_vendor):
    later = make_vendor(name="Later", domain="later.example.com")
    data = client.get("/api/storefront/by-domain", params={"domain": "later.example.com"}).json()
    assert data["vendor"]["id"] == later.id


def test_local_host_without_stores(client):
    response = client.get("/api/storefront/by-domain")
    assert response.status_code == 404
    assert response.json()["detail"] == "No stores available"

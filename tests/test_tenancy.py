"""Tests for domain resolution and effective roles."""

from types import SimpleNamespace

import pytest

from multistore.core import tenancy
from multistore.models import CustomDomain


def vendor(vid):
    return SimpleNamespace(id=vid)


class TestHelpers:
    def test_normalize_domain(self):
        assert tenancy.normalize_domain("Shop.Example.com:8080") == "shop.example.com"
        assert tenancy.normalize_domain("") is None
        assert tenancy.normalize_domain(None) is None

    def test_home_paths(self):
        assert tenancy.home_path_for_role("super_admin") == "/admin"
        assert tenancy.home_path_for_role("admin") == "/admin"
        assert tenancy.home_path_for_role("seller") == "/seller"
        assert tenancy.home_path_for_role("buyer") == "/buyer"
        assert tenancy.home_path_for_role("unknown") == "/buyer"

    def test_slugify_subdomain(self):
        assert tenancy.slugify_subdomain("  Joe's Coffee & Tea!! ") == "joe-s-coffee-tea"


class TestEffectiveRole:
    def test_seller_on_own_domain(self):
        assert tenancy.effective_role("seller", vendor("a"), vendor("a"), local=False) == "seller"

    def test_seller_on_foreign_domain_is_buyer(self):
        assert tenancy.effective_role("seller", vendor("a"), vendor("b"), local=False) == "buyer"

    def test_seller_without_store_is_buyer(self):
        assert tenancy.effective_role("seller", None, vendor("b"), local=False) == "buyer"

    def test_local_host_keeps_role(self):
        assert tenancy.effective_role("seller", None, None, local=True) == "seller"

    def test_other_roles_unchanged(self):
        assert tenancy.effective_role("super_admin", None, vendor("b"), local=False) == "super_admin"
        assert tenancy.effective_role("buyer", None, vendor("b"), local=False) == "buyer"


class TestLookup:
    def test_find_by_primary_domain(self, db, store):
        found, via_custom = tenancy.find_vendor_by_domain(db, "shop.example.com")
        assert found.id == store.id
        assert via_custom is False

    def test_find_by_active_custom_domain(self, db, store, super_admin):
        db.add(CustomDomain(domain="myshop.com", vendor_id=store.id, created_by=super_admin.id))
        db.add(CustomDomain(domain="old.com", vendor_id=store.id, is_active=False, created_by=super_admin.id))
        db.commit()

        found, via_custom = tenancy.find_vendor_by_domain(db, "myshop.com")
        assert found.id == store.id
        assert via_custom is True
        assert tenancy.find_vendor_by_domain(db, "old.com") == (None, False)

    def test_storefront_falls_back_to_first_label(self, db, make_vendor):
        legacy = make_vendor(name="Legacy", domain="legacy")
        found, _ = tenancy.resolve_storefront_vendor(db, "legacy.example.com")
        assert found.id == legacy.id


class TestStoreContext:
    def test_unknown_domain(self, db):
        with pytest.raises(LookupError):
            tenancy.build_store_context(db, "nowhere.example.com", None)

    def test_local_seller_acts_for_own_store(self, db, seller, store):
        ctx = tenancy.build_store_context(db, "localhost", {"id": seller.id, "email": seller.email, "role": "seller"})
        assert ctx.local
        assert ctx.vendor.id == store.id

    def test_owner_on_own_domain(self, db, seller, store):
        ctx = tenancy.build_store_context(db, "shop.example.com", {"id": seller.id, "email": seller.email, "role": "seller"})
        assert ctx.is_domain_owner
        assert ctx.role == "seller"
        assert ctx.vendor.id == store.id

    def test_seller_on_foreign_domain(self, db, make_vendor, make_user, store):
        other = make_user(role="seller")
        make_vendor(name="Other", domain="other.example.com", owner=other)

        ctx = tenancy.build_store_context(db, "shop.example.com", {"id": other.id, "email": other.email, "role": "seller"})
        assert ctx.role == "buyer"
        assert ctx.vendor is None

    def test_super_admin_acts_for_domain_vendor(self, db, super_admin, store):
        ctx = tenancy.build_store_context(db, "shop.example.com", {"id": super_admin.id, "email": super_admin.email, "role": "super_admin"})
        assert ctx.vendor.id == store.id

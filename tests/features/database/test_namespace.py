"""Tests for namespace name derivation."""

import pytest

from menu_tenancy.config.constants import NamespaceLimits
from menu_tenancy.core.exceptions import InvalidNamespaceError
from menu_tenancy.features.database.utils.namespace import (
    derive_namespace_name,
    quote_identifier,
    sanitize_slug,
    validate_namespace_name,
    validate_namespace_prefix,
)


class TestDeriveNamespaceName:

    @pytest.mark.parametrize("slug,expected", [
        ("pasta-house", "menu_tenant_pasta_house"),
        ("Pasta House!!", "menu_tenant_pasta_house"),
        ("--cafe--", "menu_tenant_cafe"),
        ("cafe-2", "menu_tenant_cafe_2"),
    ])
    def test_derivation(self, slug, expected):
        assert derive_namespace_name(slug) == expected

    def test_is_deterministic(self):
        assert derive_namespace_name("burger-barn") == derive_namespace_name("burger-barn")

    @pytest.mark.parametrize("slug", ["", "!!!", "---", None])
    def test_slug_without_safe_characters(self, slug):
        with pytest.raises(InvalidNamespaceError):
            derive_namespace_name(slug)

    def test_long_slug_is_truncated(self):
        name = derive_namespace_name("a" * 200)

        assert len(name) <= NamespaceLimits.MAX_IDENTIFIER_LENGTH
        assert name == "menu_tenant_" + "a" * NamespaceLimits.MAX_SLUG_PART_LENGTH

    def test_identifier_limit_applies_to_whole_name(self):
        name = derive_namespace_name("abcdef", prefix="p" * 60)

        assert name == "p" * 60 + "abc"

    def test_empty_prefix(self):
        assert derive_namespace_name("pasta-house", prefix="") == "pasta_house"

    @pytest.mark.parametrize("slug", ["Pasta House!!", "a" * 200, "x-y_z 9"])
    def test_result_is_safe_identifier(self, slug):
        assert validate_namespace_name(derive_namespace_name(slug)) == derive_namespace_name(slug)


class TestPrefixValidation:

    @pytest.mark.parametrize("prefix", ["", "menu_", "t", "tenant_db_"])
    def test_valid_prefix(self, prefix):
        validate_namespace_prefix(prefix)

    @pytest.mark.parametrize("prefix", ["1menu_", "_menu", "menu-", "Menu_", "menu; drop"])
    def test_invalid_prefix(self, prefix):
        with pytest.raises(InvalidNamespaceError):
            validate_namespace_prefix(prefix)

    def test_prefix_must_leave_room_for_slug(self):
        with pytest.raises(InvalidNamespaceError):
            validate_namespace_prefix("p" * NamespaceLimits.MAX_IDENTIFIER_LENGTH)


class TestIdentifiers:

    def test_sanitize_collapses_runs(self):
        assert sanitize_slug("a -- b") == "a_b"

    def test_quote_identifier(self):
        assert quote_identifier("menu_tenant_cafe") == '"menu_tenant_cafe"'

    @pytest.mark.parametrize("name", ['cafe"; DROP DATABASE x; --', "Cafe", "_cafe", "x" * 64])
    def test_quote_rejects_unsafe_names(self, name):
        with pytest.raises(InvalidNamespaceError):
            quote_identifier(name)

"""Unit tests for RedirectPolicy."""

import pytest

from tglogin.config import SiteSettings
from tglogin.domain.service import RedirectPolicy
from tglogin.domain.service.redirect_policy import remove_query_arg
from tests.conftest import make_account

SITE = SiteSettings(
    home_url="https://example.com/",
    admin_url="https://example.com/wp-admin/",
    profile_url="https://example.com/wp-admin/profile.php",
    user_admin_url="https://example.com/wp-admin/user/",
    tenant_dashboard_url="https://example.com/{tenant}/wp-admin/",
    allowed_redirect_hosts=["shop.example.com"],
)
MULTISITE = SITE.model_copy(update={"multisite": True})


class TestRemoveQueryArg:
    """Tests for remove_query_arg()."""

    def test_removes_only_the_named_argument(self):
        url = "https://example.com/page?reauth=1&tab=posts"

        assert remove_query_arg(url, "reauth") == "https://example.com/page?tab=posts"

    def test_leaves_urls_without_query_untouched(self):
        assert remove_query_arg("/page", "reauth") == "/page"


class TestLandingPage:
    """Tests for the default target when no explicit redirect is requested."""

    @pytest.mark.parametrize(
        "role,expected",
        [
            ("administrator", "https://example.com/wp-admin/"),
            ("editor", "https://example.com/wp-admin/"),
            ("subscriber", "https://example.com/wp-admin/profile.php"),
            ("banned", "https://example.com/"),
        ],
    )
    def test_depends_on_role(self, role, expected):
        """Editors land in the dashboard, readers on their profile."""
        policy = RedirectPolicy(SITE)

        assert policy.resolve(make_account(roles=[role]), None) == expected

    @pytest.mark.parametrize("requested", ["", "wp-admin/", SITE.admin_url])
    def test_admin_root_counts_as_no_target(self, requested):
        """Asking for the admin root yields the role landing page."""
        policy = RedirectPolicy(SITE)

        target = policy.resolve(make_account(roles=["subscriber"]), requested)

        assert target == SITE.profile_url

    def test_multisite_user_without_tenant_goes_to_user_home(self):
        """Accounts on no tenant use the cross-tenant home."""
        policy = RedirectPolicy(MULTISITE)

        target = policy.resolve(make_account(roles=["administrator"]), None)

        assert target == MULTISITE.user_admin_url

    def test_multisite_super_admin_without_tenant_uses_dashboard(self):
        """Super admins are never sent to the user home."""
        policy = RedirectPolicy(MULTISITE)

        target = policy.resolve(make_account(roles=[], is_super_admin=True), None)

        assert target == MULTISITE.admin_url

    def test_multisite_user_without_read_goes_to_tenant_dashboard(self):
        """Without read on this site, the primary tenant dashboard is used."""
        policy = RedirectPolicy(MULTISITE)
        account = make_account(roles=[], tenant_ids=["blog7"])

        assert policy.resolve(account, None) == "https://example.com/blog7/wp-admin/"


class TestExplicitTarget:
    """Tests for requested redirect targets."""

    def test_keeps_relative_target(self):
        policy = RedirectPolicy(SITE)

        target = policy.resolve(make_account(), "/members/alice")

        assert target == "/members/alice"

    def test_strips_reauth(self):
        """The re-authentication flag is dropped from the target."""
        policy = RedirectPolicy(SITE)

        target = policy.resolve(make_account(), "https://example.com/shop?reauth=1")

        assert target == "https://example.com/shop"

    def test_allows_configured_host(self):
        policy = RedirectPolicy(SITE)

        target = policy.resolve(make_account(), "https://shop.example.com/cart")

        assert target == "https://shop.example.com/cart"

    @pytest.mark.parametrize(
        "requested",
        [
            "https://evil.example.net/",
            "//evil.example.net/path",
            "javascript:alert(1)",
            "https:evil.example",
            "https:evil.example/steal",
            "http:/evil.example",
            "/\\evil.example",
            "\\\\evil.example",
            "/\t/evil.example.net",
        ],
    )
    def test_rejects_off_site_targets(self, requested):
        """Foreign hosts and script URLs fall back to the admin URL."""
        policy = RedirectPolicy(SITE)

        assert policy.resolve(make_account(), requested) == SITE.admin_url

    def test_rejects_scheme_without_host_on_plain_http_site(self):
        """A browser resolves ``https:host`` against an http page as off-site."""
        site = SITE.model_copy(update={"home_url": "http://example.com/"})
        policy = RedirectPolicy(site)

        target = policy.resolve(make_account(), "https:evil.example/steal")

        assert target == site.admin_url

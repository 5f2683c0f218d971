"""Post-login redirect policy."""

import re
from typing import Optional
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import logfire

from tglogin.config import SiteSettings
from tglogin.domain.model.account import LocalAccount

_CONTROL_RE = re.compile(r"[\x00-\x1f\x7f]")


def remove_query_arg(url: str, name: str) -> str:
    """Drop a query argument from a URL, keeping the rest untouched."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    query = [
        (key, value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
        if key != name
    ]
    return urlunsplit(parts._replace(query=urlencode(query)))


class RedirectPolicy:
    """Chooses where to send a user after login."""

    def __init__(self, site_settings: SiteSettings) -> None:
        """Initialize redirect policy.

        Args:
            site_settings: Site URLs and role capabilities
        """
        self.site = site_settings

    def has_cap(self, account: LocalAccount, capability: str) -> bool:
        """Whether any role of the account grants ``capability``."""
        if account.is_super_admin:
            return True
        return any(
            capability in self.site.role_capabilities.get(role, [])
            for role in account.roles
        )

    def is_admin_root(self, target: str) -> bool:
        """Whether a target points at the admin root."""
        return target in (self.site.admin_path, self.site.admin_url)

    def resolve(self, account: LocalAccount, requested: Optional[str]) -> str:
        """Compute the redirect target.

        An explicit target wins unless it is empty or the admin root. In that
        case the target depends on what the account may do:

        * multi-tenant, no tenant and not super admin: cross-tenant user home
        * multi-tenant, no ``read``: dashboard of the primary tenant
        * no ``edit_posts``: profile page with ``read``, otherwise home
        * otherwise: admin dashboard

        Args:
            account: Logged-in account
            requested: ``redirect_to`` from the request

        Returns:
            Safe absolute or site-relative URL
        """
        target = remove_query_arg(requested, "reauth") if requested else ""

        if not target or self.is_admin_root(target):
            target = self._landing_page(account)

        safe = self.safe_target(target)
        logfire.info(
            "Redirect target resolved",
            account_id=str(account.id),
            requested=requested,
            target=safe,
        )
        return safe

    def _landing_page(self, account: LocalAccount) -> str:
        site = self.site
        if site.multisite and not account.tenant_ids and not account.is_super_admin:
            return site.user_admin_url
        if site.multisite and not self.has_cap(account, "read"):
            if account.tenant_ids:
                return site.tenant_dashboard_url.format(tenant=account.tenant_ids[0])
            return site.user_admin_url
        if not self.has_cap(account, "edit_posts"):
            return site.profile_url if self.has_cap(account, "read") else site.home_url
        return site.admin_url

    def safe_target(self, target: str) -> str:
        """Return ``target`` if it stays on an allowed host, else the admin URL.

        Site-relative paths are allowed. Anything with a scheme or a
        ``//host`` prefix must name the site host or an allowed host.
        Backslashes and control characters are refused outright since
        browsers read ``\\`` as ``/`` and drop tabs and newlines.
        """
        target = target.strip()
        if "\\" in target or _CONTROL_RE.search(target):
            logfire.warn("Rejected malformed redirect", target=target)
            return self.site.admin_url

        parts = urlsplit(target)
        if not parts.scheme and not parts.netloc:
            return target

        allowed = {self.site.host, *self.site.allowed_redirect_hosts}
        if (
            parts.scheme in ("", "http", "https")
            and parts.netloc
            and parts.hostname in allowed
        ):
            return target

        logfire.warn("Rejected off-site redirect", target=target)
        return self.site.admin_url

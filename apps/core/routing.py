"""Route classification and the redirect decisions made from it."""

from dataclasses import dataclass
from enum import Enum

LOGIN_PATH = "/login"
HOME_PATH = "/"

AUTH_PREFIXES = ("/login", "/register", "/register-org")
ORG_SCOPED_PREFIX = "/org/"
LEGACY_PROTECTED_PREFIXES = ("/dashboard", "/admin", "/calendar")


class RouteClass(str, Enum):
    """Access class of a request path."""

    AUTH = "auth"
    ORG_SCOPED = "org_scoped"
    LEGACY_PROTECTED = "legacy_protected"
    PUBLIC = "public"


def normalize_path(path: str) -> str:
    """Drop the query string and fragment from a path."""
    return path.split("?", 1)[0].split("#", 1)[0]


def classify(path: str) -> RouteClass:
    """
    Map a request path to its route class.

    Rules are prefix-based, case-sensitive and evaluated in priority order:
    auth pages, org-scoped pages, legacy protected pages, then public.
    """
    path = normalize_path(path)
    if path.startswith(AUTH_PREFIXES):
        return RouteClass.AUTH
    if path.startswith(ORG_SCOPED_PREFIX):
        return RouteClass.ORG_SCOPED
    if path.startswith(LEGACY_PROTECTED_PREFIXES):
        return RouteClass.LEGACY_PROTECTED
    return RouteClass.PUBLIC


def is_protected(path: str) -> bool:
    """Check if a path requires an authenticated caller."""
    return classify(path) in (RouteClass.ORG_SCOPED, RouteClass.LEGACY_PROTECTED)


@dataclass(frozen=True)
class RouteDecision:
    """Outcome of a route check: no action, a redirect, or a skipped check."""

    redirect_to: str | None = None
    skipped: bool = False

    @property
    def is_redirect(self) -> bool:
        return self.redirect_to is not None


ALLOW = RouteDecision()
SKIPPED = RouteDecision(skipped=True)


def decide(path: str, is_authenticated: bool, check_skipped: bool = False) -> RouteDecision:
    """
    Decide whether a caller may proceed to a path.

    ``check_skipped`` is the explicit signal that the identity provider is
    unavailable. The result is then SKIPPED, which never redirects and never
    implies an authenticated caller.
    """
    if check_skipped:
        return SKIPPED

    # Protected check runs before the auth-page check
    if not is_authenticated and is_protected(path):
        return RouteDecision(redirect_to=LOGIN_PATH)

    if is_authenticated and classify(path) == RouteClass.AUTH:
        return RouteDecision(redirect_to=HOME_PATH)

    return ALLOW

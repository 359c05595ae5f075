"""
Theme configuration for product feedback classification
Defines the canonical theme vocabulary and the ordered keyword rules
"""

# Sentinel for comments no rule matches. Counted internally, never surfaced.
UNCLASSIFIED = "unclassified"

# Label used when unclassified low-impact rows are folded into one bucket
VARIOUS_FEEDBACK = "Various feedback"

PASSWORD_RESET = "Password Reset Issues"
AUTHENTICATION = "Authentication / Login Issues"
SUPPORT_DELAYS = "Support Response Delays"
EMAIL_DELIVERY = "Email Delivery Issues"
NOTIFICATIONS = "Notifications / Alerts"
API_TIMEOUTS = "API Timeout Errors"
LINK_VALIDATION = "Link / Validation Errors"
TICKET_STATUS = "Issue / Ticket Status"
WORKFLOW_FRICTION = '"Needs Info" Workflow Friction'
DOCUMENTATION = "Documentation Confusion"

# Ordered rules: first match wins. Keywords are lower-case and match at a
# leading word boundary. Password reset sits ahead of the generic auth and
# link rules, which would otherwise swallow it.
THEME_RULES = [
    (PASSWORD_RESET, ["password reset", "reset password", "reset link", "reset my password",
                      "forgot password", "forgot my password", "link expired"]),
    (AUTHENTICATION, ["login", "log in", "logged in", "auth", "password", "sign-in", "sign in",
                      "signin", "sso", "saml", "idp", "session", "token", "2fa", "mfa"]),
    (SUPPORT_DELAYS, ["delay", "slow", "response time", "wait", "support", "reply", "replied",
                      "no response"]),
    (EMAIL_DELIVERY, ["email", "e-mail", "inbox", "mail", "spam", "delivery"]),
    (NOTIFICATIONS, ["notification", "alert", "push notification"]),
    (API_TIMEOUTS, ["api", "timeout", "timed out", "time out", "504", "gateway", "rate limit",
                    "rate-limit", "endpoint", "failing"]),
    (LINK_VALIDATION, ["link", "validation", "invalid", "error", "broken", "expired", "verify",
                       "verification", "404"]),
    (TICKET_STATUS, ["status", "tracking", "ticket", "stuck"]),
    (WORKFLOW_FRICTION, ["needs info", "workflow", "triage", "labels", "github"]),
    (DOCUMENTATION, ["documentation", "docs", "guide", "scattered", "right page", "tutorial",
                     "readme"]),
]

CANONICAL_THEMES = [theme for theme, _ in THEME_RULES]

# Themes never shown on KPI cards (feedback about process, not product issues)
KPI_EXCLUDED_THEMES = frozenset({NOTIFICATIONS, TICKET_STATUS})

# Monitor bucket prefers this theme whenever it is present
MONITOR_PREFERRED_THEME = AUTHENTICATION

# Number of themes shown for the Low Impact bucket
LOW_IMPACT_MAX_ISSUES = 3

# Label shape limits
MIN_LABEL_WORDS = 2
MAX_LABEL_WORDS = 5
MAX_LABEL_CHARS = 50


def get_theme_list() -> list[str]:
    """
    Get list of all canonical theme names, in rule order
    """
    return list(CANONICAL_THEMES)


def is_canonical_theme(theme_name: str) -> bool:
    """
    Check if a label belongs to the fixed vocabulary

    Args:
        theme_name: Label to check

    Returns:
        True if the label is a canonical theme
    """
    return theme_name in CANONICAL_THEMES


def is_surfaceable(theme_name: str) -> bool:
    """True for labels that may appear on a headline or KPI surface"""
    return bool(theme_name) and theme_name != UNCLASSIFIED

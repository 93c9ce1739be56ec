"""Deployment profiles."""

ENV_PRODUCTION = "production"
ENV_STAGING = "staging"
ENV_DEVELOPMENT = "development"
ENV_TESTING = "testing"

KNOWN_ENVIRONMENTS = (ENV_PRODUCTION, ENV_STAGING, ENV_DEVELOPMENT, ENV_TESTING)


def is_production(environment: str) -> bool:
    """Only production hides activity of admins logged in as other users."""
    return environment == ENV_PRODUCTION

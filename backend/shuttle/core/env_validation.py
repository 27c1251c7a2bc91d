"""
Runtime Environment Validation Module

Validates the configuration at application startup. If validation fails,
the application refuses to start (hard fail, exit code 1).
"""

import sys

from pydantic import ValidationError

from shuttle.core.config import PaymentProviderKind, Settings, StoreBackend


def validate_environment() -> Settings:
    """
    Validate environment variables at startup.

    Must be called before the FastAPI app starts serving.

    Returns:
        Settings: Validated settings object

    Raises:
        SystemExit: If validation fails (exit code 1)
    """
    try:
        settings = Settings()
    except ValidationError as e:
        print("❌ FATAL: Environment validation failed", file=sys.stderr)
        print("\nMissing or invalid environment variables:", file=sys.stderr)
        for error in e.errors():
            field = " -> ".join(str(loc) for loc in error["loc"])
            print(f"   • {field}: {error['msg']}", file=sys.stderr)
        print("\nPlease check your .env file or environment variables.", file=sys.stderr)
        sys.exit(1)

    problems = collect_problems(settings)
    if problems:
        for problem in problems:
            print(f"❌ FATAL: {problem}", file=sys.stderr)
        sys.exit(1)

    print("✅ Environment validation passed")
    print(f"   App: {settings.app_name}")
    print(f"   Debug: {settings.debug}")
    print(f"   Store: {settings.store_backend.value}")
    print(f"   Payments: {settings.payment_provider.value}")
    return settings


def collect_problems(settings: Settings) -> list[str]:
    """Return a list of configuration problems; empty when valid."""
    problems = []

    # 1. CORS: no wildcard outside debug mode
    if not settings.debug and "*" in settings.origins:
        problems.append(
            "Wildcard CORS origin (*) detected in production mode. "
            "Set ALLOWED_ORIGINS to specific domains (comma-separated)."
        )

    # 2. Store backend
    if settings.store_backend == StoreBackend.DATABASE:
        url = settings.database_url or ""
        if not url.startswith(("postgresql", "sqlite")):
            problems.append(
                "DATABASE_URL must be a PostgreSQL (postgresql+asyncpg://) or "
                "SQLite (sqlite+aiosqlite://) URL when STORE_BACKEND=database"
            )

    # 3. Payment provider
    if settings.payment_provider == PaymentProviderKind.STRIPE and not settings.stripe_secret_key:
        problems.append("STRIPE_SECRET_KEY required when PAYMENT_PROVIDER=stripe")

    # 4. Admin access
    if not settings.debug and not settings.admin_api_key:
        problems.append("ADMIN_API_KEY required outside debug mode")

    return problems


if __name__ == "__main__":
    validate_environment()
    print("\n✅ All environment variables are valid!")

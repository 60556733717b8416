"""Application configuration with environment variables."""

from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # Environment
    ENV: str = "dev"

    # App Version (format: a.bc.de - major.feature.patch)
    VERSION: str = "0.01.00"

    # Database
    DATABASE_URL: str

    # Identity provider bearer tokens (supports key rotation)
    IDENTITY_JWT_SECRET: str = "change-this-in-production"
    IDENTITY_JWT_SECRET_PREVIOUS: str = ""  # Set during rotation, clear after
    IDENTITY_JWT_AUDIENCE: str = "authenticated"
    JWT_EXPIRES_HOURS: int = 4  # Lifetime of demo-login tokens we mint ourselves

    # CORS
    CORS_ORIGINS: str = "http://localhost:5173"

    # Public app URL (links in notifications and QR landing pages)
    APP_URL: str = "http://localhost:5173"

    # Logging
    LOG_LEVEL: str = "INFO"

    # Sentry
    SENTRY_DSN: str = ""

    # Rate limits (requests per minute)
    RATE_LIMIT_AUTH: int = 10  # Demo login, OTP send/verify
    RATE_LIMIT_PUBLIC: int = 30  # QR lookup, verification webhook
    RATE_LIMIT_API: int = 120  # General API

    # Demo login (evaluation only)
    DEMO_LOGIN_ENABLED: bool = False

    # Pillars: when True, a pillar can only advance once every earlier one is complete
    PILLAR_ENFORCE_ORDER: bool = False

    # Commission payouts
    PLATFORM_FEE_PERCENT: float = 10.0

    # Phone OTP
    OTP_TTL_MINUTES: int = 10
    OTP_MAX_ATTEMPTS: int = 5

    # Redis (chat storage, shared rate limits). Unset or memory:// keeps both in-process
    REDIS_URL: str = ""
    REDIS_MAX_CONNECTIONS: int = 20

    # Chat
    CHAT_TTL_SECONDS: int = 7 * 24 * 3600
    CHAT_MAX_MESSAGES: int = 200

    # Vendor HTTP
    VENDOR_TIMEOUT_SECONDS: float = 15.0

    # Resend (email)
    RESEND_API_KEY: str = ""
    EMAIL_FROM: str = "Properly <noreply@properly.com.au>"

    # Twilio (SMS)
    TWILIO_ACCOUNT_SID: str = ""
    TWILIO_AUTH_TOKEN: str = ""
    TWILIO_PHONE_NUMBER: str = ""

    # Didit (verification of identity)
    DIDIT_API_KEY: str = ""
    DIDIT_BASE_URL: str = "https://apx.didit.me/v2"
    DIDIT_WEBHOOK_SECRET: str = ""
    DIDIT_CALLBACK_URL: str = ""

    # Apple Maps (MapKit JS token)
    APPLE_MAPS_TEAM_ID: str = ""
    APPLE_MAPS_KEY_ID: str = ""
    APPLE_MAPS_PRIVATE_KEY: str = ""  # PEM, literal "\n" sequences allowed

    # Smokeball (practice management)
    SMOKEBALL_API_KEY: str = ""
    SMOKEBALL_BASE_URL: str = "https://api.smokeball.com.au"

    # PEXA (settlement network)
    PEXA_API_KEY: str = ""
    PEXA_BASE_URL: str = "https://api.pexa.com.au"

    @property
    def cors_origins_list(self) -> list[str]:
        """Parse CORS_ORIGINS into a list."""
        return [o.strip() for o in self.CORS_ORIGINS.split(",") if o.strip()]

    @property
    def identity_jwt_secrets(self) -> list[str]:
        """Returns list of valid secrets (current first, then previous if set)."""
        secrets = [self.IDENTITY_JWT_SECRET]
        if self.IDENTITY_JWT_SECRET_PREVIOUS:
            secrets.append(self.IDENTITY_JWT_SECRET_PREVIOUS)
        return secrets


settings = Settings()

import os

class Config:
    raw_db_url = os.getenv("DATABASE_URL")

    if raw_db_url:
        if raw_db_url.startswith("postgres://"):
            raw_db_url = raw_db_url.replace("postgres://", "postgresql://", 1)
        SQLALCHEMY_DATABASE_URI = raw_db_url
    else:
        SQLALCHEMY_DATABASE_URI = "sqlite:///dinnersafari.db"

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SECRET_KEY = os.getenv("SECRET_KEY", "change-me-dev-secret")

    # Participant links are HMAC-signed with this key
    TOKEN_SECRET = os.getenv("TOKEN_SECRET", "fallback-dev-secret")
    TOKEN_EXPIRY_DAYS = int(os.getenv("TOKEN_EXPIRY_DAYS", "30"))

    ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "letmein123")

    # Course times are stored as local wall-clock times in this zone
    EVENT_TIMEZONE = os.getenv("EVENT_TIMEZONE", "Europe/Stockholm")

    AFTERPARTY_TEASE_MINUTES = int(os.getenv("AFTERPARTY_TEASE_MINUTES", "30"))

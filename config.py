import os
from dotenv import load_dotenv
load_dotenv()


def _int(name, default):
    value = os.getenv(name)
    return int(value) if value else default


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret")
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///helpermatch.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # background jobs run inline when Redis is not configured
    REDIS_URL = os.getenv("REDIS_URL")

    MEILISEARCH_HOST = os.getenv("MEILISEARCH_HOST")
    MEILISEARCH_API_KEY = os.getenv("MEILISEARCH_API_KEY")
    SEARCH_INDEX_NAME = os.getenv("SEARCH_INDEX_NAME", "employees_public")
    SEARCH_TIMEOUT = _int("SEARCH_TIMEOUT", 10)

    S3_ENDPOINT = os.getenv("S3_ENDPOINT")
    S3_REGION = os.getenv("S3_REGION", "auto")
    S3_BUCKET = os.getenv("S3_BUCKET", "helpermatch-uploads")
    S3_ACCESS_KEY = os.getenv("S3_ACCESS_KEY")
    S3_SECRET_KEY = os.getenv("S3_SECRET_KEY")
    S3_PUBLIC_URL = os.getenv("S3_PUBLIC_URL", "")
    UPLOAD_MAX_BYTES = _int("UPLOAD_MAX_BYTES", 5 * 1024 * 1024)
    UPLOAD_URL_EXPIRES = _int("UPLOAD_URL_EXPIRES", 3600)

    STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
    STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET")
    STRIPE_PRODUCT_ID = os.getenv("STRIPE_PRODUCT_ID")
    SUBSCRIPTION_PRICE = _int("SUBSCRIPTION_PRICE", 600)
    SUBSCRIPTION_CURRENCY = os.getenv("SUBSCRIPTION_CURRENCY", "PHP")
    SUBSCRIPTION_MONTHS = _int("SUBSCRIPTION_MONTHS", 3)

    CRON_SECRET = os.getenv("CRON_SECRET")

    SENDGRID_API_KEY = os.getenv("SENDGRID_API_KEY")
    MAIL_FROM = os.getenv("MAIL_FROM", "noreply@example.com")
    MAIL_FROM_NAME = os.getenv("MAIL_FROM_NAME", "HelperMatch")
    UID_DOMAIN = os.getenv("UID_DOMAIN", "helpermatch.local")

    APP_BASE_URL = os.getenv("APP_BASE_URL", "http://localhost:5000")
    SITE_NAME = os.getenv("SITE_NAME", "HelperMatch")


class TestConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    REDIS_URL = None
    MEILISEARCH_HOST = None
    SENDGRID_API_KEY = None
    S3_ENDPOINT = "https://storage.example.com"
    S3_REGION = "us-east-1"
    S3_BUCKET = "test-bucket"
    S3_ACCESS_KEY = "test-access-key"
    S3_SECRET_KEY = "test-secret-key"
    S3_PUBLIC_URL = "https://cdn.example.com"
    STRIPE_SECRET_KEY = "sk_test_dummy"
    STRIPE_WEBHOOK_SECRET = "whsec_dummy"
    STRIPE_PRODUCT_ID = "prod_test"
    CRON_SECRET = "cron-secret"
    APP_BASE_URL = "https://helpermatch.example.com"

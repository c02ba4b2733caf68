"""
Settings for the pytest run.

Seeds the environment so tests never need Doppler.
"""

import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-not-for-production")
os.environ.setdefault("DATABASE_URL", "sqlite://:memory:")

from apps.web.config.settings import *  # noqa: E402, F403

PAYMENT_GATEWAY = "stripe"
STRIPE_SECRET_KEY = "sk_test_placeholder"
STRIPE_WEBHOOK_SECRET = "whsec_test123"
RESEND_API_KEY = "re_test_placeholder"

PASSWORD_HASHERS = ["django.contrib.auth.hashers.MD5PasswordHasher"]

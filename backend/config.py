# config.py
import os

SESSION_SECRET = os.getenv("SESSION_SECRET", "change_me_session_secret")
SESSION_MAX_AGE_SECONDS = int(os.getenv("SESSION_MAX_AGE_SECONDS", str(60 * 60 * 24 * 7)))

# Admins are identified by explicit address or by email domain (e.g. "example.com")
ADMIN_EMAILS = {
    e.strip().lower()
    for e in os.getenv("ADMIN_EMAILS", "").split(",")
    if e.strip()
}
ADMIN_EMAIL_DOMAIN = os.getenv("ADMIN_EMAIL_DOMAIN", "").strip().lower().lstrip("@")

ALLOW_TEST_ENDPOINTS = os.getenv("ALLOW_TEST_ENDPOINTS", "false").lower() == "true"

DIRECTORY_LIMIT = int(os.getenv("DIRECTORY_LIMIT", "200"))

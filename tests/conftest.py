"""Test configuration and fixtures."""

import os

# Defaults so Settings() resolves provider audiences in tests.
# Set before any identity module reads the environment.
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("AUTH__JWT_SECRET", "test-secret-key-for-session-tokens-0123")
os.environ.setdefault("PROVIDERS__GOOGLE__CLIENT_ID", "google-client-id")
os.environ.setdefault("PROVIDERS__LINE__CHANNEL_ID", "line-channel-id")
os.environ.setdefault("PROVIDERS__PASSKEYS__AUDIENCE", "passkeys-tenant")
os.environ.setdefault("EVENTBUS__PROVIDER", "none")

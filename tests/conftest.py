"""Root conftest — shared test configuration."""

import os
import tempfile

# Settings are cached on first use, so the environment is fixed before any import
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault(
    "JWT_SECRET", "agrilink-test-secret-0123456789abcdef0123456789abcdef",
)
os.environ["RESEND_API_KEY"] = ""
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="agrilink-uploads-"))
os.environ.setdefault("LOG_FORMAT", "text")

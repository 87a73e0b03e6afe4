import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("PASSWORD_PBKDF2_ROUNDS", "1000")
os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production-use")
os.environ.setdefault("DEFAULT_ADMIN_PASSWORD", "")

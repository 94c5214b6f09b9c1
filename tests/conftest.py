"""Root pytest configuration.

Test Structure:
    tests/
    ├── rights/                # API glue (FastAPI dependencies, handlers)
    ├── rights_config/         # Settings
    ├── rights_identity/       # Credentials and sessions
    │   └── unit/
    └── shared/                # Fakes shared across test packages

Bcrypt runs at the minimum work factor (4) in tests to keep them fast;
the production default of 12 is checked separately.
"""

from pathlib import Path

import pytest
from dotenv import load_dotenv

from rights_config import clear_settings_cache
from rights_identity import PasswordHashingService, User
from tests.shared.fakes import FakeClock, InMemoryUserStore

PROJECT_ROOT = Path(__file__).resolve().parents[1]

# Load .env.dev for tests (same as local development)
CONFIG_DIR = PROJECT_ROOT / "config"
if (CONFIG_DIR / ".env.dev").exists():
    load_dotenv(CONFIG_DIR / ".env.dev")

FAST_ROUNDS = 4


@pytest.fixture(autouse=True)
def fresh_settings():
    """Ensure every test sees settings loaded fresh from the environment."""
    clear_settings_cache()
    yield
    clear_settings_cache()


@pytest.fixture
def password_service() -> PasswordHashingService:
    return PasswordHashingService(rounds=FAST_ROUNDS)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def alice(password_service: PasswordHashingService) -> User:
    """User "alice" with password "correct-password"."""
    return User(
        id=1,
        username="alice",
        email="alice@example.com",
        password=password_service.hash("correct-password"),
        email_verified=True,
    )


@pytest.fixture
def wallet_user() -> User:
    """Wallet-only account without a password."""
    return User(
        id=2,
        username="hbar_collector",
        wallet_address="0x52908400098527886E0F7030069857D2E4169EE7",
    )


@pytest.fixture
def user_store(alice: User, wallet_user: User) -> InMemoryUserStore:
    return InMemoryUserStore([alice, wallet_user])

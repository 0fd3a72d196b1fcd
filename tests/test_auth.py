import pytest
from jose import jwt

from ticketing.core.config import settings
from ticketing.core.errors import AuthenticationError, NotFoundError, ValidationError
from ticketing.modules.auth.schemas import LoginRequest, ChangePasswordRequest
from ticketing.modules.auth.service import AuthService

PASSWORD = "Secret123!"  # seeded users in conftest

@pytest.fixture
def service(session):
    return AuthService(session)

async def test_login_issues_token_with_roles(service, ref):
    res = await service.login(LoginRequest(email="AGENT@example.com", password=PASSWORD))
    claims = jwt.decode(res.access_token, settings.JWT_SECRET, algorithms=[settings.JWT_ALG])
    assert claims["sub"] == str(ref.agent)
    assert claims["roles"] == ["Agent"]
    assert claims["departments"] == [ref.support]
    assert res.token_type == "bearer"
    assert res.user.last_login is not None

@pytest.mark.parametrize("email,password", [
    ("agent@example.com", "wrong"),
    ("nobody@example.com", PASSWORD),
])
async def test_login_failures_do_not_leak(service, ref, email, password):
    with pytest.raises(AuthenticationError) as exc:
        await service.login(LoginRequest(email=email, password=password))
    assert exc.value.message == "Invalid credentials"

async def test_change_password(service, ref):
    await service.change_password(ref.customer, ChangePasswordRequest(current_password=PASSWORD, new_password="n3w-pass"))
    res = await service.login(LoginRequest(email="customer@example.com", password="n3w-pass"))
    assert res.user.id == ref.customer
    with pytest.raises(AuthenticationError):
        await service.login(LoginRequest(email="customer@example.com", password=PASSWORD))

async def test_change_password_rejects_wrong_current(service, ref):
    with pytest.raises(ValidationError, match="Current password is incorrect"):
        await service.change_password(ref.customer, ChangePasswordRequest(current_password="nope", new_password="other"))

async def test_change_password_unknown_user(service, ref):
    with pytest.raises(NotFoundError):
        await service.change_password(999, ChangePasswordRequest(current_password=PASSWORD, new_password="other"))

from modules.auth.interfaces import IAuthService, ITokenStore
from modules.auth.service import AuthService
from modules.auth.token_store import InMemoryTokenStore, KeyringTokenStore


class TestAuthInterface:
    def test_interface_methods_exist(self):
        """IAuthService should define required methods."""
        methods = ["start_login", "verify_code", "login", "fetch_profile"]
        for method in methods:
            assert hasattr(IAuthService, method)

    def test_auth_service_has_interface_methods(self):
        """AuthService should have all IAuthService methods."""
        methods = ["start_login", "verify_code", "login", "fetch_profile"]
        for method in methods:
            assert hasattr(AuthService, method)
            assert callable(getattr(AuthService, method))

    def test_auth_service_is_instance(self, api_client):
        """AuthService instances should pass a runtime protocol check."""
        assert isinstance(AuthService(api_client), IAuthService)


class TestTokenStoreInterface:
    def test_interface_methods_exist(self):
        """ITokenStore should define save, get and clear."""
        for method in ["save_token", "get_token", "clear_token"]:
            assert hasattr(ITokenStore, method)

    def test_implementations_have_interface_methods(self):
        """Both token stores should implement every ITokenStore method."""
        for implementation in (KeyringTokenStore, InMemoryTokenStore):
            for method in ["save_token", "get_token", "clear_token"]:
                assert callable(getattr(implementation, method))

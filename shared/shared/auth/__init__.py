from shared.auth.config import AuthSettings, get_auth_settings
from shared.auth.dependencies import decode_token, get_current_user_optional

__all__ = ["AuthSettings", "decode_token", "get_auth_settings", "get_current_user_optional"]

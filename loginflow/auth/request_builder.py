"""Serialize validated credentials into a direct-auth request."""
from .schemas import AuthRequest, Credentials, DirectLoginBody


def build(credentials: Credentials, endpoint_url: str) -> AuthRequest:
    body = DirectLoginBody(username=credentials.username, password=credentials.password)
    return AuthRequest(url=endpoint_url, body=body.model_dump_json().encode("utf-8"))

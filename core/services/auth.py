import logging

from core.serializers import LoginResultSerializer, TokenPairSerializer, load

logger = logging.getLogger(__name__)


class AuthService:
    def __init__(self, client):
        self.client = client

    def login(self, username, password):
        data = self.client.post('/auth/login/', data={
            'username': username,
            'password': password,
        })
        result = load(LoginResultSerializer, data)
        logger.info(f"User {username} authenticated as {result['user']['role']}")
        return result

    def refresh(self, refresh_token):
        data = self.client.post('/auth/token/refresh/', data={'refresh': refresh_token})
        # Some deployments answer with {'tokens': {...}}, others with the pair itself
        if isinstance(data, dict) and 'tokens' in data:
            data = data['tokens']
        if isinstance(data, dict) and 'refresh' not in data:
            data = {**data, 'refresh': refresh_token}
        return load(TokenPairSerializer, data)

    def logout(self, refresh_token):
        self.client.post('/auth/logout/', data={'refresh': refresh_token})

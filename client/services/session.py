# client/services/session.py


class ClientSession:
    """
    The client's identity context: bearer token plus the public user view.
    Created once on page load and handed to whatever needs it;
    cleared on logout or when the server rejects the token.
    """

    def __init__(self, token=None, user=None):
        self.token = token
        self.user = user

    @property
    def is_authenticated(self) -> bool:
        return bool(self.token)

    @property
    def username(self):
        return self.user["username"] if self.user else None

    def login(self, token, user):
        self.token = token
        self.user = dict(user)

    def update_user(self, user):
        self.user = dict(user)

    def logout(self):
        self.token = None
        self.user = None

    def auth_headers(self) -> dict:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

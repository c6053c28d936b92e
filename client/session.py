class Session:
    """
    Auth token and user id of the signed in user.

    Started on login and cleared on logout or when the signup page opens.
    Passed to the API client and the views instead of being read from
    global state.
    """

    def __init__(self, token=None, user_id=None, role=None):
        self.token = token
        self.user_id = user_id
        self.role = role

    def start(self, token, user_id, role=None):
        self.token = token
        self.user_id = int(user_id)
        self.role = role

    def clear(self):
        self.token = None
        self.user_id = None
        self.role = None

    @property
    def is_authenticated(self):
        return self.token is not None and self.user_id is not None

    def __repr__(self):
        return f"<Session user_id={self.user_id}, role={self.role}>"

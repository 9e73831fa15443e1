class SocialActionError(Exception):
    """
    A social action that breaks a domain rule (following yourself, replying
    to a reply, posting to a group you are not a member of).

    ``status`` is the HTTP status the views answer with.
    """

    def __init__(self, message, status=400):
        super().__init__(message)
        self.message = message
        self.status = status

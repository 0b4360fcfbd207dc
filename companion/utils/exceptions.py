"""
Custom exceptions for the home screen with user-friendly error messages.
"""

from companion.constants import ErrorMessages

class HomeException(Exception):
    """Base exception for home screen errors."""
    def __init__(self, message: str, user_message: str = None):
        super().__init__(message)
        self.user_message = user_message or message

class ProfileFetchFailure(HomeException):
    """Raised when the viewer's profile could not be loaded."""
    def __init__(self, description: str):
        super().__init__(
            f"Profile fetch failed: {description}",
            ErrorMessages.PROFILE.format(description=description)
        )

class FriendFetchFailure(HomeException):
    """Raised when the friend list could not be loaded."""
    def __init__(self, description: str):
        super().__init__(
            f"Friend list fetch failed: {description}",
            ErrorMessages.FRIENDS.format(description=description)
        )

class MatchFetchFailure(HomeException):
    """Raised when the bulk match history fetch fails (not per-match enrichment)."""
    def __init__(self, description: str):
        super().__init__(
            f"Match history fetch failed: {description}",
            ErrorMessages.MATCHES.format(description=description)
        )

class SessionEndFailure(HomeException):
    """Raised when logging out fails."""
    def __init__(self, description: str):
        super().__init__(
            f"Session end failed: {description}",
            ErrorMessages.SESSION.format(description=description)
        )

class ProviderError(Exception):
    """Raised inside data providers; converted to a Failure before leaving them."""
    pass

class PlayerNotFoundError(ProviderError):
    """Raised when the viewer doesn't exist in the database."""
    def __init__(self, player_id: int):
        super().__init__(f"Player {player_id} not found")
        self.player_id = player_id

class SessionEndError(ProviderError):
    """Raised by session providers when the session could not be terminated."""
    pass

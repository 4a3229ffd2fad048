"""Domain errors surfaced to API callers as rejected requests."""


class CasinoError(Exception):
    status_code = 400
    default_message = "Request rejected"

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)


class UserNotFound(CasinoError):
    status_code = 404
    default_message = "User not found"


class InsufficientFunds(CasinoError):
    status_code = 400
    default_message = "Not enough points for this bet"

    def __init__(self, balance: int, bet_points: int):
        self.balance = balance
        self.bet_points = bet_points
        super().__init__(f"Not enough points for this bet (balance {balance}, bet {bet_points})")


class ChallengeNotFound(CasinoError):
    status_code = 404
    default_message = "Challenge not found"


class NoChallengeAvailable(CasinoError):
    status_code = 404
    default_message = "No challenges available"

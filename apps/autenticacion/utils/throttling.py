from rest_framework.throttling import AnonRateThrottle


class LoginRateThrottle(AnonRateThrottle):
    """
    Rate limiting para intentos de login por IP.
    La tasa se toma de DEFAULT_THROTTLE_RATES['login'] (LOGIN_THROTTLE_RATE en .env).
    """
    scope = 'login'

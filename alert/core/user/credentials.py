from argon2 import PasswordHasher
from argon2.exceptions import Argon2Error, InvalidHashError

from alert.core.user.constants import PASSWORD_MIN_LENGTH
from alert.core.user.exceptions import PasswordFailsPolicyCheck


class PasswordCredentialService:
    """
    Turns plaintext passwords into the opaque credential stored on a user.
    The user store itself never sees plaintext.
    """

    _password_hasher = PasswordHasher()

    @classmethod
    def factory(cls) -> 'PasswordCredentialService':
        return cls()

    @classmethod
    def hash_password(cls, password: str) -> str:
        return cls._password_hasher.hash(password)

    @classmethod
    def verify_password(cls, password_credential: str, password: str) -> bool:
        try:
            return cls._password_hasher.verify(password_credential, password)
        except (Argon2Error, InvalidHashError):
            return False

    @classmethod
    def needs_rehash(cls, password_credential: str) -> bool:
        return cls._password_hasher.check_needs_rehash(password_credential)

    @classmethod
    def password_meets_policy(cls, password: str) -> None:
        meets_policy = len(password) >= PASSWORD_MIN_LENGTH
        if not meets_policy:
            raise PasswordFailsPolicyCheck(f'Password must be at least {PASSWORD_MIN_LENGTH} characters')

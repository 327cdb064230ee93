from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional
import itertools
import re

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


class LoginError(ValueError):
    pass


@dataclass
class User:
    id: str
    email: str
    name: str
    login_time: datetime
    profile_picture: str = ""
    phone: str = ""
    address: str = ""

    @property
    def first_name(self) -> str:
        return self.name.split()[0]


class AuthService:
    """Mock sign-in: format checks only, nothing is verified against an identity provider."""

    def __init__(self, clock: Callable[[], datetime] = datetime.now) -> None:
        self.current_user: Optional[User] = None
        self._ids = itertools.count(1)
        self._clock = clock

    @property
    def is_authenticated(self) -> bool:
        return self.current_user is not None

    def login(self, email: str, name: str) -> User:
        if not EMAIL_RE.match(email or ""):
            raise LoginError("Please enter a valid email address")
        if len((name or "").strip()) < 2:
            raise LoginError("Please enter your full name")
        self.current_user = User(
            id=str(next(self._ids)),
            email=email.lower(),
            name=name.strip(),
            login_time=self._clock(),
        )
        return self.current_user

    def update_profile(self, name: Optional[str] = None, phone: Optional[str] = None,
                       address: Optional[str] = None, profile_picture: Optional[str] = None) -> User:
        if self.current_user is None:
            raise LoginError("Not signed in")
        user = self.current_user
        if name is not None:
            if len(name.strip()) < 2:
                raise LoginError("Please enter your full name")
            user.name = name.strip()
        if phone is not None:
            user.phone = phone
        if address is not None:
            user.address = address
        if profile_picture is not None:
            user.profile_picture = profile_picture
        return user

    def logout(self) -> None:
        self.current_user = None

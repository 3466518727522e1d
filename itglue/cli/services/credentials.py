from __future__ import annotations

import dataclasses
from typing import Dict, Union

import requests
from requests import Session

JSON_API_CONTENT_TYPE = "application/vnd.api+json"


@dataclasses.dataclass(frozen=True)
class ApiKey:
    secret: str = dataclasses.field(repr=False)

    def __str__(self) -> str:
        return "ApiKey(***)"


@dataclasses.dataclass(frozen=True)
class UserPassword:
    email: str
    password: str = dataclasses.field(repr=False)

    def __str__(self) -> str:
        return f"UserPassword({self.email}, ***)"


Credential = Union[ApiKey, UserPassword]


@dataclasses.dataclass(frozen=True)
class AuthContext:
    """Headers and base url for every request made by one top level operation"""

    headers: Dict[str, str] = dataclasses.field(repr=False)
    base_url: str

    def session(self) -> Session:
        s = requests.Session()
        s.headers.update(self.headers)
        return s

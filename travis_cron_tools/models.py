"""Data models and constants for the Travis API client."""

from dataclasses import dataclass

DEFAULT_TOKEN_ENV_VAR = "TRAVIS_TOKEN"
TRAVIS_API_VERSION = "3"


@dataclass(frozen=True)
class Explicit:
    """Token supplied directly by the caller."""

    token: str


@dataclass(frozen=True)
class FromEnvironment:
    """Token read from an environment variable when the client is built."""

    var_name: str = DEFAULT_TOKEN_ENV_VAR


TokenSource = Explicit | FromEnvironment

FROM_ENV = FromEnvironment()


@dataclass(frozen=True)
class ClientConfig:
    """Resolved settings for one repository; owned by a single TravisAPI."""

    organization: str
    repo: str
    token: str
    api_host: str

    @property
    def base_url(self) -> str:
        # The slug separator is sent pre-encoded; Travis does not accept a literal slash here.
        return f"https://{self.api_host}/repo/{self.organization}%2F{self.repo}"

    @property
    def headers(self) -> dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Travis-API-Version": TRAVIS_API_VERSION,
            "Authorization": f"token {self.token}",
        }


@dataclass(frozen=True)
class PaginationCursor:
    """Link to the next page of a list result, or None once exhausted."""

    next_href: str | None = None

    @classmethod
    def from_body(cls, body: dict) -> "PaginationCursor":
        pagination = body.get("@pagination") or {}
        next_link = pagination.get("next") or {}
        return cls(next_href=next_link.get("@href"))

    @property
    def exhausted(self) -> bool:
        return not self.next_href

    def next_url(self, api_host: str) -> str:
        # @href is relative to the API host, e.g. "/repo/o%2Fr/builds?offset=25"
        return f"https://{api_host}{self.next_href}"

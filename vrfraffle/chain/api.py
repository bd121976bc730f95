import os
import logging
from urllib.parse import urljoin
from dotenv import load_dotenv
from typing import Any, Optional, Mapping

from .utils import open_session, get_jwt_token
from ..draw.requester import RandomnessOracle, RandomnessRequestParams
from ..draw.resolver import PayoutChannel

logger = logging.getLogger(__name__)


class ChainClient(RandomnessOracle, PayoutChannel):
    """HTTP client for the gateway that fronts the randomness oracle and wallet."""

    def __init__(self, base_fqdn: Optional[str] = None, timeout: int = 45):
        load_dotenv()
        fqdn = base_fqdn or os.getenv("CHAIN_BASE_FQDN")
        if not fqdn:
            raise ValueError("Environment variable 'CHAIN_BASE_FQDN' is not set")

        self.base_url = f"https://{fqdn}".rstrip("/")
        session_info = open_session()
        if not session_info or len(session_info) != 2:
            raise ValueError("open_session() must return (session, csrf_token)")
        self.session, self.csrf = session_info
        self.jwt = get_jwt_token(self.session)
        self.timeout = timeout

    # -------- headers --------
    @property
    def auth_headers(self) -> Mapping[str, str]:
        return {"Accept": "application/json", "Authorization": f"Bearer {self.jwt}"}

    @property
    def auth_csrf_headers(self) -> Mapping[str, str]:
        return {**self.auth_headers, "X-CSRFTOKEN": self.csrf}

    # -------- core request --------
    def _request(
        self,
        method: str,
        path: str,
        *,
        headers: Optional[Mapping[str, str]] = None,
        params: Optional[dict] = None,
        json: Optional[dict] = None,
    ) -> Any:
        url = urljoin(self.base_url + "/", path.lstrip("/"))
        r = self.session.request(
            method=method.upper(),
            url=url,
            headers=headers or self.auth_headers,
            params=params,
            json=json,
            timeout=self.timeout,
        )
        r.raise_for_status()
        return r.json() if r.content else None

    # -------- API callers --------
    @property
    def balance(self) -> dict:
        return self._request("GET", "/api/v1/wallet/balance")

    def request_randomness(self, params: RandomnessRequestParams) -> str:
        """Submit a randomness request and return its correlation id."""
        response = self._request(
            "POST",
            "/api/v1/randomness/requests",
            headers=self.auth_csrf_headers,
            json={
                "key_hash": params.key_hash,
                "subscription_id": params.subscription_id,
                "request_confirmations": params.request_confirmations,
                "callback_gas_limit": params.callback_gas_limit,
                "num_words": params.num_words,
            },
        )
        if not isinstance(response, dict) or not response.get("request_id"):
            raise RuntimeError(f"Unexpected randomness request response: {response!r}")
        request_id = str(response["request_id"])
        logger.debug(f"Gateway accepted randomness request {request_id}")
        return request_id

    def transfer(self, recipient: str, amount: int) -> None:
        """Pay ``amount`` to ``recipient`` from the raffle wallet."""
        response = self._request(
            "POST",
            "/api/v1/wallet/transfer",
            headers=self.auth_csrf_headers,
            json={"recipient": recipient, "amount": amount},
        )
        status = response.get("status") if isinstance(response, dict) else None
        if status != "success":
            message = response.get("message") if isinstance(response, dict) else None
            raise RuntimeError(
                "Wallet transfer failed" + (f": {message}" if message else ".")
            )

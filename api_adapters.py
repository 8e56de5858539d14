# Contains the adapter classes for communicating with the external lookup APIs.

import requests
import os
from urllib.parse import quote
from abc import ABC, abstractmethod
from dotenv import load_dotenv

from api_errors import HTTPStatusError, ParseError, ServiceError, TransportError
from api_structures import Coordinates, OperationResult, PassRecord

# --- API Configuration ---
# Endpoints can be pointed elsewhere through environment variables.
load_dotenv()
IPIFY_URL = os.getenv("IPIFY_URL", "https://api.ipify.org")
IPWHOIS_URL = os.getenv("IPWHOIS_URL", "http://ipwho.is/{ip}")
ISS_FLYOVER_URL = os.getenv(
    "ISS_FLYOVER_URL", "https://iss-flyover.herokuapp.com/json/")


def _read_timeout() -> float | None:
    raw = os.getenv("ISS_HTTP_TIMEOUT_SEC")
    if not raw:
        return None
    try:
        timeout = float(raw)
    except ValueError:
        raise ValueError(
            f"FATAL ERROR: ISS_HTTP_TIMEOUT_SEC must be a number of seconds, got '{raw}'.")
    if timeout <= 0:
        raise ValueError(
            f"FATAL ERROR: ISS_HTTP_TIMEOUT_SEC must be positive, got '{raw}'.")
    return timeout


class HttpAdapter:
    """
    Shared plumbing for every adapter: the HTTP session, the timeout and
    the verbose switch.
    """
    name = "http"

    def __init__(self, session: requests.Session | None = None,
                 timeout: float | None = None, verbose: bool = False):
        self.session = session if session is not None else requests.Session()
        self.timeout = timeout if timeout is not None else _read_timeout()
        self.verbose = verbose

    def _get(self, url: str, params: dict | None = None) -> requests.Response:
        if self.verbose:
            shown = url if not params else f"{url} {params}"
            print(f"   > [{self.name}] GET {shown}")
        return self.session.get(url, params=params, timeout=self.timeout)


def _json_object(response: requests.Response, what: str, stage: str) -> dict:
    """Parses a response body that must be a JSON object."""
    try:
        data = response.json()
    except ValueError:
        raise ParseError(
            f"Response body was not valid JSON when fetching {what}: {response.text}",
            response.text, stage)
    if not isinstance(data, dict):
        raise ParseError(
            f"Expected a JSON object when fetching {what}: {response.text}",
            response.text, stage)
    return data


class IpLookupAdapter(ABC):
    """Blueprint for services that report the caller's public IP address."""
    @abstractmethod
    def fetch_my_ip(self) -> OperationResult[str]:
        pass


class GeoLookupAdapter(ABC):
    """Blueprint for services that turn an IP address into coordinates."""
    @abstractmethod
    def fetch_coords_by_ip(self, ip: str) -> OperationResult[Coordinates]:
        pass


class PassLookupAdapter(ABC):
    """Blueprint for services that predict ISS passes over coordinates."""
    @abstractmethod
    def fetch_flyover_times(self, coords: Coordinates) -> OperationResult[list[PassRecord]]:
        pass


class IpifyAdapter(HttpAdapter, IpLookupAdapter):
    """The adapter for the ipify IP echo service."""
    name = "ipify"
    stage = "ip"

    def __init__(self, url: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self.url = url or IPIFY_URL

    def fetch_my_ip(self) -> OperationResult[str]:
        try:
            response = self._get(self.url, params={'format': 'json'})
        except requests.exceptions.RequestException as e:
            return OperationResult.failure(TransportError(e, self.stage))

        if response.status_code != 200:
            return OperationResult.failure(
                HTTPStatusError(response.status_code, response.text, "IP", self.stage))

        try:
            data = _json_object(response, "IP", self.stage)
        except ParseError as e:
            return OperationResult.failure(e)

        ip = data.get('ip')
        if not isinstance(ip, str) or not ip:
            return OperationResult.failure(
                ParseError(f"No 'ip' field when fetching IP: {response.text}",
                           response.text, self.stage))
        return OperationResult.success(ip)


class IpWhoIsAdapter(HttpAdapter, GeoLookupAdapter):
    """
    The adapter for the ipwho.is geolocation service.

    ipwho.is reports failures through a boolean 'success' field in the
    payload rather than through the HTTP status, so the status code is not
    checked here.
    """
    name = "ipwho.is"
    stage = "coordinates"

    def __init__(self, url: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self.url = url or IPWHOIS_URL

    def fetch_coords_by_ip(self, ip: str) -> OperationResult[Coordinates]:
        url = self.url.format(ip=quote(ip, safe=':'))
        try:
            response = self._get(url)
        except requests.exceptions.RequestException as e:
            return OperationResult.failure(TransportError(e, self.stage))

        try:
            data = _json_object(response, f"coordinates for IP {ip}", self.stage)
        except ParseError as e:
            return OperationResult.failure(e)

        if not data.get('success'):
            return OperationResult.failure(ServiceError(
                data.get('success'), data.get('message'), data.get('ip'), self.stage))

        latitude = data.get('latitude')
        longitude = data.get('longitude')
        if latitude in (None, '') or longitude in (None, ''):
            return OperationResult.failure(ParseError(
                f"Missing latitude/longitude when fetching coordinates for IP {ip}: {response.text}",
                response.text, self.stage))

        # *** NORMALIZATION to our standard Coordinates object ***
        return OperationResult.success(Coordinates(latitude=latitude, longitude=longitude))


class IssFlyoverAdapter(HttpAdapter, PassLookupAdapter):
    """The adapter for the ISS flyover prediction service."""
    name = "iss-flyover"
    stage = "passes"

    def __init__(self, url: str | None = None, **kwargs):
        super().__init__(**kwargs)
        self.url = url or ISS_FLYOVER_URL

    def fetch_flyover_times(self, coords: Coordinates) -> OperationResult[list[PassRecord]]:
        params = {'lat': coords.latitude, 'lon': coords.longitude}
        try:
            response = self._get(self.url, params=params)
        except requests.exceptions.RequestException as e:
            return OperationResult.failure(TransportError(e, self.stage))

        if response.status_code != 200:
            return OperationResult.failure(HTTPStatusError(
                response.status_code, response.text, "ISS pass times", self.stage))

        try:
            data = _json_object(response, "ISS pass times", self.stage)
        except ParseError as e:
            return OperationResult.failure(e)

        items = data.get('response')
        if not isinstance(items, list) or not all(isinstance(item, dict) for item in items):
            return OperationResult.failure(ParseError(
                f"Expected a 'response' list of passes when fetching ISS pass times: {response.text}",
                response.text, self.stage))

        # Records are taken as-is; the upstream order is kept.
        return OperationResult.success([PassRecord.from_json(item) for item in items])

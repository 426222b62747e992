"""
JointSPACE Sampler
==================

Samples Ambilight colors from a Philips TV over the JointSPACE HTTP API.

Endpoints (relative to http://<host>:<port>/<api_version>):
    GET /ambilight/topology   -> Topology
    GET /ambilight/processed  -> LayerSet

Design Rules:
    - Every failure surfaces as SamplingError (never a requests exception)
    - Responses are validated against the pydantic models
    - No retries here: the Poller owns backoff
"""

import logging
from typing import Optional, Type, TypeVar

import requests
from pydantic import BaseModel, ValidationError

from ambicast.errors import SamplingError
from ambicast.models.ambilight import LayerSet, Topology


logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class JointSpaceSampler:
    """
    JointSPACE client.

    Attributes:
        base_url: API root, e.g. "http://192.168.1.20:1925/1"
        timeout: HTTP timeout in seconds for each request
    """

    def __init__(
        self,
        host: str,
        port: int = 1925,
        api_version: str = "1",
        timeout: float = 1.0,
        session: Optional[requests.Session] = None,
    ) -> None:
        """
        Initialize JointSPACE sampler.

        Args:
            host: Hostname or IP address of the TV
            port: JointSPACE server port
            api_version: JointSPACE API version path segment
            timeout: HTTP timeout in seconds
            session: Session to use. If None, a new one is created.
        """
        self.base_url = f"http://{host}:{port}/{api_version}"
        self.timeout = timeout
        self._session = session if session is not None else requests.Session()

        logger.info(f"JointSpaceSampler initialized: {self.base_url}")

    def get_topology(self) -> Topology:
        return self._get("/ambilight/topology", Topology)

    def get_frame(self) -> LayerSet:
        return self._get("/ambilight/processed", LayerSet)

    def close(self) -> None:
        self._session.close()

    def _get(self, path: str, model: Type[M]) -> M:
        url = f"{self.base_url}{path}"
        try:
            response = self._session.get(url, timeout=self.timeout)
            response.raise_for_status()
            return model.model_validate(response.json())
        except requests.RequestException as e:
            raise SamplingError(f"GET {url} failed: {e}") from e
        except ValidationError as e:
            raise SamplingError(f"Unexpected response from {url}: {e}") from e
        except ValueError as e:
            # Body is not JSON
            raise SamplingError(f"Invalid JSON from {url}: {e}") from e

"""Access to the external MSU randomizer service.

The launcher never picks or merges tracks itself. Everything it needs from
the randomizer is captured by ``MsuRandomizerService``:

- enumerating the known MSU types
- looking up the MSUs stored below a directory
- checking whether an MSU is compatible with a type
- building a shuffled MSU next to a staged rom

``HttpMsuRandomizerService`` implements it against the service's JSON API.
"""

from pathlib import Path
from typing import Any, Protocol

import structlog

from ..models import Msu, MsuType, ShuffleRequest
from .errors import MsuServiceError
from .http_client import HttpClientService

log = structlog.stdlib.get_logger()


class MsuRandomizerService(Protocol):
    """Capabilities the launcher needs from the MSU randomizer."""

    def initialize(self) -> None: ...

    def get_msu_types(self) -> list[MsuType]: ...

    def lookup_msus(self, path: str) -> list[Msu]: ...

    def is_compatible(self, msu: Msu, msu_type: MsuType) -> bool: ...

    def create_shuffled_msu(self, request: ShuffleRequest) -> None: ...


class HttpMsuRandomizerService:
    """MSU randomizer service reached over HTTP."""

    def __init__(self, http_client: HttpClientService) -> None:
        self._http = http_client

    def initialize(self) -> None:
        """Prepare the service without scanning for MSUs up front."""
        _ = self._http.post_json("/initialize", {"lookup_msus": False})
        log.debug("MSU randomizer service initialized", base_url=self._http.base_url)

    def get_msu_types(self) -> list[MsuType]:
        """Return every MSU type in the order the service lists them."""
        data = self._http.get_json("/msu-types")
        try:
            return [
                MsuType(name=str(item["name"]), display_name=str(item["display_name"]))
                for item in self._as_list(data, "/msu-types")
            ]
        except (KeyError, TypeError) as e:
            raise MsuServiceError(
                "The MSU randomizer service sent malformed MSU types",
                operation="GET /msu-types",
                original_error=e,
            ) from e

    def lookup_msus(self, path: str) -> list[Msu]:
        """Return every MSU the service finds below ``path``."""
        data = self._http.get_json("/msus", params={"path": path})
        try:
            return [self._to_msu(item) for item in self._as_list(data, "/msus")]
        except (KeyError, TypeError, ValueError) as e:
            raise MsuServiceError(
                "The MSU randomizer service sent malformed MSU data",
                operation="GET /msus",
                original_error=e,
            ) from e

    def is_compatible(self, msu: Msu, msu_type: MsuType) -> bool:
        return msu.msu_type_name == msu_type.name or msu_type.name in msu.compatible_type_names

    def create_shuffled_msu(self, request: ShuffleRequest) -> None:
        """Ask the service to write a shuffled MSU for the staged rom."""
        payload = {
            "msus": [msu.path for msu in request.msus],
            "output_msu_type": request.output_msu_type.name,
            "output_path": request.output_path,
            "empty_folder": request.empty_folder,
            "open_folder": request.open_folder,
            "prev_msu": request.prev_msu.path if request.prev_msu else None,
        }
        _ = self._http.post_json("/shuffle", payload)

    @staticmethod
    def _as_list(data: Any, endpoint: str) -> list[Any]:
        if not isinstance(data, list):
            raise MsuServiceError(
                "The MSU randomizer service sent an unexpected response",
                operation=f"GET {endpoint}",
            )
        return data

    @staticmethod
    def _to_msu(item: Any) -> Msu:
        if not isinstance(item, dict):
            raise TypeError(f"MSU entry is not an object: {item!r}")

        compatible = item.get("compatible_type_names") or []
        if not isinstance(compatible, list):
            raise TypeError(f"compatible_type_names is not a list: {compatible!r}")

        msu_type_name = item.get("msu_type_name")
        return Msu(
            path=str(item["path"]),
            name=str(item["name"]),
            display_name=str(item.get("display_name") or item["name"]),
            num_unique_tracks=int(item["num_unique_tracks"]),
            msu_type_name=str(msu_type_name) if msu_type_name is not None else None,
            compatible_type_names=tuple(str(name) for name in compatible),
        )


def shuffle_msus(
    service: MsuRandomizerService,
    msus: list[Msu],
    msu_type: MsuType,
    output_path: Path,
) -> None:
    """Create a shuffled MSU from ``msus`` next to the staged rom.

    Raises:
        MsuServiceError: If the service fails to build the MSU
    """
    log.info(
        "Creating shuffled MSU",
        msu_count=len(msus),
        msu_type=msu_type.display_name,
        output_path=str(output_path),
    )
    service.create_shuffled_msu(
        ShuffleRequest(
            msus=msus,
            output_msu_type=msu_type,
            output_path=str(output_path),
            empty_folder=True,
            open_folder=False,
            prev_msu=None,
        )
    )

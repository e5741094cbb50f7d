"""
Driver options loading.

``OptionsLoader`` turns a valid ``ConnectionModel`` into the structured
options a driver client consumes. For ``ssl="ALL"`` the CA bundles, client
certificate and private key are read from disk concurrently and handed over
as in-memory buffers.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from .exceptions import OptionsLoadError, ValidationError
from .model import ConnectionModel
from .types import DEFAULT_READ_PREFERENCE, AuthMechanism, SSLMode

logger = logging.getLogger(__name__)

LoadCallback = Callable[[BaseException | None, "DriverOptions | None"], None]


@dataclass
class ServerOptions:
    """
    Server-scoped TLS options.

    Attributes:
        ssl: Whether TLS is enabled
        ssl_validate: Whether the server certificate is validated (None when ssl is off)
        ssl_ca: CA bundle contents, one buffer per file
        ssl_cert: Client certificate contents
        ssl_key: Client private key contents
        ssl_pass: Private key passphrase
    """

    ssl: bool = False
    ssl_validate: bool | None = None
    ssl_ca: list[bytes] = field(default_factory=list)
    ssl_cert: bytes | None = None
    ssl_key: bytes | None = None
    ssl_pass: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Driver-shaped dict; unset keys are omitted."""
        data: dict[str, Any] = {"ssl": self.ssl}
        if self.ssl_validate is not None:
            data["sslValidate"] = self.ssl_validate
        if self.ssl_ca:
            data["sslCA"] = list(self.ssl_ca)
        if self.ssl_cert is not None:
            data["sslCert"] = self.ssl_cert
        if self.ssl_key is not None:
            data["sslKey"] = self.ssl_key
        if self.ssl_pass is not None:
            data["sslPass"] = self.ssl_pass
        return data


@dataclass
class DriverOptions:
    """
    Options object for a driver client.

    Attributes:
        server: TLS options
        hosts: ``host:port`` seeds
        replica_set: Replica set name
        read_preference: Read preference mode
        auth_mechanism: ``authMechanism`` tag, None for the driver default
    """

    server: ServerOptions = field(default_factory=ServerOptions)
    hosts: list[str] = field(default_factory=list)
    replica_set: str | None = None
    read_preference: str = DEFAULT_READ_PREFERENCE
    auth_mechanism: AuthMechanism | None = None

    def to_dict(self) -> dict[str, Any]:
        """Driver-shaped dict, with TLS keys nested under ``server``."""
        data: dict[str, Any] = {
            "server": self.server.to_dict(),
            "hosts": list(self.hosts),
            "readPreference": self.read_preference,
        }
        if self.replica_set is not None:
            data["replicaSet"] = self.replica_set
        if self.auth_mechanism is not None:
            data["authMechanism"] = str(self.auth_mechanism)
        return data


async def _read_file(field_name: str, path: str) -> bytes:
    try:
        data = await asyncio.to_thread(Path(path).read_bytes)
    except OSError as e:
        raise OptionsLoadError(
            f"Could not read {field_name} file {path!r}: {e.strerror or e}",
            field=field_name,
            path=path,
        ) from e
    logger.debug(f"Loaded {field_name} from {path} ({len(data)} bytes)")
    return data


class OptionsLoader:
    """
    Builds ``DriverOptions`` for a connection model.

    Loads are independent: the loader keeps no state between calls and every
    call reads the files again.

    Example::

        loader = OptionsLoader()
        options = await loader.load(model)
        driver_options = options.to_dict()
    """

    async def load(self, model: ConnectionModel) -> DriverOptions:
        """
        Resolve TLS material and assemble the driver options.

        Args:
            model: A connection model

        Returns:
            The options object

        Raises:
            ValidationError: If the model is invalid
            OptionsLoadError: If any TLS file cannot be read
        """
        model.validate_model()

        options = DriverOptions(
            server=await self._load_server_options(model),
            hosts=[f"{model.hostname}:{model.port}"],
            replica_set=model.replica_set_name,
            read_preference=model.read_preference,
            auth_mechanism=model.driver_auth_mechanism,
        )
        logger.debug(f"Loaded driver options for {model.hostname}:{model.port} (ssl={model.ssl})")
        return options

    async def _load_server_options(self, model: ConnectionModel) -> ServerOptions:
        match model.ssl:
            case SSLMode.UNVALIDATED:
                return ServerOptions(ssl=True, ssl_validate=False)
            case SSLMode.SERVER:
                return ServerOptions(ssl=True, ssl_validate=True)
            case SSLMode.ALL:
                certificate, private_key = model.ssl_certificate, model.ssl_private_key
                if certificate is None or private_key is None:
                    raise ValidationError(
                        "ssl_certificate and ssl_private_key fields are required when ssl is ALL",
                        field="ssl_certificate" if certificate is None else "ssl_private_key",
                    )
                reads = [_read_file("ssl_ca", path) for path in model.ssl_ca]
                reads.append(_read_file("ssl_certificate", certificate))
                reads.append(_read_file("ssl_private_key", private_key))
                *ca, cert, key = await asyncio.gather(*reads)
                return ServerOptions(
                    ssl=True,
                    ssl_validate=True,
                    ssl_ca=ca,
                    ssl_cert=cert,
                    ssl_key=key,
                    ssl_pass=model.ssl_private_key_password or None,
                )
            case _:
                return ServerOptions()

    def load_with_callback(self, model: ConnectionModel, callback: LoadCallback) -> asyncio.Task[None]:
        """
        Schedule ``load`` on the running loop and report through ``callback``.

        ``callback(error, options)`` is called exactly once, with exactly one
        of the two arguments set.

        Returns:
            The task running the load
        """

        async def _run() -> None:
            try:
                options = await self.load(model)
            except Exception as e:
                callback(e, None)
                return
            callback(None, options)

        return asyncio.get_running_loop().create_task(_run())


async def load_options(model: ConnectionModel) -> DriverOptions:
    """Shortcut for ``OptionsLoader().load(model)``."""
    return await OptionsLoader().load(model)


__all__ = ["ServerOptions", "DriverOptions", "OptionsLoader", "LoadCallback", "load_options"]

"""
Unit tests for OptionsLoader.

TLS material is written to a temporary directory by the ``tls_files``
fixture; no server is needed.
"""

import asyncio

import pytest

from mongodb_connection_model import (
    AuthMechanism,
    ConnectionModel,
    DriverOptions,
    OptionsLoader,
    OptionsLoadError,
    ServerOptions,
    ValidationError,
    load_options,
)
from tests.conftest import CA_PEM, SECOND_CA_PEM, SERVER_PEM, TLSFiles


def ssl_all_model(tls_files: TLSFiles, **fields) -> ConnectionModel:
    return ConnectionModel(
        ssl="ALL",
        ssl_ca=fields.pop("ssl_ca", [str(tls_files.ca)]),
        ssl_certificate=str(tls_files.server),
        ssl_private_key=str(tls_files.server),
        **fields,
    )


# ==================== SSL ALL ====================


class TestLoadSSLAll:
    @pytest.mark.asyncio
    async def test_loads_all_files_from_filesystem(self, tls_files: TLSFiles) -> None:
        options = await OptionsLoader().load(ssl_all_model(tls_files))
        server = options.server

        assert server.ssl is True
        assert server.ssl_validate is True
        assert isinstance(server.ssl_ca, list)
        assert isinstance(server.ssl_ca[0], bytes)
        assert server.ssl_pass is None
        assert isinstance(server.ssl_cert, bytes)
        assert isinstance(server.ssl_key, bytes)

    @pytest.mark.asyncio
    async def test_buffers_hold_file_contents(self, tls_files: TLSFiles) -> None:
        options = await OptionsLoader().load(ssl_all_model(tls_files))
        assert options.server.ssl_ca == [CA_PEM]
        assert options.server.ssl_cert == SERVER_PEM
        assert options.server.ssl_key == SERVER_PEM

    @pytest.mark.asyncio
    async def test_multiple_ca_files_keep_order(self, tls_files: TLSFiles) -> None:
        model = ssl_all_model(tls_files, ssl_ca=[str(tls_files.second_ca), str(tls_files.ca)])
        options = await OptionsLoader().load(model)
        assert options.server.ssl_ca == [SECOND_CA_PEM, CA_PEM]

    @pytest.mark.asyncio
    async def test_passphrase_is_passed_through(self, tls_files: TLSFiles) -> None:
        model = ssl_all_model(tls_files, ssl_private_key_password="hunter2")
        options = await OptionsLoader().load(model)
        assert options.server.ssl_pass == "hunter2"

    @pytest.mark.asyncio
    async def test_to_dict_shape(self, tls_files: TLSFiles) -> None:
        options = await load_options(ssl_all_model(tls_files))
        assert options.to_dict()["server"] == {
            "ssl": True,
            "sslValidate": True,
            "sslCA": [CA_PEM],
            "sslCert": SERVER_PEM,
            "sslKey": SERVER_PEM,
        }

    @pytest.mark.asyncio
    async def test_missing_file_raises_load_error(self, tls_files: TLSFiles) -> None:
        model = ssl_all_model(tls_files, ssl_ca=[str(tls_files.ca), str(tls_files.missing)])
        with pytest.raises(OptionsLoadError) as exc_info:
            await OptionsLoader().load(model)

        err = exc_info.value
        assert err.field == "ssl_ca"
        assert err.path == str(tls_files.missing)
        assert err.code == "io-error"
        assert isinstance(err, OSError)
        assert isinstance(err.__cause__, FileNotFoundError)
        assert str(tls_files.missing) in str(err)

    @pytest.mark.asyncio
    async def test_missing_private_key_names_field(self, tls_files: TLSFiles) -> None:
        model = ConnectionModel(
            ssl="ALL",
            ssl_ca=[str(tls_files.ca)],
            ssl_certificate=str(tls_files.server),
            ssl_private_key=str(tls_files.missing),
        )
        with pytest.raises(OptionsLoadError) as exc_info:
            await OptionsLoader().load(model)
        assert exc_info.value.field == "ssl_private_key"

    @pytest.mark.asyncio
    async def test_loads_are_independent(self, tls_files: TLSFiles) -> None:
        loader = OptionsLoader()
        first, second = await asyncio.gather(
            loader.load(ssl_all_model(tls_files)),
            loader.load(ssl_all_model(tls_files, ssl_ca=[str(tls_files.second_ca)])),
        )
        assert first.server.ssl_ca == [CA_PEM]
        assert second.server.ssl_ca == [SECOND_CA_PEM]
        assert first.server is not second.server


# ==================== Other SSL modes ====================


class TestLoadOtherModes:
    @pytest.mark.asyncio
    async def test_ssl_none(self) -> None:
        options = await OptionsLoader().load(ConnectionModel())
        assert options.server == ServerOptions()
        assert options.to_dict() == {
            "server": {"ssl": False},
            "hosts": ["localhost:27017"],
            "readPreference": "primary",
        }

    @pytest.mark.asyncio
    async def test_ssl_unvalidated(self) -> None:
        options = await OptionsLoader().load(ConnectionModel(ssl="UNVALIDATED"))
        assert options.server.ssl is True
        assert options.server.ssl_validate is False
        assert options.server.ssl_ca == []
        assert options.server.ssl_cert is None
        assert options.to_dict()["server"] == {"ssl": True, "sslValidate": False}

    @pytest.mark.asyncio
    async def test_ssl_server(self) -> None:
        options = await OptionsLoader().load(ConnectionModel(ssl="SERVER"))
        assert options.server.ssl_validate is True
        assert options.server.ssl_key is None
        assert options.to_dict()["server"] == {"ssl": True, "sslValidate": True}


# ==================== Pass-through and errors ====================


class TestLoadPassThrough:
    @pytest.mark.asyncio
    async def test_topology_fields(self) -> None:
        model = ConnectionModel(
            hostname="db.example.com",
            port=27018,
            replica_set_name="rs0",
            read_preference="secondaryPreferred",
            authentication="LDAP",
            ldap_username="arlo",
            ldap_password="woof",
        )
        options = await OptionsLoader().load(model)
        assert options.hosts == ["db.example.com:27018"]
        assert options.replica_set == "rs0"
        assert options.read_preference == "secondaryPreferred"
        assert options.auth_mechanism == AuthMechanism.PLAIN

        data = options.to_dict()
        assert data["replicaSet"] == "rs0"
        assert data["authMechanism"] == "PLAIN"

    @pytest.mark.asyncio
    async def test_invalid_model_raises_validation_error(self) -> None:
        model = ConnectionModel(authentication="KERBEROS")
        with pytest.raises(ValidationError) as exc_info:
            await OptionsLoader().load(model)
        assert exc_info.value is model.validation_error

    @pytest.mark.asyncio
    async def test_ssl_all_without_private_key_path_raises(self, tls_files: TLSFiles) -> None:
        # model_construct skips field validation, so the loader sees the raw fields.
        model = ConnectionModel.model_construct(
            ssl="ALL",
            ssl_ca=[str(tls_files.ca)],
            ssl_certificate=str(tls_files.server),
        )
        with pytest.raises(ValidationError) as exc_info:
            await OptionsLoader()._load_server_options(model)
        assert exc_info.value.field == "ssl_private_key"


# ==================== Callback contract ====================


class TestLoadWithCallback:
    @pytest.mark.asyncio
    async def test_success_calls_back_once(self, tls_files: TLSFiles) -> None:
        calls: list[tuple] = []
        task = OptionsLoader().load_with_callback(ssl_all_model(tls_files), lambda err, opts: calls.append((err, opts)))
        await task

        assert len(calls) == 1
        err, options = calls[0]
        assert err is None
        assert isinstance(options, DriverOptions)
        assert options.server.ssl_ca == [CA_PEM]

    @pytest.mark.asyncio
    async def test_failure_calls_back_once_with_error(self, tls_files: TLSFiles) -> None:
        calls: list[tuple] = []
        model = ssl_all_model(tls_files, ssl_ca=[str(tls_files.missing)])
        task = OptionsLoader().load_with_callback(model, lambda err, opts: calls.append((err, opts)))
        await task

        assert len(calls) == 1
        err, options = calls[0]
        assert isinstance(err, OptionsLoadError)
        assert options is None

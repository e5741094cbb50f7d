# MongoDB Connection Model Examples

# This file is meant to be run cell by cell with the uv VSCode plug-in. Select a part of the code and execute it
# as cell with Shift+Enter. (Jupyter notebook like)
# Use the comment as cell definition

# Load requirements

import asyncio
import logging

from dotenv import load_dotenv

from mongodb_connection_model import ConnectionModel, OptionsLoader


logging.basicConfig(level=logging.DEBUG)

# Load environnement from .env (MONGODB_CONNECTION_HOSTNAME, MONGODB_CONNECTION_AUTHENTICATION, ...)
load_dotenv()


def from_environment():
    model = ConnectionModel.from_env()
    if not model.is_valid():
        print("Invalid configuration:", model.validation_error)
        return None

    print("Driver URL:", model.driver_url)
    return model


def mongodb_user():
    model = ConnectionModel(
        authentication="MONGODB",
        mongodb_username="arlo",
        mongodb_password="w@of",
        mongodb_database_name="admin",
    )
    print("MONGODB:", model.driver_url)


def ldap_user():
    model = ConnectionModel(authentication="LDAP", ldap_username="arlo", ldap_password="woof")
    print("LDAP:", model.driver_url, model.driver_auth_mechanism)


def kerberos_user():
    model = ConnectionModel(authentication="KERBEROS", kerberos_principal="lucas@kerb.mongodb.parts")
    print("KERBEROS:", model.driver_url)

    # Read it back
    print("Principal:", ConnectionModel.from_url(model.driver_url).kerberos_principal)


def invalid_model():
    model = ConnectionModel(authentication="MONGODB", kerberos_service_name="mongodb")
    print("Valid:", model.is_valid(), "-", model.validation_error)


async def load_driver_options(model: ConnectionModel):
    options = await OptionsLoader().load(model)
    print("Driver options:", options.to_dict())


async def main():
    mongodb_user()
    ldap_user()
    kerberos_user()
    invalid_model()

    model = from_environment()
    if model is not None:
        await load_driver_options(model)


if __name__ == "__main__":
    # Run the async function
    asyncio.run(main())

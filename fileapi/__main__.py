"""
FileAPI REST API
"""

import argparse
import asyncio
import inspect
import logging
import os
import secrets
import sys
from enum import Enum
from pathlib import Path
from typing import Any

import uvicorn
from pydantic.fields import FieldInfo
from uvicorn.config import LOGGING_CONFIG

from fileapi.config import ENV_PREFIX, AuthOptions, get_settings, validate_settings
from fileapi.drive import DRIVE_ROOT, drive_session
from fileapi.hierarchy import HierarchyStore
from fileapi.paths import validate_project_name


def run(args):
    auth = get_settings().auth
    logging.info(f"Starting server at port {args.port}, debug={not args.nodebug}, auth={auth.name}")
    if auth == AuthOptions.no_auth:
        logging.warning(
            "Warning: No authentication is set up - everyone who can access this service can read and change"
            " all files in the configured drive"
        )
    if validate_settings():
        logging.warning(validate_settings())
    logging.info(
        "To change server config, create an .env file and/or set environment parameters,\n"
        f"{' ' * 26}see fileapi/config.py for more information.\n"
        f"{' ' * 26}You can also run `python -m fileapi config` to create the .env settings file interactively\n"
    )
    log_config = "logging.yml" if Path("logging.yml").exists() else LOGGING_CONFIG
    uvicorn.run("fileapi.api:app", host="0.0.0.0", reload=not args.nodebug, port=int(args.port), log_config=log_config)


async def check_drive(args) -> None:
    settings = get_settings()
    async with drive_session(args.token) as drive:
        store = HierarchyStore(drive, settings.root_name)
        if args.project:
            validate_project_name(args.project)
            folder_id = await store.ensure_project_root(args.project)
            print(f"{settings.root_name}/{args.project}: {folder_id}")
        else:
            node = await drive.find_child(DRIVE_ROOT, settings.root_name, kind="folder")
            if node is None:
                print(f"Connected to drive, folder {settings.root_name} does not exist yet")
            else:
                print(f"{settings.root_name}: {node.id}")
                for child in await drive.list_children(node.id):
                    if child.is_folder:
                        print(f"  {child.name}/ ({child.id})")


def create_env(args):
    if os.path.exists(".env"):
        print("*** File .env already exists, quitting ***")
        sys.exit(1)

    env = {f"{ENV_PREFIX}root_name": get_settings().root_name}
    if args.api_key:
        env[f"{ENV_PREFIX}auth"] = AuthOptions.api_key.name
        env[f"{ENV_PREFIX}api_key"] = secrets.token_hex(nbytes=32)
    with open(".env", "w") as f:
        for key, val in env.items():
            f.write(f"{key}={val}\n")
    os.chmod(".env", 0o600)
    print("*** Created .env file ***")


def config_fileapi(args):
    settings = get_settings()
    # Not a useful entry in an actual env_file
    print(f"Reading/writing settings from {settings.env_file}")
    for fieldname, fieldinfo in type(settings).model_fields.items():
        if fieldname == "env_file":
            continue

        validation_function = AuthOptions.validate if fieldname == "auth" else None
        value = getattr(settings, fieldname)
        value = menu(fieldname, fieldinfo, value, validation_function=validation_function)
        if value is ABORTED:
            return
        if value is not UNCHANGED:
            setattr(settings, fieldname, value)

    with settings.env_file.open("w") as f:
        for fieldname, fieldinfo in type(settings).model_fields.items():
            if fieldname == "env_file":
                continue
            value = getattr(settings, fieldname)
            if doc := fieldinfo.description:
                f.write(f"# {doc}\n")
            if _isenum(fieldinfo) and fieldinfo.annotation:
                f.write("# Valid options:\n")
                for option in fieldinfo.annotation:
                    doc = (option.__doc__ or "").replace("\n", " ")
                    f.write(f"# - {option.name}: {doc}\n")
            if value is None:
                f.write(f"#{ENV_PREFIX}{fieldname}=\n\n")
            else:
                value = value.name if isinstance(value, Enum) else value
                f.write(f"{ENV_PREFIX}{fieldname}={value}\n\n")
    os.chmod(settings.env_file, 0o600)
    print(f"*** Written {bold('.env')} file to {settings.env_file} ***")


def bold(x):
    return "\033[1m" + str(x) + "\033[0m"


ABORTED = object()
UNCHANGED = object()


def _isenum(fieldinfo: FieldInfo) -> bool:
    try:
        return issubclass(fieldinfo.annotation, Enum) if fieldinfo.annotation is not None else False
    except TypeError:
        return False


def menu(fieldname: str, fieldinfo: FieldInfo, value, validation_function=None):
    print(f"\n{bold(fieldname)}: {fieldinfo.description}")
    if _isenum(fieldinfo) and fieldinfo.annotation:
        print("  Possible choices:")
        options: Any = fieldinfo.annotation
        for option in options:
            print(f"  - {option.name}: {option.__doc__}")
        print()
    print(f"The current value for {bold(fieldname)} is {bold(value)}.")
    while True:
        try:
            value = input("Enter a new value, press [enter] to leave unchanged, or press [control+c] to abort: ")
        except KeyboardInterrupt:
            return ABORTED
        if not value.strip():
            return UNCHANGED
        if validation_function and (message := validation_function(value)):
            print(f"\nInvalid value: {message}")
            continue
        return value


def main():
    parser = argparse.ArgumentParser(description=__doc__, prog="python -m fileapi")

    subparsers = parser.add_subparsers(dest="action", title="action", help="Action to perform:", required=True)
    p = subparsers.add_parser("run", help="Run the backend API in development mode")
    p.add_argument(
        "--no-debug",
        action="store_true",
        dest="nodebug",
        help="Disable debug mode (useful for testing downstream clients)",
    )
    p.add_argument("-p", "--port", help="Port", default=5000)
    p.set_defaults(func=run)

    p = subparsers.add_parser("create-env", help="Create the .env file")
    p.add_argument("--api-key", action="store_true", help="Require a (randomly generated) API key for all requests")
    p.set_defaults(func=create_env)

    p = subparsers.add_parser("config", help="Configure fileapi settings in an interactive menu.")
    p.set_defaults(func=config_fileapi)

    p = subparsers.add_parser("check-drive", help="Check the drive connection and show the root folder")
    p.add_argument("-P", "--project", help="Also ensure the folder of this project exists")
    p.add_argument("-t", "--token", help="Use this google access token instead of the server credentials")
    p.set_defaults(func=check_drive)

    args = parser.parse_args()

    logging.basicConfig(format="[%(levelname)-7s:%(name)-15s] %(message)s", level=logging.INFO)
    httpx_logger = logging.getLogger("httpx")
    httpx_logger.setLevel(logging.WARNING)

    if inspect.iscoroutinefunction(args.func):
        asyncio.run(args.func(args))
    else:
        args.func(args)


if __name__ == "__main__":
    main()

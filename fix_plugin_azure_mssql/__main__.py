import json
import logging
import os
import sys
from argparse import Namespace
from typing import List, Optional

import yaml

from fix_plugin_azure_mssql import resources
from fix_plugin_azure_mssql.clients import Clients
from fix_plugin_azure_mssql.config import load_config
from fix_plugin_azure_mssql.errors import ProvisionError
from fix_plugin_azure_mssql.resource.base import Resource
from fix_plugin_azure_mssql.resource.mssql_job_credential import resource_type as job_credential_type
from fix_plugin_azure_mssql.resource_data import ResourceData
from fixlib.args import ArgumentParser
from fixlib.logger import add_args as logging_add_args, setup_logger
from fixlib.types import Json

log = logging.getLogger("fix.plugins.azure_mssql")


def parse_args(argv: Optional[List[str]] = None) -> Namespace:
    parser = ArgumentParser(
        prog="fix-azure-mssql",
        description="Manage Azure SQL elastic job credentials from a declarative definition.",
        env_args_prefix="FIX_AZURE_MSSQL_",
    )
    logging_add_args(parser)
    parser.add_argument("--config", help="Path to the yaml config file.", default=None)
    parser.add_argument(
        "--type", help=f"The resource type. Default: {job_credential_type}", default=job_credential_type
    )
    parser.add_argument("--state", help="Path to the json state file of the resource.", required=True)
    commands = parser.add_subparsers(dest="command", required=True)
    apply = commands.add_parser("apply", help="Create, update or replace the resource to match the definition.")
    apply.add_argument("resource", help="Path to the yaml resource definition.")
    commands.add_parser("refresh", help="Read the remote object and update the state.")
    commands.add_parser("destroy", help="Delete the remote object and remove the state.")
    import_cmd = commands.add_parser("import", help="Adopt an existing remote object by its resource id.")
    import_cmd.add_argument("id", help="The resource id of the remote object.")
    return parser.parse_args(argv)


def read_state(path: str) -> Json:
    if not os.path.exists(path):
        return {}
    with open(path) as f:
        return json.load(f)  # type: ignore


def write_state(path: str, resource: Resource, d: Optional[ResourceData]) -> None:
    if d is None or (state := d.state()) is None:
        if os.path.exists(path):
            os.remove(path)
        log.info(f"{resource.type_name}: state removed ({path})")
        return
    with open(path, "w") as f:
        json.dump({"type": resource.type_name, "id": d.id, "attributes": state}, f, indent=2, sort_keys=True)
    log.info(f"{resource.type_name}: state of {d.id} written to {path}")


def run(args: Namespace, clients: Clients) -> None:
    resource = resources.get(args.type)
    if resource is None:
        raise ProvisionError(f"Unknown resource type: {args.type}. Available: {', '.join(resources)}")
    prior = read_state(args.state)
    prior_id = prior.get("id", "")
    prior_attributes = prior.get("attributes")

    if args.command == "apply":
        with open(args.resource) as f:
            config = yaml.safe_load(f) or {}
        write_state(args.state, resource, resource.apply(clients, config, prior_attributes, prior_id))
    elif args.command == "refresh":
        if not prior_id:
            raise ProvisionError(f"No state found in {args.state}")
        write_state(args.state, resource, resource.refresh(clients, prior_attributes, prior_id))
    elif args.command == "destroy":
        if not prior_id:
            raise ProvisionError(f"No state found in {args.state}")
        resource.destroy(clients, prior_attributes, prior_id)
        write_state(args.state, resource, None)
    elif args.command == "import":
        if prior_id:
            raise ProvisionError(f"{args.state} already tracks {prior_id}")
        write_state(args.state, resource, resource.import_state(clients, args.id))


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)
    setup_logger("fix-azure-mssql", verbose=args.verbose, quiet=args.quiet)
    clients = Clients(load_config(args.config))
    try:
        run(args, clients)
    except ProvisionError as e:
        log.error(f"{args.command} failed: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()

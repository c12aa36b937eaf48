"""Main CLI entry point."""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path


def main(argv: list[str] | None = None) -> None:
    """Parse args and dispatch to subcommands."""
    parser = argparse.ArgumentParser(prog="contact-loader", description="Load campaign contacts from Action Network")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # loaders
    subparsers.add_parser("loaders", help="List available contact loaders")

    # lists
    lists_parser = subparsers.add_parser("lists", help="Show the lists available to import")
    lists_parser.add_argument(
        "--loader",
        default="actionnetwork",
        help="Contact loader to use",
    )
    lists_parser.add_argument(
        "--org",
        type=Path,
        default=None,
        help="Organization YAML (id, name, features); default: environment only",
    )

    # load
    load_parser = subparsers.add_parser("load", help="Load a list into a campaign")
    load_parser.add_argument("--loader", default="actionnetwork", help="Contact loader to use")
    load_parser.add_argument("--campaign-id", type=int, required=True, help="Campaign to load into")
    load_parser.add_argument("--list-id", type=str, required=True, help="Upstream list identifier")
    load_parser.add_argument(
        "--count",
        type=int,
        default=0,
        help="Requested contact count recorded on the job",
    )
    load_parser.add_argument(
        "--max-contacts",
        type=int,
        default=None,
        help="Stop after this many list items (default: whole list)",
    )
    load_parser.add_argument(
        "--db",
        type=Path,
        default=Path("contact_loader.db"),
        help="Path to SQLite database",
    )
    load_parser.add_argument("--org", type=Path, default=None, help="Organization YAML")

    # zips
    zips_parser = subparsers.add_parser("zips", help="Manage the zip code timezone table")
    zips_parser.add_argument("action", choices=["import", "lookup"], help="Import CSV or look up one zip")
    zips_parser.add_argument("--csv", type=Path, help="CSV with zip,timezone_offset,has_dst (for import)")
    zips_parser.add_argument("--zip", type=str, help="Zip code (for lookup)")
    zips_parser.add_argument(
        "--db",
        type=Path,
        default=Path("contact_loader.db"),
        help="Path to SQLite database",
    )

    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "loaders":
        _run_loaders(args)
    elif args.command == "lists":
        _run_lists(args)
    elif args.command == "load":
        _run_load(args)
    elif args.command == "zips":
        _run_zips(args)
    else:
        parser.print_help()


def _load_organization(path: Path | None):
    from contact_loader.models.job import Organization

    if path is None:
        return Organization()
    return Organization.from_yaml(path)


def _run_loaders(args: argparse.Namespace) -> None:
    """Run loaders command."""
    from contact_loader.loaders import LoaderRegistry

    for name in LoaderRegistry.available_loaders():
        print(name)


def _run_lists(args: argparse.Namespace) -> None:
    """Run lists command."""
    from contact_loader.loaders import LoaderRegistry

    loader = LoaderRegistry.get(args.loader)
    organization = _load_organization(args.org)
    choice_data = asyncio.run(loader.get_client_choice_data(organization))
    print(json.dumps(choice_data.model_dump(), indent=2))
    if "error" in json.loads(choice_data.data):
        raise SystemExit(1)


def _run_load(args: argparse.Namespace) -> None:
    """Run load command."""
    from contact_loader.errors import ContactLoaderError
    from contact_loader.loaders import LoaderRegistry
    from contact_loader.store import ContactStore, ZipCodeStore

    store = ContactStore(args.db)
    loader = LoaderRegistry.get(
        args.loader,
        sink=store,
        reporter=store,
        timezones=ZipCodeStore(args.db),
    )
    organization = _load_organization(args.org)
    payload = json.dumps({"listIdentifier": args.list_id, "requestContactCount": args.count})
    job = store.create_job(args.campaign_id, payload)

    try:
        final_count = asyncio.run(loader.process_contact_load(job, args.max_contacts, organization))
    except ContactLoaderError as e:
        print(f"Load failed: {e}", file=sys.stderr)
        raise SystemExit(1)
    print(f"Job {job.id}: loaded {final_count} contacts into campaign {args.campaign_id}")


def _run_zips(args: argparse.Namespace) -> None:
    """Run zips command."""
    from contact_loader.store import ZipCodeStore

    store = ZipCodeStore(args.db)
    if args.action == "import":
        if not args.csv:
            raise SystemExit("zips import requires --csv")
        count = store.import_csv(args.csv)
        print(f"Imported {count} zip codes")
    elif args.action == "lookup":
        if not args.zip:
            raise SystemExit("zips lookup requires --zip")
        print(store.timezone_for_postal_code(args.zip) or "unknown")


if __name__ == "__main__":
    main()

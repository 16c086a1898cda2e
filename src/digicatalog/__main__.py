from .service import CatalogService
from .setup import configure_logging_from_config, default_config, load_config, setup_logging
import argparse
import sys
import logging


CONFIGFILE = "config/digicatalog_config.yaml"


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="digicatalog",
        description="Browse the Digi-API catalog from the command line"
    )
    parser.add_argument("--config", default=CONFIGFILE, help="Path to the YAML config file")
    subparsers = parser.add_subparsers(dest="command", required=True)

    list_parser = subparsers.add_parser("list", help="Show one page of the catalog")
    list_parser.add_argument("--page", type=int, default=0, help="Zero based page number")
    list_parser.add_argument("--page-size", type=int, default=None, help="Override page_size from config")
    list_parser.add_argument("--search", default=None, help="Match name, type, attribute, level or field")

    detail_parser = subparsers.add_parser("detail", help="Show one entry by id")
    detail_parser.add_argument("id", type=int)
    return parser.parse_args(argv)


def print_page(page) -> None:
    for entry in page.items:
        print(f"{entry.id:>5}  {entry.name}")
    if not page.items:
        print("No Digimon found")
    elif page.has_more_pages:
        print("(more pages available)")


def print_detail(detail) -> None:
    print(f"#{detail.id} {detail.name}")
    if detail.x_antibody:
        print("  X-Antibody")
    sections = [
        ("Level", [level.level for level in detail.levels or () if level.level]),
        ("Type", [entry.type for entry in detail.types or () if entry.type]),
        ("Attribute", [entry.attribute for entry in detail.attributes or () if entry.attribute]),
        ("Field", [entry.field for entry in detail.fields or () if entry.field]),
        ("Skills", [skill.skill for skill in detail.skills or () if skill.skill]),
        ("Prior evolutions", [evo.digimon for evo in detail.prior_evolutions or () if evo.digimon]),
        ("Next evolutions", [evo.digimon for evo in detail.next_evolutions or () if evo.digimon]),
    ]
    for title, values in sections:
        if values:
            print(f"  {title}: {', '.join(values)}")
    description = detail.description_for('en_us')
    if description:
        print()
        print(description)


def main(argv=None) -> int:
    args = parse_args(argv)

    # Configure a basic logger to be able to log even before the configuration is loaded
    setup_logging(level=logging.WARNING)
    logger = logging.getLogger(__name__)

    try:
        config = load_config(args.config)
    except RuntimeError as e:
        logger.warning('%s, using defaults', e)
        config = default_config()

    configure_logging_from_config(config)

    try:
        service = CatalogService.from_config(config)
    except RuntimeError as e:
        logger.error('%s', e)
        return 2

    with service:
        if args.command == "list":
            result = service.query_page(args.page, args.page_size, args.search)
            if result.ok:
                print_page(result.value)
        else:
            result = service.fetch_detail(args.id)
            if result.ok:
                print_detail(result.value)

    if not result.ok:
        print(result.error.message, file=sys.stderr)
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main())

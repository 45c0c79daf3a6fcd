"""Entry point for slovicka CLI client."""

import argparse
import sys

from cli.api_client import SlovickaAPIClient
from cli.console import ConsoleUI


def parse_groups(value: str) -> list[str]:
    groups = [group.strip() for group in value.split(',') if group.strip()]
    if not groups:
        raise argparse.ArgumentTypeError('expected a comma-separated list of word groups')
    return groups


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='Slovicka - Slovak-English vocabulary practice')
    parser.add_argument(
        '--server',
        default='http://localhost:8000',
        help='Server URL (default: http://localhost:8000)'
    )
    parser.add_argument(
        '--user',
        default='default',
        help='User ID for preferences (default: default)'
    )
    parser.add_argument(
        '--groups',
        type=parse_groups,
        help='Comma-separated word groups to practise, e.g. basic,animals (default: saved preferences)'
    )
    parser.add_argument(
        '--direction',
        choices=['sk-en', 'en-sk', 'both'],
        help='Translation direction (default: saved preferences)'
    )
    parser.add_argument(
        '--stats',
        type=int,
        metavar='DAYS',
        help='Show practice history for the last DAYS days and exit'
    )
    return parser


def main(argv=None):
    args = build_parser().parse_args(argv)

    client = SlovickaAPIClient(base_url=args.server, user_id=args.user)
    ui = ConsoleUI(client)

    if args.stats:
        ui.print_history(args.stats)
        return

    try:
        ui.run(groups=args.groups, direction=args.direction)
    except KeyboardInterrupt:
        print('\nGoodbye!')
        sys.exit(0)


if __name__ == '__main__':
    main()

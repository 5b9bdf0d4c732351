"""
Entry point for the FitAI client.
Provides a command-line interface to open the login/signup form.
"""

import argparse
import sys

from FitAI.config import config
from FitAI.core.logging import auto_configure
from FitAI.start import client


def parse(argv=None):
    parser = argparse.ArgumentParser(prog='FitAI', description='FitAI client starter')
    subparsers = parser.add_subparsers(dest='command', required=True, help='Available commands')

    client_parser = subparsers.add_parser('client', help='Open the login/signup form')
    client_parser.add_argument('--api-url', default=None,
                               help=f'Identity service origin (default: {config.API_BASE_URL})')
    client_parser.add_argument('--signup', action='store_true',
                               help='Start on the signup tab')
    client_parser.add_argument('--session-file', default=None,
                               help=f'Session token file (default: {config.SESSION_FILE})')
    client_parser.add_argument('--env', default=None,
                               choices=['development', 'production', 'testing'],
                               help=f'Logging profile (default: {config.ENV})')

    return parser.parse_args(argv)


def main(argv=None):
    args = parse(argv)
    auto_configure(args.env or config.ENV)

    if args.command == 'client':
        signed_in = client.client(api_url=args.api_url, signup=args.signup,
                                  session_file=args.session_file)
        return 0 if signed_in else 1
    return 2


if __name__ == '__main__':
    sys.exit(main())

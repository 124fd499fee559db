"""CLI entry for cqlpy.

Modes:
  (default) / repl   Start the interactive shell
  -e "<cql>"         Execute one statement and exit
  -f <file.cql>      Execute every ';'-separated statement of a script
  describe <target>  Run a describe shortcut and exit
  config             View or update the configuration file
"""
from __future__ import annotations
import argparse
import getpass
import logging
import sys
from typing import List, Optional

from cqlpy import __version__
from cqlpy.cli.repl import start_repl
from cqlpy.core.describe import DESCRIBE_USAGE, describe_query
from cqlpy.core.errors import ConfigError, CqlClientException
from cqlpy.core.executor import ConnectionConfig, QueryExecutor
from cqlpy.utils.config import coerce_value, config
from cqlpy.utils.constants import SUPPORTED_OUTPUT_FORMATS
from cqlpy.utils.logging_setup import LOG_LEVELS, configure_logging, resolve_level
from cqlpy.utils.validation import ValidationError, validate_port, validate_script_file

logger = logging.getLogger(__name__)


# --- Helpers shared across modes ---

def split_script(content: str) -> List[str]:
    """Statements of a CQL script, split on ';' with blanks dropped."""
    return [part.strip() for part in content.split(';') if part.strip()]


def _read_password(args: argparse.Namespace) -> Optional[str]:
    if args.password_prompt:
        if not args.username:
            logger.warning("Password prompt specified but no username provided")
            return None
        return getpass.getpass("Password: ")
    return args.password


def _connection_config(args: argparse.Namespace) -> ConnectionConfig:
    validate_port(args.port)
    return ConnectionConfig(
        hosts=[h.strip() for h in args.hosts.split(',') if h.strip()],
        port=args.port,
        username=args.username,
        password=_read_password(args),
        keyspace=args.keyspace,
        ssl_enabled=args.ssl,
        ssl_ca_cert=args.ssl_ca_cert,
        ssl_verify=args.ssl_verify,
    )


def _use_color(args: argparse.Namespace) -> bool:
    return bool(config.get('color', True)) and not args.no_color and sys.stdout.isatty()


def _print(output: Optional[str]) -> None:
    if output is not None:
        print(output, end='' if output.endswith('\n') else '\n')


# --- Mode handlers ---

def cmd_execute(executor: QueryExecutor, args: argparse.Namespace) -> int:
    _print(executor.run_statement(args.execute, args.output_format, _use_color(args)))
    return 0


def cmd_file(executor: QueryExecutor, args: argparse.Namespace) -> int:
    with open(args.file, 'r', encoding='utf-8') as f:
        statements = split_script(f.read())
    color = _use_color(args)
    for statement in statements:
        _print(executor.run_statement(statement, args.output_format, color))
    return 0


def cmd_describe(executor: QueryExecutor, args: argparse.Namespace) -> int:
    query = describe_query(args.target)
    if query is None:
        print(DESCRIBE_USAGE)
        return 0
    _print(executor.run_statement(query, args.output_format, _use_color(args)))
    return 0


def cmd_repl(executor: QueryExecutor, args: argparse.Namespace) -> int:
    start_repl(
        executor,
        output_format=args.output_format,
        history_path=config.get('history_file'),
        history_size=config.get('history_size'),
        color=_use_color(args),
        banner=not args.no_banner,
    )
    return 0


def cmd_config(args: argparse.Namespace) -> int:
    """Handle configuration commands."""
    if args.list:
        for key, value in config.settings.items():
            print(f"{key} = {value}")
    elif args.get:
        print(f"{args.get} = {config.get(args.get)}")
    elif args.set:
        if args.value is None:
            raise ConfigError(f"--set {args.set} requires --value")
        value = coerce_value(args.value)
        config.set(args.set, value)
        config.save()
        print(f"Set {args.set} = {value}")
    else:
        print(f"Configuration file: {config.config_file}")
    return 0


# --- Parser construction ---

def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog='cqlpy', description='Interactive CQL shell for Cassandra-compatible clusters')
    p.add_argument('--version', action='version', version=f'%(prog)s {__version__}')
    p.add_argument('-H', '--hosts', default=config.get('hosts'), help='Comma-separated contact points (host[:port])')
    p.add_argument('-p', '--port', type=int, default=config.get('port'), help='Native protocol port')
    p.add_argument('-u', '--username', help='Username for plain-text authentication')
    p.add_argument('-P', '--password-prompt', action='store_true', help='Prompt for the password')
    p.add_argument('--password', help='Password (prefer -P)')
    p.add_argument('-k', '--keyspace', help='Keyspace to use after connecting')
    p.add_argument('-e', '--execute', help='Execute one statement and exit')
    p.add_argument('-f', '--file', help='Execute statements from a CQL file and exit')
    p.add_argument('-o', '--output-format', default=config.get('output_format'),
                   help=f"Output format ({'|'.join(SUPPORTED_OUTPUT_FORMATS)}); unknown values print tables")
    p.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    p.add_argument('--log-level', default='INFO', choices=LOG_LEVELS)
    p.add_argument('--log-file', help='Also write logs to this file')
    p.add_argument('--ssl', action='store_true', help='Connect with TLS')
    p.add_argument('--ssl-ca-cert', help='CA certificate file for TLS verification')
    p.add_argument('--ssl-verify', action='store_true', default=bool(config.get('ssl_verify', False)),
                   help='Verify the server certificate')
    p.add_argument('--no-banner', action='store_true', help='Suppress the shell banner')
    p.add_argument('--no-color', action='store_true', help='Disable ANSI colors')

    sub = p.add_subparsers(dest='command')
    sub.add_parser('repl', help='Start interactive shell (default)')
    desc_p = sub.add_parser('describe', help='Describe cluster, keyspaces or tables')
    desc_p.add_argument('target', nargs='+', help='cluster | keyspaces | keyspace NAME | table NAME | tables KEYSPACE')

    config_p = sub.add_parser('config', help='View or update configuration')
    config_p.add_argument('--list', action='store_true', help='List all configuration values')
    config_p.add_argument('--get', metavar='KEY', help='Get specific configuration value')
    config_p.add_argument('--set', metavar='KEY', help='Set configuration value')
    config_p.add_argument('--value', help='Value to set (used with --set)')
    return p


def run(args: argparse.Namespace) -> int:
    """Dispatch parsed arguments; returns the process exit code."""
    if args.command == 'config':
        return cmd_config(args)
    if args.file:
        validate_script_file(args.file)

    executor = QueryExecutor.connect(_connection_config(args))
    try:
        if args.command == 'describe':
            return cmd_describe(executor, args)
        if args.execute:
            return cmd_execute(executor, args)
        if args.file:
            return cmd_file(executor, args)
        return cmd_repl(executor, args)
    finally:
        executor.close()


# --- Main entry ---

def main(argv: Optional[List[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(resolve_level(args.log_level, args.verbose), log_file=args.log_file)

    try:
        code = run(args)
    except ValidationError as e:
        logger.error("Validation error: %s", e)
        code = 2
    except CqlClientException as e:
        logger.error("%s", e)
        code = 1
    except KeyboardInterrupt:
        logger.warning("Operation interrupted by user")
        code = 130
    except Exception as e:
        logger.error("Unhandled error: %s", e, exc_info=True)
        code = 1
    sys.exit(code)


if __name__ == '__main__':
    main()

import argparse
import json
import os
import sys

from oraforge.logging_config import setup_logging
from oraforge.parsers.utils import pretty_sql
from oraforge.platform import PlatformCapabilities
from oraforge.queries import CatalogQueryBuilder


def read_version() -> str:
    version_path = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'VERSION')
    if os.path.exists(version_path):
        with open(version_path, 'r') as f:
            return f.read().strip()
    return 'Unknown'


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='oraforge - Oracle 12c catalog introspection and DDL')
    parser.add_argument('--version', action='version', version=f'oraforge v{read_version()}')
    parser.add_argument('--verbose', '-v', action='count', default=0, help='Increase log verbosity (-v info, -vv debug)')
    parser.add_argument('--log-format', choices=['text', 'json'], default='text', help='Log output format')
    parser.add_argument('--no-color', action='store_true', help='Disable colored output')

    subparsers = parser.add_subparsers(dest='command', required=True)

    queries = subparsers.add_parser('queries', help='Print the data dictionary queries of a catalog pass')
    queries.add_argument('--owner', help='Schema owner; default is the connected schema')
    queries.add_argument('--oracle-version', default='12.2', help='Oracle release, e.g. 12.1 or 12.2.0.1')
    queries.add_argument('--pretty', action='store_true', help='Reindent the SQL')

    introspect = subparsers.add_parser('introspect', help='Read a live schema')
    introspect.add_argument('--url', required=True, help='SQLAlchemy database URL, e.g. oracle+oracledb://user:pw@host/?service_name=X')
    introspect.add_argument('--owner', help='Schema owner; default is the connected schema')
    introspect.add_argument('--oracle-version', help='Oracle release; default is the version reported by the server')
    introspect.add_argument('--number-1-0-as-boolean', action='store_true',
                            help='Reconstruct NUMBER(1,0) columns as boolean instead of decimal')
    introspect.add_argument('--plan', action='store_true', help='Print a human-readable summary to stdout')
    introspect.add_argument('--json-out', help='Path to save the catalog as JSON')
    introspect.add_argument('--sql-out', help='Path to save DDL recreating the catalog')
    return parser


def print_queries(args):
    capabilities = PlatformCapabilities.for_version(args.oracle_version)
    queries = CatalogQueryBuilder(args.owner, capabilities).build()
    for label, sql in (('tables', queries.tables_sql), ('columns', queries.columns_sql),
                       ('indexes', queries.indexes_sql), ('foreign keys', queries.foreign_keys_sql)):
        if args.pretty:
            sql = pretty_sql(sql)
        print(f"-- {label}\n{sql};\n")


def run_introspection(args):
    from oraforge.connection import SQLAlchemyExecutor
    from oraforge.introspector import OracleIntrospector

    executor = SQLAlchemyExecutor(args.url)
    version = args.oracle_version or executor.server_version()
    capabilities = PlatformCapabilities.for_version(version, args.number_1_0_as_boolean)

    print(f"Introspecting Oracle {capabilities.version} schema...", file=sys.stderr)
    catalog = OracleIntrospector(executor, args.owner, capabilities).introspect()
    _handle_output(args, catalog, capabilities)


def _handle_output(args, catalog, capabilities):
    # 1. Human Readable Plan
    if args.plan:
        if args.no_color:
            GREEN = ''
            YELLOW = ''
            RESET = ''
        else:
            GREEN = '\033[92m'
            YELLOW = '\033[93m'
            RESET = '\033[0m'

        output_content = "Catalog:\n"
        for table in catalog:
            output_content += f"{GREEN}  Table: {table.name}{RESET}\n"
            for col in table.columns:
                flags = " identity" if col.autoincrement else ""
                output_content += f"    Column: {col.name} ({col.data_type.value}){flags}\n"
            for idx in table.indexes:
                kind = "Primary Key" if idx.is_primary else ("Unique Index" if idx.is_unique else "Index")
                cols = ", ".join(idx.where.get(c) or c for c in idx.columns)
                output_content += f"{YELLOW}    {kind}: {idx.name} ({cols}){RESET}\n"
            for fk in table.foreign_keys:
                cols = ", ".join(fk.column_names)
                ref_cols = ", ".join(fk.ref_column_names)
                output_content += f"    Foreign Key: {fk.name} ({cols}) REFERENCES {fk.ref_table}({ref_cols})\n"
        if not len(catalog):
            output_content += "No tables found.\n"
        print(output_content)

    # 2. JSON Output
    if args.json_out:
        with open(args.json_out, 'w') as f:
            json.dump(catalog.to_dict(), f, indent=2)
        print(f"JSON catalog saved to {args.json_out}")

    # 3. SQL Output
    if args.sql_out:
        from oraforge.generators.oracle import OracleGenerator
        statements = OracleGenerator(capabilities).create_catalog_sql(catalog)
        full_sql = f"-- DDL for Oracle {capabilities.version}\n" + "".join(f"{stmt};\n\n" for stmt in statements)
        with open(args.sql_out, 'w') as f:
            f.write(full_sql)
        print(f"DDL saved to {args.sql_out}")

    if not (args.plan or args.json_out or args.sql_out):
        print("No output action specified. Use --plan, --json-out, or --sql-out.")


def main(argv=None):
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    setup_logging(verbose=args.verbose, log_format=args.log_format, no_color=args.no_color)

    try:
        if args.command == 'queries':
            print_queries(args)
        elif args.command == 'introspect':
            run_introspection(args)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()

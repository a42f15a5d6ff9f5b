import argparse
import json
from pathlib import Path

from . import __version__
from .access import Caller, parse_roles
from .audit import list_audit_records
from .config import Settings, load_env
from .database import init_database
from .errors import InvalidRequest, RetrievalFailure, Unauthorized
from .logger import get_logger, reset_logger
from .schema import LOCATION_PARAM, OCCUPATION_PARAM, extract_filter_parameters
from .service import build_service, describe_caller


def _caller(args: argparse.Namespace) -> Caller:
    roles, _ = parse_roles(args.role or [])
    return Caller(nav_ident=args.ident, roles=roles)


def _settings() -> Settings:
    try:
        settings = Settings.from_env()
    except ValueError as e:
        raise SystemExit(str(e))
    reset_logger()
    get_logger(level=settings.log_level, log_dir=settings.log_dir)
    return settings


def _print_json(data) -> None:
    print(json.dumps(data, indent=2, ensure_ascii=False))


def _run(call):
    try:
        return call()
    except Unauthorized as e:
        raise SystemExit(f"Forbidden: {e}")
    except InvalidRequest as e:
        raise SystemExit(f"Invalid request: {e}")
    except RetrievalFailure as e:
        raise SystemExit(f"Index error: {e}")


def cmd_me(args: argparse.Namespace) -> None:
    _print_json(describe_caller(_caller(args)))


def _query(call) -> None:
    service = build_service(_settings())
    try:
        result = _run(lambda: call(service))
    finally:
        service.close()
    _print_json(result.to_response())


def cmd_lookup_cv(args: argparse.Namespace) -> None:
    _query(lambda service: service.lookup_cv(args.kandidatnr, _caller(args)))


def cmd_summary(args: argparse.Namespace) -> None:
    _query(lambda service: service.lookup_summary(args.kandidatnr, _caller(args)))


def cmd_search(args: argparse.Namespace) -> None:
    params = extract_filter_parameters({
        OCCUPATION_PARAM: args.yrke or [],
        LOCATION_PARAM: args.sted or [],
    })
    _query(lambda service: service.search(params, _caller(args)))


def cmd_init_audit_db(args: argparse.Namespace) -> None:
    db_path = Path(args.db)
    init_database(db_path)
    print(f"Audit database ready: {db_path}")


def cmd_audit_log(args: argparse.Namespace) -> None:
    db_path = Path(args.db)
    if not db_path.exists():
        raise SystemExit(f"Audit database not found: {db_path}")
    records = list_audit_records(db_path, actor=args.actor, subject=args.subject)
    if not records:
        print("No audit records.")
        return
    for record in records:
        print(f"{record['created_at']} | {record['actor_id']} | {record['operation']} | {record['subject_id']}")


def _add_identity(p: argparse.ArgumentParser) -> None:
    p.add_argument("--ident", required=True, help="NAV ident of the caller")
    p.add_argument(
        "--role",
        action="append",
        help="Role held by the caller (repeatable): arbeidsgiverrettet, jobbsokerrettet, modia_generell, utvikler",
    )


def main(argv=None):
    load_env()
    parser = argparse.ArgumentParser(prog="kandidatsok", description="Role-gated candidate lookup and search")
    parser.add_argument("--version", action="store_true", help="Show version")

    subparsers = parser.add_subparsers(dest="command")
    me = subparsers.add_parser("me", help="Show the caller's ident and roles")
    _add_identity(me)
    me.set_defaults(func=cmd_me)

    cv = subparsers.add_parser("lookup-cv", help="Look up the full CV for a candidate number")
    cv.add_argument("--kandidatnr", required=True, help="Candidate number, e.g. PAM0xtfrwli5")
    _add_identity(cv)
    cv.set_defaults(func=cmd_lookup_cv)

    summ = subparsers.add_parser("summary", help="Look up the candidate summary for a candidate number")
    summ.add_argument("--kandidatnr", required=True, help="Candidate number")
    _add_identity(summ)
    summ.set_defaults(func=cmd_summary)

    srch = subparsers.add_parser("search", help="Search eligible candidates, newest first")
    srch.add_argument("--yrke", action="append", help="Desired occupation (repeatable)")
    srch.add_argument("--sted", action="append", help="Location code NO, NOdd or NOdd.dddd (repeatable)")
    _add_identity(srch)
    srch.set_defaults(func=cmd_search)

    adb = subparsers.add_parser("init-audit-db", help="Create the audit database")
    adb.add_argument("--db", default="data/audit.db", help="Path to SQLite audit database (default: data/audit.db)")
    adb.set_defaults(func=cmd_init_audit_db)

    alog = subparsers.add_parser("audit-log", help="List stored audit records")
    alog.add_argument("--db", default="data/audit.db", help="Path to SQLite audit database (default: data/audit.db)")
    alog.add_argument("--actor", help="Only records for this NAV ident")
    alog.add_argument("--subject", help="Only records for this personal identifier")
    alog.set_defaults(func=cmd_audit_log)

    args = parser.parse_args(argv)

    if args.version:
        print(__version__)
        return

    if hasattr(args, "func"):
        args.func(args)
        return

    parser.print_help()


if __name__ == "__main__":
    main()

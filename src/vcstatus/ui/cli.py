from __future__ import annotations

import argparse
import asyncio
import logging
import sys
from signal import SIGINT, signal
from typing import TYPE_CHECKING

from dotenv import load_dotenv

from vcstatus.adapters.sqlalchemy import SqlAlchemyCredentialCache
from vcstatus.app import (
    load_verification_record,
    load_verification_status,
    run_verification,
    start_credential_flow,
)
from vcstatus.config import configure_logging, get_repository_config, require_env_var
from vcstatus.domain.model import (
    CONNECTION_SUCCESS_STATES,
    InvalidTimestamp,
    VerificationCategory,
    format_timestamp,
)
from vcstatus.domain.verification import (
    RecordOwner,
    classify_record,
    is_valid_record,
    record_view_url,
    screen_name_for,
    status_from_record,
)

if TYPE_CHECKING:
    from collections.abc import Sequence
    from types import FrameType

    from vcstatus.app import VerificationStatusResult
    from vcstatus.domain.model import CredentialStatus, Timestamp, VerificationRecord
    from vcstatus.domain.ports import ConnectionInvitation

log = logging.getLogger(__name__)


def _parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Inspect and issue verification records")
    parser.add_argument("-v", "--verbose", action="store_true", help="Log HTTP traffic too")
    subparsers = parser.add_subparsers(dest="command", required=True)

    status = subparsers.add_parser("status", help="Show the verification status of an account")
    status.add_argument("did", type=str, help="DID of the account to inspect")

    record = subparsers.add_parser("record", help="Show a single verification record")
    record.add_argument("did", type=str, help="DID of the record owner")
    record.add_argument("rkey", type=str, help="Record key within the verification collection")

    verify = subparsers.add_parser(
        "verify",
        help="Connect to the holder if needed, request a proof and issue a record",
    )
    verify.add_argument(
        "category",
        type=VerificationCategory,
        choices=list(VerificationCategory),
        help="Verification category to request",
    )
    verify.add_argument(
        "--connection-id",
        type=str,
        default=None,
        help="Active verifier connection to the holder; a new invitation is created if omitted",
    )
    verify.add_argument(
        "--cred-def-id",
        type=str,
        required=True,
        help="Credential definition the presented credential must match",
    )
    verify.add_argument("--did", type=str, required=True, help="DID of the record owner")
    verify.add_argument("--handle", type=str, required=True, help="Handle of the record owner")
    verify.add_argument(
        "--display-name",
        type=str,
        default="",
        help="Display name written into the record",
    )

    return parser.parse_args(list(argv))


def _describe_timestamp(value: Timestamp | None) -> str:
    if value is None:
        return "-"
    if isinstance(value, InvalidTimestamp):
        return f"{value.raw} (unparseable)"
    return format_timestamp(value)


def _log_category(category: VerificationCategory, status: CredentialStatus) -> None:
    if not status.verified:
        log.info("%s: not verified", category)
        return
    screen_name = screen_name_for(status)
    log.info(
        "%s: verified at %s, expires %s%s",
        category,
        _describe_timestamp(status.verified_at),
        _describe_timestamp(status.expiration_date),
        f", screen name @{screen_name}" if screen_name else "",
    )


def _report_status(did: str, result: VerificationStatusResult) -> None:
    if result.error is not None:
        raise RuntimeError(f"Could not load verification records for {did}") from result.error
    stats = result.stats
    log.info(
        "Verification status for %s: %s of %s categories verified (%s records)",
        did,
        stats.count,
        len(result.status_map),
        len(result.records),
    )
    for category, status in result.status_map.items():
        _log_category(category, status)


def _report_record(did: str, rkey: str, record: VerificationRecord | None) -> None:
    if record is None:
        raise LookupError(f"No verification record {rkey} for {did}")
    category = classify_record(record)
    valid = is_valid_record(record)
    log.info(
        "Record %s: category=%s, valid=%s, subject=%s, created=%s",
        record.uri or rkey,
        category or "unknown",
        valid,
        record.subject,
        record.created_at,
    )
    if category is not None and valid:
        _log_category(category, status_from_record(record))
    log.info("View: %s", record_view_url(get_repository_config().service_url, did, rkey))


def _show_invitation(invitation: ConnectionInvitation) -> None:
    log.info("Open this invitation in the credential wallet: %s", invitation.invitation_url)


async def _verify(args: argparse.Namespace) -> VerificationRecord:
    cache = SqlAlchemyCredentialCache()
    connection_id: str | None = args.connection_id
    if connection_id is None:
        connection = await start_credential_flow(
            args.category,
            cache=cache,
            on_invitation=_show_invitation,
        )
        if connection.state not in CONNECTION_SUCCESS_STATES:
            raise RuntimeError(f"Connection {connection.connection_id} ended in {connection.state}")
        connection_id = connection.connection_id
    return await run_verification(
        args.category,
        owner=RecordOwner(did=args.did, handle=args.handle, display_name=args.display_name),
        connection_id=connection_id,
        cred_def_id=args.cred_def_id,
        cache=cache,
    )


def main(argv: Sequence[str] | None = None) -> None:
    """Main application entry point."""
    parsed_args: argparse.Namespace
    args_list = list(argv) if argv is not None else list(sys.argv[1:])
    try:
        parsed_args = _parse_args(args_list)
    except ValueError:
        configure_logging()
        log.exception("CLI validation error")
        sys.exit(2)
    configure_logging(level=logging.DEBUG if parsed_args.verbose else logging.INFO)

    try:
        if parsed_args.command == "status":
            result = asyncio.run(load_verification_status(parsed_args.did))
            _report_status(parsed_args.did, result)
        elif parsed_args.command == "record":
            record = asyncio.run(load_verification_record(parsed_args.did, parsed_args.rkey))
            _report_record(parsed_args.did, parsed_args.rkey, record)
        elif parsed_args.command == "verify":
            require_env_var("VCSTATUS_ACCESS_TOKEN")
            issued = asyncio.run(_verify(parsed_args))
            log.info("Issued %s verification record %s", parsed_args.category, issued.uri)
        else:
            raise ValueError(f"Unsupported command: {parsed_args.command}")  # noqa: TRY301

    except Exception:
        log.exception("Fatal error while running %s", parsed_args.command)
        sys.exit(1)


def sigint_handler(_signal_received: int, _frame: FrameType | None) -> None:
    """Handle SIGINT (Ctrl+C) gracefully."""
    log.info("Closed by user (Ctrl+C)")
    sys.exit(0)


def run() -> None:
    """Console script entry point."""
    load_dotenv()
    signal(SIGINT, sigint_handler)
    main()


if __name__ == "__main__":
    run()

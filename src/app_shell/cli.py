import argparse
import logging
import sys
from pathlib import Path

from src.adapters.auth.crypto import JWTAuthAdapter
from src.adapters.clock import SystemClock
from src.adapters.fs.welcome_pointer import FileWelcomePointer
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteAccountRepo
from src.api.deps import Settings
from src.domain.entities import Account
from src.domain.participant import InvalidParticipantAddress, ParticipantId
from src.ports.accounts import AccountStoreError
from src.ports.pointer import PointerStoreError
from src.rules.loader import load_rules
from src.rules.models import Rules

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger("cli")


def get_rules(settings: Settings) -> Rules:
    if not Path(settings.rules_path).exists():
        logger.error("Rules file %s not found.", settings.rules_path)
        sys.exit(1)
    return load_rules(settings.rules_path)


def get_account_repo(settings: Settings) -> SQLiteAccountRepo:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    SQLiteMigrator(settings.db_path, str(settings.migrations_dir)).run_migrations()
    return SQLiteAccountRepo(settings.db_path)


def handle_register_agent(settings: Settings, rules: Rules, args: argparse.Namespace) -> None:
    name = args.name or rules.welcome.agent_name
    try:
        agent_id = ParticipantId.of(f"{name}@{rules.server.domain}")
    except InvalidParticipantAddress as e:
        logger.error("%s", e)
        sys.exit(1)

    repo = get_account_repo(settings)
    existing = repo.get_account(agent_id)
    if existing is not None and not args.force:
        logger.error("Account %s already exists. Use --force to rotate its secret.", agent_id)
        sys.exit(1)

    secret = JWTAuthAdapter().generate_secret()
    repo.put_account(Account.agent(agent_id, secret, SystemClock().now_utc()))
    print(f"Agent account registered: {agent_id}")
    print(f"Consumer secret (shown once): {secret}")


def handle_show_pointer(rules: Rules) -> None:
    pointer = FileWelcomePointer(rules.welcome.pointer_path)
    document_id = pointer.read()
    if document_id is None:
        print(f"No welcome document yet ({pointer.path})")
    else:
        print(document_id)


def handle_set_locale(settings: Settings, rules: Rules, args: argparse.Namespace) -> None:
    address = args.address if "@" in args.address else f"{args.address}@{rules.server.domain}"
    try:
        participant = ParticipantId.of(address)
    except InvalidParticipantAddress as e:
        logger.error("%s", e)
        sys.exit(1)

    repo = get_account_repo(settings)
    account = repo.get_account(participant)
    if account is None:
        logger.error("Account %s not found.", participant)
        sys.exit(1)

    repo.put_account(account.model_copy(update={"locale": args.locale or None}))
    print(f"Locale for {participant} set to {args.locale or '(none)'}")


def main() -> None:
    parser = argparse.ArgumentParser(description="Wave front door CLI")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # register-agent
    agent_parser = subparsers.add_parser(
        "register-agent", help="Create the welcome agent account"
    )
    agent_parser.add_argument("--name", help="Agent name (default: welcome.agent_name)")
    agent_parser.add_argument(
        "--force", action="store_true", help="Replace an existing account and its secret"
    )

    # show-pointer
    subparsers.add_parser("show-pointer", help="Print the welcome document id")

    # set-locale
    locale_parser = subparsers.add_parser("set-locale", help="Store a locale for an account")
    locale_parser.add_argument("address", help="Username or full address")
    locale_parser.add_argument("locale", nargs="?", default="", help="Locale, empty to clear")

    args = parser.parse_args()

    settings = Settings()
    rules = get_rules(settings)

    try:
        if args.command == "register-agent":
            handle_register_agent(settings, rules, args)
        elif args.command == "show-pointer":
            handle_show_pointer(rules)
        elif args.command == "set-locale":
            handle_set_locale(settings, rules, args)
    except (AccountStoreError, PointerStoreError, RuntimeError) as e:
        logger.error("%s", e)
        sys.exit(1)


if __name__ == "__main__":
    main()

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional

from .balances.ledger import BalanceLedger
from .balances.mysql_balance_repository import MySQLBalanceRepository
from .balances.repository import BalanceRepository
from .common.datetime_utils import today_local
from .common.locks import UserLocks
from .database.connection import DBConfig, DatabaseConnection
from .database.transactions import TransactionManager
from .notifications.dispatcher import LoggingNotificationDispatcher, NotificationDispatcher
from .policy.model import Policy
from .policy.mysql_policy_repository import MySQLPolicyRepository
from .policy.repository import PolicyRepository
from .policy.store import PolicyStore
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService
from .vacations.mysql_vacation_repository import MySQLVacationRepository
from .vacations.repository import VacationRepository
from .vacations.service import VacationService


@dataclass(frozen=True)
class Container:
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    balances_repo: BalanceRepository
    policies_repo: PolicyRepository
    vacations_repo: VacationRepository

    locks: UserLocks
    ledger: BalanceLedger
    policy_store: PolicyStore

    auth_service: AuthService
    user_service: UserService
    vacation_service: VacationService


def assemble(
    *,
    users_repo: UserRepository,
    balances_repo: BalanceRepository,
    policies_repo: PolicyRepository,
    vacations_repo: VacationRepository,
    conn: Optional[DatabaseConnection] = None,
    transactions: Optional[TransactionManager] = None,
    dispatcher: Optional[NotificationDispatcher] = None,
    clock: Callable[[], date] = today_local,
) -> Container:
    """Wire services over any set of repositories (MySQL in production, fakes in tests)."""
    locks = UserLocks()
    ledger = BalanceLedger(balances_repo)
    policy_store = PolicyStore(policies_repo)

    auth_service = AuthService(users_repo)
    user_service = UserService(users_repo, ledger, policy_store, locks=locks)
    vacation_service = VacationService(
        vacations_repo,
        users_repo,
        ledger,
        policy_store,
        locks=locks,
        transactions=transactions or conn,
        dispatcher=dispatcher or LoggingNotificationDispatcher(),
        clock=clock,
    )

    return Container(
        conn=conn,
        users_repo=users_repo,
        balances_repo=balances_repo,
        policies_repo=policies_repo,
        vacations_repo=vacations_repo,
        locks=locks,
        ledger=ledger,
        policy_store=policy_store,
        auth_service=auth_service,
        user_service=user_service,
        vacation_service=vacation_service,
    )


def build_container(*, db_config: dict, default_vacation_days: int = Policy().default_vacation_days) -> Container:
    config = DBConfig(
        host=str(db_config["host"]),
        port=int(db_config.get("port", 3306)),
        user=str(db_config["user"]),
        password=str(db_config["password"]),
        database=str(db_config["database"]),
    )
    conn = DatabaseConnection.get_instance(config)

    return assemble(
        users_repo=MySQLUserRepository(conn),
        balances_repo=MySQLBalanceRepository(conn),
        policies_repo=MySQLPolicyRepository(conn, fallback=Policy(default_vacation_days=int(default_vacation_days))),
        vacations_repo=MySQLVacationRepository(conn),
        conn=conn,
    )

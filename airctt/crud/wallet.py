"""Wallet ledger CRUD operations"""
import logging
import uuid

from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select, update

from airctt.api.errors import InsufficientPoints, InvalidInput, PersistenceError
from airctt.core.config import settings
from airctt.models import Wallet, WalletTransaction, utc_now

logger = logging.getLogger(__name__)


def get_wallet(*, session: Session, consumer_id: uuid.UUID) -> Wallet | None:
    return session.exec(select(Wallet).where(Wallet.consumer_id == consumer_id)).first()


def get_or_create_wallet(*, session: Session, consumer_id: uuid.UUID) -> Wallet:
    """Get the consumer's wallet, creating an empty one if missing"""
    wallet = get_wallet(session=session, consumer_id=consumer_id)
    if wallet:
        return wallet

    wallet = Wallet(consumer_id=consumer_id, total_points=0)
    session.add(wallet)
    try:
        session.commit()
    except IntegrityError:
        # Lost the race on the unique consumer_id; use the winner's row.
        session.rollback()
        wallet = get_wallet(session=session, consumer_id=consumer_id)
        if not wallet:
            raise PersistenceError("Failed to create wallet")
        return wallet
    session.refresh(wallet)
    logger.info("wallet created: consumer=%s wallet=%s", consumer_id, wallet.id)
    return wallet


def change_points(
    *,
    session: Session,
    consumer_id: uuid.UUID | None,
    delta: int | None,
    tx_type: str | None,
    related_game_session_id: uuid.UUID | None = None,
    commit: bool = True,
) -> tuple[WalletTransaction, int]:
    """Apply a signed point change and append the ledger entry; returns (entry, new balance)"""
    if not consumer_id or not tx_type or delta is None:
        raise InvalidInput("Missing parameters")

    wallet = get_or_create_wallet(session=session, consumer_id=consumer_id)

    stmt = (
        update(Wallet)
        .where(Wallet.id == wallet.id)
        .values(total_points=Wallet.total_points + delta, updated_at=utc_now())
    )
    if delta < 0 and not settings.WALLET_ALLOW_NEGATIVE_BALANCE:
        stmt = stmt.where(Wallet.total_points + delta >= 0)
    result = session.exec(stmt)
    if result.rowcount != 1:
        session.rollback()
        raise InsufficientPoints()

    tx = WalletTransaction(
        wallet_id=wallet.id,
        tx_type=tx_type,
        amount_points=delta,
        related_game_session_id=related_game_session_id,
    )
    session.add(tx)
    if commit:
        session.commit()
        session.refresh(tx)
    else:
        session.flush()
    session.refresh(wallet)
    logger.info(
        "wallet changed: consumer=%s delta=%s type=%s balance=%s",
        consumer_id, delta, tx_type, wallet.total_points,
    )
    return tx, wallet.total_points


def get_balance(*, session: Session, consumer_id: uuid.UUID) -> int:
    """Current balance; 0 when the consumer has no wallet yet"""
    wallet = get_wallet(session=session, consumer_id=consumer_id)
    return wallet.total_points if wallet else 0


def get_history(*, session: Session, consumer_id: uuid.UUID) -> list[WalletTransaction]:
    """Ledger entries of the consumer's wallet, newest first"""
    wallet = get_wallet(session=session, consumer_id=consumer_id)
    if not wallet:
        return []
    stmt = (
        select(WalletTransaction)
        .where(WalletTransaction.wallet_id == wallet.id)
        .order_by(WalletTransaction.created_at.desc())
    )
    return list(session.exec(stmt).all())


def entry_kind(tx: WalletTransaction) -> str:
    return "earned" if tx.amount_points >= 0 else "used"

"""
Asset Repository - data access layer for Asset model.
Optimized with optional session parameter for transaction reuse.
"""

import threading
from datetime import datetime
from decimal import Decimal
from typing import Dict, Iterable, List, Optional, Tuple

from sqlalchemy import func, update
from sqlmodel import Session, select

from db_engine import get_engine
from models import Asset, AssetClass

# Fixed pool of locks striped by asset id; guards request-path read-modify-write cycles.
LOCK_STRIPES = 64
_record_locks: List[threading.Lock] = [threading.Lock() for _ in range(LOCK_STRIPES)]


class AssetRepository:
    """Repository for Asset CRUD operations."""

    @staticmethod
    def lock(asset_id: int) -> threading.Lock:
        """
        Get the lock serializing writers of a single asset.
        Ids sharing a stripe share a lock; callers hold at most one at a time.

        Usage:
            with AssetRepository.lock(asset_id):
                ... read, modify and save the asset ...
        """
        return _record_locks[hash(asset_id) % LOCK_STRIPES]

    @staticmethod
    def get_all(session: Optional[Session] = None) -> List[Asset]:
        """
        Retrieve all assets from the database.

        Args:
            session: Optional existing session for transaction reuse

        Returns:
            List of all Asset objects ordered by id
        """
        def _get_all(sess: Session) -> List[Asset]:
            statement = select(Asset).order_by(Asset.id)
            return list(sess.exec(statement).all())

        if session is not None:
            return _get_all(session)
        else:
            with Session(get_engine()) as session:
                return _get_all(session)

    @staticmethod
    def get_by_id(asset_id: int, session: Optional[Session] = None) -> Optional[Asset]:
        """
        Retrieve an asset by its ID.

        Args:
            asset_id: Asset ID to look up
            session: Optional existing session for transaction reuse

        Returns:
            Asset object or None if not found
        """
        def _get_by_id(sess: Session) -> Optional[Asset]:
            return sess.get(Asset, asset_id)

        if session is not None:
            return _get_by_id(session)
        else:
            with Session(get_engine()) as session:
                return _get_by_id(session)

    @staticmethod
    def get_by_class(asset_class: AssetClass, session: Optional[Session] = None) -> List[Asset]:
        """
        Retrieve all assets of one asset class.

        Args:
            asset_class: Class to filter on
            session: Optional existing session for transaction reuse

        Returns:
            List of matching Asset objects
        """
        def _get_by_class(sess: Session) -> List[Asset]:
            statement = select(Asset).where(Asset.asset_class == asset_class).order_by(Asset.id)
            return list(sess.exec(statement).all())

        if session is not None:
            return _get_by_class(session)
        else:
            with Session(get_engine()) as session:
                return _get_by_class(session)

    @staticmethod
    def search_by_symbol(term: str, session: Optional[Session] = None) -> List[Asset]:
        """Find assets whose symbol contains `term` (case-insensitive)."""
        def _search(sess: Session) -> List[Asset]:
            statement = select(Asset).where(Asset.symbol.ilike(f"%{term.strip()}%")).order_by(Asset.id)
            return list(sess.exec(statement).all())

        if session is not None:
            return _search(session)
        else:
            with Session(get_engine()) as session:
                return _search(session)

    @staticmethod
    def search_by_name(term: str, session: Optional[Session] = None) -> List[Asset]:
        """Find assets whose display name contains `term` (case-insensitive)."""
        def _search(sess: Session) -> List[Asset]:
            statement = select(Asset).where(Asset.name.ilike(f"%{term.strip()}%")).order_by(Asset.id)
            return list(sess.exec(statement).all())

        if session is not None:
            return _search(session)
        else:
            with Session(get_engine()) as session:
                return _search(session)

    @staticmethod
    def save(asset: Asset, session: Optional[Session] = None) -> Asset:
        """
        Insert a new asset or update an existing one.

        Args:
            asset: Asset to persist; `updated_at` is stamped here
            session: Optional existing session for transaction reuse

        Returns:
            The persisted Asset with its id assigned
        """
        def _save(sess: Session) -> Asset:
            asset.updated_at = datetime.now()
            sess.add(asset)
            sess.commit()
            sess.refresh(asset)
            return asset

        if session is not None:
            return _save(session)
        else:
            with Session(get_engine(), expire_on_commit=False) as session:
                return _save(session)

    @staticmethod
    def save_all(assets: Iterable[Asset], session: Optional[Session] = None) -> List[Asset]:
        """
        Insert or update several assets in a single transaction.

        Args:
            assets: Assets to persist
            session: Optional existing session for transaction reuse

        Returns:
            The persisted assets
        """
        def _save_all(sess: Session) -> List[Asset]:
            items = list(assets)
            now = datetime.now()
            try:
                for asset in items:
                    asset.updated_at = now
                    sess.add(asset)
                sess.commit()
            except Exception:
                sess.rollback()
                raise
            for asset in items:
                sess.refresh(asset)
            return items

        if session is not None:
            return _save_all(session)
        else:
            with Session(get_engine(), expire_on_commit=False) as session:
                return _save_all(session)

    @staticmethod
    def update_current_prices(prices: Dict[int, Decimal],
                              expected: Optional[Dict[int, Tuple[str, AssetClass]]] = None,
                              session: Optional[Session] = None) -> List[int]:
        """
        Write new current prices for many assets in one transaction.
        Only `current_price` and `updated_at` are touched, so concurrent
        edits to other fields of the same rows are preserved.

        Each row is written with a conditional UPDATE: when `expected` holds
        the (symbol, asset_class) a price was computed for, a row whose
        symbol or class has changed since is left alone.

        Args:
            prices: Mapping of asset id to new current price
            expected: Optional mapping of asset id to the identity it was priced as
            session: Optional existing session for transaction reuse

        Returns:
            Ids of the assets updated (deleted or re-labelled rows are skipped)
        """
        def _update(sess: Session) -> List[int]:
            written: List[int] = []
            now = datetime.now()
            try:
                for asset_id, price in prices.items():
                    statement = (
                        update(Asset)
                        .where(Asset.id == asset_id)
                        .values(current_price=price, updated_at=now)
                    )
                    if expected is not None and asset_id in expected:
                        symbol, asset_class = expected[asset_id]
                        statement = statement.where(
                            Asset.symbol == symbol,
                            Asset.asset_class == asset_class,
                        )
                    result = sess.connection().execute(statement)
                    if result.rowcount:
                        written.append(asset_id)
                sess.commit()
            except Exception:
                sess.rollback()
                raise
            return written

        if session is not None:
            return _update(session)
        else:
            with Session(get_engine()) as session:
                return _update(session)

    @staticmethod
    def exists(asset_id: int, session: Optional[Session] = None) -> bool:
        """Check whether an asset with this id is stored."""
        return AssetRepository.get_by_id(asset_id, session=session) is not None

    @staticmethod
    def count(session: Optional[Session] = None) -> int:
        """Count stored assets."""
        def _count(sess: Session) -> int:
            return sess.exec(select(func.count()).select_from(Asset)).one()

        if session is not None:
            return _count(session)
        else:
            with Session(get_engine()) as session:
                return _count(session)

    @staticmethod
    def delete(asset_id: int, session: Optional[Session] = None) -> bool:
        """
        Delete an asset.

        Args:
            asset_id: Asset ID to delete
            session: Optional existing session for transaction reuse

        Returns:
            True if the asset existed and was deleted, False otherwise
        """
        def _delete(sess: Session) -> bool:
            try:
                asset = sess.get(Asset, asset_id)
                if asset:
                    sess.delete(asset)
                    sess.commit()
                    return True
                return False
            except Exception as e:
                sess.rollback()
                raise e

        if session is not None:
            return _delete(session)
        else:
            with Session(get_engine()) as session:
                return _delete(session)

import uuid
from typing import List, Optional

from flask import current_app

from casino import db
from casino.errors import ApiError, NotFound
from casino.models import PaymentMethod, Player, Purchase, StorePack
from . import notifications
from .wallet import apply_transaction


class StoreService:
    """CRUD over coin packs and payment methods, plus pack purchases."""

    # ===== PACKAGES =====

    def list_packages(self) -> List[StorePack]:
        return StorePack.query.order_by(StorePack.display_order, StorePack.id).all()

    def list_active_packages(self) -> List[StorePack]:
        return (
            StorePack.query.filter(StorePack.enabled.is_(True), StorePack.gold_coins > 0)
            .order_by(StorePack.display_order, StorePack.id)
            .all()
        )

    def get_package(self, pack_id: int) -> Optional[StorePack]:
        return db.session.get(StorePack, pack_id)

    def create_package(self, data: dict) -> StorePack:
        pack = StorePack(**data)
        db.session.add(pack)
        db.session.commit()
        current_app.logger.info(f"[store] created pack id={pack.id} title={pack.title!r}")
        return pack

    def update_package(self, pack_id: int, data: dict) -> Optional[StorePack]:
        pack = self.get_package(pack_id)
        if pack is None:
            return None
        for field, value in data.items():
            if field != 'id':
                setattr(pack, field, value)
        db.session.add(pack)
        db.session.commit()
        return pack

    def delete_package(self, pack_id: int) -> bool:
        pack = self.get_package(pack_id)
        if pack is None:
            return False
        Purchase.query.filter_by(pack_id=pack_id).update({'pack_id': None})
        db.session.delete(pack)
        db.session.commit()
        current_app.logger.info(f"[store] deleted pack id={pack_id}")
        return True

    # ===== PAYMENT METHODS =====

    def list_payment_methods(self) -> List[PaymentMethod]:
        return PaymentMethod.query.order_by(PaymentMethod.id).all()

    def list_active_payment_methods(self) -> List[PaymentMethod]:
        return PaymentMethod.query.filter_by(is_active=True).order_by(PaymentMethod.id).all()

    def get_payment_method(self, method_id: int) -> Optional[PaymentMethod]:
        return db.session.get(PaymentMethod, method_id)

    def create_payment_method(self, data: dict) -> PaymentMethod:
        method = PaymentMethod(**data)
        db.session.add(method)
        db.session.commit()
        return method

    def update_payment_method(self, method_id: int, data: dict) -> Optional[PaymentMethod]:
        method = self.get_payment_method(method_id)
        if method is None:
            return None
        for field, value in data.items():
            if field != 'id':
                setattr(method, field, value)
        db.session.add(method)
        db.session.commit()
        return method

    def delete_payment_method(self, method_id: int) -> bool:
        method = self.get_payment_method(method_id)
        if method is None:
            return False
        Purchase.query.filter_by(payment_method_id=method_id).update({'payment_method_id': None})
        db.session.delete(method)
        db.session.commit()
        return True

    # ===== PURCHASES =====

    def purchase_package(self, player: Player, pack_id: int, payment_method_id: int = None) -> Purchase:
        pack = self.get_package(pack_id)
        if pack is None or not pack.enabled:
            raise NotFound('Pack not found')
        if payment_method_id is not None:
            method = self.get_payment_method(payment_method_id)
            if method is None or not method.is_active:
                raise ApiError('Payment method is not available')

        # Payment capture is simulated; a provider charge would happen here
        sweeps = (pack.sweeps_coins or 0) + (pack.bonus_sc or 0)
        purchase = Purchase(
            player_id=player.id,
            pack_id=pack.id,
            pack_title=pack.title,
            payment_method_id=payment_method_id,
            amount_usd=pack.price_usd,
            gold_coins=pack.gold_coins,
            sweeps_coins=sweeps,
            payment_id=f"demo-{uuid.uuid4().hex}",
            status='completed',
        )
        db.session.add(purchase)
        apply_transaction(
            player, 'purchase',
            gc_amount=pack.gold_coins,
            sc_amount=sweeps,
            description=f"Purchased {pack.title}",
        )
        current_app.logger.info(f"[store] player={player.id} purchased pack={pack.id} usd={pack.price_usd}")
        notifications.notify_purchase(player, float(pack.price_usd), 'USD', pack.title)
        return purchase

    def purchase_history(self, player: Player, limit: int = 20) -> List[Purchase]:
        limit = max(1, min(int(limit or 20), 200))
        return (
            Purchase.query.filter_by(player_id=player.id)
            .order_by(Purchase.created_at.desc(), Purchase.id.desc())
            .limit(limit)
            .all()
        )


store_service = StoreService()

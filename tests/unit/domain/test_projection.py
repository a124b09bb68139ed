"""Unit tests for the balance projection rules"""

from src.domain.actor import ActorRef, ActorRole, CASH_POOL_ACTOR_ID, TREASURY_ACTOR_ID
from src.domain.ledger_entry import EntryType, LedgerEntry
from src.domain.projection import entry_effects, project


def make_entry(entry_type, amount, source, target):
    return LedgerEntry(
        entry_type=entry_type,
        amount=amount,
        source_actor_id=source.actor_id,
        source_role=source.role,
        target_actor_id=target.actor_id,
        target_role=target.role,
    )


TREASURY = ActorRef(actor_id=TREASURY_ACTOR_ID, role=ActorRole.SYSTEM)
CASH_POOL = ActorRef(actor_id=CASH_POOL_ACTOR_ID, role=ActorRole.SYSTEM)
ORGANIZER = ActorRef(actor_id="org_admin", role=ActorRole.ORGANIZER)
MANAGER = ActorRef(actor_id="manager_1", role=ActorRole.SELLER_MANAGER)
SELLER = ActorRef(actor_id="seller_1", role=ActorRole.SELLER)
CUSTOMER = ActorRef(actor_id="customer_1", role=ActorRole.CUSTOMER)
MERCHANT = ActorRef(actor_id="stall_1", role=ActorRole.MERCHANT)
CARD = ActorRef(actor_id="card_1", role=ActorRole.POINT_CARD)
CASHIER = ActorRef(actor_id="cashier_1", role=ActorRole.CASHIER)


class TestEntryEffects:

    def test_issuance_only_touches_the_organizer(self):
        deltas = entry_effects(make_entry(EntryType.ISSUANCE, 500, TREASURY, ORGANIZER))

        assert len(deltas) == 1
        assert deltas[0].ref == ORGANIZER
        assert deltas[0].changes == {"available_points": 500, "total_received": 500}

    def test_sale_moves_inventory_and_cash(self):
        deltas = {d.ref: d.changes for d in entry_effects(make_entry(EntryType.SALE, 40, SELLER, CUSTOMER))}

        assert deltas[SELLER] == {
            "available_points": -40,
            "total_sold": 40,
            "total_revenue": 40,
            "pending_collection": 40,
        }
        assert deltas[CUSTOMER] == {"available_points": 40, "total_received": 40}

    def test_cash_submission_changes_no_balance(self):
        assert entry_effects(make_entry(EntryType.CASH_SUBMISSION, 40, SELLER, CASH_POOL)) == []

    def test_cash_claim_moves_pending_cash_to_cashier(self):
        deltas = {d.ref: d.changes for d in entry_effects(make_entry(EntryType.CASH_CLAIM, 40, SELLER, CASHIER))}

        assert deltas[SELLER] == {"pending_collection": -40}
        assert deltas[CASHIER] == {"total_cash_collected": 40}

    def test_refund_to_card_restores_card_balance(self):
        deltas = {d.ref: d.changes for d in entry_effects(make_entry(EntryType.REFUND, 15, MERCHANT, CARD))}

        assert deltas[MERCHANT] == {"available_points": -15, "total_revenue": -15}
        assert deltas[CARD] == {"current_balance": 15, "total_refunded": 15}

    def test_decrements_only_report_guarded_fields(self):
        refund = entry_effects(make_entry(EntryType.REFUND, 15, MERCHANT, CUSTOMER))
        merchant_delta = next(d for d in refund if d.ref == MERCHANT)
        customer_delta = next(d for d in refund if d.ref == CUSTOMER)

        assert merchant_delta.decrements() == {"available_points": 15}
        # total_spent goes down on refund but is not guarded
        assert customer_delta.decrements() == {}

    def test_card_delta_is_flagged(self):
        deltas = entry_effects(make_entry(EntryType.CARD_SPEND, 10, CARD, MERCHANT))

        assert [d.is_card for d in deltas] == [True, False]


class TestProject:

    def test_fold_matches_running_totals(self):
        entries = [
            make_entry(EntryType.ISSUANCE, 1000, TREASURY, ORGANIZER),
            make_entry(EntryType.ALLOCATION, 300, ORGANIZER, MANAGER),
            make_entry(EntryType.ALLOCATION, 100, MANAGER, SELLER),
            make_entry(EntryType.SALE, 40, SELLER, CUSTOMER),
            make_entry(EntryType.RECALL, 20, SELLER, MANAGER),
            make_entry(EntryType.CASH_CLAIM, 30, SELLER, CASHIER),
        ]

        seller = project(entries, SELLER)
        manager = project(entries, MANAGER)
        organizer = project(entries, ORGANIZER)

        assert seller.available_points == 100 - 40 - 20
        assert seller.pending_collection == 10
        assert seller.total_sold == 40
        assert seller.entry_count == 4
        assert manager.available_points == 300 - 100 + 20
        assert organizer.available_points == 700

    def test_fold_ignores_other_roles_of_the_same_actor(self):
        seller_as_customer = ActorRef(actor_id=SELLER.actor_id, role=ActorRole.CUSTOMER)
        entries = [
            make_entry(EntryType.ALLOCATION, 100, MANAGER, SELLER),
            make_entry(EntryType.SALE, 10, ActorRef(actor_id="seller_2", role=ActorRole.SELLER), seller_as_customer),
        ]

        assert project(entries, SELLER).available_points == 100
        assert project(entries, seller_as_customer).available_points == 10

    def test_empty_history_projects_zero(self):
        projection = project([], CUSTOMER)

        assert projection.available_points == 0
        assert projection.entry_count == 0
